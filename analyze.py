#!/usr/bin/env python3
"""
LineProbe

A cross-platform Python script to report line ending statistics for a text file.
"""

import argparse
import enum
import logging
import os
import sys
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional

from tqdm import tqdm

# Define version
__version__ = "1.0.0"
__author__ = "tboy1337"

# Read size used when streaming through the progress bar
READ_CHUNK_SIZE = 64 * 1024

# Number of leading bytes examined by the binary heuristic
BINARY_SAMPLE_SIZE = 8192

# Set up logging; stdout is reserved for the report
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger("LineProbe")


class AnalysisError(Exception):
    """Base class for errors raised while analyzing a file."""


class FileReadError(AnalysisError):
    """The target file could not be opened or read."""

    def __init__(self, file_path: str, cause: OSError) -> None:
        super().__init__(f"{file_path}: {cause.strerror or cause}")
        self.file_path = file_path
        self.cause = cause


class LineEndingType(enum.Enum):
    UNIX = "Unix"
    DOS = "Dos"
    MIXED = "Mixed"
    NONE = "None"

    @property
    def label(self) -> str:
        """Human readable label used in the report."""
        return _LINE_ENDING_LABELS[self]

    @classmethod
    def from_counts(cls, crlf_count: int, lf_count: int) -> "LineEndingType":
        """Classify a file from its CRLF and LF-only terminator counts."""
        if crlf_count and lf_count:
            return cls.MIXED
        if crlf_count:
            return cls.DOS
        if lf_count:
            return cls.UNIX
        return cls.NONE


_LINE_ENDING_LABELS = {
    LineEndingType.UNIX: "Unix/Linux (LF)",
    LineEndingType.DOS: "Windows/DOS (CRLF)",
    LineEndingType.MIXED: "Mixed",
    LineEndingType.NONE: "None",
}


class LineCounts(NamedTuple):
    total_lines: int
    empty_lines: int
    crlf_count: int
    lf_count: int


@dataclass(frozen=True)
class FileStats:
    """Line ending statistics for a single file."""

    file_name: str
    file_extension: Optional[str]
    total_lines: int
    empty_lines: int
    crlf_count: int
    lf_count: int

    @property
    def line_ending_type(self) -> LineEndingType:
        return LineEndingType.from_counts(self.crlf_count, self.lf_count)


def count_line_endings(content: bytes) -> LineCounts:
    """
    Count lines, empty lines and line terminators in raw file content.

    A CRLF pair is one DOS terminator and a LF not preceded by CR is one Unix
    terminator. A lone CR is ordinary content. Trailing bytes after the last
    terminator form a final line.
    """
    # Every segment but the last one was ended by a LF
    segments: List[bytes] = content.split(b"\n")
    trailing: bytes = segments.pop()

    crlf_count: int = 0
    empty_lines: int = 0
    for segment in segments:
        if segment.endswith(b"\r"):
            crlf_count += 1
            segment = segment[:-1]
        if not segment:
            empty_lines += 1

    terminators: int = len(segments)
    total_lines: int = terminators + (1 if trailing else 0)

    return LineCounts(
        total_lines=total_lines,
        empty_lines=empty_lines,
        crlf_count=crlf_count,
        lf_count=terminators - crlf_count,
    )


def looks_binary(content: bytes) -> bool:
    """
    Guess whether content is binary rather than text.
    Uses multiple heuristics on the leading bytes.
    """
    chunk: bytes = content[:BINARY_SAMPLE_SIZE]

    # Empty files are not binary
    if not chunk:
        return False

    # Check for NULL bytes (common in binary files)
    if b"\x00" in chunk:
        return True

    # Check for common binary file signatures/magic numbers
    if chunk.startswith(
        (b"\x89PNG", b"GIF8", b"BM", b"\xff\xd8\xff", b"%PDF", b"PK\x03\x04")
    ):
        return True

    # Check for non-text bytes
    text_characters: bytearray = bytearray(
        {7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x100)) - {0x7F}
    )
    non_text: bytes = chunk.translate(None, bytes(text_characters))
    return float(len(non_text)) / len(chunk) > 0.2


def get_file_name(file_path: str) -> str:
    """Return the final component of a path."""
    return os.path.basename(file_path)


def get_file_extension(file_name: str) -> Optional[str]:
    """
    Return the extension of a file name without the dot.

    A single leading dot belongs to the name, so ".gitignore" has no
    extension while "..hidden" has "hidden". A name ending in a dot has none.
    """
    name: str = file_name[1:] if file_name.startswith(".") else file_name
    _, dot, ext = name.rpartition(".")
    return ext if dot and ext else None


def read_file_bytes(file_path: str, show_progress: bool = False) -> bytes:
    """Read the whole file into memory, optionally with a progress bar."""
    with open(file_path, "rb") as f:
        if not show_progress:
            return f.read()

        total: int = os.fstat(f.fileno()).st_size
        chunks: List[bytes] = []
        with tqdm.wrapattr(
            f,
            "read",
            total=total,
            desc=f"Reading {get_file_name(file_path)}",
            file=sys.stderr,
        ) as stream:
            while True:
                chunk: bytes = stream.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


def analyze_file(
    file_path: str, reader: Callable[[str], bytes] = read_file_bytes
) -> FileStats:
    """Analyze the line endings of a file."""
    try:
        content: bytes = reader(file_path)
    except OSError as e:
        raise FileReadError(file_path, e) from e

    file_name: str = get_file_name(file_path)
    counts: LineCounts = count_line_endings(content)
    stats = FileStats(
        file_name=file_name,
        file_extension=get_file_extension(file_name),
        total_lines=counts.total_lines,
        empty_lines=counts.empty_lines,
        crlf_count=counts.crlf_count,
        lf_count=counts.lf_count,
    )

    logger.debug(
        "Analyzed %s: %d bytes, %d lines, %d CRLF, %d LF",
        file_path,
        len(content),
        stats.total_lines,
        stats.crlf_count,
        stats.lf_count,
    )
    return stats


def format_report(stats: FileStats) -> str:
    """Render the statistics as the plain text report."""
    lines: List[str] = [
        "File Analysis Report",
        "====================",
        f"File name: {stats.file_name}",
        f"File extension: {stats.file_extension or 'none'}",
        f"Total lines: {stats.total_lines}",
        f"Empty lines: {stats.empty_lines}",
        f"Line ending type: {stats.line_ending_type.label}",
        f"DOS line endings (CRLF): {stats.crlf_count}",
        f"Unix line endings (LF): {stats.lf_count}",
    ]
    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    try:
        version: str = getattr(sys.modules[__name__], "__version__", "1.0.0")
        logger.debug("LineProbe v%s - Line Ending Analyzer", version)

        parser = argparse.ArgumentParser(
            prog="lineprobe",
            description="Report line ending statistics for a text file",
        )
        parser.add_argument(
            "file_path",
            nargs="?",
            default=None,
            help="File to analyze",
        )
        parser.add_argument(
            "--progress",
            action="store_true",
            help="Show a progress bar while reading the file",
        )
        parser.add_argument(
            "--verbose", action="store_true", help="Enable verbose logging"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"LineProbe v{version}",
            help="Show program version and exit",
        )

        args = parser.parse_args(argv)

        # Set logging level based on verbosity
        if args.verbose:
            logger.setLevel(logging.DEBUG)

        if not args.file_path:
            logger.error("Usage: %s <file_path>", parser.prog)
            return 1

        def read_and_check(path: str) -> bytes:
            content: bytes = read_file_bytes(path, show_progress=args.progress)
            if looks_binary(content):
                logger.warning(
                    "%s looks like a binary file, line counts may be meaningless",
                    path,
                )
            return content

        try:
            stats: FileStats = analyze_file(args.file_path, reader=read_and_check)
        except AnalysisError as e:
            logger.error("Error analyzing file: %s", e)
            return 1

        sys.stdout.write(format_report(stats))
        return 0
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user.")
        return 130
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("An unexpected error occurred: %s", str(e))
        if logger.isEnabledFor(logging.DEBUG):
            import traceback  # pylint: disable=import-outside-toplevel

            logger.debug("Traceback: %s", traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
