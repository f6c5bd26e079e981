"""I/O utilities for reading simulator output.

fastsimcoal2 writes plain text .arp files, but archived replicates are often
gzipped. Compression is detected from the magic bytes so both read the same.

Example:
    lines = read_clean_lines(Path("run/run_1_1.arp.gz"))
"""

import gzip
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

GZIP_MAGIC = b"\x1f\x8b"


def is_gzipped(filepath: Path) -> bool:
    """Detect if a file is gzip-compressed from its first two bytes."""
    with open(filepath, "rb") as f:
        return f.read(2) == GZIP_MAGIC


@contextmanager
def smart_open(filepath: Path) -> Iterator[IO[str]]:
    """Open a text file for reading, decompressing it if gzipped.

    Args:
        filepath: Path to file (may be gzipped)

    Yields:
        Text file handle
    """
    if is_gzipped(filepath):
        f = gzip.open(filepath, "rt", encoding="utf-8")
    else:
        f = open(filepath, "rt", encoding="utf-8")

    try:
        yield f
    finally:
        f.close()


def read_clean_lines(filepath: Path) -> list[str]:
    """Read all lines of a file, trimmed, with blank lines dropped.

    Universal newline handling in text mode takes care of CRLF files
    written on Windows.

    Args:
        filepath: Path to file (may be gzipped)

    Returns:
        Non-empty lines with surrounding whitespace removed

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    with smart_open(filepath) as f:
        lines = (line.strip() for line in f)
        return [line for line in lines if line]
