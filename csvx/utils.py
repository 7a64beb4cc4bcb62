# File: csvx/utils.py
"""
csvx - Utility Functions & Helpers
===================================
Text and file I/O shared by the schema loader, the file validator and
the CLI: decoding files, splitting CSV text into records, atomic writes
and a small profiling timer.

No external dependencies beyond the Python standard library.
"""

from __future__ import annotations

import csv
import io
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Iterator, List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.utils")


# ---------------------------------------------------------------------------
# CSV records
# ---------------------------------------------------------------------------


def iter_records(text: str) -> Iterator[List[str]]:
    """
    Yield the records of RFC 4180 comma-separated *text*.

    Blank lines are skipped.  Quoting problems such as an unterminated
    quoted field raise ``csv.Error``; callers convert it into their own
    located error.

    Field size is bounded only by the length of *text*: the reader's
    process-wide field limit is raised to fit before reading.
    """
    if len(text) >= csv.field_size_limit():
        csv.field_size_limit(len(text) + 1)
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    for row in reader:
        if not row:
            continue
        yield row


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def read_text(path: Path, encoding: str = "utf-8") -> str:
    """
    Read *path* as text.

    Raises ``OSError`` if the file cannot be opened and
    ``UnicodeDecodeError`` if it is not valid *encoding* (``LookupError``
    for an unknown encoding name).
    """
    data: bytes = path.read_bytes()
    text: str = data.decode(encoding)
    if text.startswith("\ufeff"):
        text = text[1:]
    logger.debug("Read %d bytes from %s", len(data), path)
    return text


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)


def write_file(path: Path, content: str) -> int:
    """
    Write *content* to *path* as UTF-8, creating parent directories.

    The text goes to a temporary file beside *path* which is then renamed
    over it, so readers never see a partial file.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")

    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
        shutil.move(tmp_path, str(path))
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling check steps.

    Usage:
        with Timer("load schema") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


__all__: List[str] = [
    "iter_records",
    "read_text",
    "ensure_directory",
    "write_file",
    "Timer",
]
