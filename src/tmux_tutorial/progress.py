"""
Progress store: the last completed chapter, as one integer in one file.

The file holds a single decimal number and a newline. Anything else found
there (garbage, a negative number, a chapter that does not exist) reads as 0.
"""

from __future__ import annotations

import errno
import os
import re
import tempfile
from pathlib import Path

from loguru import logger

from tmux_tutorial import TOTAL_CHAPTERS
from tmux_tutorial.errors import CorruptStateError

DIGITS = re.compile(r"[0-9]+")


def atomic_write_file(path: Path, content: str) -> None:
    """
    Write file atomically using temp file -> fsync -> rename pattern.

    Raises:
        OSError: If write fails (including disk full - errno.ENOSPC)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory so the rename stays on one filesystem
    temp_fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        with os.fdopen(temp_fd, "w") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)

    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass

        if e.errno == errno.ENOSPC:
            raise OSError(f"Disk full - cannot write to {path}") from e
        raise


def parse_progress(text: str, total: int = TOTAL_CHAPTERS) -> int:
    """
    Raises:
        CorruptStateError: not a plain non-negative integer in [0, total]
    """
    value = text.strip()
    if not DIGITS.fullmatch(value):
        raise CorruptStateError(f"Progress is not a number: {value[:20]!r}")
    if len(value) > len(str(total)):
        raise CorruptStateError(f"Progress has {len(value)} digits, outside 0-{total}")
    number = int(value)
    if number > total:
        raise CorruptStateError(f"Progress {number} is outside 0-{total}")
    return number


class ProgressStore:
    def __init__(self, path: Path, total: int = TOTAL_CHAPTERS):
        self.path = path
        self.total = total

    def load(self) -> int:
        """Last completed chapter, 0 when missing or unreadable."""
        try:
            text = self.path.read_text()
        except FileNotFoundError:
            return 0
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(
                "Progress file unreadable, starting from 0",
                operation="load_progress",
                status="fallback",
                file=str(self.path),
                error=str(e),
            )
            return 0

        try:
            return parse_progress(text, self.total)
        except CorruptStateError as e:
            logger.debug(
                "Progress file corrupt, starting from 0",
                operation="load_progress",
                status="fallback",
                file=str(self.path),
                error=str(e),
            )
            return 0

    def save(self, chapter: int) -> bool:
        """
        Persist `chapter`. Returns False (after logging) if it could not be written.

        Raises:
            ValueError: chapter outside [0, total]
        """
        if not 0 <= chapter <= self.total:
            raise ValueError(f"chapter must be within 0-{self.total}, got {chapter}")
        try:
            atomic_write_file(self.path, f"{chapter}\n")
        except OSError as e:
            logger.error(
                "Failed to save progress",
                operation="save_progress",
                status="failed",
                file=str(self.path),
                chapter=chapter,
                error=str(e),
            )
            return False

        logger.debug(
            "Progress saved",
            operation="save_progress",
            status="success",
            file=str(self.path),
            chapter=chapter,
        )
        return True
