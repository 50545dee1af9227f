"""Pattern-file conventions and discovery for nameguard."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

DEFAULT_PATTERN_DIR = "IgnoreTranslation"
PATTERN_FILE_GLOB = "*.txt"

COMMENT_PREFIX = "#"
SEGMENT_SEPARATOR = "/"
WILDCARD = "*"

def iter_pattern_lines(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, pattern)`` for every meaningful line in *lines*.

    Line numbers are 1-based.  Whitespace is stripped from both ends; blank
    lines and lines whose first non-blank character is ``#`` are skipped.
    """
    for number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        yield number, line

def discover_pattern_files(directory: Path, create: bool = True) -> list[Path]:
    """Return the ``*.txt`` pattern files directly inside *directory*.

    The directory is created when it does not exist and *create* is true, so
    a fresh install has an obvious place to drop rule files.  Subdirectories
    are not searched.  Results are sorted by file name to keep load order
    stable across platforms.
    """
    if create:
        directory.mkdir(parents=True, exist_ok=True)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.glob(PATTERN_FILE_GLOB) if p.is_file())

def read_pattern_file(path: Path) -> list[str]:
    """Read *path* as UTF-8 (a leading BOM is tolerated) and return its lines.

    Raises ``OSError`` / ``UnicodeDecodeError`` for unreadable files; callers
    decide whether that is fatal.
    """
    return path.read_text(encoding="utf-8-sig").splitlines()
