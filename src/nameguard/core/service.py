"""Ignore-name service: the public face of nameguard.

Wraps an :class:`IgnoreTree` with pattern registration, pattern-file loading
and the ``is_ignored`` query.  Registration failures are ordinary ``False``
results; loading logs a warning for each rejected line or unreadable file
and keeps going.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from nameguard.config.patterns import (
    DEFAULT_PATTERN_DIR,
    SEGMENT_SEPARATOR,
    discover_pattern_files,
    iter_pattern_lines,
    read_pattern_file,
)
from nameguard.core.matcher.compiler import compile_pattern
from nameguard.core.matcher.model import SegmentMatcher
from nameguard.core.tree.tree import ROOT, IgnoreTree, TreeNode

logger = logging.getLogger(__name__)

def split_name_path(path: str) -> list[str]:
    """Turn an outermost-first ``A/B/C`` path into innermost-first names.

    >>> split_name_path("ItemList/ii/Item")
    ['Item', 'ii', 'ItemList']
    """
    return [name for name in reversed(path.split(SEGMENT_SEPARATOR)) if name]

class IgnoreNameService:
    """Decides whether a chain of object names is exempt from processing.

    Iterating the service yields the top-level tree nodes; ``len()`` counts
    them.  Membership tests compare a :class:`SegmentMatcher` structurally
    against the top-level nodes.
    """

    def __init__(self, tree: IgnoreTree | None = None) -> None:
        self._tree = tree if tree is not None else IgnoreTree()

    @property
    def tree(self) -> IgnoreTree:
        return self._tree

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_pattern(self, text: str | None) -> bool:
        """Compile *text* (e.g. ``"FriendList/Item*"``) and insert it.

        Returns ``False`` when the pattern is malformed or when validation
        rejects it (a bare ``*``); the tree is left untouched in that case.
        """
        chain = compile_pattern(text)
        if chain is None:
            return False
        if not self._tree.insert(chain):
            return False
        logger.debug("Added pattern %r", text)
        return True

    def load(self, lines: Iterable[str], source: str = "<lines>") -> int:
        """Register every pattern line in *lines*.

        Blank and ``#`` comment lines are skipped.  A line that cannot be
        added, or that fails with an unexpected error, is reported as a
        warning and loading continues with the next line.

        Returns:
            The number of lines that were added.
        """
        added = 0
        for number, line in iter_pattern_lines(lines):
            try:
                accepted = self.add_pattern(line)
            except Exception:
                logger.warning(
                    "Error in line %d in %s: %r", number, source, line, exc_info=True
                )
                continue
            if accepted:
                added += 1
            else:
                logger.warning("Not added line %d in %s: %r", number, source, line)
        return added

    def load_file(self, path: Path) -> int:
        """Register the patterns in one file.

        An unreadable file is logged and counts as zero added patterns.
        """
        try:
            lines = read_pattern_file(path)
        except (OSError, UnicodeDecodeError):
            logger.warning("Error in file '%s'", path, exc_info=True)
            return 0
        return self.load(lines, source=str(path))

    def load_directory(self, directory: Path | None = None) -> int:
        """Register every ``*.txt`` file directly inside *directory*.

        Defaults to ``./IgnoreTranslation``, which is created when missing.

        Returns:
            The total number of patterns added across all files.
        """
        directory = directory if directory is not None else Path(DEFAULT_PATTERN_DIR)
        try:
            files = discover_pattern_files(directory)
        except OSError:
            logger.warning("Error in directory '%s'", directory, exc_info=True)
            return 0

        added = 0
        for path in files:
            added += self.load_file(path)
        logger.info("Loaded %d pattern(s) from %d file(s) in %s", added, len(files), directory)
        return added

    def reload_directory(self, directory: Path | None = None) -> int:
        """Rebuild the rule set from *directory* and swap it in.

        The new tree is built off to the side, so concurrent readers keep
        seeing the previous rules until the swap.
        """
        fresh = IgnoreNameService()
        added = fresh.load_directory(directory)
        self._tree = fresh.tree
        return added

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_ignored(self, names: Iterable[str]) -> bool:
        """Return ``True`` if the innermost-first *names* match a registered pattern."""
        return self._tree.matches(names)

    def patterns(self) -> list[str]:
        """Return the effective rule set as outermost-first glob strings.

        The list reflects the merged tree, so duplicates and patterns
        subsumed by broader ones do not appear.
        """
        return [
            SEGMENT_SEPARATOR.join(str(m) for m in reversed(chain))
            for chain in self._tree.iter_chains()
        ]

    def stats(self) -> dict[str, int]:
        return self._tree.stats()

    # ------------------------------------------------------------------
    # Collection behaviour over the top-level nodes
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self._tree.top_level())

    def __len__(self) -> int:
        return len(self._tree.top_level())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, TreeNode):
            item = item.matcher
        if not isinstance(item, SegmentMatcher):
            return False
        return self._tree.find_child(ROOT, item) is not None

    def clear(self) -> None:
        self._tree.clear()

    def remove(self, node: TreeNode | int) -> bool:
        """Remove a node (by :class:`TreeNode` or handle) and its subtree."""
        handle = node.handle if isinstance(node, TreeNode) else node
        return self._tree.remove(handle)

_default_service: IgnoreNameService | None = None

def set_default_service(service: IgnoreNameService | None) -> None:
    """Replace the process-wide service (``None`` resets it)."""
    global _default_service  # noqa: PLW0603
    _default_service = service

def get_default_service() -> IgnoreNameService:
    """Lazily create and return the process-wide service.

    On first use, patterns are loaded from ``./IgnoreTranslation`` when that
    directory exists.
    """
    global _default_service  # noqa: PLW0603
    if _default_service is None:
        _default_service = IgnoreNameService()
        directory = Path(DEFAULT_PATTERN_DIR)
        if directory.is_dir():
            _default_service.load_directory(directory)
        else:
            logger.info("No %s directory in %s; starting with no patterns", directory, Path.cwd())
    return _default_service
