"""Watch mode for nameguard — reloads pattern files when they change.

Uses ``watchfiles`` (Rust-backed) for efficient file system monitoring with
native debouncing.  Any change to a ``*.txt`` file directly inside the
pattern directory rebuilds the whole rule set; the rebuilt tree replaces the
old one in a single assignment, so queries never observe a half-loaded tree.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from nameguard.config.patterns import PATTERN_FILE_GLOB
from nameguard.core.service import IgnoreNameService

logger = logging.getLogger(__name__)

def _is_pattern_file(path: Path, directory: Path) -> bool:
    return path.parent == directory and path.match(PATTERN_FILE_GLOB)

def _reload_patterns(
    changed_paths: list[Path],
    directory: Path,
    service: IgnoreNameService,
) -> int | None:
    """Reload *service* from *directory* if any pattern file changed.

    Returns the number of patterns loaded, or ``None`` when none of
    *changed_paths* is a pattern file (nothing was reloaded).
    """
    directory = directory.resolve()
    if not any(_is_pattern_file(p.resolve(), directory) for p in changed_paths):
        return None

    count = service.reload_directory(directory)
    logger.info("Reloaded %d pattern(s) from %s", count, directory)
    return count

async def watch_patterns(
    directory: Path,
    service: IgnoreNameService,
    *,
    stop_event: asyncio.Event | None = None,
    on_reload: Callable[[int], None] | None = None,
) -> None:
    """Main watch loop — monitor *directory* and reload on changes.

    Parameters
    ----------
    directory:
        The pattern directory to watch.  It is created if missing.
    service:
        The service whose rule set is replaced on every reload.
    stop_event:
        Optional event to signal shutdown (useful for testing).
        When set, the watch loop exits gracefully.
    on_reload:
        Optional callback receiving the number of patterns loaded after
        each reload.
    """
    import watchfiles

    directory.mkdir(parents=True, exist_ok=True)
    reloads = 0

    logger.info("Watching %s for pattern changes...", directory)

    async for changes in watchfiles.awatch(
        directory,
        rust_timeout=500,
        stop_event=stop_event,
    ):
        changed_paths: list[Path] = []
        seen: set[str] = set()
        for _change_type, path_str in changes:
            if path_str not in seen:
                seen.add(path_str)
                changed_paths.append(Path(path_str))

        if not changed_paths:
            continue

        count = await asyncio.to_thread(_reload_patterns, changed_paths, directory, service)
        if count is not None:
            reloads += 1
            if on_reload is not None:
                on_reload(count)

    logger.info("Watch stopped. Total reloads: %d", reloads)
