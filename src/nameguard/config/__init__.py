"""nameguard configuration: pattern-file conventions and discovery."""

from nameguard.config.patterns import (
    COMMENT_PREFIX,
    DEFAULT_PATTERN_DIR,
    PATTERN_FILE_GLOB,
    SEGMENT_SEPARATOR,
    WILDCARD,
    discover_pattern_files,
    iter_pattern_lines,
    read_pattern_file,
)

__all__ = [
    "COMMENT_PREFIX",
    "DEFAULT_PATTERN_DIR",
    "PATTERN_FILE_GLOB",
    "SEGMENT_SEPARATOR",
    "WILDCARD",
    "discover_pattern_files",
    "iter_pattern_lines",
    "read_pattern_file",
]
