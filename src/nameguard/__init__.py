"""nameguard: glob rules that exempt object-name paths from processing."""

from nameguard.core.matcher.compiler import compile_pattern
from nameguard.core.matcher.model import MatcherKind, SegmentMatcher
from nameguard.core.service import (
    IgnoreNameService,
    get_default_service,
    set_default_service,
    split_name_path,
)
from nameguard.core.tree.tree import IgnoreTree, TreeNode

__version__ = "0.1.0"

__all__ = [
    "IgnoreNameService",
    "IgnoreTree",
    "MatcherKind",
    "SegmentMatcher",
    "TreeNode",
    "__version__",
    "compile_pattern",
    "get_default_service",
    "set_default_service",
    "split_name_path",
]
