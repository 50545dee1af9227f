"""Segment matcher data model for nameguard.

Defines the closed set of wildcard shapes a single ``/``-delimited token can
take and the :class:`SegmentMatcher` predicate built from one token.  All
comparisons are ASCII-case-insensitive: only ``A``-``Z`` are folded, so
matching does not depend on the current locale and never expands a
character (``"ß"`` stays distinct from ``"ss"``).
"""

from __future__ import annotations

import string
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

class MatcherKind(Enum):
    """Wildcard shapes a pattern token can compile to."""

    EQUALS = "equals"  # "Item"
    CONTAINS = "contains"  # "*Item*"
    ANY = "any"  # "*"
    STARTS_WITH = "starts_with"  # "Item*"
    ENDS_WITH = "ends_with"  # "*Item"
    STARTS_AND_ENDS = "starts_and_ends"  # "It*em"

MatcherKey = tuple[MatcherKind, str, str]

def _equals(start: str, end: str, value: str) -> bool:
    return value == start

def _contains(start: str, end: str, value: str) -> bool:
    return start in value

def _any(start: str, end: str, value: str) -> bool:
    return True

def _starts_with(start: str, end: str, value: str) -> bool:
    return value.startswith(start)

def _ends_with(start: str, end: str, value: str) -> bool:
    return value.endswith(end)

def _starts_and_ends(start: str, end: str, value: str) -> bool:
    if len(value) < len(start):
        return False
    return value.startswith(start) and value[len(start):].endswith(end)

PREDICATES: dict[MatcherKind, Callable[[str, str, str], bool]] = {
    MatcherKind.EQUALS: _equals,
    MatcherKind.CONTAINS: _contains,
    MatcherKind.ANY: _any,
    MatcherKind.STARTS_WITH: _starts_with,
    MatcherKind.ENDS_WITH: _ends_with,
    MatcherKind.STARTS_AND_ENDS: _starts_and_ends,
}

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

def fold(value: str) -> str:
    """Return the comparison form of *value* with ASCII letters lower-cased."""
    return value.translate(_ASCII_LOWER)

@dataclass(frozen=True)
class SegmentMatcher:
    """A predicate over one name segment.

    ``start`` and ``end`` keep the literal text flanking the wildcard exactly
    as written in the pattern; they are empty when the kind does not use
    them.  Equality and hashing go through :attr:`key`, so two matchers that
    differ only in letter case are the same matcher.
    """

    kind: MatcherKind
    start: str = ""
    end: str = ""

    _folded_start: str = field(init=False, repr=False, compare=False)
    _folded_end: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_folded_start", fold(self.start))
        object.__setattr__(self, "_folded_end", fold(self.end))

    @property
    def key(self) -> MatcherKey:
        """Structural identity: kind plus case-folded ``start``/``end``."""
        return (self.kind, self._folded_start, self._folded_end)

    def matches(self, name: str) -> bool:
        """Return ``True`` if *name* satisfies this matcher."""
        return self.matches_folded(fold(name))

    def matches_folded(self, folded_name: str) -> bool:
        """Like :meth:`matches` for a name already passed through :func:`fold`."""
        return PREDICATES[self.kind](self._folded_start, self._folded_end, folded_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SegmentMatcher):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        if self.kind is MatcherKind.EQUALS:
            return self.start
        if self.kind is MatcherKind.CONTAINS:
            return f"*{self.start}*"
        if self.kind is MatcherKind.ANY:
            return "*"
        if self.kind is MatcherKind.STARTS_WITH:
            return f"{self.start}*"
        if self.kind is MatcherKind.ENDS_WITH:
            return f"*{self.end}"
        return f"{self.start}*{self.end}"

ANY_MATCHER = SegmentMatcher(MatcherKind.ANY)
