"""Pattern compiler: glob text -> chain of segment matchers.

A pattern such as ``ItemList/*/Item*`` is split on ``/`` and every token is
turned into one :class:`SegmentMatcher`.  The chain comes back in *reverse*
token order because queries supply names innermost-first, so the last token
of the pattern is the first one the tree has to test.
"""

from __future__ import annotations

import logging

from nameguard.config.patterns import SEGMENT_SEPARATOR, WILDCARD
from nameguard.core.matcher.model import MatcherKind, SegmentMatcher

logger = logging.getLogger(__name__)

def split_pattern(pattern: str) -> list[str]:
    """Split *pattern* on ``/``, dropping the empty tokens of repeated separators."""
    return [token for token in pattern.split(SEGMENT_SEPARATOR) if token]

def compile_segment(token: str) -> SegmentMatcher | None:
    """Compile one ``/``-free token, or return ``None`` when it is malformed.

    Only a single ``*`` is meaningful, except for the ``*text*`` contains
    form.  Everything else (``Item**``, ``I*tem*``, a bare empty token) is
    rejected.
    """
    pieces = token.split(WILDCARD)

    if len(pieces) == 1:
        if not pieces[0]:
            return None
        return SegmentMatcher(MatcherKind.EQUALS, start=pieces[0])

    if len(pieces) == 2:
        head, tail = pieces
        if not head and not tail:
            return SegmentMatcher(MatcherKind.ANY)
        if not head:
            return SegmentMatcher(MatcherKind.ENDS_WITH, end=tail)
        if not tail:
            return SegmentMatcher(MatcherKind.STARTS_WITH, start=head)
        return SegmentMatcher(MatcherKind.STARTS_AND_ENDS, start=head, end=tail)

    if len(pieces) == 3:
        head, middle, tail = pieces
        if not head and middle and not tail:
            return SegmentMatcher(MatcherKind.CONTAINS, start=middle)

    return None

def compile_tokens(tokens: list[str]) -> list[SegmentMatcher] | None:
    """Compile already-split *tokens* into a reversed matcher chain.

    Returns ``None`` when there are no tokens or when any token is malformed;
    a partially valid pattern never yields a partial chain.
    """
    if not tokens:
        return None

    chain: list[SegmentMatcher] = []
    for token in reversed(tokens):
        matcher = compile_segment(token)
        if matcher is None:
            logger.debug("Rejected token %r", token)
            return None
        chain.append(matcher)
    return chain

def compile_pattern(pattern: str | None) -> list[SegmentMatcher] | None:
    """Compile a ``/``-delimited glob into a matcher chain.

    The returned list starts with the matcher for the *last* token; its final
    element (the first token of the pattern) is the terminal of the chain.

    Returns ``None`` for ``None`` input, for a pattern with no tokens, and for
    any pattern containing a malformed token.
    """
    if pattern is None:
        return None
    return compile_tokens(split_pattern(pattern))
