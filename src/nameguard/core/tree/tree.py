"""Ignore tree: a shared prefix tree of segment matchers.

Nodes live in a dict-backed arena keyed by integer handle.  Every node keeps
a secondary index of its children keyed by :attr:`SegmentMatcher.key`, so
finding a structurally equal sibling during a merge is O(1) and the arena
never holds two equal children under one parent.

Patterns enter the tree as compiled chains (see
:mod:`nameguard.core.matcher.compiler`).  A chain is first wrapped in a
detached :class:`PendingNode` branch, validated, and only then merged, so a
rejected pattern never touches the live tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from nameguard.core.matcher.model import (
    ANY_MATCHER,
    MatcherKey,
    MatcherKind,
    SegmentMatcher,
    fold,
)

logger = logging.getLogger(__name__)

ROOT = 0

class Verdict(Enum):
    """Outcome of validating one candidate node before a merge."""

    KEEP = "keep"
    DROP = "drop"
    REJECT = "reject"

@dataclass
class TreeNode:
    """A node stored in the tree arena.

    ``children`` maps each child's matcher key to the child's handle and
    keeps insertion order.  A leaf never has children.
    """

    handle: int
    matcher: SegmentMatcher
    parent: int | None = None
    is_leaf: bool = False
    children: dict[MatcherKey, int] = field(default_factory=dict)

    @property
    def kind(self) -> MatcherKind:
        return self.matcher.kind

@dataclass
class PendingNode:
    """A detached candidate node that has not been merged into a tree yet."""

    matcher: SegmentMatcher
    is_leaf: bool = False
    children: list[PendingNode] = field(default_factory=list)

    def mark_leaf(self) -> None:
        self.is_leaf = True
        self.children = []

def build_branch(chain: list[SegmentMatcher]) -> PendingNode | None:
    """Wrap a compiled *chain* as a single-branch candidate sub-tree.

    The first matcher becomes the top of the branch and the last one is
    marked as the leaf.  Returns ``None`` for an empty chain.
    """
    if not chain:
        return None

    top = PendingNode(chain[0])
    current = top
    for matcher in chain[1:]:
        child = PendingNode(matcher)
        current.children.append(child)
        current = child
    current.mark_leaf()
    return top

def validate(node: PendingNode) -> Verdict:
    """Validate and prune a candidate sub-tree bottom-up.

    Children are validated before their parent.  Dropped children are
    removed; a node left without children becomes a leaf.  A leaf of kind
    ``ANY`` would match every name unconditionally, so it is dropped.  A
    non-leaf that arrives with no children at all is a branch that never
    terminates and rejects the whole candidate.

    The walk uses an explicit stack, so chains of any depth are accepted.
    """
    order: list[PendingNode] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if not current.is_leaf and not current.children:
            return Verdict.REJECT
        order.append(current)
        if not current.is_leaf:
            stack.extend(reversed(current.children))

    verdicts: dict[int, Verdict] = {}
    for current in reversed(order):
        if not current.is_leaf:
            kept = [c for c in current.children if verdicts[id(c)] is Verdict.KEEP]
            if kept:
                current.children = kept
            else:
                current.mark_leaf()

        if current.is_leaf and current.matcher.kind is MatcherKind.ANY:
            verdicts[id(current)] = Verdict.DROP
        else:
            verdicts[id(current)] = Verdict.KEEP
    return verdicts[id(node)]

class IgnoreTree:
    """Prefix tree of segment matchers with a level-synchronous matcher.

    The root (handle :data:`ROOT`) is a sentinel: it is never a leaf, never
    compared, and only holds the top-level children.  ``node_count`` and the
    iterators never include it.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, TreeNode] = {}
        self._next_handle = ROOT
        self._allocate(ANY_MATCHER, parent=None)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        """Number of nodes in the tree, excluding the root."""
        return len(self._nodes) - 1

    @property
    def leaf_count(self) -> int:
        return sum(1 for node in self.iter_nodes() if node.is_leaf)

    def is_empty(self) -> bool:
        return not self._nodes[ROOT].children

    def get_node(self, handle: int) -> TreeNode | None:
        """Return the node with *handle*, or ``None`` if it does not exist."""
        return self._nodes.get(handle)

    def top_level(self) -> list[TreeNode]:
        """Return the root's children in insertion order."""
        return self.children_of(ROOT)

    def children_of(self, handle: int) -> list[TreeNode]:
        """Return the children of *handle* in insertion order."""
        node = self._nodes.get(handle)
        if node is None:
            return []
        return [self._nodes[h] for h in node.children.values()]

    def find_child(self, handle: int, matcher: SegmentMatcher) -> TreeNode | None:
        """Return the child of *handle* structurally equal to *matcher*."""
        node = self._nodes.get(handle)
        if node is None:
            return None
        child = node.children.get(matcher.key)
        return None if child is None else self._nodes[child]

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Yield every node except the root, parents before children."""
        stack = list(reversed(self._nodes[ROOT].children.values()))
        while stack:
            node = self._nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children.values()))

    def iter_chains(self) -> Iterator[list[SegmentMatcher]]:
        """Yield the matcher chain (top-level first) of every root-to-leaf path."""
        stack: list[tuple[int, list[SegmentMatcher]]] = [
            (h, []) for h in reversed(self._nodes[ROOT].children.values())
        ]
        while stack:
            handle, prefix = stack.pop()
            node = self._nodes[handle]
            path = [*prefix, node.matcher]
            if node.is_leaf:
                yield path
                continue
            stack.extend((h, path) for h in reversed(node.children.values()))

    def stats(self) -> dict[str, int]:
        """Return a summary of tree size."""
        return {
            "nodes": self.node_count,
            "leaves": self.leaf_count,
            "top_level": len(self._nodes[ROOT].children),
        }

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert(self, chain: list[SegmentMatcher]) -> bool:
        """Validate a compiled *chain* and merge it into the tree.

        Returns ``True`` when the chain was incorporated, including the case
        where an equal or broader pattern already covered it.
        """
        branch = build_branch(chain)
        if branch is None:
            return False
        return self.insert_branch(branch)

    def insert_branch(self, branch: PendingNode) -> bool:
        """Validate and merge a detached candidate sub-tree."""
        verdict = validate(branch)
        if verdict is not Verdict.KEEP:
            logger.debug("Candidate %s not inserted: %s", branch.matcher, verdict.value)
            return False

        self._merge(ROOT, branch)
        return True

    def _merge(self, parent_handle: int, candidate: PendingNode) -> None:
        stack = [(parent_handle, candidate)]
        while stack:
            handle, pending = stack.pop()
            parent = self._nodes[handle]
            if parent.is_leaf:
                # A broader pattern already ends here.
                continue

            existing = parent.children.get(pending.matcher.key)
            if existing is None:
                self._attach(handle, pending)
            elif pending.is_leaf:
                self._mark_leaf(existing)
            else:
                stack.extend((existing, child) for child in reversed(pending.children))

    def _attach(self, parent_handle: int, candidate: PendingNode) -> None:
        stack = [(parent_handle, candidate)]
        while stack:
            handle, pending = stack.pop()
            child = self._allocate(pending.matcher, parent=handle)
            self._nodes[handle].children[pending.matcher.key] = child
            if pending.is_leaf:
                self._nodes[child].is_leaf = True
            else:
                stack.extend((child, grandchild) for grandchild in reversed(pending.children))

    def _allocate(self, matcher: SegmentMatcher, parent: int | None) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._nodes[handle] = TreeNode(handle=handle, matcher=matcher, parent=parent)
        return handle

    def _mark_leaf(self, handle: int) -> None:
        node = self._nodes[handle]
        for child in list(node.children.values()):
            self._drop_subtree(child)
        node.children.clear()
        node.is_leaf = True

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove(self, handle: int) -> bool:
        """Detach the node *handle* and its whole subtree.

        A parent left without children becomes a leaf, unless it is the root
        (which simply becomes empty) or of kind ``ANY`` (which may not be a
        leaf, so it is removed as well and the check repeats one level up).

        Returns:
            ``True`` if the node existed and was removed, ``False`` otherwise.
        """
        if handle == ROOT:
            return False
        node = self._nodes.get(handle)
        if node is None:
            return False

        parent = self._nodes[node.parent]
        del parent.children[node.matcher.key]
        self._drop_subtree(handle)
        self._settle(parent)
        return True

    def _settle(self, node: TreeNode) -> None:
        while node.handle != ROOT and not node.children:
            if node.kind is not MatcherKind.ANY:
                node.is_leaf = True
                return
            parent = self._nodes[node.parent]
            del parent.children[node.matcher.key]
            del self._nodes[node.handle]
            node = parent

    def _drop_subtree(self, handle: int) -> None:
        stack = [handle]
        while stack:
            node = self._nodes.pop(stack.pop())
            stack.extend(node.children.values())

    def clear(self) -> None:
        """Remove every node except the root."""
        root = self._nodes[ROOT]
        root.children.clear()
        self._nodes = {ROOT: root}

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def matches(self, names: Iterable[str]) -> bool:
        """Return ``True`` if the innermost-first *names* hit any leaf.

        All live candidates advance one name at a time.  The scan stops at
        the first matching leaf, or as soon as no candidate survives.
        """
        nodes = self._nodes
        frontier = list(nodes[ROOT].children.values())
        upcoming: list[int] = []

        for name in names:
            folded = fold(name)
            for handle in frontier:
                node = nodes[handle]
                if not node.matcher.matches_folded(folded):
                    continue
                if node.is_leaf:
                    return True
                upcoming.extend(node.children.values())

            if not upcoming:
                return False

            frontier, upcoming = upcoming, frontier
            upcoming.clear()

        return False
