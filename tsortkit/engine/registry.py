from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, Union

from .errors import InvariantError


@dataclass(frozen=True, slots=True)
class Unused:
    pass


@dataclass(frozen=True, slots=True)
class Queued:
    """Node sits on the ready list; `next` is the following queued node (None at the tail)."""

    next: int | None = None


@dataclass(frozen=True, slots=True)
class Scanning:
    """Node is on the cycle-scan stack; `prev` is the node pushed before it (None at the bottom)."""

    prev: int | None = None


Link = Union[Unused, Queued, Scanning]

UNUSED = Unused()


@dataclass(slots=True)
class Node:
    """
    One distinct token.

    - `left` / `right` are registry tree children (arena indices), unrelated to the
      dependency graph.
    - `balance` is height(right) - height(left), always in {-1, 0, +1}.
    - `successors` holds edge targets, newest edge first.
    - `link` is phase-scoped: Queued while waiting on the ready list, Scanning while
      on a cycle-scan stack, Unused otherwise.
    """

    key: bytes
    left: int | None = None
    right: int | None = None
    balance: int = 0
    indegree: int = 0
    successors: Deque[int] = field(default_factory=deque)
    emitted: bool = False
    link: Link = UNUSED


@dataclass(slots=True)
class KeyRegistry:
    """
    AVL tree mapping token bytes to node indices.

    Nodes live in an index-addressed arena and are never removed; tree links and
    graph edges are both arena indices.
    """

    _nodes: list[Node] = field(default_factory=list)
    _root: int | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> Node:
        return self._nodes[index]

    def key(self, index: int) -> bytes:
        return self._nodes[index].key

    def find(self, key: bytes) -> int | None:
        cur = self._root
        while cur is not None:
            n = self._nodes[cur]
            if key == n.key:
                return cur
            cur = n.left if key < n.key else n.right
        return None

    def find_or_insert(self, key: bytes) -> int:
        """
        Return the node index for `key`, inserting (and rebalancing) on first sight.
        """

        if not isinstance(key, bytes):
            raise TypeError(f"Registry keys must be bytes (got {type(key).__name__}).")

        if self._root is None:
            self._root = self._new_node(key)
            return self._root

        found = self.find(key)
        if found is not None:
            return found

        index = self._new_node(key)
        self._root, _ = self._insert(self._root, index)
        return index

    def walk(self) -> Iterator[int]:
        """
        In-order traversal: yields node indices in strictly increasing key order.
        """

        stack: list[int] = []
        cur = self._root
        while stack or cur is not None:
            while cur is not None:
                stack.append(cur)
                cur = self._nodes[cur].left
            cur = stack.pop()
            yield cur
            cur = self._nodes[cur].right

    def keys(self) -> list[bytes]:
        return [self._nodes[i].key for i in self.walk()]

    def height(self) -> int:
        return self._height(self._root)

    def check_invariants(self) -> None:
        """
        Verify ordering and balance factors of the whole tree.
        """

        prev: bytes | None = None
        count = 0
        for i in self.walk():
            key = self._nodes[i].key
            if prev is not None and not prev < key:
                raise InvariantError(f"Registry order violated at {key!r}.")
            prev = key
            count += 1
        if count != len(self._nodes):
            raise InvariantError(f"Registry reaches {count} of {len(self._nodes)} nodes.")
        self._checked_height(self._root)

    # -- internals -------------------------------------------------------

    def _new_node(self, key: bytes) -> int:
        self._nodes.append(Node(key=key))
        return len(self._nodes) - 1

    def _insert(self, at: int, index: int) -> tuple[int, bool]:
        """
        Insert node `index` below subtree `at`.

        Returns (new subtree root, whether the subtree height grew).
        """

        n = self._nodes[at]
        if self._nodes[index].key < n.key:
            if n.left is None:
                n.left = index
                grew = True
            else:
                n.left, grew = self._insert(n.left, index)
            if not grew:
                return at, False
            n.balance -= 1
        else:
            if n.right is None:
                n.right = index
                grew = True
            else:
                n.right, grew = self._insert(n.right, index)
            if not grew:
                return at, False
            n.balance += 1

        if n.balance == 0:
            return at, False
        if n.balance in (-1, 1):
            return at, True
        # |balance| == 2: one rotation restores the pre-insert height.
        return self._rebalance(at), False

    def _rebalance(self, at: int) -> int:
        n = self._nodes[at]
        if n.balance < 0:
            assert n.left is not None
            if self._nodes[n.left].balance > 0:
                return self._rotate_left_right(at)
            return self._rotate_right(at)
        assert n.right is not None
        if self._nodes[n.right].balance < 0:
            return self._rotate_right_left(at)
        return self._rotate_left(at)

    def _rotate_right(self, at: int) -> int:
        s = self._nodes[at]
        r_index = s.left
        assert r_index is not None
        r = self._nodes[r_index]
        s.left = r.right
        r.right = at
        s.balance = 0
        r.balance = 0
        return r_index

    def _rotate_left(self, at: int) -> int:
        s = self._nodes[at]
        r_index = s.right
        assert r_index is not None
        r = self._nodes[r_index]
        s.right = r.left
        r.left = at
        s.balance = 0
        r.balance = 0
        return r_index

    def _rotate_left_right(self, at: int) -> int:
        s = self._nodes[at]
        r_index = s.left
        assert r_index is not None
        r = self._nodes[r_index]
        p_index = r.right
        assert p_index is not None
        p = self._nodes[p_index]

        r.right = p.left
        p.left = r_index
        s.left = p.right
        p.right = at

        s.balance = 1 if p.balance == -1 else 0
        r.balance = -1 if p.balance == 1 else 0
        p.balance = 0
        return p_index

    def _rotate_right_left(self, at: int) -> int:
        s = self._nodes[at]
        r_index = s.right
        assert r_index is not None
        r = self._nodes[r_index]
        p_index = r.left
        assert p_index is not None
        p = self._nodes[p_index]

        r.left = p.right
        p.right = r_index
        s.right = p.left
        p.left = at

        s.balance = -1 if p.balance == 1 else 0
        r.balance = 1 if p.balance == -1 else 0
        p.balance = 0
        return p_index

    def _height(self, at: int | None) -> int:
        if at is None:
            return 0
        n = self._nodes[at]
        return 1 + max(self._height(n.left), self._height(n.right))

    def _checked_height(self, at: int | None) -> int:
        if at is None:
            return 0
        n = self._nodes[at]
        lh = self._checked_height(n.left)
        rh = self._checked_height(n.right)
        if rh - lh != n.balance or n.balance not in (-1, 0, 1):
            raise InvariantError(
                f"AVL balance violated at {n.key!r}: stored {n.balance}, actual {rh - lh}."
            )
        return 1 + max(lh, rh)
