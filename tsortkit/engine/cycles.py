from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from .errors import InvariantError
from .registry import UNUSED, KeyRegistry, Scanning

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Loop:
    """
    One detected cycle.

    `members` are in traversal order, starting at the node the scan revisited;
    `retracted` is the removed edge (last member -> first member).
    """

    members: tuple[bytes, ...]
    retracted: tuple[bytes, bytes]


@dataclass(slots=True)
class CycleBreaker:
    registry: KeyRegistry

    def find_cycle(self) -> list[int] | None:
        """
        Depth-first scan over unemitted nodes, returning one cycle as node indices.

        Start nodes are taken in registry order (unemitted, indegree > 0). Nodes on
        the current scan path carry a Scanning link back to the node pushed before
        them; all links are reset to Unused before returning.
        """

        reg = self.registry
        on_stack: set[int] = set()
        # Fully explored in this pass; no cycle reachable through them.
        exhausted: set[int] = set()
        top: int | None = None

        try:
            for start in reg.walk():
                n = reg.node(start)
                if n.emitted or n.indegree == 0 or start in exhausted:
                    continue

                n.link = Scanning(prev=top)
                top = start
                on_stack.add(start)
                frames: list[tuple[int, Iterator[int]]] = [(start, iter(n.successors))]

                while frames:
                    cur, edges = frames[-1]
                    pushed = False
                    for nxt in edges:
                        m = reg.node(nxt)
                        if m.emitted or nxt in exhausted:
                            continue
                        if nxt in on_stack:
                            return self._path_from(top, nxt)
                        m.link = Scanning(prev=top)
                        top = nxt
                        on_stack.add(nxt)
                        frames.append((nxt, iter(m.successors)))
                        pushed = True
                        break
                    if pushed:
                        continue

                    # Dead end: pop.
                    frames.pop()
                    node = reg.node(cur)
                    link = node.link
                    if not isinstance(link, Scanning):
                        raise InvariantError(f"Scan stack corrupted at {node.key!r}.")
                    top = link.prev
                    node.link = UNUSED
                    on_stack.discard(cur)
                    exhausted.add(cur)
            return None
        finally:
            for i in on_stack:
                reg.node(i).link = UNUSED

    def break_cycle(self, cycle: list[int]) -> Loop:
        """
        Retract the edge closing `cycle` and decrement its target's indegree.
        """

        if not cycle:
            raise InvariantError("Cannot break an empty cycle.")

        reg = self.registry
        first, last = cycle[0], cycle[-1]
        target = reg.node(first)
        try:
            reg.node(last).successors.remove(first)
        except ValueError:
            raise InvariantError(
                f"Cycle edge {reg.key(last)!r} -> {target.key!r} does not exist."
            ) from None

        target.indegree -= 1
        if target.indegree < 0:
            raise InvariantError(f"Negative indegree for {target.key!r}.")

        loop = Loop(
            members=tuple(reg.key(i) for i in cycle),
            retracted=(reg.key(last), target.key),
        )
        logger.info(
            "Broke loop of %d node(s) by retracting %r -> %r.",
            len(cycle),
            loop.retracted[0],
            loop.retracted[1],
        )
        return loop

    def _path_from(self, top: int | None, target: int) -> list[int]:
        reg = self.registry
        path: list[int] = []
        cur = top
        while cur is not None:
            path.append(cur)
            if cur == target:
                break
            link = reg.node(cur).link
            if not isinstance(link, Scanning):
                raise InvariantError(f"Scan stack corrupted at {reg.key(cur)!r}.")
            cur = link.prev
        else:
            raise InvariantError(f"Revisited node {reg.key(target)!r} is not on the scan stack.")
        path.reverse()
        return path
