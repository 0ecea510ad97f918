from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .builder import Graph
from .cycles import CycleBreaker, Loop
from .errors import InvariantError
from .registry import UNUSED, Queued

logger = logging.getLogger(__name__)

EmitFn = Callable[[bytes], None]
LoopFn = Callable[[Loop], None]


@dataclass(slots=True)
class SchedulerState:
    """
    Everything the scheduler mutates across Seed / Drain / break passes.

    The ready list is a FIFO chained through the nodes' Queued links.
    """

    remaining: int
    head: int | None = None
    tail: int | None = None
    order: list[bytes] = field(default_factory=list)
    loops: list[Loop] = field(default_factory=list)
    seed_passes: int = 0


@dataclass(slots=True)
class Scheduler:
    """
    Kahn-style emission over a built graph (Seed, Drain, and on a stall, break one loop).
    """

    graph: Graph
    emit: EmitFn | None = None
    on_loop: LoopFn | None = None

    state: SchedulerState = field(init=False)
    _breaker: CycleBreaker = field(init=False)

    def __post_init__(self) -> None:
        self.state = SchedulerState(remaining=int(self.graph.node_count))
        self._breaker = CycleBreaker(self.graph.registry)

    def seed(self) -> int:
        """
        Append every unemitted node with indegree 0 to the ready list, in key order.
        """

        reg = self.graph.registry
        added = 0
        for i in reg.walk():
            n = reg.node(i)
            if n.indegree == 0 and not n.emitted and not isinstance(n.link, Queued):
                self._enqueue(i)
                added += 1
        self.state.seed_passes += 1
        logger.debug("Seed pass %d queued %d node(s).", self.state.seed_passes, added)
        return added

    def drain(self) -> int:
        """
        Emit ready nodes until the ready list is empty.

        Successors reaching indegree 0 join the tail immediately, so they are emitted
        in discovery order rather than key order.
        """

        reg = self.graph.registry
        st = self.state
        emitted = 0
        while st.head is not None:
            i = self._pop()
            n = reg.node(i)
            if self.emit is not None:
                self.emit(n.key)
            st.order.append(n.key)
            st.remaining -= 1
            n.emitted = True
            emitted += 1

            for k in n.successors:
                m = reg.node(k)
                m.indegree -= 1
                if m.indegree < 0:
                    raise InvariantError(f"Negative indegree for {m.key!r}; graph invariants violated.")
                if m.indegree == 0:
                    self._enqueue(k)
        return emitted

    def run(self) -> SchedulerState:
        st = self.state
        while st.remaining > 0:
            if self.seed() == 0:
                cycle = self._breaker.find_cycle()
                if cycle is None:
                    raise InvariantError(f"Stalled with {st.remaining} node(s) left but no loop found.")
                loop = self._breaker.break_cycle(cycle)
                st.loops.append(loop)
                if self.on_loop is not None:
                    self.on_loop(loop)
                continue
            self.drain()
        return st

    def _enqueue(self, index: int) -> None:
        reg = self.graph.registry
        st = self.state
        reg.node(index).link = Queued(next=None)
        if st.tail is None:
            st.head = index
        else:
            reg.node(st.tail).link = Queued(next=index)
        st.tail = index

    def _pop(self) -> int:
        reg = self.graph.registry
        st = self.state
        index = st.head
        assert index is not None
        n = reg.node(index)
        link = n.link
        if not isinstance(link, Queued):
            raise InvariantError(f"Ready list corrupted at {n.key!r}.")
        st.head = link.next
        if st.head is None:
            st.tail = None
        n.link = UNUSED
        return index
