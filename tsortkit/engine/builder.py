from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .registry import KeyRegistry
from .tokens import iter_pairs

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Graph:
    registry: KeyRegistry
    node_count: int = 0
    edge_count: int = 0


@dataclass(slots=True)
class GraphBuilder:
    """
    Records (predecessor, successor) pairs as edges between registry nodes.

    - Self-pairs register the token but add no edge.
    - Duplicate pairs each add their own edge (indegree counts edges, not
      distinct predecessors).
    """

    registry: KeyRegistry = field(default_factory=KeyRegistry)
    edge_count: int = 0
    self_pairs: int = 0

    def add_pair(self, pred: bytes, succ: bytes) -> None:
        j = self.registry.find_or_insert(pred)
        k = self.registry.find_or_insert(succ)
        if j == k:
            self.self_pairs += 1
            return
        # Newest edge first.
        self.registry.node(j).successors.appendleft(k)
        self.registry.node(k).indegree += 1
        self.edge_count += 1

    def consume(self, tokens: Iterable[bytes]) -> Graph:
        """
        Pair up `tokens` and record every pair.

        Raises MalformedInputError (from `iter_pairs`) on an odd token count.
        """

        for pred, succ in iter_pairs(tokens):
            self.add_pair(pred, succ)
        return self.finish()

    def finish(self) -> Graph:
        node_count = sum(1 for _ in self.registry.walk())
        logger.debug(
            "Graph built: %d node(s), %d edge(s), %d self-pair(s) ignored.",
            node_count,
            self.edge_count,
            self.self_pairs,
        )
        return Graph(registry=self.registry, node_count=node_count, edge_count=self.edge_count)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[bytes, bytes]]) -> Graph:
        b = cls()
        for pred, succ in pairs:
            b.add_pair(pred, succ)
        return b.finish()
