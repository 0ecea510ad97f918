from __future__ import annotations

from .builder import Graph, GraphBuilder
from .cycles import CycleBreaker, Loop
from .errors import ConfigError, InvariantError, MalformedInputError, TsortError
from .registry import KeyRegistry, Node, Queued, Scanning, Unused
from .scheduler import Scheduler, SchedulerState
from .tokens import iter_pairs, iter_tokens

__all__ = [
    "ConfigError",
    "CycleBreaker",
    "Graph",
    "GraphBuilder",
    "InvariantError",
    "KeyRegistry",
    "Loop",
    "MalformedInputError",
    "Node",
    "Queued",
    "Scanning",
    "Scheduler",
    "SchedulerState",
    "TsortError",
    "Unused",
    "iter_pairs",
    "iter_tokens",
]
