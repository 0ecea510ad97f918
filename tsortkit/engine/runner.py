from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import BinaryIO, Iterable, TextIO

from ..config import SortConfig
from .builder import GraphBuilder
from .cycles import Loop
from .scheduler import Scheduler
from .tokens import TokenSource, iter_tokens

logger = logging.getLogger(__name__)

LOOP_HEADER = "input contains a loop:"


class SortStatus(StrEnum):
    OK = "ok"
    LOOP = "loop"


@dataclass(slots=True)
class SortResult:
    order: list[bytes] = field(default_factory=list)
    loops: list[Loop] = field(default_factory=list)
    node_count: int = 0
    edge_count: int = 0

    @property
    def status(self) -> SortStatus:
        return SortStatus.LOOP if self.loops else SortStatus.OK

    @property
    def ok(self) -> bool:
        return not self.loops


def decode_key(key: bytes) -> str:
    return key.decode("utf-8", errors="backslashreplace")


def format_loop(loop: Loop, *, program_name: str = "tsort") -> list[str]:
    """
    Diagnostic lines for one loop: a header, then one member per line.
    """

    lines = [f"{program_name}: {LOOP_HEADER}"]
    lines.extend(f"{program_name}: {decode_key(k)}" for k in loop.members)
    return lines


def tsort(
    source: TokenSource,
    sink: BinaryIO | None = None,
    diagnostics: TextIO | None = None,
    *,
    config: SortConfig | None = None,
) -> SortResult:
    """
    Topologically sort the token pairs read from `source`.

    - Writes each key plus `config.line_terminator` to `sink` as it is emitted.
    - Writes loop diagnostics to `diagnostics` (when given and enabled).
    - Raises MalformedInputError on an odd token count, before anything is written.
    """

    cfg = config or SortConfig()
    graph = GraphBuilder().consume(iter_tokens(source, chunk_size=cfg.read_chunk_size))

    emit = None
    if sink is not None:
        terminator = cfg.line_terminator

        def emit(key: bytes) -> None:
            sink.write(key + terminator)

    on_loop = None
    if diagnostics is not None and cfg.report_loops:

        def on_loop(loop: Loop) -> None:
            for line in format_loop(loop, program_name=cfg.program_name):
                print(line, file=diagnostics)

    state = Scheduler(graph, emit=emit, on_loop=on_loop).run()
    if sink is not None:
        sink.flush()

    logger.debug(
        "Sorted %d node(s) in %d seed pass(es); %d loop(s) broken.",
        graph.node_count,
        state.seed_passes,
        len(state.loops),
    )
    return SortResult(
        order=state.order,
        loops=state.loops,
        node_count=graph.node_count,
        edge_count=graph.edge_count,
    )


def sort_pairs(pairs: Iterable[tuple[bytes | str, bytes | str]]) -> SortResult:
    """
    In-memory variant of `tsort` for already-paired keys (str keys are UTF-8 encoded).
    """

    def _b(v: bytes | str) -> bytes:
        return v.encode("utf-8") if isinstance(v, str) else v

    graph = GraphBuilder.from_pairs((_b(a), _b(b)) for a, b in pairs)
    state = Scheduler(graph).run()
    return SortResult(
        order=state.order,
        loops=state.loops,
        node_count=graph.node_count,
        edge_count=graph.edge_count,
    )
