from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .engine.errors import ConfigError

DEFAULT_READ_CHUNK_SIZE = 64 * 1024

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class SortConfig:
    """
    Runtime knobs for one sort.

    Note: none of these change the computed order; they only affect how input is
    read and how results and diagnostics are written.
    """

    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE
    line_terminator: bytes = b"\n"

    # Prefix for diagnostic lines ("tsort: input contains a loop:")
    program_name: str = "tsort"

    # When False, loops are still broken (and change the status) but not printed.
    report_loops: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.read_chunk_size, int) or self.read_chunk_size < 1:
            raise ConfigError("read_chunk_size must be an integer >= 1.")
        if not self.line_terminator:
            raise ConfigError("line_terminator must be non-empty.")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SortConfig":
        env = os.environ if environ is None else environ

        chunk_raw = env.get("TSORT_READ_CHUNK_SIZE")
        chunk_size = DEFAULT_READ_CHUNK_SIZE
        if chunk_raw is not None and chunk_raw.strip():
            try:
                chunk_size = int(chunk_raw.strip())
            except ValueError:
                raise ConfigError(
                    f"TSORT_READ_CHUNK_SIZE must be an integer (got {chunk_raw!r}).",
                    env_var="TSORT_READ_CHUNK_SIZE",
                ) from None
            if chunk_size < 1:
                raise ConfigError("TSORT_READ_CHUNK_SIZE must be >= 1.", env_var="TSORT_READ_CHUNK_SIZE")

        quiet_raw = str(env.get("TSORT_QUIET_LOOPS", "")).strip().lower()
        if quiet_raw in _TRUE_VALUES:
            report_loops = False
        elif quiet_raw in _FALSE_VALUES:
            report_loops = True
        else:
            raise ConfigError(
                f"TSORT_QUIET_LOOPS must be a boolean (got {quiet_raw!r}).",
                env_var="TSORT_QUIET_LOOPS",
            )

        return cls(read_chunk_size=chunk_size, report_loops=report_loops)
