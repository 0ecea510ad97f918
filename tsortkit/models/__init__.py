from __future__ import annotations

from .report import LoopReport, SortReport

__all__ = [
    "LoopReport",
    "SortReport",
]
