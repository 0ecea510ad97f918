from __future__ import annotations

__version__ = "0.1.0"

from .config import SortConfig
from .engine.runner import SortResult, SortStatus, sort_pairs, tsort

__all__ = [
    "SortConfig",
    "SortResult",
    "SortStatus",
    "__version__",
    "sort_pairs",
    "tsort",
]
