from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from ..engine.runner import SortResult, SortStatus, decode_key

SCHEMA_VERSION = "0.1"


class LoopReport(BaseModel):
    members: list[str] = Field(min_length=2)
    retracted: tuple[str, str]

    @model_validator(mode="after")
    def _retracted_edge_closes_loop(self) -> "LoopReport":
        if self.retracted != (self.members[-1], self.members[0]):
            raise ValueError("retracted edge must run from the last member back to the first.")
        return self


class SortReport(BaseModel):
    """
    Machine-readable outcome of one sort (`tsort --format json`).
    """

    schema_version: str = SCHEMA_VERSION
    status: SortStatus
    order: list[str] = Field(default_factory=list)
    loops: list[LoopReport] = Field(default_factory=list)
    node_count: int = Field(default=0, ge=0)
    edge_count: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _validate_consistency(self) -> "SortReport":
        if len(self.order) != self.node_count:
            raise ValueError("order must contain every node exactly once.")
        if (self.status == SortStatus.LOOP) != bool(self.loops):
            raise ValueError("status must be 'loop' exactly when loops were reported.")
        return self

    @classmethod
    def from_result(cls, result: SortResult) -> "SortReport":
        return cls(
            status=result.status,
            order=[decode_key(k) for k in result.order],
            loops=[
                LoopReport(
                    members=[decode_key(k) for k in loop.members],
                    retracted=(decode_key(loop.retracted[0]), decode_key(loop.retracted[1])),
                )
                for loop in result.loops
            ],
            node_count=result.node_count,
            edge_count=result.edge_count,
        )
