"""
Tests for the JSON report model.
"""

import json

import pytest
from pydantic import ValidationError

from tsortkit import SortStatus, sort_pairs
from tsortkit.models.report import LoopReport, SortReport


class TestSortReport:
    def test_from_acyclic_result(self):
        report = SortReport.from_result(sort_pairs([("a", "b"), ("b", "c")]))
        assert report.status == SortStatus.OK
        assert report.order == ["a", "b", "c"]
        assert report.loops == []
        assert report.node_count == 3
        assert report.edge_count == 2

    def test_from_loop_result(self):
        report = SortReport.from_result(sort_pairs([("a", "b"), ("b", "a")]))
        assert report.status == SortStatus.LOOP
        assert report.loops[0].members == ["a", "b"]
        assert report.loops[0].retracted == ("b", "a")

    def test_json_shape(self):
        report = SortReport.from_result(sort_pairs([("x", "y")]))
        data = json.loads(report.model_dump_json())
        assert data == {
            "schema_version": "0.1",
            "status": "ok",
            "order": ["x", "y"],
            "loops": [],
            "node_count": 2,
            "edge_count": 1,
        }

    def test_rejects_incomplete_order(self):
        with pytest.raises(ValidationError):
            SortReport(status=SortStatus.OK, order=["a"], node_count=2)

    def test_rejects_status_without_loops(self):
        with pytest.raises(ValidationError):
            SortReport(status=SortStatus.LOOP, order=[], node_count=0)


class TestLoopReport:
    def test_retracted_must_close_loop(self):
        with pytest.raises(ValidationError):
            LoopReport(members=["a", "b", "c"], retracted=("a", "b"))

    def test_needs_two_members(self):
        with pytest.raises(ValidationError):
            LoopReport(members=["a"], retracted=("a", "a"))
