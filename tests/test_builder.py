"""
Tests for graph construction from token pairs.
"""

import pytest

from tsortkit.engine.builder import GraphBuilder
from tsortkit.engine.errors import MalformedInputError


def _node(graph, key):
    reg = graph.registry
    return reg.node(reg.find(key))


class TestGraphBuilder:
    def test_records_edge_and_indegree(self):
        g = GraphBuilder.from_pairs([(b"a", b"b")])
        assert g.node_count == 2
        assert g.edge_count == 1
        a, b = _node(g, b"a"), _node(g, b"b")
        assert [g.registry.key(i) for i in a.successors] == [b"b"]
        assert a.indegree == 0
        assert b.indegree == 1

    def test_self_pair_registers_token_without_edge(self):
        b = GraphBuilder()
        b.add_pair(b"x", b"x")
        g = b.finish()
        assert g.node_count == 1
        assert g.edge_count == 0
        assert b.self_pairs == 1
        x = _node(g, b"x")
        assert x.indegree == 0
        assert list(x.successors) == []

    def test_duplicate_pairs_keep_multiplicity(self):
        g = GraphBuilder.from_pairs([(b"a", b"b"), (b"a", b"b")])
        assert g.edge_count == 2
        assert _node(g, b"b").indegree == 2
        assert len(_node(g, b"a").successors) == 2

    def test_successors_newest_first(self):
        g = GraphBuilder.from_pairs([(b"a", b"b"), (b"a", b"c"), (b"a", b"d")])
        keys = [g.registry.key(i) for i in _node(g, b"a").successors]
        assert keys == [b"d", b"c", b"b"]

    def test_consume_tokens(self):
        g = GraphBuilder().consume([b"a", b"b", b"b", b"c", b"a", b"b"])
        assert g.node_count == 3
        assert g.edge_count == 3
        assert g.registry.keys() == [b"a", b"b", b"c"]

    def test_consume_odd_tokens_fails(self):
        with pytest.raises(MalformedInputError):
            GraphBuilder().consume([b"a", b"b", b"c"])

    def test_empty(self):
        g = GraphBuilder().consume([])
        assert g.node_count == 0
        assert g.edge_count == 0
