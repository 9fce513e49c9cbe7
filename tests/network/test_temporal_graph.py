"""
Tests for the TemporalGraph representation.

This module tests:
- Snapshot access and time index bounds
- Degree, edge and node queries in original node ids
- Validation of snapshots at construction time
"""

import networkit as nk
import numpy as np
import pytest

from edgeMarkov.common.exceptions import (
    InvalidInputError,
    OutOfRangeError
)
from edgeMarkov.common.id_mapper import IDMapper
from edgeMarkov.network.construction import build_from_snapshots
from edgeMarkov.network.temporal_graph import (
    TemporalGraph,
    require_temporal_graph,
    snapshot_from_pairs
)
from edgeMarkov.timeseries.temporal_metrics import average_degree, count_edge_changes


class TestSnapshotFromPairs:
    """Test building a single NetworkIt snapshot."""

    def test_duplicates_added_once(self):
        graph = snapshot_from_pairs(3, [(0, 1), (1, 0), (0, 1), (1, 2)])

        assert graph.numberOfNodes() == 3
        assert graph.numberOfEdges() == 2
        assert not graph.isDirected()
        assert not graph.isWeighted()

    def test_self_loop_rejected(self):
        with pytest.raises(InvalidInputError, match="Self-loop"):
            snapshot_from_pairs(3, [(1, 1)])


class TestTemporalGraphQueries:
    """Test queries on a small trace."""

    def setup_method(self):
        self.graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)], []])

    def test_length_and_duration(self):
        assert len(self.graph) == 3
        assert self.graph.duration == 3

    def test_node_set(self):
        assert self.graph.node_set() == frozenset({1, 2, 3, 4})
        assert self.graph.number_of_nodes() == 4

    def test_degree(self):
        assert self.graph.degree(0, 1) == 1
        assert self.graph.degree(0, 3) == 0
        assert self.graph.degree(1, 3) == 1
        assert self.graph.degree(2, 1) == 0

    def test_handshake(self):
        for t in range(len(self.graph)):
            total = sum(self.graph.degree(t, v) for v in self.graph.node_set())
            assert total == 2 * self.graph.number_of_edges(t)

    def test_edges_are_restartable(self):
        edges = self.graph.edges(1)

        assert sorted(edges) == [(1, 2), (3, 4)]
        assert sorted(edges) == [(1, 2), (3, 4)]
        assert len(edges) == 2
        assert (2, 1) in edges
        assert (1, 3) not in edges
        assert (1, 99) not in edges

    def test_has_edge(self):
        assert self.graph.has_edge(1, 4, 3)
        assert not self.graph.has_edge(0, 3, 4)
        assert not self.graph.has_edge(0, 1, "unknown")

    def test_internal_edges_are_normalized(self):
        for t in range(len(self.graph)):
            for u, v in self.graph.internal_edges(t):
                assert u < v

    def test_edge_counts(self):
        counts = self.graph.edge_counts
        counts[0] = 5

        assert self.graph.edge_counts.tolist() == [1, 2, 0]

    def test_counts_follow_snapshot_contents(self):
        graph = build_from_snapshots([[(1, 2)], [(1, 2)]], nodes=[1, 2, 3])
        graph.at(1).addEdge(1, 2)

        created, _ = count_edge_changes(graph)
        assert graph.number_of_edges(1) == 2
        assert graph.edge_counts.tolist() == [1, 2]
        assert created.tolist() == [1]
        np.testing.assert_allclose(average_degree(graph), [2.0 / 3.0, 4.0 / 3.0])

    def test_at_returns_networkit_graph(self):
        snapshot = self.graph.at(1)

        assert isinstance(snapshot, nk.Graph)
        assert snapshot.numberOfNodes() == 4

    def test_repr(self):
        assert repr(self.graph) == "TemporalGraph(nodes=4, duration=3, edges=3)"


class TestTimeBounds:
    """Test out-of-range time indices."""

    def setup_method(self):
        self.graph = build_from_snapshots([[(1, 2)], []])

    @pytest.mark.parametrize("t", [-1, 2, 10])
    def test_at_out_of_range(self, t):
        with pytest.raises(OutOfRangeError):
            self.graph.at(t)

    def test_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            self.graph.degree(5, 1)

    def test_edges_and_counts_check_time(self):
        with pytest.raises(OutOfRangeError):
            self.graph.edges(2)
        with pytest.raises(OutOfRangeError):
            self.graph.number_of_edges(-1)

    def test_unknown_node_degree(self):
        with pytest.raises(InvalidInputError):
            self.graph.degree(0, 42)


class TestTemporalGraphValidation:
    """Test validation of snapshots passed to the constructor."""

    def setup_method(self):
        self.mapper = IDMapper.from_nodes([1, 2, 3])

    def test_no_snapshots(self):
        with pytest.raises(InvalidInputError, match="at least one snapshot"):
            TemporalGraph([], self.mapper)

    def test_wrong_node_count(self):
        with pytest.raises(InvalidInputError, match="expected 3"):
            TemporalGraph([nk.Graph(4)], self.mapper)

    def test_directed_snapshot(self):
        with pytest.raises(InvalidInputError, match="directed"):
            TemporalGraph([nk.Graph(3, directed=True)], self.mapper)

    def test_self_loop_snapshot(self):
        snapshot = nk.Graph(3)
        snapshot.addEdge(1, 1)
        with pytest.raises(InvalidInputError, match="self-loops"):
            TemporalGraph([snapshot], self.mapper)

    def test_not_a_graph(self):
        with pytest.raises(InvalidInputError, match="NetworkIt Graph"):
            TemporalGraph([[(0, 1)]], self.mapper)

    def test_from_internal_pairs_out_of_bounds(self):
        with pytest.raises(InvalidInputError, match="outside"):
            TemporalGraph.from_internal_pairs([[(0, 7)]], self.mapper)

    def test_empty_node_universe(self):
        graph = TemporalGraph.from_internal_pairs([[], []], IDMapper())

        assert len(graph) == 2
        assert graph.number_of_nodes() == 0
        assert np.all(graph.edge_counts == 0)


class TestRequireTemporalGraph:
    """Test the input guard used by analyses."""

    def test_rejects_other_types(self):
        with pytest.raises(InvalidInputError, match="expects a TemporalGraph"):
            require_temporal_graph([[(1, 2)]], "average_degree")

    def test_returns_graph(self):
        graph = build_from_snapshots([[(1, 2)]])
        assert require_temporal_graph(graph, "f") is graph
