"""
Tests for temporal metrics module.

This module tests the temporal metrics functionality including:
- Average degree per snapshot
- Creation and deletion fractions, including degenerate denominators
- Tabular export and summary statistics of metric series
"""

import numpy as np
import polars as pl
import pytest

from edgeMarkov.common.exceptions import ConfigurationError, InvalidInputError, InvalidParametersError
from edgeMarkov.common.id_mapper import IDMapper
from edgeMarkov.network.construction import build_from_snapshots
from edgeMarkov.network.temporal_graph import TemporalGraph
from edgeMarkov.timeseries.temporal_metrics import (
    TemporalMetrics,
    average_degree,
    calculate_series_statistics,
    compute_temporal_metrics,
    count_edge_changes,
    creation_deletion_fraction,
    histogram_to_dataframe,
    metrics_to_dataframe,
    truncate_histogram,
    _calculate_trend_slope
)


class TestAverageDegree:
    """Test average degree computation."""

    def test_values(self):
        graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
        np.testing.assert_allclose(average_degree(graph), [0.5, 1.0])

    def test_length_matches_duration(self):
        graph = build_from_snapshots([[], [(1, 2)], [], [(2, 3)], []])
        assert len(average_degree(graph)) == 5

    def test_matches_mean_degree(self):
        graph = build_from_snapshots([[(1, 2), (2, 3)], [(1, 3)]], nodes=[1, 2, 3, 4])
        expected = [
            np.mean([graph.degree(t, v) for v in graph.node_set()]) for t in range(len(graph))
        ]
        np.testing.assert_allclose(average_degree(graph), expected)

    def test_empty_node_universe(self):
        graph = TemporalGraph.from_internal_pairs([[], [], []], IDMapper())
        np.testing.assert_array_equal(average_degree(graph), [0.0, 0.0, 0.0])

    def test_rejects_non_graph(self):
        with pytest.raises(InvalidInputError):
            average_degree([[(1, 2)]])


class TestCreationDeletionFraction:
    """Test creation and deletion fractions."""

    def test_creation_only(self):
        graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
        creation, deletion = creation_deletion_fraction(graph)

        np.testing.assert_allclose(creation, [0.2])
        np.testing.assert_allclose(deletion, [0.0])

    def test_full_deletion(self):
        graph = build_from_snapshots([[(1, 2), (3, 4)], []])
        creation, deletion = creation_deletion_fraction(graph)

        np.testing.assert_allclose(creation, [0.0])
        np.testing.assert_allclose(deletion, [1.0])

    def test_empty_previous_snapshot(self):
        graph = build_from_snapshots([[], [], [(1, 2)]], nodes=[1, 2, 3])
        creation, deletion = creation_deletion_fraction(graph)

        np.testing.assert_allclose(deletion, [0.0, 0.0])
        np.testing.assert_allclose(creation, [0.0, 1.0 / 3.0])

    def test_complete_previous_snapshot(self):
        complete = [(1, 2), (1, 3), (2, 3)]
        graph = build_from_snapshots([complete, complete])
        creation, deletion = creation_deletion_fraction(graph)

        np.testing.assert_allclose(creation, [0.0])
        np.testing.assert_allclose(deletion, [0.0])

    def test_single_snapshot(self):
        graph = build_from_snapshots([[(1, 2)]])
        creation, deletion = creation_deletion_fraction(graph)

        assert creation.size == 0
        assert deletion.size == 0

    def test_fractions_within_unit_interval(self):
        rng = np.random.default_rng(3)
        nodes = list(range(8))
        snapshots = [
            [(u, v) for u in nodes for v in nodes if u < v and rng.random() < 0.3]
            for _ in range(20)
        ]
        graph = build_from_snapshots(snapshots, nodes=nodes)
        creation, deletion = creation_deletion_fraction(graph)

        assert len(creation) == len(deletion) == 19
        assert np.all((creation >= 0) & (creation <= 1))
        assert np.all((deletion >= 0) & (deletion <= 1))

    def test_count_edge_changes(self):
        graph = build_from_snapshots([[(1, 2), (2, 3)], [(2, 3), (3, 4)], [(3, 4)]])
        created, deleted = count_edge_changes(graph)

        assert created.tolist() == [1, 0]
        assert deleted.tolist() == [1, 1]


class TestComputeTemporalMetrics:
    """Test the bundled metrics and their tables."""

    def setup_method(self):
        self.graph = build_from_snapshots([[(1, 2)], [(1, 2)], [], [], [(1, 2)], [(1, 2), (3, 4)]])
        self.metrics = compute_temporal_metrics(self.graph)

    def test_bundle(self):
        assert isinstance(self.metrics, TemporalMetrics)
        assert self.metrics.duration == 6
        assert len(self.metrics.creation_fraction) == 5
        assert self.metrics.inter_contact_histogram == {3: 1}

    def test_series(self):
        assert set(self.metrics.series()) == {"average_degree", "creation_fraction", "deletion_fraction"}

    def test_metrics_to_dataframe(self):
        df = metrics_to_dataframe(self.metrics)

        assert df.columns == ["time", "average_degree", "creation_fraction", "deletion_fraction"]
        assert df.height == 6
        assert df["creation_fraction"][0] is None
        assert df["deletion_fraction"][2] == pytest.approx(1.0)
        assert self.metrics.to_dataframe().equals(df)

    def test_histogram_to_dataframe(self):
        df = histogram_to_dataframe({5: 1, 2: 4})

        assert df["gap"].to_list() == [2, 5]
        assert df["count"].to_list() == [4, 1]
        assert df.schema["gap"] == pl.Int64


class TestTruncateHistogram:
    """Test removal of rare histogram buckets."""

    def test_default_fraction(self):
        histogram = {2: 1000, 3: 10, 4: 9, 80: 1}
        assert truncate_histogram(histogram) == {2: 1000, 3: 10}

    def test_custom_fraction(self):
        assert truncate_histogram({2: 100, 3: 40, 50: 1}, fraction=0.05) == {2: 100, 3: 40}

    def test_zero_fraction_keeps_everything(self):
        assert truncate_histogram({3: 1, 2: 5}, fraction=0.0) == {2: 5, 3: 1}

    def test_empty(self):
        assert truncate_histogram({}) == {}

    def test_invalid_fraction(self):
        with pytest.raises(InvalidParametersError):
            truncate_histogram({2: 1}, fraction=2.0)


class TestSeriesStatistics:
    """Test summary statistics of metric series."""

    def test_statistics(self):
        df = calculate_series_statistics(
            {"x": [1.0, 2.0, 3.0], "y": [4.0, 4.0]},
            ["mean", "min", "max", "trend"]
        )

        assert df.columns == ["series", "mean", "min", "max", "trend"]
        x = df.filter(pl.col("series") == "x").row(0, named=True)
        assert x["mean"] == pytest.approx(2.0)
        assert x["trend"] == pytest.approx(1.0)
        y = df.filter(pl.col("series") == "y").row(0, named=True)
        assert y["trend"] == 0.0

    def test_empty_series_gives_nulls(self):
        df = calculate_series_statistics({"creation_fraction": []}, ["mean", "std"])
        assert df.row(0) == ("creation_fraction", None, None)

    def test_invalid_statistics(self):
        with pytest.raises(ConfigurationError):
            calculate_series_statistics({"x": [1.0]}, ["median"])
        with pytest.raises(ConfigurationError):
            calculate_series_statistics({"x": [1.0]}, [])

    def test_trend_slope(self):
        assert _calculate_trend_slope(np.array([5.0])) == 0.0
        assert _calculate_trend_slope(np.array([3.0, 1.0, -1.0])) == pytest.approx(-2.0)
