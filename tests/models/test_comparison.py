"""
Tests for observed vs. simulated comparison.
"""

import polars as pl
import pytest

from edgeMarkov.common.exceptions import ConfigurationError, InvalidInputError
from edgeMarkov.network.construction import build_from_snapshots
from edgeMarkov.models.comparison import ComparisonReport, compare
from edgeMarkov.models.edge_markovian import ModelParameters, generate_edge_markovian_graph


class TestCompare:
    """Test the comparison workflow."""

    def setup_method(self):
        self.observed = generate_edge_markovian_graph(25, p=0.05, q=0.4, duration=30, rng=5)

    def test_report_contents(self):
        report = compare(self.observed, rng=1)

        assert isinstance(report, ComparisonReport)
        assert report.model == "edge_markovian"
        assert isinstance(report.parameters, ModelParameters)
        assert len(report.simulated) == len(self.observed)
        assert report.simulated.node_set() == self.observed.node_set()
        assert report.observed_metrics.duration == report.simulated_metrics.duration == 30

    def test_simulation_starts_from_observed_first_snapshot(self):
        report = compare(self.observed, rng=1)
        assert sorted(report.simulated.edges(0)) == sorted(self.observed.edges(0))

    def test_reproducible_with_seed(self):
        first = compare(self.observed, rng=3)
        second = compare(self.observed, rng=3)

        assert first.simulated_metrics.average_degree.tolist() == \
            second.simulated_metrics.average_degree.tolist()

    def test_time_dependent_model(self):
        report = compare(self.observed, rng=2, model="time_dependent")

        assert report.model == "time_dependent"
        assert len(report.simulated) == len(self.observed)

    def test_summary(self):
        summary = compare(self.observed, rng=1).summary(["mean", "max"])

        assert summary.columns == ["trace", "series", "mean", "max"]
        assert summary.height == 6
        assert set(summary["trace"].to_list()) == {"observed", "simulated"}
        observed_degree = summary.filter(
            (pl.col("trace") == "observed") & (pl.col("series") == "average_degree")
        )
        assert observed_degree["mean"][0] == pytest.approx(
            float(compare(self.observed, rng=1).observed_metrics.average_degree.mean())
        )

    def test_single_snapshot(self):
        observed = build_from_snapshots([[(1, 2)]], nodes=[1, 2, 3])
        report = compare(observed, rng=0)

        assert report.parameters == ModelParameters(p=0.0, q=0.0)
        assert len(report.simulated) == 1
        assert report.simulated_metrics.inter_contact_histogram == {}

    def test_unknown_model(self):
        with pytest.raises(ConfigurationError):
            compare(self.observed, model="random_walk")

    def test_rejects_non_graph(self):
        with pytest.raises(InvalidInputError):
            compare([[(1, 2)]])
