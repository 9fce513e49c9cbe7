"""
Temporal metrics of contact traces.

This module computes the statistics used to compare an observed trace with
an Edge-Markovian simulation:

- average degree at every time index
- fraction of created and deleted edges at every step
- inter-contact time histogram (see :mod:`edgeMarkov.timeseries.contacts`)

and turns them into polars DataFrames and summary statistics for whatever
presentation layer consumes them.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import polars as pl
from scipy import stats

from ..common.exceptions import ConfigurationError, require_probability
from ..common.pairs import number_of_pairs
from ..common.logging_config import get_logger, LoggingTimer
from ..network.temporal_graph import TemporalGraph, require_temporal_graph
from .contacts import inter_contact_histogram

logger = get_logger(__name__)

AVAILABLE_STATISTICS = ["mean", "std", "min", "max", "trend"]


@dataclass(frozen=True)
class TemporalMetrics:
    """
    All metrics of one trace.

    Attributes
    ----------
    average_degree : np.ndarray
        Length T; mean node degree at every time index
    creation_fraction : np.ndarray
        Length T - 1; entry ``i`` describes step ``t = i + 1``
    deletion_fraction : np.ndarray
        Length T - 1; entry ``i`` describes step ``t = i + 1``
    inter_contact_histogram : Dict[int, int]
        Gap length -> count
    """

    average_degree: np.ndarray
    creation_fraction: np.ndarray
    deletion_fraction: np.ndarray
    inter_contact_histogram: Dict[int, int] = field(default_factory=dict)

    @property
    def duration(self) -> int:
        return len(self.average_degree)

    def series(self) -> Dict[str, np.ndarray]:
        """The per-time series keyed by name."""
        return {
            "average_degree": self.average_degree,
            "creation_fraction": self.creation_fraction,
            "deletion_fraction": self.deletion_fraction,
        }

    def to_dataframe(self) -> pl.DataFrame:
        """Per-time table, see :func:`metrics_to_dataframe`."""
        return metrics_to_dataframe(self)


def average_degree(graph: TemporalGraph) -> np.ndarray:
    """
    Average node degree at every time index.

    The value at ``t`` is ``2 * |E(t)| / n``, the mean of ``degree(t, v)``
    over the whole node universe, isolated nodes included.

    Parameters
    ----------
    graph : TemporalGraph
        Trace to analyze

    Returns
    -------
    np.ndarray
        Float array of length T; all zeros when the node universe is empty

    Raises
    ------
    InvalidInputError
        If ``graph`` is not a non-empty TemporalGraph

    Examples
    --------
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
    >>> average_degree(graph)
    array([0.5, 1. ])
    """
    graph = require_temporal_graph(graph, "average_degree")
    n = graph.number_of_nodes()
    counts = graph.edge_counts.astype(np.float64)

    if n == 0:
        logger.warning("Average degree requested on an empty node universe, reporting zeros")
        return np.zeros(len(graph), dtype=np.float64)

    return 2.0 * counts / n


def count_edge_changes(graph: TemporalGraph) -> Tuple[np.ndarray, np.ndarray]:
    """
    Number of created and deleted edges at every step ``t = 1..T-1``.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(created, deleted)`` integer arrays of length T - 1, where
        ``created[t-1] = |E(t) \\ E(t-1)|`` and
        ``deleted[t-1] = |E(t-1) \\ E(t)|``
    """
    graph = require_temporal_graph(graph, "count_edge_changes")
    steps = len(graph) - 1
    created = np.zeros(steps, dtype=np.int64)
    deleted = np.zeros(steps, dtype=np.int64)
    counts = graph.edge_counts

    for t in range(1, len(graph)):
        previous = graph.at(t - 1)
        current = graph.at(t)
        new_edges = sum(1 for u, v in current.iterEdges() if not previous.hasEdge(u, v))
        kept = int(counts[t]) - new_edges
        created[t - 1] = new_edges
        deleted[t - 1] = int(counts[t - 1]) - kept

    return created, deleted


def creation_deletion_fraction(graph: TemporalGraph) -> Tuple[np.ndarray, np.ndarray]:
    """
    Fraction of created and deleted edges at every step.

    For ``t = 1..T-1``:

    - creation: ``|E(t) \\ E(t-1)| / (C(n, 2) - |E(t-1)|)``, i.e. created
      edges over the pairs that were absent and could have appeared; 0 when
      ``E(t-1)`` is complete
    - deletion: ``|E(t-1) \\ E(t)| / |E(t-1)|``; 0 when ``E(t-1)`` is empty

    Parameters
    ----------
    graph : TemporalGraph
        Trace to analyze

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(creation, deletion)`` float arrays of length T - 1, both empty
        when T = 1

    Raises
    ------
    InvalidInputError
        If ``graph`` is not a non-empty TemporalGraph

    Examples
    --------
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
    >>> creation_deletion_fraction(graph)
    (array([0.2]), array([0.]))
    """
    graph = require_temporal_graph(graph, "creation_deletion_fraction")
    created, deleted = count_edge_changes(graph)

    previous_counts = graph.edge_counts[:-1].astype(np.float64)
    creatable = number_of_pairs(graph.number_of_nodes()) - previous_counts

    creation = np.divide(
        created, creatable,
        out=np.zeros(len(created), dtype=np.float64),
        where=creatable > 0
    )
    deletion = np.divide(
        deleted, previous_counts,
        out=np.zeros(len(deleted), dtype=np.float64),
        where=previous_counts > 0
    )
    return creation, deletion


def compute_temporal_metrics(graph: TemporalGraph) -> TemporalMetrics:
    """
    Compute every temporal metric of a trace.

    Raises
    ------
    InvalidInputError
        If ``graph`` is not a non-empty TemporalGraph

    Examples
    --------
    >>> metrics = compute_temporal_metrics(graph)
    >>> metrics.average_degree.mean(), metrics.inter_contact_histogram
    """
    graph = require_temporal_graph(graph, "compute_temporal_metrics")
    logger.info("Computing temporal metrics: %d nodes, %d snapshots",
                graph.number_of_nodes(), len(graph))

    with LoggingTimer("compute_temporal_metrics", {"nodes": graph.number_of_nodes(),
                                                   "steps": len(graph)}):
        degrees = average_degree(graph)
        creation, deletion = creation_deletion_fraction(graph)
        histogram = inter_contact_histogram(graph)

    return TemporalMetrics(
        average_degree=degrees,
        creation_fraction=creation,
        deletion_fraction=deletion,
        inter_contact_histogram=histogram
    )


def metrics_to_dataframe(metrics: TemporalMetrics) -> pl.DataFrame:
    """
    Per-time table of the metric series.

    Returns
    -------
    pl.DataFrame
        Columns ``time``, ``average_degree``, ``creation_fraction`` and
        ``deletion_fraction``; the fractions are null at ``time = 0``
    """
    duration = metrics.duration
    creation = [None] + metrics.creation_fraction.tolist() if duration else []
    deletion = [None] + metrics.deletion_fraction.tolist() if duration else []
    return pl.DataFrame({
        "time": pl.Series(range(duration), dtype=pl.Int64),
        "average_degree": pl.Series(metrics.average_degree.tolist(), dtype=pl.Float64),
        "creation_fraction": pl.Series(creation, dtype=pl.Float64),
        "deletion_fraction": pl.Series(deletion, dtype=pl.Float64),
    })


def histogram_to_dataframe(histogram: Mapping[int, int]) -> pl.DataFrame:
    """Two-column ``gap`` / ``count`` table sorted by gap."""
    gaps = sorted(histogram)
    return pl.DataFrame({
        "gap": pl.Series(gaps, dtype=pl.Int64),
        "count": pl.Series([histogram[g] for g in gaps], dtype=pl.Int64),
    })


def truncate_histogram(histogram: Mapping[int, int], fraction: float = 0.01) -> Dict[int, int]:
    """
    Drop buckets whose count is below ``fraction`` of the largest bucket.

    Parameters
    ----------
    histogram : Mapping[int, int]
        Gap -> count
    fraction : float, default 0.01
        Threshold relative to the largest count, in [0, 1]

    Returns
    -------
    Dict[int, int]
        Remaining buckets ordered by gap

    Examples
    --------
    >>> truncate_histogram({2: 100, 3: 40, 50: 1}, fraction=0.05)
    {2: 100, 3: 40}
    """
    fraction = require_probability(fraction, "fraction")
    if not histogram:
        return {}
    threshold = fraction * max(histogram.values())
    return {gap: count for gap, count in sorted(histogram.items()) if count >= threshold}


def calculate_series_statistics(
    series: Mapping[str, Sequence[float]],
    statistics: List[str] = ["mean", "std", "trend"]
) -> pl.DataFrame:
    """
    Summary statistics for named numeric series.

    Parameters
    ----------
    series : Mapping[str, Sequence[float]]
        Series name -> values (e.g. :meth:`TemporalMetrics.series`)
    statistics : List[str], default ["mean", "std", "trend"]
        Any of:
        - "mean": average value
        - "std": population standard deviation
        - "min" / "max": extreme values
        - "trend": slope of a least-squares line over the index

    Returns
    -------
    pl.DataFrame
        One row per series with a ``series`` column plus one column per
        statistic. Empty series give nulls; trend and std are 0.0 for a
        single value.

    Raises
    ------
    ConfigurationError
        If ``statistics`` is empty or contains unknown names

    Examples
    --------
    >>> calculate_series_statistics({"x": [1.0, 2.0, 3.0]}, ["mean", "trend"])
    shape: (1, 3)
    """
    _validate_statistics(statistics)

    rows = []
    for name, values in series.items():
        values = np.asarray(values, dtype=np.float64)
        row: Dict[str, Optional[float]] = {"series": name}
        for statistic in statistics:
            row[statistic] = _calculate_statistic(values, statistic)
        rows.append(row)

    schema = {"series": pl.Utf8, **{statistic: pl.Float64 for statistic in statistics}}
    return pl.DataFrame(rows, schema=schema)


def _validate_statistics(statistics: List[str]) -> None:
    if not statistics:
        raise ConfigurationError("statistics list cannot be empty", parameter="statistics")

    invalid_stats = [s for s in statistics if s not in AVAILABLE_STATISTICS]
    if invalid_stats:
        raise ConfigurationError(
            f"Invalid statistics: {invalid_stats}",
            parameter="statistics",
            value=invalid_stats,
            valid_options=AVAILABLE_STATISTICS
        )


def _calculate_statistic(values: np.ndarray, statistic: str) -> Optional[float]:
    if values.size == 0:
        return None

    if statistic == "mean":
        return float(values.mean())
    elif statistic == "std":
        return float(values.std())
    elif statistic == "min":
        return float(values.min())
    elif statistic == "max":
        return float(values.max())
    elif statistic == "trend":
        return _calculate_trend_slope(values)
    return None


def _calculate_trend_slope(values: np.ndarray) -> float:
    """Slope of the least-squares line through ``(index, value)``."""
    if values.size < 2 or np.all(values == values[0]):
        return 0.0

    slope = stats.linregress(np.arange(values.size), values).slope
    return float(slope) if not np.isnan(slope) else 0.0
