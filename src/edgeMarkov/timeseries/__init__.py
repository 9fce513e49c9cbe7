"""
Temporal metrics module.

- Average degree per snapshot
- Creation and deletion fractions per step
- Contact intervals and inter-contact time histograms
- Tabular export and summary statistics of the metric series
"""

from .contacts import (
    ContactInterval,
    contact_intervals,
    inter_contact_histogram
)

from .temporal_metrics import (
    AVAILABLE_STATISTICS,
    TemporalMetrics,
    average_degree,
    count_edge_changes,
    creation_deletion_fraction,
    compute_temporal_metrics,
    metrics_to_dataframe,
    histogram_to_dataframe,
    truncate_histogram,
    calculate_series_statistics
)
