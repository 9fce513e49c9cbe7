"""
edgeMarkov - Temporal contact graphs and the Edge-Markovian model.

This package represents contact traces as sequences of graph snapshots,
measures their temporal statistics, and calibrates and simulates
Edge-Markovian random temporal graphs to compare against observed data.

Modules:
    common: Shared utilities for ID mapping, pair indexing, validation,
        logging and the exception hierarchy
    network: Temporal graph representation, construction and export
    timeseries: Temporal metrics (average degree, creation/deletion
        fractions, inter-contact times)
    models: Edge-Markovian estimation, simulation and comparison
"""

__version__ = "0.1.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"

from .common import (
    IDMapper,
    TemporalNetworkError,
    ValidationError,
    InvalidInputError,
    OutOfRangeError,
    DataFormatError,
    ConfigurationError,
    InvalidParametersError,
    GraphConstructionError,
    ComputationError,
    setup_logging,
    get_logger,
)
from .network import (
    TemporalGraph,
    build_temporal_graph,
    build_from_snapshots,
    build_from_contact_intervals,
    read_contact_file,
    get_temporal_graph_info,
    export_temporal_graph,
)
from .timeseries import (
    TemporalMetrics,
    average_degree,
    creation_deletion_fraction,
    inter_contact_histogram,
    contact_intervals,
    compute_temporal_metrics,
)
from .models import (
    ModelParameters,
    EdgeMarkovianModel,
    TimeDependentEdgeMarkovianModel,
    ComparisonReport,
    compare,
)

__all__ = [
    "IDMapper",
    "TemporalNetworkError",
    "ValidationError",
    "InvalidInputError",
    "OutOfRangeError",
    "DataFormatError",
    "ConfigurationError",
    "InvalidParametersError",
    "GraphConstructionError",
    "ComputationError",
    "setup_logging",
    "get_logger",
    "TemporalGraph",
    "build_temporal_graph",
    "build_from_snapshots",
    "build_from_contact_intervals",
    "read_contact_file",
    "get_temporal_graph_info",
    "export_temporal_graph",
    "TemporalMetrics",
    "average_degree",
    "creation_deletion_fraction",
    "inter_contact_histogram",
    "contact_intervals",
    "compute_temporal_metrics",
    "ModelParameters",
    "EdgeMarkovianModel",
    "TimeDependentEdgeMarkovianModel",
    "ComparisonReport",
    "compare",
]
