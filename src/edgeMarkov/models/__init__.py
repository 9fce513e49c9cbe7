"""
Edge-Markovian models.

- Parameter estimation from observed traces
- Stationary and time-dependent simulation
- Observed vs. simulated comparison reports
"""

from .sampling import (
    as_generator,
    sample_creations,
    sample_deletions,
    transition
)

from .edge_markovian import (
    ModelParameters,
    EdgeMarkovianModel,
    TimeDependentEdgeMarkovianModel,
    estimate_parameters,
    estimate_time_dependent,
    generate_edge_markovian_graph
)

from .comparison import (
    AVAILABLE_MODELS,
    ComparisonReport,
    compare
)
