"""
Common utilities for the edgeMarkov library.

This module provides shared functionality used across all other modules:
- ID mapping between original node ids and NetworkIt integer ids
- Compact indexing of unordered node pairs
- Input validation for contact tables and node universes
- Logging configuration
- Custom exception hierarchy
"""

# Exception hierarchy - available for import throughout the library
from .exceptions import (
    TemporalNetworkError,
    ValidationError,
    InvalidInputError,
    OutOfRangeError,
    DataFormatError,
    ConfigurationError,
    InvalidParametersError,
    GraphConstructionError,
    ComputationError,
    validate_parameter,
    require_positive,
    require_probability
)

# Core utilities
from .id_mapper import IDMapper
from .pairs import (
    number_of_pairs,
    pair_index,
    pair_indices,
    pairs_from_indices
)
from .validators import (
    CONTACT_COLUMNS,
    validate_contact_dataframe,
    validate_node_membership
)

# Logging configuration
from .logging_config import (
    setup_logging,
    get_logger,
    configure_external_library_logging,
    log_function_entry,
    log_performance_metric,
    LoggingTimer,
    JSONFormatter
)
