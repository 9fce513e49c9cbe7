"""
Temporal graph module.

This module provides the temporal graph representation and its I/O:
- TemporalGraph: immutable sequence of NetworkIt snapshots over a fixed
  node universe
- Construction from (time, edge) records, per-step edge lists and contact
  interval tables or files
- Export to contact interval and creation/deletion event files
"""

# Representation (must be imported before export)
from .temporal_graph import (
    Edge,
    SnapshotEdges,
    TemporalGraph,
    snapshot_from_pairs,
    require_temporal_graph
)

# Construction functions
from .construction import (
    build_temporal_graph,
    build_from_snapshots,
    build_from_contact_intervals,
    read_contact_file,
    get_temporal_graph_info
)

# Export functions
from .export import (
    export_temporal_graph,
    to_contact_intervals,
    to_create_delete_events
)
