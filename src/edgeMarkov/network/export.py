"""
Temporal graph export.

Two tabular layouts are supported, both in original node ids:

- ``start_end``: one ``n1 n2 start end`` row per contact interval, with
  inclusive ends, ordered by start time
- ``create_delete``: one ``t n1 n2 C`` row when a contact starts and one
  ``t n1 n2 S`` row at the first time index where it is absent again,
  ordered by time. Contacts still active at the last snapshot have no
  ``S`` row.

Files are whitespace separated without header, matching what
:func:`~edgeMarkov.network.construction.read_contact_file` reads back.
"""

from pathlib import Path
from typing import Union

import polars as pl

from ..common.exceptions import ComputationError, ConfigurationError, validate_parameter
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..timeseries.contacts import contact_intervals
from .temporal_graph import TemporalGraph, require_temporal_graph

logger = get_logger(__name__)

SUPPORTED_FORMATS = ["start_end", "create_delete"]


def to_contact_intervals(graph: TemporalGraph) -> pl.DataFrame:
    """
    Contact interval table of a trace.

    Returns
    -------
    pl.DataFrame
        Columns ``n1``, ``n2``, ``start``, ``end`` sorted by ``start`` then
        by nodes

    Examples
    --------
    >>> to_contact_intervals(graph).head()
    """
    graph = require_temporal_graph(graph, "to_contact_intervals")
    rows = [
        (u, v, start, end)
        for (u, v), intervals in contact_intervals(graph).items()
        for start, end in intervals
    ]
    df = pl.DataFrame(rows, schema=["n1", "n2", "start", "end"], orient="row")
    if df.is_empty():
        return df
    return df.sort(["start", "n1", "n2"])


def to_create_delete_events(graph: TemporalGraph) -> pl.DataFrame:
    """
    Creation/deletion event table of a trace.

    Returns
    -------
    pl.DataFrame
        Columns ``t``, ``n1``, ``n2`` and ``event`` ("C" or "S") sorted by
        time, creations before deletions at equal time
    """
    graph = require_temporal_graph(graph, "to_create_delete_events")
    last = len(graph) - 1
    rows = []
    for (u, v), intervals in contact_intervals(graph).items():
        for start, end in intervals:
            rows.append((start, u, v, "C"))
            if end < last:
                rows.append((end + 1, u, v, "S"))

    df = pl.DataFrame(rows, schema=["t", "n1", "n2", "event"], orient="row")
    if df.is_empty():
        return df
    return df.sort(["t", "event", "n1", "n2"])


def export_temporal_graph(
    graph: TemporalGraph,
    output_path: Union[str, Path],
    format: str = "start_end",
    overwrite: bool = False
) -> Path:
    """
    Write a trace to a whitespace separated text file.

    Parameters
    ----------
    graph : TemporalGraph
        Trace to write
    output_path : Union[str, Path]
        Destination file; parent directories are created
    format : str, default "start_end"
        "start_end" or "create_delete"
    overwrite : bool, default False
        Replace an existing file

    Returns
    -------
    Path
        The written path

    Raises
    ------
    ConfigurationError
        If the format is unknown or the file exists and ``overwrite`` is False
    ComputationError
        If writing fails

    Examples
    --------
    >>> export_temporal_graph(trace, "out/simulated.txt")
    >>> export_temporal_graph(trace, "out/events.txt", format="create_delete")
    """
    log_function_entry("export_temporal_graph", format=format, output_path=output_path)
    validate_parameter(format, SUPPORTED_FORMATS, "format", "export_temporal_graph")

    path = Path(output_path)
    if path.exists() and not overwrite:
        raise ConfigurationError(
            f"File {path} already exists. Use overwrite=True to replace it.",
            parameter="overwrite",
            value=overwrite
        )

    with LoggingTimer("export_temporal_graph", {"format": format, "steps": len(graph)}):
        if format == "start_end":
            table = to_contact_intervals(graph)
        else:
            table = to_create_delete_events(graph)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            table.write_csv(path, separator=" ", include_header=False)
        except OSError as e:
            raise ComputationError(
                f"Temporal graph export failed: {e}",
                operation="export_temporal_graph",
                error_type="io",
                cause=e
            )

    logger.info("Exported %d rows to %s (%s)", len(table), path, format)
    return path
