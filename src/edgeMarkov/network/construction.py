"""
Temporal graph construction.

This module turns already-discretized contact data into a
:class:`~edgeMarkov.network.temporal_graph.TemporalGraph`:

- ``(time, edge)`` or ``(time, snapshot)`` records produced by a loader
- a list of per-step edge collections
- contact interval tables ``n1 n2 start end`` (polars DataFrame or text file),
  where both ``start`` and ``end`` are inclusive time indices
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

import polars as pl

from ..common.id_mapper import IDMapper
from ..common.exceptions import DataFormatError, InvalidInputError
from ..common.validators import CONTACT_COLUMNS, validate_contact_dataframe, validate_node_membership
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from .temporal_graph import TemporalGraph

logger = get_logger(__name__)

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def _is_edge(item: Any) -> bool:
    """True when ``item`` is a pair of node ids rather than a collection of edges."""
    if not isinstance(item, _COLLECTION_TYPES) or len(item) != 2:
        return False
    return not any(isinstance(node, _COLLECTION_TYPES) for node in item)


def _normalize_edge(edge: Any, where: str) -> Tuple[Any, Any]:
    try:
        u, v = edge
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"Edge {edge!r} in {where} is not a pair of nodes", field="edges", value=edge
        )
    if u == v:
        raise InvalidInputError(
            f"Self-loop ({u!r}, {v!r}) in {where} is not allowed", field="edges", value=edge
        )
    return u, v


def build_temporal_graph(
    records: Iterable[Tuple[int, Any]],
    nodes: Optional[Iterable[Any]] = None,
    duration: Optional[int] = None
) -> TemporalGraph:
    """
    Build a temporal graph from ``(time, edge)`` or ``(time, snapshot)`` records.

    Parameters
    ----------
    records : Iterable[Tuple[int, Any]]
        Each record pairs an integer time index with either one edge
        ``(u, v)`` or a collection of edges active at that time. Both kinds
        may be mixed; records sharing a time index are merged.
    nodes : Iterable[Any], optional
        Declared node universe. Defaults to every node appearing in an edge.
    duration : int, optional
        Number of snapshots T. Defaults to the largest time index + 1; time
        indices without records become empty snapshots.

    Returns
    -------
    TemporalGraph
        The assembled trace

    Raises
    ------
    InvalidInputError
        If no snapshot would be produced (T = 0), a time index is negative
        or beyond ``duration``, an edge is a self-loop or references a node
        outside ``nodes``

    Examples
    --------
    >>> graph = build_temporal_graph([(0, (1, 2)), (1, (1, 2)), (1, (3, 4))])
    >>> len(graph), sorted(graph.node_set())
    (2, [1, 2, 3, 4])
    >>> graph = build_temporal_graph([(0, []), (1, [(1, 2)])], nodes=[1, 2, 3])
    """
    log_function_entry("build_temporal_graph", duration=duration,
                       declared_nodes=nodes is not None)

    edges_by_time: Dict[int, List[Tuple[Any, Any]]] = {}
    for record in records:
        try:
            t, payload = record
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Record {record!r} is not a (time, edge) or (time, snapshot) pair",
                field="records"
            )
        try:
            t = int(t)
        except (TypeError, ValueError):
            raise InvalidInputError(f"Time index {t!r} is not an integer", field="time", value=t)
        if t < 0:
            raise InvalidInputError(f"Time index {t} is negative", field="time", value=t)

        bucket = edges_by_time.setdefault(t, [])
        if _is_edge(payload):
            bucket.append(_normalize_edge(payload, f"record at time {t}"))
        else:
            try:
                items = list(payload)
            except TypeError:
                raise InvalidInputError(
                    f"Record payload at time {t} is neither an edge nor a snapshot",
                    field="records",
                    value=payload
                )
            bucket.extend(_normalize_edge(edge, f"snapshot at time {t}") for edge in items)

    if duration is None:
        duration = max(edges_by_time) + 1 if edges_by_time else 0
    if duration <= 0:
        raise InvalidInputError(
            "Temporal graph needs at least one snapshot",
            field="duration",
            value=duration,
            expected="T >= 1"
        )

    late = [t for t in edges_by_time if t >= duration]
    if late:
        raise InvalidInputError(
            f"{len(late)} time index(es) fall beyond duration {duration}",
            field="time",
            details={"max_time": max(late)}
        )

    snapshots = [edges_by_time.get(t, []) for t in range(duration)]
    return _assemble(snapshots, nodes, operation="build_temporal_graph")


def build_from_snapshots(
    snapshots: Sequence[Iterable[Tuple[Any, Any]]],
    nodes: Optional[Iterable[Any]] = None
) -> TemporalGraph:
    """
    Build a temporal graph from one edge collection per time index.

    Parameters
    ----------
    snapshots : Sequence[Iterable[Tuple[Any, Any]]]
        ``snapshots[t]`` holds the edges active at time ``t``
    nodes : Iterable[Any], optional
        Declared node universe. Defaults to every node appearing in an edge.

    Examples
    --------
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
    >>> graph.number_of_edges(1)
    2
    """
    if len(snapshots) == 0:
        raise InvalidInputError(
            "Temporal graph needs at least one snapshot",
            field="snapshots",
            expected="T >= 1"
        )
    normalized = [
        [_normalize_edge(edge, f"snapshot {t}") for edge in edges]
        for t, edges in enumerate(snapshots)
    ]
    return _assemble(normalized, nodes, operation="build_from_snapshots")


def _assemble(
    snapshots: List[List[Tuple[Any, Any]]],
    nodes: Optional[Iterable[Any]],
    operation: str
) -> TemporalGraph:
    """Map original edges to internal ids and build the NetworkIt snapshots."""
    referenced = [node for edges in snapshots for edge in edges for node in edge]

    if nodes is None:
        id_mapper = IDMapper.from_nodes(referenced)
    else:
        id_mapper = IDMapper.from_nodes(nodes)
        validate_node_membership(referenced, id_mapper, context=operation)

    with LoggingTimer(operation, {"nodes": id_mapper.size(), "steps": len(snapshots)}):
        graph = TemporalGraph.from_internal_pairs(
            (
                [(id_mapper.get_internal(u), id_mapper.get_internal(v)) for u, v in edges]
                for edges in snapshots
            ),
            id_mapper
        )

    logger.info("Built temporal graph: %d nodes, %d snapshots, %d contacts",
                graph.number_of_nodes(), len(graph), int(graph.edge_counts.sum()))
    return graph


def build_from_contact_intervals(
    contacts: Union[str, Path, pl.DataFrame],
    columns: Sequence[str] = CONTACT_COLUMNS,
    nodes: Optional[Iterable[Any]] = None,
    duration: Optional[int] = None,
    shift_time: bool = True
) -> TemporalGraph:
    """
    Build a temporal graph from a contact interval table.

    Parameters
    ----------
    contacts : Union[str, Path, pl.DataFrame]
        DataFrame with node, node, start and end columns, or the path of a
        contact file readable by :func:`read_contact_file`
    columns : Sequence[str], default ("n1", "n2", "start", "end")
        Column names for the two nodes and the inclusive start/end times
    nodes : Iterable[Any], optional
        Declared node universe. Defaults to every node of the table.
    duration : int, optional
        Number of snapshots. Defaults to the last (shifted) end + 1.
    shift_time : bool, default True
        Re-base time so that the earliest contact starts at 0

    Returns
    -------
    TemporalGraph
        One snapshot per time index; a contact ``(u, v, s, e)`` makes the
        pair present at every ``t`` in ``[s, e]``

    Raises
    ------
    DataFormatError
        If the table lacks columns or holds non-integer times
    InvalidInputError
        If the table is empty, has self-loops, reversed intervals, or a
        contact ends at or after ``duration``

    Examples
    --------
    >>> df = pl.DataFrame({"n1": [1, 1], "n2": [2, 2], "start": [0, 4], "end": [1, 5]})
    >>> graph = build_from_contact_intervals(df)
    >>> [graph.number_of_edges(t) for t in range(len(graph))]
    [1, 1, 0, 0, 1, 1]
    """
    if isinstance(contacts, (str, Path)):
        df = read_contact_file(contacts, columns=columns)
    elif isinstance(contacts, pl.DataFrame):
        df = contacts
    else:
        raise DataFormatError(
            f"Invalid contacts type: {type(contacts)}. Expected path or pl.DataFrame",
            format_type="DataFrame"
        )

    validate_contact_dataframe(df, columns)
    node_a, node_b, start_col, end_col = columns

    if shift_time:
        t_start = df[start_col].min()
        df = df.with_columns(
            (pl.col(start_col) - t_start).alias(start_col),
            (pl.col(end_col) - t_start).alias(end_col)
        )
        logger.debug("Shifted contact times by %d", t_start)

    last_end = int(df[end_col].max())
    if duration is None:
        duration = last_end + 1
    elif last_end >= duration:
        raise InvalidInputError(
            f"Contact ends at {last_end}, beyond duration {duration}",
            field=end_col,
            details={"duration": duration}
        )

    snapshots: List[Set[Tuple[Any, Any]]] = [set() for _ in range(duration)]
    for u, v, start, end in df.select(list(columns)).iter_rows():
        for t in range(start, end + 1):
            snapshots[t].add((u, v))

    logger.info("Expanded %d contacts over %d time steps", len(df), duration)
    return _assemble([list(edges) for edges in snapshots], nodes,
                     operation="build_from_contact_intervals")


def read_contact_file(
    path: Union[str, Path],
    columns: Sequence[str] = CONTACT_COLUMNS,
    separator: str = " "
) -> pl.DataFrame:
    """
    Read a contact file with one ``n1 n2 ts te`` line per contact.

    Trailing separators are tolerated; columns beyond the fourth are
    ignored. All four fields must be integers.

    Raises
    ------
    DataFormatError
        If the file is missing, unreadable or a field is not an integer
    """
    file_path = Path(path)
    if not file_path.exists():
        raise DataFormatError(
            f"Contact file not found: {path}",
            format_type="start_end",
            file_path=str(path)
        )

    logger.debug("Loading contacts from file: %s", file_path)
    try:
        raw = pl.read_csv(
            file_path,
            has_header=False,
            separator=separator,
            infer_schema_length=0,
            truncate_ragged_lines=True
        )
    except pl.exceptions.NoDataError:
        return pl.DataFrame(schema={col: pl.Int64 for col in columns})
    except Exception as e:
        raise DataFormatError(
            f"Failed to parse contact file: {e}",
            format_type="start_end",
            file_path=str(path),
            cause=e
        )

    if raw.width < 4:
        raise DataFormatError(
            f"Expected 4 fields per line, found {raw.width}",
            format_type="start_end",
            file_path=str(path)
        )

    raw = raw.select(raw.columns[:4])
    try:
        df = raw.select([
            pl.col(old).str.strip_chars().cast(pl.Int64).alias(new)
            for old, new in zip(raw.columns, columns)
        ])
    except (pl.exceptions.InvalidOperationError, pl.exceptions.ComputeError) as e:
        raise DataFormatError(
            "Contact file fields must be integers",
            format_type="start_end",
            file_path=str(path),
            cause=e
        )

    logger.info("Read %d contacts from %s", len(df), file_path)
    return df


def get_temporal_graph_info(graph: TemporalGraph) -> Dict[str, Any]:
    """
    Summary information about a temporal graph.

    Returns
    -------
    Dict[str, Any]
        ``num_nodes``, ``duration``, ``num_contacts`` (edge-time incidences),
        ``mean_edges``, ``max_edges`` and ``mean_density``

    Examples
    --------
    >>> info = get_temporal_graph_info(graph)
    >>> print(f"{info['num_nodes']} nodes over {info['duration']} steps")
    """
    counts = graph.edge_counts
    n = graph.number_of_nodes()
    possible = n * (n - 1) / 2
    return {
        "num_nodes": n,
        "duration": len(graph),
        "num_contacts": int(counts.sum()),
        "mean_edges": float(counts.mean()),
        "max_edges": int(counts.max()),
        "mean_density": float(counts.mean() / possible) if possible > 0 else 0.0,
    }
