"""
Temporal graph representation.

A :class:`TemporalGraph` is an ordered, immutable sequence of undirected
snapshots over a fixed node universe. Each snapshot is a NetworkIt graph over
the internal node ids ``0..n-1`` of a shared :class:`IDMapper`, which gives
O(1) degree and adjacency queries at every time index.
"""

from typing import Any, FrozenSet, Iterable, Iterator, Sequence, Tuple

import networkit as nk
import numpy as np

from ..common.id_mapper import IDMapper
from ..common.exceptions import (
    GraphConstructionError,
    InvalidInputError,
    OutOfRangeError,
    TemporalNetworkError
)
from ..common.logging_config import get_logger

logger = get_logger(__name__)

Edge = Tuple[Any, Any]


class SnapshotEdges:
    """
    Restartable view over the edges of one snapshot, in original node ids.

    Each edge is a tuple ordered by internal id. Iterating twice yields the
    same edges; nothing is materialized until iteration.
    """

    def __init__(self, graph: nk.Graph, id_mapper: IDMapper) -> None:
        self._graph = graph
        self._id_mapper = id_mapper

    def __iter__(self) -> Iterator[Edge]:
        for u, v in self._graph.iterEdges():
            yield self._id_mapper.original_edge(u, v)

    def __len__(self) -> int:
        return self._graph.numberOfEdges()

    def __contains__(self, edge: object) -> bool:
        try:
            a, b = edge
        except (TypeError, ValueError):
            return False
        if a not in self._id_mapper or b not in self._id_mapper:
            return False
        return self._graph.hasEdge(
            self._id_mapper.get_internal(a), self._id_mapper.get_internal(b)
        )

    def __repr__(self) -> str:
        return f"SnapshotEdges(edges={len(self)})"


def snapshot_from_pairs(n: int, pairs: Iterable[Tuple[int, int]]) -> nk.Graph:
    """
    Build an undirected, unweighted snapshot over ``n`` internal ids.

    Duplicate pairs (in either orientation) are added once. Self-loops and
    indices outside ``[0, n)`` are rejected.
    """
    graph = nk.Graph(n, weighted=False, directed=False)
    for u, v in pairs:
        u, v = int(u), int(v)
        if not (0 <= u < n and 0 <= v < n):
            raise InvalidInputError(
                f"Node index pair ({u}, {v}) outside [0, {n})",
                field="edges",
                value=(u, v)
            )
        if u == v:
            raise InvalidInputError(
                f"Self-loop on node index {u} is not allowed",
                field="edges",
                value=(u, v)
            )
        if not graph.hasEdge(u, v):
            graph.addEdge(u, v)
    return graph


class TemporalGraph:
    """
    Immutable ordered sequence of graph snapshots over a fixed node universe.

    Parameters
    ----------
    snapshots : Sequence[nk.Graph]
        One undirected NetworkIt graph per time index, each with exactly
        ``id_mapper.size()`` nodes and no self-loops
    id_mapper : IDMapper
        Mapping between original node ids and the snapshot node indices;
        its originals form the node universe V

    Raises
    ------
    InvalidInputError
        If there is no snapshot, or a snapshot is directed, has the wrong
        number of nodes or contains a self-loop

    Examples
    --------
    >>> from edgeMarkov.network import build_from_snapshots
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
    >>> len(graph), graph.degree(1, 1), sorted(graph.edges(1))
    (2, 1, [(1, 2), (3, 4)])

    Notes
    -----
    Snapshots returned by :meth:`at` are shared references; callers must
    treat them as read-only.
    """

    def __init__(self, snapshots: Sequence[nk.Graph], id_mapper: IDMapper) -> None:
        snapshots = list(snapshots)
        if not snapshots:
            raise InvalidInputError(
                "Temporal graph needs at least one snapshot",
                field="snapshots",
                expected="T >= 1"
            )

        n = id_mapper.size()
        for t, snapshot in enumerate(snapshots):
            if not isinstance(snapshot, nk.Graph):
                raise InvalidInputError(
                    f"Snapshot {t} must be a NetworkIt Graph, got {type(snapshot).__name__}",
                    field="snapshots"
                )
            if snapshot.isDirected():
                raise InvalidInputError(f"Snapshot {t} is directed", field="snapshots")
            if snapshot.upperNodeIdBound() != n or snapshot.numberOfNodes() != n:
                raise InvalidInputError(
                    f"Snapshot {t} has {snapshot.numberOfNodes()} nodes, expected {n}",
                    field="snapshots",
                    details={"time": t}
                )
            if snapshot.numberOfSelfLoops() > 0:
                raise InvalidInputError(
                    f"Snapshot {t} contains self-loops",
                    field="snapshots",
                    details={"time": t}
                )

        self._snapshots: Tuple[nk.Graph, ...] = tuple(snapshots)
        self._id_mapper = id_mapper
        self._nodes: FrozenSet[Any] = frozenset(id_mapper.originals())

    @classmethod
    def from_internal_pairs(
        cls,
        pair_sets: Iterable[Iterable[Tuple[int, int]]],
        id_mapper: IDMapper
    ) -> 'TemporalGraph':
        """
        Build a temporal graph from per-step collections of internal pairs.

        Raises
        ------
        GraphConstructionError
            If NetworkIt fails while adding edges (e.g. an index out of bounds)
        """
        n = id_mapper.size()
        snapshots = []
        try:
            for pairs in pair_sets:
                snapshots.append(snapshot_from_pairs(n, pairs))
        except TemporalNetworkError:
            raise
        except Exception as e:
            raise GraphConstructionError(
                f"Failed to build snapshot {len(snapshots)}: {e}",
                node_count=n,
                operation="from_internal_pairs",
                cause=e
            )
        return cls(snapshots, id_mapper)

    def _check_time(self, t: int) -> int:
        try:
            index = int(t)
        except (TypeError, ValueError):
            raise OutOfRangeError(
                f"Time index must be an integer, got {t!r}", duration=len(self)
            )
        if index < 0 or index >= len(self._snapshots):
            raise OutOfRangeError(
                f"Time index {index} outside [0, {len(self._snapshots)})",
                index=index,
                duration=len(self._snapshots)
            )
        return index

    def _internal_node(self, v: Any) -> int:
        if v not in self._id_mapper:
            raise InvalidInputError(
                f"Node {v!r} is not part of the node universe", field="node", value=v
            )
        return self._id_mapper.get_internal(v)

    def at(self, t: int) -> nk.Graph:
        """
        Snapshot at time index ``t`` (read-only reference).

        Raises
        ------
        OutOfRangeError
            If ``t`` is outside ``[0, T)``
        """
        return self._snapshots[self._check_time(t)]

    def node_set(self) -> FrozenSet[Any]:
        """The node universe V, in original ids."""
        return self._nodes

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    @property
    def duration(self) -> int:
        """Number of snapshots T."""
        return len(self._snapshots)

    @property
    def id_mapper(self) -> IDMapper:
        return self._id_mapper

    @property
    def edge_counts(self) -> np.ndarray:
        """Number of edges of every snapshot, read from the snapshots themselves."""
        return np.array(
            [snapshot.numberOfEdges() for snapshot in self._snapshots], dtype=np.int64
        )

    def number_of_edges(self, t: int) -> int:
        return self.at(t).numberOfEdges()

    def degree(self, t: int, v: Any) -> int:
        """
        Number of edges of snapshot ``t`` incident to node ``v``.

        Returns 0 for nodes isolated at ``t``.

        Raises
        ------
        OutOfRangeError
            If ``t`` is outside ``[0, T)``
        InvalidInputError
            If ``v`` is not in the node universe
        """
        snapshot = self.at(t)
        return snapshot.degree(self._internal_node(v))

    def has_edge(self, t: int, u: Any, v: Any) -> bool:
        snapshot = self.at(t)
        if u not in self._id_mapper or v not in self._id_mapper:
            return False
        return snapshot.hasEdge(self._id_mapper.get_internal(u), self._id_mapper.get_internal(v))

    def edges(self, t: int) -> SnapshotEdges:
        """Lazy, restartable view over the edges of snapshot ``t``."""
        return SnapshotEdges(self.at(t), self._id_mapper)

    def internal_edges(self, t: int) -> Iterator[Tuple[int, int]]:
        """Edges of snapshot ``t`` as ``(u, v)`` internal ids with ``u < v``."""
        for u, v in self.at(t).iterEdges():
            yield (u, v) if u < v else (v, u)

    def snapshots(self) -> Iterator[nk.Graph]:
        return iter(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    def __repr__(self) -> str:
        return (
            f"TemporalGraph(nodes={self.number_of_nodes()}, duration={len(self)}, "
            f"edges={int(self.edge_counts.sum())})"
        )


def require_temporal_graph(graph: Any, function: str) -> 'TemporalGraph':
    """
    Fail with :class:`InvalidInputError` unless ``graph`` is a usable trace.

    A ``TemporalGraph`` always has ``T >= 1``; this guards the analyses
    against ``None``, plain lists and other stand-ins.
    """
    if not isinstance(graph, TemporalGraph):
        raise InvalidInputError(
            f"{function} expects a TemporalGraph, got {type(graph).__name__}",
            field="graph"
        )
    if len(graph) == 0:
        raise InvalidInputError(f"{function} received an empty temporal graph", field="graph")
    return graph
