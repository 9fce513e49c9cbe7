"""
Pair histories and inter-contact times.

A contact interval is a maximal run of consecutive time indices at which a
pair is present, written ``(start, end)`` with both ends inclusive. The
inter-contact time between two consecutive intervals ``(s1, e1)`` and
``(s2, e2)`` of the same pair is ``s2 - e1``: with contacts at ``[0, 1]``
and ``[4, 5]`` the gap is 3. Since two intervals are separated by at least
one absent step, gaps are always >= 2.

Per-pair state is keyed by the compact pair index of
:mod:`edgeMarkov.common.pairs`; results are translated back to original
node ids.
"""

from collections import Counter
from typing import Any, Dict, List, Set, Tuple

import numpy as np

from ..common.pairs import pair_index, pairs_from_indices
from ..common.logging_config import get_logger, LoggingTimer
from ..network.temporal_graph import TemporalGraph, require_temporal_graph

logger = get_logger(__name__)

ContactInterval = Tuple[int, int]


def _pair_set(graph: TemporalGraph, t: int, n: int) -> Set[int]:
    return {pair_index(u, v, n) for u, v in graph.internal_edges(t)}


def contact_intervals(graph: TemporalGraph) -> Dict[Tuple[Any, Any], List[ContactInterval]]:
    """
    Contact intervals of every pair that is present at least once.

    Parameters
    ----------
    graph : TemporalGraph
        Trace to scan

    Returns
    -------
    Dict[Tuple[Any, Any], List[ContactInterval]]
        Original edge -> chronologically ordered ``(start, end)`` intervals.
        An interval still open at ``T - 1`` is closed there.

    Raises
    ------
    InvalidInputError
        If ``graph`` is not a non-empty TemporalGraph

    Examples
    --------
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2)], [], [(1, 2)]])
    >>> contact_intervals(graph)
    {(1, 2): [(0, 1), (3, 3)]}
    """
    graph = require_temporal_graph(graph, "contact_intervals")
    n = graph.number_of_nodes()
    duration = len(graph)

    opened: Dict[int, int] = {}
    intervals: Dict[int, List[ContactInterval]] = {}
    active: Set[int] = set()

    for t in range(duration):
        current = _pair_set(graph, t, n)
        for k in current - active:
            opened[k] = t
        for k in active - current:
            intervals.setdefault(k, []).append((opened.pop(k), t - 1))
        active = current

    for k in active:
        intervals.setdefault(k, []).append((opened.pop(k), duration - 1))

    if not intervals:
        return {}

    keys = sorted(intervals)
    us, vs = pairs_from_indices(np.array(keys, dtype=np.int64), n)
    mapper = graph.id_mapper
    return {
        mapper.original_edge(int(u), int(v)): sorted(intervals[k])
        for k, u, v in zip(keys, us, vs)
    }


def inter_contact_histogram(graph: TemporalGraph) -> Dict[int, int]:
    """
    Histogram of inter-contact times over all pairs.

    For each pair, every contact start that follows an earlier contact
    contributes one count to the bucket ``start - last_present_time``.
    Trailing contacts that never end inside the trace add nothing, and a
    pair with a single contact adds nothing.

    Parameters
    ----------
    graph : TemporalGraph
        Trace to scan

    Returns
    -------
    Dict[int, int]
        Gap length -> count, ordered by gap. Empty for ``T = 1``.

    Raises
    ------
    InvalidInputError
        If ``graph`` is not a non-empty TemporalGraph

    Examples
    --------
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2)], [], [], [(1, 2)], [(1, 2)]])
    >>> inter_contact_histogram(graph)
    {3: 1}

    Notes
    -----
    Runs in O(sum over t of |E(t)|): only pairs that change state are
    touched besides building each step's pair set.
    """
    graph = require_temporal_graph(graph, "inter_contact_histogram")
    n = graph.number_of_nodes()

    histogram: Counter = Counter()
    last_present: Dict[int, int] = {}
    previous: Set[int] = set()

    with LoggingTimer("inter_contact_histogram", {"nodes": n, "steps": len(graph)}):
        for t in range(len(graph)):
            current = _pair_set(graph, t, n)
            for k in previous - current:
                last_present[k] = t - 1
            for k in current - previous:
                if k in last_present:
                    histogram[t - last_present[k]] += 1
            previous = current

    logger.debug("Inter-contact histogram: %d gaps in %d buckets",
                 sum(histogram.values()), len(histogram))
    return dict(sorted(histogram.items()))
