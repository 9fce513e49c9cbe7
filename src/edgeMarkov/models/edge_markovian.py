"""
Edge-Markovian random temporal graphs.

In the Edge-Markovian model every unordered node pair is an independent
two-state Markov chain: an absent pair appears at the next step with
probability ``p`` and a present pair disappears with probability ``q``.

This module provides

- :class:`ModelParameters` and :func:`estimate_parameters`, which calibrate
  ``(p, q)`` as the mean creation and deletion fractions of an observed
  trace
- :class:`EdgeMarkovianModel`, which simulates traces with the sampling
  kernels of :mod:`edgeMarkov.models.sampling`
- :class:`TimeDependentEdgeMarkovianModel`, where ``p`` and ``q`` change at
  every step
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import networkit as nk
import numpy as np

from ..common.id_mapper import IDMapper
from ..common.exceptions import (
    InvalidInputError,
    InvalidParametersError,
    require_positive,
    require_probability
)
from ..common.pairs import pair_indices, pairs_from_indices
from ..common.validators import validate_node_membership
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..network.temporal_graph import TemporalGraph, require_temporal_graph
from ..timeseries.temporal_metrics import creation_deletion_fraction
from .sampling import RandomSource, as_generator, transition

logger = get_logger(__name__)

SeedSnapshot = Union[None, nk.Graph, Iterable[Tuple[Any, Any]]]


@dataclass(frozen=True)
class ModelParameters:
    """
    Edge-Markovian parameters.

    Attributes
    ----------
    p : float
        Probability that an absent pair becomes present at the next step
    q : float
        Probability that a present pair becomes absent at the next step

    Raises
    ------
    InvalidParametersError
        If ``p`` or ``q`` lies outside ``[0, 1]``

    Examples
    --------
    >>> params = ModelParameters(p=0.01, q=0.3)
    >>> p, q = params
    """

    p: float
    q: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "p", require_probability(self.p, "p"))
        object.__setattr__(self, "q", require_probability(self.q, "q"))

    def __iter__(self) -> Iterator[float]:
        return iter((self.p, self.q))

    def as_dict(self) -> dict:
        return {"p": self.p, "q": self.q}


def estimate_parameters(graph: TemporalGraph) -> ModelParameters:
    """
    Calibrate ``(p, q)`` from an observed trace.

    ``p`` is the mean creation fraction and ``q`` the mean deletion fraction
    over all steps of ``graph``. This is a direct moment estimate: the model
    assumes both probabilities are stationary.

    Parameters
    ----------
    graph : TemporalGraph
        Observed trace

    Returns
    -------
    ModelParameters
        Estimated parameters; ``(0, 0)`` when the trace has a single
        snapshot and therefore no step to learn from

    Raises
    ------
    InvalidInputError
        If ``graph`` is not a non-empty TemporalGraph

    Examples
    --------
    >>> graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)]])
    >>> estimate_parameters(graph)
    ModelParameters(p=0.2, q=0.0)
    """
    graph = require_temporal_graph(graph, "estimate_parameters")
    creation, deletion = creation_deletion_fraction(graph)

    if creation.size == 0:
        logger.warning("Trace has a single snapshot; estimating p = q = 0")
        return ModelParameters(p=0.0, q=0.0)

    params = ModelParameters(p=float(creation.mean()), q=float(deletion.mean()))
    logger.info("Estimated Edge-Markovian parameters: p=%.6g, q=%.6g over %d steps",
                params.p, params.q, creation.size)
    return params


def _as_mapper(nodes: Union[IDMapper, Iterable[Any]]) -> IDMapper:
    if isinstance(nodes, IDMapper):
        return nodes
    return IDMapper.from_nodes(nodes)


class EdgeMarkovianModel:
    """
    Stationary Edge-Markovian model over a fixed node universe.

    Parameters
    ----------
    parameters : ModelParameters
        Creation and deletion probabilities
    nodes : Union[IDMapper, Iterable[Any]]
        Node universe V; an IDMapper is reused as-is so that a simulation
        shares the internal ids of the trace it was calibrated on
    duration : int
        Default number of snapshots T produced by :meth:`simulate`

    Raises
    ------
    InvalidParametersError
        If ``parameters`` is not a ModelParameters
    InvalidInputError
        If ``duration < 1``

    Examples
    --------
    >>> model = EdgeMarkovianModel(ModelParameters(p=0.05, q=0.5), nodes=range(100), duration=50)
    >>> trace = model.simulate(rng=42)
    >>> len(trace)
    50
    """

    def __init__(
        self,
        parameters: ModelParameters,
        nodes: Union[IDMapper, Iterable[Any]],
        duration: int
    ) -> None:
        if not isinstance(parameters, ModelParameters):
            raise InvalidParametersError(
                f"parameters must be ModelParameters, got {type(parameters).__name__}",
                parameter="parameters"
            )
        require_positive(duration, "duration")

        self.parameters = parameters
        self.id_mapper = _as_mapper(nodes)
        self.duration = int(duration)

    estimate = staticmethod(estimate_parameters)

    @classmethod
    def from_observed(cls, graph: TemporalGraph) -> 'EdgeMarkovianModel':
        """Model calibrated on ``graph``, with its node universe and length."""
        graph = require_temporal_graph(graph, "EdgeMarkovianModel.from_observed")
        return cls(estimate_parameters(graph), graph.id_mapper, len(graph))

    @property
    def number_of_nodes(self) -> int:
        return self.id_mapper.size()

    def _probabilities(self, step: int) -> Tuple[float, float]:
        """``(p, q)`` used to go from ``step - 1`` to ``step``."""
        return self.parameters.p, self.parameters.q

    def _resolve_duration(self, duration: Optional[int]) -> int:
        if duration is None:
            return self.duration
        require_positive(duration, "duration")
        return int(duration)

    def _seed_pairs(self, seed_snapshot: SeedSnapshot) -> np.ndarray:
        """Sorted pair indices of the initial snapshot."""
        n = self.number_of_nodes
        if seed_snapshot is None:
            return np.empty(0, dtype=np.int64)

        if isinstance(seed_snapshot, nk.Graph):
            if seed_snapshot.numberOfNodes() != n or seed_snapshot.upperNodeIdBound() != n:
                raise InvalidInputError(
                    f"Seed snapshot has {seed_snapshot.numberOfNodes()} nodes, expected {n}",
                    field="seed_snapshot"
                )
            if seed_snapshot.numberOfSelfLoops() > 0:
                raise InvalidInputError("Seed snapshot contains self-loops", field="seed_snapshot")
            internal = list(seed_snapshot.iterEdges())
        else:
            edges = [tuple(edge) for edge in seed_snapshot]
            validate_node_membership(
                [node for edge in edges for node in edge], self.id_mapper,
                field="seed_snapshot", context="seed snapshot"
            )
            internal = []
            for edge in edges:
                if len(edge) != 2 or edge[0] == edge[1]:
                    raise InvalidInputError(
                        f"Seed edge {edge!r} is not a pair of distinct nodes",
                        field="seed_snapshot"
                    )
                internal.append((self.id_mapper.get_internal(edge[0]),
                                 self.id_mapper.get_internal(edge[1])))

        if not internal:
            return np.empty(0, dtype=np.int64)
        us, vs = zip(*internal)
        return np.unique(pair_indices(np.array(us), np.array(vs), n))

    def simulate(
        self,
        seed_snapshot: SeedSnapshot = None,
        duration: Optional[int] = None,
        rng: RandomSource = None
    ) -> TemporalGraph:
        """
        Generate a synthetic trace.

        Snapshot 0 is ``seed_snapshot``; each following snapshot applies the
        Edge-Markovian rule independently to every pair of the node universe.

        Parameters
        ----------
        seed_snapshot : nk.Graph or Iterable[Tuple[Any, Any]], optional
            Initial edges, either in original node ids or as a NetworkIt
            graph over the model's internal ids. Defaults to no edge.
        duration : int, optional
            Number of snapshots; defaults to the model's duration
        rng : None, int or np.random.Generator
            Random source; pass a seed or a generator for reproducible output

        Returns
        -------
        TemporalGraph
            Exactly ``duration`` snapshots over the model's node universe

        Raises
        ------
        InvalidInputError
            If ``duration < 1`` or the seed references nodes outside V
        """
        duration = self._resolve_duration(duration)
        generator = as_generator(rng)
        n = self.number_of_nodes
        log_function_entry("simulate", nodes=n, duration=duration)

        present = self._seed_pairs(seed_snapshot)
        states: List[np.ndarray] = [present]

        logger.info("Simulating %s: %d nodes, %d steps, seed with %d edges",
                    type(self).__name__, n, duration, present.size)

        with LoggingTimer("simulate", {"nodes": n, "steps": duration}):
            for step in range(1, duration):
                p, q = self._probabilities(step)
                present = transition(present, n, p, q, generator)
                states.append(present)
                logger.debug("Step %d: %d edges", step, present.size)

            trace = TemporalGraph.from_internal_pairs(
                (zip(*pairs_from_indices(state, n)) for state in states),
                self.id_mapper
            )

        return trace

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(p={self.parameters.p:.6g}, q={self.parameters.q:.6g}, "
            f"nodes={self.number_of_nodes}, duration={self.duration})"
        )


def _validate_probability_series(values: Sequence[float], name: str) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64).ravel()
    invalid = np.isnan(array) | (array < 0.0) | (array > 1.0)
    if invalid.any():
        first = int(np.argmax(invalid))
        raise InvalidParametersError(
            f"{name}[{first}] must lie in [0, 1], got {array[first]}",
            parameter=name,
            value=float(array[first])
        )
    return array


def estimate_time_dependent(graph: TemporalGraph) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-step creation and deletion probabilities of an observed trace.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        The creation and deletion fractions of ``graph``, length T - 1
    """
    graph = require_temporal_graph(graph, "estimate_time_dependent")
    return creation_deletion_fraction(graph)


class TimeDependentEdgeMarkovianModel(EdgeMarkovianModel):
    """
    Edge-Markovian model whose probabilities change at every step.

    Step ``t`` (from snapshot ``t - 1`` to ``t``) uses
    ``creation_probabilities[t - 1]`` and ``deletion_probabilities[t - 1]``.

    Parameters
    ----------
    creation_probabilities : Sequence[float]
        Per-step ``p``, all in [0, 1]
    deletion_probabilities : Sequence[float]
        Per-step ``q``, same length as ``creation_probabilities``
    nodes : Union[IDMapper, Iterable[Any]]
        Node universe V

    Notes
    -----
    The trace length is ``len(creation_probabilities) + 1``; shorter
    simulations use a prefix of the schedule. :attr:`parameters` holds the
    schedule means.
    """

    def __init__(
        self,
        creation_probabilities: Sequence[float],
        deletion_probabilities: Sequence[float],
        nodes: Union[IDMapper, Iterable[Any]]
    ) -> None:
        creation = _validate_probability_series(creation_probabilities, "creation_probabilities")
        deletion = _validate_probability_series(deletion_probabilities, "deletion_probabilities")
        if creation.size != deletion.size:
            raise InvalidParametersError(
                f"Probability schedules differ in length: {creation.size} vs {deletion.size}",
                parameter="deletion_probabilities"
            )

        mean_parameters = ModelParameters(
            p=float(creation.mean()) if creation.size else 0.0,
            q=float(deletion.mean()) if deletion.size else 0.0
        )
        super().__init__(mean_parameters, nodes, creation.size + 1)
        self.creation_probabilities = creation
        self.deletion_probabilities = deletion

    @classmethod
    def from_observed(cls, graph: TemporalGraph) -> 'TimeDependentEdgeMarkovianModel':
        """Model replaying the per-step fractions of ``graph``."""
        creation, deletion = estimate_time_dependent(graph)
        return cls(creation, deletion, graph.id_mapper)

    def _probabilities(self, step: int) -> Tuple[float, float]:
        return float(self.creation_probabilities[step - 1]), float(self.deletion_probabilities[step - 1])

    def _resolve_duration(self, duration: Optional[int]) -> int:
        duration = super()._resolve_duration(duration)
        if duration > self.duration:
            raise InvalidInputError(
                f"Schedule covers {self.duration} snapshots, {duration} requested",
                field="duration",
                value=duration
            )
        return duration


def generate_edge_markovian_graph(
    n_nodes: int,
    p: float,
    q: float,
    duration: int,
    rng: RandomSource = None
) -> TemporalGraph:
    """
    Simulate a trace over nodes ``1..n_nodes`` starting with no edge.

    Examples
    --------
    >>> trace = generate_edge_markovian_graph(50, p=0.01, q=0.2, duration=100, rng=0)
    """
    require_positive(n_nodes, "n_nodes", allow_zero=True)
    model = EdgeMarkovianModel(ModelParameters(p=p, q=q), range(1, n_nodes + 1), duration)
    return model.simulate(rng=rng)
