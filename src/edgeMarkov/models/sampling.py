"""
Sampling kernels for Edge-Markovian transitions.

Both kernels take the set of present pairs at ``t`` as a sorted array of
pair indices (see :mod:`edgeMarkov.common.pairs`) and return the pair
indices that flip at ``t + 1``:

- :func:`sample_deletions` draws one uniform number per present pair, so
  its cost follows the number of edges, not ``n ** 2``
- :func:`sample_creations` never enumerates absent pairs. It walks their
  virtual lexicographic enumeration with geometric skips of parameter ``p``:
  the gap between two consecutive successes of independent Bernoulli(p)
  trials is Geometric(p), so jumping from success to success reproduces
  exactly the per-pair Bernoulli distribution while drawing about
  ``p * absent`` numbers.
"""

from typing import Optional, Union

import numpy as np

from ..common.exceptions import require_probability
from ..common.pairs import number_of_pairs

RandomSource = Union[None, int, np.random.Generator]

# Safety margin on top of the expected number of draws per batch
_BATCH_MARGIN = 64


def as_generator(rng: RandomSource) -> np.random.Generator:
    """
    Normalize a random source.

    ``None`` gives a freshly seeded generator, an int seeds a new PCG64
    generator, and an existing ``np.random.Generator`` is used as-is.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def sample_deletions(
    present: np.ndarray,
    q: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Pair indices of present pairs removed at the next step.

    Parameters
    ----------
    present : np.ndarray
        Pair indices present at ``t``
    q : float
        Deletion probability
    rng : np.random.Generator
        Random source

    Returns
    -------
    np.ndarray
        Subset of ``present``; each pair is kept independently with
        probability ``q``
    """
    q = require_probability(q, "q")
    present = np.asarray(present, dtype=np.int64)
    if q == 0.0 or present.size == 0:
        return np.empty(0, dtype=np.int64)
    if q == 1.0:
        return present.copy()
    return present[rng.random(present.size) < q]


def sample_absent_ranks(
    absent_count: int,
    p: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Ranks, among ``absent_count`` absent pairs, of the pairs that get created.

    Draws geometric skip lengths in batches sized from the expected number
    of successes and stops as soon as the walk passes the last absent pair.

    Returns
    -------
    np.ndarray
        Strictly increasing ranks in ``[0, absent_count)``
    """
    p = require_probability(p, "p")
    if absent_count <= 0 or p == 0.0:
        return np.empty(0, dtype=np.int64)
    if p == 1.0:
        return np.arange(absent_count, dtype=np.int64)

    expected = p * absent_count
    batch_size = int(expected + 4.0 * np.sqrt(expected) + _BATCH_MARGIN)

    # Skips past the last absent pair all end the walk; capping them keeps
    # cumsum inside int64. Non-positive draws are overflows for tiny p.
    cap = absent_count + 1
    chunks = []
    position = -1
    while True:
        skips = rng.geometric(p, size=batch_size).astype(np.int64)
        skips = np.where(skips > 0, np.minimum(skips, cap), cap)
        positions = position + np.cumsum(skips)
        inside = positions[positions < absent_count]
        chunks.append(inside)
        if inside.size < positions.size:
            break
        position = int(positions[-1])

    return np.concatenate(chunks)


def ranks_to_pair_indices(ranks: np.ndarray, present: np.ndarray) -> np.ndarray:
    """
    Map ranks in the enumeration of absent pairs to pair indices.

    With ``present`` sorted, ``present[j] - j`` counts the absent pairs
    before ``present[j]``; the absent pair of rank ``r`` is therefore
    ``r`` plus the number of present pairs whose count is ``<= r``.
    """
    ranks = np.asarray(ranks, dtype=np.int64)
    if present.size == 0:
        return ranks
    absent_before = present - np.arange(present.size, dtype=np.int64)
    return ranks + np.searchsorted(absent_before, ranks, side="right")


def sample_creations(
    present: np.ndarray,
    n: int,
    p: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Pair indices of absent pairs created at the next step.

    Parameters
    ----------
    present : np.ndarray
        Sorted pair indices present at ``t``
    n : int
        Size of the node universe
    p : float
        Creation probability
    rng : np.random.Generator
        Random source

    Returns
    -------
    np.ndarray
        Sorted pair indices of newly created pairs, disjoint from
        ``present``; ``p = 0`` gives nothing and ``p = 1`` gives every
        absent pair
    """
    absent_count = number_of_pairs(n) - int(np.asarray(present).size)
    ranks = sample_absent_ranks(absent_count, p, rng)
    return ranks_to_pair_indices(ranks, np.asarray(present, dtype=np.int64))


def transition(
    present: np.ndarray,
    n: int,
    p: float,
    q: float,
    rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    One Edge-Markovian step.

    Deletions and creations are both sampled from the state at ``t`` and
    then merged, so a pair deleted at this step cannot be recreated in the
    same step and vice versa.

    Returns
    -------
    np.ndarray
        Sorted pair indices present at ``t + 1``
    """
    rng = as_generator(rng)
    present = np.asarray(present, dtype=np.int64)
    deleted = sample_deletions(present, q, rng)
    created = sample_creations(present, n, p, rng)
    survivors = np.setdiff1d(present, deleted, assume_unique=True)
    return np.union1d(survivors, created)
