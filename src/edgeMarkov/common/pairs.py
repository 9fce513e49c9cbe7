"""
Compact indexing of unordered node pairs.

The ``C(n, 2)`` pairs ``{u, v}`` with ``u < v`` over internal ids ``0..n-1``
are enumerated in lexicographic order::

    (0, 1), (0, 2), ..., (0, n-1), (1, 2), ..., (n-2, n-1)

so that a pair maps to a single integer in ``[0, C(n, 2))``. Keying per-pair
state by this index avoids any ``(u, v)`` / ``(v, u)`` ambiguity and lets the
simulator address absent pairs without materializing them.
"""

from typing import Tuple

import numpy as np


def number_of_pairs(n: int) -> int:
    """Number of unordered pairs of distinct nodes among ``n`` nodes."""
    return n * (n - 1) // 2 if n > 1 else 0


def pair_index(u: int, v: int, n: int) -> int:
    """
    Index of the unordered pair ``{u, v}`` in the lexicographic enumeration.

    Examples
    --------
    >>> pair_index(0, 1, 4), pair_index(2, 3, 4), pair_index(3, 2, 4)
    (0, 5, 5)
    """
    if u > v:
        u, v = v, u
    return u * (2 * n - u - 1) // 2 + v - u - 1


def pair_indices(u: np.ndarray, v: np.ndarray, n: int) -> np.ndarray:
    """Vectorized :func:`pair_index` over arrays of endpoints."""
    u = np.asarray(u, dtype=np.int64)
    v = np.asarray(v, dtype=np.int64)
    low = np.minimum(u, v)
    high = np.maximum(u, v)
    return low * (2 * n - low - 1) // 2 + high - low - 1


def _row_start(u: np.ndarray, n: int) -> np.ndarray:
    """Index of the first pair whose smaller endpoint is ``u``."""
    return u * (2 * n - u - 1) // 2


def pairs_from_indices(indices: np.ndarray, n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Invert :func:`pair_indices`.

    The smaller endpoint is first estimated in closed form and then corrected
    by integer comparison, so the result stays exact when the floating point
    estimate is off by one for very large ``n``.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        Arrays ``(u, v)`` with ``u < v``
    """
    k = np.asarray(indices, dtype=np.int64)
    if k.size == 0:
        empty = np.empty(0, dtype=np.int64)
        return empty, empty.copy()

    discriminant = (2 * n - 1) ** 2 - 8 * k.astype(np.float64)
    u = np.floor(((2 * n - 1) - np.sqrt(discriminant)) / 2).astype(np.int64)
    u = np.clip(u, 0, n - 2)

    too_far = _row_start(u, n) > k
    while too_far.any():
        u[too_far] -= 1
        too_far = _row_start(u, n) > k

    not_far_enough = _row_start(u + 1, n) <= k
    while not_far_enough.any():
        u[not_far_enough] += 1
        not_far_enough = _row_start(u + 1, n) <= k

    v = k - _row_start(u, n) + u + 1
    return u, v
