"""
ID mapping between original node identifiers and internal node indices.

NetworkIt graphs require consecutive integer node ids starting from 0, while
contact traces use arbitrary identifiers (often 1-based integers with gaps).
Every snapshot of a temporal graph is stored over the same internal index
space, so one mapper serves the whole trace.
"""

from typing import Any, Dict, Iterable, List, Tuple


class IDMapper:
    """
    Bidirectional mapping between original and internal node IDs.

    Attributes
    ----------
    original_to_internal : Dict[Any, int]
        Maps original IDs to internal ids (0, 1, 2, ...)
    internal_to_original : Dict[int, Any]
        Maps internal ids to original IDs

    Examples
    --------
    >>> mapper = IDMapper.from_nodes([10, 3, 7])
    >>> mapper.get_internal(3)
    0
    >>> mapper.get_original(2)
    10

    Notes
    -----
    A mapper is treated as read-only once attached to a temporal graph.
    """

    def __init__(self) -> None:
        self.original_to_internal: Dict[Any, int] = {}
        self.internal_to_original: Dict[int, Any] = {}

    @classmethod
    def from_nodes(cls, nodes: Iterable[Any]) -> 'IDMapper':
        """
        Build a mapper over a node universe.

        Nodes are sorted when they are mutually orderable so that internal
        ids follow the natural order of the original ids; otherwise the
        first-seen order is kept.

        Parameters
        ----------
        nodes : Iterable[Any]
            Hashable node identifiers; duplicates are ignored

        Returns
        -------
        IDMapper
            Mapper with internal ids ``0..n-1``
        """
        unique_nodes = list(dict.fromkeys(nodes))
        try:
            unique_nodes = sorted(unique_nodes)
        except TypeError:
            pass

        mapper = cls()
        for internal_id, original_id in enumerate(unique_nodes):
            mapper.add_mapping(original_id, internal_id)
        return mapper

    def get_internal(self, original_id: Any) -> int:
        """
        Get the internal id for an original ID.

        Raises
        ------
        KeyError
            If original_id is not found in the mapping
        """
        try:
            return self.original_to_internal[original_id]
        except KeyError:
            raise KeyError(f"Original ID '{original_id}' not found in mapping")

    def get_original(self, internal_id: int) -> Any:
        """
        Get the original ID for an internal id.

        Raises
        ------
        KeyError
            If internal_id is not found in the mapping
        TypeError
            If internal_id is not an integer
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        try:
            return self.internal_to_original[internal_id]
        except KeyError:
            raise KeyError(f"Internal ID {internal_id} not found in mapping")

    def get_internal_batch(self, original_ids: List[Any]) -> List[int]:
        """Get internal ids for a batch of original IDs."""
        result = []
        for original_id in original_ids:
            try:
                result.append(self.original_to_internal[original_id])
            except KeyError:
                raise KeyError(f"Original ID '{original_id}' not found in mapping")
        return result

    def get_original_batch(self, internal_ids: List[int]) -> List[Any]:
        """Get original IDs for a batch of internal ids."""
        result = []
        for internal_id in internal_ids:
            try:
                result.append(self.internal_to_original[int(internal_id)])
            except KeyError:
                raise KeyError(f"Internal ID {internal_id} not found in mapping")
        return result

    def original_edge(self, u: int, v: int) -> Tuple[Any, Any]:
        """
        Translate an internal pair into a normalized original edge.

        The returned tuple is ordered by internal id, which matches the order
        of the original ids whenever those are sortable.
        """
        if u > v:
            u, v = v, u
        return self.internal_to_original[u], self.internal_to_original[v]

    def add_mapping(self, original_id: Any, internal_id: int) -> None:
        """
        Add a new ID mapping pair.

        Raises
        ------
        ValueError
            If original_id or internal_id is already mapped, or internal_id
            is negative
        TypeError
            If internal_id is not an integer or original_id is not hashable
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        if internal_id < 0:
            raise ValueError(f"Internal ID must be non-negative, got {internal_id}")

        try:
            hash(original_id)
        except TypeError:
            raise TypeError(f"Original ID must be hashable, got {type(original_id)}")

        if original_id in self.original_to_internal:
            existing_internal = self.original_to_internal[original_id]
            raise ValueError(
                f"Original ID '{original_id}' already mapped to internal ID {existing_internal}"
            )

        if internal_id in self.internal_to_original:
            existing_original = self.internal_to_original[internal_id]
            raise ValueError(
                f"Internal ID {internal_id} already mapped to original ID '{existing_original}'"
            )

        self.original_to_internal[original_id] = internal_id
        self.internal_to_original[internal_id] = original_id

    def originals(self) -> List[Any]:
        """Original IDs ordered by internal id."""
        return [self.internal_to_original[i] for i in range(self.size())]

    def size(self) -> int:
        """Number of mapped nodes."""
        return len(self.original_to_internal)

    def is_empty(self) -> bool:
        return len(self.original_to_internal) == 0

    def has_original(self, original_id: Any) -> bool:
        return original_id in self.original_to_internal

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, item: Any) -> bool:
        """Check whether ``item`` is a known original ID."""
        return self.has_original(item)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IDMapper):
            return NotImplemented
        return self.original_to_internal == other.original_to_internal

    def __repr__(self) -> str:
        return f"IDMapper(size={self.size()})"
