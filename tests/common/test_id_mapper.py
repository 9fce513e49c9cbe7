"""
Tests for the IDMapper class.

Covers construction from a node universe, lookups in both directions and
the error conditions of manual mapping.
"""

import pytest

from edgeMarkov.common.id_mapper import IDMapper


class TestIDMapperBasic:
    """Test basic IDMapper functionality."""

    def test_empty_mapper(self):
        mapper = IDMapper()

        assert mapper.size() == 0
        assert len(mapper) == 0
        assert mapper.is_empty()
        assert repr(mapper) == "IDMapper(size=0)"

    def test_add_mapping(self):
        mapper = IDMapper()
        mapper.add_mapping("alice", 0)

        assert mapper.get_internal("alice") == 0
        assert mapper.get_original(0) == "alice"
        assert "alice" in mapper
        assert not mapper.is_empty()

    def test_contains_checks_original_ids_only(self):
        mapper = IDMapper.from_nodes(["a", "b"])

        assert "a" in mapper
        assert 0 not in mapper


class TestFromNodes:
    """Test building a mapper from a node universe."""

    def test_sortable_nodes_are_sorted(self):
        mapper = IDMapper.from_nodes([10, 3, 7, 3])

        assert mapper.size() == 3
        assert mapper.originals() == [3, 7, 10]
        assert mapper.get_internal(10) == 2

    def test_unorderable_nodes_keep_first_seen_order(self):
        mapper = IDMapper.from_nodes(["b", 1, "a"])

        assert mapper.originals() == ["b", 1, "a"]

    def test_equality(self):
        assert IDMapper.from_nodes([1, 2, 3]) == IDMapper.from_nodes([3, 2, 1])
        assert IDMapper.from_nodes([1, 2]) != IDMapper.from_nodes([1, 3])


class TestLookups:
    """Test single, batch and edge lookups."""

    def setup_method(self):
        self.mapper = IDMapper.from_nodes([5, 1, 9])

    def test_batches(self):
        assert self.mapper.get_internal_batch([9, 1]) == [2, 0]
        assert self.mapper.get_original_batch([1, 2]) == [5, 9]

    def test_original_edge_is_normalized(self):
        assert self.mapper.original_edge(2, 0) == (1, 9)
        assert self.mapper.original_edge(0, 2) == (1, 9)

    def test_missing_ids(self):
        with pytest.raises(KeyError):
            self.mapper.get_internal(42)
        with pytest.raises(KeyError):
            self.mapper.get_original(7)
        with pytest.raises(KeyError):
            self.mapper.get_internal_batch([1, 42])

    def test_get_original_requires_int(self):
        with pytest.raises(TypeError):
            self.mapper.get_original("0")


class TestAddMappingErrors:
    """Test error conditions of add_mapping."""

    def test_duplicate_original(self):
        mapper = IDMapper()
        mapper.add_mapping("a", 0)
        with pytest.raises(ValueError):
            mapper.add_mapping("a", 1)

    def test_duplicate_internal(self):
        mapper = IDMapper()
        mapper.add_mapping("a", 0)
        with pytest.raises(ValueError):
            mapper.add_mapping("b", 0)

    def test_negative_internal(self):
        with pytest.raises(ValueError):
            IDMapper().add_mapping("a", -1)

    def test_unhashable_original(self):
        with pytest.raises(TypeError):
            IDMapper().add_mapping(["a"], 0)
