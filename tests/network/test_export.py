"""
Tests for temporal graph export.

This module tests the contact interval and creation/deletion tables and
the files written from them, including reading an exported file back.
"""

import pytest

from edgeMarkov.common.exceptions import ConfigurationError
from edgeMarkov.network.construction import build_from_contact_intervals, build_from_snapshots
from edgeMarkov.network.export import (
    export_temporal_graph,
    to_contact_intervals,
    to_create_delete_events
)


class TestExportTables:
    """Test the tabular views of a trace."""

    def setup_method(self):
        # (1, 2) present at 0-1 and 4-5, (2, 3) present at 2 only
        self.graph = build_from_snapshots([
            [(1, 2)], [(1, 2)], [(2, 3)], [], [(1, 2)], [(1, 2)]
        ])

    def test_contact_intervals_table(self):
        df = to_contact_intervals(self.graph)

        assert df.columns == ["n1", "n2", "start", "end"]
        assert df.rows() == [(1, 2, 0, 1), (2, 3, 2, 2), (1, 2, 4, 5)]

    def test_create_delete_table(self):
        df = to_create_delete_events(self.graph)

        assert df.columns == ["t", "n1", "n2", "event"]
        assert df.rows() == [
            (0, 1, 2, "C"),
            (2, 2, 3, "C"),
            (2, 1, 2, "S"),
            (3, 2, 3, "S"),
            (4, 1, 2, "C"),
        ]

    def test_empty_trace(self):
        graph = build_from_snapshots([[], []], nodes=[1, 2])

        assert to_contact_intervals(graph).is_empty()
        assert to_create_delete_events(graph).is_empty()


class TestExportTemporalGraph:
    """Test writing traces to disk."""

    def setup_method(self):
        self.graph = build_from_snapshots([[(1, 2)], [(1, 2), (3, 4)], [(3, 4)]])

    def test_start_end_file(self, tmp_path):
        path = export_temporal_graph(self.graph, tmp_path / "out" / "contacts.txt")

        assert path.exists()
        assert path.read_text().splitlines() == ["1 2 0 1", "3 4 1 2"]

    def test_create_delete_file(self, tmp_path):
        path = export_temporal_graph(self.graph, tmp_path / "events.txt", format="create_delete")

        assert path.read_text().splitlines() == ["0 1 2 C", "1 3 4 C", "2 1 2 S"]

    def test_round_trip_through_contact_file(self, tmp_path):
        path = export_temporal_graph(self.graph, tmp_path / "contacts.txt")
        restored = build_from_contact_intervals(path)

        assert len(restored) == len(self.graph)
        for t in range(len(self.graph)):
            assert sorted(restored.edges(t)) == sorted(self.graph.edges(t))

    def test_existing_file_requires_overwrite(self, tmp_path):
        path = tmp_path / "contacts.txt"
        path.write_text("old")

        with pytest.raises(ConfigurationError, match="already exists"):
            export_temporal_graph(self.graph, path)

        export_temporal_graph(self.graph, path, overwrite=True)
        assert path.read_text().startswith("1 2 0 1")

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ConfigurationError, match="format"):
            export_temporal_graph(self.graph, tmp_path / "x.gexf", format="gexf")
