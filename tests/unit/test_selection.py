"""
Unit tests for SelectionSet.
"""
import pytest

from growbulk.operations.selection import SelectionSet


@pytest.fixture
def selection():
    return SelectionSet()


class TestSelectionSet:
    """Test selection management."""

    def test_initial_state(self, selection):
        assert selection.count == 0
        assert selection.is_empty
        assert not selection.has_selection
        assert selection.selection_mode is False

    def test_toggle_adds_and_removes(self, selection):
        selection.toggle("1")
        assert "1" in selection
        assert selection.count == 1

        selection.toggle("1")
        assert "1" not in selection
        assert selection.is_empty

    def test_toggle_twice_restores_prior_membership(self, selection):
        selection.select_all(["1", "2"])
        before = set(selection.ids)

        selection.toggle("3")
        selection.toggle("3")
        selection.toggle("1")
        selection.toggle("1")

        assert set(selection.ids) == before

    def test_select_all_replaces(self, selection):
        selection.toggle("9")
        selection.select_all(["1", "2"])

        assert set(selection.ids) == {"1", "2"}

    def test_select_all_deduplicates(self, selection):
        selection.select_all(["1", "1", "2"])
        assert selection.count == 2

    def test_select_all_then_resolve(self, selection, sample_plants):
        selection.toggle("3")
        selection.toggle("2")
        selection.select_all(["1", "2"])

        resolved = selection.resolve(sample_plants)

        assert [p["id"] for p in resolved] == ["1", "2"]

    def test_select_where(self, selection, sample_plants):
        selection.toggle("2")
        selection.select_where(sample_plants, lambda p: p["status"] == "healthy")

        assert set(selection.ids) == {"1", "3"}

    def test_resolve_ignores_unknown_entities(self, selection, sample_plants):
        selection.select_all(["1", "missing"])
        assert selection.resolve(sample_plants) == [sample_plants[0]]

    def test_clear(self, selection):
        selection.select_all(["1", "2", "3"])
        selection.clear()
        assert selection.is_empty

    def test_selection_mode_off_clears(self, selection):
        selection.set_selection_mode(True)
        selection.select_all(["1", "2", "3"])
        assert selection.count == 3

        selection.set_selection_mode(False)

        assert selection.is_empty
        assert selection.selection_mode is False

    def test_selection_mode_on_keeps_selection(self, selection):
        selection.select_all(["1"])
        selection.set_selection_mode(True)

        assert selection.selection_mode is True
        assert selection.count == 1

    def test_toggle_selection_mode(self, selection):
        selection.toggle_selection_mode()
        assert selection.selection_mode is True

        selection.toggle("1")
        selection.toggle_selection_mode()

        assert selection.selection_mode is False
        assert selection.is_empty

    def test_ids_keep_insertion_order(self, selection):
        for entity_id in ["c", "a", "b"]:
            selection.toggle(entity_id)
        assert selection.ids == ("c", "a", "b")
        assert list(selection) == ["c", "a", "b"]
