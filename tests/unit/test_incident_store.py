"""Unit tests for the incident data store"""

import pytest

from incident_report_service.core.errors import UnknownFieldError
from incident_report_service.core.incident_store import IncidentStore
from incident_report_service.models.incident import EvidenceFile, IncidentData


def _evidence(name: str) -> EvidenceFile:
    return EvidenceFile(
        name=name,
        size=1024,
        mime_type="image/png",
        timestamp="01/15/2024, 02:30:00 PM",
        handle=f"handle-{name}",
    )


@pytest.mark.unit
class TestScalarFields:
    """setField on date, time, narrative and jurisdiction"""

    def test_set_field_replaces_snapshot(self):
        store = IncidentStore()
        before = store.data
        after = store.set_field("narrative", "Pickup was missed")

        assert after.narrative == "Pickup was missed"
        assert before.narrative == ""
        assert before is not after

    def test_snapshots_are_immutable(self):
        store = IncidentStore()
        with pytest.raises(Exception):
            store.data.date = "2024-01-15"

    def test_unknown_field_rejected(self):
        store = IncidentStore()
        with pytest.raises(UnknownFieldError):
            store.set_field("parties", "Co-parent")


@pytest.mark.unit
class TestToggleArrayItem:
    """toggleArrayItem on parties and children"""

    def test_toggle_adds_then_removes(self):
        store = IncidentStore()
        store.toggle_array_item("parties", "Co-parent")
        assert store.data.parties == ("Co-parent",)

        store.toggle_array_item("parties", "Co-parent")
        assert store.data.parties == ()

    def test_double_toggle_restores_order(self):
        store = IncidentStore()
        for party in ("Ex-spouse", "Grandparent", "Co-parent"):
            store.toggle_array_item("parties", party)
        original = store.data.parties

        store.toggle_array_item("parties", "Their new partner")
        store.toggle_array_item("parties", "Their new partner")

        assert store.data.parties == original

    def test_toggle_keeps_selection_order(self):
        store = IncidentStore()
        store.toggle_array_item("children", "Child 2")
        store.toggle_array_item("children", "Child 1")
        assert store.data.children == ("Child 2", "Child 1")

    def test_toggle_rejects_scalar_field(self):
        store = IncidentStore()
        with pytest.raises(UnknownFieldError):
            store.toggle_array_item("jurisdiction", "Ontario, Canada")


@pytest.mark.unit
class TestAddCustomItem:
    """addCustomItem trimming and duplicate rules"""

    def test_blank_value_is_noop(self):
        store = IncidentStore()
        assert store.add_custom_item("parties", "  ") is False
        assert store.data.parties == ()

    def test_duplicate_appended_once(self):
        store = IncidentStore()
        assert store.add_custom_item("parties", "Aunt") is True
        assert store.add_custom_item("parties", "Aunt") is False
        assert store.data.parties == ("Aunt",)

    def test_value_is_trimmed(self):
        store = IncidentStore()
        store.add_custom_item("children", "  Sam ")
        assert store.data.children == ("Sam",)

    def test_duplicates_are_case_sensitive(self):
        store = IncidentStore()
        store.add_custom_item("parties", "Aunt")
        store.add_custom_item("parties", "aunt")
        assert store.data.parties == ("Aunt", "aunt")


@pytest.mark.unit
class TestEvidence:
    """addEvidence / removeEvidence ordering"""

    def test_add_appends_in_upload_order(self):
        store = IncidentStore()
        store.add_evidence([_evidence("a.png"), _evidence("b.png")])
        store.add_evidence([_evidence("c.pdf")])
        assert [e.name for e in store.data.evidence] == ["a.png", "b.png", "c.pdf"]

    def test_remove_keeps_relative_order(self):
        store = IncidentStore()
        store.add_evidence([_evidence(n) for n in ("a", "b", "c", "d")])

        removed = store.remove_evidence(1)

        assert removed.name == "b"
        assert [e.name for e in store.data.evidence] == ["a", "c", "d"]

    def test_remove_out_of_range(self):
        store = IncidentStore()
        store.add_evidence([_evidence("a")])
        with pytest.raises(IndexError):
            store.remove_evidence(1)
        with pytest.raises(IndexError):
            store.remove_evidence(-1)
        assert len(store.data.evidence) == 1


@pytest.mark.unit
def test_reset_restores_empty_aggregate():
    store = IncidentStore()
    store.set_field("date", "2024-01-15")
    store.toggle_array_item("parties", "Co-parent")
    store.add_evidence([_evidence("a")])

    assert store.reset() == IncidentData()
