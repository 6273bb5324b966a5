"""
Incident Data Store

Holds the form state of one incident session. Each mutation swaps in a new
immutable IncidentData snapshot.
"""

from typing import Iterable, Optional

from incident_report_service.core.errors import UnknownFieldError
from incident_report_service.models.incident import (
    LIST_FIELDS,
    SCALAR_FIELDS,
    EvidenceFile,
    IncidentData,
)


class IncidentStore:
    """Mutation helpers over the current IncidentData snapshot"""

    def __init__(self, data: Optional[IncidentData] = None):
        self._data = data or IncidentData()

    @property
    def data(self) -> IncidentData:
        """Current snapshot"""
        return self._data

    def _replace(self, **changes) -> IncidentData:
        self._data = self._data.model_copy(update=changes)
        return self._data

    @staticmethod
    def _check_list_field(field: str) -> None:
        if field not in LIST_FIELDS:
            raise UnknownFieldError(f"Not a list field: {field}")

    def set_field(self, field: str, value: str) -> IncidentData:
        """Set one of date, time, narrative or jurisdiction"""
        if field not in SCALAR_FIELDS:
            raise UnknownFieldError(f"Not a scalar field: {field}")
        return self._replace(**{field: value})

    def toggle_array_item(self, field: str, item: str) -> IncidentData:
        """Add ``item`` to parties/children if absent, remove it if present"""
        self._check_list_field(field)
        current = getattr(self._data, field)
        if item in current:
            updated = tuple(i for i in current if i != item)
        else:
            updated = current + (item,)
        return self._replace(**{field: updated})

    def add_custom_item(self, field: str, value: str) -> bool:
        """Append a trimmed free-text entry to parties/children.

        Returns:
            True if the entry was appended; False for blank or duplicate values
        """
        self._check_list_field(field)
        item = value.strip()
        current = getattr(self._data, field)
        if not item or item in current:
            return False
        self._replace(**{field: current + (item,)})
        return True

    def add_evidence(self, files: Iterable[EvidenceFile]) -> IncidentData:
        """Append evidence records after the existing ones, keeping upload order"""
        return self._replace(evidence=self._data.evidence + tuple(files))

    def remove_evidence(self, index: int) -> EvidenceFile:
        """Remove the evidence entry at ``index`` and return it.

        Raises:
            IndexError: If no entry exists at that position
        """
        evidence = self._data.evidence
        if index < 0 or index >= len(evidence):
            raise IndexError(f"No evidence at index {index}")
        removed = evidence[index]
        self._replace(evidence=evidence[:index] + evidence[index + 1:])
        return removed

    def reset(self) -> IncidentData:
        """Restore the empty aggregate"""
        self._data = IncidentData()
        return self._data
