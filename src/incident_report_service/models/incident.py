"""
Incident Data Models

Immutable snapshots of the incident form state for one report session.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


# Fields editable through setField; the list-valued fields have their own helpers
SCALAR_FIELDS = ("date", "time", "narrative", "jurisdiction")
LIST_FIELDS = ("parties", "children")

PREDEFINED_PARTIES = (
    "Ex-spouse",
    "Co-parent",
    "Their new partner",
    "Grandparent",
    "Other family member",
)
PREDEFINED_CHILDREN = ("Child 1", "Child 2", "Child 3")
JURISDICTIONS = (
    "Ontario, Canada",
    "British Columbia, Canada",
    "Alberta, Canada",
    "Quebec, Canada",
    "Other Canadian Province",
    "US State - Please specify",
)


class EvidenceFile(BaseModel):
    """Evidence file attached to an incident.

    ``handle`` is the storage key of the session-scoped content; it is
    released when the file is removed or the session restarts.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Original filename")
    size: int = Field(..., ge=0, description="File size in bytes")
    mime_type: str = Field(..., description="MIME type")
    timestamp: str = Field(..., description="Capture time, formatted for display")
    handle: str = Field(..., description="Storage key of the file content")


class IncidentData(BaseModel):
    """Snapshot of one incident session's form state.

    Empty strings mean "not yet provided". Every mutation produces a new
    instance, so a snapshot handed out is never changed underneath its reader.
    """

    model_config = ConfigDict(frozen=True)

    date: str = Field(default="", description="Calendar date (YYYY-MM-DD)")
    time: str = Field(default="", description="Clock time (HH:MM, 24h)")
    narrative: str = Field(default="", description="Free-text account")
    parties: Tuple[str, ...] = Field(default=(), description="Parties involved, in selection order")
    children: Tuple[str, ...] = Field(default=(), description="Children present/affected, in selection order")
    jurisdiction: str = Field(default="", description="Jurisdiction name")
    evidence: Tuple[EvidenceFile, ...] = Field(default=(), description="Evidence in upload order")
