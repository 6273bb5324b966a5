"""
API Request and Response Models

Pydantic models for API input/output validation.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .incident import IncidentData
from .report import ReportData


class FieldValueRequest(BaseModel):
    """New value for a scalar incident field"""

    value: str = Field(..., description="Field value; empty string clears it")


class ListItemRequest(BaseModel):
    """Party or child to toggle"""

    item: str = Field(..., description="Entry to add if absent or remove if present")


class CustomItemRequest(BaseModel):
    """Free-text party or child; omit the value to use the buffered input"""

    value: Optional[str] = Field(None, description="Entry to append")


class SessionStateResponse(BaseModel):
    """Everything a client needs to render the wizard"""

    step: int = Field(..., ge=1, le=5)
    step_title: str
    can_proceed: bool
    date_validation_message: str
    incident: IncidentData
    report: Optional[ReportData]
    generation_status: str
    is_generating: bool
    custom_inputs: Dict[str, str]


class TransitionResponse(BaseModel):
    """Outcome of a navigation request"""

    moved: bool = Field(..., description="Whether the step changed")
    state: SessionStateResponse


class CustomItemResponse(BaseModel):
    """Outcome of adding a free-text entry"""

    added: bool = Field(..., description="False for blank or duplicate entries")
    state: SessionStateResponse


class OptionsResponse(BaseModel):
    """Fixed choices offered by the wizard"""

    parties: List[str]
    children: List[str]
    jurisdictions: List[str]
    steps: Dict[int, str]


class DocumentBlockResponse(BaseModel):
    text: str
    emphasis: str
    is_heading: bool
    role: str


class DocumentBlocksResponse(BaseModel):
    """Export blocks with the filename the document will be saved under"""

    filename: str
    blocks: List[DocumentBlockResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(default="healthy")
    service: str = Field(default="incident-report-service")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    storage_available: bool = Field(default=True)
