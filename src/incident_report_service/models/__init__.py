"""Data models for the Incident Report Service"""

from .incident import EvidenceFile, IncidentData
from .report import ReportCategory, ReportData, ReportRequest, Severity
from .requests import (
    CustomItemRequest,
    CustomItemResponse,
    DocumentBlockResponse,
    DocumentBlocksResponse,
    FieldValueRequest,
    HealthResponse,
    ListItemRequest,
    OptionsResponse,
    SessionStateResponse,
    TransitionResponse,
)

__all__ = [
    "EvidenceFile",
    "IncidentData",
    "ReportCategory",
    "ReportData",
    "ReportRequest",
    "Severity",
    "CustomItemRequest",
    "CustomItemResponse",
    "DocumentBlockResponse",
    "DocumentBlocksResponse",
    "FieldValueRequest",
    "HealthResponse",
    "ListItemRequest",
    "OptionsResponse",
    "SessionStateResponse",
    "TransitionResponse",
]
