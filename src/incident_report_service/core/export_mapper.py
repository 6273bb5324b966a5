"""
Export Mapper

Flattens incident and report data into the ordered, labelled text blocks a
document writer paginates. No I/O happens here.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict

from incident_report_service.models.incident import IncidentData
from incident_report_service.models.report import ReportData

NONE_SPECIFIED = "None specified"

DISCLAIMER = (
    "Disclaimer: This document was generated with AI assistance for informational and "
    "documentation purposes only. It does not constitute legal advice. Always consult with "
    "a qualified legal professional for advice on your specific situation."
)


class Emphasis(str, Enum):
    NORMAL = "normal"
    BOLD = "bold"


class BlockRole(str, Enum):
    """Typographic role a writer maps to size, colour and alignment"""
    TITLE = "title"
    SUBTITLE = "subtitle"
    SECTION = "section"
    SUBSECTION = "subsection"
    BODY = "body"
    DISCLAIMER = "disclaimer"


class DocumentBlock(BaseModel):
    """One run of text in the exported document"""

    model_config = ConfigDict(frozen=True)

    text: str
    emphasis: Emphasis = Emphasis.NORMAL
    is_heading: bool = False
    role: BlockRole = BlockRole.BODY


def _heading(text: str, role: BlockRole) -> DocumentBlock:
    return DocumentBlock(text=text, emphasis=Emphasis.BOLD, is_heading=True, role=role)


def _body(text: str) -> DocumentBlock:
    return DocumentBlock(text=text)


def format_display_date(date: str) -> str:
    """Render YYYY-MM-DD as M/D/YYYY; anything else passes through unchanged"""
    parts = date.split("-")
    if len(parts) == 3 and all(p.isdigit() for p in parts):
        year, month, day = (int(p) for p in parts)
        return f"{month}/{day}/{year}"
    return date


def export_filename(data: IncidentData, extension: str = "pdf") -> str:
    return f"Incident-Report-{data.date}.{extension}"


def to_document_blocks(incident: IncidentData, report: ReportData) -> List[DocumentBlock]:
    """Build the export block sequence in its fixed order.

    The Supporting Evidence section is the only optional part; it appears
    only when evidence was attached.
    """
    blocks = [
        _heading(report.title, BlockRole.TITLE),
        DocumentBlock(
            text=(
                f"Incident Date: {format_display_date(incident.date)} | "
                f"Time: {incident.time} | Jurisdiction: {incident.jurisdiction}"
            ),
            role=BlockRole.SUBTITLE,
        ),
        _heading("AI Analysis", BlockRole.SECTION),
        _body(f"Category: {report.category.value}"),
        _body(f"Severity: {report.severity.value}"),
        _body(f"Justification: {report.severityJustification}"),
        _heading("Professional Summary", BlockRole.SECTION),
        _body(report.professionalSummary),
        _heading("Observed Impact on Child(ren)", BlockRole.SECTION),
        _body(report.observedImpact),
        _heading("Parties Involved", BlockRole.SUBSECTION),
        _body(f"Other Parties: {', '.join(incident.parties) or NONE_SPECIFIED}"),
        _body(f"Children Present/Affected: {', '.join(incident.children) or NONE_SPECIFIED}"),
        _heading("Original Account", BlockRole.SUBSECTION),
        _body(f'"{incident.narrative}"'),
    ]

    if incident.evidence:
        blocks.append(_heading("Supporting Evidence", BlockRole.SUBSECTION))
        blocks.append(_body(", ".join(e.name for e in incident.evidence)))

    blocks.extend([
        _heading("Legal Insights (Not Legal Advice)", BlockRole.SECTION),
        _body(report.legalInsights),
        _heading("AI Notes & Recommendations", BlockRole.SUBSECTION),
        _body(report.aiNotes),
        _heading("Sources", BlockRole.SUBSECTION),
        _body(", ".join(report.sources)),
        DocumentBlock(text=DISCLAIMER, role=BlockRole.DISCLAIMER),
    ])
    return blocks
