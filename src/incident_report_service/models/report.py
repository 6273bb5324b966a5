"""
Report Data Models

Structured report produced by the generation step, plus the response schema
the model is asked to honour.
"""

from enum import Enum
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    """Severity levels a report may carry"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ReportCategory(str, Enum):
    """Incident category taxonomy"""
    CHILD_SAFETY = "Child Safety/Welfare Concern"
    COMMUNICATION = "Communication Issues"
    SCHEDULE_VIOLATION = "Schedule Violations"
    COURT_ORDER_BREACH = "Breach of Court Order"
    PARENTAL_ALIENATION = "Parental Alienation"
    INAPPROPRIATE_BEHAVIOR = "Inappropriate Behavior"
    FINANCIAL_DISPUTE = "Financial Disputes"
    OTHER = "Other"


class ReportData(BaseModel):
    """Generated incident report.

    Every field is required and must be non-empty; a model response that
    does not validate is treated as a generation failure.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = Field(..., min_length=1)
    category: ReportCategory
    severity: Severity
    severityJustification: str = Field(..., min_length=1)
    professionalSummary: str = Field(..., min_length=1)
    observedImpact: str = Field(..., min_length=1)
    legalInsights: str = Field(..., min_length=1)
    sources: Tuple[str, ...]
    aiNotes: str = Field(..., min_length=1)

    @field_validator("category", mode="before")
    @classmethod
    def _unlisted_category_is_other(cls, value: Any) -> Any:
        """Categories outside the taxonomy collapse to Other"""
        if isinstance(value, str) and value not in {c.value for c in ReportCategory}:
            return ReportCategory.OTHER.value
        return value

    @field_validator("sources")
    @classmethod
    def _sources_not_empty(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one source is required")
        return value


# JSON schema sent with each generation request (Gemini responseSchema dialect)
REPORT_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING", "description": "Brief descriptive title of the incident"},
        "category": {
            "type": "STRING",
            "description": "One of: " + ", ".join(c.value for c in ReportCategory if c is not ReportCategory.OTHER) + ", or Other",
        },
        "severity": {"type": "STRING", "description": "Low, Medium, or High"},
        "severityJustification": {
            "type": "STRING",
            "description": "1-2 sentence explanation of why this severity level was assigned",
        },
        "professionalSummary": {
            "type": "STRING",
            "description": "Comprehensive 2-3 paragraph professional summary removing emotional language while preserving all factual details, dates, times, and specific actions",
        },
        "observedImpact": {
            "type": "STRING",
            "description": "1-2 paragraph analysis of the potential or observed impact on the children involved",
        },
        "legalInsights": {
            "type": "STRING",
            "description": "2-3 paragraph analysis of relevant family law principles, jurisdictional considerations, and legal implications specific to the provided jurisdiction",
        },
        "sources": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of 3-5 potential legal or informational sources like 'justice.gc.ca'",
        },
        "aiNotes": {
            "type": "STRING",
            "description": "Brief notes about documentation completeness and recommendations for evidence collection",
        },
    },
    "required": [
        "title",
        "category",
        "severity",
        "severityJustification",
        "professionalSummary",
        "observedImpact",
        "legalInsights",
        "sources",
        "aiNotes",
    ],
}


NO_CHILDREN_PLACEHOLDER = "None specified"


class ReportRequest(BaseModel):
    """Incident summary handed to the report-generation collaborator"""

    model_config = ConfigDict(frozen=True)

    date: str
    time: str
    jurisdiction: str
    parties: str = Field(..., description="Comma-joined, selection order")
    children: str = Field(..., description="Comma-joined, selection order, or the placeholder")
    evidence_count: int = Field(..., ge=0)
    narrative: str = Field(..., description="Original account, verbatim")

    def to_prompt(self) -> str:
        """Instruction text sent alongside the response schema"""
        return (
            "You are a legal documentation AI specialist. Analyze this co-parenting incident "
            "and generate a comprehensive report in JSON format.\n"
            "\n"
            "INCIDENT DETAILS:\n"
            f"- Date: {self.date}\n"
            f"- Time: {self.time}\n"
            f"- Jurisdiction: {self.jurisdiction}\n"
            f"- Parties Involved: {self.parties}\n"
            f"- Children Present/Affected: {self.children}\n"
            f"- Evidence Attached: {self.evidence_count} file(s)\n"
            f"- Original Account: {self.narrative}\n"
            "\n"
            "Analyze the incident details and generate a JSON object that strictly adheres to "
            "the provided schema. Focus on objective, factual reporting suitable for legal review.\n"
            f"For the legalInsights, provide analysis specific to family law in {self.jurisdiction}.\n"
        )
