"""
Validation & Progression

Pure predicates deciding whether the wizard may move past a step. They are
evaluated on demand against the current snapshot; nothing is cached.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from incident_report_service.models.incident import IncidentData

REASON_INVALID = "invalid date/time"
REASON_FUTURE = "cannot be in the future"

_MESSAGES = {
    REASON_INVALID: "Please enter a valid date and time.",
    REASON_FUTURE: "The incident date and time cannot be in the future.",
}

_DATETIME_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S")

MIN_NARRATIVE_LENGTH = 10
FIRST_STEP = 1
FINAL_STEP = 5


class DateTimeValidity(BaseModel):
    """Outcome of the date/time check"""

    valid: bool
    reason: Optional[str] = None

    @property
    def message(self) -> str:
        """User-facing message; empty when valid"""
        return _MESSAGES.get(self.reason, "") if not self.valid else ""


def parse_incident_datetime(date: str, time: str) -> Optional[datetime]:
    """Combine date and time into a datetime, or None if they do not parse"""
    combined = f"{date.strip()}T{time.strip()}"
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(combined, fmt)
        except ValueError:
            continue
    return None


def date_time_validity(date: str, time: str, now: Optional[datetime] = None) -> DateTimeValidity:
    """Check that date and time together name a real moment not in the future.

    Either value being empty means nothing has been claimed yet, which is valid.
    """
    if not date or not time:
        return DateTimeValidity(valid=True)

    incident_at = parse_incident_datetime(date, time)
    if incident_at is None:
        return DateTimeValidity(valid=False, reason=REASON_INVALID)

    if incident_at > (now or datetime.now()):
        return DateTimeValidity(valid=False, reason=REASON_FUTURE)

    return DateTimeValidity(valid=True)


def can_advance(step: int, data: IncidentData, now: Optional[datetime] = None) -> bool:
    """Whether the wizard may leave ``step`` given the current data"""
    if step == 1:
        return bool(data.date) and bool(data.time) and date_time_validity(data.date, data.time, now).valid
    if step == 2:
        return len(data.narrative.strip()) > MIN_NARRATIVE_LENGTH
    if step == 3:
        return len(data.parties) > 0
    if step == 4:
        return bool(data.jurisdiction)
    if step == FINAL_STEP:
        return True
    raise ValueError(f"Unknown step: {step}")
