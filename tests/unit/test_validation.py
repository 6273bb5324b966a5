"""Unit tests for date/time validity and step gating"""

from datetime import datetime

import pytest

from incident_report_service.core.validation import (
    REASON_FUTURE,
    REASON_INVALID,
    can_advance,
    date_time_validity,
)
from incident_report_service.models.incident import IncidentData

NOW = datetime(2024, 6, 1, 12, 0)


@pytest.mark.unit
class TestDateTimeValidity:

    def test_future_is_invalid(self):
        result = date_time_validity("2099-01-01", "10:00", now=NOW)
        assert result.valid is False
        assert result.reason == REASON_FUTURE
        assert result.message == "The incident date and time cannot be in the future."

    def test_unset_time_is_valid_regardless_of_date(self):
        assert date_time_validity("2099-01-01", "", now=NOW).valid is True
        assert date_time_validity("not a date", "", now=NOW).valid is True

    def test_unset_date_is_valid(self):
        assert date_time_validity("", "10:00", now=NOW).valid is True

    def test_unparseable_is_invalid(self):
        result = date_time_validity("2023-02-30", "10:00", now=NOW)
        assert result.valid is False
        assert result.reason == REASON_INVALID
        assert result.message == "Please enter a valid date and time."

    def test_bad_time_is_invalid(self):
        assert date_time_validity("2024-01-15", "25:00", now=NOW).reason == REASON_INVALID

    def test_past_is_valid(self):
        result = date_time_validity("2024-01-15", "14:30", now=NOW)
        assert result.valid is True
        assert result.message == ""

    def test_exactly_now_is_valid(self):
        assert date_time_validity("2024-06-01", "12:00", now=NOW).valid is True

    def test_seconds_are_accepted(self):
        assert date_time_validity("2024-01-15", "14:30:15", now=NOW).valid is True


@pytest.mark.unit
class TestCanAdvance:

    def test_step_one_requires_date_and_time(self):
        data = IncidentData(date="2024-01-15")
        assert can_advance(1, data, now=NOW) is False

        data = data.model_copy(update={"time": "14:30"})
        assert can_advance(1, data, now=NOW) is True

        data = data.model_copy(update={"date": ""})
        assert can_advance(1, data, now=NOW) is False

    def test_step_one_rejects_future(self):
        data = IncidentData(date="2099-01-01", time="10:00")
        assert can_advance(1, data, now=NOW) is False

    def test_step_two_needs_more_than_ten_characters(self):
        assert can_advance(2, IncidentData(narrative="0123456789"), now=NOW) is False
        assert can_advance(2, IncidentData(narrative="   0123456789   "), now=NOW) is False
        assert can_advance(2, IncidentData(narrative="0123456789A"), now=NOW) is True

    def test_step_three_needs_a_party(self):
        assert can_advance(3, IncidentData(children=("Child 1",)), now=NOW) is False
        assert can_advance(3, IncidentData(parties=("Co-parent",)), now=NOW) is True

    def test_step_four_needs_jurisdiction(self):
        assert can_advance(4, IncidentData(), now=NOW) is False
        assert can_advance(4, IncidentData(jurisdiction="Quebec, Canada"), now=NOW) is True

    def test_final_step_always_true(self):
        assert can_advance(5, IncidentData(), now=NOW) is True

    def test_unknown_step(self):
        with pytest.raises(ValueError):
            can_advance(6, IncidentData(), now=NOW)

    def test_complete_incident_passes_every_step(self, complete_incident):
        for step in (1, 2, 3, 4):
            assert can_advance(step, complete_incident, now=NOW) is True
