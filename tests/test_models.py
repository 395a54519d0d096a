"""
Unit Tests for record parsing, field aliases and input models
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from incentive_engine.fields import normalize_header, parse_timestamp, resolve_field
from incentive_engine.models import (
    AgentProfile,
    AppointmentRecord,
    DashboardInput,
    InvalidArgument,
    ReportingPeriod,
)


class TestFieldResolution:
    """Header lookup is tolerant of case, spacing and alias drift."""

    def test_normalize_header(self):
        assert normalize_header("Appointment Date /Time") == "appointmentdate/time"
        assert normalize_header("  STATUS ") == "status"

    def test_case_insensitive_lookup(self):
        assert resolve_field({"date submitted": "2026-10-14"}, "submitted_at") == "2026-10-14"

    def test_spacing_variants_match(self):
        row = {"Appointment Date/Time": "10/15/2026 2:30 PM"}
        assert resolve_field(row, "appointment_at") == "10/15/2026 2:30 PM"

    def test_first_non_empty_alias_wins(self):
        row = {"Date Submitted": "  ", "Timestamp": "2026-10-01"}
        assert resolve_field(row, "submitted_at") == "2026-10-01"

    def test_missing_field(self):
        assert resolve_field({"Status": "Approved"}, "address") is None


class TestParseTimestamp:
    """Record store timestamp formats."""

    def test_iso_with_z(self):
        assert parse_timestamp("2026-10-14T12:00:00Z") == datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)

    def test_iso_with_offset(self):
        parsed = parse_timestamp("2026-10-14T12:00:00-07:00")
        assert parsed.utcoffset().total_seconds() == -7 * 3600

    def test_spreadsheet_format(self):
        assert parse_timestamp("10/14/2026 2:30 PM") == datetime(2026, 10, 14, 14, 30)

    def test_date_only(self):
        assert parse_timestamp("10/14/2026") == datetime(2026, 10, 14)

    def test_epoch_milliseconds(self):
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", True])
    def test_unparseable_is_none(self, value):
        assert parse_timestamp(value) is None


class TestAppointmentRecord:
    """Building records from record store rows."""

    def test_from_spreadsheet_row(self):
        row = {
            "Date Submitted": "10/14/2026 9:15 AM",
            "Appointment Date /Time": "10/20/2026 4:00 PM",
            "Status": "Approved",
            "Homeowner Name(s)": "Pat & Sam Lee",
            "Address": "12 Elm St",
        }
        record = AppointmentRecord.from_dict(row)

        assert record.submitted_at == datetime(2026, 10, 14, 9, 15)
        assert record.appointment_at == datetime(2026, 10, 20, 16, 0)
        assert record.status == "Approved"
        assert record.homeowner_name == "Pat & Sam Lee"
        assert record.address == "12 Elm St"
        assert record.raw == row

    def test_timestamp_falls_back_to_appointment(self):
        record = AppointmentRecord.from_dict({"Appointment Date": "2026-10-20"})

        assert record.submitted_at is None
        assert record.timestamp == datetime(2026, 10, 20)

    def test_malformed_timestamp_is_not_an_error(self):
        record = AppointmentRecord.from_dict({"Date Submitted": "yesterday", "Status": "Approved"})

        assert record.timestamp is None

    def test_raw_row_is_copied(self):
        row = {"Status": "Approved"}
        record = AppointmentRecord.from_dict(row)
        row["Status"] = "Cancelled"

        assert record.raw == {"Status": "Approved"}


class TestReportingPeriod:

    @pytest.mark.parametrize("name,expected", [
        ("payroll-cycle", ReportingPeriod.PAYROLL_CYCLE),
        ("This-Week", ReportingPeriod.THIS_WEEK),
        ("current_week", ReportingPeriod.THIS_WEEK),
        ("last_30_days", ReportingPeriod.LAST_30_DAYS),
        ("last_4_weeks", ReportingPeriod.LAST_4_WEEKS),
        ("last_6_weeks", ReportingPeriod.LAST_6_WEEKS),
        ("all-time", ReportingPeriod.ALL_TIME),
    ])
    def test_parse(self, name, expected):
        assert ReportingPeriod.parse(name) is expected

    def test_unknown_period(self):
        with pytest.raises(InvalidArgument, match="Invalid period"):
            ReportingPeriod.parse("fortnight")

    def test_lookback_days(self):
        assert ReportingPeriod.LAST_30_DAYS.lookback_days == 30
        assert ReportingPeriod.LAST_4_WEEKS.lookback_days == 28
        assert ReportingPeriod.LAST_6_WEEKS.lookback_days == 42
        assert ReportingPeriod.THIS_WEEK.lookback_days is None


class TestDashboardInput:

    def test_defaults(self):
        parsed = DashboardInput.from_dict({"records": []})

        assert parsed.period is ReportingPeriod.PAYROLL_CYCLE
        assert parsed.now is None
        assert parsed.agent is None

    def test_accepts_leads_key(self):
        parsed = DashboardInput.from_dict({"leads": [{"Status": "Approved"}], "period": "all-time"})

        assert len(parsed.records) == 1

    def test_invalid_now(self):
        with pytest.raises(InvalidArgument):
            DashboardInput.from_dict({"records": [], "now": "someday"})

    def test_records_must_be_a_list(self):
        with pytest.raises(InvalidArgument):
            DashboardInput.from_dict({"records": {"Status": "Approved"}})

    def test_agent_profile(self):
        agent = AgentProfile.from_dict({"id": "agent_001", "name": "John Smith", "base_rate": 15.0, "weekly_hours": 40})

        assert agent.agent_id == "agent_001"
        assert agent.base_rate == Decimal("15.0")
        assert agent.hours_worked == Decimal("40")

    def test_agent_profile_rejects_non_numeric_rate(self):
        with pytest.raises(InvalidArgument):
            AgentProfile.from_dict({"base_rate": "fifteen"})

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", float("inf")])
    def test_agent_profile_rejects_non_finite_values(self, value):
        with pytest.raises(InvalidArgument, match="finite"):
            AgentProfile.from_dict({"base_rate": 15, "hours_worked": value})

    @pytest.mark.parametrize("agent", ["bob", ["bob"], 7])
    def test_agent_must_be_an_object(self, agent):
        with pytest.raises(InvalidArgument, match="agent"):
            DashboardInput.from_dict({"records": [], "agent": agent})
