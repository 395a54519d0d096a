"""
Domain Models for the Appointment Incentive Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from .fields import parse_timestamp, resolve_field

# =============================================================================
# ERRORS
# =============================================================================


class InvalidArgument(ValueError):
    """A caller passed a value outside the engine's contract."""


# =============================================================================
# ENUMS
# =============================================================================


class RecordStatus(Enum):
    APPROVED = "approved"
    CANCELLED = "cancelled"
    PENDING = "pending"


class ReportingPeriod(Enum):
    THIS_WEEK = "this-week"
    LAST_30_DAYS = "last-30-days"
    LAST_4_WEEKS = "last-4-weeks"
    LAST_6_WEEKS = "last-6-weeks"
    ALL_TIME = "all-time"
    PAYROLL_CYCLE = "payroll-cycle"

    @property
    def lookback_days(self) -> int | None:
        """Days of rolling lookback, or None for non-rolling periods."""
        return _LOOKBACK_DAYS.get(self)

    @classmethod
    def parse(cls, value) -> "ReportingPeriod":
        """
        Resolve a period name.

        Accepts canonical values case-insensitively, underscores in place of
        hyphens, and the legacy dashboard name 'current_week'.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidArgument(f"period must be a string, got: {value!r}")

        name = value.strip().lower().replace("_", "-")
        name = _LEGACY_PERIOD_NAMES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise InvalidArgument(f"Invalid period: {value!r}. Must be one of: {valid}") from None


_LOOKBACK_DAYS = {
    ReportingPeriod.LAST_30_DAYS: 30,
    ReportingPeriod.LAST_4_WEEKS: 28,
    ReportingPeriod.LAST_6_WEEKS: 42,
}

_LEGACY_PERIOD_NAMES = {
    "current-week": "this-week",
}


# =============================================================================
# INPUT MODELS
# =============================================================================


def _to_decimal(value, name: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise InvalidArgument(f"{name} must be a number, got: {value!r}") from None
    if not number.is_finite():
        raise InvalidArgument(f"{name} must be a finite number, got: {value!r}")
    return number


@dataclass
class AppointmentRecord:
    """One submitted lead/appointment row from the record store."""

    submitted_at: datetime | None = None
    appointment_at: datetime | None = None
    status: str = ""
    homeowner_name: str = ""
    address: str = ""
    raw: dict = field(default_factory=dict)

    @property
    def timestamp(self) -> datetime | None:
        """Window key: submission time, falling back to the appointment time."""
        if self.submitted_at is not None:
            return self.submitted_at
        return self.appointment_at

    @classmethod
    def from_dict(cls, data: dict) -> "AppointmentRecord":
        status = resolve_field(data, "status")
        name = resolve_field(data, "homeowner_name")
        address = resolve_field(data, "address")
        return cls(
            submitted_at=parse_timestamp(resolve_field(data, "submitted_at")),
            appointment_at=parse_timestamp(resolve_field(data, "appointment_at")),
            status=str(status) if status is not None else "",
            homeowner_name=str(name) if name is not None else "",
            address=str(address) if address is not None else "",
            raw=dict(data),
        )


@dataclass
class AgentProfile:
    """Hourly pay details for the agent viewing the dashboard."""

    agent_id: str = ""
    name: str = ""
    base_rate: Decimal = Decimal("0")
    hours_worked: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict) -> "AgentProfile":
        hours = data.get("hours_worked", data.get("weekly_hours", 0))
        return cls(
            agent_id=str(data.get("agent_id", data.get("id", ""))),
            name=data.get("name", ""),
            base_rate=_to_decimal(data.get("base_rate", 0), "base_rate"),
            hours_worked=_to_decimal(hours, "hours_worked"),
        )


@dataclass
class DashboardInput:
    """Complete input for building one agent dashboard."""

    records: list[AppointmentRecord]
    period: ReportingPeriod
    now: datetime | None = None
    agent: AgentProfile | None = None
    milestone_cap: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardInput":
        # The record store webhook returns its rows under 'leads'
        rows = data.get("records", data.get("leads", []))
        if not isinstance(rows, list):
            raise InvalidArgument(f"records must be a list, got: {type(rows).__name__}")
        for row in rows:
            if not isinstance(row, dict):
                raise InvalidArgument(f"each record must be an object, got: {row!r}")

        now = None
        if data.get("now") is not None:
            now = parse_timestamp(data["now"])
            if now is None:
                raise InvalidArgument(f"Invalid now timestamp: {data['now']!r}")

        agent = data.get("agent")
        if agent is not None and not isinstance(agent, dict):
            raise InvalidArgument(f"agent must be an object, got: {agent!r}")

        return cls(
            records=[AppointmentRecord.from_dict(row) for row in rows],
            period=ReportingPeriod.parse(data.get("period", ReportingPeriod.PAYROLL_CYCLE.value)),
            now=now,
            agent=AgentProfile.from_dict(agent) if agent else None,
            milestone_cap=data.get("milestone_cap"),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class StatusCounts:
    """Classification totals for one set of records."""

    approved: int = 0
    cancelled: int = 0
    pending: int = 0

    @property
    def total(self) -> int:
        return self.approved + self.cancelled + self.pending

    @property
    def cancellation_rate(self) -> Decimal:
        """
        Cancelled share of all records, as a percentage rounded to one decimal.

        The rounded value is also what decides high-performance mode, so the
        displayed rate and the applied rate never disagree. Empty -> 0.
        """
        if self.total == 0:
            return Decimal("0")
        rate = Decimal(self.cancelled) / Decimal(self.total) * Decimal("100")
        return rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


@dataclass
class TierContribution:
    """One tier's share of an incentive total."""

    tier: int
    count: int
    rate: Decimal
    subtotal: Decimal
    description: str
    unit: str = "per_appointment"  # or 'flat'


@dataclass
class IncentiveResult:
    """Incentive pay for one (approved count, cancellation rate) pair."""

    total_incentive: Decimal
    tier_breakdown: list[TierContribution]
    approved_count: int
    cancellation_rate: Decimal
    high_performance: bool
    tier_table_version: str = ""


@dataclass
class TierProgress:
    """Where an approved count sits relative to the tier milestones."""

    current_tier: int
    current_tier_label: str
    next_milestone: int
    completion: Decimal


@dataclass
class BasePay:
    """Hourly base pay for the period."""

    base_rate: Decimal = Decimal("0")
    hours_worked: Decimal = Decimal("0")
    base_pay: Decimal = Decimal("0")


@dataclass
class ProcessingContext:
    """
    Holds all intermediate state during dashboard processing.
    This is the "bag" that flows through the pipeline.
    """

    # Input (immutable during processing)
    records: list[AppointmentRecord]
    period: ReportingPeriod
    now: datetime
    agent: AgentProfile | None = None
    milestone_cap: int | None = None

    # Step results (populated as we go)
    window_start: datetime | None = None
    window_end: datetime | None = None
    windowed: list[AppointmentRecord] = field(default_factory=list)
    classifications: list[RecordStatus] = field(default_factory=list)
    counts: StatusCounts = field(default_factory=StatusCounts)
    incentive: IncentiveResult | None = None
    progress: TierProgress | None = None
    base_pay: BasePay = field(default_factory=BasePay)


@dataclass
class DashboardResult:
    """Final output of dashboard processing."""

    period_summary: dict
    counts: dict
    incentive: dict
    progress: dict
    pay_summary: dict
    records: list
    agent: dict | None = None
