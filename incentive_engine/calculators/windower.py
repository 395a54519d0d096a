"""
Period Windower

Selects the records that fall inside a named reporting period.
"""

import logging
from datetime import datetime, time, timedelta, timezone, tzinfo

from ..models import AppointmentRecord, ReportingPeriod

logger = logging.getLogger(__name__)

# Payroll cycles are anchored to a fixed UTC-7 offset unless a zone is configured
PAYROLL_OFFSET = timezone(timedelta(hours=-7), "UTC-07:00")

SATURDAY = 5  # datetime.weekday()
CYCLE_LENGTH = timedelta(days=7)
END_OF_CYCLE = CYCLE_LENGTH - timedelta(milliseconds=1)


class PeriodWindower:
    """Applies the boundary rule of each reporting period."""

    def __init__(self, local_tz: tzinfo = timezone.utc, payroll_tz: tzinfo = PAYROLL_OFFSET):
        self.local_tz = local_tz
        self.payroll_tz = payroll_tz

    def select(
        self,
        records: list[AppointmentRecord],
        period: ReportingPeriod,
        now: datetime,
    ) -> list[AppointmentRecord]:
        """
        Return the records inside the period containing `now`.

        Records are never mutated; the result is a new list in input order.
        Records without a timestamp only appear in the all-time period.
        """
        if period is ReportingPeriod.ALL_TIME:
            return list(records)

        start, end = self.bounds(period, now)
        selected = []
        skipped = 0

        for record in records:
            stamp = record.timestamp
            if stamp is None:
                skipped += 1
                continue
            if start <= self._localize(stamp) <= end:
                selected.append(record)

        if skipped:
            logger.debug("Excluded %d record(s) without a timestamp from %s", skipped, period.value)

        return selected

    def bounds(self, period: ReportingPeriod, now: datetime) -> tuple[datetime | None, datetime | None]:
        """
        Compute the inclusive [start, end] of a period.

        - this-week: local Monday 00:00 at or before now, through now
        - rolling periods: local start of today minus N days, through now
        - payroll-cycle: Saturday 00:00 through Friday 23:59:59.999 in the
          payroll zone, for the cycle containing now
        - all-time: (None, None)
        """
        now = self._localize(now)

        if period is ReportingPeriod.ALL_TIME:
            return None, None

        if period is ReportingPeriod.PAYROLL_CYCLE:
            return self._payroll_cycle(now)

        local_now = now.astimezone(self.local_tz)
        start_of_today = self._start_of_day(local_now)

        if period is ReportingPeriod.THIS_WEEK:
            return start_of_today - timedelta(days=local_now.weekday()), now

        return start_of_today - timedelta(days=period.lookback_days), now

    def _payroll_cycle(self, now: datetime) -> tuple[datetime, datetime]:
        # A now of exactly Saturday 00:00 belongs to the cycle that is starting
        payroll_now = now.astimezone(self.payroll_tz)
        days_since_saturday = (payroll_now.weekday() - SATURDAY) % 7
        start = self._start_of_day(payroll_now) - timedelta(days=days_since_saturday)
        return start, start + END_OF_CYCLE

    def _start_of_day(self, moment: datetime) -> datetime:
        return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)

    def _localize(self, moment: datetime) -> datetime:
        """Naive datetimes are read in the local zone."""
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.local_tz)
        return moment
