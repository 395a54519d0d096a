"""
Output Builder

Constructs the final API response from processing context.
"""

from datetime import datetime
from decimal import Decimal

from .models import DashboardResult, IncentiveResult, ProcessingContext, TierProgress


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"${value:,.2f}"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: ProcessingContext) -> DashboardResult:
        """Construct the complete dashboard result from processing context."""
        return DashboardResult(
            period_summary=self._build_period_summary(ctx),
            counts=self._build_counts(ctx),
            incentive=self.build_incentive(ctx.incentive),
            progress=self.build_progress(ctx.progress),
            pay_summary=self._build_pay_summary(ctx),
            records=self._build_records(ctx),
            agent=self._build_agent(ctx),
        )

    def _build_period_summary(self, ctx: ProcessingContext) -> dict:
        """Build period summary section."""
        return {
            "period": ctx.period.value,
            "window_start": _iso(ctx.window_start),
            "window_end": _iso(ctx.window_end),
            "now": _iso(ctx.now),
            "records_received": len(ctx.records),
            "records_in_window": len(ctx.windowed),
        }

    def _build_counts(self, ctx: ProcessingContext) -> dict:
        """Build classification totals section."""
        counts = ctx.counts
        return {
            "raw": counts.total,
            "approved": counts.approved,
            "cancelled": counts.cancelled,
            "pending": counts.pending,
            "cancellation_rate": float(counts.cancellation_rate),
            "high_performance": ctx.incentive.high_performance if ctx.incentive else False,
        }

    def build_incentive(self, incentive: IncentiveResult) -> dict:
        """Build incentive section with a value and description for each tier."""
        breakdown = []
        for entry in incentive.tier_breakdown:
            if entry.unit == "flat":
                math = f"flat bonus = {_fmt(to_money(entry.subtotal))}"
            else:
                math = f"{entry.count} × {_fmt(to_money(entry.rate))} = {_fmt(to_money(entry.subtotal))}"
            breakdown.append({
                "tier": entry.tier,
                "count": entry.count,
                "rate": to_money(entry.rate),
                "unit": entry.unit,
                "total": to_money(entry.subtotal),
                "description": f"{entry.description}: {math}",
            })

        mode = "high-performance" if incentive.high_performance else "standard"
        return {
            "total_incentive": to_money(incentive.total_incentive),
            "approved_count": incentive.approved_count,
            "cancellation_rate": float(incentive.cancellation_rate),
            "high_performance": incentive.high_performance,
            "tier_table_version": incentive.tier_table_version,
            "tier_breakdown": breakdown,
            "description": (
                f"{incentive.approved_count} approved at {incentive.cancellation_rate}% cancellation "
                f"({mode} rates) = {_fmt(to_money(incentive.total_incentive))}"
            ),
        }

    def build_progress(self, progress: TierProgress) -> dict:
        """Build tier progress section."""
        return {
            "current_tier": progress.current_tier,
            "current_tier_label": progress.current_tier_label,
            "next_milestone": progress.next_milestone,
            "completion": float(progress.completion),
            "completion_percent": round(float(progress.completion) * 100, 1),
        }

    def _build_pay_summary(self, ctx: ProcessingContext) -> dict:
        """Build base + incentive pay section."""
        base = ctx.base_pay
        incentive_total = ctx.incentive.total_incentive
        total = base.base_pay + incentive_total
        return {
            "base_pay": {
                "value": to_money(base.base_pay),
                "description": f"{base.hours_worked} hours × {_fmt(to_money(base.base_rate))}/hour" if ctx.agent else "No hourly pay details provided",
            },
            "incentive_pay": {
                "value": to_money(incentive_total),
                "description": f"Tiered incentive for {ctx.counts.approved} approved appointment(s)",
            },
            "total_pay": {
                "value": to_money(total),
                "description": f"base ({_fmt(to_money(base.base_pay))}) + incentive ({_fmt(to_money(incentive_total))}) = {_fmt(to_money(total))}",
            },
        }

    def _build_records(self, ctx: ProcessingContext) -> list:
        """
        Windowed records, in input order.

        The source row is nested under 'row' so derived keys never collide
        with record store columns.
        """
        return [
            {
                "row": dict(record.raw),
                "classification": label.value,
                "window_timestamp": _iso(record.timestamp),
            }
            for record, label in zip(ctx.windowed, ctx.classifications)
        ]

    def _build_agent(self, ctx: ProcessingContext) -> dict | None:
        if ctx.agent is None:
            return None
        return {
            "agent_id": ctx.agent.agent_id,
            "name": ctx.agent.name,
            "base_rate": to_money(ctx.agent.base_rate),
            "hours_worked": float(ctx.agent.hours_worked),
        }
