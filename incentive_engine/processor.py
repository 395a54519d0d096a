"""
Dashboard Processor - Main Orchestrator

Coordinates the dashboard pipeline through discrete, testable steps.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .calculators import (
    BasePayCalculator,
    IncentiveCalculator,
    PeriodWindower,
    RecordClassifier,
    TierProgressCalculator,
)
from .calculators.progress import DEFAULT_MILESTONE_CAP
from .calculators.windower import PAYROLL_OFFSET
from .models import DashboardInput, DashboardResult, InvalidArgument, ProcessingContext
from .output import OutputBuilder
from .validators import InputValidator

logger = logging.getLogger(__name__)


class DashboardProcessor:
    """
    Main orchestrator for dashboard processing.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Build Context
    3. Compute Window Bounds
    4. Select Windowed Records
    5. Classify Records
    6. Count & Cancellation Rate
    7. Calculate Incentive
    8. Calculate Tier Progress
    9. Calculate Base Pay
    10. Build Output
    """

    def __init__(self, local_tz=timezone.utc, payroll_tz=PAYROLL_OFFSET, milestone_cap: int = DEFAULT_MILESTONE_CAP):
        # Initialize all calculators
        self.validator = InputValidator()
        self.windower = PeriodWindower(local_tz=local_tz, payroll_tz=payroll_tz)
        self.classifier = RecordClassifier()
        self.incentive_calculator = IncentiveCalculator()
        self.progress_calculator = TierProgressCalculator(milestone_cap=milestone_cap)
        self.base_pay_calculator = BasePayCalculator()
        self.output_builder = OutputBuilder()

    @classmethod
    def from_env(cls, environ=None) -> "DashboardProcessor":
        """
        Build a processor from environment configuration.

        LOCAL_TIMEZONE   IANA zone for calendar weeks and rolling windows (default UTC)
        PAYROLL_TIMEZONE IANA zone for payroll cycles (default fixed UTC-7)
        MILESTONE_CAP    final progress milestone (default 20)
        """
        environ = os.environ if environ is None else environ

        local_tz = _zone_from_name(environ.get("LOCAL_TIMEZONE"), timezone.utc)
        payroll_tz = _zone_from_name(environ.get("PAYROLL_TIMEZONE"), PAYROLL_OFFSET)

        cap = environ.get("MILESTONE_CAP")
        try:
            milestone_cap = int(cap) if cap else DEFAULT_MILESTONE_CAP
        except ValueError:
            raise InvalidArgument(f"MILESTONE_CAP must be an integer, got: {cap!r}") from None

        return cls(local_tz=local_tz, payroll_tz=payroll_tz, milestone_cap=milestone_cap)

    def process(self, input_data: DashboardInput) -> DashboardResult:
        """
        Build a dashboard through the complete pipeline.

        Args:
            input_data: DashboardInput object

        Returns:
            DashboardResult with all calculations
        """
        # Step 1: Validate
        self.validator.validate(input_data)

        # Step 2: Build initial context
        ctx = self._build_context(input_data)

        # Step 3: Window bounds for the summary
        ctx.window_start, ctx.window_end = self.windower.bounds(ctx.period, ctx.now)

        # Step 4: Select records in the period
        ctx.windowed = self.windower.select(ctx.records, ctx.period, ctx.now)

        # Step 5: Classify each windowed record
        ctx.classifications = self.classifier.classify_all(ctx.windowed)

        # Step 6: Totals (cancellation rate is derived from these)
        ctx.counts = self.classifier.tally(ctx.classifications)

        # Step 7: Incentive
        ctx.incentive = self.incentive_calculator.calculate(
            ctx.counts.approved,
            ctx.counts.cancellation_rate
        )

        # Step 8: Tier progress
        ctx.progress = self.progress_calculator.calculate(ctx.counts.approved, ctx.milestone_cap)

        # Step 9: Base pay
        ctx.base_pay = self.base_pay_calculator.calculate(ctx.agent)

        logger.debug(
            "%s: %d of %d record(s) in window, %d approved",
            ctx.period.value, len(ctx.windowed), len(ctx.records), ctx.counts.approved,
        )

        # Step 10: Build output
        return self.output_builder.build(ctx)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Build a dashboard from raw dictionary input.

        Convenience method for API usage.
        """
        input_data = DashboardInput.from_dict(data)
        result = self.process(input_data)
        return self._result_to_dict(result)

    def calculate_incentive_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run the bare incentive engine on {"approved_count", "cancellation_rate"}.

        Also returns tier progress for the same count.
        """
        if "approved_count" not in data:
            raise InvalidArgument("approved_count is required")

        approved_count = data["approved_count"]
        incentive = self.incentive_calculator.calculate(approved_count, data.get("cancellation_rate", 0))
        progress = self.progress_calculator.calculate(approved_count, data.get("milestone_cap"))

        return {
            "incentive": self.output_builder.build_incentive(incentive),
            "progress": self.output_builder.build_progress(progress),
        }

    def _build_context(self, input_data: DashboardInput) -> ProcessingContext:
        """Build the initial processing context."""
        now = input_data.now
        if now is None:
            now = datetime.now(timezone.utc)

        return ProcessingContext(
            records=input_data.records,
            period=input_data.period,
            now=now,
            agent=input_data.agent,
            milestone_cap=input_data.milestone_cap,
        )

    def _result_to_dict(self, result: DashboardResult) -> Dict[str, Any]:
        """Convert DashboardResult to dictionary for API response."""
        output = {
            "period_summary": result.period_summary,
            "counts": result.counts,
            "incentive": result.incentive,
            "progress": result.progress,
            "pay_summary": result.pay_summary,
            "records": result.records
        }
        if result.agent:
            output["agent"] = result.agent
        return output


def _zone_from_name(name: str | None, default):
    if not name:
        return default
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidArgument(f"Unknown timezone: {name!r}") from None


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_dashboard_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a dashboard from a Python dict and return a Python dict.
    """
    processor = DashboardProcessor()
    return processor.process_from_dict(input_data)


def process_dashboard_from_json(json_input: str) -> str:
    """
    Build a dashboard from a JSON string and return a JSON string.
    """
    try:
        input_data = json.loads(json_input)
        processor = DashboardProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
