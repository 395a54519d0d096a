"""
Input Validation for the Appointment Incentive Engine

Validates caller-supplied values before any calculation begins.
Raises InvalidArgument (a ValueError) with clear messages for any contract
violation; nothing is clamped.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from .models import AgentProfile, DashboardInput, InvalidArgument


class InputValidator:
    """Validates engine input according to business rules."""

    def validate(self, input_data: DashboardInput) -> None:
        """
        Run all dashboard validations. Raises InvalidArgument if any check fails.
        """
        if input_data.now is not None and not isinstance(input_data.now, datetime):
            raise InvalidArgument(f"now must be a datetime, got: {input_data.now!r}")

        if input_data.agent is not None:
            self.validate_agent(input_data.agent)

        if input_data.milestone_cap is not None:
            self.validate_milestone_cap(input_data.milestone_cap)

    def validate_incentive_args(self, approved_count, cancellation_rate) -> Decimal:
        """
        Check the Incentive Engine's two inputs.

        Returns the cancellation rate as a Decimal.
        """
        self.validate_count(approved_count)

        if isinstance(cancellation_rate, bool):
            raise InvalidArgument(f"cancellation_rate must be a number, got: {cancellation_rate!r}")
        try:
            rate = Decimal(str(cancellation_rate))
        except (InvalidOperation, ValueError):
            raise InvalidArgument(f"cancellation_rate must be a number, got: {cancellation_rate!r}") from None

        if not rate.is_finite() or not (0 <= rate <= 100):
            raise InvalidArgument(f"cancellation_rate must be between 0 and 100, got: {cancellation_rate}")

        return rate

    def validate_count(self, approved_count) -> None:
        # bool is an int subclass; True is not a count
        if isinstance(approved_count, bool) or not isinstance(approved_count, int):
            raise InvalidArgument(f"approved_count must be an integer, got: {approved_count!r}")

        if approved_count < 0:
            raise InvalidArgument(f"approved_count cannot be negative, got: {approved_count}")

    def validate_agent(self, agent: AgentProfile) -> None:
        """Validate hourly pay inputs."""
        if agent.base_rate < 0:
            raise InvalidArgument(f"base_rate cannot be negative, got: {agent.base_rate}")

        if agent.hours_worked < 0:
            raise InvalidArgument(f"hours_worked cannot be negative, got: {agent.hours_worked}")

    def validate_milestone_cap(self, cap) -> None:
        """The cap must sit above the last fixed milestone (12)."""
        if isinstance(cap, bool) or not isinstance(cap, int):
            raise InvalidArgument(f"milestone_cap must be an integer, got: {cap!r}")

        if cap <= 12:
            raise InvalidArgument(f"milestone_cap must be greater than 12, got: {cap}")
