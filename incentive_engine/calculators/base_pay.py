"""
Base Pay Calculator

Calculates hourly base pay to sit alongside incentive pay.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import AgentProfile, BasePay
from ..validators import InputValidator


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class BasePayCalculator:
    """Calculates hourly base pay for an agent."""

    def __init__(self):
        self.validator = InputValidator()

    def calculate(self, agent: AgentProfile | None) -> BasePay:
        """
        Base pay = hourly rate × hours worked.

        No agent profile means no hourly component.
        """
        if agent is None:
            return BasePay()

        self.validator.validate_agent(agent)

        return BasePay(
            base_rate=agent.base_rate,
            hours_worked=agent.hours_worked,
            base_pay=quantize_money(agent.base_rate * agent.hours_worked),
        )
