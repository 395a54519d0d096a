"""
Tier Progress Calculator

Reports the tier an agent is currently earning and how close they are to the
next milestone.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import TierProgress
from ..validators import InputValidator
from .incentive import TIER_TABLE, IncentiveTier

# Fixed milestones; the open-ended tier's target comes from the cap
MILESTONES = (6, 8, 12)
DEFAULT_MILESTONE_CAP = 20


class TierProgressCalculator:
    """Calculates current tier and next-milestone progress."""

    def __init__(self, milestone_cap: int = DEFAULT_MILESTONE_CAP, table: tuple[IncentiveTier, ...] = TIER_TABLE):
        self.validator = InputValidator()
        self.validator.validate_milestone_cap(milestone_cap)
        self.milestone_cap = milestone_cap
        self.table = table

    def calculate(self, approved_count: int, milestone_cap: int | None = None) -> TierProgress:
        """
        Build progress for an approved count.

        The current tier is the tier of the highest paid rank reached, so a
        count of 7 still reports Tier 1. Completion is
        approved_count / next_milestone clamped to [0, 1].
        """
        self.validator.validate_count(approved_count)

        cap = self.milestone_cap
        if milestone_cap is not None:
            self.validator.validate_milestone_cap(milestone_cap)
            cap = milestone_cap

        current = self._current_tier(approved_count)
        next_milestone = self._next_milestone(approved_count, cap)

        completion = Decimal(approved_count) / Decimal(next_milestone)
        completion = min(Decimal("1"), max(Decimal("0"), completion))

        return TierProgress(
            current_tier=current.tier if current else 0,
            current_tier_label=f"Tier {current.tier}" if current else "No tier yet",
            next_milestone=next_milestone,
            completion=completion.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP),
        )

    def _current_tier(self, approved_count: int) -> IncentiveTier | None:
        """Highest tier whose band has been entered."""
        reached = [tier for tier in self.table if tier.first_rank <= approved_count]
        return reached[-1] if reached else None

    @staticmethod
    def _next_milestone(approved_count: int, cap: int) -> int:
        for milestone in MILESTONES + (cap,):
            if approved_count < milestone:
                return milestone
        return cap
