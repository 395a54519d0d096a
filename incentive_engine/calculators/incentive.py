"""
Incentive Calculator

Converts a period's approved appointment count and cancellation rate into
tiered incentive pay.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from ..models import IncentiveResult, TierContribution
from ..validators import InputValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncentiveTier:
    """A contiguous band of ranks sharing one payout rule."""

    tier: int
    first_rank: int
    last_rank: int | None  # None = open-ended
    standard_rate: Decimal
    high_performance_rate: Decimal
    unit: str  # 'per_appointment' or 'flat'
    label: str

    def contains(self, rank: int) -> bool:
        if rank < self.first_rank:
            return False
        return self.last_rank is None or rank <= self.last_rank

    def rate_for(self, high_performance: bool) -> Decimal:
        return self.high_performance_rate if high_performance else self.standard_rate


# =============================================================================
# CANONICAL TIER TABLE
# =============================================================================
# Rank 7 belongs to no tier: the 7th approved appointment pays nothing.
# Tier 2 is a single flat bonus earned on the 8th appointment.

TIER_TABLE_VERSION = "1"

TIER_TABLE: tuple[IncentiveTier, ...] = (
    IncentiveTier(1, 1, 6, Decimal("50"), Decimal("50"), "per_appointment", "1-6 leads"),
    IncentiveTier(2, 8, 8, Decimal("30"), Decimal("50"), "flat", "8th lead"),
    IncentiveTier(3, 9, 12, Decimal("15"), Decimal("17"), "per_appointment", "9-12 leads"),
    IncentiveTier(4, 13, None, Decimal("25"), Decimal("27"), "per_appointment", "13+ leads"),
)


def tier_for_rank(rank: int, table: tuple[IncentiveTier, ...] = TIER_TABLE) -> IncentiveTier | None:
    """Return the tier paying for a 1-based rank, or None for an unpaid rank."""
    for tier in table:
        if tier.contains(rank):
            return tier
    return None


class IncentiveCalculator:
    """Calculates tiered incentive pay."""

    # Cancellation rate below this unlocks the high-performance rates
    HIGH_PERFORMANCE_THRESHOLD = Decimal("25.0")

    def __init__(self, table: tuple[IncentiveTier, ...] = TIER_TABLE, version: str = TIER_TABLE_VERSION):
        self.table = table
        self.version = version
        self.validator = InputValidator()

    def calculate(self, approved_count: int, cancellation_rate) -> IncentiveResult:
        """
        Calculate incentive pay for a period.

        Each rank 1..approved_count is placed in exactly one tier (or none,
        for rank 7). A tier's ranks are contiguous, so each tier paying at
        least one rank becomes one breakdown entry, counted from the overlap
        of its band with [1, approved_count]. The total is the exact sum of
        the entries; nothing is rounded.

        Raises InvalidArgument for a negative count or a rate outside [0, 100].
        """
        rate = self.validator.validate_incentive_args(approved_count, cancellation_rate)
        high_performance = self.is_high_performance(rate)

        breakdown: list[TierContribution] = []
        for tier in self.table:
            count = self._ranks_in_tier(tier, approved_count)
            if count == 0:
                continue

            tier_rate = tier.rate_for(high_performance)
            breakdown.append(TierContribution(
                tier=tier.tier,
                count=count,
                rate=tier_rate,
                subtotal=tier_rate * count,
                description=self._describe(tier, high_performance),
                unit=tier.unit,
            ))

        total = sum((entry.subtotal for entry in breakdown), Decimal("0"))

        logger.debug(
            "Incentive for %s approved at %s%% cancellation: %s (high_performance=%s)",
            approved_count, rate, total, high_performance,
        )

        return IncentiveResult(
            total_incentive=total,
            tier_breakdown=breakdown,
            approved_count=approved_count,
            cancellation_rate=rate,
            high_performance=high_performance,
            tier_table_version=self.version,
        )

    @staticmethod
    def _ranks_in_tier(tier: IncentiveTier, approved_count: int) -> int:
        """Number of ranks in [1, approved_count] that fall in the tier's band."""
        last = approved_count if tier.last_rank is None else min(tier.last_rank, approved_count)
        return max(0, last - tier.first_rank + 1)

    def is_high_performance(self, cancellation_rate: Decimal) -> bool:
        return cancellation_rate < self.HIGH_PERFORMANCE_THRESHOLD

    def _describe(self, tier: IncentiveTier, high_performance: bool) -> str:
        """Human-readable description, e.g. '9-12 leads (low cancellation)'."""
        if tier.standard_rate == tier.high_performance_rate:
            return tier.label
        if tier.unit == "flat":
            mode = "low cancellation bonus" if high_performance else "standard"
        else:
            mode = "low cancellation" if high_performance else "standard"
        return f"{tier.label} ({mode})"
