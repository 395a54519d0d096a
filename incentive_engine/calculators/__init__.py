"""
Calculators Package

Provides all calculation components for dashboard processing.
"""

from .base_pay import BasePayCalculator
from .classifier import RecordClassifier
from .incentive import IncentiveCalculator
from .progress import TierProgressCalculator
from .windower import PeriodWindower

__all__ = [
    "PeriodWindower",
    "RecordClassifier",
    "IncentiveCalculator",
    "TierProgressCalculator",
    "BasePayCalculator",
]
