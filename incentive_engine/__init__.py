"""
APPOINTMENT INCENTIVE ENGINE
Period windowing, record classification and tiered incentive pay
"""

from .models import DashboardInput, DashboardResult, InvalidArgument, ReportingPeriod
from .processor import DashboardProcessor

__all__ = ['DashboardProcessor', 'DashboardInput', 'DashboardResult', 'ReportingPeriod', 'InvalidArgument']
