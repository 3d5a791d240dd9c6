"""
CPU Scheduling Algorithms
"""

from .two_level import TwoLevelScheduler, simulate

__all__ = [
    'TwoLevelScheduler',
    'simulate'
]
