"""
유틸리티 패키지
"""

from .time_tracker import TimeTracker, TimeMetrics

__all__ = [
    "TimeTracker",
    "TimeMetrics"
]
