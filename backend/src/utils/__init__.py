"""
Utility modules for the study scheduler.

This package contains shared utility functions and helpers used across
the application, including time-of-day parsing and formatting.
"""

from utils.datetime_utils import format_time_of_day, parse_time_of_day

__all__ = ['format_time_of_day', 'parse_time_of_day']
