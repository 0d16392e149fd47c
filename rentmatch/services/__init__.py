# services package

from .eligibility import evaluate_eligibility
from .activity import deactivation_countdown, evaluate_activity
from .countdown import CountdownTicker, format_time_remaining
from .timestamps import parse_timestamp, sort_requests

__all__ = [
    "evaluate_eligibility",
    "deactivation_countdown",
    "evaluate_activity",
    "CountdownTicker",
    "format_time_remaining",
    "parse_timestamp",
    "sort_requests",
]
