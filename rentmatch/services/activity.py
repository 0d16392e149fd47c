# rentmatch/services/activity.py
import logging
from datetime import timedelta

from ..config import PolicyConfig
from .timestamps import resolve_now, stamped

logger = logging.getLogger(__name__)

ACCEPTED = 'Accepted'


def decompose_seconds(total_seconds):
    """Split whole seconds into a days/hours/minutes/seconds dict."""
    days, rest = divmod(total_seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return {'days': days, 'hours': hours, 'minutes': minutes, 'seconds': seconds}


def _accepted_window(requests, deactivation_after):
    accepted, invalid = stamped(requests, ACCEPTED)
    for err in invalid:
        logger.warning('Excluding request from deactivation countdown: %s', err)
    if not accepted:
        return None, None, invalid
    oldest = accepted[0][0]
    return oldest, oldest + deactivation_after, invalid


def countdown_until(deactivation_at, now=None):
    """Remaining time until ``deactivation_at``, clamped at zero and truncated to the second."""
    now = resolve_now(now)
    remaining = max(timedelta(0), deactivation_at - now)
    return decompose_seconds(int(remaining.total_seconds()))


def deactivation_countdown(requests, now=None, deactivation_after=None):
    """
    Countdown to the tenant's automatic deactivation, measured from their
    oldest accepted request. None when nothing has been accepted.
    """
    if deactivation_after is None:
        deactivation_after = timedelta(days=PolicyConfig.DEACTIVATION_DAYS)
    _, deactivation_at, _ = _accepted_window(requests, deactivation_after)
    if deactivation_at is None:
        return None
    return countdown_until(deactivation_at, now)


def evaluate_activity(requests, is_active, now=None, deactivation_after=None):
    """
    Display state for a tenant. ``is_active`` is the tenant's own toggle and is
    reported as-is; the countdown is advisory only.
    """
    if deactivation_after is None:
        deactivation_after = timedelta(days=PolicyConfig.DEACTIVATION_DAYS)
    oldest, deactivation_at, invalid = _accepted_window(requests, deactivation_after)
    return {
        'is_active': bool(is_active),
        'display_state': 'active' if is_active else 'inactive',
        'oldest_accepted_at': oldest,
        'deactivation_at': deactivation_at,
        'countdown': countdown_until(deactivation_at, now) if deactivation_at is not None else None,
        'invalid': invalid,
    }
