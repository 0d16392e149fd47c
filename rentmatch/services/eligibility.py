# rentmatch/services/eligibility.py
import logging
from datetime import timedelta

from ..config import PolicyConfig
from .timestamps import field, resolve_now, stamped

logger = logging.getLogger(__name__)

PENDING = 'Pending'
BLOCKED_DUPLICATE = 'duplicate'
BLOCKED_LIMIT = 'limit'


def evaluate_eligibility(requests, target_tenant_id=None, now=None,
                         max_pending=None, window=None):
    """
    Decides whether a landlord may send another rental request.

    ``requests`` are all of one landlord's requests in any order (model
    instances or API dicts). A request counts towards the limit while it is
    Pending and was created strictly after ``now - window``; one created exactly
    on the threshold has already expired. A Pending request to
    ``target_tenant_id`` blocks as a duplicate no matter how old it is.

    Returns a dict with keys: can_send, active_pending_count, remaining_slots,
    oldest_pending_at, next_available_at, blocked_reason, invalid.
    """
    now = resolve_now(now)
    max_pending = PolicyConfig.MAX_PENDING_REQUESTS if max_pending is None else max_pending
    if window is None:
        window = timedelta(hours=PolicyConfig.PENDING_WINDOW_HOURS)
    threshold = now - window

    pending, invalid = stamped(requests, PENDING)
    for err in invalid:
        logger.warning('Excluding request from limit window: %s', err)

    active_pending_count = sum(1 for created, _, _ in pending if created > threshold)

    oldest_pending_at = pending[0][0] if pending else None
    next_available_at = oldest_pending_at + window if oldest_pending_at is not None else None

    # Undatable records still count as duplicates
    duplicate = target_tenant_id is not None and any(
        field(rec, 'status') == PENDING and field(rec, 'tenant_id') == target_tenant_id
        for rec in requests
    )

    if duplicate:
        blocked_reason = BLOCKED_DUPLICATE
    elif active_pending_count >= max_pending:
        blocked_reason = BLOCKED_LIMIT
    else:
        blocked_reason = None

    return {
        'can_send': blocked_reason is None,
        'active_pending_count': active_pending_count,
        'remaining_slots': max(0, max_pending - active_pending_count),
        'oldest_pending_at': oldest_pending_at,
        'next_available_at': next_available_at,
        'blocked_reason': blocked_reason,
        'invalid': invalid,
    }
