# rentmatch/services/rental_requests.py
import logging

from sqlalchemy.exc import IntegrityError

from ..models import Landlord, Tenant, RentalRequest, utcnow
from ..errors import DuplicateRequest, LimitExceeded, InvalidTransition, NotFound
from .. import db
from .eligibility import evaluate_eligibility, BLOCKED_DUPLICATE
from .timestamps import sort_requests

logger = logging.getLogger(__name__)

FINAL_STATUSES = (RentalRequest.ACCEPTED, RentalRequest.REJECTED)


def _get_or_404(model, id):
    obj = db.session.get(model, id)
    if not obj:
        raise NotFound(f'{model.__name__} {id} not found')
    return obj


def fetch_landlord_requests(landlord_id):
    """All requests (any status) sent by a landlord, oldest first."""
    _get_or_404(Landlord, landlord_id)
    return sort_requests(RentalRequest.query.filter_by(landlord_id=landlord_id).all())


def fetch_tenant_requests(tenant_id):
    """All requests (any status) received by a tenant, oldest first."""
    _get_or_404(Tenant, tenant_id)
    return sort_requests(RentalRequest.query.filter_by(tenant_id=tenant_id).all())


def _ensure_eligible(existing, landlord_id, tenant_id, now):
    verdict = evaluate_eligibility(existing, target_tenant_id=tenant_id, now=now)
    if verdict['can_send']:
        return
    logger.info('Landlord %s blocked from requesting tenant %s: %s',
                landlord_id, tenant_id, verdict['blocked_reason'])
    if verdict['blocked_reason'] == BLOCKED_DUPLICATE:
        raise DuplicateRequest()
    next_at = verdict['next_available_at']
    raise LimitExceeded(
        next_available_at=next_at.isoformat() if next_at else None,
        active_pending_count=verdict['active_pending_count'],
    )


def create_request(landlord_id, tenant_id, now=None):
    """
    Creates a Pending request from landlord to tenant.

    The same eligibility policy the dashboard uses is re-run here against the
    stored requests; this is the authoritative check. The landlord row is
    locked (FOR UPDATE, a no-op on SQLite) and the policy is checked again
    after the insert is flushed, so two concurrent sends cannot both slip
    past the limit. The partial unique index on Pending pairs turns a racing
    duplicate into DuplicateRequest.
    """
    landlord = Landlord.query.filter_by(id=landlord_id).with_for_update().first()
    if not landlord:
        raise NotFound(f'Landlord {landlord_id} not found')
    tenant = _get_or_404(Tenant, tenant_id)
    now = now or utcnow()

    existing = RentalRequest.query.filter_by(landlord_id=landlord.id).all()
    _ensure_eligible(existing, landlord.id, tenant.id, now)

    req = RentalRequest(landlord_id=landlord.id, tenant_id=tenant.id,
                        status=RentalRequest.PENDING, created_at=now)
    try:
        with db.session.begin_nested():
            db.session.add(req)
            db.session.flush()
            # the flush holds the write lock; anything committed meanwhile is visible now
            others = RentalRequest.query.filter(RentalRequest.landlord_id == landlord.id,
                                                RentalRequest.id != req.id).all()
            _ensure_eligible(others, landlord.id, tenant.id, now)
    except IntegrityError:
        logger.info('Landlord %s lost a race to request tenant %s', landlord.id, tenant.id)
        raise DuplicateRequest()
    db.session.commit()
    logger.info('Rental request %s created: landlord %s -> tenant %s', req.id, landlord.id, tenant.id)
    return req


def update_request_status(request_id, new_status):
    """Moves a Pending request to Accepted or Rejected."""
    req = _get_or_404(RentalRequest, request_id)
    if new_status not in FINAL_STATUSES:
        raise InvalidTransition(f'Status must be one of {", ".join(FINAL_STATUSES)}')
    if req.status != RentalRequest.PENDING:
        raise InvalidTransition(f'Request {req.id} is already {req.status}')
    req.status = new_status
    db.session.commit()
    logger.info('Rental request %s is now %s', req.id, new_status)
    return req
