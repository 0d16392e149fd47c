# rentmatch/services/directory.py
import logging
import re

from ..models import Landlord, Tenant, RentalRequest
from ..config import ValidationConfig
from ..errors import NotFound, ValidationFailed
from .. import db

logger = logging.getLogger(__name__)

ROLES = {'landlord': Landlord, 'tenant': Tenant}


def clean_number(number):
    """Strip everything but digits from a phone number."""
    return re.sub(r'\D', '', number or '')


def mask_mobile(mobile):
    """Keep the first three digits only, e.g. '954-xxxxxxxxxxx'."""
    if not mobile or len(mobile) < 3:
        return mobile
    return f"{mobile[:3]}-xxxxxxxxxxx"


def _check_name(value, field='name'):
    if value is not None and not isinstance(value, str):
        raise ValidationFailed(f'{field} must be text')
    value = (value or '').strip()
    if not value:
        raise ValidationFailed(f'{field} is required')
    if len(value) > ValidationConfig.NAME_MAX_LENGTH:
        raise ValidationFailed(f'{field} max length is {ValidationConfig.NAME_MAX_LENGTH}')
    return value


def _check_number(value, field, model, column, exclude_id=None):
    if value is not None and not isinstance(value, str):
        raise ValidationFailed(f'{field} must be sent as a string of 10 digits')
    number = clean_number(value)
    if not re.match(ValidationConfig.PHONE_NUMBER_REGEX, number):
        raise ValidationFailed(f'{field} must be a 10 digit number')
    q = model.query.filter(column == number)
    if exclude_id is not None:
        q = q.filter(model.id != exclude_id)
    if q.first():
        raise ValidationFailed(f'{field} {number} is already registered')
    return number


def _check_text(value, field, max_length):
    if value is not None and not isinstance(value, str):
        raise ValidationFailed(f'{field} must be text')
    value = (value or '').strip()
    if len(value) > max_length:
        raise ValidationFailed(f'{field} max length is {max_length}')
    return value


def _check_family(value):
    if value is None:
        return None
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed('total_family_members must be an integer')
    if count < 1:
        raise ValidationFailed('total_family_members must be at least 1')
    return count


# --- Landlords ---

def register_landlord(name, whatsapp, address):
    landlord = Landlord(
        name=_check_name(name),
        whatsapp=_check_number(whatsapp, 'whatsapp', Landlord, Landlord.whatsapp),
        address=_check_text(address, 'address', ValidationConfig.ADDRESS_MAX_LENGTH),
    )
    db.session.add(landlord)
    db.session.commit()
    logger.info('Landlord %s registered', landlord.id)
    return landlord


def update_landlord(landlord, data):
    if 'name' in data:
        landlord.name = _check_name(data['name'])
    if 'whatsapp' in data:
        landlord.whatsapp = _check_number(data['whatsapp'], 'whatsapp', Landlord,
                                          Landlord.whatsapp, exclude_id=landlord.id)
    if 'address' in data:
        landlord.address = _check_text(data['address'], 'address', ValidationConfig.ADDRESS_MAX_LENGTH)
    db.session.commit()
    return landlord


def visible_tenants():
    """Tenants a landlord may send offers to: approved by the admin and active."""
    return Tenant.query.filter_by(status=Tenant.APPROVED, is_active=True) \
                       .order_by(Tenant.created_at.desc(), Tenant.id.desc()).all()


def available_rooms_count():
    """Rooms on offer: landlords who have filled in an address."""
    return Landlord.query.filter(Landlord.address != '').count()


# --- Tenants ---

def register_tenant(name, mobile, area='', cast=None, total_family_members=None):
    tenant = Tenant(
        name=_check_name(name),
        mobile=_check_number(mobile, 'mobile', Tenant, Tenant.mobile),
        area=_check_text(area, 'area', ValidationConfig.AREA_MAX_LENGTH),
        cast=_check_text(cast, 'cast', ValidationConfig.NAME_MAX_LENGTH) or None,
        total_family_members=_check_family(total_family_members),
    )
    db.session.add(tenant)
    db.session.commit()
    logger.info('Tenant %s registered', tenant.id)
    return tenant


def update_tenant(tenant, data):
    if 'name' in data:
        tenant.name = _check_name(data['name'])
    if 'mobile' in data:
        tenant.mobile = _check_number(data['mobile'], 'mobile', Tenant, Tenant.mobile,
                                      exclude_id=tenant.id)
    if 'area' in data:
        tenant.area = _check_text(data['area'], 'area', ValidationConfig.AREA_MAX_LENGTH)
    if 'cast' in data:
        tenant.cast = _check_text(data['cast'], 'cast', ValidationConfig.NAME_MAX_LENGTH) or None
    if 'total_family_members' in data:
        tenant.total_family_members = _check_family(data['total_family_members'])
    if 'status' in data:
        if data['status'] not in ValidationConfig.TENANT_STATUSES:
            raise ValidationFailed(f'status must be one of {", ".join(ValidationConfig.TENANT_STATUSES)}')
        tenant.status = data['status']
    db.session.commit()
    return tenant


def set_tenant_active(tenant, is_active):
    if not isinstance(is_active, bool):
        raise ValidationFailed('is_active must be true or false')
    tenant.is_active = is_active
    db.session.commit()
    logger.info('Tenant %s marked %s', tenant.id, 'active' if is_active else 'inactive')
    return tenant


# --- Search & admin ---

def search_user(number):
    """Look a 10 digit number up among landlords first, then tenants."""
    number = clean_number(number)
    if len(number) != 10:
        return {'found': False}
    landlord = Landlord.query.filter_by(whatsapp=number).first()
    if landlord:
        return {'found': True, 'role': 'Landlord', 'user': landlord.to_dict()}
    tenant = Tenant.query.filter_by(mobile=number).first()
    if tenant:
        return {'found': True, 'role': 'Tenant', 'user': tenant.to_dict()}
    return {'found': False}


def admin_stats():
    return {
        'total_landlords': Landlord.query.count(),
        'total_tenants': Tenant.query.count(),
        'total_requests': RentalRequest.query.count(),
        'pending_requests': RentalRequest.query.filter_by(status=RentalRequest.PENDING).count(),
        'accepted_requests': RentalRequest.query.filter_by(status=RentalRequest.ACCEPTED).count(),
    }


def all_users():
    return {
        'landlords': [l.to_dict() for l in Landlord.query.order_by(Landlord.id).all()],
        'tenants': [t.to_dict() for t in Tenant.query.order_by(Tenant.id).all()],
    }


def transactions():
    """Every request with both party names, newest first."""
    reqs = RentalRequest.query.order_by(RentalRequest.created_at.desc(), RentalRequest.id.desc()).all()
    return [r.to_dict() for r in reqs]


def delete_user(role, id):
    model = ROLES.get((role or '').lower())
    if model is None:
        raise ValidationFailed('role must be "landlord" or "tenant"')
    user = db.session.get(model, id)
    if not user:
        raise NotFound(f'{model.__name__} {id} not found')
    db.session.delete(user)  # requests go with it (delete-orphan cascade)
    db.session.commit()
    logger.info('%s %s deleted by admin', model.__name__, id)
