# rentmatch/models.py
from datetime import datetime, timezone
from . import db


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    if value is None:
        return None
    if value.tzinfo is None:
        # SQLite hands back naive datetimes; everything is stored in UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class Landlord(db.Model):
    """Property owner (Malik) who sends rental offers."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    whatsapp = db.Column(db.String(10), unique=True, nullable=False)
    address = db.Column(db.String(255), nullable=False, default='')
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    requests = db.relationship('RentalRequest', back_populates='landlord',
                               cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'whatsapp': self.whatsapp,
            'address': self.address,
            'role': 'Landlord',
            'created_at': _iso(self.created_at),
        }

class Tenant(db.Model):
    """Prospective renter (Bhadot) who receives offers."""
    WAITING = 'Waiting'
    APPROVED = 'Approved'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    mobile = db.Column(db.String(10), unique=True, nullable=False)
    area = db.Column(db.String(100), nullable=False, default='')
    cast = db.Column(db.String(100), nullable=True)
    total_family_members = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=WAITING)  # 'Waiting' | 'Approved'
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    requests = db.relationship('RentalRequest', back_populates='tenant',
                               cascade='all, delete-orphan')

    @property
    def profile_complete(self):
        return bool(self.cast) and bool(self.total_family_members)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'mobile': self.mobile,
            'area': self.area,
            'cast': self.cast,
            'total_family_members': self.total_family_members,
            'status': self.status,
            'is_active': self.is_active,
            'profile_complete': self.profile_complete,
            'role': 'Tenant',
            'created_at': _iso(self.created_at),
        }

class RentalRequest(db.Model):
    """An offer from a landlord to a tenant.

    Status only ever moves Pending -> Accepted or Pending -> Rejected.
    """
    PENDING = 'Pending'
    ACCEPTED = 'Accepted'
    REJECTED = 'Rejected'

    id = db.Column(db.Integer, primary_key=True)
    landlord_id = db.Column(db.Integer, db.ForeignKey('landlord.id'), nullable=False, index=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenant.id'), nullable=False, index=True)
    status = db.Column(db.String(10), nullable=False, default=PENDING)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    landlord = db.relationship('Landlord', back_populates='requests')
    tenant = db.relationship('Tenant', back_populates='requests')

    __table_args__ = (
        db.Index('rental_request_landlord_status_idx', 'landlord_id', 'status'),
        # at most one Pending request per landlord and tenant pair
        db.Index('rental_request_pending_pair_uq', 'landlord_id', 'tenant_id', unique=True,
                 sqlite_where=db.text("status = 'Pending'"),
                 postgresql_where=db.text("status = 'Pending'")),
    )

    def to_dict(self, mask_landlord_contact=False):
        landlord = self.landlord
        tenant = self.tenant
        whatsapp = landlord.whatsapp if landlord else None
        if whatsapp and mask_landlord_contact and self.status != self.ACCEPTED:
            from .services.directory import mask_mobile
            whatsapp = mask_mobile(whatsapp)
        return {
            'id': self.id,
            'landlord_id': self.landlord_id,
            'tenant_id': self.tenant_id,
            'status': self.status,
            'created_at': _iso(self.created_at),
            'landlord_name': landlord.name if landlord else None,
            'landlord_whatsapp': whatsapp,
            'landlord_address': landlord.address if landlord else None,
            'tenant_name': tenant.name if tenant else None,
            'tenant_mobile': tenant.mobile if tenant else None,
            'tenant_area': tenant.area if tenant else None,
        }
