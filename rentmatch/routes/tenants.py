from flask import Blueprint, request, jsonify
from ..models import Tenant
from ..errors import NotFound, ValidationFailed
from ..services import directory
from ..services.rental_requests import fetch_tenant_requests
from ..services.activity import evaluate_activity
from .. import db
from . import iso_or_none

tenants_bp = Blueprint('tenants', __name__, url_prefix='/api/tenants')


def _tenant_or_404(id):
    tenant = db.session.get(Tenant, id)
    if not tenant:
        raise NotFound('Tenant not found')
    return tenant

@tenants_bp.route('', methods=['POST'])
def register_tenant():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('name') or not data.get('mobile'):
        raise ValidationFailed('name and mobile are required')
    tenant = directory.register_tenant(
        data['name'], data['mobile'],
        area=data.get('area', ''),
        cast=data.get('cast'),
        total_family_members=data.get('total_family_members'),
    )
    return jsonify(tenant.to_dict()), 201

@tenants_bp.route('/<int:id>', methods=['GET'])
def get_tenant(id):
    return jsonify(_tenant_or_404(id).to_dict()), 200

@tenants_bp.route('/<int:id>', methods=['PUT'])
def update_tenant(id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        raise ValidationFailed('No fields to update')
    tenant = directory.update_tenant(_tenant_or_404(id), data)
    return jsonify(tenant.to_dict()), 200

@tenants_bp.route('/<int:id>/active', methods=['PUT'])
def toggle_active(id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'is_active' not in data:
        raise ValidationFailed('is_active is required')
    tenant = directory.set_tenant_active(_tenant_or_404(id), data['is_active'])
    return jsonify(tenant.to_dict()), 200

@tenants_bp.route('/<int:id>/requests', methods=['GET'])
def list_requests(id):
    # landlord numbers stay hidden until the tenant accepts
    reqs = fetch_tenant_requests(id)
    return jsonify([r.to_dict(mask_landlord_contact=True) for r in reqs]), 200

@tenants_bp.route('/<int:id>/activity', methods=['GET'])
def get_activity(id):
    tenant = _tenant_or_404(id)
    state = evaluate_activity(fetch_tenant_requests(id), tenant.is_active)
    return jsonify({
        'tenant_id': id,
        'is_active': state['is_active'],
        'display_state': state['display_state'],
        'oldest_accepted_at': iso_or_none(state['oldest_accepted_at']),
        'deactivation_at': iso_or_none(state['deactivation_at']),
        'countdown': state['countdown'],
        'warnings': [str(e) for e in state['invalid']],
    }), 200
