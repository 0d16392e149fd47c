from flask import Blueprint, request, jsonify
from ..models import Landlord
from ..errors import NotFound, ValidationFailed
from ..services import directory
from ..services.rental_requests import fetch_landlord_requests
from ..services.eligibility import evaluate_eligibility, BLOCKED_LIMIT
from ..services.countdown import format_time_remaining
from .. import db
from . import iso_or_none

landlords_bp = Blueprint('landlords', __name__, url_prefix='/api/landlords')


def _landlord_or_404(id):
    landlord = db.session.get(Landlord, id)
    if not landlord:
        raise NotFound('Landlord not found')
    return landlord

@landlords_bp.route('', methods=['POST'])
def register_landlord():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('name') or not data.get('whatsapp'):
        raise ValidationFailed('name and whatsapp are required')
    landlord = directory.register_landlord(data['name'], data['whatsapp'], data.get('address', ''))
    return jsonify(landlord.to_dict()), 201

@landlords_bp.route('/<int:id>', methods=['GET'])
def get_landlord(id):
    return jsonify(_landlord_or_404(id).to_dict()), 200

@landlords_bp.route('/<int:id>', methods=['PUT'])
def update_landlord(id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        raise ValidationFailed('No fields to update')
    landlord = directory.update_landlord(_landlord_or_404(id), data)
    return jsonify(landlord.to_dict()), 200

@landlords_bp.route('/<int:id>/address', methods=['PUT'])
def update_address(id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'address' not in data:
        raise ValidationFailed('address is required')
    landlord = directory.update_landlord(_landlord_or_404(id), {'address': data['address']})
    return jsonify(landlord.to_dict()), 200

@landlords_bp.route('/<int:id>/tenants', methods=['GET'])
def list_tenants(id):
    _landlord_or_404(id)
    return jsonify([t.to_dict() for t in directory.visible_tenants()]), 200

@landlords_bp.route('/<int:id>/requests', methods=['GET'])
def list_requests(id):
    reqs = fetch_landlord_requests(id)
    return jsonify([r.to_dict() for r in reqs]), 200

@landlords_bp.route('/<int:id>/eligibility', methods=['GET'])
def get_eligibility(id):
    """Request limit status for the dashboard, optionally for one tenant."""
    tenant_id = request.args.get('tenant_id')
    if tenant_id is not None:
        try:
            tenant_id = int(tenant_id)
        except ValueError:
            raise ValidationFailed('tenant_id must be an integer')
    verdict = evaluate_eligibility(fetch_landlord_requests(id), target_tenant_id=tenant_id)
    label = format_time_remaining(verdict['next_available_at']) if verdict['blocked_reason'] == BLOCKED_LIMIT else ''
    return jsonify({
        'landlord_id': id,
        'can_send': verdict['can_send'],
        'active_pending_count': verdict['active_pending_count'],
        'remaining_slots': verdict['remaining_slots'],
        'oldest_pending_at': iso_or_none(verdict['oldest_pending_at']),
        'next_available_at': iso_or_none(verdict['next_available_at']),
        'blocked_reason': verdict['blocked_reason'],
        'time_remaining': label,
        'warnings': [str(e) for e in verdict['invalid']],
    }), 200
