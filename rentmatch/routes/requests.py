from flask import Blueprint, request, jsonify
from ..errors import ValidationFailed
from ..services.rental_requests import create_request, update_request_status

requests_bp = Blueprint('requests', __name__, url_prefix='/api/requests')

@requests_bp.route('', methods=['POST'])
def send_request():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('landlord_id') or not data.get('tenant_id'):
        raise ValidationFailed('landlord_id and tenant_id are required')
    try:
        landlord_id = int(data['landlord_id'])
        tenant_id = int(data['tenant_id'])
    except (TypeError, ValueError):
        raise ValidationFailed('landlord_id and tenant_id must be integers')
    req = create_request(landlord_id, tenant_id)
    return jsonify(req.to_dict()), 201

@requests_bp.route('/<int:id>', methods=['PUT'])
def set_status(id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('status'):
        raise ValidationFailed('status is required')
    req = update_request_status(id, data['status'])
    return jsonify(req.to_dict()), 200
