from flask import Blueprint, jsonify
from ..services import directory

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')

@admin_bp.route('/stats', methods=['GET'])
def stats():
    return jsonify(directory.admin_stats()), 200

@admin_bp.route('/users', methods=['GET'])
def users():
    return jsonify(directory.all_users()), 200

@admin_bp.route('/users/<role>/<int:id>', methods=['DELETE'])
def delete_user(role, id):
    directory.delete_user(role, id)
    return jsonify({'message': f'{role.capitalize()} {id} deleted'}), 200

@admin_bp.route('/transactions', methods=['GET'])
def transactions():
    return jsonify(directory.transactions()), 200
