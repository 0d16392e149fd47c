from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from ..models import utcnow
from ..services import directory
from .. import db

public_bp = Blueprint('public', __name__, url_prefix='/api')

@public_bp.route('/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
        database = 'connected'
    except SQLAlchemyError as e:
        current_app.logger.warning('Health check could not reach the database: %s', e)
        database = 'disconnected'
    return jsonify({'status': 'ok', 'database': database, 'timestamp': utcnow().isoformat()}), 200

@public_bp.route('/rooms/available', methods=['GET'])
def available_rooms():
    return jsonify({'count': directory.available_rooms_count()}), 200

@public_bp.route('/search/<number>', methods=['GET'])
def search(number):
    return jsonify(directory.search_user(number)), 200
