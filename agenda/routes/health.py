"""
Probes for load balancers and container orchestration. None of these
require a token.
"""
from flask import Blueprint, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from agenda.extensions import db
from agenda.models.base import utcnow

health_bp = Blueprint('health', __name__, url_prefix='/health')

SERVICE_NAME = 'agenda-api'


def _probe(status, code=200, **extra):
    body = {'status': status, 'service': SERVICE_NAME, 'timestamp': utcnow().isoformat()}
    body.update(extra)
    return jsonify(body), code


def _database_status():
    try:
        db.session.execute(db.text('SELECT 1'))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(f"Readiness probe failed: {e}")
        return f'error: {e.__class__.__name__}'
    return 'connected'


@health_bp.route('', methods=['GET'])
@health_bp.route('/ping', methods=['GET'])
def health_check():
    """Process is up; does not touch the database"""
    return _probe('healthy')


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """Ready to serve: the database answers"""
    database = _database_status()
    if database != 'connected':
        return _probe('not_ready', 503, database=database)
    return _probe('ready', database=database)


@health_bp.route('/live', methods=['GET'])
def liveness_check():
    return _probe('alive')
