from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
import logging

from .extensions import db, migrate, bcrypt, jwt
from .errors import ApiError, ServerError

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Create Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    from agenda.config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if hasattr(config_class, 'validate'):
        config_class.validate(app)

    # Initialize extensions first (before error handlers)
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    jwt.init_app(app)

    from agenda.utils.jwt_callbacks import init_jwt
    init_jwt(jwt)

    # Initialize CORS
    from agenda.utils.cors import init_cors
    init_cors(app)

    from agenda.middleware import setup_logging, setup_middleware
    setup_logging(app)
    setup_middleware(app)

    register_error_handlers(app)

    from agenda.cli import register_cli
    register_cli(app)

    # Import models to register them with SQLAlchemy
    with app.app_context():
        from . import models  # noqa: F401

        from .routes import auth_bp, task_bp, appointment_bp, doctor_bp, health_bp
        app.register_blueprint(health_bp)  # Register health check first
        app.register_blueprint(auth_bp)
        app.register_blueprint(task_bp)
        app.register_blueprint(appointment_bp)
        app.register_blueprint(doctor_bp)

        if app.config.get('AUTO_CREATE_TABLES'):
            db.create_all()

    return app


def register_error_handlers(app):
    """Render every failure in the {'success': False, 'error': ...} envelope"""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        # Validation can fail after attributes were assigned; never leave them pending
        db.session.rollback()
        if error.status_code >= 500:
            logger.error(f"Server error: {error.message}", exc_info=True)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error(f"Database error: {error}", exc_info=True)
        server_error = ServerError(str(error) if app.debug else None)
        return jsonify(server_error.to_dict()), server_error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Endpoint not found',
            'code': 'not_found'
        }), 404

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({
            'success': False,
            'error': error.description or error.name,
            'code': error.name.lower().replace(' ', '_')
        }), error.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        db.session.rollback()
        error = ServerError(f"An error occurred: {e}" if app.debug else "Internal server error. Check server logs for details.")
        return jsonify(error.to_dict()), error.status_code
