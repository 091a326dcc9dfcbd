"""
Request logging, log files and security headers
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from flask import request

logger = logging.getLogger(__name__)


def setup_logging(app):
    """Rotating file log for non-debug, non-testing runs"""
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if app.debug or app.testing:
        return

    log_dir = app.config.get('LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=10240000,
        backupCount=10
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(logging.INFO)
    app.logger.addHandler(file_handler)
    logging.getLogger('agenda').addHandler(file_handler)
    app.logger.info('Application startup')


def setup_middleware(app):
    """Setup production middleware"""

    @app.before_request
    def log_request():
        """Log requests in production"""
        if not app.debug and not app.testing:
            logger.info(f"{request.method} {request.path} - {request.remote_addr}")

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        if not app.debug:
            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['X-Frame-Options'] = 'DENY'
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
            # Only add HSTS if using HTTPS
            if request.is_secure:
                response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response
