"""
Cross-origin access for the JSON API. Only /api/* is exposed; health probes
are same-origin.
"""
from flask_cors import CORS

API_RESOURCES = r"/api/*"
ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "Accept"]


def parse_origins(value):
    """CORS_ORIGINS is "*" or a comma separated list of origins."""
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def init_cors(app):
    origins = parse_origins(app.config.get('CORS_ORIGINS'))
    CORS(
        app,
        resources={API_RESOURCES: {"origins": origins}},
        methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        # bearer tokens travel in a header, never cookies
        supports_credentials=False,
        max_age=app.config.get('CORS_MAX_AGE', 86400),
    )
    app.logger.info(f"CORS enabled on {API_RESOURCES} for origins: {origins}")
