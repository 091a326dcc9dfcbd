from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_current_user

from agenda.services import auth_service
from agenda.utils.validation import get_json_body

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a user and log them in
    Body: {email, password, firstName, lastName, role?}
    """
    user = auth_service.register_user(get_json_body())
    return jsonify({
        'success': True,
        'data': user.to_dict(),
        **auth_service.issue_tokens(user)
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login endpoint - authenticates a user and returns JWT tokens"""
    user = auth_service.authenticate(get_json_body())
    return jsonify({
        'success': True,
        'data': user.to_dict(),
        **auth_service.issue_tokens(user)
    }), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    """Current user; the password hash is never serialized"""
    return jsonify({
        'success': True,
        'data': get_current_user().to_dict()
    }), 200


@auth_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_me():
    """Edit own firstName/lastName"""
    user = auth_service.update_profile(get_current_user(), get_json_body())
    return jsonify({
        'success': True,
        'message': 'Profile updated successfully',
        'data': user.to_dict()
    }), 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """Refresh access token using refresh token"""
    return jsonify({
        'success': True,
        **auth_service.refresh_access_token(get_current_user())
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """Stateless JWT: the client discards its tokens"""
    return jsonify({
        'success': True,
        'message': 'Logged out successfully (delete tokens on client)'
    }), 200
