from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from agenda.models import Role
from agenda.services import doctor_service
from agenda.utils.decorators import require_role, current_caller
from agenda.utils.validation import get_json_body

doctor_bp = Blueprint('doctors', __name__, url_prefix='/api/doctors')


@doctor_bp.route('', methods=['GET'])
@jwt_required()
def list_doctors():
    """
    Doctor directory
    Query params: specialization, acceptingNewPatients (true/false), search (name)
    """
    doctors = doctor_service.list_doctors(request.args)
    return jsonify({
        'success': True,
        'data': doctors,
        'count': len(doctors)
    }), 200


@doctor_bp.route('/profile', methods=['PUT'])
@jwt_required()
@require_role(Role.DOCTOR)
def upsert_profile():
    """
    Create or update the calling doctor's profile
    Access: doctor
    """
    profile, created = doctor_service.upsert_profile(get_json_body(), current_caller())
    return jsonify({
        'success': True,
        'message': 'Profile created successfully' if created else 'Profile updated successfully',
        'data': profile.to_dict()
    }), 201 if created else 200


@doctor_bp.route('/<doctor_id>', methods=['GET'])
@jwt_required()
def get_doctor(doctor_id):
    """Doctor with profile and reviews"""
    return jsonify({
        'success': True,
        'data': doctor_service.get_doctor(doctor_id)
    }), 200


@doctor_bp.route('/<doctor_id>/reviews', methods=['POST'])
@jwt_required()
@require_role(Role.PATIENT)
def add_review(doctor_id):
    """
    Review a doctor
    Access: patient
    Body: {rating: 1-5, comment?}
    """
    profile = doctor_service.add_review(doctor_id, get_json_body(), current_caller())
    return jsonify({
        'success': True,
        'message': 'Review added',
        'data': profile.to_dict(include_reviews=True)
    }), 201
