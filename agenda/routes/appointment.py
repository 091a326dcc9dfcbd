from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from agenda.services import appointment_service
from agenda.utils.decorators import current_caller
from agenda.utils.validation import get_json_body

appointment_bp = Blueprint('appointment', __name__, url_prefix='/api/appointments')


@appointment_bp.route('', methods=['POST'])
@jwt_required()
def create_appointment():
    """
    Book an appointment; the caller is the patient
    Body: {doctor, dateTime, type, duration?, notes?, symptoms?, followUp?}
    """
    appointment = appointment_service.create_appointment(get_json_body(), current_caller())
    return jsonify({
        'success': True,
        'message': 'Appointment created successfully',
        'data': appointment.to_dict()
    }), 201


@appointment_bp.route('', methods=['GET'])
@jwt_required()
def list_appointments():
    """
    List appointments for the caller: a doctor's schedule, or a patient's bookings
    Query params: status, type
    """
    appointments = appointment_service.list_appointments(current_caller(), request.args)
    return jsonify({
        'success': True,
        'data': [appointment.to_dict() for appointment in appointments],
        'count': len(appointments)
    }), 200


@appointment_bp.route('/<appointment_id>', methods=['GET'])
@jwt_required()
def get_appointment(appointment_id):
    appointment = appointment_service.get_appointment(appointment_id, current_caller())
    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 200


@appointment_bp.route('/<appointment_id>', methods=['PUT'])
@jwt_required()
def update_appointment(appointment_id):
    """
    Update appointment
    Access: patient, doctor of the appointment, admin
    """
    appointment = appointment_service.update_appointment(appointment_id, get_json_body(), current_caller())
    return jsonify({
        'success': True,
        'message': 'Appointment updated successfully',
        'data': appointment.to_dict()
    }), 200


@appointment_bp.route('/<appointment_id>', methods=['DELETE'])
@jwt_required()
def delete_appointment(appointment_id):
    appointment_service.delete_appointment(appointment_id, current_caller())
    return jsonify({
        'success': True,
        'message': 'Appointment removed'
    }), 200
