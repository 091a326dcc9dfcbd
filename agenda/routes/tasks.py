from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from agenda.services import task_service
from agenda.utils.decorators import current_caller
from agenda.utils.validation import get_json_body

task_bp = Blueprint('tasks', __name__, url_prefix='/api/tasks')


@task_bp.route('', methods=['POST'])
@jwt_required()
def create_task():
    """
    Create a task owned by the caller
    Body: {title, description?, status?, priority?, dueDate?, category?}
    """
    task = task_service.create_task(get_json_body(), current_caller())
    return jsonify({
        'success': True,
        'message': 'Task created successfully',
        'data': task.to_dict()
    }), 201


@task_bp.route('', methods=['GET'])
@jwt_required()
def list_tasks():
    """
    List the caller's tasks
    Query params: status, priority, category, search
    """
    tasks = task_service.list_tasks(current_caller(), request.args)
    return jsonify({
        'success': True,
        'data': [task.to_dict() for task in tasks],
        'count': len(tasks)
    }), 200


@task_bp.route('/<task_id>', methods=['GET'])
@jwt_required()
def get_task(task_id):
    task = task_service.get_task(task_id, current_caller())
    return jsonify({
        'success': True,
        'data': task.to_dict()
    }), 200


@task_bp.route('/<task_id>', methods=['PUT'])
@jwt_required()
def update_task(task_id):
    """Partial update; only the fields present in the body change"""
    task = task_service.update_task(task_id, get_json_body(), current_caller())
    return jsonify({
        'success': True,
        'message': 'Task updated successfully',
        'data': task.to_dict()
    }), 200


@task_bp.route('/<task_id>', methods=['DELETE'])
@jwt_required()
def delete_task(task_id):
    task_service.delete_task(task_id, current_caller())
    return jsonify({
        'success': True,
        'message': 'Task deleted successfully'
    }), 200
