"""
Task tracker operations. Every function takes the resolved Caller and only
ever touches tasks that caller owns.
"""
import logging
from sqlalchemy import case

from agenda.extensions import db
from agenda.models import Task, TaskStatus, TaskPriority
from agenda.models.base import coerce_enum
from agenda.models.task import PRIORITY_RANK
from agenda.services.access import load_for_caller, scope_filter
from agenda.services.filters import FilterSpec
from agenda.utils.validation import require_fields, parse_string, parse_date

logger = logging.getLogger(__name__)

TASK_FILTERS = FilterSpec(
    equality={
        'status': (Task.status, TaskStatus),
        'priority': (Task.priority, TaskPriority),
        'category': (Task.category, None),
    },
    search_columns=(Task.title, Task.description),
)


def _parse_fields(data, partial):
    """Validate the writable task fields present in ``data``."""
    changes = {}
    if not partial or 'title' in data:
        changes['title'] = parse_string(data.get('title'), 'title', required=True, max_length=200)
    if 'description' in data:
        changes['description'] = parse_string(data['description'], 'description') or ''
    if data.get('status') is not None or (partial and 'status' in data):
        changes['status'] = coerce_enum(TaskStatus, data.get('status'), 'status')
    if data.get('priority') is not None or (partial and 'priority' in data):
        changes['priority'] = coerce_enum(TaskPriority, data.get('priority'), 'priority')
    if 'dueDate' in data:
        changes['due_date'] = parse_date(data['dueDate'], 'dueDate')
    if 'category' in data:
        changes['category'] = parse_string(data['category'], 'category', max_length=100) or None
    return changes


def create_task(data, caller):
    require_fields(data, ['title'])
    changes = _parse_fields(data, partial=False)

    # Owner always comes from the credential, never from the payload
    task = Task(user_id=caller.id, **changes)
    db.session.add(task)
    db.session.commit()

    logger.info(f"Task {task.id} created by user {caller.id}")
    return task


def list_tasks(caller, params):
    """Caller's tasks: due date ascending (undated last), then priority high to low."""
    priority_rank = case(PRIORITY_RANK, value=Task.priority, else_=0)
    query = Task.query.filter(scope_filter(Task, caller), *TASK_FILTERS.build(params))
    return query.order_by(
        Task.due_date.is_(None),
        Task.due_date.asc(),
        priority_rank.desc(),
        Task.created_at.asc(),
        Task.id.asc(),
    ).all()


def get_task(task_id, caller):
    return load_for_caller(Task, task_id, caller, action='view')


def update_task(task_id, data, caller):
    task = load_for_caller(Task, task_id, caller, action='update')
    changes = _parse_fields(data, partial=True)

    for attr, value in changes.items():
        setattr(task, attr, value)
    task.touch()
    db.session.commit()

    logger.info(f"Task {task.id} updated by user {caller.id}: {sorted(changes)}")
    return task


def delete_task(task_id, caller):
    task = load_for_caller(Task, task_id, caller, action='delete')
    db.session.delete(task)
    db.session.commit()
    logger.info(f"Task {task_id} deleted by user {caller.id}")
