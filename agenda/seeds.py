"""
Default accounts for a fresh database. Safe to run repeatedly.
"""
import copy
import logging

from agenda.extensions import db
from agenda.models import User, Role, DoctorProfile

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {
        'email': 'admin@agenda.local',
        'password': 'admin123',
        'first_name': 'Site',
        'last_name': 'Admin',
        'role': Role.ADMIN,
    },
    {
        'email': 'doctor@agenda.local',
        'password': 'doctor123',
        'first_name': 'John',
        'last_name': 'Doctor',
        'role': Role.DOCTOR,
        'profile': {
            'specialization': 'General Practice',
            'qualifications': ['MBBS'],
            'experience': 5,
            'consultation_fee': 50,
            'languages': ['English'],
            'available_slots': [
                {'day': 'Monday', 'startTime': '09:00', 'endTime': '12:00'},
                {'day': 'Wednesday', 'startTime': '13:00', 'endTime': '17:00'},
            ],
        },
    },
]


def seed_default_users():
    """Create the default users that do not exist yet; returns the created users."""
    created = []
    for entry in DEFAULT_USERS:
        if User.query.filter_by(email=entry['email']).first():
            logger.info(f"User '{entry['email']}' already exists (skipping)")
            continue

        user = User(
            email=entry['email'],
            first_name=entry['first_name'],
            last_name=entry['last_name'],
            role=entry['role'],
        )
        user.set_password(entry['password'])
        db.session.add(user)
        if entry.get('profile'):
            user.doctor_profile = DoctorProfile(**copy.deepcopy(entry["profile"]))
        created.append(user)

    db.session.commit()
    logger.info(f"Seeded {len(created)} default user(s)")
    return created
