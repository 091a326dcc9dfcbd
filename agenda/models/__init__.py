from .user import User, Role
from .task import Task, TaskStatus, TaskPriority
from .appointment import Appointment, AppointmentStatus, AppointmentType
from .doctor_profile import DoctorProfile, DoctorReview, Weekday

__all__ = [
    "User", "Role",
    "Task", "TaskStatus", "TaskPriority",
    "Appointment", "AppointmentStatus", "AppointmentType",
    "DoctorProfile", "DoctorReview", "Weekday",
]
