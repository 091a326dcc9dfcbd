from .auth import auth_bp
from .tasks import task_bp
from .appointment import appointment_bp
from .doctors import doctor_bp
from .health import health_bp

__all__ = ['auth_bp', 'task_bp', 'appointment_bp', 'doctor_bp', 'health_bp']
