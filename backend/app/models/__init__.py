from app.models.user import User
from app.models.job import Job, JOB_TYPES
from app.models.application import Application, APPLICATION_STATUSES

__all__ = ["User", "Job", "Application", "JOB_TYPES", "APPLICATION_STATUSES"]
