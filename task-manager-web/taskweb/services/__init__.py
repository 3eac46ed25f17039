from .admin import AdminService
from .tasks import TaskService

__all__ = ["AdminService", "TaskService"]
