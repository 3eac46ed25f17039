from .admin_home import AdminOverview
from .admin_tasks import AdminTasksView
from .admin_users import AdminUsersView
from .common import Notice
from .dashboard import DashboardView
from .forms import TaskForm, UserForm

__all__ = [
    "AdminOverview",
    "AdminTasksView",
    "AdminUsersView",
    "DashboardView",
    "Notice",
    "TaskForm",
    "UserForm",
]
