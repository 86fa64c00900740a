from taskboard.models.user import Account, AuthProvider, Profile, Role, User, user_roles
from taskboard.models.task import Task

__all__ = ["Account", "AuthProvider", "Profile", "Role", "User", "user_roles", "Task"]
