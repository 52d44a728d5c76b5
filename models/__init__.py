from models._base import db
from models.inquiry import Inquiry
from models.interaction import Interaction
from models.auth import AdminLoginAttempt, AdminUser

__all__ = [
    "db",
    "Inquiry",
    "Interaction",
    "AdminUser",
    "AdminLoginAttempt",
]
