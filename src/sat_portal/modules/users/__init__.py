"""
Users module - portal accounts.
"""

from sat_portal.modules.users.models import User, UserRole
from sat_portal.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
