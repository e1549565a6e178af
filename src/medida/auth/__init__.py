"""Medida Auth Module.

Access tokens are issued by Supabase Auth; this service only validates them.
"""

from medida.auth.schemas import Role, TokenPayload, User
from medida.auth.supabase import get_current_user, verify_jwt

__all__ = [
    "get_current_user",
    "verify_jwt",
    "Role",
    "TokenPayload",
    "User",
]
