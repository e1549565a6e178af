"""Medida Users Module - User profile administration."""

from medida.modules.users.router import router
from medida.modules.users.service import UsersService

__all__ = ["router", "UsersService"]
