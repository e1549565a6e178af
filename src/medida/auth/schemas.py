"""
Medida Auth - Schemas.

Pydantic models for authenticated actors and their roles.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Console roles, from most to least privileged."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class TokenPayload(BaseModel):
    """JWT token payload from Supabase."""

    sub: UUID = Field(..., description="User ID")
    email: str | None = None
    role: Role = Role.VIEWER
    name: str | None = None
    aud: str | None = None
    exp: int | None = None
    iat: int | None = None


class User(BaseModel):
    """Authenticated user."""

    id: UUID
    email: str | None = None
    display_name: str | None = None
    role: Role = Role.VIEWER

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == Role.ADMIN

    @property
    def can_edit(self) -> bool:
        """Check if user can create, change and delete tables."""
        return self.role in (Role.ADMIN, Role.EDITOR)

    def has_role(self, role: Role | str) -> bool:
        """Check if user has a specific role."""
        return self.role == Role(role) or self.is_admin
