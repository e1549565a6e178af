"""
Medida Users - Schemas.

Pydantic models for user profile administration.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from medida.auth.schemas import Role


class UserProfile(BaseModel):
    """A console user."""

    id: UUID
    name: str
    email: str
    role: Role
    title: str | None = None


class UserCreateRequest(BaseModel):
    """Request to create a user profile."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    role: Role = Role.VIEWER
    title: str | None = Field(default=None, max_length=200)


class UserUpdateRequest(BaseModel):
    """Partial update of a user profile."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = Field(default=None, min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    role: Role | None = None
    title: str | None = Field(default=None, max_length=200)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
