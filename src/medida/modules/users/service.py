"""
Medida Users - Service.

Business logic for user profile administration.
"""

import logging
from typing import Any
from uuid import UUID

from supabase import Client

from medida.exceptions import NotFoundException, ValidationException
from medida.modules.users.repository import ProfilesRepository
from medida.modules.users.schemas import UserCreateRequest, UserProfile, UserUpdateRequest

logger = logging.getLogger(__name__)


class UsersService:
    """Service for user profile operations."""

    def __init__(self, client: Client | None = None, repository: ProfilesRepository | None = None):
        self.repository = repository or ProfilesRepository(client)

    async def list_users(self) -> list[UserProfile]:
        """List users ordered by name."""
        return [self._to_response(p) for p in await self.repository.list_by_name()]

    async def get_user(self, user_id: UUID) -> UserProfile:
        profile = await self.repository.get_by_id_or_raise(user_id)
        return self._to_response(profile)

    async def create_user(self, request: UserCreateRequest) -> UserProfile:
        """Create a user profile."""
        created = await self.repository.create(request.model_dump(mode="json"))
        logger.info(f"User {created['id']} created with role {request.role.value}")
        return self._to_response(created)

    async def update_user(self, user_id: UUID, request: UserUpdateRequest) -> UserProfile:
        """Update the given fields of a user profile."""
        changes = request.changes()
        if not changes:
            return await self.get_user(user_id)
        if any(changes.get(key, "") is None for key in ("name", "email", "role")):
            raise ValidationException("name, email and role cannot be null")
        updated = await self.repository.update(user_id, changes)
        return self._to_response(updated)

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user profile."""
        if await self.repository.get_by_id(user_id) is None:
            raise NotFoundException("profiles", user_id)
        await self.repository.delete(user_id)
        logger.info(f"User {user_id} deleted")

    def _to_response(self, data: dict[str, Any]) -> UserProfile:
        """Convert database record to response."""
        return UserProfile(
            id=UUID(str(data["id"])),
            name=data["name"],
            email=data["email"],
            role=data["role"],
            title=data.get("title"),
        )
