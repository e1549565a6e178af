"""
Medida Users - Router.

User administration is admin only; ``/users/me`` is open to any role.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from medida.auth import User, get_current_user
from medida.deps import require_admin, require_users
from medida.modules.users.schemas import UserCreateRequest, UserProfile, UserUpdateRequest
from medida.modules.users.service import UsersService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[require_users],
)


def get_service() -> UsersService:
    """Get users service instance."""
    return UsersService()


@router.get("/me", response_model=User)
async def get_me(user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return user


@router.get("", response_model=list[UserProfile], dependencies=[require_admin])
async def list_users(service: UsersService = Depends(get_service)):
    """List users. Admin only."""
    return await service.list_users()


@router.post("", response_model=UserProfile, status_code=201, dependencies=[require_admin])
async def create_user(
    request: UserCreateRequest,
    service: UsersService = Depends(get_service),
):
    """Create a user. Admin only."""
    return await service.create_user(request)


@router.patch("/{user_id}", response_model=UserProfile, dependencies=[require_admin])
async def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    service: UsersService = Depends(get_service),
):
    """Update a user. Admin only."""
    return await service.update_user(user_id, request)


@router.delete("/{user_id}", status_code=204, dependencies=[require_admin])
async def delete_user(
    user_id: UUID,
    service: UsersService = Depends(get_service),
):
    """Delete a user. Admin only."""
    await service.delete_user(user_id)
