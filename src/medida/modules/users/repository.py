"""
Medida Users - Repository.
"""

from typing import Any

from medida.core.repository import BaseRepository


class ProfilesRepository(BaseRepository[dict[str, Any]]):
    """User profiles in Supabase."""

    @property
    def table_name(self) -> str:
        return "profiles"

    async def list_by_name(self) -> list[dict[str, Any]]:
        return await self.list(order_by="name")
