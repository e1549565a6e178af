"""
Medida Core - Base Repository.

Abstract base class for all repositories following the repository pattern.
Every store failure leaves this layer as a TransportException.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar
from uuid import UUID

import httpx
from postgrest import APIError
from supabase import Client

from medida.core.supabase_client import get_supabase_client
from medida.exceptions import NotFoundException, TransportException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository for database operations.

    All module repositories should inherit from this class.
    """

    def __init__(self, client: Client | None = None):
        """Initialize repository with optional Supabase client."""
        self._client = client or get_supabase_client()

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Return the table name for this repository."""
        ...

    @property
    def table(self):
        """Get the Supabase table reference."""
        return self._client.table(self.table_name)

    def _execute(self, operation: str, query) -> Any:
        """Run a query builder, translating store failures."""
        try:
            return query.execute()
        except APIError as e:
            logger.error(f"{self.table_name}.{operation} rejected: {e.code} {e.message}")
            raise TransportException(
                f"{self.table_name}.{operation}",
                e.message or str(e),
                store_code=e.code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.table_name}.{operation} unreachable: {e}")
            raise TransportException(f"{self.table_name}.{operation}", str(e)) from e

    async def get_by_id(self, id: UUID | str) -> T | None:
        """
        Get a single record by ID.

        Args:
            id: The record UUID

        Returns:
            The record if found, None otherwise
        """
        response = self._execute(
            "get_by_id",
            self.table.select("*").eq("id", str(id)).maybe_single(),
        )
        # maybe_single() yields no response at all when nothing matched
        return response.data if response is not None else None

    async def get_by_id_or_raise(self, id: UUID | str) -> T:
        """
        Get a single record by ID, raise if not found.

        Raises:
            NotFoundException: If record not found
        """
        result = await self.get_by_id(id)
        if not result:
            raise NotFoundException(self.table_name, id)
        return result

    async def list(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        desc: bool = False,
        columns: str = "*",
    ) -> list[T]:
        """
        List records matching equality filters.

        Args:
            filters: Optional column/value pairs, all must match
            order_by: Optional column to sort on
            desc: Sort descending
            columns: Select expression

        Returns:
            The matching records
        """
        query = self.table.select(columns)

        if filters:
            for key, value in filters.items():
                query = query.eq(key, value)

        if order_by:
            query = query.order(order_by, desc=desc)

        response = self._execute("list", query)
        return response.data or []

    async def create(self, data: dict[str, Any]) -> T:
        """
        Create a new record.

        Returns:
            The created record, with server-assigned fields
        """
        response = self._execute("create", self.table.insert(data))
        return response.data[0]

    async def create_many(self, items: list[dict[str, Any]]) -> list[T]:
        """Insert several records in one request."""
        if not items:
            return []
        response = self._execute("create_many", self.table.insert(items))
        return response.data or []

    async def update(self, id: UUID | str, data: dict[str, Any]) -> T:
        """
        Update an existing record.

        Raises:
            NotFoundException: If no record has this id
        """
        response = self._execute("update", self.table.update(data).eq("id", str(id)))
        if not response.data:
            raise NotFoundException(self.table_name, id)
        return response.data[0]

    async def delete(self, id: UUID | str) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if deleted
        """
        self._execute("delete", self.table.delete().eq("id", str(id)))
        return True

    async def delete_where(self, **filters: Any) -> None:
        """Delete every record matching equality filters."""
        if not filters:
            raise ValueError("delete_where requires at least one filter")
        query = self.table.delete()
        for key, value in filters.items():
            query = query.eq(key, value)
        self._execute("delete_where", query)
