"""
Medida Tables - Repository.

Database operations for the three relations behind a measurement table.
"""

from typing import Any

from medida.core.repository import BaseRepository
from medida.modules.tables.schemas import Column, Row


class MeasurementTablesRepository(BaseRepository[dict[str, Any]]):
    """Table metadata in Supabase."""

    @property
    def table_name(self) -> str:
        return "measurement_tables"

    async def list_by_name(self, columns: str = "*") -> list[dict[str, Any]]:
        """List every table ordered by name."""
        return await self.list(order_by="name", columns=columns)


class TableColumnsRepository(BaseRepository[dict[str, Any]]):
    """Ordered columns of each table."""

    @property
    def table_name(self) -> str:
        return "table_columns"

    async def list_for_table(self, table_id: str) -> list[dict[str, Any]]:
        """Columns in display order."""
        return await self.list(filters={"table_id": table_id}, order_by="sequence_order")

    async def insert_for_table(self, table_id: str, columns: list[Column]) -> list[dict[str, Any]]:
        """Insert columns numbered 1..N in list order."""
        return await self.create_many([
            {
                "table_id": table_id,
                "name": column.name,
                "accessor": column.accessor,
                "sequence_order": index,
            }
            for index, column in enumerate(columns, start=1)
        ])

    async def delete_for_table(self, table_id: str) -> None:
        await self.delete_where(table_id=table_id)


class TableRowsRepository(BaseRepository[dict[str, Any]]):
    """Free-form JSON rows of each table."""

    @property
    def table_name(self) -> str:
        return "table_rows"

    async def list_for_table(self, table_id: str) -> list[dict[str, Any]]:
        return await self.list(filters={"table_id": table_id})

    async def insert_for_table(self, table_id: str, rows: list[Row]) -> list[dict[str, Any]]:
        return await self.create_many([{"table_id": table_id, "data": row} for row in rows])

    async def delete_for_table(self, table_id: str) -> None:
        await self.delete_where(table_id=table_id)

    def text_search_query(
        self,
        table_id: str,
        term: str,
        config: str = "english",
        search_type: str = "web_search",
    ):
        """
        Build the full-text query over the ``data`` column of one table's rows.

        ``search_type`` uses the postgrest-py spelling (``plain``, ``phrase``,
        ``web_search``); any other value silently degrades to ``to_tsquery``.
        """
        return (
            self.table.select("*")
            .eq("table_id", table_id)
            .text_search("data", term, options={"type": search_type, "config": config})
        )

    async def text_search(
        self,
        table_id: str,
        term: str,
        config: str = "english",
        search_type: str = "web_search",
    ) -> list[dict[str, Any]]:
        """Full-text search over the ``data`` column of one table's rows."""
        query = self.text_search_query(table_id, term, config=config, search_type=search_type)
        response = self._execute("text_search", query)
        return response.data or []
