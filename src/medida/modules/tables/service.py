"""
Medida Tables - Service.

Loads measurement tables from their three relations and applies
create/update/delete to them. Steps of a multi-step mutation commit one by
one: a failure stops the sequence and leaves earlier steps applied.
"""

import logging
from typing import Any
from uuid import UUID

from supabase import Client

from medida.auth.schemas import User
from medida.exceptions import NotFoundException, UnauthorizedException
from medida.modules.tables.records import migrate_row_keys, to_record
from medida.modules.tables.repository import (
    MeasurementTablesRepository,
    TableColumnsRepository,
    TableRowsRepository,
)
from medida.modules.tables.schemas import (
    Column,
    TableCreateRequest,
    TableData,
    TableSummary,
    TableUpdateRequest,
)

logger = logging.getLogger(__name__)


class TablesService:
    """Service for measurement table operations."""

    def __init__(
        self,
        client: Client | None = None,
        tables: MeasurementTablesRepository | None = None,
        columns: TableColumnsRepository | None = None,
        rows: TableRowsRepository | None = None,
    ):
        self.tables = tables or MeasurementTablesRepository(client)
        self.columns = columns or TableColumnsRepository(client)
        self.rows = rows or TableRowsRepository(client)

    # =========================================================================
    # Loading
    # =========================================================================

    async def fetch_all(self) -> list[TableData]:
        """Load every table, ordered by name."""
        records = await self.tables.list_by_name()
        return [await self._assemble(record) for record in records]

    async def fetch_by_id(self, table_id: UUID | str) -> TableData | None:
        """Load one table; None when it does not exist."""
        record = await self.tables.get_by_id(str(table_id))
        if record is None:
            return None
        return await self._assemble(record)

    async def get_table(self, table_id: UUID | str) -> TableData:
        """Load one table, raising NotFoundException when absent."""
        table = await self.fetch_by_id(table_id)
        if table is None:
            raise NotFoundException("table", table_id)
        return table

    async def summary(self) -> TableSummary:
        """Count tables and products across all of them."""
        tables = await self.fetch_all()
        return TableSummary(
            total_tables=len(tables),
            total_products=sum(len(table.rows) for table in tables),
        )

    async def _assemble(self, record: dict[str, Any]) -> TableData:
        table_id = str(record["id"])
        columns = await self.columns.list_for_table(table_id)
        rows = await self.rows.list_for_table(table_id)

        return TableData(
            id=table_id,
            name=record["name"],
            description=record.get("description") or "",
            columns=[
                Column(id=str(column["id"]), name=column["name"], accessor=column["accessor"])
                for column in columns
            ],
            rows=[to_record(row["data"]) for row in rows],
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def _require_actor(self, user: User | None) -> User:
        if user is None:
            raise UnauthorizedException("User not authenticated")
        return user

    async def create_table(self, request: TableCreateRequest, user: User | None) -> TableData:
        """
        Create a table, then its columns, then its rows.

        The returned table carries the new column ids; rows are echoed from
        the request rather than read back.
        """
        actor = self._require_actor(user)

        created = await self.tables.create({
            "name": request.name,
            "description": request.description,
            "created_by": str(actor.id),
        })
        table_id = str(created["id"])

        inserted = await self.columns.insert_for_table(table_id, request.columns)
        if request.rows:
            await self.rows.insert_for_table(table_id, request.rows)

        ids_by_order = {column["sequence_order"]: str(column["id"]) for column in inserted}
        columns = [
            column.model_copy(update={"id": ids_by_order.get(index, column.id)})
            for index, column in enumerate(request.columns, start=1)
        ]

        logger.info(f"Table {table_id} created by {actor.id} ({len(columns)} columns, {len(request.rows)} rows)")

        return TableData(
            id=table_id,
            name=created["name"],
            description=created.get("description") or "",
            columns=columns,
            rows=[dict(row) for row in request.rows],
        )

    async def update_table(
        self,
        table_id: UUID | str,
        request: TableUpdateRequest,
        user: User | None,
    ) -> None:
        """
        Apply a partial update.

        Columns and rows are replaced wholesale (delete, then insert). Row
        payloads are not touched by a column replace, so values stored under
        a dropped or renamed accessor stay in the rows.
        """
        self._require_actor(user)
        table_id = str(table_id)

        metadata = request.metadata()
        if metadata:
            await self.tables.update(table_id, metadata)

        if request.columns is not None:
            await self.columns.delete_for_table(table_id)
            await self.columns.insert_for_table(table_id, request.columns)

        if request.rows is not None:
            await self.rows.delete_for_table(table_id)
            if request.rows:
                await self.rows.insert_for_table(table_id, request.rows)

        logger.info(f"Table {table_id} updated: {sorted(request.model_fields_set)}")

    async def with_migrated_rows(
        self,
        table_id: UUID | str,
        request: TableUpdateRequest,
    ) -> TableUpdateRequest:
        """
        Extend a columns-only update with rows whose keys follow renamed accessors.

        Columns are matched by id. Requests that already carry rows, or no
        columns, are returned unchanged.
        """
        if request.columns is None or request.rows is not None:
            return request

        current = await self.get_table(table_id)
        rows = migrate_row_keys(current.rows, current.columns, request.columns)
        return request.model_copy(update={"rows": rows})

    async def delete_table(self, table_id: UUID | str) -> None:
        """Delete a table together with its rows and columns."""
        table_id = str(table_id)
        await self.rows.delete_for_table(table_id)
        await self.columns.delete_for_table(table_id)
        await self.tables.delete(table_id)
        logger.info(f"Table {table_id} deleted")
