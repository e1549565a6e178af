"""
Medida Tables - Router.

API endpoints for measurement tables. Every authenticated role may read;
admins and editors may change tables.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from medida.auth import User, get_current_user
from medida.deps import require_editor, require_tables
from medida.modules.tables.schemas import (
    TableCreateRequest,
    TableData,
    TableSummary,
    TableUpdateRequest,
)
from medida.modules.tables.service import TablesService

router = APIRouter(
    prefix="/tables",
    tags=["tables"],
    dependencies=[require_tables],
)


def get_service() -> TablesService:
    """Get tables service instance."""
    return TablesService()


@router.get("", response_model=list[TableData])
async def list_tables(
    user: User = Depends(get_current_user),
    service: TablesService = Depends(get_service),
):
    """List all tables, ordered by name."""
    return await service.fetch_all()


@router.get("/summary", response_model=TableSummary)
async def get_summary(
    user: User = Depends(get_current_user),
    service: TablesService = Depends(get_service),
):
    """Table and product totals."""
    return await service.summary()


@router.get("/{table_id}", response_model=TableData)
async def get_table(
    table_id: UUID,
    user: User = Depends(get_current_user),
    service: TablesService = Depends(get_service),
):
    """Get a table with its columns and rows."""
    return await service.get_table(table_id)


@router.post("", response_model=TableData, status_code=201, dependencies=[require_editor])
async def create_table(
    request: TableCreateRequest,
    user: User = Depends(get_current_user),
    service: TablesService = Depends(get_service),
):
    """Create a table. Admin or editor."""
    return await service.create_table(request, user)


@router.patch("/{table_id}", status_code=204, dependencies=[require_editor])
async def update_table(
    table_id: UUID,
    request: TableUpdateRequest,
    migrate_rows: bool = False,
    user: User = Depends(get_current_user),
    service: TablesService = Depends(get_service),
):
    """
    Partially update a table. Admin or editor.

    With ``migrate_rows``, a columns-only update also rewrites rows so values
    follow renamed accessors.
    """
    if migrate_rows:
        request = await service.with_migrated_rows(table_id, request)
    await service.update_table(table_id, request, user)


@router.delete("/{table_id}", status_code=204, dependencies=[require_editor])
async def delete_table(
    table_id: UUID,
    user: User = Depends(get_current_user),
    service: TablesService = Depends(get_service),
):
    """Delete a table with its columns and rows. Admin or editor."""
    await service.delete_table(table_id)
