"""
Medida Search - Schemas.
"""

from pydantic import BaseModel, Field

from medida.modules.tables.schemas import Row


class SearchResult(BaseModel):
    """Rows of one table that matched a search term."""

    table_id: str
    table_name: str
    rows: list[Row] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Search results grouped by table."""

    term: str
    results: list[SearchResult]
    total_rows: int = Field(ge=0)
