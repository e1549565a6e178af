"""
Medida Search - Service.

Cross-table product search on top of the store's full-text search.
"""

import logging

from supabase import Client

from medida.config import SearchSettings, get_settings
from medida.exceptions import TransportException, ValidationException
from medida.modules.search.schemas import SearchResult
from medida.modules.tables.records import to_record
from medida.modules.tables.repository import MeasurementTablesRepository, TableRowsRepository

logger = logging.getLogger(__name__)


class SearchService:
    """Service for product search across tables."""

    def __init__(
        self,
        client: Client | None = None,
        settings: SearchSettings | None = None,
        tables: MeasurementTablesRepository | None = None,
        rows: TableRowsRepository | None = None,
    ):
        self.settings = settings or get_settings().search
        self.tables = tables or MeasurementTablesRepository(client)
        self.rows = rows or TableRowsRepository(client)

    async def search(self, term: str) -> list[SearchResult]:
        """
        Search every table's rows for ``term``.

        Blank terms return no results without touching the store. Tables
        without matches are left out; a table whose query fails is logged
        and skipped.
        """
        term = (term or "").strip()
        if not term:
            return []

        tables = await self.tables.list_by_name(columns="id, name")

        results: list[SearchResult] = []
        for table in tables:
            table_id = str(table["id"])
            try:
                matches = await self.rows.text_search(
                    table_id,
                    term,
                    config=self.settings.text_search_config,
                    search_type=self.settings.text_search_type,
                )
                rows = [to_record(match["data"]) for match in matches]
            except (TransportException, ValidationException) as e:
                logger.warning(f"Search skipped table {table_id}: {e.message}")
                continue

            if rows:
                results.append(SearchResult(table_id=table_id, table_name=table["name"], rows=rows))

        logger.info(f"Search '{term}': {sum(len(r.rows) for r in results)} rows in {len(results)} tables")
        return results
