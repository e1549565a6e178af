"""
Medida - Application State.

In-process copy of the tables a console session works with. A TableState is
created per session and handed to whatever renders it; its methods are the
only write paths. Remote mutations are replayed locally after they succeed.

Operations may overlap. ``is_loading`` stays true while any of them is in
flight, and ``select_table`` keeps only the result of its latest call.
Nothing else is serialized, so a slow ``load`` can still overwrite a newer
mutation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Literal
from uuid import UUID

from medida.auth.schemas import User
from medida.config import get_settings
from medida.exceptions import MedidaException
from medida.modules.search.schemas import SearchResult
from medida.modules.search.service import SearchService
from medida.modules.tables.schemas import TableCreateRequest, TableData, TableUpdateRequest
from medida.modules.tables.service import TablesService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A transient, toast-style message."""

    level: Literal["success", "error"]
    message: str


Notifier = Callable[[Notification], None]


class SearchDebouncer:
    """
    Debounced search input.

    ``submit`` is called on every keystroke; the term is committed once no
    newer term arrived within ``delay`` seconds. Searches already running
    are not cancelled, but only the latest commit may publish ``results``.
    """

    def __init__(
        self,
        search: Callable[[str], Awaitable[list[SearchResult]]],
        delay: float = 0.5,
    ):
        self._search = search
        self.delay = delay
        self.term = ""
        self.committed_term = ""
        self.results: list[SearchResult] = []
        self._typed = 0
        self._committed = 0
        self._tasks: set[asyncio.Task] = set()

    def submit(self, term: str) -> asyncio.Task:
        """Record a typed term and schedule its commit."""
        self.term = term
        self._typed += 1
        task = asyncio.get_running_loop().create_task(self._commit_later(term, self._typed))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _commit_later(self, term: str, typed: int) -> None:
        await asyncio.sleep(self.delay)
        if typed != self._typed:
            return
        await self.commit(term)

    async def commit(self, term: str) -> list[SearchResult]:
        """Search for ``term`` now, as a form submit does."""
        self._committed += 1
        ticket = self._committed
        self.committed_term = term

        results = await self._search(term) if term.strip() else []

        if ticket == self._committed:
            self.results = results
        return results

    async def drain(self) -> None:
        """Wait for every scheduled commit to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


class TableState:
    """Tables, selection and status flags of one console session."""

    def __init__(
        self,
        tables_service: TablesService,
        search_service: SearchService,
        user: User | None = None,
        notify: Notifier | None = None,
        debounce_seconds: float | None = None,
    ):
        self._tables_service = tables_service
        self._search_service = search_service
        self.user = user
        self._notify_callback = notify

        self.tables: list[TableData] = []
        self.selected_table: TableData | None = None
        self.error: str | None = None
        self.notifications: list[Notification] = []
        self.show_grid_lines = False

        if debounce_seconds is None:
            debounce_seconds = get_settings().search.debounce_seconds
        self.search_input = SearchDebouncer(self.search, delay=debounce_seconds)

        self._in_flight = 0
        self._select_calls = 0

    async def start(self) -> "TableState":
        """Initial load."""
        await self.load()
        return self

    # =========================================================================
    # Status
    # =========================================================================

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def total_products(self) -> int:
        return sum(len(table.rows) for table in self.tables)

    @contextmanager
    def _operation(self) -> Iterator[None]:
        self._in_flight += 1
        self.error = None
        try:
            yield
        finally:
            self._in_flight -= 1

    def _notify(self, level: Literal["success", "error"], message: str) -> None:
        notification = Notification(level, message)
        self.notifications.append(notification)
        if self._notify_callback is not None:
            self._notify_callback(notification)

    def _fail(self, message: str, exc: MedidaException, toast: str | None = None) -> None:
        logger.error(f"{message} [{exc.code}] {exc.message}")
        self.error = message
        if toast:
            self._notify("error", toast)

    # =========================================================================
    # Reads
    # =========================================================================

    async def load(self) -> None:
        """Reload every table. On failure the current list is kept."""
        with self._operation():
            try:
                tables = await self._tables_service.fetch_all()
            except MedidaException as e:
                self._fail("Could not load the tables.", e)
                return
            self.tables = tables

    async def select_table(self, table_id: UUID | str | None) -> TableData | None:
        """
        Select a table by fetching its latest remote state.

        ``None`` clears the selection. When calls overlap, only the result
        (or failure) of the most recent one is applied.
        """
        self._select_calls += 1
        call = self._select_calls

        if table_id is None:
            self.selected_table = None
            return None

        with self._operation():
            try:
                table = await self._tables_service.fetch_by_id(table_id)
            except MedidaException as e:
                if call != self._select_calls:
                    logger.info(f"Dropped failure of superseded table fetch: [{e.code}] {e.message}")
                    return None
                self._fail("Could not load the table details.", e, toast="Error loading table")
                return None

        if call == self._select_calls:
            self.selected_table = table
        return table

    async def search(self, term: str) -> list[SearchResult]:
        """Search products; failures are recorded and yield no results."""
        if not term.strip():
            return []

        with self._operation():
            try:
                return await self._search_service.search(term)
            except MedidaException as e:
                self._fail("Could not run the search.", e, toast="Error searching products")
                return []

    # =========================================================================
    # Mutations
    # =========================================================================

    async def add_table(self, data: TableCreateRequest) -> TableData:
        """Create a table and append it to ``tables``."""
        with self._operation():
            try:
                table = await self._tables_service.create_table(data, self.user)
            except MedidaException as e:
                self._fail("Could not create the table.", e, toast="Error creating table")
                raise

            self.tables.append(table)
            self._notify("success", "Table created")
            return table

    async def update_table(
        self,
        table_id: UUID | str,
        changes: TableUpdateRequest,
        migrate_rows: bool = False,
    ) -> None:
        """Update a table remotely, then merge the same changes locally."""
        table_id = str(table_id)

        with self._operation():
            try:
                if migrate_rows:
                    changes = await self._tables_service.with_migrated_rows(table_id, changes)
                await self._tables_service.update_table(table_id, changes, self.user)
            except MedidaException as e:
                self._fail("Could not update the table.", e, toast="Error updating table")
                raise

            local = changes.local_changes()
            self.tables = [
                table.model_copy(update=local) if table.id == table_id else table
                for table in self.tables
            ]
            if self.selected_table is not None and self.selected_table.id == table_id:
                self.selected_table = self.selected_table.model_copy(update=local)

            self._notify("success", "Table updated")

    async def delete_table(self, table_id: UUID | str) -> None:
        """Delete a table and drop it from the session."""
        table_id = str(table_id)

        with self._operation():
            try:
                await self._tables_service.delete_table(table_id)
            except MedidaException as e:
                self._fail("Could not delete the table.", e, toast="Error deleting table")
                raise

            self.tables = [table for table in self.tables if table.id != table_id]
            if self.selected_table is not None and self.selected_table.id == table_id:
                self.selected_table = None

            self._notify("success", "Table deleted")

    # =========================================================================
    # UI
    # =========================================================================

    def toggle_grid_lines(self) -> bool:
        self.show_grid_lines = not self.show_grid_lines
        return self.show_grid_lines
