"""
Shared fixtures: an in-memory stand-in for the supabase query builder,
signed access tokens and service instances wired to it.
"""

import re
import time
from copy import deepcopy
from typing import Any
from uuid import uuid4

import pytest
from jose import jwt
from postgrest import APIError

from medida.config import get_settings
from medida.modules.search.service import SearchService
from medida.modules.tables.service import TablesService
from medida.modules.users.service import UsersService


# option values postgrest-py turns into plfts / phfts / wfts
TEXT_SEARCH_TYPES = {"plain", "phrase", "web_search"}


class FakeResponse:
    def __init__(self, data: Any):
        self.data = data
        self.count = None


class FakeQuery:
    """Chainable subset of the postgrest request builder."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._filters: list[tuple[str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._single = False
        self._text: tuple[str, str, dict] | None = None

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self._op = "select"
        return self

    def insert(self, data: Any) -> "FakeQuery":
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data: dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = data
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def maybe_single(self) -> "FakeQuery":
        self._single = True
        return self

    def text_search(self, column: str, query: str, options: dict | None = None) -> "FakeQuery":
        self._op = "text_search"
        self._text = (column, query, options or {})
        return self

    def _matches(self, record: dict[str, Any]) -> bool:
        return all(str(record.get(column)) == str(value) for column, value in self._filters)

    def execute(self) -> FakeResponse | None:
        client = self._client
        client.calls.append((self._table, self._op, dict(self._filters)))
        client.raise_if_failing(self._table, self._op, dict(self._filters))
        records = client.data.setdefault(self._table, [])

        if self._op == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            created = []
            for item in items:
                record = {"id": str(uuid4()), "created_at": "2024-01-01T00:00:00Z", **deepcopy(item)}
                records.append(record)
                created.append(deepcopy(record))
            return FakeResponse(created)

        matched = [record for record in records if self._matches(record)]

        if self._op == "update":
            for record in matched:
                record.update(deepcopy(self._payload))
            return FakeResponse(deepcopy(matched))

        if self._op == "delete":
            client.data[self._table] = [record for record in records if not self._matches(record)]
            return FakeResponse(deepcopy(matched))

        if self._op == "text_search":
            column, query, options = self._text
            terms = re.findall(r"\w+", query.lower())
            # unknown types fall back to a bare fts filter, i.e. to_tsquery,
            # which rejects space-separated words
            if options.get("type") not in TEXT_SEARCH_TYPES and len(terms) > 1:
                raise APIError({"message": "syntax error in tsquery", "code": "42601", "hint": None, "details": None})
            matched = [
                record for record in matched
                if all(term in _words(record.get(column)) for term in terms)
            ]

        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda record: record[column], reverse=desc)
        else:
            # no ordering guarantee: hand rows back newest first
            matched = list(reversed(matched))

        if self._single:
            if not matched:
                return None
            return FakeResponse(deepcopy(matched[0]))
        return FakeResponse(deepcopy(matched))


def _words(value: Any) -> set[str]:
    if isinstance(value, dict):
        text = " ".join(str(v) for v in value.values())
    else:
        text = str(value)
    return set(re.findall(r"\w+", text.lower()))


class FakeSupabaseClient:
    """In-memory tables with call recording and failure injection."""

    def __init__(self):
        self.data: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self._failures: list[tuple[str, str, dict[str, Any]]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, op: str, **filters: Any) -> None:
        """Make matching calls raise a postgrest APIError."""
        self._failures.append((table, op, filters))

    def raise_if_failing(self, table: str, op: str, filters: dict[str, Any]) -> None:
        for f_table, f_op, f_filters in self._failures:
            if f_table == table and f_op == op and all(
                str(filters.get(k)) == str(v) for k, v in f_filters.items()
            ):
                raise APIError({"message": f"{op} on {table} rejected", "code": "XX000", "hint": None, "details": None})

    def ops(self, table: str | None = None) -> list[str]:
        return [op for t, op, _ in self.calls if table is None or t == table]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def tables_service(fake_client) -> TablesService:
    return TablesService(client=fake_client)


@pytest.fixture
def search_service(fake_client) -> SearchService:
    return SearchService(client=fake_client)


@pytest.fixture
def users_service(fake_client) -> UsersService:
    return UsersService(client=fake_client)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_token(role: str | None = "viewer", expires_in: int = 3600, **claims: Any) -> str:
    """Sign a Supabase-style access token with the configured secret."""
    settings = get_settings()
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": str(uuid4()),
        "aud": settings.supabase.jwt_audience,
        "iat": now,
        "exp": now + expires_in,
        "email": f"{role or 'user'}@example.com",
        "role": "authenticated",
        "app_metadata": {"role": role} if role else {},
        "user_metadata": {"name": f"{(role or 'user').title()} User"},
    }
    payload.update(claims)
    return jwt.encode(payload, settings.supabase.jwt_secret, algorithm="HS256")


def auth_header(role: str | None = "viewer", **claims: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(role, **claims)}"}


BOXES = {
    "name": "Caixas de Papelão",
    "description": "Dimensões de caixas de papelão padrão",
    "columns": [
        {"name": "Código", "accessor": "code"},
        {"name": "Descrição", "accessor": "description"},
        {"name": "Comprimento (cm)", "accessor": "length"},
        {"name": "Largura (cm)", "accessor": "width"},
    ],
    "rows": [
        {"code": "CXP-001", "description": "Caixa Pequena", "length": 20, "width": 15},
        {"code": "CXP-002", "description": "Caixa Média", "length": 30, "width": 25},
    ],
}

PLASTICS = {
    "name": "Embalagens Plásticas",
    "description": "Dimensões de embalagens plásticas",
    "columns": [
        {"name": "Código", "accessor": "code"},
        {"name": "Tipo", "accessor": "type"},
        {"name": "Volume (ml)", "accessor": "volume"},
    ],
    "rows": [
        {"code": "EP-001", "type": "Pote Redondo", "volume": 250},
        {"code": "EP-003", "type": "Garrafa", "volume": 1000},
    ],
}
