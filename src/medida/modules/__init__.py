"""Medida Modules - All application modules."""

from medida.modules.tables import router as tables_router
from medida.modules.search import router as search_router
from medida.modules.users import router as users_router

__all__ = [
    "tables_router",
    "search_router",
    "users_router",
]
