"""Medida Search Module - Cross-table product search."""

from medida.modules.search.router import router
from medida.modules.search.service import SearchService

__all__ = ["router", "SearchService"]
