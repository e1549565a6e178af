"""Medida Tables Module - Measurement tables."""

from medida.modules.tables.router import router
from medida.modules.tables.service import TablesService
from medida.modules.tables.repository import (
    MeasurementTablesRepository,
    TableColumnsRepository,
    TableRowsRepository,
)

__all__ = [
    "router",
    "TablesService",
    "MeasurementTablesRepository",
    "TableColumnsRepository",
    "TableRowsRepository",
]
