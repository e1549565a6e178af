"""
Medida Tables - Schemas.

Pydantic models for measurement tables, their ordered columns and rows.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


Scalar = str | int | float
Row = dict[str, Scalar]


class Column(BaseModel):
    """A named column; ``accessor`` is the key of its value in each row."""

    id: str | None = None
    name: str = Field(..., min_length=1, max_length=200)
    accessor: str = Field(..., min_length=1, max_length=200)


def ensure_unique_accessors(columns: list[Column] | None) -> None:
    """Raise ValueError when two columns share an accessor."""
    if not columns:
        return
    seen: set[str] = set()
    duplicates: list[str] = []
    for column in columns:
        if column.accessor in seen:
            duplicates.append(column.accessor)
        seen.add(column.accessor)
    if duplicates:
        raise ValueError(f"Duplicate column accessors: {', '.join(sorted(set(duplicates)))}")


class TableData(BaseModel):
    """A measurement table assembled from metadata, columns and rows."""

    id: str
    name: str
    description: str = ""
    columns: list[Column] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)


class TableCreateRequest(BaseModel):
    """Request to create a table with its initial columns and rows."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    columns: list[Column] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_accessors(self) -> "TableCreateRequest":
        ensure_unique_accessors(self.columns)
        return self


class TableUpdateRequest(BaseModel):
    """
    Partial update of a table.

    Each part is applied only when present: metadata fields are written as
    given, while ``columns`` and ``rows`` replace the whole existing set.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    columns: list[Column] | None = None
    rows: list[Row] | None = None

    @model_validator(mode="after")
    def _check(self) -> "TableUpdateRequest":
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        ensure_unique_accessors(self.columns)
        return self

    def metadata(self) -> dict[str, Any]:
        """Return the metadata fields that were explicitly provided."""
        return {
            key: getattr(self, key)
            for key in ("name", "description")
            if key in self.model_fields_set
        }

    def local_changes(self) -> dict[str, Any]:
        """Fields to merge into an in-memory TableData."""
        changes = self.metadata()
        if changes.get("description", "") is None:
            changes["description"] = ""
        if self.columns is not None:
            changes["columns"] = [column.model_copy() for column in self.columns]
        if self.rows is not None:
            changes["rows"] = [dict(row) for row in self.rows]
        return changes


class TableSummary(BaseModel):
    """Totals shown on the dashboard."""

    total_tables: int = Field(ge=0)
    total_products: int = Field(ge=0)
