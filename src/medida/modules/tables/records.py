"""
Medida Tables - Row records.

Conversion of raw ``table_rows.data`` payloads into flat scalar rows, and
the opt-in rename of row keys after column accessors change.
"""

import json
from typing import Any

from medida.exceptions import ValidationException
from medida.modules.tables.schemas import Column, Row


def to_record(raw: Any) -> Row:
    """
    Flatten a JSON row payload into a scalar mapping.

    Strings and numbers pass through, nulls are dropped, booleans become
    ``"true"``/``"false"`` and nested lists or objects become compact JSON.

    Raises:
        ValidationException: If the payload is not a JSON object
    """
    if not isinstance(raw, dict):
        raise ValidationException(
            "Invalid row data: not an object",
            errors=[{"type": type(raw).__name__}],
        )

    record: Row = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, bool):
            record[key] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            record[key] = value
        elif isinstance(value, (dict, list)):
            record[key] = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        else:
            record[key] = str(value)
    return record


def accessor_renames(old_columns: list[Column], new_columns: list[Column]) -> dict[str, str]:
    """Map old accessor -> new accessor for columns kept by id."""
    old_by_id = {column.id: column.accessor for column in old_columns if column.id}
    renames: dict[str, str] = {}
    for column in new_columns:
        previous = old_by_id.get(column.id) if column.id else None
        if previous and previous != column.accessor:
            renames[previous] = column.accessor
    return renames


def migrate_row_keys(
    rows: list[Row],
    old_columns: list[Column],
    new_columns: list[Column],
) -> list[Row]:
    """Rename row keys so values follow their column to its new accessor."""
    renames = accessor_renames(old_columns, new_columns)
    # renames apply simultaneously, so swapping two accessors is safe
    return [
        {renames.get(key, key): value for key, value in row.items()}
        for row in rows
    ]
