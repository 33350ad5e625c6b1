"""
Conversion between domain records and flat storage rows.

Rows are plain mappings of column name to a JSON/SQL friendly value: enums
become their values, dates become ISO strings. Both the SQLite and the
REST backends store records this way.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from dateutil import parser as dateparser

from motorshop.domain import EntityKind
from motorshop.domain.fields import FIELD_TABLES, RECORD_TYPES, ValueKind

# Columns stored beyond the field table
EXTRA_COLUMNS: Dict[EntityKind, Tuple[str, ...]] = {
    EntityKind.COMPANY: ("id",),
    EntityKind.MOTOR: ("id",),
    EntityKind.JOB: ("id", "job_number", "created_at"),
}


def columns(kind: EntityKind) -> Tuple[str, ...]:
    kind = EntityKind(kind)
    return EXTRA_COLUMNS[kind] + tuple(spec.name for spec in FIELD_TABLES[kind])


def to_column(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def from_column(kind: EntityKind, name: str, value: Any) -> Any:
    if value is None:
        return None
    if name == "created_at":
        return dateparser.isoparse(value)
    for spec in FIELD_TABLES[kind]:
        if spec.name != name:
            continue
        if spec.kind == ValueKind.CHOICE:
            return spec.choices(value)
        if spec.kind == ValueKind.DATE:
            return dateparser.isoparse(value).date()
        if spec.kind == ValueKind.NUMBER:
            return float(value)
    return value


def to_row(kind: EntityKind, record, include_id: bool = True) -> Dict[str, Any]:
    """Flatten a record into a column mapping, in column order."""
    return {
        name: to_column(getattr(record, name))
        for name in columns(kind)
        if include_id or name != "id"
    }


def from_row(kind: EntityKind, row: Mapping[str, Any]):
    """
    Build a record from a row.

    Columns the record type does not know (e.g. server timestamps) are
    ignored; missing ones are left at the record's default.
    """
    kind = EntityKind(kind)
    keys = row.keys()
    values = {
        name: from_column(kind, name, row[name])
        for name in columns(kind)
        if name in keys
    }
    return RECORD_TYPES[kind](**values)
