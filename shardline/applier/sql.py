from __future__ import annotations

import re
from typing import Any, Optional

from ..errors import ApplyError
from ..models import OperateType, Record

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that a schema/table/column name is safe to interpolate into SQL.

    MySQL allows more than letters, digits and underscores, but record
    identifiers come from table metadata and are restricted to that set.

    Raises:
        TypeError: If identifier is not a string
        ValueError: If identifier is empty, too long or contains unsafe characters
    """
    if not isinstance(name, str):
        raise TypeError(f"{identifier_type} must be a string, got {type(name).__name__}")

    if not name:
        raise ValueError(f"{identifier_type} cannot be empty")

    if not _IDENTIFIER_RE.match(name):
        raise ValueError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with letter/underscore and contain only alphanumeric characters and underscores"
        )

    if len(name) > 64:
        raise ValueError(f"{identifier_type} {name!r} exceeds MySQL's 64-character limit")

    return name


def quote(name: str, identifier_type: str = "identifier") -> str:
    return f"`{validate_identifier(name, identifier_type)}`"


def qualified_table(record: Record) -> str:
    return f"{quote(record.target_schema, 'schema')}.{quote(record.target_table, 'table')}"


def _where_primary_key(record: Record, params: dict[str, Any]) -> str:
    if not record.primary_keys:
        raise ApplyError(
            f"{record.op_type.value} into {record.schema_table} requires a primary key"
        )
    values = record.values()
    clauses = []
    for i, key in enumerate(record.primary_keys):
        if key not in values:
            raise ApplyError(
                f"{record.op_type.value} into {record.schema_table} is missing primary key column {key!r}"
            )
        clauses.append(f"{quote(key, 'column')} = :k{i}")
        params[f"k{i}"] = values[key]
    return " AND ".join(clauses)


def build_statement(record: Record) -> Optional[tuple[str, dict[str, Any]]]:
    """
    Render the SQL for one record, with bind parameters.

    Returns None when there is nothing to write (an UPDATE touching only
    primary key columns).
    """
    table = qualified_table(record)
    params: dict[str, Any] = {}

    if record.op_type == OperateType.INSERT:
        if not record.columns:
            raise ApplyError(f"insert into {record.schema_table} has no columns")
        names = []
        for i, column in enumerate(record.columns):
            names.append(quote(column.name, "column"))
            params[f"c{i}"] = column.value
        placeholders = ", ".join(f":c{i}" for i in range(len(names)))
        return f"INSERT INTO {table} ({', '.join(names)}) VALUES ({placeholders})", params

    if record.op_type == OperateType.UPDATE:
        where = _where_primary_key(record, params)
        assignments = []
        for i, column in enumerate(record.columns):
            if column.name in record.primary_keys:
                continue
            assignments.append(f"{quote(column.name, 'column')} = :c{i}")
            params[f"c{i}"] = column.value
        if not assignments:
            return None
        return f"UPDATE {table} SET {', '.join(assignments)} WHERE {where}", params

    if record.op_type == OperateType.DELETE:
        where = _where_primary_key(record, params)
        return f"DELETE FROM {table} WHERE {where}", params

    raise ApplyError(f"Unsupported operation type: {record.op_type}")
