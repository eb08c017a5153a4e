from __future__ import annotations

from collections.abc import Iterable

from .models import Record, SchemaTable


def group_records(records: Iterable[Record]) -> dict[SchemaTable, list[Record]]:
    """
    Bucket records by their resolved (target schema, table).

    Groups are ordered by first appearance, and records keep their arrival
    order inside a group. Two rows of the same logical table on different
    shards land in different groups.
    """
    groups: dict[SchemaTable, list[Record]] = {}
    for record in records:
        groups.setdefault(record.schema_table, []).append(record)
    return groups
