from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType
from typing import Optional, Protocol

from ..models import SchemaTable, TableMeta


class TableMetaStore(Protocol):
    """
    Read-only source of table metadata, keyed by logical (schema, table).

    Implementations must be fully populated before translation starts and must
    be safe for concurrent reads.
    """

    def get_table_meta(self, schema: str, table: str) -> Optional[TableMeta]:
        """Return the TableMeta for (schema, table), or None if unknown."""
        ...


class InMemoryTableMetaStore:
    """
    Dict-backed TableMetaStore.

    The mapping is frozen on construction; lookups never mutate it, so a single
    instance can be shared between threads.

    Usage:
        store = InMemoryTableMetaStore([orders_meta, users_meta])
        store.get_table_meta("shop", "orders")
    """

    def __init__(self, metas: Iterable[TableMeta] = ()) -> None:
        by_key: dict[SchemaTable, TableMeta] = {}
        for meta in metas:
            key = meta.schema_table
            if key in by_key:
                raise ValueError(f"Duplicate table metadata for {key}")
            by_key[key] = meta
        self._metas = MappingProxyType(by_key)

    def get_table_meta(self, schema: str, table: str) -> Optional[TableMeta]:
        return self._metas.get(SchemaTable(schema, table))

    def __contains__(self, key: SchemaTable) -> bool:
        return key in self._metas

    def __len__(self) -> int:
        return len(self._metas)

    def schema_tables(self) -> list[SchemaTable]:
        return list(self._metas)
