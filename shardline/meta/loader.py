from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from ..models import ColumnMeta, TableMeta
from .store import InMemoryTableMetaStore

logger = logging.getLogger(__name__)


@dataclass
class ShardConfig:
    """
    Sharding settings for one logical table.

    inspect_schema names the physical schema to read column definitions from
    (usually shard 0, e.g. "orders0"). Defaults to the logical schema.
    """
    schema: str
    table: str
    shard_key: str
    shard_count: int
    inspect_schema: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.shard_count <= 0:
            raise ValueError(f"shard_count must be > 0 for {self.schema}.{self.table}")


def load_table_meta(engine: Engine, shard_config: ShardConfig) -> TableMeta:
    """
    Build a TableMeta from the live database catalog.

    Raises:
        ValueError: if the table has no columns or lacks the shard key column
    """
    inspector = inspect(engine)
    schema = shard_config.inspect_schema or shard_config.schema

    columns = {
        col["name"]: ColumnMeta(
            name=col["name"],
            type=str(col["type"]),
            nullable=bool(col.get("nullable", True)),
        )
        for col in inspector.get_columns(shard_config.table, schema=schema)
    }
    if not columns:
        raise ValueError(f"No columns found for {schema}.{shard_config.table}")
    if shard_config.shard_key not in columns:
        raise ValueError(
            f"Shard key {shard_config.shard_key!r} is not a column of {schema}.{shard_config.table}"
        )

    pk = inspector.get_pk_constraint(shard_config.table, schema=schema)
    primary_keys = tuple(pk.get("constrained_columns") or ())
    if not primary_keys:
        logger.warning("Table %s.%s has no primary key", schema, shard_config.table)

    return TableMeta(
        schema=shard_config.schema,
        table=shard_config.table,
        primary_keys=primary_keys,
        shard_key=shard_config.shard_key,
        shard_count=shard_config.shard_count,
        columns=columns,
    )


def load_table_metas(engine: Engine, shard_configs: Iterable[ShardConfig]) -> InMemoryTableMetaStore:
    """Load metadata for every configured table into a read-only store."""
    metas = [load_table_meta(engine, cfg) for cfg in shard_configs]
    logger.info("Loaded table metadata for %d tables", len(metas))
    return InMemoryTableMetaStore(metas)
