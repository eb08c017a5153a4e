from __future__ import annotations

from collections.abc import Callable, Iterator
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from shardline.applier.base import Applier
from shardline.meta.store import InMemoryTableMetaStore
from shardline.models import ColumnMeta, TableMeta
from shardline.translator import RecordTranslator

SHARD_SCHEMAS = ("orders0", "orders1", "orders2", "orders3")


def _make_table_meta(
    schema: str = "orders",
    table: str = "t",
    columns: tuple[str, ...] = ("id", "name", "modify_time"),
    primary_keys: tuple[str, ...] = ("id",),
    shard_key: str = "id",
    shard_count: int = 4,
) -> TableMeta:
    return TableMeta(
        schema=schema,
        table=table,
        primary_keys=primary_keys,
        shard_key=shard_key,
        shard_count=shard_count,
        columns={name: ColumnMeta(name=name, type="VARCHAR(255)") for name in columns},
    )


def _make_payload(
    op: str = "insert",
    schema: str = "orders",
    table: str = "t",
    **data,
) -> dict:
    return {"type": op, "database": schema, "table": table, "data": data}


@pytest.fixture
def table_meta_factory() -> Callable[..., TableMeta]:
    """
    Factory fixture building TableMeta with VARCHAR columns.

    Usage:
        meta = table_meta_factory(table="users", columns=("uid",), shard_key="uid")
    """
    return _make_table_meta


@pytest.fixture
def payload_factory() -> Callable[..., dict]:
    """
    Factory fixture building upstream payload mappings.

    Usage:
        payload = payload_factory("update", id="12345", name="x")
    """
    return _make_payload


@pytest.fixture
def orders_meta() -> TableMeta:
    return _make_table_meta()


@pytest.fixture
def meta_store(orders_meta: TableMeta) -> InMemoryTableMetaStore:
    """
    Two logical tables:
    - orders.t sharded 4 ways on id
    - orders.users sharded 2 ways on uid, single-column PK
    """
    users = _make_table_meta(
        table="users",
        columns=("uid", "email"),
        primary_keys=("uid",),
        shard_key="uid",
        shard_count=2,
    )
    return InMemoryTableMetaStore([orders_meta, users])


@pytest.fixture
def translator(meta_store: InMemoryTableMetaStore) -> RecordTranslator:
    return RecordTranslator(meta_store)


@pytest.fixture
def applier() -> MagicMock:
    """An Applier double that records calls."""
    return MagicMock(spec=Applier)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    """
    In-memory SQLite engine standing in for the sharded MySQL target.

    Each shard schema (orders0..orders3) is an attached in-memory database
    holding a table `t`. StaticPool keeps every checkout on the same
    connection so the attachments stay visible.
    """
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with eng.begin() as conn:
        for schema in SHARD_SCHEMAS:
            conn.exec_driver_sql(f"ATTACH DATABASE ':memory:' AS {schema}")
            conn.exec_driver_sql(
                f"CREATE TABLE {schema}.t ("
                "id VARCHAR(32) NOT NULL PRIMARY KEY, "
                "name VARCHAR(255) NULL, "
                "modify_time VARCHAR(32) NULL)"
            )

    yield eng
    eng.dispose()
