from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchTableError

from shardline.meta.loader import ShardConfig, load_table_meta, load_table_metas
from shardline.models import ColumnMeta
from shardline.translator import RecordTranslator


class TestLoadTableMeta:
    """Tests for load_table_meta()."""

    def test_reads_columns_and_primary_key_from_shard_schema(self, sqlite_engine: Engine) -> None:
        """Test that columns and primary key come from the inspected shard schema."""
        meta = load_table_meta(
            sqlite_engine,
            ShardConfig(schema="orders", table="t", shard_key="id", shard_count=4, inspect_schema="orders0"),
        )

        assert meta.schema == "orders"
        assert meta.table == "t"
        assert meta.primary_keys == ("id",)
        assert meta.shard_key == "id"
        assert meta.shard_count == 4
        assert list(meta.columns) == ["id", "name", "modify_time"]
        assert meta.get_column_meta("id") == ColumnMeta(name="id", type="VARCHAR(32)", nullable=False)
        assert meta.get_column_meta("name").nullable is True

    def test_unknown_shard_key_raises(self, sqlite_engine: Engine) -> None:
        """Test that a shard key missing from the table raises ValueError."""
        with pytest.raises(ValueError):
            load_table_meta(
                sqlite_engine,
                ShardConfig(schema="orders", table="t", shard_key="uid", shard_count=4, inspect_schema="orders0"),
            )

    def test_missing_table_raises(self, sqlite_engine: Engine) -> None:
        """Test that a table absent from the catalog raises."""
        with pytest.raises((NoSuchTableError, ValueError)):
            load_table_meta(
                sqlite_engine,
                ShardConfig(schema="orders", table="ghost", shard_key="id", shard_count=4, inspect_schema="orders0"),
            )

    def test_shard_config_validates_shard_count(self) -> None:
        """Test that ShardConfig rejects a zero shard count."""
        with pytest.raises(ValueError):
            ShardConfig(schema="orders", table="t", shard_key="id", shard_count=0)


def test_loaded_store_drives_translation(sqlite_engine: Engine) -> None:
    """Test that a loaded store can be used by RecordTranslator directly."""
    store = load_table_metas(
        sqlite_engine,
        [ShardConfig(schema="orders", table="t", shard_key="id", shard_count=4, inspect_schema="orders0")],
    )

    record = RecordTranslator(store).translate(
        {"type": "insert", "database": "orders", "table": "t", "data": {"id": "12345", "name": "x"}}
    )

    assert record.target_schema == "orders1"
    assert [c.meta.type for c in record.columns] == ["VARCHAR(32)", "VARCHAR(255)"]
