from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .config import TranslatorConfig
from .errors import InvalidShardKey, MissingTableMeta, UnknownColumn
from .meta.store import TableMetaStore
from .metrics import observe_translation
from .models import ColumnValue, OperateType, RawChangeEvent, Record, TableMeta
from .shard import resolve_shard

logger = logging.getLogger(__name__)

ChangeEvent = Union[RawChangeEvent, Mapping[str, Any]]


def map_column(table_meta: TableMeta, name: str, value: Any) -> ColumnValue:
    """
    Pair a raw column value with its ColumnMeta. No type coercion happens here.

    Raises:
        UnknownColumn: if the table metadata has no such column
    """
    column_meta = table_meta.get_column_meta(name)
    if column_meta is None:
        raise UnknownColumn(table_meta.schema, table_meta.table, name)
    return ColumnValue(column_meta, value)


class RecordTranslator:
    """
    Turns one raw change event into one Record addressed at its target shard.

    The metadata store is only read, so one translator may be shared by
    concurrent callers as long as the store allows concurrent reads.

    Errors surface in a fixed order: MissingTableMeta, InvalidShardKey,
    UnknownOperationType, UnknownColumn.
    """

    def __init__(self, meta_store: TableMetaStore, config: Optional[TranslatorConfig] = None) -> None:
        self.meta_store = meta_store
        self.config = config or TranslatorConfig()

    def to_event(self, event: ChangeEvent) -> RawChangeEvent:
        if isinstance(event, RawChangeEvent):
            return event
        return RawChangeEvent.from_payload(event, self.config)

    def translate(self, event: ChangeEvent) -> Record:
        """
        Raises:
            InvalidChangeEvent: if a payload mapping lacks required keys
            MissingTableMeta, InvalidShardKey, UnknownOperationType, UnknownColumn
        """
        event = self.to_event(event)

        table_meta = self.meta_store.get_table_meta(event.schema, event.table)
        if table_meta is None:
            raise MissingTableMeta(event.schema, event.table)

        if table_meta.shard_key not in event.data:
            raise InvalidShardKey(
                None,
                f"Shard key column {table_meta.shard_key!r} missing from {event.schema}.{event.table} row",
            )
        shard_index = resolve_shard(str(event.data[table_meta.shard_key]), table_meta.shard_count)

        record = Record(
            target_schema=f"{event.schema}{shard_index}",
            target_table=event.table,
            primary_keys=table_meta.primary_keys,
            op_type=OperateType.parse(event.operation_type),
        )
        for name, value in event.data.items():
            record.add_column(map_column(table_meta, name, value))

        observe_translation(event.table, record.op_type.value)
        return record
