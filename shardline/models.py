from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .config import TranslatorConfig
from .errors import InvalidChangeEvent, UnknownOperationType


class OperateType(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, value: Any) -> "OperateType":
        """
        Map an upstream operation type string to an OperateType.

        Only the exact lowercase strings are accepted.

        Raises:
            UnknownOperationType: for any other value
        """
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise UnknownOperationType(value)


@dataclass(frozen=True)
class SchemaTable:
    schema: str
    table: str

    def __str__(self) -> str:
        return f"{self.schema}.{self.table}"


@dataclass(frozen=True)
class ColumnMeta:
    name: str
    type: str
    nullable: bool = True


@dataclass(frozen=True)
class ColumnValue:
    meta: ColumnMeta
    value: Any

    @property
    def name(self) -> str:
        return self.meta.name


@dataclass(frozen=True)
class TableMeta:
    """
    Metadata for one logical (schema, table).

    shard_key is the column whose value selects the shard, shard_count the
    number of physical shard schemas.
    """
    schema: str
    table: str
    primary_keys: tuple[str, ...]
    shard_key: str
    shard_count: int
    columns: Mapping[str, ColumnMeta] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.shard_count, int) or self.shard_count <= 0:
            raise ValueError(
                f"shard_count must be a positive integer for {self.schema}.{self.table}, "
                f"got {self.shard_count!r}"
            )
        object.__setattr__(self, "primary_keys", tuple(self.primary_keys))
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    @property
    def schema_table(self) -> SchemaTable:
        return SchemaTable(self.schema, self.table)

    def get_column_meta(self, name: str) -> Optional[ColumnMeta]:
        return self.columns.get(name)


@dataclass
class Record:
    """
    A translated write unit addressed at one shard.
    """
    target_schema: str
    target_table: str
    primary_keys: tuple[str, ...]
    op_type: OperateType
    columns: list[ColumnValue] = field(default_factory=list)

    @property
    def schema_table(self) -> SchemaTable:
        return SchemaTable(self.target_schema, self.target_table)

    def add_column(self, column: ColumnValue) -> None:
        self.columns.append(column)

    def values(self) -> dict[str, Any]:
        return {c.name: c.value for c in self.columns}

    def key_values(self) -> dict[str, Any]:
        """Primary key column -> value, for the keys present in the record."""
        values = self.values()
        return {k: values[k] for k in self.primary_keys if k in values}


@dataclass
class RawChangeEvent:
    operation_type: str
    schema: str
    table: str
    data: Mapping[str, Any]
    modify_time: Optional[str] = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        config: Optional[TranslatorConfig] = None,
    ) -> "RawChangeEvent":
        """
        Build a RawChangeEvent from a decoded upstream payload.

        modify_time is taken from the payload itself when present, otherwise
        from the row's modify_time column.

        Raises:
            InvalidChangeEvent: if a required key is missing or data is not a mapping
        """
        config = config or TranslatorConfig()
        if not isinstance(payload, Mapping):
            raise InvalidChangeEvent(
                f"Change event payload must be a mapping, got {type(payload).__name__}"
            )

        missing = [
            key
            for key in (config.type_key, config.schema_key, config.table_key, config.data_key)
            if payload.get(key) is None
        ]
        if missing:
            raise InvalidChangeEvent(f"Change event payload is missing {', '.join(missing)}")

        data = payload[config.data_key]
        if not isinstance(data, Mapping):
            raise InvalidChangeEvent(
                f"Change event {config.data_key!r} must be a mapping, got {type(data).__name__}"
            )

        modify_time = payload.get(config.modify_time_key)
        if modify_time is None:
            modify_time = data.get(config.modify_time_column)

        return cls(
            operation_type=payload[config.type_key],
            schema=payload[config.schema_key],
            table=payload[config.table_key],
            data=data,
            modify_time=modify_time,
        )
