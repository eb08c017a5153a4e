from .applier import Applier, MysqlApplier
from .config import ApplierConfig, TranslatorConfig
from .dispatcher import Dispatcher, LatencySample, LifecycleState
from .grouping import group_records
from .meta import InMemoryTableMetaStore, ShardConfig, TableMetaStore, load_table_metas
from .models import ColumnMeta, ColumnValue, OperateType, RawChangeEvent, Record, SchemaTable, TableMeta
from .shard import resolve_shard
from .translator import RecordTranslator, map_column

__all__ = [
    "Applier",
    "MysqlApplier",
    "ApplierConfig",
    "TranslatorConfig",
    "Dispatcher",
    "LatencySample",
    "LifecycleState",
    "group_records",
    "InMemoryTableMetaStore",
    "ShardConfig",
    "TableMetaStore",
    "load_table_metas",
    "ColumnMeta",
    "ColumnValue",
    "OperateType",
    "RawChangeEvent",
    "Record",
    "SchemaTable",
    "TableMeta",
    "resolve_shard",
    "RecordTranslator",
    "map_column",
]
