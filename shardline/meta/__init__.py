from .loader import ShardConfig, load_table_meta, load_table_metas
from .store import InMemoryTableMetaStore, TableMetaStore

__all__ = [
    "TableMetaStore",
    "InMemoryTableMetaStore",
    "ShardConfig",
    "load_table_meta",
    "load_table_metas",
]
