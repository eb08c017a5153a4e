from .base import Applier
from .mysql import MysqlApplier
from .session import DbSession

__all__ = ["Applier", "MysqlApplier", "DbSession"]
