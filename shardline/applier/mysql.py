from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Sequence
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ..config import ApplierConfig
from ..errors import ApplyError
from ..metrics import observe_db_write
from ..models import OperateType, Record, SchemaTable
from .session import DbSession
from .sql import build_statement

logger = logging.getLogger(__name__)


def _is_duplicate_key(exc: IntegrityError) -> bool:
    # MySQL error code 1062 is ER_DUP_ENTRY
    orig = getattr(exc, "orig", None)
    error_msg = str(orig) if orig is not None else str(exc)
    error_code = getattr(orig, "args", [None])[0] if orig is not None else None
    return (
        error_code == 1062
        or "Duplicate entry" in error_msg
        or "duplicate key" in error_msg.lower()
    )


class MysqlApplier:
    """
    Applies shard-addressed records to MySQL through a SQLAlchemy Engine.

    Every apply/apply_batch call runs in its own transaction: either all of
    its records are committed or none are. Records are written one statement
    at a time, in order. Any failure is raised as ApplyError.
    """

    def __init__(self, engine: Engine, config: Optional[ApplierConfig] = None) -> None:
        self.engine = engine
        self.config = config or ApplierConfig()

    def apply(self, record: Record) -> None:
        self._write([record], record.schema_table)

    def apply_batch(self, records: Sequence[Record], schema_table: SchemaTable) -> None:
        if not records:
            return
        for record in records:
            if record.schema_table != schema_table:
                raise ApplyError(
                    f"Record for {record.schema_table} passed in a batch for {schema_table}"
                )
        self._write(records, schema_table)

    def _write(self, records: Sequence[Record], schema_table: SchemaTable) -> None:
        start_time = time.monotonic()
        status = "success"
        session = DbSession(self.engine)

        try:
            with session:
                for record in records:
                    self._execute(session, record)
        except ApplyError:
            status = "error"
            raise
        except Exception as exc:
            status = "error"
            raise ApplyError(
                f"Failed to apply {len(records)} record(s) to {schema_table} "
                f"after {session.statement_count} statement(s), rolled back: {exc}"
            ) from exc
        finally:
            latency = time.monotonic() - start_time
            for op_type, count in Counter(r.op_type.value for r in records).items():
                observe_db_write(str(schema_table), op_type, status, latency, count)

    def _execute(self, session: DbSession, record: Record) -> None:
        statement = build_statement(record)
        if statement is None:
            logger.debug("Nothing to update for %s, only key columns present", record.schema_table)
            return

        sql, params = statement
        try:
            session.execute(sql, params)
        except IntegrityError as exc:
            if (
                record.op_type == OperateType.INSERT
                and self.config.suppress_duplicate_inserts
                and _is_duplicate_key(exc)
            ):
                logger.info(
                    "Duplicate key error suppressed for INSERT into %s with key=%s: %s",
                    record.schema_table,
                    record.key_values(),
                    exc.orig if exc.orig is not None else exc,
                )
            else:
                raise
