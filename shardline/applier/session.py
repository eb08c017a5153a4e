from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine


class DbSession:
    """
    The transaction behind one apply/apply_batch call.

    Commits on clean exit, rolls back if the block raises. Exceptions always
    propagate. statement_count is the number of statements run so far, for
    error reporting.

    Use as:
        with DbSession(engine) as session:
            session.execute("DELETE FROM `orders1`.`t` WHERE `id` = :k0", {"k0": 1})
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.statement_count = 0
        self._conn: Connection | None = None
        self._tx = None

    def __enter__(self) -> "DbSession":
        if self._conn is not None:
            raise RuntimeError("DbSession is already active; nested sessions are not allowed")
        self._conn = self.engine.connect()
        self._tx = self._conn.begin()
        self.statement_count = 0
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self._tx is not None:
                if exc_type:
                    self._tx.rollback()
                else:
                    self._tx.commit()
        finally:
            if self._conn is not None:
                self._conn.close()
            self._conn = None
            self._tx = None

        return False

    def execute(self, sql: str, params: Mapping[str, Any]) -> int:
        """Run one rendered write statement and return the affected row count."""
        if self._conn is None:
            raise RuntimeError("DbSession is not active; use within a context manager")
        result = self._conn.execute(text(sql), dict(params))
        self.statement_count += 1
        try:
            return int(result.rowcount) if result.rowcount is not None else 0
        finally:
            result.close()
