from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Engine

from shardline.applier.session import DbSession


def _count(engine: Engine) -> int:
    with engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM orders0.t")).scalar_one()


class TestDbSession:
    """Tests for DbSession."""

    def test_commits_on_clean_exit(self, sqlite_engine: Engine) -> None:
        """Test that statements are committed and counted."""
        with DbSession(sqlite_engine) as session:
            rowcount = session.execute("INSERT INTO `orders0`.`t` (`id`) VALUES (:c0)", {"c0": "4"})

        assert rowcount == 1
        assert session.statement_count == 1
        assert _count(sqlite_engine) == 1

    def test_rolls_back_on_error(self, sqlite_engine: Engine) -> None:
        """Test that an exception in the block rolls back and propagates."""
        with pytest.raises(RuntimeError):
            with DbSession(sqlite_engine) as session:
                session.execute("INSERT INTO `orders0`.`t` (`id`) VALUES (:c0)", {"c0": "4"})
                raise RuntimeError("boom")

        assert _count(sqlite_engine) == 0

    def test_execute_outside_context_raises(self, sqlite_engine: Engine) -> None:
        """Test that execute() requires an active session."""
        with pytest.raises(RuntimeError):
            DbSession(sqlite_engine).execute("DELETE FROM `orders0`.`t`", {})

    def test_nested_enter_raises(self, sqlite_engine: Engine) -> None:
        """Test that a session cannot be entered twice."""
        session = DbSession(sqlite_engine)
        with session:
            with pytest.raises(RuntimeError):
                session.__enter__()
