from __future__ import annotations

from .registry import (
    APPLY_LATENCY_SECONDS,
    BATCHES_DISPATCHED_TOTAL,
    DB_WRITE_LATENCY_SECONDS,
    DB_WRITE_TOTAL,
    END_TO_END_LATENCY_SECONDS,
    MODIFY_TIME_PARSE_ERRORS_TOTAL,
    RECORDS_DISPATCHED_TOTAL,
    RECORDS_TRANSLATED_TOTAL,
    TRANSLATION_ERRORS_TOTAL,
)


def observe_translation(table: str, op_type: str) -> None:
    RECORDS_TRANSLATED_TOTAL.labels(table=table, op_type=op_type).inc()


def observe_translation_error(kind: str) -> None:
    TRANSLATION_ERRORS_TOTAL.labels(kind=kind).inc()


def observe_dispatch(schema: str, table: str, record_count: int) -> None:
    BATCHES_DISPATCHED_TOTAL.labels(schema=schema, table=table).inc()
    RECORDS_DISPATCHED_TOTAL.labels(schema=schema, table=table).inc(record_count)


def observe_latency(table: str, end_to_end_ms: int, apply_ms: int) -> None:
    """
    Record one single-event latency sample.

    Negative values (source clock ahead of ours) are clamped to 0.
    """
    END_TO_END_LATENCY_SECONDS.labels(table=table).observe(max(end_to_end_ms, 0) / 1000.0)
    APPLY_LATENCY_SECONDS.labels(table=table).observe(max(apply_ms, 0) / 1000.0)


def observe_modify_time_parse_error(table: str) -> None:
    MODIFY_TIME_PARSE_ERRORS_TOTAL.labels(table=table).inc()


def observe_db_write(table: str, op_type: str, status: str, latency_s: float, count: int = 1) -> None:
    DB_WRITE_TOTAL.labels(table=table, op_type=op_type, status=status).inc(count)
    DB_WRITE_LATENCY_SECONDS.labels(table=table, op_type=op_type).observe(latency_s)


__all__ = [
    "observe_translation",
    "observe_translation_error",
    "observe_dispatch",
    "observe_latency",
    "observe_modify_time_parse_error",
    "observe_db_write",
]
