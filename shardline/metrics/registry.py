from __future__ import annotations

from prometheus_client import Counter, Histogram

RECORDS_TRANSLATED_TOTAL = Counter(
    "shardline_records_translated_total",
    "Change events translated into shard-addressed records",
    ["table", "op_type"],
)

TRANSLATION_ERRORS_TOTAL = Counter(
    "shardline_translation_errors_total",
    "Change events that failed translation",
    ["kind"],
)

BATCHES_DISPATCHED_TOTAL = Counter(
    "shardline_batches_dispatched_total",
    "apply_batch calls made per destination",
    ["schema", "table"],
)

RECORDS_DISPATCHED_TOTAL = Counter(
    "shardline_records_dispatched_total",
    "Records handed to the applier per destination",
    ["schema", "table"],
)

APPLY_LATENCY_SECONDS = Histogram(
    "shardline_apply_latency_seconds",
    "Wall-clock time of a single-record apply call",
    ["table"],
)

END_TO_END_LATENCY_SECONDS = Histogram(
    "shardline_end_to_end_latency_seconds",
    "Time from the source row's modify_time to the end of its apply call",
    ["table"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 60.0, 300.0, float("inf")),
)

MODIFY_TIME_PARSE_ERRORS_TOTAL = Counter(
    "shardline_modify_time_parse_errors_total",
    "Single-event modify_time values that could not be parsed",
    ["table"],
)

DB_WRITE_TOTAL = Counter(
    "shardline_db_write_total",
    "Records written to the target store",
    ["table", "op_type", "status"],
)

DB_WRITE_LATENCY_SECONDS = Histogram(
    "shardline_db_write_latency_seconds",
    "Latency of one applier transaction",
    ["table", "op_type"],
)
