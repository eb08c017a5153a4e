from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .applier.base import Applier
from .config import ON_INVALID_SKIP
from .errors import TimeParseError, TranslationError
from .grouping import group_records
from .metrics import (
    observe_dispatch,
    observe_latency,
    observe_modify_time_parse_error,
    observe_translation_error,
)
from .models import Record
from .timeutil import now_millis, parse_modify_time
from .translator import ChangeEvent, RecordTranslator

logger = logging.getLogger(__name__)
timing_logger = logging.getLogger("shardline.timing")

# used in place of an unparseable modify_time
MODIFY_TIME_SENTINEL = 0


class LifecycleState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class LatencySample:
    table: str
    end_to_end_ms: int
    apply_ms: int


def log_latency(sample: LatencySample) -> None:
    """Default latency observer: one timing log line plus prometheus histograms."""
    timing_logger.info("%s %d %d", sample.table, sample.end_to_end_ms, sample.apply_ms)
    observe_latency(sample.table, sample.end_to_end_ms, sample.apply_ms)


class Dispatcher:
    """
    Translates change events and hands the resulting records to an Applier.

    Two paths:
    - translate_batch(): translate everything, group by destination shard
      table, one apply_batch() call per group.
    - translate(): one event, one apply() call, plus a latency sample.

    Both are synchronous and never retry. The lifecycle state is informational;
    calls are accepted whether or not the dispatcher is running.

    Failure phases of translate_batch():
    - TranslationError: raised before any dispatch, nothing was applied.
    - anything else: raised by the applier; groups dispatched earlier in the
      same call may already be applied.
    """

    def __init__(
        self,
        translator: RecordTranslator,
        applier: Applier,
        latency_observer: Optional[Callable[[LatencySample], None]] = None,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self.translator = translator
        self.applier = applier
        self.latency_observer = latency_observer or log_latency
        self.clock = clock
        self._state = LifecycleState.STOPPED

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == LifecycleState.RUNNING

    def start(self) -> None:
        self._state = LifecycleState.RUNNING
        logger.info("Dispatcher is started")

    def stop(self) -> None:
        self._state = LifecycleState.STOPPED
        logger.info("Dispatcher is stopped")

    def translate_batch(self, events: Iterable[ChangeEvent]) -> int:
        """
        Translate a batch and apply it grouped by (target schema, table).

        Returns:
            Number of records handed to the applier

        Raises:
            TranslationError: if any event fails to translate and
                on_invalid_record is "abort"; no group is dispatched
            Any exception raised by the applier, unchanged
        """
        records = self._translate_all(events)
        if not records:
            return 0

        groups = group_records(records)
        applied = 0
        for schema_table, group in groups.items():
            try:
                self.applier.apply_batch(group, schema_table)
            except Exception:
                logger.error(
                    "apply_batch failed for %s (%d records); %d of %d groups already applied",
                    schema_table,
                    len(group),
                    applied,
                    len(groups),
                )
                raise
            observe_dispatch(schema_table.schema, schema_table.table, len(group))
            applied += 1

        return len(records)

    def _translate_all(self, events: Iterable[ChangeEvent]) -> list[Record]:
        skip_invalid = self.translator.config.on_invalid_record == ON_INVALID_SKIP
        records = []
        for index, event in enumerate(events):
            try:
                records.append(self.translator.translate(event))
            except TranslationError as exc:
                observe_translation_error(type(exc).__name__)
                if not skip_invalid:
                    raise
                logger.warning("Skipping change event #%d of batch: %s", index, exc)
        return records

    def translate(self, event: ChangeEvent) -> Record:
        """
        Translate and apply a single event, emitting a LatencySample.

        An unparseable modify_time does not stop the apply; the sample is then
        computed against MODIFY_TIME_SENTINEL.

        Returns:
            The applied Record

        Raises:
            TranslationError: if the event fails to translate
            Any exception raised by the applier, unchanged
        """
        try:
            raw = self.translator.to_event(event)
            record = self.translator.translate(raw)
        except TranslationError as exc:
            observe_translation_error(type(exc).__name__)
            raise

        try:
            modify_millis = parse_modify_time(raw.modify_time, self.translator.config.modify_time_format)
        except TimeParseError as exc:
            logger.error("Failed to parse modify_time for %s.%s: %s", raw.schema, raw.table, exc)
            observe_modify_time_parse_error(raw.table)
            modify_millis = MODIFY_TIME_SENTINEL

        before = self.clock()
        self.applier.apply(record)
        after = self.clock()

        self.latency_observer(
            LatencySample(table=raw.table, end_to_end_ms=after - modify_millis, apply_ms=after - before)
        )
        return record
