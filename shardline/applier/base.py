from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..models import Record, SchemaTable


class Applier(Protocol):
    """
    Write side of the pipeline.

    Both calls block until the write has finished, and raise on failure.
    """

    def apply(self, record: Record) -> None:
        """Write a single record."""
        ...

    def apply_batch(self, records: Sequence[Record], schema_table: SchemaTable) -> None:
        """Write records that all target schema_table, in the given order."""
        ...
