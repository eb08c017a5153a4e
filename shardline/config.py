from dataclasses import dataclass

from .timeutil import MODIFY_TIME_FORMAT

ON_INVALID_ABORT = "abort"
ON_INVALID_SKIP = "skip"


@dataclass
class TranslatorConfig:
    # payload keys of the upstream wire format
    type_key: str = "type"
    schema_key: str = "database"
    table_key: str = "table"
    data_key: str = "data"
    modify_time_key: str = "modify_time"
    # row column consulted when the payload carries no modify_time key
    modify_time_column: str = "modify_time"
    modify_time_format: str = MODIFY_TIME_FORMAT
    on_invalid_record: str = ON_INVALID_ABORT

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.on_invalid_record not in (ON_INVALID_ABORT, ON_INVALID_SKIP):
            raise ValueError(
                f"on_invalid_record must be {ON_INVALID_ABORT!r} or {ON_INVALID_SKIP!r}, "
                f"got {self.on_invalid_record!r}"
            )
        if not self.modify_time_format:
            raise ValueError("modify_time_format cannot be empty")


@dataclass
class ApplierConfig:
    suppress_duplicate_inserts: bool = True
