class ShardlineError(Exception):
    """Base exception for shardline errors."""

    retryable = False


class TranslationError(ShardlineError):
    """A change event could not be turned into a Record. Nothing was applied."""


class InvalidChangeEvent(TranslationError):
    """Payload is missing required keys or has the wrong shape."""


class UnknownOperationType(TranslationError):
    """Operation type is not one of insert, update, delete."""

    def __init__(self, op_type: object) -> None:
        super().__init__(f"Unknown operation type: {op_type!r}")
        self.op_type = op_type


class InvalidShardKey(TranslationError):
    """Shard key value cannot be reduced to a shard index."""

    def __init__(self, value: object, message: str = "") -> None:
        super().__init__(message or f"Can not parse the last four digits of {value!r}")
        self.value = value


class MissingTableMeta(TranslationError):
    """No table metadata registered for (schema, table)."""

    def __init__(self, schema: str, table: str) -> None:
        super().__init__(f"No table metadata for {schema}.{table}")
        self.schema = schema
        self.table = table


class UnknownColumn(TranslationError):
    """Payload column has no ColumnMeta in the table metadata."""

    def __init__(self, schema: str, table: str, column: str) -> None:
        super().__init__(f"Column {column!r} is not defined for {schema}.{table}")
        self.schema = schema
        self.table = table
        self.column = column


class TimeParseError(ShardlineError):
    """modify_time is missing or does not match the configured format."""


class ApplyError(ShardlineError):
    """Any failure while writing records to the target store."""

    retryable = True
