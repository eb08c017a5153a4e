from __future__ import annotations

import re
import time
from datetime import datetime
from typing import Optional

from .errors import TimeParseError

MODIFY_TIME_FORMAT = "%y-%m-%d %H:%M:%S.%f"

_MILLIS_DIRECTIVE = ".%f"
_MILLIS_RE = re.compile(r"^[0-9]{3}\Z")


def parse_modify_time(value: Optional[str], fmt: str = MODIFY_TIME_FORMAT) -> int:
    """
    Parse an upstream modify time (e.g. "24-03-05 12:30:45.123") into epoch
    milliseconds, interpreting it in local time.

    Raises:
        TimeParseError: if value is missing or does not match fmt
    """
    if not isinstance(value, str):
        raise TimeParseError(f"modify_time must be a string, got {value!r}")
    millis = 0
    if fmt.endswith(_MILLIS_DIRECTIVE):
        # %f reads 1-6 digits as microseconds; the field is exactly SSS
        fmt = fmt[: -len(_MILLIS_DIRECTIVE)]
        value, sep, suffix = value.rpartition(".")
        if not sep or not _MILLIS_RE.match(suffix):
            raise TimeParseError(f"modify_time {value + sep + suffix!r} must end in three millisecond digits")
        millis = int(suffix)
    try:
        parsed = datetime.strptime(value, fmt)
    except ValueError as exc:
        raise TimeParseError(f"Can not parse modify_time {value!r} with format {fmt!r}") from exc
    return int(parsed.timestamp()) * 1000 + parsed.microsecond // 1000 + millis


def now_millis() -> int:
    return time.time_ns() // 1_000_000
