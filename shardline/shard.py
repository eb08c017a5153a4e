from __future__ import annotations

from .errors import InvalidShardKey

SHARD_KEY_DIGITS = 4

_DIGITS = "0123456789"


def resolve_shard(raw_key_value: str, shard_count: int) -> int:
    """
    Reduce a shard key value to a shard index in [0, shard_count).

    The integer formed by the trailing (up to) four characters of the value is
    taken modulo shard_count, e.g. "12345" -> 2345 % shard_count. Values shorter
    than four characters use all of their characters.

    Raises:
        InvalidShardKey: if any considered character is not an ASCII digit
        ValueError: if shard_count is not positive
    """
    if shard_count <= 0:
        raise ValueError(f"shard_count must be > 0, got {shard_count!r}")

    total = 0
    for i in range(1, min(SHARD_KEY_DIGITS, len(raw_key_value)) + 1):
        char = raw_key_value[-i]
        # ASCII digits only; str.isdigit() admits unicode digits
        if char not in _DIGITS:
            raise InvalidShardKey(raw_key_value)
        total += _DIGITS.index(char) * 10 ** (i - 1)

    return total % shard_count
