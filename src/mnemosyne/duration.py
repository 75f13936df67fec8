"""Duration parsing utilities."""

import re
from datetime import timedelta

from mnemosyne.types import Duration

_DURATION_PATTERN = re.compile(r"^(\d+)(ms|s|m|h|d)$")
_MILLISECOND = timedelta(milliseconds=1)
_UNITS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
}


def parse_duration(duration: Duration) -> int:
    """Parse duration string or timedelta to milliseconds. Passthrough if already int."""
    if isinstance(duration, bool):
        raise ValueError(f"Invalid duration: {duration!r}")
    if isinstance(duration, int):
        if duration < 0:
            raise ValueError(f"Invalid duration: {duration!r}")
        return duration
    if isinstance(duration, timedelta):
        if duration < timedelta(0):
            raise ValueError(f"Invalid duration: {duration!r}")
        # Round up so a sub-millisecond TTL does not store an expired entry
        return -(-duration // _MILLISECOND)

    match = _DURATION_PATTERN.match(duration)
    if not match:
        raise ValueError(f"Invalid duration: {duration!r}")

    value, unit = match.groups()
    return int(value) * _UNITS[unit]


def parse_ttl(ttl: Duration | None) -> int | None:
    """Parse an optional TTL; None means the entry never expires."""
    if ttl is None:
        return None
    return parse_duration(ttl)
