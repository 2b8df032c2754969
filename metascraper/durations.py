from __future__ import annotations

import re

from .errors import InvalidConfig

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse a duration string such as "10s", "1m30s" or "250ms" into seconds.

    A leading sign is allowed; every number must carry a unit, except for a
    bare "0". Raises InvalidConfig for anything else.
    """
    if not isinstance(value, str):
        raise InvalidConfig(f"duration must be a string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        raise InvalidConfig("empty duration string")

    sign = 1.0
    if text[0] in "+-":
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if text == "0":
        return 0.0

    pos = 0
    total = 0.0
    while pos < len(text):
        match = _PART.match(text, pos)
        if match is None:
            raise InvalidConfig(f"invalid duration {value!r}")
        number, unit = match.groups()
        total += float(number) * _UNITS[unit]
        pos = match.end()

    if pos == 0:
        raise InvalidConfig(f"invalid duration {value!r}")
    return sign * total
