import math
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)

# Latest accepted instant. One day short of datetime.max so local-time bucketing cannot overflow.
MAX_TIMESTAMP_MS = (datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1) - _EPOCH) // _ONE_MS


class _Invalid:
    """Marker for a timestamp that could not be normalized."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INVALID"

    def __bool__(self) -> bool:
        return False


INVALID = _Invalid()


def is_invalid(value) -> bool:
    return value is INVALID


def _in_range(millis: int):
    return millis if 0 <= millis <= MAX_TIMESTAMP_MS else INVALID


def normalize_timestamp(value):
    """
    Convert an epoch-millis number or an ISO-8601 string into epoch milliseconds.
    Anything else (None, bool, NaN, negative numbers, instants past MAX_TIMESTAMP_MS,
    unparseable text) yields INVALID.
    """
    if value is None or isinstance(value, bool):
        return INVALID

    if isinstance(value, int):
        return _in_range(value)

    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return INVALID
        return _in_range(int(value))

    if isinstance(value, str):
        return _parse_iso(value.strip())

    return INVALID


def _parse_iso(text: str):
    if not text:
        return INVALID
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return INVALID
    # Naive strings are read as UTC so results do not depend on the host timezone.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return _in_range((dt - _EPOCH) // _ONE_MS)
