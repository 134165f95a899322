"""Server-side field checks shared by every mode."""
from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from reflex_ledger.core.errors import InvalidInput
from reflex_ledger.core.settings import settings

_MOBILE_UA_MARKERS = ("android", "iphone", "ipad", "ipod", "mobile", "phone", "tablet", "iemobile")


def require_name(name: object, max_length: int | None = None) -> str:
    """Return ``name`` if it is a 1..max_length character string."""
    limit = settings.name_max_length if max_length is None else max_length
    if not isinstance(name, str) or not 1 <= len(name) <= limit:
        raise InvalidInput("invalid name")
    return name


def require_client_id(client_id: object) -> str:
    if not isinstance(client_id, str) or not client_id:
        raise InvalidInput("invalid client id")
    return client_id


def require_int_in_range(value: object, low: int, high: int, field: str) -> int:
    """Return ``value`` if it is an integer within ``[low, high]``."""
    # bool is an int subclass but never a valid measurement.
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise InvalidInput(f"invalid {field}")
    return value


def require_samples(
    samples: Sequence[float], count: int, low: float, high: float, field: str
) -> list[float]:
    """Return ``samples`` as floats if there are exactly ``count`` finite values in range."""
    if len(samples) != count:
        raise InvalidInput(f"invalid {field}")
    cleaned: list[float] = []
    for sample in samples:
        if isinstance(sample, bool) or not isinstance(sample, (int, float)):
            raise InvalidInput(f"invalid {field}")
        value = float(sample)
        if not math.isfinite(value):
            raise InvalidInput(f"invalid {field}")
        if not low <= value <= high:
            raise InvalidInput(f"{field} out of range")
        cleaned.append(value)
    return cleaned


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_touch_client(headers: Mapping[str, str]) -> bool:
    """Return True if request headers identify a phone or tablet.

    ``Sec-CH-UA-Mobile: ?1`` is authoritative when present; otherwise the
    user agent string is checked for common mobile markers.
    """
    if headers.get("sec-ch-ua-mobile", "").strip() == "?1":
        return True
    user_agent = headers.get("user-agent", "").lower()
    return any(marker in user_agent for marker in _MOBILE_UA_MARKERS)
