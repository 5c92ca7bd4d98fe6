"""Field helpers shared by every source adapter."""
from __future__ import annotations

import math
from typing import Any

DESCRIPTION_LIMIT = 200


def _amount(value: Any) -> float | None:
    """Numeric salary bound, or None when missing or not a finite number."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    return amount if math.isfinite(amount) else None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _money(currency: str, value: float) -> str:
    return f"{currency}{_round_half_up(value):,}"


def format_salary(minimum: Any, maximum: Any, currency: str = "£") -> str:
    """Readable salary range; zero, None and non-numeric values count as absent."""
    minimum, maximum = _amount(minimum), _amount(maximum)
    if not minimum and not maximum:
        return ""
    if minimum and maximum and minimum != maximum:
        return f"{_money(currency, minimum)} - {_money(currency, maximum)}"
    return _money(currency, minimum or maximum)


def truncate_description(text: Any) -> str:
    return text_or_empty(text)[:DESCRIPTION_LIMIT]


def text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def nested_text(hit: dict, key: str, inner: str = "display_name") -> str:
    """``hit[key][inner]`` or "" when either level is missing."""
    outer = hit.get(key)
    if not isinstance(outer, dict):
        return ""
    return text_or_empty(outer.get(inner))
