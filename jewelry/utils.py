from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Optional

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def iso_today() -> str:
    return date.today().isoformat()


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def safe_div(n: float, d: float) -> float:
    return float(n) / float(d) if d else 0.0


def to_number(value: Any) -> float:
    """
    Lenient numeric cast used wherever already-fetched rows are summed.

    Rows can carry amounts as numbers, numeric strings ("1,250.50"), None or junk.
    Anything that is not a finite number becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        f = float(value)
    else:
        s = str(value).strip().replace(",", "")
        if not s:
            return 0.0
        try:
            f = float(s)
        except ValueError:
            return 0.0
    return f if math.isfinite(f) else 0.0


def to_int(value: Any) -> int:
    return int(to_number(value))


def parse_day(value: Any) -> Optional[date]:
    """Calendar date of an ISO date/datetime string (or date object); None if unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if len(s) < 10:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def month_key(d: date) -> str:
    # Fixed English abbreviations; process locale must not change bucket keys.
    return MONTH_ABBR[d.month - 1]


def parse_amount(value: Any, label: str, *, default: Optional[float] = None) -> float:
    """Strict form-side cast: blank -> default (if given), otherwise must be a number."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise ValueError(f"{label} is required.")
        return float(default)
    try:
        f = float(str(value).strip().replace(",", "")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a number.")
    if not math.isfinite(f):
        raise ValueError(f"{label} must be a number.")
    return f


def clean_text(value: Any) -> str:
    return "" if value is None else str(value).strip()
