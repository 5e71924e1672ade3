"""
Calendar and product-type grouping of sales / purchases / leave-amount snapshots.

All functions are pure: they take an explicit list of rows, never mutate it, and
return a new dict. Amount fields are cast with `to_number` at the point of
summing. Rows whose date field does not parse are skipped.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from jewelry.utils import MONTH_ABBR, month_key, parse_day, safe_div, to_number

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


def _dated(records: Iterable[Record], date_field: str, year: Optional[int] = None):
    for r in records:
        d = parse_day(r.get(date_field))
        if d is None:
            logger.debug("Skipping record %s: unparseable %s=%r", r.get("id"), date_field, r.get(date_field))
            continue
        if year is not None and d.year != int(year):
            continue
        yield d, r


def _add_customer(names: set, r: Record) -> None:
    # Customers are distinct non-blank buyer names; anonymous rows are not counted.
    name = r.get("buyer_name")
    if isinstance(name, str) and name.strip():
        names.add(name)


def _money(r: Record) -> tuple[float, float, float]:
    # given/balance are only present on sales; other record types contribute 0.
    return to_number(r.get("amount")), to_number(r.get("given_amount")), to_number(r.get("balance_amount"))


def by_month(records: Iterable[Record], date_field: str, *, year: Optional[int] = None) -> dict[str, dict]:
    """
    Buckets keyed by short month name ("Jan".."Dec"): revenue, given, balance, count, customers.

    `customers` counts distinct non-blank buyer names, the same rule as dashboard_stats.
    """
    stats: dict[str, dict] = {}
    buyers: dict[str, set] = {}
    for d, r in _dated(records, date_field, year):
        key = month_key(d)
        b = stats.setdefault(key, {"revenue": 0.0, "given": 0.0, "balance": 0.0, "count": 0, "customers": 0})
        amount, given, balance = _money(r)
        b["revenue"] += amount
        b["given"] += given
        b["balance"] += balance
        b["count"] += 1
        _add_customer(buyers.setdefault(key, set()), r)

    for key, names in buyers.items():
        stats[key]["customers"] = len(names)
    return stats


def by_day(records: Iterable[Record], date_field: str) -> dict[int, dict]:
    """
    Buckets keyed by day of month (1-31).

    Not scoped to month or year: the 15th of January and the 15th of February land
    in the same bucket. Callers wanting one month pre-filter the snapshot.
    """
    stats: dict[int, dict] = {}
    for d, r in _dated(records, date_field):
        b = stats.setdefault(d.day, {"revenue": 0.0, "given": 0.0, "balance": 0.0, "count": 0})
        amount, given, balance = _money(r)
        b["revenue"] += amount
        b["given"] += given
        b["balance"] += balance
        b["count"] += 1
    return stats


def by_year(records: Iterable[Record], date_field: str) -> dict[int, dict]:
    stats: dict[int, dict] = {}
    buyers: dict[int, set] = {}
    for d, r in _dated(records, date_field):
        b = stats.setdefault(d.year, {"revenue": 0.0, "count": 0, "customers": 0})
        b["revenue"] += to_number(r.get("amount"))
        b["count"] += 1
        _add_customer(buyers.setdefault(d.year, set()), r)

    for key, names in buyers.items():
        stats[key]["customers"] = len(names)
    return stats


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def by_product_type(
    records: Iterable[Record],
    *,
    date_field: Optional[str] = None,
    year: Optional[int] = None,
) -> dict[str, int]:
    """
    Share of record count per product type, as whole percents.

    Each bucket is rounded on its own, so the values can total 99 or 101.
    `year` (with `date_field`) restricts the count to one calendar year.
    """
    if year is not None:
        if not date_field:
            raise ValueError("date_field is required when filtering by year.")
        rows = [r for _, r in _dated(records, date_field, year)]
    else:
        rows = list(records)

    counts: dict[str, int] = {}
    for r in rows:
        ptype = str(r.get("product_type") or "")
        counts[ptype] = counts.get(ptype, 0) + 1

    total = len(rows)
    return {ptype: _round_half_up(n / total * 100) for ptype, n in counts.items()}


def filter_date_range(
    records: Iterable[Record],
    date_field: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Record]:
    """Inclusive range filter over an already-fetched snapshot."""
    out = []
    for d, r in _dated(records, date_field):
        if start is not None and d < start:
            continue
        if end is not None and d > end:
            continue
        out.append(r)
    return out


def dashboard_stats(sales: Iterable[Record], today: date, *, date_field: str = "sale_date") -> dict:
    sales = list(sales)
    customers: set = set()
    for s in sales:
        _add_customer(customers, s)
    revenue = sum(to_number(s.get("amount")) for s in sales)
    today_revenue = sum(to_number(r.get("amount")) for d, r in _dated(sales, date_field) if d == today)
    return {
        "today_revenue": round(today_revenue, 2),
        "total_sales": len(sales),
        "total_customers": len(customers),
        "avg_order_value": round(safe_div(revenue, len(sales)), 2),
        "outstanding_balance": round(sum(to_number(s.get("balance_amount")) for s in sales), 2),
    }


def buckets_frame(buckets: Mapping[Any, Any], key_name: str) -> pd.DataFrame:
    """Chart-ready frame: month keys in calendar order, numeric keys ascending."""
    if not buckets:
        return pd.DataFrame(columns=[key_name])

    rows = []
    for key, value in buckets.items():
        row = {key_name: key}
        if isinstance(value, Mapping):
            row.update(value)
        else:
            row["value"] = value
        rows.append(row)
    df = pd.DataFrame(rows)

    if all(k in MONTH_ABBR for k in buckets):
        df["_order"] = df[key_name].map(MONTH_ABBR.index)
        df = df.sort_values("_order").drop(columns="_order")
    elif all(isinstance(k, int) for k in buckets):
        df = df.sort_values(key_name)
    return df.reset_index(drop=True)
