from __future__ import annotations

from datetime import date
from typing import Any, Optional

from jewelry.utils import clean_text, parse_amount, parse_day


def iso_date(value: Any, label: str) -> Optional[str]:
    """Form date -> ISO string; None when left blank (the gateway then stamps today)."""
    if value is None or value == "":
        return None
    d = parse_day(value)
    if d is None:
        raise ValueError(f"{label} must be a date (YYYY-MM-DD).")
    return d.isoformat()


def transaction_payload(
    *,
    product_name: Any,
    product_type: Any,
    buyer_name: Any,
    amount: Any,
    product_weight_grams: Any = None,
    quantity: Any = None,
    notes: Any = None,
    buyer_label: str = "Buyer name",
) -> dict:
    """
    Validated common fields of sale / purchase / leave-amount records.

    Name, type, buyer and amount are required. Weight defaults to 0 and
    quantity to 1 when left blank.
    """
    name = clean_text(product_name)
    ptype = clean_text(product_type)
    buyer = clean_text(buyer_name)
    if not name:
        raise ValueError("Product name is required.")
    if not ptype:
        raise ValueError("Product type is required.")
    if not buyer:
        raise ValueError(f"{buyer_label} is required.")

    amt = parse_amount(amount, "Amount")
    if amt < 0:
        raise ValueError("Amount must be >= 0.")

    weight = parse_amount(product_weight_grams, "Weight (grams)", default=0)
    if weight < 0:
        raise ValueError("Weight (grams) must be >= 0.")

    qty = parse_amount(quantity, "Quantity", default=1)
    if qty <= 0 or int(qty) != qty:
        raise ValueError("Quantity must be a whole number > 0.")

    return {
        "product_name": name,
        "product_type": ptype,
        "product_weight_grams": float(weight),
        "quantity": int(qty),
        "buyer_name": buyer,
        "amount": round(float(amt), 2),
        "notes": clean_text(notes) or None,
    }


def date_filters(
    date_field: str,
    *,
    day: Optional[date | str] = None,
    start: Optional[date | str] = None,
    end: Optional[date | str] = None,
) -> dict:
    """Gateway filter kwargs: equality on one day, or an inclusive range."""
    if day is not None:
        return {"eq": {date_field: iso_date(day, "Date")}}
    out: dict = {}
    if start is not None:
        out["gte"] = {date_field: iso_date(start, "Start date")}
    if end is not None:
        out["lte"] = {date_field: iso_date(end, "End date")}
    return out
