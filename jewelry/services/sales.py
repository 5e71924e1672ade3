from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from jewelry.errors import RecordNotFoundError
from jewelry.gateway import RecordGateway
from jewelry.services.records import date_filters, iso_date, transaction_payload
from jewelry.utils import parse_amount, to_number

logger = logging.getLogger(__name__)


def compute_balance(amount: Any, given_amount: Any) -> float:
    return round(to_number(amount) - to_number(given_amount), 2)


def _given(given_amount: Any) -> float:
    given = parse_amount(given_amount, "Given amount", default=0)
    if given < 0:
        raise ValueError("Given amount must be >= 0.")
    return round(float(given), 2)


def sale_payload(
    *,
    product_name: Any,
    product_type: Any,
    buyer_name: Any,
    amount: Any,
    given_amount: Any = None,
    product_weight_grams: Any = None,
    quantity: Any = None,
    sale_date: Any = None,
    notes: Any = None,
) -> dict:
    payload = transaction_payload(
        product_name=product_name,
        product_type=product_type,
        buyer_name=buyer_name,
        amount=amount,
        product_weight_grams=product_weight_grams,
        quantity=quantity,
        notes=notes,
    )
    payload["given_amount"] = _given(given_amount)
    payload["balance_amount"] = compute_balance(payload["amount"], payload["given_amount"])
    day = iso_date(sale_date, "Sale date")
    if day is not None:
        payload["sale_date"] = day
    return payload


def create_sale(gateway: RecordGateway, **fields: Any) -> dict:
    """Validate and store a sale; balance_amount is written together with amount and given_amount."""
    payload = sale_payload(**fields)
    stored = gateway.insert("sales", payload)
    if stored["balance_amount"] < 0:
        logger.info("Sale %s is overpaid by %.2f", stored["id"], -stored["balance_amount"])
    return stored


def update_sale(gateway: RecordGateway, sale_id: str, **fields: Any) -> dict:
    """
    Partial edit. Missing fields keep their stored values; if amount or
    given_amount is part of the edit the balance is recomputed from the merged row.
    """
    current = gateway.get("sales", sale_id)
    if current is None:
        raise RecordNotFoundError("sales", sale_id)

    merged = {k: current.get(k) for k in (
        "product_name", "product_type", "buyer_name", "amount", "given_amount",
        "product_weight_grams", "quantity", "sale_date", "notes",
    )}
    merged.update(fields)
    payload = sale_payload(**merged)

    changes = {k: v for k, v in payload.items() if current.get(k) != v}
    if not changes:
        return current
    changes["balance_amount"] = payload["balance_amount"]
    return gateway.update("sales", sale_id, changes)


def record_payment(gateway: RecordGateway, sale_id: str, payment: Any) -> dict:
    """Add a later payment to given_amount; balance follows."""
    pay = parse_amount(payment, "Payment")
    if pay <= 0:
        raise ValueError("Payment must be > 0.")
    current = gateway.get("sales", sale_id)
    if current is None:
        raise RecordNotFoundError("sales", sale_id)
    return update_sale(gateway, sale_id, given_amount=to_number(current.get("given_amount")) + pay)


def delete_sale(gateway: RecordGateway, sale_id: str) -> None:
    gateway.delete("sales", sale_id)


def list_sales(
    gateway: RecordGateway,
    *,
    day: Optional[date | str] = None,
    start: Optional[date | str] = None,
    end: Optional[date | str] = None,
) -> list[dict]:
    return gateway.query(
        "sales",
        **date_filters("sale_date", day=day, start=start, end=end),
        order_by="sale_date",
        descending=True,
    )


def outstanding(sales: list[dict]) -> list[dict]:
    """Sales with an unpaid balance, largest first."""
    rows = [s for s in sales if to_number(s.get("balance_amount")) > 0]
    return sorted(rows, key=lambda s: to_number(s.get("balance_amount")), reverse=True)
