from __future__ import annotations

from datetime import date
from typing import Any, Optional

from jewelry.gateway import RecordGateway
from jewelry.services.records import date_filters, iso_date, transaction_payload


def _purchase_payload(purchase_date: Any = None, **fields: Any) -> dict:
    payload = transaction_payload(buyer_label="Supplier name", **fields)
    day = iso_date(purchase_date, "Purchase date")
    if day is not None:
        payload["purchase_date"] = day
    return payload


# Purchases are recorded only; stock quantities are edited by hand on the Stock page.
def create_purchase(gateway: RecordGateway, **fields: Any) -> dict:
    return gateway.insert("purchases", _purchase_payload(**fields))


def update_purchase(gateway: RecordGateway, purchase_id: str, **fields: Any) -> dict:
    return gateway.update("purchases", purchase_id, _purchase_payload(**fields))


def delete_purchase(gateway: RecordGateway, purchase_id: str) -> None:
    gateway.delete("purchases", purchase_id)


def list_purchases(
    gateway: RecordGateway,
    *,
    day: Optional[date | str] = None,
    start: Optional[date | str] = None,
    end: Optional[date | str] = None,
) -> list[dict]:
    return gateway.query(
        "purchases",
        **date_filters("purchase_date", day=day, start=start, end=end),
        order_by="purchase_date",
        descending=True,
    )
