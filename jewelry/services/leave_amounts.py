from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional

from jewelry.gateway import RecordGateway
from jewelry.services.records import iso_date, transaction_payload
from jewelry.utils import iso_today, to_number


def _leave_payload(leave_date: Any = None, **fields: Any) -> dict:
    payload = transaction_payload(**fields)
    day = iso_date(leave_date, "Leave date")
    if day is not None:
        payload["leave_date"] = day
    return payload


def create_leave_amount(gateway: RecordGateway, **fields: Any) -> dict:
    return gateway.insert("leave_amounts", _leave_payload(**fields))


def update_leave_amount(gateway: RecordGateway, record_id: str, **fields: Any) -> dict:
    return gateway.update("leave_amounts", record_id, _leave_payload(**fields))


def delete_leave_amount(gateway: RecordGateway, record_id: str) -> None:
    gateway.delete("leave_amounts", record_id)


def list_leave_amounts(gateway: RecordGateway, day: Optional[date | str] = None) -> list[dict]:
    """Records for one day, today by default."""
    day_str = iso_date(day, "Leave date") or iso_today()
    return gateway.query("leave_amounts", eq={"leave_date": day_str}, order_by="created_at", descending=True)


def leave_total(records: Iterable[Mapping[str, Any]]) -> float:
    return round(sum(to_number(r.get("amount")) for r in records), 2)
