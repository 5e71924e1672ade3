from __future__ import annotations

from typing import Any, Optional

from jewelry.gateway import RecordGateway
from jewelry.schema import MAINTENANCE_STATUSES
from jewelry.services.records import iso_date
from jewelry.utils import clean_text


def _normalize_status(status: Optional[str]) -> str:
    if not status:
        return "scheduled"
    s = str(status).strip().lower().replace(" ", "_").replace("-", "_")
    if s in MAINTENANCE_STATUSES:
        return s
    raise ValueError(f"Invalid status. Use one of: {', '.join(MAINTENANCE_STATUSES)}.")


def _maintenance_payload(*, start_date: Any, end_date: Any, description: Any, status: Optional[str] = None) -> dict:
    start = iso_date(start_date, "Start date")
    end = iso_date(end_date, "End date")
    if start is None or end is None:
        raise ValueError("Start and end dates are required.")
    if end < start:
        raise ValueError("End date must be on or after the start date.")

    desc = clean_text(description)
    if not desc:
        raise ValueError("Description is required.")

    return {
        "start_date": start,
        "end_date": end,
        "description": desc,
        "status": _normalize_status(status),
    }


def create_maintenance(gateway: RecordGateway, **fields: Any) -> dict:
    return gateway.insert("stock_maintenance", _maintenance_payload(**fields))


def update_maintenance(gateway: RecordGateway, record_id: str, **fields: Any) -> dict:
    return gateway.update("stock_maintenance", record_id, _maintenance_payload(**fields))


def set_status(gateway: RecordGateway, record_id: str, status: str) -> dict:
    return gateway.update("stock_maintenance", record_id, {"status": _normalize_status(status)})


def delete_maintenance(gateway: RecordGateway, record_id: str) -> None:
    gateway.delete("stock_maintenance", record_id)


def list_maintenance(gateway: RecordGateway) -> list[dict]:
    return gateway.query("stock_maintenance", order_by="created_at", descending=True)
