from __future__ import annotations

import io
import json
import logging
from datetime import date
from typing import Any, Optional

import pandas as pd

from jewelry.gateway import RecordGateway
from jewelry.services.records import date_filters, iso_date
from jewelry.services.sales import compute_balance
from jewelry.utils import clean_text, iso_today, to_int, to_number

logger = logging.getLogger(__name__)

IMPORT_COLUMNS = [
    "product_name",
    "product_type",
    "product_weight_grams",
    "amount",
    "given_amount",
    "buyer_name",
    "quantity",
    "notes",
]

TEMPLATE_ROWS = [
    ["Diamond Ring", "Ring", "5.5", "25000", "15000", "John Doe", "1", "Engagement ring"],
    ["Gold Necklace", "Necklace", "12.3", "35000", "20000", "Jane Smith", "1", "Wedding jewelry"],
]

# kind -> (collection, date column or None)
EXPORT_KINDS = {
    "sales": ("sales", "sale_date"),
    "purchases": ("purchases", "purchase_date"),
    "leave_amounts": ("leave_amounts", "leave_date"),
    "stock": ("stock", None),
    "stock_maintenance": ("stock_maintenance", "start_date"),
}


def _header_key(h: Any) -> str:
    return "_".join(str(h).strip().lower().split())


def _normalize_row(raw: dict) -> dict:
    row = {_header_key(k): v for k, v in raw.items()}
    qty = to_int(row.get("quantity"))
    return {
        "product_name": clean_text(row.get("product_name")),
        "product_type": clean_text(row.get("product_type")),
        "product_weight_grams": to_number(row.get("product_weight_grams")),
        "quantity": qty if qty > 0 else 1,
        "buyer_name": clean_text(row.get("buyer_name")),
        "amount": to_number(row.get("amount")),
        "given_amount": to_number(row.get("given_amount")),
        "notes": clean_text(row.get("notes")),
    }


def parse_import(data: bytes, filename: str) -> list[dict]:
    """
    Rows of an uploaded CSV or JSON file, normalised to sale fields.

    Headers are matched case-insensitively with spaces as underscores.
    Blank or malformed numbers fall back to 0 (quantity to 1).
    """
    name = filename.lower()
    if name.endswith(".csv"):
        try:
            df = pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False, skip_blank_lines=True)
        except (pd.errors.EmptyDataError, pd.errors.ParserError):
            raise ValueError("Failed to parse file. Please check the format.")
        raw_rows = df.to_dict(orient="records")
    elif name.endswith(".json"):
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            raise ValueError("Failed to parse file. Please check the format.")
        if not isinstance(payload, list) or not all(isinstance(r, dict) for r in payload):
            raise ValueError("JSON import must be an array of objects.")
        raw_rows = payload
    else:
        raise ValueError("Unsupported file type. Upload a .csv or .json file.")

    rows = [_normalize_row(r) for r in raw_rows]
    logger.info("Parsed %d import rows from %s", len(rows), filename)
    return rows


def import_sales(gateway: RecordGateway, rows: list[dict], *, sale_date: Optional[date | str] = None) -> int:
    """Insert parsed rows as sales on one date (today by default); all or nothing."""
    if not rows:
        raise ValueError("No data to import.")

    day = iso_date(sale_date, "Sale date") or iso_today()
    records = []
    for r in rows:
        rec = {k: r.get(k) for k in IMPORT_COLUMNS}
        rec["notes"] = rec["notes"] or None
        rec["sale_date"] = day
        rec["balance_amount"] = compute_balance(rec["amount"], rec["given_amount"])
        records.append(rec)

    stored = gateway.insert_many("sales", records)
    return len(stored)


def import_template(fmt: str = "csv") -> bytes:
    if fmt == "csv":
        df = pd.DataFrame(TEMPLATE_ROWS, columns=IMPORT_COLUMNS)
        return df.to_csv(index=False).encode("utf-8")
    if fmt == "json":
        rows = [dict(zip(IMPORT_COLUMNS, r)) for r in TEMPLATE_ROWS]
        return json.dumps(rows, indent=2).encode("utf-8")
    raise ValueError("Template format must be 'csv' or 'json'.")


def export_frame(
    gateway: RecordGateway,
    kind: str,
    *,
    start: Optional[date | str] = None,
    end: Optional[date | str] = None,
) -> pd.DataFrame:
    if kind not in EXPORT_KINDS:
        raise ValueError(f"Unknown export type: {kind!r}")
    collection, date_col = EXPORT_KINDS[kind]
    filters = date_filters(date_col, start=start, end=end) if date_col else {}
    rows = gateway.query(collection, **filters, order_by=date_col or "created_at", descending=True)
    return pd.DataFrame(rows)


def export_bytes(df: pd.DataFrame, fmt: str) -> bytes:
    if fmt == "csv":
        return df.to_csv(index=False).encode("utf-8")
    if fmt == "json":
        return df.to_json(orient="records", indent=2).encode("utf-8")
    if fmt == "xlsx":
        buf = io.BytesIO()
        df.to_excel(buf, index=False, engine="openpyxl")
        return buf.getvalue()
    raise ValueError("Export format must be 'csv', 'json' or 'xlsx'.")


def export_filename(kind: str, fmt: str, day: Optional[date] = None) -> str:
    return f"jewelry-{kind}-{(day or date.today()).isoformat()}.{fmt}"
