from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from jewelry.gateway import RecordGateway
from jewelry.utils import clean_text, iso_today, parse_amount, to_int, to_number


@dataclass(frozen=True)
class StockWithRemaining:
    id: Optional[str]
    product_name: str
    product_type: str
    product_weight_grams: float
    quantity_available: int
    today_sold_quantity: int
    today_sold_weight: float
    remaining_quantity: int
    remaining_weight: float

    def as_dict(self) -> dict:
        return asdict(self)


def _match_key(name: Any, product_type: Any) -> tuple[str, str]:
    # Case-insensitive exact match; no trimming, no id join.
    return (str(name or "").lower(), str(product_type or "").lower())


def reconcile(
    stock_items: Iterable[Mapping[str, Any]],
    todays_sales: Iterable[Mapping[str, Any]],
) -> list[StockWithRemaining]:
    """
    Remaining inventory for one day from two snapshots.

    `todays_sales` must already be restricted to the target day. Sales are matched
    to stock by (product_name, product_type), ignoring case. Sold weight uses the
    weight recorded on each sale, not the stock item's nominal weight. Remaining
    values are clamped at zero, so overselling shows as 0 rather than an error.
    Sales matching no stock item are ignored. Output keeps the stock ordering.
    """
    sold: dict[tuple[str, str], list[float]] = {}
    for s in todays_sales:
        qty = to_int(s.get("quantity"))
        weight = to_number(s.get("product_weight_grams")) * qty
        bucket = sold.setdefault(_match_key(s.get("product_name"), s.get("product_type")), [0, 0.0])
        bucket[0] += qty
        bucket[1] += weight

    out: list[StockWithRemaining] = []
    for item in stock_items:
        unit_weight = to_number(item.get("product_weight_grams"))
        available = to_int(item.get("quantity_available"))
        sold_qty, sold_weight = sold.get(_match_key(item.get("product_name"), item.get("product_type")), (0, 0.0))

        out.append(
            StockWithRemaining(
                id=item.get("id"),
                product_name=str(item.get("product_name") or ""),
                product_type=str(item.get("product_type") or ""),
                product_weight_grams=unit_weight,
                quantity_available=available,
                today_sold_quantity=int(sold_qty),
                today_sold_weight=round(float(sold_weight), 3),
                remaining_quantity=max(0, available - int(sold_qty)),
                remaining_weight=round(max(0.0, available * unit_weight - float(sold_weight)), 3),
            )
        )
    return out


def today_stock(gateway: RecordGateway, day: Optional[date | str] = None) -> list[StockWithRemaining]:
    """Fetch stock plus the day's sales (default today) and reconcile them."""
    day_str = day.isoformat() if isinstance(day, date) else (day or iso_today())
    stock = list_stock(gateway)
    sales = gateway.query("sales", eq={"sale_date": day_str})
    return reconcile(stock, sales)


def stock_totals(rows: Iterable[StockWithRemaining]) -> dict:
    rows = list(rows)
    return {
        "items": len(rows),
        "available": sum(r.quantity_available for r in rows),
        "sold_today": sum(r.today_sold_quantity for r in rows),
        "remaining": sum(r.remaining_quantity for r in rows),
        "remaining_weight": round(sum(r.remaining_weight for r in rows), 3),
    }


# -------------------------
# Stock item CRUD
# -------------------------

def list_stock(gateway: RecordGateway) -> list[dict]:
    return gateway.query("stock", order_by="created_at", descending=True)


def _stock_payload(
    product_name: Any,
    product_type: Any,
    product_weight_grams: Any,
    quantity_available: Any,
) -> dict:
    name = clean_text(product_name)
    ptype = clean_text(product_type)
    if not name:
        raise ValueError("Product name is required.")
    if not ptype:
        raise ValueError("Product type is required.")

    weight = parse_amount(product_weight_grams, "Weight (grams)")
    qty = parse_amount(quantity_available, "Quantity available")
    if weight < 0:
        raise ValueError("Weight (grams) must be >= 0.")
    if qty < 0 or int(qty) != qty:
        raise ValueError("Quantity available must be a whole number >= 0.")

    return {
        "product_name": name,
        "product_type": ptype,
        "product_weight_grams": float(weight),
        "quantity_available": int(qty),
    }


def create_stock_item(
    gateway: RecordGateway,
    *,
    product_name: str,
    product_type: str,
    product_weight_grams: float,
    quantity_available: int,
) -> dict:
    payload = _stock_payload(product_name, product_type, product_weight_grams, quantity_available)
    return gateway.insert("stock", payload)


def update_stock_item(
    gateway: RecordGateway,
    stock_id: str,
    *,
    product_name: str,
    product_type: str,
    product_weight_grams: float,
    quantity_available: int,
) -> dict:
    payload = _stock_payload(product_name, product_type, product_weight_grams, quantity_available)
    return gateway.update("stock", stock_id, payload)


def delete_stock_item(gateway: RecordGateway, stock_id: str) -> None:
    gateway.delete("stock", stock_id)
