import pytest

from jewelry.errors import RecordNotFoundError
from jewelry.services.sales import (
    compute_balance,
    create_sale,
    delete_sale,
    list_sales,
    outstanding,
    record_payment,
    update_sale,
)

BASE = dict(product_name="Diamond Ring", product_type="Ring", buyer_name="Priya Sharma", product_weight_grams=3.8)


def test_create_sale_stores_balance(gateway):
    stored = create_sale(gateway, amount=1000, given_amount=400, sale_date="2024-01-15", **BASE)
    assert stored["balance_amount"] == 600
    row = gateway.get("sales", stored["id"])
    assert row["balance_amount"] == 600
    assert row["sale_date"] == "2024-01-15"
    assert row["quantity"] == 1


def test_create_sale_defaults(gateway):
    stored = create_sale(gateway, amount="2500", **BASE)
    assert stored["given_amount"] == 0
    assert stored["balance_amount"] == 2500
    assert stored["sale_date"]
    assert stored["notes"] is None


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"buyer_name": ""}, "Buyer name is required"),
        ({"amount": None}, "Amount is required"),
        ({"amount": "lots"}, "Amount must be a number"),
        ({"given_amount": -5}, "Given amount must be >= 0"),
        ({"quantity": 0}, "whole number"),
        ({"sale_date": "15/01/2024"}, "Sale date must be a date"),
    ],
)
def test_create_sale_validation(gateway, fields, message):
    with pytest.raises(ValueError, match=message):
        create_sale(gateway, **{**BASE, "amount": 100, **fields})
    assert list_sales(gateway) == []


def test_update_sale_recomputes_balance(gateway):
    stored = create_sale(gateway, amount=1000, given_amount=400, **BASE)

    updated = update_sale(gateway, stored["id"], given_amount=900)
    assert updated["balance_amount"] == 100

    updated = update_sale(gateway, stored["id"], amount=1200)
    assert updated["given_amount"] == 900
    assert updated["balance_amount"] == 300


def test_update_sale_without_changes_returns_current(gateway):
    stored = create_sale(gateway, amount=1000, given_amount=400, **BASE)
    assert update_sale(gateway, stored["id"], amount=1000)["updated_at"] == stored["updated_at"]


def test_missing_sale_raises_record_not_found(gateway):
    with pytest.raises(RecordNotFoundError) as exc:
        update_sale(gateway, "nope", amount=1)
    assert exc.value.collection == "sales"
    assert exc.value.record_id == "nope"

    with pytest.raises(RecordNotFoundError):
        record_payment(gateway, "nope", 100)


def test_record_payment(gateway):
    stored = create_sale(gateway, amount=1000, given_amount=400, **BASE)
    updated = record_payment(gateway, stored["id"], 250)
    assert updated["given_amount"] == 650
    assert updated["balance_amount"] == 350
    with pytest.raises(ValueError):
        record_payment(gateway, stored["id"], 0)


def test_overpayment_gives_negative_balance(gateway):
    stored = create_sale(gateway, amount=100, given_amount=150, **BASE)
    assert stored["balance_amount"] == -50


def test_list_sales_filters(gateway):
    for d in ("2024-01-01", "2024-01-15", "2024-02-01"):
        create_sale(gateway, amount=1, sale_date=d, **BASE)

    assert [s["sale_date"] for s in list_sales(gateway)] == ["2024-02-01", "2024-01-15", "2024-01-01"]
    assert len(list_sales(gateway, day="2024-01-15")) == 1
    assert len(list_sales(gateway, start="2024-01-01", end="2024-01-31")) == 2
    assert len(list_sales(gateway, start="2024-01-10")) == 2


def test_delete_sale(gateway):
    stored = create_sale(gateway, amount=1, **BASE)
    delete_sale(gateway, stored["id"])
    assert list_sales(gateway) == []


def test_outstanding_and_compute_balance():
    assert compute_balance("1000", None) == 1000
    assert compute_balance(1000.1, 0.05) == 1000.05
    rows = [{"balance_amount": 10}, {"balance_amount": 0}, {"balance_amount": "50"}, {"balance_amount": -5}]
    assert [r["balance_amount"] for r in outstanding(rows)] == ["50", 10]
