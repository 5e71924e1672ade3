from datetime import date

import pytest

from jewelry.services.ledger import (
    buckets_frame,
    by_day,
    by_month,
    by_product_type,
    by_year,
    dashboard_stats,
    filter_date_range,
)


def rec(day, amount, buyer="A", ptype="Ring", **extra):
    return {"sale_date": day, "amount": amount, "buyer_name": buyer, "product_type": ptype, **extra}


def test_by_month_empty():
    assert by_month([], "sale_date") == {}


def test_by_month_groups_and_counts_customers():
    records = [
        rec("2024-01-03", 1000, "Priya", given_amount=400, balance_amount=600),
        rec("2024-01-20", "500", "Priya", given_amount="500", balance_amount=0),
        rec("2024-02-01", 250.5, "Rajesh"),
        rec("2024-01-21", 100, "Anita"),
    ]
    out = by_month(records, "sale_date")
    assert set(out) == {"Jan", "Feb"}
    assert out["Jan"] == {"revenue": 1600.0, "given": 900.0, "balance": 600.0, "count": 3, "customers": 2}
    assert out["Feb"]["revenue"] == pytest.approx(250.5)
    assert out["Feb"]["given"] == 0
    assert out["Feb"]["customers"] == 1


def test_by_month_year_filter():
    records = [rec("2023-05-01", 10), rec("2024-05-01", 20)]
    assert by_month(records, "sale_date", year=2024)["May"]["revenue"] == 20


def test_by_day_sums_same_day_of_month_across_months():
    records = [rec("2024-01-15", 1000), rec("2024-02-15", 500), rec("2024-02-16", 70)]
    out = by_day(records, "sale_date")
    assert out[15]["revenue"] == 1500
    assert out[15]["count"] == 2
    assert out[16]["revenue"] == 70


def test_by_year():
    records = [rec("2023-12-31", 100, "A"), rec("2024-01-01", 200, "A"), rec("2024-06-01", "300", "B")]
    out = by_year(records, "sale_date")
    assert out[2023] == {"revenue": 100.0, "count": 1, "customers": 1}
    assert out[2024] == {"revenue": 500.0, "count": 2, "customers": 2}


def test_product_type_percentages_two_one_one():
    records = [rec("2024-01-01", 1, ptype="Ring"), rec("2024-01-01", 1, ptype="Ring"),
               rec("2024-01-01", 1, ptype="Chain"), rec("2024-01-01", 1, ptype="Bangle")]
    assert by_product_type(records) == {"Ring": 50, "Chain": 25, "Bangle": 25}


def test_product_type_percentages_round_each_bucket():
    records = [rec("2024-01-01", 1, ptype=t) for t in ("Ring", "Chain", "Bangle")]
    out = by_product_type(records)
    assert out["Ring"] == 33
    assert out["Chain"] == 33
    assert out["Bangle"] == 33


def test_product_type_rounds_half_up():
    records = [rec("2024-01-01", 1, ptype="Ring")] + [rec("2024-01-01", 1, ptype="Chain")] * 7
    assert by_product_type(records)["Ring"] == 13


def test_product_type_empty_and_year_filter():
    assert by_product_type([]) == {}
    records = [rec("2023-01-01", 1, ptype="Ring"), rec("2024-01-01", 1, ptype="Chain")]
    assert by_product_type(records, date_field="sale_date", year=2024) == {"Chain": 100}
    with pytest.raises(ValueError):
        by_product_type(records, year=2024)


def test_malformed_amounts_and_dates():
    records = [rec("2024-03-01", "abc"), rec("2024-03-02", None), rec("not a date", 999), rec(None, 5)]
    out = by_month(records, "sale_date")
    assert out == {"Mar": {"revenue": 0.0, "given": 0.0, "balance": 0.0, "count": 2, "customers": 1}}


def test_aggregation_does_not_mutate_input():
    records = [rec("2024-01-15", "100")]
    snapshot = [dict(r) for r in records]
    by_month(records, "sale_date")
    by_day(records, "sale_date")
    by_year(records, "sale_date")
    by_product_type(records)
    assert records == snapshot


def test_timestamp_date_field():
    records = [{"created_at": "2024-07-04T10:11:12+00:00", "amount": 5}]
    assert by_day(records, "created_at")[4]["revenue"] == 5


def test_filter_date_range_is_inclusive():
    records = [rec("2024-01-01", 1), rec("2024-01-15", 2), rec("2024-01-31", 3), rec("2024-02-01", 4)]
    out = filter_date_range(records, "sale_date", date(2024, 1, 1), date(2024, 1, 31))
    assert [r["amount"] for r in out] == [1, 2, 3]


def test_dashboard_stats():
    today = date(2024, 5, 10)
    sales = [
        rec("2024-05-10", 1000, "A", balance_amount=600),
        rec("2024-05-10", 500, "B", balance_amount=0),
        rec("2024-05-09", 1500, "A", balance_amount=250),
    ]
    stats = dashboard_stats(sales, today)
    assert stats == {
        "today_revenue": 1500.0,
        "total_sales": 3,
        "total_customers": 2,
        "avg_order_value": 1000.0,
        "outstanding_balance": 850.0,
    }


def test_dashboard_stats_empty():
    stats = dashboard_stats([], date(2024, 1, 1))
    assert stats["total_sales"] == 0
    assert stats["avg_order_value"] == 0


def test_buckets_frame_sorts_months_in_calendar_order():
    df = buckets_frame({"Mar": {"revenue": 3}, "Jan": {"revenue": 1}, "Feb": {"revenue": 2}}, "month")
    assert df["month"].tolist() == ["Jan", "Feb", "Mar"]
    assert df["revenue"].tolist() == [1, 2, 3]


def test_buckets_frame_numeric_keys_and_plain_values():
    df = buckets_frame({15: {"revenue": 1}, 2: {"revenue": 2}}, "day")
    assert df["day"].tolist() == [2, 15]
    mix = buckets_frame({"Ring": 50, "Chain": 50}, "product_type")
    assert set(mix.columns) == {"product_type", "value"}
    assert buckets_frame({}, "month").empty


def test_anonymous_sales_are_not_customers_anywhere():
    sales = [
        rec("2024-05-10", 100, "A"),
        rec("2024-05-10", 100, None),
        rec("2024-05-11", 100, ""),
        rec("2024-05-11", 100, "   "),
    ]
    assert by_month(sales, "sale_date")["May"]["customers"] == 1
    assert by_month(sales, "sale_date")["May"]["count"] == 4
    assert by_year(sales, "sale_date")[2024]["customers"] == 1
    assert dashboard_stats(sales, date(2024, 5, 10))["total_customers"] == 1
