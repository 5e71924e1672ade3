import io
import json
from datetime import date

import pandas as pd
import pytest

from jewelry.services.transfer import (
    IMPORT_COLUMNS,
    export_bytes,
    export_filename,
    export_frame,
    import_sales,
    import_template,
    parse_import,
)

CSV = b"""Product Name,Product Type,Product Weight Grams,Amount,Given Amount,Buyer Name,Quantity,Notes
Diamond Ring,Ring,5.5,25000,15000,John Doe,1,Engagement ring
Gold Necklace,Necklace,,35000,,Jane Smith,,

"""


def test_parse_csv_normalises_headers_and_defaults():
    rows = parse_import(CSV, "sales.CSV")
    assert len(rows) == 2
    assert rows[0] == {
        "product_name": "Diamond Ring",
        "product_type": "Ring",
        "product_weight_grams": 5.5,
        "quantity": 1,
        "buyer_name": "John Doe",
        "amount": 25000.0,
        "given_amount": 15000.0,
        "notes": "Engagement ring",
    }
    assert rows[1]["product_weight_grams"] == 0
    assert rows[1]["given_amount"] == 0
    assert rows[1]["quantity"] == 1
    assert rows[1]["notes"] == ""


def test_parse_json():
    payload = [{"product_name": "Chain", "product_type": "Chain", "amount": "1200", "buyer_name": "A", "quantity": 2}]
    rows = parse_import(json.dumps(payload).encode(), "data.json")
    assert rows[0]["amount"] == 1200
    assert rows[0]["quantity"] == 2


@pytest.mark.parametrize(
    "data, filename",
    [(b"{}", "x.json"), (b"not json", "x.json"), (b"", "x.csv"), (b"a,b", "x.xlsx")],
)
def test_parse_rejects_bad_files(data, filename):
    with pytest.raises(ValueError):
        parse_import(data, filename)


def test_import_sales_stamps_date_and_balance(gateway):
    n = import_sales(gateway, parse_import(CSV, "sales.csv"), sale_date="2024-02-01")
    assert n == 2
    rows = {r["product_name"]: r for r in gateway.query("sales")}
    assert rows["Diamond Ring"]["balance_amount"] == 10000
    assert rows["Gold Necklace"]["balance_amount"] == 35000
    assert {r["sale_date"] for r in rows.values()} == {"2024-02-01"}
    assert rows["Gold Necklace"]["notes"] is None


def test_import_sales_empty(gateway):
    with pytest.raises(ValueError, match="No data"):
        import_sales(gateway, [])


def test_import_template_roundtrips_through_parser():
    for fmt, name in (("csv", "t.csv"), ("json", "t.json")):
        rows = parse_import(import_template(fmt), name)
        assert [r["product_name"] for r in rows] == ["Diamond Ring", "Gold Necklace"]
    header = import_template("csv").decode().splitlines()[0]
    assert header.split(",") == IMPORT_COLUMNS
    with pytest.raises(ValueError):
        import_template("xlsx")


def test_export_frame_with_range(gateway):
    base = {"product_name": "R", "product_type": "Ring", "buyer_name": "A", "amount": 1}
    for d in ("2024-01-01", "2024-01-15", "2024-02-01"):
        gateway.insert("purchases", {**base, "purchase_date": d})

    df = export_frame(gateway, "purchases", start="2024-01-01", end="2024-01-31")
    assert df["purchase_date"].tolist() == ["2024-01-15", "2024-01-01"]
    assert export_frame(gateway, "stock").empty
    with pytest.raises(ValueError):
        export_frame(gateway, "customers")


def test_export_bytes_and_filename():
    df = pd.DataFrame([{"a": 1, "b": "x"}])
    assert export_bytes(df, "csv").decode().splitlines() == ["a,b", "1,x"]
    assert json.loads(export_bytes(df, "json")) == [{"a": 1, "b": "x"}]
    with pytest.raises(ValueError):
        export_bytes(df, "xml")

    assert export_filename("sales", "csv", date(2024, 1, 2)) == "jewelry-sales-2024-01-02.csv"


def test_export_xlsx_reads_back(gateway):
    import_sales(gateway, parse_import(import_template("csv"), "t.csv"), sale_date="2024-04-02")
    df = export_frame(gateway, "sales")
    data = export_bytes(df, "xlsx")
    assert data[:2] == b"PK"

    back = pd.read_excel(io.BytesIO(data), engine="openpyxl")
    assert list(back.columns) == list(df.columns)
    assert sorted(back["buyer_name"]) == ["Jane Smith", "John Doe"]
    assert export_filename("sales", "xlsx", date(2024, 4, 2)) == "jewelry-sales-2024-04-02.xlsx"
