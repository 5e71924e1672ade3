from __future__ import annotations

from datetime import date

import streamlit as st

from jewelry.config import get_settings
from jewelry.errors import GatewayError
from jewelry.gateway import get_gateway
from jewelry.services.ledger import buckets_frame, by_month, by_product_type, dashboard_stats
from jewelry.services.sales import list_sales

settings = get_settings()
gateway = get_gateway(settings.db_path)
cur = settings.currency

st.title(f"💍 {settings.shop_name}")
st.caption("Sales, stock, and balances at a glance.")

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")

try:
    sales = list_sales(gateway)
except GatewayError as e:
    st.error(str(e))
    st.stop()

if not sales:
    st.info(
        "No sales recorded yet. Add one under **Selling Products**, or load demo data in **🧪 Data Management**.",
        icon="ℹ️",
    )
    st.stop()

today = date.today()
stats = dashboard_stats(sales, today)

c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("Today's revenue", f"{cur}{stats['today_revenue']:,.2f}")
c2.metric("Total sales", f"{stats['total_sales']}")
c3.metric("Customers", f"{stats['total_customers']}")
c4.metric("Avg order value", f"{cur}{stats['avg_order_value']:,.2f}")
c5.metric("Outstanding balance", f"{cur}{stats['outstanding_balance']:,.2f}")

left, right = st.columns(2)
with left:
    st.subheader(f"Monthly revenue ({today.year})")
    monthly = buckets_frame(by_month(sales, "sale_date", year=today.year), "month")
    if monthly.empty:
        st.caption("No sales this year yet.")
    else:
        st.bar_chart(monthly.set_index("month")[["revenue", "balance"]])

with right:
    st.subheader("Product types (share of sales)")
    mix = buckets_frame(by_product_type(sales), "product_type").rename(columns={"value": "percent"})
    st.bar_chart(mix.set_index("product_type")[["percent"]])
