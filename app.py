from __future__ import annotations

import streamlit as st

from jewelry.config import get_settings
from jewelry.logging_config import setup_logging

st.set_page_config(page_title="Jewelry Admin", page_icon="💍", layout="wide")

setup_logging(get_settings().log_level)

pages = [
    st.Page("home.py", title="Dashboard", icon="🏠"),
    st.Page("pages/1_💎_Today_Stock.py", title="Today's Stock", icon="💎"),
    st.Page("pages/2_🛒_Sales.py", title="Selling Products", icon="🛒"),
    st.Page("pages/3_📥_Purchases.py", title="Buying Products", icon="📥"),
    st.Page("pages/4_🤝_Leave_Amount.py", title="Leave Amount", icon="🤝"),
    st.Page("pages/5_📦_Total_Stock.py", title="Total Stock", icon="📦"),
    st.Page("pages/6_🛠️_Maintenance.py", title="Stock Maintenance", icon="🛠️"),
    st.Page("pages/7_📊_Reports.py", title="Reports", icon="📊"),
    st.Page("pages/8_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
