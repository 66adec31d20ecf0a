"""
Business Ledger Dashboard

A Streamlit dashboard over the ledger analytics engine.
Run with: streamlit run app.py
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from engine.config import config
from engine.exceptions import AnalyticsError
from engine.observability import setup_logging
from engine.service import AnalyticsService
from sources.csv_source import CsvRecordSource

setup_logging(config.log_level)

# Page config
st.set_page_config(
    page_title="Business Ledger Dashboard",
    page_icon="📒",
    layout="wide",
)

st.title("📒 Business Ledger Dashboard")

RANGE_LABELS = {
    "week": "Last 7 days",
    "month": "Last month",
    "year": "Last year",
    "3years": "Last 3 years",
    "5years": "Last 5 years",
    "10years": "Last 10 years",
}

STATUS_EMOJI = {"critical": "🔴", "attention": "🟠", "healthy": "🟢", "stable": "⚪"}


@st.cache_resource
def load_source(data_dir: str) -> CsvRecordSource:
    """Load and validate the CSV exports once per data directory."""
    return CsvRecordSource(data_dir)


try:
    source = load_source(str(config.data_dir))
except AnalyticsError as exc:
    st.error(f"Could not load ledger data: {exc}")
    st.stop()

service = AnalyticsService(source)

# --- Sidebar ---
business_ids = source.business_ids()
if not business_ids:
    st.info("Not enough data: no transactions or inventory found")
    st.stop()

business_id = st.sidebar.selectbox("Business", business_ids)
period = st.sidebar.radio("Summary period", ["daily", "weekly", "monthly"], index=2)
range_ = st.sidebar.selectbox(
    "Net sales range", list(RANGE_LABELS), index=2, format_func=RANGE_LABELS.get
)

try:
    summary = service.get_period_summary(business_id, period=period)
    net_sales = service.get_net_sales(business_id, range_=range_)
    forecast = service.get_sales_forecast(business_id)
    top_items = service.get_top_items(business_id)
    health = service.get_inventory_health(business_id)
    low_stock = service.get_low_stock_alerts(business_id)
except AnalyticsError as exc:
    st.error(f"Analytics error: {exc}")
    st.stop()

# --- Key Metrics Row ---
st.header("Key Metrics")
totals = summary.period_summary
col1, col2, col3, col4 = st.columns(4)

with col1:
    st.metric("Sales", f"{totals.total_sales:,.2f}")
with col2:
    st.metric("Expenses", f"{totals.total_expenses:,.2f}")
with col3:
    st.metric("COGS", f"{totals.total_cogs:,.2f}")
with col4:
    st.metric(
        "Profit",
        f"{totals.profit:,.2f}",
        delta=f"{len(low_stock)} low-stock items",
        delta_color="inverse" if low_stock else "off",
    )

st.divider()

# --- Two Column Layout ---
left_col, right_col = st.columns([2, 1])

with left_col:
    st.subheader("📊 Sales vs Expenses")

    if summary.chart_data:
        chart = pd.DataFrame([row.model_dump() for row in summary.chart_data])
        fig_summary = go.Figure()
        fig_summary.add_trace(go.Bar(x=chart["date"], y=chart["sales"], name="Sales", marker_color="#2ecc71"))
        fig_summary.add_trace(go.Bar(x=chart["date"], y=chart["expenses"], name="Expenses", marker_color="#e74c3c"))
        fig_summary.add_trace(
            go.Scatter(x=chart["date"], y=chart["profit"], name="Profit", mode="lines+markers", line_color="#3498db")
        )
        fig_summary.update_layout(
            barmode="group",
            height=320,
            margin=dict(t=20, b=20, l=20, r=20),
            legend=dict(orientation="h", yanchor="bottom", y=-0.3),
        )
        st.plotly_chart(fig_summary, use_container_width=True)
    else:
        st.info("Not enough data for this period")

with right_col:
    st.subheader("🏆 Top Sellers")

    if top_items:
        top_df = pd.DataFrame([item.model_dump() for item in top_items])
        top_df = top_df[["name", "total_quantity", "total_revenue"]]
        top_df.columns = ["Product", "Units Sold", "Revenue"]
        st.dataframe(top_df, use_container_width=True, hide_index=True)
    else:
        st.info("No product sales yet")

st.divider()

# --- Net Sales & Forecast ---
sales_col, forecast_col = st.columns(2)

with sales_col:
    st.subheader(f"💰 Net Sales ({RANGE_LABELS[range_]})")

    if net_sales:
        fig_net = go.Figure(
            data=[
                go.Bar(
                    x=[p.period_key for p in net_sales],
                    y=[p.total_sales for p in net_sales],
                    marker_color="#2ecc71",
                )
            ]
        )
        fig_net.update_layout(height=280, margin=dict(t=20, b=20, l=20, r=20))
        st.plotly_chart(fig_net, use_container_width=True)
    else:
        st.info("Not enough data for this range")

with forecast_col:
    st.subheader("🔮 7-Day Forecast")

    if forecast.forecast:
        trend_icon = "📈" if forecast.trend == "UP" else "📉"
        st.caption(f"{trend_icon} Trend {forecast.trend} · confidence (R²) {forecast.r_squared:.2f}")
        fig_forecast = go.Figure(
            data=[
                go.Scatter(
                    x=[p.date for p in forecast.forecast],
                    y=[p.predicted_amount for p in forecast.forecast],
                    mode="lines+markers",
                    line=dict(dash="dash", color="#9b59b6"),
                )
            ]
        )
        fig_forecast.update_layout(height=260, margin=dict(t=20, b=20, l=20, r=20))
        st.plotly_chart(fig_forecast, use_container_width=True)
    else:
        st.info(f"Not enough data for a forecast (needs at least {config.forecast.min_points} days of sales)")

st.divider()

# --- Inventory Health ---
st.subheader("📦 Inventory Health")

if low_stock:
    names = ", ".join(item.name for item in low_stock[:4])
    more = f" + {len(low_stock) - 4} more" if len(low_stock) > 4 else ""
    st.warning(f"Low stock (below {config.inventory.low_stock_threshold} units): {names}{more}")

if health:
    health_df = pd.DataFrame([row.model_dump() for row in health])
    health_df["status"] = health_df["status"].apply(lambda s: f"{STATUS_EMOJI.get(s, '')} {s.upper()}")
    health_df["daily_rate"] = health_df["daily_rate"].round(2)
    health_df = health_df[["name", "stock", "daily_rate", "days_left", "status", "low_stock"]]
    health_df.columns = ["Product", "Stock", "Daily Sales", "Days Left", "Run-Rate Status", "Low Stock"]
    st.dataframe(health_df, use_container_width=True, hide_index=True)
else:
    st.info("No inventory items")

# --- Product Drill-down ---
inventory = source.fetch_inventory(business_id)
if inventory:
    st.subheader("🔍 Product Analytics")
    choice = st.selectbox(
        "Product", inventory, format_func=lambda item: item.name, key="product_choice"
    )

    try:
        product = service.get_product_analytics(business_id, choice.product_id)
    except AnalyticsError as exc:
        st.error(str(exc))
    else:
        info_col, chart_col = st.columns([1, 2])
        with info_col:
            st.metric("Stock", product.product.stock)
            st.metric("Selling Price", f"{product.product.selling_price:,.2f}")
            projection = product.stockout
            if projection.status == "critical":
                st.error(f"Critically low! Estimated stockout in {projection.days_left} days.")
            elif projection.status == "attention":
                st.warning(f"Attention needed. Estimated stockout in {projection.days_left} days.")
            elif projection.status == "healthy":
                st.success(f"Healthy. Estimated coverage: {projection.days_left} days.")
            else:
                st.info("Stock levels appear stable.")

        with chart_col:
            if product.sales:
                fig_product = go.Figure(
                    data=[
                        go.Bar(
                            x=[p.period_key for p in product.sales],
                            y=[p.total_quantity for p in product.sales],
                            marker_color="#3498db",
                        )
                    ]
                )
                fig_product.update_layout(
                    title=f"Daily units sold (last {projection.window_days} days)",
                    height=260,
                    margin=dict(t=40, b=20, l=20, r=20),
                )
                st.plotly_chart(fig_product, use_container_width=True)
            else:
                st.info(f"No sales in the last {projection.window_days} days")

st.divider()

# --- Export ---
try:
    workbook = service.export_workbook(business_id)
except AnalyticsError as exc:
    st.error(f"Export failed: {exc}")
else:
    st.download_button(
        "⬇️ Download transactions (.xlsx)",
        data=workbook,
        file_name="report.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

# --- Footer ---
reports = source.quality_reports
st.caption(
    "Built with Streamlit | "
    f"Transactions: {reports['transactions'].total_rows:,} rows "
    f"({len(reports['transactions'].critical_issues)} critical issue types) | "
    f"Inventory: {reports['inventory'].total_rows:,} rows"
)
