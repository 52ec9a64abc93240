import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
import plotly.express as px

from nauta.currency import rate_converter
from nauta.events import EventBus, NET_WORTH_CHANGED, SCORE_COMPUTED, register_default_handlers
from nauta.networth import NetWorthHistory, history_change
from nauta.projection import projection_frame
from nauta.ratios import goal_progress
from nauta.services import AnalysisContext, default_service
from nauta.settings import get_settings
from nauta.storage import JsonFileStore
from nauta.transforms import load_insurance_config, load_snapshot

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("nauta.app")

st.set_page_config(page_title="Nauta Finance", layout="wide")

bus = register_default_handlers(EventBus())

snapshot = load_snapshot(settings.data_path)
insurance = load_insurance_config(settings.data_path)
store = JsonFileStore(settings.store_path)
history = NetWorthHistory(store)

currencies = sorted(settings.exchange_rates)
display_currency = st.sidebar.selectbox(
    "Display currency",
    currencies,
    index=currencies.index(settings.display_currency) if settings.display_currency in currencies else 0,
)
convert = rate_converter(settings.exchange_rates)

ctx = AnalysisContext(convert, display_currency, insurance, date.today())
report = default_service().analysis_report(snapshot, ctx)
result = report["result"]
nauta = result["nauta_index"]
logger.info("Nauta index %.1f (%s) in %s", nauta["score"], nauta["status"], display_currency)

today = date.today().isoformat()
for out in bus.publish(NET_WORTH_CHANGED, {
    "date": today,
    "history": history.get_history(),
    "net_worth": result["net_worth"],
    "currency": display_currency,
}):
    if "snapshot" in out:
        history.save_snapshot(out["snapshot"]["value"], out["snapshot"]["currency"])

alerts = bus.publish(SCORE_COMPUTED, {
    "score": nauta["score"],
    "threshold": settings.score_alert_threshold,
    "breakdown": nauta["breakdown"],
})

menu = st.sidebar.radio("Menu", ["🏠 Overview", "🧭 Nauta Index", "📈 Cashflow", "✅ Data checks"])


def money(value: float) -> str:
    return f"{value:,.0f} {display_currency}"


if menu == "🏠 Overview":
    ratios = result["ratios"]
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Nauta Index", f"{nauta['score']:.0f}/100", nauta["status"])
    with k2:
        change = history_change(history.get_history())
        st.metric("Net worth", money(result["net_worth"]), f"{change['percent']:+.1f}%")
    with k3:
        st.metric("Savings rate", f"{ratios['savings_rate']:.1f}%")
    with k4:
        st.metric("Emergency fund", f"{ratios['emergency_fund_months']:.1f} months")

    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Debt / annual income", f"{ratios['debt_to_income']:.1f}%")
    with c2:
        st.metric("Debt service", f"{ratios['debt_service']:.1f}%")
    with c3:
        st.metric("Basic health score", f"{result['financial_health']}/100")

    for out in alerts:
        if "alert" in out:
            st.error(out["alert"])
        if "floored" in out:
            st.info("No points yet in: " + ", ".join(n.replace("_", " ") for n in out["floored"]))

    st.subheader("💡 Insights")
    if result["insights"]:
        for insight in result["insights"]:
            text = f"**{insight['title']}** - {insight['message']}"
            if insight["type"] == "success":
                st.success(text)
            elif insight["type"] == "danger":
                st.error(text)
            else:
                st.warning(text)
    else:
        st.info("Nothing to report.")

    st.subheader("🎯 Savings goals")
    for goal in snapshot.savings_goals:
        st.caption(goal.name)
        st.progress(goal_progress(goal) / 100)

    hist = history.get_history()
    if len(hist) >= 2:
        df_hist = pd.DataFrame(
            [{"date": d, "value": e["value"]} for d, e in sorted(hist.items())]
        )
        fig_hist = px.line(df_hist, x="date", y="value", markers=True,
                           title="Net worth history", template="plotly_dark")
        st.plotly_chart(fig_hist, use_container_width=True)

elif menu == "🧭 Nauta Index":
    st.title("🧭 Nauta Index")
    st.markdown(f"### {nauta['score']:.1f} / 100 - {nauta['status']}")
    st.caption(nauta["message"])

    parts = nauta["breakdown"]
    df_parts = pd.DataFrame([
        {"Component": name.replace("_", " ").title(), "Score": part["score"], "Max": part["max"],
         "Status": part["details"].get("status", "")}
        for name, part in parts.items()
    ])
    fig = go.Figure()
    fig.add_trace(go.Bar(x=df_parts["Component"], y=df_parts["Max"], name="Max", opacity=0.3))
    fig.add_trace(go.Bar(x=df_parts["Component"], y=df_parts["Score"], name="Score"))
    fig.update_layout(barmode="overlay", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
    st.plotly_chart(fig, use_container_width=True)
    st.table(df_parts)

    with st.expander("Details"):
        st.json({name: part["details"] for name, part in parts.items()})

elif menu == "📈 Cashflow":
    st.title("📈 Cashflow")
    df_proj = projection_frame(result["projection"])
    fig_ts = go.Figure()
    fig_ts.add_trace(go.Scatter(x=df_proj.index, y=df_proj["cumulative_balance"],
                                mode="lines+markers", name="Cumulative balance"))
    fig_ts.add_trace(go.Bar(x=df_proj.index, y=df_proj["net_cashflow"], name="Net cashflow"))
    fig_ts.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
    st.plotly_chart(fig_ts, use_container_width=True)

    stats = result["projection_stats"]
    s1, s2, s3 = st.columns(3)
    s1.metric("Final balance", money(stats["final_balance"]))
    s2.metric("Deficit months", stats["deficit_months"])
    s3.metric("Healthy", "yes" if stats["is_healthy"] else "no")

    cmp = result["month_comparison"]
    st.subheader("📅 Month over month")
    m1, m2 = st.columns(2)
    m1.metric(cmp["current_month"]["name"], money(cmp["current_month"]["total"]),
              f"{cmp['percentage_change']:+.1f}%")
    m2.metric(cmp["last_month"]["name"], money(cmp["last_month"]["total"]))

    csv = df_proj.to_csv()
    st.download_button("⬇ Download projection", csv, file_name="projection.csv", mime="text/csv")

elif menu == "✅ Data checks":
    st.title("✅ Data checks")
    for entry in report["validation"]:
        if entry["messages"]:
            for msg in entry["messages"]:
                st.warning(msg)
        else:
            st.success(f"{entry['validator']}: no problems found")
