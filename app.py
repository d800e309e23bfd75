"""
Shiftboard — Interactive Production Dashboard

Run with:  streamlit run app.py
Tenant:    ?client=<client_id> in the URL (falls back to simulated data
           when the tenant has no config)
"""

import sys
import time
from datetime import datetime
from pathlib import Path

import plotly.graph_objects as go
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from shiftboard.config import (
    DEFAULT_COLUMNS,
    DEFAULT_REFRESH_INTERVAL_MS,
    DEFAULT_SWITCH_INTERVAL_MS,
    SUMMARY_SCREEN_ID,
    effective_screens_order,
    load_dashboard_config,
    rotation_screen,
)
from shiftboard.dashboard import (
    format_hours,
    format_minutes_compact,
    format_percent,
    format_pieces,
    get_sector_view,
    get_summary_overview,
)
from shiftboard.errors import DashboardConfigError
from shiftboard.loaders import fetch_display_table, refresh_sectors
from shiftboard.simulator import generate_demo_sectors, make_demo_fetch

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Shiftboard",
    page_icon="🏭",
    layout="wide",
    initial_sidebar_state="expanded",
)

RAG_COLORS = {
    "green": "#22c55e",
    "amber": "#f59e0b",
    "red": "#ef4444",
    "grey": "#95a5a6",
}
RUNNING_COLOR = "#22c55e"
STOPPED_COLOR = "#ef4444"


# ---------------------------------------------------------------------------
# Config & data loading (cached)
# ---------------------------------------------------------------------------
def load_tenant(client_id: str | None) -> tuple[dict, bool]:
    try:
        return load_dashboard_config(client_id), False
    except DashboardConfigError as exc:
        st.sidebar.warning(f"{exc} Showing simulated data.")
        return {
            "title": "Shiftboard demo",
            "sectors": generate_demo_sectors(),
            "columns": DEFAULT_COLUMNS,
            "switchIntervalMs": DEFAULT_SWITCH_INTERVAL_MS,
            "refreshIntervalMs": DEFAULT_REFRESH_INTERVAL_MS,
        }, True


client_id = st.query_params.get("client")
config, is_demo = load_tenant(client_id)
sectors = config["sectors"]
refresh_s = config.get("refreshIntervalMs", DEFAULT_REFRESH_INTERVAL_MS) / 1000
switch_ms = config.get("switchIntervalMs", DEFAULT_SWITCH_INTERVAL_MS)


@st.cache_data(ttl=refresh_s, show_spinner="Fetching sector sheets...")
def load_all_data(client_key: str | None, demo: bool, _previous: dict | None = None) -> dict:
    fetch = make_demo_fetch() if demo else fetch_display_table
    return refresh_sectors(sectors, config["columns"], previous=_previous, fetch=fetch)


# Last good state per tenant, so a failing sector keeps its series across refreshes
state_key = f"sector_state:{client_id or ''}"
state = load_all_data(client_id, is_demo, st.session_state.get(state_key))
st.session_state[state_key] = state
now = datetime.now()

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title(config["title"])
st.sidebar.caption(now.strftime("%d/%m/%Y %H:%M"))
st.sidebar.divider()

screens = effective_screens_order(config.get("screensOrder"), sectors)
names = {s["id"]: s["name"] for s in sectors}
names[SUMMARY_SCREEN_ID] = "Summary"
rotate = st.sidebar.toggle("Rotate screens", value=False)
if rotate:
    started = st.session_state.setdefault("rotation_started", time.time())
    page = rotation_screen(screens, (time.time() - started) * 1000, switch_ms)
    st.sidebar.caption(f"Switching every {switch_ms / 1000:g}s")
else:
    st.session_state.pop("rotation_started", None)
    page = st.sidebar.radio("Screen", screens, format_func=lambda sid: names.get(sid, sid))

st.sidebar.divider()
if st.sidebar.button("Refresh now"):
    load_all_data.clear()
    st.rerun()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def rag_card(label: str, value: str, subtitle: str, rag: str):
    color = RAG_COLORS.get(rag, RAG_COLORS["grey"])
    st.markdown(
        f"""
        <div style="background: linear-gradient(135deg, {color}22, {color}11);
                    border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #888; font-weight: 600; text-transform: uppercase;">{label}</div>
            <div style="font-size: 28px; font-weight: 700; margin: 4px 0;">{value}</div>
            <div style="font-size: 13px; color: #666;">{subtitle}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def bar_chart(x, y, color: str, height: int = 300, text=None):
    fig = go.Figure(go.Bar(x=x, y=y, marker_color=color, text=text, textposition="outside"))
    fig.update_layout(
        height=height,
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=10, r=10, t=10, b=40),
    )
    return fig


# ===========================================================================
# SCREEN: Summary
# ===========================================================================
if page == SUMMARY_SCREEN_ID:
    overview = get_summary_overview(sectors, state, now)
    summary = overview["summary"]
    totals = summary["totals"]

    st.title("Summary")
    st.caption(f"Date: **{summary['date_str'] or '-'}**")

    for sector_id, msg in overview["errors"].items():
        st.error(f"{names.get(sector_id, sector_id)}: {msg}")

    col1, col2, col3 = st.columns(3)
    with col1:
        rag_card(
            "Overview (today)",
            f"{format_pieces(totals['pieces'])} pieces",
            f"{format_hours(totals['running_hours'])} running | "
            f"{format_hours(totals['stopped_hours'])} stopped",
            "grey",
        )
    with col2:
        rag_card(
            "Utilization (fleet)",
            format_percent(summary["utilization_percent"]),
            f"Target {format_percent(summary['target_utilization_percent'])} | "
            f"Min {format_percent(summary['min_utilization_percent'])}",
            overview["rag"],
        )
    with col3:
        rag_card(
            "Average cycle time",
            format_minutes_compact(summary["tc_medio_avg_min_per_piece"]),
            "per piece, across sectors",
            "grey",
        )

    st.divider()
    sectors_df = overview["sectors"]

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Hours split")
        fig = go.Figure(go.Pie(
            labels=["Running", "Stopped"],
            values=[max(0, totals["running_hours"]), max(0, totals["stopped_hours"])],
            marker_colors=[RUNNING_COLOR, STOPPED_COLOR],
            hole=0.6,
        ))
        fig.update_layout(height=300, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
    with col2:
        st.subheader("Pieces by sector")
        st.plotly_chart(
            bar_chart(sectors_df["name"], sectors_df["pieces"], "#3498db",
                      text=[format_pieces(v) for v in sectors_df["pieces"]]),
            use_container_width=True,
        )

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Utilization by sector")
        colors = [RAG_COLORS.get(r, RAG_COLORS["grey"]) for r in sectors_df["rag"]]
        st.plotly_chart(
            bar_chart(sectors_df["name"], sectors_df["utilization_percent"].fillna(0), colors,
                      text=[format_percent(v) for v in sectors_df["utilization_percent"]]),
            use_container_width=True,
        )
    with col2:
        st.subheader("Cycle time by sector (min/piece)")
        st.plotly_chart(
            bar_chart(sectors_df["name"], sectors_df["tc_medio_min_per_piece"].fillna(0), "#9b59b6",
                      text=[format_minutes_compact(v) for v in sectors_df["tc_medio_min_per_piece"]]),
            use_container_width=True,
        )


# ===========================================================================
# SCREEN: Sector
# ===========================================================================
else:
    sector = next(s for s in sectors if s["id"] == page)
    view = get_sector_view(sector, state, now)
    frame = view["frame"]

    st.title(view["name"])
    if view["error_msg"]:
        st.error(view["error_msg"])

    if frame.empty:
        st.warning("No data available for this sector.")
    else:
        current = view["current"] or {}
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Pieces", format_pieces(current.get("pieces")))
        with col2:
            st.metric("Running", format_hours(current.get("running_hours")))
        with col3:
            st.metric("Utilization", format_percent(current.get("utilization_percent")))
        with col4:
            st.metric("Cycle time", format_minutes_compact(current.get("tc_medio_min_per_piece")))

        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Pieces per day")
            st.plotly_chart(bar_chart(frame["label"], frame["pieces"], "#3498db"),
                            use_container_width=True)
        with col2:
            st.subheader("Running vs stopped hours")
            fig = go.Figure()
            fig.add_trace(go.Bar(x=frame["label"], y=frame["running_hours"],
                                 name="Running", marker_color=RUNNING_COLOR))
            fig.add_trace(go.Bar(x=frame["label"], y=frame["stopped_hours"],
                                 name="Stopped", marker_color=STOPPED_COLOR))
            fig.update_layout(barmode="stack", height=300, plot_bgcolor="rgba(0,0,0,0)",
                              margin=dict(l=10, r=10, t=10, b=40))
            st.plotly_chart(fig, use_container_width=True)

        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Utilization %")
            fig = go.Figure()
            fig.add_trace(go.Scatter(x=frame["label"], y=frame["utilization_percent"],
                                     name="Utilization", mode="lines+markers",
                                     line=dict(color="#3498db", width=2)))
            if frame["target_utilization_percent"].notna().any():
                fig.add_trace(go.Scatter(x=frame["label"], y=frame["target_utilization_percent"],
                                         name="Target", mode="lines",
                                         line=dict(color="#e74c3c", width=2, dash="dash")))
            fig.update_layout(height=300, yaxis_range=[0, 100], plot_bgcolor="rgba(0,0,0,0)",
                              margin=dict(l=10, r=10, t=10, b=40))
            st.plotly_chart(fig, use_container_width=True)
        with col2:
            st.subheader("Cycle time (min/piece)")
            st.plotly_chart(bar_chart(frame["label"], frame["tc_medio_min_per_piece"], "#9b59b6"),
                            use_container_width=True)

        st.caption(f"{view['row_count']} rows | updated {view['updated_at']:%H:%M:%S}"
                   if view["updated_at"] else f"{view['row_count']} rows")

# Auto-rotation: wait out the current screen, then rerun onto the next one
if rotate and switch_ms > 0:
    elapsed_ms = (time.time() - st.session_state["rotation_started"]) * 1000
    time.sleep((switch_ms - elapsed_ms % switch_ms) / 1000)
    st.rerun()
