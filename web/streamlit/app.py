"""Kilalo cache dashboard."""

import httpx
import plotly.graph_objects as go
import polars as pl
import streamlit as st
from loguru import logger

from settings import CLEAR_CACHE_MESSAGE, DASHBOARD_API_URL
from web.api.worker import paths

st.set_page_config(page_title="Kilalo Cache", page_icon="🗄️", layout="wide")

COLORS = {
    "image": "#0EA5E9",
    "stylesheet": "#8B5CF6",
    "script": "#F59E0B",
    "font": "#10B981",
    "remote": "#EF4444",
    "page": "#6B7280",
}


def color(kind: str) -> str:
    return COLORS.get(kind, "#9CA3AF")


def api_get(path: str) -> dict:
    resp = httpx.get(f"{DASHBOARD_API_URL}{path}", timeout=10)
    resp.raise_for_status()
    return resp.json()


def api_post(path: str, payload) -> dict:
    resp = httpx.post(f"{DASHBOARD_API_URL}{path}", json=payload, timeout=30)
    resp.raise_for_status()
    return resp.json()


@st.cache_data(ttl=30, show_spinner=False)
def get_status():
    return api_get(paths.STATUS)


@st.cache_data(ttl=30, show_spinner=False)
def get_caches():
    return api_get(paths.CACHES)


@st.cache_data(ttl=30, show_spinner=False)
def get_cache(name: str):
    """Bucket detail with per-kind totals."""
    logger.info("Loading cache detail for {}", name)
    return api_get(paths.cache_path(name))


def kind_chart(kinds: list, value_key: str, title: str = "") -> go.Figure:
    return go.Figure(
        go.Bar(
            x=[k["kind"] for k in kinds],
            y=[k[value_key] for k in kinds],
            marker_color=[color(k["kind"]) for k in kinds],
            text=[k[value_key] for k in kinds],
            textposition="outside",
        )
    ).update_layout(
        title=title,
        xaxis_title="",
        yaxis_title="",
        margin=dict(t=40, b=40, l=40, r=20),
        height=350,
    )


def status_section(status: dict):
    """Registrations and worker states."""
    st.subheader("⚙️ Worker")

    if not status["items"]:
        st.info("No worker registered. Accept the cookie banner or POST /sw/register.")
        return

    for reg in status["items"]:
        active = reg.get("active")
        cols = st.columns(4)
        cols[0].metric("Scope", reg["scope"])
        cols[1].metric("State", active["state"] if active else "none")
        cols[2].metric("Version", active["version"] if active else "-")
        cols[3].metric("Waiting", "yes" if reg.get("waiting") else "no")


def caches_section(caches: dict):
    """Bucket table plus per-kind charts for the current bucket."""
    st.subheader("🗄️ Caches")

    if not caches["items"]:
        st.info("Cache storage is empty.")
        return

    st.dataframe(pl.DataFrame(caches["items"]), width="stretch")

    names = [c["name"] for c in caches["items"]]
    default = names.index(caches["current"]) if caches["current"] in names else 0
    name = st.selectbox("Cache", names, index=default)

    detail = get_cache(name)
    if not detail["kinds"]:
        st.info(f"{name} has no entries.")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(kind_chart(detail["kinds"], "entries", "Entries by kind"), width="stretch")
    with col2:
        st.plotly_chart(kind_chart(detail["kinds"], "bytes", "Bytes by kind"), width="stretch")

    with st.expander(f"**{len(detail['urls'])} URLs**"):
        for url in detail["urls"]:
            st.write(url)


def main():
    st.title("🗄️ Kilalo Cache")
    st.markdown("*Service worker cache storage for the Kilalo site*")

    try:
        status = get_status()
        caches = get_caches()
    except httpx.HTTPError as e:
        st.error(f"Site edge unreachable at {DASHBOARD_API_URL}: {e}")
        return

    status_section(status)
    caches_section(caches)

    st.sidebar.markdown(f"**Current cache:** `{status['cache_name']}`")
    if st.sidebar.button("Clear all caches"):
        result = api_post(paths.MESSAGE, {"type": CLEAR_CACHE_MESSAGE})
        if result["delivered"]:
            st.sidebar.success("Caches cleared")
        else:
            st.sidebar.warning("No active worker to receive the message")
        st.cache_data.clear()

    st.sidebar.markdown("---")
    st.sidebar.markdown(f"**Site edge:** {DASHBOARD_API_URL}")


if __name__ == "__main__":
    main()
