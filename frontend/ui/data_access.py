from __future__ import annotations

import streamlit as st
from typing import Any

from backend.app.charts.schemas import ChartConfig
from backend.app.config import Settings, configure_logging
from backend.app.session import ChartSession

WIDGET_FIELDS = (
    "title",
    "subtitle",
    "source",
    "chart_type",
    "aspect_ratio",
    "theme",
    "palette_type",
    "show_labels",
)


def widget_key(field: str) -> str:
    return f"w_{field}"


@st.cache_resource(show_spinner=False)
def get_settings() -> Settings:
    """
    Read .env once per server process and set up logging.
    """
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


def get_session() -> ChartSession:
    if "chart_session" not in st.session_state:
        st.session_state["chart_session"] = ChartSession(get_settings())
    return st.session_state["chart_session"]


def sync_widgets(session: ChartSession) -> None:
    """
    Push the current config into widget state whenever it changed somewhere
    other than the widget itself (translation, import, ...).
    Must run before the widgets are created.
    """
    revision = session.store.revision
    if st.session_state.get("_synced_revision") == revision:
        return

    config: ChartConfig = session.config
    for field in WIDGET_FIELDS:
        st.session_state[widget_key(field)] = getattr(config, field)
    st.session_state["_synced_revision"] = revision


def widget_value(field: str) -> Any:
    return st.session_state.get(widget_key(field))


def show_notices(session: ChartSession) -> None:
    for notice in session.store.notices.drain():
        if notice.level == "error":
            st.error(notice.message)
        elif notice.level == "warning":
            st.warning(notice.message)
        else:
            st.info(notice.message)
