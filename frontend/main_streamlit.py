# frontend/main_streamlit.py
import streamlit as st

from ui._01_tab_basic import render_tab_basic
from ui._02_tab_data import render_tab_data
from ui.components import render_export, render_preview
from ui.data_access import get_session, show_notices, sync_widgets

st.set_page_config(page_title="Chart Studio", layout="wide")

session = get_session()


@st.fragment(run_every=1.0)
def watch_translations() -> None:
    # rerun the whole page once every pending translation has landed
    if not session.translations.busy_fields:
        st.rerun()


sync_widgets(session)

editor, preview = st.columns([1, 2], gap="large")

with editor:
    st.header("Configuration")
    render_export(session)
    show_notices(session)

    tab_basic, tab_data = st.tabs(["🎨 Basic", "🗂 Data"])
    with tab_basic:
        render_tab_basic(session)
    with tab_data:
        render_tab_data(session)

with preview:
    render_preview(session)
    st.caption("Chart Studio · Social Media Asset Generator")

if session.translations.busy_fields:
    watch_translations()
