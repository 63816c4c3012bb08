# frontend/ui/_01_tab_basic.py
from __future__ import annotations

import streamlit as st

from backend.app.charts.constants import TARGET_LANGUAGES
from backend.app.charts.editing import update_fields
from backend.app.charts.schemas import AspectRatio, ChartType, PaletteType, ThemeMode
from backend.app.session import ChartSession
from ui.data_access import widget_key, widget_value

TEXT_FIELDS = [
    ("title", "Main Title", 2),
    ("subtitle", "Subtitle / Unit", 1),
    ("source", "Data Source", 1),
]

LANGUAGE_BUTTONS = dict(zip(TARGET_LANGUAGES, ("EN", "繁", "簡")))

CHART_TYPE_LABELS = {
    ChartType.STACKED_BAR: "Stacked Bar",
    ChartType.BAR: "Grouped Bar",
    ChartType.PIE: "Pie Chart",
}
PALETTE_LABELS = {PaletteType.MULTI: "Multi-color", PaletteType.SINGLE: "Single (green)"}
ASPECT_LABELS = {AspectRatio.WIDE: "16:9 (Landscape)", AspectRatio.PORTRAIT: "4:5 (Portrait)"}
THEME_LABELS = {ThemeMode.LIGHT: "Light", ThemeMode.DARK: "Dark"}


def _on_field_change(session: ChartSession, field: str) -> None:
    session.store.apply(update_fields, **{field: widget_value(field)})


def _field_header(session: ChartSession, field: str, label: str) -> None:
    head, *cols = st.columns([4] + [1] * len(LANGUAGE_BUTTONS))
    head.markdown(f"**{label}**")
    if session.translations.is_busy(field):
        cols[0].caption("⏳ Translating…")
        return

    for col, (language, short) in zip(cols, LANGUAGE_BUTTONS.items()):
        col.button(
            short,
            key=f"translate_{field}_{short}",
            help=f"Translate to {language}",
            disabled=not session.settings.translation_enabled,
            on_click=session.translations.request,
            args=(field, language),
        )


def render_tab_basic(session: ChartSession) -> None:
    for field, label, height_rows in TEXT_FIELDS:
        _field_header(session, field, label)

        st.text_area(
            label,
            key=widget_key(field),
            height=40 + 28 * height_rows,
            label_visibility="collapsed",
            disabled=session.translations.is_busy(field),
            on_change=_on_field_change,
            args=(session, field),
        )

    if not session.settings.translation_enabled:
        st.caption("Set GEMINI_API_KEY to enable AI translation.")

    st.divider()

    st.selectbox(
        "Chart type",
        list(CHART_TYPE_LABELS),
        format_func=CHART_TYPE_LABELS.get,
        key=widget_key("chart_type"),
        on_change=_on_field_change,
        args=(session, "chart_type"),
    )

    st.radio(
        "Color palette",
        list(PALETTE_LABELS),
        format_func=PALETTE_LABELS.get,
        horizontal=True,
        key=widget_key("palette_type"),
        on_change=_on_field_change,
        args=(session, "palette_type"),
    )

    c1, c2 = st.columns(2)
    with c1:
        st.selectbox(
            "Aspect ratio",
            list(ASPECT_LABELS),
            format_func=ASPECT_LABELS.get,
            key=widget_key("aspect_ratio"),
            on_change=_on_field_change,
            args=(session, "aspect_ratio"),
        )
    with c2:
        st.radio(
            "Theme",
            list(THEME_LABELS),
            format_func=THEME_LABELS.get,
            horizontal=True,
            key=widget_key("theme"),
            on_change=_on_field_change,
            args=(session, "theme"),
        )

    st.toggle(
        "Show data labels",
        key=widget_key("show_labels"),
        on_change=_on_field_change,
        args=(session, "show_labels"),
    )
