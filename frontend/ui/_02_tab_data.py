# frontend/ui/_02_tab_data.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from backend.app.charts.editing import (
    add_category,
    add_row,
    edit_cell,
    remove_category,
    remove_row,
    rename_category,
)
from backend.app.charts.schemas import ChartConfig
from backend.app.session import ChartSession

LABEL_COLUMN = "_row_label"


def _table(config: ChartConfig) -> pd.DataFrame:
    rows = []
    for point in config.data:
        row = {LABEL_COLUMN: point.name}
        row.update({cat: point.value(cat) for cat in config.categories})
        rows.append(row)
    return pd.DataFrame(rows, columns=[LABEL_COLUMN, *config.categories])


def _on_table_edit(session: ChartSession, key: str) -> None:
    state = st.session_state.get(key) or {}
    for row_idx, changes in (state.get("edited_rows") or {}).items():
        for column, value in changes.items():
            field = "name" if column == LABEL_COLUMN else column
            session.store.apply(edit_cell, int(row_idx), field, value)


def _on_upload(session: ChartSession, key: str) -> None:
    uploaded = st.session_state.get(key)
    if uploaded is None:
        return
    session.import_file(uploaded.getvalue(), uploaded.name)
    # a fresh uploader, so the same file is not imported again on the next run
    st.session_state["uploader_round"] = st.session_state.get("uploader_round", 0) + 1


def _on_add_category(session: ChartSession) -> None:
    name = st.session_state.get("new_category_name", "")
    if session.store.apply(add_category, name):
        st.session_state["new_category_name"] = ""


def _on_rename_category(session: ChartSession) -> None:
    old = st.session_state.get(f"rename_category_from_{session.store.revision}")
    new = st.session_state.get("rename_category_to", "")
    if old and session.store.apply(rename_category, old, new):
        st.session_state["rename_category_to"] = ""


def render_tab_data(session: ChartSession) -> None:
    config = session.config
    revision = session.store.revision

    st.subheader("Import")
    uploader_key = f"uploader_{st.session_state.get('uploader_round', 0)}"
    st.file_uploader(
        "Import Excel / CSV (first sheet; row 1 = categories, column A = labels)",
        type=["xlsx", "xls", "csv"],
        key=uploader_key,
        on_change=_on_upload,
        args=(session, uploader_key),
    )
    st.caption("Importing replaces all current categories and rows.")

    st.divider()
    st.subheader("Categories")
    for cat in config.categories:
        name_col, btn_col = st.columns([5, 1])
        name_col.write(cat)
        btn_col.button(
            "✕",
            key=f"remove_category_{revision}_{cat}",
            help=f"Remove '{cat}'",
            on_click=session.store.apply,
            args=(remove_category, cat),
        )

    add_col, add_btn = st.columns([4, 1])
    add_col.text_input("New category", key="new_category_name", placeholder="Category name")
    add_btn.button("Add", key="add_category", on_click=_on_add_category, args=(session,))

    with st.expander("Rename a category", expanded=False):
        st.selectbox("Category", config.categories, key=f"rename_category_from_{revision}")
        st.text_input("New name", key="rename_category_to")
        st.button("Rename", key="rename_category", on_click=_on_rename_category, args=(session,))

    st.divider()
    st.subheader("Rows")
    editor_key = f"data_editor_{revision}"
    column_config = {LABEL_COLUMN: st.column_config.TextColumn("Label", required=True)}
    column_config.update({cat: st.column_config.NumberColumn(cat) for cat in config.categories})
    st.data_editor(
        _table(config),
        key=editor_key,
        hide_index=True,
        num_rows="fixed",
        column_config=column_config,
        width="stretch",
        on_change=_on_table_edit,
        args=(session, editor_key),
    )

    row_btn, remove_col, remove_btn = st.columns([1, 2, 1])
    row_btn.button("+ Add row", key="add_row", on_click=session.store.apply, args=(add_row,))
    if config.data:
        labels = [f"{i + 1}. {p.name}" for i, p in enumerate(config.data)]
        remove_col.selectbox(
            "Row",
            range(len(labels)),
            format_func=labels.__getitem__,
            key=f"remove_row_choice_{revision}",
            label_visibility="collapsed",
        )
        remove_btn.button(
            "Remove row",
            key="remove_row",
            on_click=lambda: session.store.apply(
                remove_row, st.session_state.get(f"remove_row_choice_{revision}", 0)
            ),
        )
