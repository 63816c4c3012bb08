# backend/app/charts/rendering.py
from __future__ import annotations

import html
from typing import Any, Dict, List

import plotly.graph_objects as go

from .constants import BRAND_GREEN, BRAND_NAME
from .derivation import ChartSpec
from .schemas import ChartType

_BAR_WIDTH_STACKED = 0.55


def _markup(text: str) -> str:
    return html.escape(text or "").replace("\n", "<br>")


def _title_block(spec: ChartSpec) -> str:
    block = f"<b>{_markup(spec.title)}</b>"
    if spec.subtitle:
        block += f"<br><span style='font-size:16px;opacity:0.6'>{_markup(spec.subtitle)}</span>"
    return block


def _legend_layout(spec: ChartSpec) -> Dict[str, Any]:
    font = {"color": spec.theme.text, "size": 13}
    if spec.legend_layout == "vertical":
        return {
            "orientation": "v",
            "x": 1.0,
            "xanchor": "left",
            "y": 0.5,
            "yanchor": "middle",
            "font": font,
            "bgcolor": "rgba(0,0,0,0)",
        }
    return {
        "orientation": "h",
        "x": 0.5,
        "xanchor": "center",
        "y": 1.02,
        "yanchor": "bottom",
        "font": font,
        "bgcolor": "rgba(0,0,0,0)",
    }


def _pie_traces(spec: ChartSpec) -> List[go.BaseTraceType]:
    return [
        go.Pie(
            labels=[s.name for s in spec.slices],
            values=[s.value for s in spec.slices],
            marker={
                "colors": [s.color for s in spec.slices],
                "line": {"color": spec.theme.background, "width": 2},
            },
            hole=0.48,
            sort=False,
            direction="clockwise",
            text=[s.label for s in spec.slices] if spec.show_labels else None,
            textinfo="text" if spec.show_labels else "none",
            textposition="outside",
            textfont={"color": spec.theme.text, "size": 12},
            hovertemplate="%{label}: %{value:,}<extra></extra>",
            domain={"x": [0.0, 0.84]},
        )
    ]


def _bar_traces(spec: ChartSpec) -> List[go.BaseTraceType]:
    legend_names = {entry.name for entry in spec.legend}
    traces: List[go.BaseTraceType] = []

    for s in spec.series:
        traces.append(
            go.Bar(
                x=list(spec.row_names),
                y=list(s.values),
                name=s.name,
                marker_color=s.color,
                offsetgroup=s.stack_id,
                text=list(s.labels) if s.labels else None,
                textposition="outside" if s.labels else "none",
                textfont={"color": spec.theme.text, "size": 11},
                cliponaxis=False,
                showlegend=s.name in legend_names,
                width=_BAR_WIDTH_STACKED if s.stack_id else None,
                hovertemplate=f"{html.escape(s.name)}: %{{y:,}}<extra></extra>",
            )
        )

    if spec.totals is not None:
        traces.append(
            go.Scatter(
                x=list(spec.row_names),
                y=list(spec.totals.values),
                mode="text",
                text=list(spec.totals.labels),
                textposition="top center",
                textfont={"color": spec.theme.text, "size": 13},
                cliponaxis=False,
                showlegend=False,
                hoverinfo="skip",
            )
        )
    return traces


def build_figure(spec: ChartSpec) -> go.Figure:
    """Draw a ChartSpec with plotly. All styling decisions come from the spec."""
    fig = go.Figure()

    if not spec.empty:
        traces = _pie_traces(spec) if spec.chart_type == ChartType.PIE else _bar_traces(spec)
        for trace in traces:
            fig.add_trace(trace)

    stacked = any(s.stack_id for s in spec.series)
    fig.update_layout(
        width=spec.dimensions.width,
        height=spec.dimensions.height,
        paper_bgcolor=spec.theme.background,
        plot_bgcolor=spec.theme.background,
        font={"color": spec.theme.text},
        title={"text": _title_block(spec), "x": 0.5, "xanchor": "center", "font": {"size": 26}},
        barmode="stack" if stacked else "group",
        showlegend=bool(spec.legend),
        legend=_legend_layout(spec),
        margin={"t": 130, "r": 40, "b": 80, "l": 60},
        annotations=[
            {
                "text": _markup(spec.source),
                "xref": "paper",
                "yref": "paper",
                "x": 0.0,
                "y": -0.16,
                "xanchor": "left",
                "showarrow": False,
                "font": {"color": spec.theme.text, "size": 13},
                "opacity": 0.5,
            },
            {
                "text": f"<b>{BRAND_NAME}</b>",
                "xref": "paper",
                "yref": "paper",
                "x": 1.0,
                "y": -0.16,
                "xanchor": "right",
                "showarrow": False,
                "font": {"color": BRAND_GREEN, "size": 15},
            },
        ],
    )

    if spec.chart_type != ChartType.PIE and not spec.empty:
        fig.update_xaxes(showgrid=False, showline=False, ticks="", tickfont={"size": 16, "color": spec.theme.text})
        fig.update_yaxes(
            gridcolor=spec.theme.grid,
            griddash="dash",
            zeroline=False,
            tickformat=",",
            tickfont={"size": 13, "color": spec.theme.text},
        )
    else:
        fig.update_xaxes(visible=False)
        fig.update_yaxes(visible=False)

    return fig
