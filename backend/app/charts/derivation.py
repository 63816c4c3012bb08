# backend/app/charts/derivation.py
"""
Pure derivations from a ChartConfig to the fully resolved ChartSpec the
plotly renderer draws. Nothing here performs I/O or mutates its input.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from .constants import (
    CANVAS_SIZES,
    DEFAULT_TITLE,
    EXPORT_SCALE,
    PALETTES,
    STACK_ID,
    THEME_COLORS,
)
from .schemas import AspectRatio, ChartConfig, ChartType, Number, PaletteType, ThemeMode

LegendLayout = Literal["horizontal", "vertical"]


@dataclass(frozen=True)
class ThemeColors:
    background: str
    text: str
    grid: str


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def scaled(self, factor: int) -> "Dimensions":
        return Dimensions(width=self.width * factor, height=self.height * factor)

    @property
    def label(self) -> str:
        return f"{self.width} x {self.height}"


@dataclass(frozen=True)
class StackedRow:
    name: str
    values: Dict[str, Number]
    total: Number


@dataclass(frozen=True)
class PieSlice:
    name: str
    value: Number
    color: str
    label: str


@dataclass(frozen=True)
class SeriesSpec:
    name: str
    color: str
    values: Tuple[Number, ...]
    labels: Tuple[str, ...] = ()
    stack_id: Optional[str] = None


@dataclass(frozen=True)
class TotalsOverlay:
    """Per-row totals drawn as one label above each stack. Never a legend entry."""
    values: Tuple[Number, ...]
    labels: Tuple[str, ...]
    synthetic: bool = True


@dataclass(frozen=True)
class LegendEntry:
    name: str
    color: str
    synthetic: bool = False


@dataclass(frozen=True)
class ChartSpec:
    chart_type: ChartType
    title: str
    subtitle: str
    source: str
    theme: ThemeColors
    dimensions: Dimensions
    export_dimensions: Dimensions
    show_labels: bool
    row_names: Tuple[str, ...] = ()
    series: Tuple[SeriesSpec, ...] = ()
    totals: Optional[TotalsOverlay] = None
    slices: Tuple[PieSlice, ...] = ()
    legend: Tuple[LegendEntry, ...] = ()
    legend_layout: LegendLayout = "horizontal"
    empty: bool = False


# ---------------------------------------------------------------------------
# lookups
# ---------------------------------------------------------------------------

def resolve_theme(theme: ThemeMode) -> ThemeColors:
    background, text, grid = THEME_COLORS[ThemeMode(theme)]
    return ThemeColors(background=background, text=text, grid=grid)


def resolve_dimensions(aspect_ratio: AspectRatio) -> Dimensions:
    width, height = CANVAS_SIZES[AspectRatio(aspect_ratio)]
    return Dimensions(width=width, height=height)


def export_dimensions(aspect_ratio: AspectRatio, scale: int = EXPORT_SCALE) -> Dimensions:
    """Pixel size of an exported image; exports render at `scale` x the logical size."""
    return resolve_dimensions(aspect_ratio).scaled(scale)


def resolve_palette(palette_type: PaletteType) -> Tuple[str, ...]:
    return PALETTES[PaletteType(palette_type)]


def color_for(palette_type: PaletteType, index: int) -> str:
    # wraps around: more categories than colors just repeats the palette
    palette = resolve_palette(palette_type)
    return palette[index % len(palette)]


# ---------------------------------------------------------------------------
# label formatting
# ---------------------------------------------------------------------------

def format_value(value: Number) -> str:
    """Thousands separators, at most three decimals, no trailing zeros (6000.0 -> "6,000")."""
    value = float(value)
    if value.is_integer():
        return f"{int(value):,}"
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_bar_label(value: Number) -> str:
    # zero segments stay unlabeled so sparse bars do not fill up with "0"
    return "" if float(value) == 0 else format_value(value)


def format_slice_label(name: str, value: Number) -> str:
    return f"{name}: {format_value(value)}"


# ---------------------------------------------------------------------------
# aggregation
# ---------------------------------------------------------------------------

def stacked_rows(config: ChartConfig) -> List[StackedRow]:
    rows: List[StackedRow] = []
    for point in config.data:
        values = {cat: point.value(cat) for cat in config.categories}
        rows.append(StackedRow(name=point.name, values=values, total=sum(values.values())))
    return rows


def pie_slices(config: ChartConfig) -> List[PieSlice]:
    slices: List[PieSlice] = []
    for idx, cat in enumerate(config.categories):
        total = sum(point.value(cat) for point in config.data)
        slices.append(
            PieSlice(
                name=cat,
                value=total,
                color=color_for(config.palette_type, idx),
                label=format_slice_label(cat, total),
            )
        )
    return slices


def legend_entries(candidates: Sequence[LegendEntry]) -> Tuple[LegendEntry, ...]:
    return tuple(entry for entry in candidates if not entry.synthetic)


# ---------------------------------------------------------------------------
# full spec
# ---------------------------------------------------------------------------

def _bar_series(config: ChartConfig, rows: Sequence[StackedRow]) -> Tuple[SeriesSpec, ...]:
    stacked = config.chart_type == ChartType.STACKED_BAR
    per_bar_labels = config.show_labels and not stacked

    series: List[SeriesSpec] = []
    for idx, cat in enumerate(config.categories):
        values = tuple(row.values[cat] for row in rows)
        series.append(
            SeriesSpec(
                name=cat,
                color=color_for(config.palette_type, idx),
                values=values,
                labels=tuple(format_bar_label(v) for v in values) if per_bar_labels else (),
                stack_id=STACK_ID if stacked else None,
            )
        )
    return tuple(series)


def build_chart_spec(config: ChartConfig) -> ChartSpec:
    """Resolve everything the renderer needs from one config snapshot."""
    base = dict(
        chart_type=config.chart_type,
        title=config.title or DEFAULT_TITLE,
        subtitle=config.subtitle,
        source=config.source,
        theme=resolve_theme(config.theme),
        dimensions=resolve_dimensions(config.aspect_ratio),
        export_dimensions=export_dimensions(config.aspect_ratio),
        show_labels=config.show_labels,
    )

    if not config.categories:
        return ChartSpec(**base, empty=True)

    if config.chart_type == ChartType.PIE:
        slices = tuple(pie_slices(config))
        candidates = [LegendEntry(name=s.name, color=s.color) for s in slices]
        return ChartSpec(
            **base,
            slices=slices,
            legend=legend_entries(candidates),
            legend_layout="vertical",
        )

    rows = stacked_rows(config)
    series = _bar_series(config, rows)
    candidates = [LegendEntry(name=s.name, color=s.color) for s in series]

    totals: Optional[TotalsOverlay] = None
    if config.show_labels and config.chart_type == ChartType.STACKED_BAR:
        totals = TotalsOverlay(
            values=tuple(row.total for row in rows),
            labels=tuple(format_value(row.total) for row in rows),
        )
        candidates.append(LegendEntry(name="total", color="rgba(0,0,0,0)", synthetic=True))

    return ChartSpec(
        **base,
        row_names=tuple(row.name for row in rows),
        series=series,
        totals=totals,
        legend=legend_entries(candidates),
        legend_layout="horizontal",
    )
