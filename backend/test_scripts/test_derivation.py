"""Pure derivations: theme, sizes, palette, aggregation, labels, legend."""

from __future__ import annotations

import pytest

from backend.app.charts.constants import MULTI_COLORS, SINGLE_COLORS, default_config
from backend.app.charts.derivation import (
    LegendEntry,
    build_chart_spec,
    color_for,
    export_dimensions,
    format_bar_label,
    format_value,
    legend_entries,
    pie_slices,
    resolve_dimensions,
    resolve_palette,
    resolve_theme,
    stacked_rows,
)
from backend.app.charts.editing import update_fields
from backend.app.charts.schemas import (
    AspectRatio,
    ChartConfig,
    ChartType,
    DataPoint,
    PaletteType,
    ThemeMode,
)


def test_theme_tables() -> None:
    """Each theme resolves to its fixed (background, text, grid) triple."""

    light = resolve_theme(ThemeMode.LIGHT)
    dark = resolve_theme(ThemeMode.DARK)
    assert (light.background, light.text, light.grid) == ("#FFFFFF", "#1A1A1A", "#E0E0E0")
    assert (dark.background, dark.text, dark.grid) == ("#1A1A1A", "#E5E5E5", "#333333")


def test_dimensions_and_export_pixels() -> None:
    """WIDE is 960x540 (1920x1080 exported), PORTRAIT 540x675 (1080x1350)."""

    wide = resolve_dimensions(AspectRatio.WIDE)
    portrait = resolve_dimensions(AspectRatio.PORTRAIT)
    assert (wide.width, wide.height) == (960, 540)
    assert (portrait.width, portrait.height) == (540, 675)
    assert export_dimensions(AspectRatio.WIDE).label == "1920 x 1080"
    assert export_dimensions(AspectRatio.PORTRAIT).label == "1080 x 1350"


def test_palettes() -> None:
    """MULTI and SINGLE map to their ordered color lists."""

    assert resolve_palette(PaletteType.MULTI) == MULTI_COLORS
    assert resolve_palette(PaletteType.SINGLE) == SINGLE_COLORS


@pytest.mark.parametrize("palette_type", list(PaletteType))
def test_color_assignment_wraps(palette_type: PaletteType) -> None:
    """Index >= palette length reuses the color at index mod length."""

    palette = resolve_palette(palette_type)
    for idx in range(len(palette) * 3):
        assert color_for(palette_type, idx) == palette[idx % len(palette)]
        assert color_for(palette_type, idx) == color_for(palette_type, idx)


def test_stacked_row_total_is_order_independent(small_config: ChartConfig) -> None:
    """Totals equal the sum of a row's values whatever the category order."""

    reordered = small_config.model_copy(update={"categories": ["B", "A"]})
    assert [r.total for r in stacked_rows(small_config)] == [3, 7]
    assert [r.total for r in stacked_rows(reordered)] == [3, 7]


def test_stacked_rows_treat_missing_values_as_zero() -> None:
    """A row without a category key contributes 0 for it."""

    cfg = ChartConfig(categories=["A", "B"], data=[DataPoint(name="r", values={"A": 5})])
    row = stacked_rows(cfg)[0]
    assert row.values == {"A": 5, "B": 0}
    assert row.total == 5


def test_pie_aggregation_preserves_grand_total(config: ChartConfig) -> None:
    """Slice values sum to the sum of every value in every row."""

    slices = pie_slices(config)
    grand_total = sum(p.value(c) for p in config.data for c in config.categories)
    assert [s.name for s in slices] == config.categories
    assert sum(s.value for s in slices) == grand_total
    assert slices[0].value == 6000 + 7000 + 7500 + 7800 + 8500 + 9800
    assert slices[0].label == "Memory: 46,600"
    assert [s.color for s in slices] == list(MULTI_COLORS)


def test_label_formatting() -> None:
    """Thousands separators; zero bar labels are suppressed but zero totals are not."""

    assert format_value(6000) == "6,000"
    assert format_value(6000.0) == "6,000"
    assert format_value(1234.5) == "1,234.5"
    assert format_value(0.12345) == "0.123"
    assert format_value(0) == "0"
    assert format_bar_label(0) == ""
    assert format_bar_label(0.0) == ""
    assert format_bar_label(-5) == "-5"
    assert format_bar_label(1500) == "1,500"


def test_legend_filter_drops_synthetic_entries() -> None:
    """Tagged entries never reach the legend."""

    entries = [LegendEntry("A", "#000"), LegendEntry("total", "#fff", synthetic=True)]
    assert legend_entries(entries) == (LegendEntry("A", "#000"),)


def test_stacked_spec_has_totals_overlay_outside_legend(config: ChartConfig) -> None:
    """Stacked bars share one stack and get one total label per row."""

    spec = build_chart_spec(config)
    assert spec.chart_type == ChartType.STACKED_BAR
    assert {s.stack_id for s in spec.series} == {"stack"}
    assert all(s.labels == () for s in spec.series)
    assert spec.totals is not None
    assert spec.totals.labels[0] == "68,000"
    assert [e.name for e in spec.legend] == config.categories
    assert all(not e.synthetic for e in spec.legend)
    assert spec.legend_layout == "horizontal"


def test_stacked_zero_total_is_still_labelled() -> None:
    """A row summing to 0 keeps its total label."""

    cfg = ChartConfig(categories=["A"], data=[DataPoint(name="r", values={"A": 0})])
    spec = build_chart_spec(cfg)
    assert spec.totals.labels == ("0",)


def test_grouped_bar_spec_labels_each_bar(small_config: ChartConfig) -> None:
    """Grouped bars are unstacked and carry per-bar labels with zeros blanked."""

    cfg = update_fields(small_config, chart_type=ChartType.BAR)
    cfg = cfg.model_copy(update={"data": [DataPoint(name="r1", values={"A": 0, "B": 2500})]})
    spec = build_chart_spec(cfg)
    assert spec.totals is None
    assert [s.stack_id for s in spec.series] == [None, None]
    assert [s.labels for s in spec.series] == [("",), ("2,500",)]


def test_labels_off_removes_all_labels(config: ChartConfig) -> None:
    """show_labels=False drops per-bar labels and the totals overlay."""

    spec = build_chart_spec(update_fields(config, show_labels=False))
    assert spec.totals is None
    assert all(s.labels == () for s in spec.series)


def test_pie_spec(config: ChartConfig) -> None:
    """Pie charts collapse rows into slices with a vertical legend."""

    spec = build_chart_spec(update_fields(config, chart_type=ChartType.PIE, palette_type=PaletteType.SINGLE))
    assert spec.series == ()
    assert len(spec.slices) == len(config.categories)
    assert spec.slices[0].color == SINGLE_COLORS[0]
    assert spec.legend_layout == "vertical"


def test_empty_categories_produce_empty_spec() -> None:
    """No categories is the one degenerate case: render nothing, do not fail."""

    spec = build_chart_spec(ChartConfig(categories=[], data=[DataPoint(name="r")]))
    assert spec.empty is True
    assert spec.series == () and spec.slices == () and spec.legend == ()


def test_title_fallback_and_dimensions(small_config: ChartConfig) -> None:
    """An empty title shows a placeholder; sizes follow the aspect ratio."""

    spec = build_chart_spec(update_fields(small_config, title="", aspect_ratio=AspectRatio.PORTRAIT))
    assert spec.title == "Chart Title"
    assert (spec.dimensions.width, spec.dimensions.height) == (540, 675)
    assert (spec.export_dimensions.width, spec.export_dimensions.height) == (1080, 1350)


def test_derivation_is_deterministic(config: ChartConfig) -> None:
    """Same snapshot, same spec."""

    assert build_chart_spec(config) == build_chart_spec(config)


@pytest.mark.parametrize("chart_type", list(ChartType))
def test_chart_spec_is_immutable_value(chart_type) -> None:
    """Specs hold only frozen parts, so equal configs give equal, hashable specs."""

    config = update_fields(default_config(), chart_type=chart_type)
    spec = build_chart_spec(config)
    assert hash(spec) == hash(build_chart_spec(config))
    assert isinstance(hash(build_chart_spec(ChartConfig(categories=[]))), int)
