# backend/app/charts/constants.py
from __future__ import annotations

from typing import Dict, List, Tuple

from .schemas import AspectRatio, ChartConfig, ChartType, DataPoint, PaletteType, ThemeMode

BRAND_NAME = "TrendForce"
BRAND_GREEN = "#2D5D3A"

MULTI_COLORS: Tuple[str, ...] = (
    "#4e79a7",
    "#edc948",
    "#f28e2b",
    "#59a14f",
    "#e15759",
    "#76b7b2",
    "#b07aa1",
    "#9c755f",
)

# green shades, darkest first
SINGLE_COLORS: Tuple[str, ...] = (
    "#4d7c0f",
    "#65a30d",
    "#84cc16",
    "#a3e635",
    "#bef264",
    "#d9f99d",
    "#ecfccb",
    "#f7fee7",
)

PALETTES: Dict[PaletteType, Tuple[str, ...]] = {
    PaletteType.MULTI: MULTI_COLORS,
    PaletteType.SINGLE: SINGLE_COLORS,
}

# (background, text, grid)
THEME_COLORS: Dict[ThemeMode, Tuple[str, str, str]] = {
    ThemeMode.LIGHT: ("#FFFFFF", "#1A1A1A", "#E0E0E0"),
    ThemeMode.DARK: ("#1A1A1A", "#E5E5E5", "#333333"),
}

# logical canvas size (width, height)
CANVAS_SIZES: Dict[AspectRatio, Tuple[int, int]] = {
    AspectRatio.WIDE: (960, 540),
    AspectRatio.PORTRAIT: (540, 675),
}

EXPORT_SCALE = 2

NEW_ROW_NAME = "New Item"
DEFAULT_TITLE = "Chart Title"
STACK_ID = "stack"

TRANSLATABLE_FIELDS: Tuple[str, ...] = ("title", "subtitle", "source")
TARGET_LANGUAGES: Tuple[str, ...] = ("English", "Traditional Chinese", "Simplified Chinese")

_DEFAULT_CATEGORIES: List[str] = [
    "Memory",
    "Logic Processor",
    "MCU",
    "Analog IC",
    "Discrete",
    "Opto-semi",
    "Sensors",
    "Others",
]

_DEFAULT_ROWS: List[Tuple[str, Tuple[int, ...]]] = [
    ("2024", (6000, 12000, 9000, 18500, 13200, 6500, 2000, 800)),
    ("2025E", (7000, 12500, 10000, 20000, 14000, 6000, 2500, 800)),
    ("2026F", (7500, 13500, 11000, 21000, 15500, 6000, 3000, 800)),
    ("2027F", (7800, 14800, 11500, 23500, 15500, 6800, 3000, 800)),
    ("2028F", (8500, 16500, 12000, 25000, 17000, 6800, 3500, 800)),
    ("2029F", (9800, 17800, 12500, 27000, 18000, 7500, 3500, 800)),
]


def default_config() -> ChartConfig:
    """The example chart every session starts from."""
    return ChartConfig(
        title="2024-2029年車用半導體市場規模預估",
        subtitle="(Unit: Million USD)",
        source="Source: TrendForce, Dec. 2025",
        chart_type=ChartType.STACKED_BAR,
        aspect_ratio=AspectRatio.WIDE,
        theme=ThemeMode.LIGHT,
        palette_type=PaletteType.MULTI,
        show_labels=True,
        categories=list(_DEFAULT_CATEGORIES),
        data=[
            DataPoint(name=name, values=dict(zip(_DEFAULT_CATEGORIES, values)))
            for name, values in _DEFAULT_ROWS
        ],
    )
