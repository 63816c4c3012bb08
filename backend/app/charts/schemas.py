# backend/app/charts/schemas.py
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class ChartType(str, Enum):
    BAR = "BAR"
    STACKED_BAR = "STACKED_BAR"
    PIE = "PIE"


class AspectRatio(str, Enum):
    WIDE = "16:9"
    PORTRAIT = "4:5"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class PaletteType(str, Enum):
    MULTI = "MULTI"
    SINGLE = "SINGLE"


class DataPoint(BaseModel):
    """One labeled row, e.g. a year, with one value per category."""
    model_config = ConfigDict(frozen=True)

    name: str
    values: Dict[str, Number] = Field(default_factory=dict)

    def value(self, category: str) -> Number:
        return self.values.get(category, 0)


class ChartConfig(BaseModel):
    """
    A chart ready to render.

    Instances are treated as snapshots: edits go through
    backend.app.charts.editing and always build a new object.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    subtitle: str = ""
    source: str = ""
    chart_type: ChartType = ChartType.STACKED_BAR
    aspect_ratio: AspectRatio = AspectRatio.WIDE
    theme: ThemeMode = ThemeMode.LIGHT
    palette_type: PaletteType = PaletteType.MULTI
    show_labels: bool = True
    categories: List[str] = Field(default_factory=list)
    data: List[DataPoint] = Field(default_factory=list)
