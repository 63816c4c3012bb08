# backend/app/charts/editing.py
from __future__ import annotations

import math
import numbers
import re
from typing import Any, Dict, List, Sequence

from .constants import NEW_ROW_NAME
from .errors import ChartConfigError, DuplicateCategoryError, LastCategoryError
from .schemas import ChartConfig, DataPoint, Number

_SCALAR_FIELDS = {
    "title",
    "subtitle",
    "source",
    "chart_type",
    "aspect_ratio",
    "theme",
    "palette_type",
    "show_labels",
}

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def coerce_number(value: Any) -> Number:
    """
    Best-effort numeric coercion used by the table editor and by imports.
      - numbers pass through (NaN / inf become 0)
      - bool is not treated as a number -> 0
      - text is parsed as a leading decimal number ("12.5%" -> 12.5, "1,200" -> 1200)
      - anything else -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        value = float(value)
        return value if math.isfinite(value) else 0

    text = str(value).strip().replace(",", "")
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0
    token = match.group(0)
    if re.fullmatch(r"[+-]?\d+", token):
        return int(token)
    parsed = float(token)
    return parsed if math.isfinite(parsed) else 0


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ChartConfigError("Category name cannot be empty.")
    return name


def update_fields(config: ChartConfig, **changes: Any) -> ChartConfig:
    """Replace presentation fields (title, theme, chart type ...)."""
    unknown = set(changes) - _SCALAR_FIELDS
    if unknown:
        raise ChartConfigError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
    merged = config.model_dump()
    merged.update(changes)
    # re-validate so enum values given as plain strings are accepted
    return ChartConfig.model_validate(merged)


def add_category(config: ChartConfig, name: str) -> ChartConfig:
    name = _check_name(name)
    if name in config.categories:
        raise DuplicateCategoryError(f"Category '{name}' already exists.")

    data = [
        DataPoint(name=point.name, values={**point.values, name: 0})
        for point in config.data
    ]
    return config.model_copy(update={"categories": [*config.categories, name], "data": data})


def remove_category(config: ChartConfig, name: str) -> ChartConfig:
    if name not in config.categories:
        raise ChartConfigError(f"Unknown category '{name}'.")
    if len(config.categories) <= 1:
        raise LastCategoryError("Must have at least one category.")

    categories = [c for c in config.categories if c != name]
    data = [
        DataPoint(name=point.name, values={k: v for k, v in point.values.items() if k != name})
        for point in config.data
    ]
    return config.model_copy(update={"categories": categories, "data": data})


def rename_category(config: ChartConfig, old: str, new: str) -> ChartConfig:
    if old not in config.categories:
        raise ChartConfigError(f"Unknown category '{old}'.")
    new = _check_name(new)
    if new == old:
        return config
    if new in config.categories:
        raise DuplicateCategoryError(f"Category '{new}' already exists.")

    categories = [new if c == old else c for c in config.categories]
    data = [
        DataPoint(
            name=point.name,
            values={(new if k == old else k): v for k, v in point.values.items()},
        )
        for point in config.data
    ]
    return config.model_copy(update={"categories": categories, "data": data})


def add_row(config: ChartConfig) -> ChartConfig:
    row = DataPoint(name=NEW_ROW_NAME, values={cat: 0 for cat in config.categories})
    return config.model_copy(update={"data": [*config.data, row]})


def _check_index(config: ChartConfig, index: int) -> int:
    if not isinstance(index, int) or isinstance(index, bool) or not (0 <= index < len(config.data)):
        raise ChartConfigError(f"Row index out of range: {index}")
    return index


def remove_row(config: ChartConfig, index: int) -> ChartConfig:
    index = _check_index(config, index)
    data = [point for i, point in enumerate(config.data) if i != index]
    return config.model_copy(update={"data": data})


def edit_cell(config: ChartConfig, index: int, field: str, value: Any) -> ChartConfig:
    """Set a row's label (field == "name") or one category value."""
    index = _check_index(config, index)
    point = config.data[index]

    if field == "name":
        new_point = DataPoint(name="" if value is None else str(value), values=dict(point.values))
    elif field in config.categories:
        new_point = DataPoint(name=point.name, values={**point.values, field: coerce_number(value)})
    else:
        raise ChartConfigError(f"Unknown column '{field}'.")

    data = list(config.data)
    data[index] = new_point
    return config.model_copy(update={"data": data})


def replace_dataset(
    config: ChartConfig,
    categories: Sequence[str],
    data: Sequence[DataPoint],
) -> ChartConfig:
    """Swap both categories and rows wholesale; nothing from the old dataset is kept."""
    categories = list(categories)
    if not categories:
        raise LastCategoryError("Must have at least one category.")
    if len(set(categories)) != len(categories):
        raise DuplicateCategoryError("Category names must be unique.")

    rows: List[DataPoint] = []
    for point in data:
        values: Dict[str, Number] = {cat: point.values.get(cat, 0) for cat in categories}
        rows.append(DataPoint(name=point.name, values=values))
    return config.model_copy(update={"categories": categories, "data": rows})
