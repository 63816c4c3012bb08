# backend/app/ingestion/normalize.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from ..charts.editing import coerce_number, replace_dataset
from ..charts.errors import ImportRejected
from ..charts.schemas import DataPoint
from ..charts.store import ConfigStore
from .dataset_loader import load_from_upload

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_MESSAGE = "The file seems empty or has insufficient data."
NO_CATEGORIES_MESSAGE = "The header row has no category columns."


@dataclass(frozen=True)
class ImportResult:
    categories: List[str]
    data: List[DataPoint]
    dropped_rows: int = 0
    skipped_columns: List[int] = field(default_factory=list)


def _is_blank(cell: Any) -> bool:
    if cell is None:
        return True
    if isinstance(cell, float) and math.isnan(cell):
        return True
    return isinstance(cell, str) and not cell.strip()


def _cell_text(cell: Any) -> str:
    # 2024.0 read from a float column should still label as "2024"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def normalize_grid(grid: Sequence[Sequence[Any]]) -> ImportResult:
    """
    Turn a decoded sheet into chart categories and rows.

    Row 0 holds the headers: column 0 (the row-label header) is ignored and
    every other non-empty header becomes a category. Each later row becomes
    a DataPoint named by its first cell; value cells are coerced to numbers
    and fall back to 0. Rows without a label are dropped.
    """
    if grid is None or len(grid) < 2:
        raise ImportRejected(INSUFFICIENT_DATA_MESSAGE)

    header = list(grid[0] or [])
    columns: List[int] = []
    categories: List[str] = []
    skipped: List[int] = []
    for col in range(1, len(header)):
        cell = header[col]
        if _is_blank(cell):
            skipped.append(col)
            continue
        name = _cell_text(cell)
        if name in categories:
            # first column with a given header wins
            skipped.append(col)
            continue
        columns.append(col)
        categories.append(name)

    if not categories:
        raise ImportRejected(NO_CATEGORIES_MESSAGE)

    data: List[DataPoint] = []
    dropped = 0
    for row in grid[1:]:
        row = list(row or [])
        if not row or all(_is_blank(c) for c in row) or _is_blank(row[0]):
            dropped += 1
            continue

        values = {
            cat: coerce_number(row[col]) if col < len(row) else 0
            for cat, col in zip(categories, columns)
        }
        data.append(DataPoint(name=_cell_text(row[0]), values=values))

    return ImportResult(categories=categories, data=data, dropped_rows=dropped, skipped_columns=skipped)


def import_spreadsheet(store: ConfigStore, file_bytes: bytes, filename: str) -> Optional[ImportResult]:
    """
    Decode an uploaded file and replace the session's dataset with it.
    Any problem becomes a notice and the current config stays as it was.
    """
    try:
        sheet = load_from_upload(file_bytes, filename)
    except Exception as e:
        logger.error("could not read %s: %s", filename, e)
        store.notices.error(f"Could not read '{filename}': {e}")
        return None

    try:
        result = normalize_grid(sheet.rows)
    except ImportRejected as e:
        logger.info("import of %s rejected: %s", filename, e)
        store.notices.warning(str(e))
        return None

    store.apply(replace_dataset, result.categories, result.data)
    logger.info(
        "imported %s / %s: %d categories, %d rows (%d dropped)",
        sheet.file_name, sheet.sheet_name, len(result.categories), len(result.data), result.dropped_rows,
    )
    store.notices.info(f"Imported {len(result.data)} rows and {len(result.categories)} categories.")
    return result
