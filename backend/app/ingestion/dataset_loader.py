from __future__ import annotations

import csv
import io
import math
import numpy as np
import pandas as pd

from dataclasses import dataclass
from typing import Any, List, Union
from pathlib import Path

Cell = Union[str, int, float, None]
Grid = List[List[Cell]]


@dataclass
class SheetGrid:

    file_name: str
    sheet_name: str
    rows: Grid


def _to_cell(value: Any) -> Cell:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if not isinstance(value, (str, bytes)) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date().isoformat() if value == value.normalize() else value.isoformat()
    if isinstance(value, (np.integer, np.floating, np.bool_)):
        value = value.item()
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _frame_to_grid(df: pd.DataFrame) -> Grid:
    # spreadsheet readers skip blank rows; do the same
    df = df.dropna(how = 'all')
    grid: Grid = [ ]
    for row in df.itertuples(index = False, name = None):
        cells = [_to_cell(v) for v in row]
        while cells and cells[-1] is None:
            cells.pop()
        if cells:
            grid.append(cells)
    return grid


def _read_excel_first_sheet(source: Union[str, Path, io.BytesIO], file_name: str) -> SheetGrid:
    xls = pd.ExcelFile(source)
    sheet_name = xls.sheet_names[0]
    df = pd.read_excel(xls, sheet_name = sheet_name, header = None)

    return SheetGrid(file_name = file_name, sheet_name = str(sheet_name), rows = _frame_to_grid(df))


def _read_csv(source: Union[str, Path, io.BytesIO], file_name: str) -> SheetGrid:
    if isinstance(source, io.BytesIO):
        raw = source.getvalue()
    else:
        raw = Path(source).read_bytes()
    text = raw.decode('utf-8-sig')

    # rows may be wider than the header line; size the frame to the widest one
    width = max((len(r) for r in csv.reader(io.StringIO(text))), default = 0)
    if width == 0:
        df = pd.DataFrame()
    else:
        df = pd.read_csv(io.StringIO(text), header = None, names = list(range(width)), skip_blank_lines = True)

    return SheetGrid(file_name = file_name, sheet_name = 'CSV', rows = _frame_to_grid(df))


def load_from_path(path: Union[str, Path]) -> SheetGrid:

    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f'File not found: {path}')

    suffix = path.suffix.lower()

    if suffix in ['.xlsx', '.xls']:
        return _read_excel_first_sheet(path, file_name = path.name)
    elif suffix == '.csv':
        return _read_csv(path, file_name = path.name)
    else:
        raise ValueError(f'Unsupported file type: {suffix}. Supported: .xlsx, .xls, .csv')


def load_from_upload(file_bytes: bytes, filename: str) -> SheetGrid:

    suffix = Path(filename).suffix.lower()
    buffer = io.BytesIO(file_bytes)

    if suffix in ['.xlsx', '.xls']:
        return _read_excel_first_sheet(buffer, file_name = filename)
    elif suffix == '.csv':
        return _read_csv(buffer, file_name = filename)
    else:
        raise ValueError(f'Unsupported file type: {suffix}. Supported: .xlsx, .xls, .csv')
