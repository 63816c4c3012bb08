# backend/app/charts/errors.py
from __future__ import annotations


class ChartConfigError(ValueError):
    """An edit was rejected; the configuration is left as it was."""
    pass


class LastCategoryError(ChartConfigError):
    pass


class DuplicateCategoryError(ChartConfigError):
    pass


class ImportRejected(ChartConfigError):
    pass


class ExportError(RuntimeError):
    pass
