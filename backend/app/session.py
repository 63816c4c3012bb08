# backend/app/session.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Optional

import plotly.graph_objects as go

from .charts.derivation import ChartSpec, build_chart_spec
from .charts.export import TRANSPARENT_BACKGROUND, ImageExporter, Rasterizer, plotly_rasterizer
from .charts.rendering import build_figure
from .charts.schemas import ChartConfig
from .charts.store import ConfigStore
from .config import Settings
from .ingestion.normalize import ImportResult, import_spreadsheet
from .translation.llm_client import LLMClient
from .translation.translator import TranslationManager, Translator


class ChartSession:
    """Everything one editing session owns: the config store and its background jobs."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        initial: Optional[ChartConfig] = None,
        translator: Optional[Translator] = None,
        rasterizer: Rasterizer = plotly_rasterizer,
    ) -> None:
        self.settings = settings or Settings()
        self.store = ConfigStore(initial)
        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="chart-session",
        )
        self.translations = TranslationManager(
            self.store,
            translator or Translator(partial(LLMClient.from_settings, self.settings)),
            executor=self._executor,
        )
        self.exporter = ImageExporter(
            self.store.notices,
            rasterizer=rasterizer,
            executor=self._executor,
            settle_seconds=self.settings.export_settle_seconds,
            background=TRANSPARENT_BACKGROUND if self.settings.export_transparent else None,
        )

    @property
    def config(self) -> ChartConfig:
        return self.store.current

    def spec(self) -> ChartSpec:
        return build_chart_spec(self.store.current)

    def figure(self) -> go.Figure:
        return build_figure(self.spec())

    def import_file(self, file_bytes: bytes, filename: str) -> Optional[ImportResult]:
        return import_spreadsheet(self.store, file_bytes, filename)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
