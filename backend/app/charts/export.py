# backend/app/charts/export.py
from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

import plotly.graph_objects as go
import plotly.io as pio

from .constants import EXPORT_SCALE
from .errors import ExportError
from .store import NoticeBoard

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "trendforce"
EXPORT_FAILED_MESSAGE = "Failed to export image. Please try again."
TRANSPARENT_BACKGROUND = "rgba(0,0,0,0)"

Rasterizer = Callable[..., bytes]


@dataclass(frozen=True)
class ExportedImage:
    filename: str
    data: bytes
    mime: str = "image/png"


def export_filename(timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{EXPORT_PREFIX}-{timestamp_ms}.png"


def with_background(figure: Any, background: Optional[str]) -> Any:
    """Copy of `figure` painted with `background`; None keeps the theme colours."""
    if background is None:
        return figure
    figure = go.Figure(figure)
    figure.update_layout(paper_bgcolor=background, plot_bgcolor=background)
    return figure


def plotly_rasterizer(figure: Any, *, scale: int = EXPORT_SCALE, background: Optional[str] = None) -> bytes:
    """Kaleido-backed PNG export of a plotly figure."""
    return pio.to_image(with_background(figure, background), format="png", scale=scale)


class ImageExporter:
    """
    Rasterizes a rendered figure off the UI thread.

    Each submission waits `settle_seconds` so any re-render triggered by the
    last edit has finished, then rasterizes once. Success hands an
    ExportedImage to `on_success`; failure posts a notice and produces nothing.
    """

    def __init__(
        self,
        notices: NoticeBoard,
        *,
        rasterizer: Rasterizer = plotly_rasterizer,
        executor: Optional[Executor] = None,
        settle_seconds: float = 0.1,
        scale: int = EXPORT_SCALE,
        background: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.notices = notices
        self.rasterizer = rasterizer
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="chart-export")
        self.settle_seconds = settle_seconds
        self.scale = scale
        self.background = background
        self.clock = clock

    def _run(self, figure: Any) -> ExportedImage:
        if self.settle_seconds > 0:
            time.sleep(self.settle_seconds)
        try:
            options = {"scale": self.scale}
            if self.background is not None:
                options["background"] = self.background
            data = self.rasterizer(figure, **options)
        except Exception as e:
            raise ExportError(f"Rasterization failed: {e}") from e
        if not data:
            raise ExportError("Rasterizer returned no image data.")
        return ExportedImage(filename=export_filename(int(self.clock() * 1000)), data=data)

    def _job(
        self,
        figure: Any,
        on_success: Optional[Callable[[ExportedImage], None]],
        on_failure: Optional[Callable[[BaseException], None]],
    ) -> Optional[ExportedImage]:
        try:
            image = self._run(figure)
        except Exception as e:
            logger.error("image export failed: %s", e)
            self.notices.error(EXPORT_FAILED_MESSAGE)
            if on_failure is not None:
                on_failure(e)
            return None

        logger.info("exported %s (%d bytes)", image.filename, len(image.data))
        if on_success is not None:
            on_success(image)
        return image

    def submit(
        self,
        figure: Any,
        on_success: Optional[Callable[[ExportedImage], None]] = None,
        on_failure: Optional[Callable[[BaseException], None]] = None,
    ) -> "Future[Optional[ExportedImage]]":
        """Queue an export; the future resolves to the image, or None on failure."""
        return self.executor.submit(self._job, figure, on_success, on_failure)
