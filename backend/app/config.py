# backend/app/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[2]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    llm_model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    export_settle_ms: int = 100
    max_workers: int = 4
    log_level: str = "INFO"
    export_transparent: bool = False

    @property
    def export_settle_seconds(self) -> float:
        return self.export_settle_ms / 1000.0

    @property
    def translation_enabled(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def from_env(env_file: Optional[Path] = None) -> "Settings":
        load_dotenv(env_file or ROOT / ".env")
        return Settings(
            llm_model=os.getenv("CHART_LLM_MODEL") or "gemini-2.5-flash",
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            export_settle_ms=max(0, _env_int("CHART_EXPORT_SETTLE_MS", 100)),
            max_workers=max(1, _env_int("CHART_MAX_WORKERS", 4)),
            log_level=(os.getenv("CHART_LOG_LEVEL") or "INFO").upper(),
            export_transparent=(os.getenv("CHART_EXPORT_TRANSPARENT") or "").lower() in ("1", "true", "yes"),
        )


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
