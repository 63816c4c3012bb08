"""Environment-driven settings."""

from __future__ import annotations

import pytest

from backend.app.config import Settings


def test_settings_from_env(monkeypatch, tmp_path) -> None:
    """Values come from the environment, with defaults for the rest."""

    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setenv("CHART_EXPORT_SETTLE_MS", "250")
    monkeypatch.setenv("CHART_LOG_LEVEL", "debug")
    monkeypatch.delenv("CHART_LLM_MODEL", raising=False)
    monkeypatch.delenv("CHART_MAX_WORKERS", raising=False)

    settings = Settings.from_env(tmp_path / "missing.env")

    assert settings.api_key == "k"
    assert settings.translation_enabled
    assert settings.export_settle_seconds == 0.25
    assert settings.log_level == "DEBUG"
    assert settings.llm_model == "gemini-2.5-flash"
    assert settings.max_workers == 4


def test_settings_reject_bad_integers(monkeypatch, tmp_path) -> None:
    """Non-numeric integers are configuration errors."""

    monkeypatch.setenv("CHART_MAX_WORKERS", "many")
    with pytest.raises(ValueError):
        Settings.from_env(tmp_path / "missing.env")


def test_transparent_export_flag(monkeypatch, tmp_path) -> None:
    """Transparent export is opt-in."""

    monkeypatch.delenv("CHART_EXPORT_TRANSPARENT", raising=False)
    assert Settings.from_env(tmp_path / "missing.env").export_transparent is False

    monkeypatch.setenv("CHART_EXPORT_TRANSPARENT", "true")
    assert Settings.from_env(tmp_path / "missing.env").export_transparent is True
