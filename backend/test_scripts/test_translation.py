"""Background translation of title / subtitle / source."""

from __future__ import annotations

import threading

import pytest

from backend.app.charts.editing import update_fields
from backend.app.charts.store import ConfigStore
from backend.app.config import Settings
from backend.app.session import ChartSession
from backend.app.translation.llm_client import LLMClient, LLMUnavailableError
from backend.app.translation.translator import TranslationError, TranslationManager, Translator


def _manager(store: ConfigStore, client, executor) -> TranslationManager:
    return TranslationManager(store, Translator(lambda: client), executor=executor)


def test_successful_translation_overwrites_field(store: ConfigStore, executor, make_llm) -> None:
    """The translated text replaces the field wholesale."""

    client = make_llm(answer='  "銷售額"  ')
    manager = _manager(store, client, executor)

    future = manager.request("title", "Traditional Chinese")

    assert future.result(timeout=5) is True
    assert store.current.title == "銷售額"
    assert store.current.subtitle == "(Unit: USD)"
    assert "Traditional Chinese" in client.prompts[0]
    assert '"Sales"' in client.prompts[0]
    assert not manager.is_busy("title")


def test_failed_translation_leaves_field_unchanged(store: ConfigStore, executor, make_llm) -> None:
    """Errors are reported as a notice and never escape the call."""

    failures = []
    manager = _manager(store, make_llm(error=RuntimeError("quota")), executor)

    future = manager.request("subtitle", "English", on_failure=lambda f, e: failures.append(f))

    assert future.result(timeout=5) is False
    assert store.current.subtitle == "(Unit: USD)"
    assert failures == ["subtitle"]
    assert [n.level for n in store.notices.drain()] == ["error"]
    assert not manager.is_busy("subtitle")


def test_empty_answer_counts_as_failure(store: ConfigStore, executor, make_llm) -> None:
    """A blank model answer does not wipe the field."""

    manager = _manager(store, make_llm(answer="   "), executor)

    assert manager.request("source", "English").result(timeout=5) is False
    assert store.current.source == "Source: test"


def test_blank_text_is_not_sent(store: ConfigStore, executor, make_llm) -> None:
    """Nothing to translate means no request."""

    client = make_llm()
    store.apply(update_fields, subtitle="  ")
    manager = _manager(store, client, executor)

    assert manager.request("subtitle", "English") is None
    assert client.prompts == []


def test_busy_field_refuses_second_request(store: ConfigStore, executor, make_llm) -> None:
    """While a field is translating, another request for it is ignored."""

    gate = threading.Event()
    client = make_llm(answer="Ventes", gate=gate)
    manager = _manager(store, client, executor)

    first = manager.request("title", "English")
    assert manager.is_busy("title")
    assert manager.request("title", "Simplified Chinese") is None
    assert [n.level for n in store.notices.drain()] == ["warning"]

    gate.set()
    assert first.result(timeout=5) is True
    assert len(client.prompts) == 1


def test_different_fields_translate_concurrently(store: ConfigStore, executor, make_llm) -> None:
    """Title and source requests may overlap."""

    gate = threading.Event()
    manager = _manager(store, make_llm(answer="done", gate=gate), executor)

    title = manager.request("title", "English")
    source = manager.request("source", "English")
    assert manager.busy_fields == {"title", "source"}

    gate.set()
    assert title.result(timeout=5) and source.result(timeout=5)
    assert store.current.title == "done"
    assert store.current.source == "done"
    assert manager.busy_fields == set()


def test_result_wins_over_edit_made_while_pending(store: ConfigStore, executor, make_llm) -> None:
    """Last writer wins: a manual edit during the request is overwritten."""

    gate = threading.Event()
    manager = _manager(store, make_llm(answer="Translated", gate=gate), executor)

    future = manager.request("title", "English")
    store.apply(update_fields, title="typed meanwhile", theme="dark")
    gate.set()
    future.result(timeout=5)

    assert store.current.title == "Translated"
    assert store.current.theme.value == "dark"


def test_unknown_field_is_a_programming_error(store: ConfigStore, executor, make_llm) -> None:
    """Only the three text fields are translatable."""

    with pytest.raises(ValueError):
        _manager(store, make_llm(), executor).request("categories", "English")


def test_unsupported_language_is_rejected(make_llm) -> None:
    """Targets are limited to the three offered languages."""

    with pytest.raises(TranslationError):
        Translator(lambda: make_llm()).translate("hello", "Klingon")


def test_session_without_api_key_reports_failure() -> None:
    """With no credentials the request fails cleanly."""

    session = ChartSession(Settings(api_key=None))
    try:
        before = session.config.title
        future = session.translations.request("title", "English")
        assert future.result(timeout=5) is False
        assert session.config.title == before
        assert [n.level for n in session.store.notices.drain()] == ["error"]
    finally:
        session.close()


def test_llm_client_built_from_settings() -> None:
    """The Gemini client takes its model and key from the session settings."""

    client = LLMClient.from_settings(Settings(api_key="k", llm_model="gemini-test"))
    assert client.model == "gemini-test"
    assert client.api_key == "k"

    with pytest.raises(LLMUnavailableError):
        LLMClient.from_settings(Settings(api_key=None))
