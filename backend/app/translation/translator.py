# backend/app/translation/translator.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional, Protocol, Set

from ..charts.constants import TARGET_LANGUAGES, TRANSLATABLE_FIELDS
from ..charts.editing import update_fields
from ..charts.store import ConfigStore

logger = logging.getLogger(__name__)

TRANSLATION_FAILED_MESSAGE = "AI Translation failed. Please try again."


class TranslationError(RuntimeError):
    pass


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> str: ...


def _build_prompt(text: str, target_language: str) -> str:
    return f"""
    Translate the following text to {target_language}.
    Context: professional market research reports on the technology industry.
    Use established industry terminology (e.g. semiconductor, CAGR, foundry, wafer).
    Return ONLY the translated text, with no explanations, notes or quotes.
    Text: "{text}"
    """


_QUOTE_PAIRS = (('"', '"'), ("'", "'"), ("“", "”"), ("「", "」"))


def _clean_answer(answer: str) -> str:
    text = (answer or "").strip()
    for opening, closing in _QUOTE_PAIRS:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            text = text[1:-1].strip()
    return text


class Translator:
    """One blocking translation call: text + target language -> translated text."""

    def __init__(self, client_factory: Callable[[], CompletionClient]):
        self._client_factory = client_factory
        self._client: Optional[CompletionClient] = None

    def translate(self, text: str, target_language: str) -> str:
        if target_language not in TARGET_LANGUAGES:
            raise TranslationError(f"Unsupported target language: {target_language}")
        if self._client is None:
            self._client = self._client_factory()

        answer = _clean_answer(self._client.complete(_build_prompt(text, target_language)))
        if not answer:
            raise TranslationError("The model returned an empty translation.")
        return answer


class TranslationManager:
    """
    Runs translations of the title / subtitle / source fields in the background.

    A field is busy while its request is in flight and a second request for
    it is refused; different fields may translate concurrently. The result
    overwrites whatever the field holds when the answer arrives.
    """

    def __init__(
        self,
        store: ConfigStore,
        translator: Translator,
        *,
        executor: Optional[Executor] = None,
    ) -> None:
        self.store = store
        self.translator = translator
        self.executor = executor or ThreadPoolExecutor(max_workers=3, thread_name_prefix="translate")
        self._lock = threading.Lock()
        self._busy: Set[str] = set()

    def is_busy(self, field: str) -> bool:
        with self._lock:
            return field in self._busy

    @property
    def busy_fields(self) -> Set[str]:
        with self._lock:
            return set(self._busy)

    def request(
        self,
        field: str,
        target_language: str,
        on_success: Optional[Callable[[str, str], None]] = None,
        on_failure: Optional[Callable[[str, BaseException], None]] = None,
    ) -> "Optional[Future[bool]]":
        """
        Start translating `field`. Returns None when nothing was started
        (empty text, or the field is already being translated); otherwise a
        future resolving to True on success and False on failure.
        """
        if field not in TRANSLATABLE_FIELDS:
            raise ValueError(f"Field '{field}' cannot be translated.")

        text = getattr(self.store.current, field)
        if not text or not text.strip():
            return None

        with self._lock:
            if field in self._busy:
                self.store.notices.warning(f"The {field} is already being translated.")
                return None
            self._busy.add(field)

        logger.info("translating %s to %s", field, target_language)
        try:
            return self.executor.submit(self._job, field, text, target_language, on_success, on_failure)
        except Exception:
            self._release(field)
            raise

    def _release(self, field: str) -> None:
        with self._lock:
            self._busy.discard(field)

    def _job(
        self,
        field: str,
        text: str,
        target_language: str,
        on_success: Optional[Callable[[str, str], None]],
        on_failure: Optional[Callable[[str, BaseException], None]],
    ) -> bool:
        try:
            translated = self.translator.translate(text, target_language)
            # last writer wins against edits made while the request was pending
            self.store.apply(update_fields, **{field: translated})
        except Exception as e:
            logger.error("translation of %s to %s failed: %s", field, target_language, e)
            self.store.notices.error(TRANSLATION_FAILED_MESSAGE)
            if on_failure is not None:
                on_failure(field, e)
            return False
        finally:
            self._release(field)

        if on_success is not None:
            on_success(field, translated)
        return True
