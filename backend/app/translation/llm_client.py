# backend/app/translation/llm_client.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from google import genai

from ..config import Settings


class LLMUnavailableError(RuntimeError):
    pass


@dataclass
class LLMClient:
    """
    Gemini client wrapper (Google GenAI SDK).
    - complete(prompt) -> str
    """
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    _client: Any = None

    @staticmethod
    def from_settings(settings: Settings) -> "LLMClient":
        if not settings.api_key:
            raise LLMUnavailableError("Set GEMINI_API_KEY or GOOGLE_API_KEY environment variable.")
        return LLMClient(model=settings.llm_model, api_key=settings.api_key)

    def _ensure_client(self) -> None:
        if self._client is not None:
            return
        if not self.api_key:
            raise LLMUnavailableError("Missing api_key.")
        self._client = genai.Client(api_key=self.api_key)

    def complete(self, prompt: str) -> str:
        """
        Returns model output as plain text ("" when the model returned nothing).
        """
        self._ensure_client()

        resp = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
        )

        # .text joins the text parts of the first candidate
        return getattr(resp, "text", None) or ""
