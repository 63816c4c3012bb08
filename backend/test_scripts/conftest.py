from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional

import pytest

from backend.app.charts.constants import default_config
from backend.app.charts.schemas import ChartConfig, DataPoint
from backend.app.charts.store import ConfigStore


class FakeLLM:
    """Stands in for the Gemini client; records prompts and returns canned text."""

    def __init__(self, answer: str = "translated", error: Optional[BaseException] = None,
                 gate: Optional[threading.Event] = None) -> None:
        self.answer = answer
        self.error = error
        self.gate = gate
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def config() -> ChartConfig:
    return default_config()


@pytest.fixture
def small_config() -> ChartConfig:
    return ChartConfig(
        title="Sales",
        subtitle="(Unit: USD)",
        source="Source: test",
        categories=["A", "B"],
        data=[
            DataPoint(name="r1", values={"A": 1, "B": 2}),
            DataPoint(name="r2", values={"A": 3, "B": 4}),
        ],
    )


@pytest.fixture
def store(small_config: ChartConfig) -> ConfigStore:
    return ConfigStore(small_config)


@pytest.fixture
def executor() -> Iterator[ThreadPoolExecutor]:
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def make_llm():
    return FakeLLM
