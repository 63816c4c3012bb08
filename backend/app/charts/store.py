# backend/app/charts/store.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Literal, Optional

from .constants import default_config
from .errors import ChartConfigError
from .schemas import ChartConfig

logger = logging.getLogger(__name__)

NoticeLevel = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


class NoticeBoard:
    """Thread-safe queue of user-visible messages, drained by the UI on each run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: List[Notice] = []

    def post(self, level: NoticeLevel, message: str) -> None:
        with self._lock:
            self._items.append(Notice(level=level, message=message))

    def info(self, message: str) -> None:
        self.post("info", message)

    def warning(self, message: str) -> None:
        self.post("warning", message)

    def error(self, message: str) -> None:
        self.post("error", message)

    def drain(self) -> List[Notice]:
        with self._lock:
            items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class ConfigStore:
    """
    Holds the single current ChartConfig of an editing session.

    Consumers only ever see whole snapshots: `replace` swaps the object
    atomically and `apply` runs a pure edit against the current snapshot.
    """

    def __init__(self, initial: Optional[ChartConfig] = None, notices: Optional[NoticeBoard] = None) -> None:
        self._lock = threading.RLock()
        self._current = initial if initial is not None else default_config()
        self._revision = 0
        self.notices = notices if notices is not None else NoticeBoard()

    @property
    def current(self) -> ChartConfig:
        with self._lock:
            return self._current

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def replace(self, new_config: ChartConfig) -> None:
        if not isinstance(new_config, ChartConfig):
            raise TypeError(f"Expected ChartConfig, got {type(new_config).__name__}")
        with self._lock:
            self._current = new_config
            self._revision += 1
            logger.debug("config replaced (revision %s)", self._revision)

    def apply(self, operation: Callable[..., ChartConfig], *args: Any, **kwargs: Any) -> bool:
        """
        Run `operation(current, *args, **kwargs)` and install its result.
        A rejected edit becomes a warning notice and leaves the config unchanged.
        """
        with self._lock:
            before = self._current
            try:
                after = operation(before, *args, **kwargs)
            except ChartConfigError as e:
                logger.info("edit %s rejected: %s", getattr(operation, "__name__", operation), e)
                self.notices.warning(str(e))
                return False

            if after is before or after == before:
                return False
            self.replace(after)
            return True
