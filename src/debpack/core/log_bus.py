"""In-process bus that fans out log records to subscribers.

Used by tests and embedding drivers to capture build progress without
scraping stdout. Subscriber exceptions never reach the publisher.
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass

Subscriber = Callable[["LogRecord"], None]


@dataclass(frozen=True)
class LogRecord:
    level_name: str
    plain: str
    logger_name: str


class LogBus:
    def __init__(self) -> None:
        self._subs: list[tuple[str | None, Subscriber]] = []

    def subscribe(self, cb: Subscriber, *, level: str | None = None) -> Callable[[], None]:
        """Register `cb` for one level name, or all levels when None.

        Returns a callable that removes the subscription.
        """
        sub = (level, cb)
        self._subs.append(sub)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._subs.remove(sub)

        return _unsubscribe

    def publish(self, record: LogRecord) -> None:
        for level, cb in list(self._subs):
            if level is not None and level != record.level_name:
                continue
            try:
                cb(record)
            except Exception:
                # Must not go through the core logger (recursion).
                with contextlib.suppress(Exception):
                    sys.stderr.write(
                        "log subscriber raised; suppressed.\n" + traceback.format_exc()
                    )

    def clear(self) -> None:
        self._subs.clear()


_LOG_BUS: LogBus | None = None


def get_log_bus() -> LogBus:
    global _LOG_BUS
    if _LOG_BUS is None:
        _LOG_BUS = LogBus()
    return _LOG_BUS
