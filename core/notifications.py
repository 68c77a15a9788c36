"""
User notification sinks.

Every store-backed command reports its outcome through a sink with a single
method, notify(kind, message). Notifications are advisory and
fire-and-forget: nothing waits for them and nothing reads them back except
the UI.

Kinds:
    "success" - command applied
    "error"   - command failed, local state unchanged
"""

from __future__ import annotations

import threading
from typing import List, Tuple

from flask import flash, has_request_context

from logging_config import get_logger


logger = get_logger(__name__)

SUCCESS = "success"
ERROR = "error"
KINDS = (SUCCESS, ERROR)


class Notifier:
    """Base notification sink."""

    def notify(self, kind: str, message: str) -> None:
        raise NotImplementedError

    def success(self, message: str) -> None:
        self.notify(SUCCESS, message)

    def error(self, message: str) -> None:
        self.notify(ERROR, message)


class FlashNotifier(Notifier):
    """
    Sends notifications to the Flask flash queue of the current request.

    Outside a request (CLI scripts, background work) the message is only
    logged.
    """

    def notify(self, kind: str, message: str) -> None:
        if kind not in KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")

        if kind == ERROR:
            logger.warning(f"Notify [{kind}]: {message}")
        else:
            logger.info(f"Notify [{kind}]: {message}")

        if has_request_context():
            flash(message, kind)


class RecordingNotifier(Notifier):
    """Keeps every notification in memory. Used by tests and scripts."""

    def __init__(self):
        self._lock = threading.Lock()
        self.messages: List[Tuple[str, str]] = []

    def notify(self, kind: str, message: str) -> None:
        if kind not in KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")
        with self._lock:
            self.messages.append((kind, message))

    @property
    def last(self) -> Tuple[str, str]:
        return self.messages[-1]

    def clear(self) -> None:
        with self._lock:
            self.messages.clear()
