"""``logging`` integration: a handler that posts records to Google Chat."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from .notify.config import NotificationConfig
from .notify.dispatcher import HttpNotificationTransport
from .notify.levels import from_logging_level
from .notify.message_builder import Enricher, LogRecord, MessageBuilder
from .notify.notifier import Notifier

EXTRA_FIELDS_ATTR = "chat_fields"
# Loggers that fire while a notification is in flight.
IGNORED_LOGGERS: tuple[str, ...] = (__name__.split(".")[0], "httpx", "httpcore")


def _is_ignored(name: str) -> bool:
    return any(name == prefix or name.startswith(prefix + ".") for prefix in IGNORED_LOGGERS)


class GoogleChatHandler(logging.Handler):
    def __init__(
        self,
        notifier: Optional[Notifier] = None,
        *,
        config: Optional[NotificationConfig] = None,
        level: int = logging.DEBUG,
        enricher: Optional[Enricher] = None,
    ) -> None:
        super().__init__(level)
        if notifier is None:
            if config is None:
                raise ValueError("either a notifier or a notification config is required")
            notifier = Notifier(
                config=config,
                transport=HttpNotificationTransport(timeout=config.timeout),
                builder=MessageBuilder(config, enricher=enricher),
            )
        self.notifier = notifier
        self._local = threading.local()

    def to_chat_record(self, record: logging.LogRecord) -> LogRecord:
        severity = from_logging_level(record.levelno)
        extra: Any = getattr(record, EXTRA_FIELDS_ATTR, None)
        return LogRecord(
            level=severity,
            level_name=severity.name,
            message=record.getMessage(),
            formatted_text=self.format(record),
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
            extra=dict(extra) if extra else {},
        )

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(self._local, "emitting", False) or _is_ignored(record.name):
            return
        self._local.emitting = True
        try:
            self.notifier.notify(self.to_chat_record(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)
        finally:
            self._local.emitting = False

    def close(self) -> None:
        try:
            self.notifier.close()
        finally:
            super().close()
