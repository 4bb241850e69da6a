"""Google Chat webhook notifications for application log records."""

from __future__ import annotations

from .handler import GoogleChatHandler
from .notify import (
    ConfigurationError,
    DeliveryError,
    LogRecord,
    MessageBuilder,
    NotificationConfig,
    Notifier,
    PayloadSchema,
    SerializationError,
    Severity,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "GoogleChatHandler",
    "LogRecord",
    "MessageBuilder",
    "NotificationConfig",
    "Notifier",
    "PayloadSchema",
    "SerializationError",
    "Severity",
    "TransportError",
]
