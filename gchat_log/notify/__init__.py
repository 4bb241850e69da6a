from __future__ import annotations

from .config import NotificationConfig, PayloadSchema, load_notification_config, parse_webhook_urls
from .dispatcher import DispatchOutcome, HttpNotificationTransport, NotificationTransport, dispatch
from .errors import (
    ConfigurationError,
    DeliveryError,
    NotifierError,
    SerializationError,
    TransportError,
)
from .levels import Severity, color_for, from_logging_level
from .mentions import render_mentions, resolve_mentions
from .message_builder import LogRecord, MessageBuilder, build_message
from .notifier import Notifier

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "DispatchOutcome",
    "HttpNotificationTransport",
    "LogRecord",
    "MessageBuilder",
    "NotificationConfig",
    "NotificationTransport",
    "Notifier",
    "NotifierError",
    "PayloadSchema",
    "SerializationError",
    "Severity",
    "TransportError",
    "build_message",
    "color_for",
    "dispatch",
    "from_logging_level",
    "load_notification_config",
    "parse_webhook_urls",
    "render_mentions",
    "resolve_mentions",
]
