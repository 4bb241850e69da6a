from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover - circular import guard
    from .dispatcher import DispatchOutcome


class NotifierError(Exception):
    """Base error for Google Chat notification failures."""


class ConfigurationError(NotifierError):
    """Raised when the notifier is missing required configuration."""


class SerializationError(NotifierError):
    """Raised when an extra log field cannot be rendered as text."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"extra field '{field}' could not be serialized: {reason}")
        self.field = field
        self.reason = reason


class TransportError(NotifierError):
    """Raised when a destination rejects the request or the call fails."""

    def __init__(self, url: str, reason: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class DeliveryError(TransportError):
    """Raised after fan-out when one or more destinations failed."""

    def __init__(self, failures: Sequence["DispatchOutcome"], total: int) -> None:
        urls = ", ".join(outcome.url for outcome in failures)
        super().__init__(urls, f"{len(failures)} of {total} destinations failed")
        self.failures = list(failures)
        self.total = total
