from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import httpx

from .errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json; charset=UTF-8"}


class NotificationTransport(Protocol):
    def post_json(self, url: str, payload: dict[str, Any]) -> None:
        ...

    def close(self) -> None:
        ...


class HttpNotificationTransport(NotificationTransport):
    """Single-attempt JSON POST over ``httpx``; any non-2xx answer is an error."""

    def __init__(self, *, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpNotificationTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def post_json(self, url: str, payload: dict[str, Any]) -> None:
        try:
            response = self._client.post(url, json=payload, headers=JSON_HEADERS)
        except httpx.HTTPError as exc:
            raise TransportError(url, f"request failed: {exc}") from exc
        if not response.is_success:
            raise TransportError(
                url,
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )


@dataclass(slots=True)
class DispatchOutcome:
    url: str
    error: TransportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def dispatch(
    payload: dict[str, Any],
    urls: Sequence[str],
    sender: NotificationTransport,
) -> list[DispatchOutcome]:
    if not urls:
        raise ConfigurationError("no destination configured")
    outcomes: list[DispatchOutcome] = []
    for url in urls:
        try:
            sender.post_json(url, payload)
        except TransportError as exc:
            outcomes.append(DispatchOutcome(url, exc))
            continue
        except Exception as exc:  # noqa: BLE001
            error = TransportError(url, f"{exc.__class__.__name__}: {exc}")
            error.__cause__ = exc
            outcomes.append(DispatchOutcome(url, error))
            continue
        logger.debug("google chat payload delivered to %s", url)
        outcomes.append(DispatchOutcome(url))
    return outcomes
