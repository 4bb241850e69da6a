from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from gchat_log.notify import ConfigurationError, HttpNotificationTransport, TransportError, dispatch
from tests.fixtures.notify_helpers import DummyTransport

PAYLOAD = {"text": "hello"}
URLS = [
    "https://chat.example.com/one",
    "https://chat.example.com/two",
    "https://chat.example.com/three",
]


def test_failure_does_not_stop_other_destinations() -> None:
    transport = DummyTransport(failing={URLS[1]})

    outcomes = dispatch(PAYLOAD, URLS, transport)

    assert [url for url, _ in transport.calls] == URLS
    failed = [outcome for outcome in outcomes if not outcome.ok]
    assert len(failed) == 1
    assert failed[0].url == URLS[1]
    assert failed[0].error.status_code == 500
    assert [outcome.ok for outcome in outcomes] == [True, False, True]


def test_empty_destinations_fail_before_any_call(transport: DummyTransport) -> None:
    with pytest.raises(ConfigurationError):
        dispatch(PAYLOAD, [], transport)
    assert transport.calls == []


def test_duplicate_urls_receive_duplicate_sends(transport: DummyTransport) -> None:
    dispatch(PAYLOAD, [URLS[0], URLS[0]], transport)
    assert len(transport.calls) == 2


def test_unexpected_sender_errors_are_wrapped() -> None:
    class ExplodingTransport:
        def post_json(self, url: str, payload: dict[str, Any]) -> None:
            raise RuntimeError("socket closed")

        def close(self) -> None:
            return None

    outcomes = dispatch(PAYLOAD, URLS[:2], ExplodingTransport())

    assert all(isinstance(outcome.error, TransportError) for outcome in outcomes)
    assert isinstance(outcomes[0].error.__cause__, RuntimeError)
    assert "socket closed" in outcomes[0].error.reason


def _http_transport(handler) -> HttpNotificationTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpNotificationTransport(client=client)


def test_http_transport_posts_json() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "spaces/x/messages/y"})

    transport = _http_transport(handler)
    transport.post_json(URLS[0], PAYLOAD)

    assert seen[0].method == "POST"
    assert str(seen[0].url) == URLS[0]
    assert seen[0].headers["content-type"].startswith("application/json")
    assert json.loads(seen[0].read()) == PAYLOAD


def test_http_transport_raises_on_rejection() -> None:
    transport = _http_transport(lambda request: httpx.Response(400, text="Invalid JSON payload"))

    with pytest.raises(TransportError) as excinfo:
        transport.post_json(URLS[0], PAYLOAD)

    assert excinfo.value.status_code == 400
    assert excinfo.value.url == URLS[0]
    assert "Invalid JSON payload" in excinfo.value.reason


def test_http_transport_wraps_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as excinfo:
        _http_transport(handler).post_json(URLS[0], PAYLOAD)

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
