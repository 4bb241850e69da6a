from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gchat_log.notify import LogRecord, NotificationConfig, Severity
from tests.fixtures.notify_helpers import DummyTransport


@pytest.fixture()
def transport() -> DummyTransport:
    return DummyTransport()


@pytest.fixture()
def config() -> NotificationConfig:
    return NotificationConfig(
        webhook_urls=["https://chat.example.com/hook-a"],
        mentions_by_level={"error": "42"},
        default_mentions="all",
        environment_name="production",
        application_name="billing",
        application_url="https://billing.example.com/invoices",
    )


@pytest.fixture()
def error_record() -> LogRecord:
    return LogRecord(
        level=Severity.ERROR,
        level_name="ERROR",
        message="boom",
        formatted_text="boom occurred",
        timestamp=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        extra={"retry_count": 3},
    )
