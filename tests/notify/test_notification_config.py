from __future__ import annotations

from pathlib import Path

import pytest

from gchat_log.config import Settings
from gchat_log.notify import NotificationConfig, PayloadSchema, load_notification_config, parse_webhook_urls


def test_parse_webhook_urls_from_string_and_list() -> None:
    assert parse_webhook_urls(" https://a ,https://b,, ,https://a") == ["https://a", "https://b", "https://a"]
    assert parse_webhook_urls(["https://a ", ""]) == ["https://a"]
    assert parse_webhook_urls(None) == []
    assert parse_webhook_urls("") == []


def test_payload_schema_parse() -> None:
    assert PayloadSchema.parse("cardsV2") is PayloadSchema.CARDS_V2
    assert PayloadSchema.parse("legacy") is PayloadSchema.LEGACY
    assert PayloadSchema.parse("cards") is PayloadSchema.LEGACY
    with pytest.raises(ValueError):
        PayloadSchema.parse("cardsV3")


def test_load_notification_config_expands_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAT_HOOK", "https://chat.example.com/secret")
    config_yaml = tmp_path / "notifications.yaml"
    config_yaml.write_text(
        """
webhook_urls:
  - "${CHAT_HOOK}"
  - " https://chat.example.com/legacy "
payload_schema: cardsV2
schema_overrides:
  https://chat.example.com/legacy: legacy
environment: staging
app_name: billing
app_url: https://billing.example.com
timeout: 5
mentions:
  default: all
  error: "42,43"
  critical:
    - "7"
    - "8"
""".strip(),
        encoding="utf-8",
    )

    config = load_notification_config(config_yaml)

    assert config.webhook_urls == ["https://chat.example.com/secret", "https://chat.example.com/legacy"]
    assert config.default_mentions == "all"
    assert config.mentions_by_level == {"error": "42,43", "critical": "7,8"}
    assert config.environment_name == "staging"
    assert config.timeout == 5.0
    assert config.destinations_by_schema() == {
        PayloadSchema.CARDS_V2: ["https://chat.example.com/secret"],
        PayloadSchema.LEGACY: ["https://chat.example.com/legacy"],
    }


def test_load_notification_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_notification_config(tmp_path / "missing.yaml")


def test_load_notification_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_notification_config(path)


def test_from_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_CHAT_WEBHOOK_URL", "https://a, https://b")
    monkeypatch.setenv("GOOGLE_CHAT_NOTIFY_DEFAULT", "all")
    monkeypatch.setenv("GOOGLE_CHAT_NOTIFY_ERROR", "42")
    monkeypatch.setenv("GOOGLE_CHAT_PAYLOAD_SCHEMA", "legacy")
    monkeypatch.setenv("APP_ENV", "production")

    config = NotificationConfig.from_settings(Settings(_env_file=None))

    assert config.webhook_urls == ["https://a", "https://b"]
    assert config.default_mentions == "all"
    assert config.mentions_by_level == {"error": "42"}
    assert config.payload_schema is PayloadSchema.LEGACY
    assert config.environment_name == "production"
