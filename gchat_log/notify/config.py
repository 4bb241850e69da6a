from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

import yaml

from .levels import Severity

if TYPE_CHECKING:  # pragma: no cover - circular import guard
    from ..config import Settings


class PayloadSchema(str, Enum):
    LEGACY = "cards"
    CARDS_V2 = "cardsV2"

    @classmethod
    def parse(cls, value: "str | PayloadSchema") -> "PayloadSchema":
        if isinstance(value, PayloadSchema):
            return value
        token = str(value).strip().lower().replace("_", "").replace("-", "")
        if token in {"legacy", "cards", "v1", "cardsv1"}:
            return cls.LEGACY
        if token in {"cardsv2", "v2"}:
            return cls.CARDS_V2
        raise ValueError(f"unsupported payload schema: {value}")


MENTION_LEVELS: tuple[str, ...] = tuple(severity.name.lower() for severity in reversed(Severity))


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1]
            return os.getenv(key, "")
        return value
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


def parse_webhook_urls(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated value (or a list) into trimmed, non-empty URLs."""

    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else [str(item) for item in value]
    return [item.strip() for item in items if item and item.strip()]


def _mention_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


@dataclass(slots=True)
class NotificationConfig:
    webhook_urls: list[str] = field(default_factory=list)
    mentions_by_level: dict[str, str] = field(default_factory=dict)
    default_mentions: str = ""
    environment_name: str = ""
    application_name: str = ""
    application_url: str = ""
    payload_schema: PayloadSchema = PayloadSchema.CARDS_V2
    schema_overrides: dict[str, PayloadSchema] = field(default_factory=dict)
    timeout: float = 10.0

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "NotificationConfig":
        expanded = _expand_env(data or {})
        webhook = expanded.get("webhook_urls", expanded.get("webhook_url"))
        mentions_raw = expanded.get("mentions", {}) or {}
        if not isinstance(mentions_raw, dict):
            raise ValueError("mentions must be a mapping of level to user ids")
        mentions = {
            str(level).strip().lower(): _mention_text(spec)
            for level, spec in mentions_raw.items()
            if str(level).strip().lower() != "default"
        }
        overrides_raw = expanded.get("schema_overrides", {}) or {}
        overrides = {
            str(url).strip(): PayloadSchema.parse(schema)
            for url, schema in overrides_raw.items()
        }
        return NotificationConfig(
            webhook_urls=parse_webhook_urls(webhook),
            mentions_by_level=mentions,
            default_mentions=_mention_text(mentions_raw.get("default")),
            environment_name=str(expanded.get("environment", "") or ""),
            application_name=str(expanded.get("app_name", "") or ""),
            application_url=str(expanded.get("app_url", "") or ""),
            payload_schema=PayloadSchema.parse(expanded.get("payload_schema") or PayloadSchema.CARDS_V2),
            schema_overrides=overrides,
            timeout=float(expanded.get("timeout", 10.0) or 10.0),
        )

    @staticmethod
    def from_settings(settings: "Settings") -> "NotificationConfig":
        mentions = {
            level: getattr(settings, f"google_chat_notify_{level}")
            for level in MENTION_LEVELS
        }
        return NotificationConfig(
            webhook_urls=parse_webhook_urls(settings.google_chat_webhook_url),
            mentions_by_level={level: spec for level, spec in mentions.items() if spec},
            default_mentions=settings.google_chat_notify_default,
            environment_name=settings.app_env,
            application_name=settings.app_name,
            application_url=settings.app_url,
            payload_schema=PayloadSchema.parse(settings.google_chat_payload_schema),
            timeout=settings.google_chat_timeout,
        )

    def schema_for(self, url: str) -> PayloadSchema:
        return self.schema_overrides.get(url, self.payload_schema)

    def destinations_by_schema(self) -> dict[PayloadSchema, list[str]]:
        groups: dict[PayloadSchema, list[str]] = {}
        for url in self.webhook_urls:
            groups.setdefault(self.schema_for(url), []).append(url)
        return groups


def load_notification_config(path: Path) -> NotificationConfig:
    if not path.exists():
        raise FileNotFoundError(f"notification config not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("notification config must be a mapping at the top level")
    return NotificationConfig.from_dict(raw)
