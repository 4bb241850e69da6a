from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from .config import NotificationConfig, PayloadSchema
from .errors import SerializationError
from .levels import Severity, color_for
from .mentions import resolve_mentions

MAX_TEXT_LENGTH = 4096
CARD_ID = "info-card-id"
SECTION_HEADER = "Details"
UNCOLLAPSIBLE_WIDGETS = 3

ICON_ENVIRONMENT = "BOOKMARK"
ICON_LEVEL = "TICKET"
ICON_TIMESTAMP = "CLOCK"
ICON_URL = "BUS"
ICON_NAMED_FIELD = "CONFIRMATION_NUMBER_ICON"
ICON_POSITIONAL_FIELD = "DESCRIPTION"

Enricher = Callable[[], Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class LogRecord:
    level: Severity | int
    level_name: str
    message: str
    formatted_text: str
    timestamp: datetime
    extra: Mapping[Any, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Widget:
    text: str
    icon: str


@dataclass(slots=True)
class ChatMessage:
    text: str
    title: str
    subtitle: str
    widgets: list[Widget] = field(default_factory=list)


def truncate_text(text: str, limit: int = MAX_TEXT_LENGTH) -> str:
    return text[:limit]


def _ucwords(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def title_case_key(key: str) -> str:
    return _ucwords(key.replace("_", " "))


def _is_positional(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, (int, float)):
        return True
    try:
        return math.isfinite(float(str(key)))
    except ValueError:
        return False


def _stringify(key: Any, value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(key), str(exc)) from exc


def extra_field_widget(key: Any, value: Any) -> Widget:
    text = _stringify(key, value)
    if _is_positional(key):
        return Widget(text=text, icon=ICON_POSITIONAL_FIELD)
    label = title_case_key(str(key))
    return Widget(text=f"<b>{label}:</b> {text}", icon=ICON_NAMED_FIELD)


def _format_timestamp(value: datetime) -> str:
    return value.isoformat()


def _environment_badge(name: str) -> str:
    name = (name or "").strip()
    return f"{_ucwords(name) if name else 'NA'} [Env]"


def _level_label(record: LogRecord) -> str:
    return f"<font color='{color_for(record.level)}'>{record.level_name}</font>"


def render_legacy(message: ChatMessage) -> dict[str, Any]:
    return {
        "text": message.text,
        "cards": [
            {
                "sections": [
                    {
                        "widgets": [
                            {"textParagraph": {"text": widget.text}}
                            for widget in message.widgets
                        ]
                    }
                ]
            }
        ],
    }


def render_cards_v2(message: ChatMessage) -> dict[str, Any]:
    return {
        "text": message.text,
        "cardsV2": [
            {
                "cardId": CARD_ID,
                "card": {
                    "header": {
                        "title": message.title,
                        "subtitle": message.subtitle,
                    },
                    "sections": {
                        "header": SECTION_HEADER,
                        "collapsible": True,
                        "uncollapsibleWidgetsCount": UNCOLLAPSIBLE_WIDGETS,
                        "widgets": [
                            {
                                "decoratedText": {
                                    "startIcon": {"knownIcon": widget.icon},
                                    "text": widget.text,
                                }
                            }
                            for widget in message.widgets
                        ],
                    },
                },
            }
        ],
    }


RENDERERS: dict[PayloadSchema, Callable[[ChatMessage], dict[str, Any]]] = {
    PayloadSchema.LEGACY: render_legacy,
    PayloadSchema.CARDS_V2: render_cards_v2,
}


class MessageBuilder:
    def __init__(self, config: NotificationConfig, *, enricher: Optional[Enricher] = None) -> None:
        self.config = config
        self.enricher = enricher

    def compose(self, record: LogRecord) -> ChatMessage:
        prefix = resolve_mentions(record.level, self.config)
        widgets = [
            Widget(_environment_badge(self.config.environment_name), ICON_ENVIRONMENT),
            Widget(_level_label(record), ICON_LEVEL),
            Widget(_format_timestamp(record.timestamp), ICON_TIMESTAMP),
        ]
        if self.config.application_url:
            widgets.append(Widget(self.config.application_url, ICON_URL))
        widgets.extend(self._extra_widgets(record))
        return ChatMessage(
            text=truncate_text(prefix + record.formatted_text),
            title=f"{record.level_name}: {record.message}",
            subtitle=self.config.application_name or "",
            widgets=widgets,
        )

    def render(self, message: ChatMessage, schema: PayloadSchema | str | None = None) -> dict[str, Any]:
        selected = PayloadSchema.parse(schema) if schema is not None else self.config.payload_schema
        return RENDERERS[selected](message)

    def build(self, record: LogRecord, schema: PayloadSchema | str | None = None) -> dict[str, Any]:
        return self.render(self.compose(record), schema)

    def _extra_fields(self, record: LogRecord) -> list[tuple[Any, Any]]:
        fields = list((record.extra or {}).items())
        if self.enricher is None:
            return fields
        enriched = self.enricher()
        if not isinstance(enriched, Mapping):
            raise SerializationError("extra", "enrichment callback must return a mapping")
        fields.extend(enriched.items())
        return fields

    def _extra_widgets(self, record: LogRecord) -> list[Widget]:
        return [extra_field_widget(key, value) for key, value in self._extra_fields(record)]


def build_message(
    record: LogRecord,
    config: NotificationConfig,
    schema: PayloadSchema | str | None = None,
    *,
    enricher: Optional[Enricher] = None,
) -> dict[str, Any]:
    return MessageBuilder(config, enricher=enricher).build(record, schema)
