from __future__ import annotations

from typing import Any, Optional

from .config import NotificationConfig
from .dispatcher import DispatchOutcome, NotificationTransport, dispatch
from .errors import ConfigurationError, DeliveryError
from .message_builder import LogRecord, MessageBuilder


class Notifier:
    """Build one payload per schema and fan it out to every configured webhook.

    Failed destinations do not stop the others; once every destination has
    been attempted a :class:`DeliveryError` lists the failures.
    """

    def __init__(
        self,
        *,
        config: NotificationConfig,
        transport: NotificationTransport,
        builder: Optional[MessageBuilder] = None,
        logger: Any = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.builder = builder or MessageBuilder(config)
        self.logger = logger

    def notify(self, record: LogRecord) -> list[DispatchOutcome]:
        groups = self.config.destinations_by_schema()
        if not groups:
            raise ConfigurationError("no destination configured")
        message = self.builder.compose(record)
        outcomes: list[DispatchOutcome] = []
        for schema, urls in groups.items():
            payload = self.builder.render(message, schema)
            for outcome in dispatch(payload, urls, self.transport):
                self._report(outcome, record, schema.value)
                outcomes.append(outcome)
        failures = [outcome for outcome in outcomes if not outcome.ok]
        if failures:
            raise DeliveryError(failures, total=len(outcomes))
        return outcomes

    def close(self) -> None:
        if hasattr(self.transport, "close"):
            self.transport.close()

    def _report(self, outcome: DispatchOutcome, record: LogRecord, schema: str) -> None:
        if self.logger is None:
            return
        if outcome.ok:
            self.logger.info(
                "notification_sent",
                url=outcome.url,
                schema=schema,
                record_level=record.level_name,
            )
        else:
            self.logger.error(
                "notification_failed",
                url=outcome.url,
                schema=schema,
                record_level=record.level_name,
                status=outcome.error.status_code,
                error=outcome.error.reason,
            )
