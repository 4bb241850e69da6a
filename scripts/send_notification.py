from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from functools import partialmethod
from pathlib import Path
from typing import Any, Sequence

from gchat_log.config import get_settings
from gchat_log.notify import (
    DeliveryError,
    HttpNotificationTransport,
    LogRecord,
    MessageBuilder,
    NotificationConfig,
    Notifier,
    NotifierError,
    PayloadSchema,
    load_notification_config,
)
from gchat_log.notify.levels import parse_severity

EVENT_LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


class EventLog:
    """Writes `notification_*` events as JSON lines to stderr and an optional file.

    stdout is left for dry-run payloads.
    """

    def __init__(self, *, threshold: str = "info", path: Path | None = None, stream=None) -> None:
        self.threshold = EVENT_LEVELS[threshold]
        self.stream = stream or sys.stderr
        self.handle = None
        if path:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.handle = path.open("a", encoding="utf-8")

    def event(self, level: str, name: str, /, **fields: Any) -> None:
        if EVENT_LEVELS[level] < self.threshold:
            return
        line = json.dumps(
            {"ts": datetime.now(timezone.utc).isoformat(), "level": level.upper(), "event": name, **fields},
            ensure_ascii=False,
            default=str,
        )
        for target in (self.stream, self.handle):
            if target is not None:
                target.write(line + "\n")
                target.flush()

    debug = partialmethod(event, "debug")
    info = partialmethod(event, "info")
    warn = partialmethod(event, "warn")
    error = partialmethod(event, "error")

    def close(self) -> None:
        if self.handle:
            self.handle.close()
            self.handle = None


def _parse_field(raw: str) -> tuple[str, Any]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    return key.strip(), parsed


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a log notification to Google Chat webhooks")
    parser.add_argument("--config", type=Path, help="YAML notification config (defaults to environment settings)")
    parser.add_argument("--level", type=str, default="info", help="Severity name, e.g. error or warning")
    parser.add_argument("--message", type=str, default="Test notification", help="Message summary")
    parser.add_argument("--text", type=str, help="Full message text (defaults to the message)")
    parser.add_argument("--field", action="append", type=_parse_field, default=[], help="Extra field as key=value (repeatable)")
    parser.add_argument("--schema", type=PayloadSchema.parse, help="Override payload schema (cards or cardsV2)")
    parser.add_argument("--dry-run", action="store_true", help="Print payloads without sending")
    parser.add_argument("--log-file", type=Path, help="Also append JSON events to this file")
    parser.add_argument("--quiet", action="store_true", help="Only emit WARN/ERROR events")
    parser.add_argument("--verbose", action="store_true", help="Emit DEBUG events")
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> NotificationConfig:
    if args.config:
        config = load_notification_config(args.config)
    else:
        config = NotificationConfig.from_settings(get_settings())
    if args.schema is not None:
        config.payload_schema = args.schema
        config.schema_overrides.clear()
    return config


def _build_record(args: argparse.Namespace) -> LogRecord:
    severity = parse_severity(args.level)
    return LogRecord(
        level=severity,
        level_name=severity.name,
        message=args.message,
        formatted_text=args.text or args.message,
        timestamp=datetime.now(timezone.utc),
        extra=dict(args.field),
    )


def run(args: argparse.Namespace, logger: EventLog) -> bool:
    config = _load_config(args)
    record = _build_record(args)
    builder = MessageBuilder(config)
    if args.dry_run:
        groups = config.destinations_by_schema() or {config.payload_schema: []}
        message = builder.compose(record)
        for schema, urls in groups.items():
            logger.info("notification_dry_run", schema=schema, urls=urls)
            print(json.dumps(builder.render(message, schema), ensure_ascii=False, indent=2))
        return True
    notifier = Notifier(
        config=config,
        transport=HttpNotificationTransport(timeout=config.timeout),
        builder=builder,
        logger=logger,
    )
    try:
        notifier.notify(record)
    except DeliveryError as exc:
        logger.error("notification_incomplete", failed=len(exc.failures), total=exc.total)
        return False
    finally:
        notifier.close()
    return True


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    threshold = "info"
    if args.verbose:
        threshold = "debug"
    if args.quiet:
        threshold = "warn"

    logger = EventLog(threshold=threshold, path=args.log_file)
    try:
        success = run(args, logger)
    except (NotifierError, ValueError, FileNotFoundError) as exc:
        logger.error("notification_error", error=str(exc))
        success = False
    finally:
        logger.close()
    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
