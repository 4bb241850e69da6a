"""Severity scale and the fixed per-severity display tables."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any


class Severity(IntEnum):
    DEBUG = 100
    INFO = 200
    NOTICE = 250
    WARNING = 300
    ERROR = 400
    CRITICAL = 500
    ALERT = 550
    EMERGENCY = 600


RED = "#ff1100"

LEVEL_COLORS: dict[Severity, str] = {
    Severity.EMERGENCY: RED,
    Severity.ALERT: RED,
    Severity.CRITICAL: RED,
    Severity.ERROR: RED,
    Severity.WARNING: "#ffc400",
    Severity.NOTICE: "#00aeff",
    Severity.INFO: "#48d62f",
    Severity.DEBUG: "#000000",
}

# stdlib has no NOTICE/ALERT/EMERGENCY; these are the thresholds we map from.
LOGGING_NOTICE = 25
LOGGING_ALERT = 55
LOGGING_EMERGENCY = 60

_LOGGING_THRESHOLDS: tuple[tuple[int, Severity], ...] = (
    (LOGGING_EMERGENCY, Severity.EMERGENCY),
    (LOGGING_ALERT, Severity.ALERT),
    (logging.CRITICAL, Severity.CRITICAL),
    (logging.ERROR, Severity.ERROR),
    (logging.WARNING, Severity.WARNING),
    (LOGGING_NOTICE, Severity.NOTICE),
    (logging.INFO, Severity.INFO),
)


def _as_severity(level: Any) -> Severity | None:
    if isinstance(level, bool) or not isinstance(level, int):
        return None
    try:
        return Severity(level)
    except ValueError:
        return None


def color_for(level: Any) -> str:
    severity = _as_severity(level)
    if severity is None:
        return RED
    return LEVEL_COLORS.get(severity, RED)


def level_key(level: Any) -> str:
    """Return the lower-case config key for ``level`` or ``""`` if unknown."""

    severity = _as_severity(level)
    if severity is None:
        return ""
    return severity.name.lower()


def parse_severity(value: str | int | Severity) -> Severity:
    if isinstance(value, Severity):
        return value
    if isinstance(value, int):
        return Severity(value)
    token = str(value).strip().upper()
    if token == "WARN":
        token = "WARNING"
    try:
        return Severity[token]
    except KeyError:
        raise ValueError(f"unsupported severity: {value}") from None


def from_logging_level(levelno: int) -> Severity:
    for threshold, severity in _LOGGING_THRESHOLDS:
        if levelno >= threshold:
            return severity
    return Severity.DEBUG
