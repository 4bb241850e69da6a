"""Mention prefix rendering for Google Chat messages.

User ids are configured per severity plus a default list applied to every
severity. The literal ``all`` (any case) maps to a single ``<users/all>`` tag
which always comes first, however often it is listed.
"""

from __future__ import annotations

from typing import Any

from .config import NotificationConfig
from .levels import level_key

ALL_USERS_TAG = "<users/all> "


def _user_tag(user_id: str) -> str:
    return f"<users/{user_id}> "


def combine_specs(default_spec: str, level_spec: str) -> str:
    default_spec = (default_spec or "").strip()
    level_spec = (level_spec or "").strip()
    if default_spec and level_spec:
        return f"{default_spec},{level_spec}"
    return default_spec or level_spec


def mention_tags(spec: str) -> str:
    if not spec:
        return ""
    seen: set[str] = set()
    everyone = ""
    tags: list[str] = []
    for token in spec.split(","):
        if not token or token in seen:
            continue
        seen.add(token)
        if token.lower() == "all":
            everyone = ALL_USERS_TAG
            continue
        tags.append(_user_tag(token))
    return everyone + "".join(tags)


def render_mentions(default_spec: str, level_spec: str) -> str:
    return mention_tags(combine_specs(default_spec, level_spec))


def resolve_mentions(level: Any, config: NotificationConfig) -> str:
    key = level_key(level)
    level_spec = config.mentions_by_level.get(key, "") if key else ""
    return render_mentions(config.default_mentions, level_spec)
