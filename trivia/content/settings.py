from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from trivia.api.models import QuizSettings
from trivia.content.fields import SETTINGS_SCHEMA, SETTINGS_VALUE_KEY, settings_schema_defaults
from trivia.schema import validate_object


logger = logging.getLogger(__name__)


def unwrap_values(raw: Mapping[str, Any], value_key: str = SETTINGS_VALUE_KEY) -> dict[str, Any]:
    """Map each settings row to its value column; bare values are kept as-is."""

    return {k: (v.get(value_key) if isinstance(v, Mapping) else v) for k, v in raw.items()}


def compatible_settings(settings: Mapping[str, Any], known_keys: set[str] | frozenset[str]) -> dict[str, Any]:
    """Keep only known settings keys, matched case-insensitively.

    Matched keys are renamed to their canonical spelling.
    """

    canonical = {k.casefold(): k for k in known_keys}
    out: dict[str, Any] = {}
    for key, value in settings.items():
        match = canonical.get(key.strip().casefold())
        if match is None:
            logger.debug("Dropping unknown settings key %r", key)
            continue
        out[match] = value
    return out


def resolve_settings(raw: Mapping[str, Any]) -> QuizSettings:
    """Turn a raw per-locale settings dictionary into validated QuizSettings.

    Schema defaults are laid down first and the sheet values override them, so
    every settings key is present before validation.
    """

    picked = compatible_settings(unwrap_values(raw), frozenset(SETTINGS_SCHEMA.keys()))
    merged = {**settings_schema_defaults(), **picked}
    validated = validate_object(merged, SETTINGS_SCHEMA)
    return QuizSettings.model_validate(validated)


def merge_into_session(session_settings: Mapping[str, Any], resolved: Mapping[str, Any]) -> dict[str, Any]:
    """Whitelist merge of resolved settings over the session's settings.

    Only keys already present in `session_settings` are overwritten; anything
    else in `resolved` is dropped so the session shape cannot drift.
    """

    merged = dict(session_settings)
    for key, value in resolved.items():
        if key in merged:
            merged[key] = value
        else:
            logger.debug("Ignoring settings key %r not in session template", key)
    return merged


def apply_settings(current: QuizSettings, resolved: QuizSettings) -> QuizSettings:
    template = current.model_dump(by_alias=True)
    return QuizSettings.model_validate(merge_into_session(template, resolved.model_dump(by_alias=True)))
