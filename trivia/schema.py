"""Field-schema validation for raw sheet data.

Every field of a raw record is described by a `FieldSchema`: a type tag picks a
coercion (`process`) + structural check (`validate`) pair from `TYPE_RULES`,
and a field may override either function. A failing field falls back to its
declared default; without a default the failure is fatal for the whole record.
"""

from __future__ import annotations

import copy
import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import AnyUrl, TypeAdapter


logger = logging.getLogger(__name__)


class SchemaType(StrEnum):
    CUSTOM = "CUSTOM"
    BOOLEAN = "BOOLEAN"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    STRING = "STRING"
    STRING_LIST = "STRING_LIST"
    IMAGE = "IMAGE"
    URL = "URL"
    URL_LIST = "URL_LIST"
    GOOGLE_FONT = "GOOGLE_FONT"
    COLOR_HEX = "COLOR_HEX"
    DATE = "DATE"


class SchemaValidationError(ValueError):
    def __init__(self, key: str | None, value: Any, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Failed schema validation for {key}, received: {value!r} ({reason})")


class MissingRequiredFieldError(SchemaValidationError):
    def __init__(self, key: str) -> None:
        super().__init__(key, None, "required field is missing")


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

Processor = Callable[[Any], Any]
Checker = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class TypeRule:
    """Coercion + structural check for one schema type.

    `validate` returns the accepted (possibly normalized) value or raises ValueError.
    """

    process: Processor
    validate: Checker


@dataclass(frozen=True, slots=True)
class FieldSchema:
    type: SchemaType = SchemaType.CUSTOM
    alias: str | None = None
    optional: bool = False
    default: Any = MISSING
    process: Processor | None = None
    validate: Checker | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def required(self) -> bool:
        return not self.optional and not self.has_default

    def rule(self) -> TypeRule:
        base = TYPE_RULES.get(self.type, TYPE_RULES[SchemaType.CUSTOM])
        return TypeRule(process=self.process or base.process, validate=self.validate or base.validate)


_URI = TypeAdapter(AnyUrl)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_HEX_COLOR = re.compile(r"#[0-9A-F]{3}|#[0-9A-F]{6}", re.IGNORECASE)
_GOOGLE_FONT_PREFIX = re.compile(r"https://fonts\.googleapis\.com/")


def as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    m = _LEADING_INT.match(str(value))
    if not m:
        raise ValueError(f"not an integer: {value!r}")
    return int(m.group(1))


def _parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, (int, float)):
        return float(value)
    m = _LEADING_FLOAT.match(str(value))
    if not m:
        raise ValueError(f"not a number: {value!r}")
    return float(m.group(1))


def _check_any(value: Any) -> Any:
    return value


def _check_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("must be a boolean")
    return value


def _check_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("must be an integer")
    return value


def _check_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


def _check_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("must be a string")
    value = value.strip()
    if not value:
        raise ValueError("is not allowed to be empty")
    return value


def _check_string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError("must be an array")
    return [_check_string(v) for v in value]


def _check_uri(value: Any) -> str:
    value = _check_string(value)
    _URI.validate_python(value)
    return value


def _check_uri_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError("must be an array")
    return [_check_uri(v) for v in value]


def _check_google_font(value: Any) -> str:
    value = _check_uri(value)
    if not _GOOGLE_FONT_PREFIX.match(value):
        raise ValueError("must be a fonts.googleapis.com url")
    return value


def _check_color_hex(value: Any) -> str:
    if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value):
        raise ValueError("must be a 3 or 6 digit Color HEX")
    return value


def _check_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


TYPE_RULES: Mapping[SchemaType, TypeRule] = {
    SchemaType.CUSTOM: TypeRule(process=lambda v: v, validate=_check_any),
    SchemaType.BOOLEAN: TypeRule(process=lambda v: str(v).upper() in {"TRUE", "YES"}, validate=_check_bool),
    SchemaType.INTEGER: TypeRule(process=_parse_int, validate=_check_int),
    SchemaType.FLOAT: TypeRule(process=_parse_float, validate=_check_number),
    SchemaType.STRING: TypeRule(process=lambda v: v or "", validate=_check_string),
    SchemaType.STRING_LIST: TypeRule(process=as_list, validate=_check_string_list),
    SchemaType.IMAGE: TypeRule(
        process=lambda v: (v if isinstance(v, str) else v["contentUrl"]).strip(),
        validate=_check_uri,
    ),
    SchemaType.URL: TypeRule(process=lambda v: v.strip(), validate=_check_uri),
    SchemaType.URL_LIST: TypeRule(process=as_list, validate=_check_uri_list),
    SchemaType.GOOGLE_FONT: TypeRule(process=lambda v: v.strip(), validate=_check_google_font),
    SchemaType.COLOR_HEX: TypeRule(process=lambda v: re.sub(r"#+", "#", f"#{v.strip()}"), validate=_check_color_hex),
    SchemaType.DATE: TypeRule(process=lambda v: v.strip(), validate=_check_date),
}


def _fallback(entry: FieldSchema, label: str | None, value: Any, stage: str, err: Exception) -> Any:
    logger.info(
        "Failed schema %s for %s, received: %r, use default: %r",
        stage,
        label,
        value,
        entry.default,
        extra={
            "event_type": "schema_default_used",
            "schema_key": label,
            "schema_value": str(value),
            "schema_default": entry.default,
            "schema_error": str(err),
        },
    )
    return copy.deepcopy(entry.default)


def validate_value(value: Any, entry: FieldSchema, label: str | None = None) -> Any:
    """Coerce and check `value` against `entry`.

    Optional fields pass blank strings (stripped) and None through untouched.
    Returns the entry's default when coercion or the check fails and a default
    is declared; raises SchemaValidationError otherwise.
    """

    if entry.optional:
        if isinstance(value, str) and value.strip() == "":
            return value.strip()
        if value is None:
            return None

    rule = entry.rule()

    try:
        processed = rule.process(value)
    except Exception as e:
        if entry.has_default:
            return _fallback(entry, label, value, "preprocess", e)
        raise SchemaValidationError(label, value, str(e) or type(e).__name__) from e

    try:
        return rule.validate(processed)
    except (ValueError, TypeError) as e:
        if entry.has_default:
            return _fallback(entry, label, value, "validation", e)
        raise SchemaValidationError(label, value, str(e) or type(e).__name__) from e


def validate_object(target: Mapping[str, Any], field_schema: Mapping[str, FieldSchema]) -> dict[str, Any]:
    """Validate every key of `target` that has a schema entry.

    Unknown keys pass through unchanged under their original key; known keys are
    written under the entry alias. Any fatal field failure aborts the object.
    """

    output: dict[str, Any] = {}
    for key, value in target.items():
        entry = field_schema.get(key)
        if entry is None:
            output[key] = value
            continue
        try:
            output[entry.alias or key] = validate_value(value, entry, key)
        except SchemaValidationError:
            logger.warning("Failed schema validation for %s, received: %r, no default value.", key, value)
            raise

    for key, entry in field_schema.items():
        if entry.required and key not in target:
            logger.warning("Missing required field %s", key)
            raise MissingRequiredFieldError(key)

    return output


def validate_collection(
    targets: Sequence[Mapping[str, Any]],
    field_schema: Mapping[str, FieldSchema],
) -> list[dict[str, Any]]:
    """Validate a batch of same-shaped records.

    All-or-nothing: one record failing fatally aborts the whole batch.
    """

    out: list[dict[str, Any]] = []
    for idx, target in enumerate(targets):
        if not isinstance(target, Mapping):
            raise SchemaValidationError(f"[{idx}]", target, "must be an object")
        try:
            out.append(validate_object(target, field_schema))
        except SchemaValidationError:
            logger.warning("Aborting collection validation at record %d", idx)
            raise
    return out
