from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trivia import config
from trivia.api.models import Question, QuizSettings
from trivia.content.fields import COLLECTIONS, QUESTION_SCHEMA, QUIZ_Q_A, QUIZ_SETTINGS
from trivia.content.settings import resolve_settings
from trivia.schema import SchemaValidationError, validate_collection


logger = logging.getLogger(__name__)


class ContentLoadError(RuntimeError):
    pass


class UnknownLocaleError(ContentLoadError):
    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"No data found for locale: {locale}")


def _read_json(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise ContentLoadError(f"Content file not found: {path}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ContentLoadError(f"Invalid JSON in {path}: {e}") from e


def load_locale_dir(path: Path) -> dict[str, Any]:
    """Read `<collection>.json` files for one locale; unknown files are skipped."""

    out: dict[str, Any] = {}
    for f in sorted(path.iterdir()):
        collection = f.name.split(".")[0]
        if f.suffix != ".json" or collection not in COLLECTIONS:
            continue
        out[collection] = _read_json(f)
    return out


def load_content_data(*, root: Path, locales: Iterable[str] = config.SUPPORTED_LOCALES) -> dict[str, dict[str, Any]]:
    if not root.is_dir():
        raise ContentLoadError(f"Content directory not found: {root}")

    supported = set(locales)
    data: dict[str, dict[str, Any]] = {}
    for locale_dir in sorted(root.iterdir()):
        if not locale_dir.is_dir() or locale_dir.name not in supported:
            continue
        data[locale_dir.name] = load_locale_dir(locale_dir)

    logger.info("Loaded quiz content for %d locales from %s", len(data), root)
    return data


class ContentRepository:
    """Per-locale quiz content: raw sheet data plus validated views of it.

    Built once per process and shared read-only between sessions. Validated
    questions and settings are computed on first use per locale and cached.
    """

    def __init__(self, data: Mapping[str, Mapping[str, Any]]) -> None:
        self._data: dict[str, dict[str, Any]] = {locale: dict(cols) for locale, cols in data.items()}
        self._questions: dict[str, tuple[Question, ...]] = {}
        self._settings: dict[str, QuizSettings] = {}

    @classmethod
    def from_directory(cls, root: Path) -> "ContentRepository":
        return cls(load_content_data(root=root))

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(sorted(self._data))

    def resolve_locale(self, locale: str) -> str:
        """Return the data locale for `locale`, falling back to its base language."""

        if locale in self._data:
            return locale
        if "-" in locale:
            lang = locale.split("-")[0]
            if lang in self._data:
                return lang
        raise UnknownLocaleError(locale)

    def by_locale(self, locale: str) -> Mapping[str, Any]:
        return self._data[self.resolve_locale(locale)]

    def load_questions(self, locale: str) -> tuple[Question, ...]:
        key = self.resolve_locale(locale)
        cached = self._questions.get(key)
        if cached is not None:
            return cached

        docs = self._data[key].get(QUIZ_Q_A)
        if not isinstance(docs, list):
            raise ContentLoadError(f"No {QUIZ_Q_A} collection for locale: {key}")

        validated = validate_collection(docs, QUESTION_SCHEMA)
        questions: list[Question] = []
        for idx, doc in enumerate(validated):
            try:
                questions.append(Question.model_validate(doc))
            except ValidationError as e:
                raise SchemaValidationError(f"{QUIZ_Q_A}[{idx}]", doc, str(e)) from e

        cached = tuple(questions)
        self._questions[key] = cached
        logger.info("Validated %d questions for locale %s", len(cached), key)
        return cached

    def load_settings(self, locale: str) -> QuizSettings:
        key = self.resolve_locale(locale)
        cached = self._settings.get(key)
        if cached is not None:
            return cached

        raw = self._data[key].get(QUIZ_SETTINGS)
        if raw is None:
            logger.warning("No %s collection for locale %s; using defaults", QUIZ_SETTINGS, key)
            raw = {}
        if not isinstance(raw, Mapping):
            raise ContentLoadError(f"{QUIZ_SETTINGS} for locale {key} must be an object")

        cached = resolve_settings(raw)
        self._settings[key] = cached
        return cached
