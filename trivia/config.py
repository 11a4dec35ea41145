from __future__ import annotations

import os
from pathlib import Path


# Defaults for quiz settings in the data sheet.
QUESTIONS_PER_GAME_DEFAULT = 5
TITLE_DEFAULT = "Trivia Quiz"
MAX_QUESTIONS_PER_QUIZ = 10
DEFAULT_CATEGORY = "defaultCategory"
DEFAULT_DIFFICULTY = "defaultDifficulty"

DEBUG_KEY = "DedicatedDebugInfo"

SUPPORTED_LOCALES: tuple[str, ...] = (
    "de",
    "en",
    "en-GB",
    "en-US",
    "es",
    "es-419",
    "es-ES",
    "fr",
    "fr-CA",
    "hi",
    "id",
    "it",
    "ja",
    "ko",
    "pt-BR",
    "ru",
    "th",
)


def project_root() -> Path:
    # trivia/config.py -> trivia/ -> project root
    return Path(__file__).resolve().parents[1]


def get_data_dir() -> Path:
    raw = os.environ.get("TRIVIA_DATA_DIR")
    return Path(raw) if raw else project_root() / "data"


def debug_enabled() -> bool:
    return os.environ.get("TRIVIA_ENABLE_DEBUG", "1").strip().lower() in {"1", "true", "yes"}


def function_version() -> str:
    return os.environ.get("TRIVIA_FUNCTION_VERSION", "v1")
