from __future__ import annotations

import os
import random
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
TEST_DATA_DIR = TESTS_DIR / "data"


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, `.env` is not auto-loaded unless explicitly opted-in with
    TRIVIA_LOAD_DOTENV_FOR_TESTS=1.
    """

    if os.environ.get("CI") and os.environ.get("TRIVIA_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = TESTS_DIR.parent / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture(scope="session", autouse=True)
def _content_from_test_fixtures() -> None:
    """Point content loading at `tests/data` so tests never read the repo's real data."""

    os.environ["TRIVIA_DATA_DIR"] = str(TEST_DATA_DIR)


@pytest.fixture(autouse=True)
def _debug_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRIVIA_ENABLE_DEBUG", "1")
    monkeypatch.setenv("TRIVIA_FUNCTION_VERSION", "test-version")


@pytest.fixture()
def content():
    from trivia.content.registry import ContentRepository

    return ContentRepository.from_directory(TEST_DATA_DIR)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def client(content):
    """FastAPI TestClient whose content dependency is the fixture repository."""

    from fastapi.testclient import TestClient

    from trivia.api.deps import get_content
    from trivia.main import app

    def _override():
        return content

    app.dependency_overrides[get_content] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_question():
    from trivia.api.models import Question

    def _make(
        question: str = "What is the capital of France?",
        correct: list[str] | None = None,
        incorrect_1: list[str] | None = None,
        incorrect_2: list[str] | None = None,
        **kwargs,
    ) -> Question:
        return Question(
            question=question,
            correct_answer=correct or ["Paris"],
            incorrect_answer_1=incorrect_1 or ["London"],
            incorrect_answer_2=incorrect_2 if incorrect_2 is not None else ["Berlin"],
            **kwargs,
        )

    return _make


@pytest.fixture()
def playing_session(make_question):
    """A session mid-round: three questions, first one active."""

    from trivia.api.models import GamePhase, Session

    def _make(**overrides) -> Session:
        questions = [
            make_question(),
            make_question("What is the capital of Japan?", ["Tokyo"], ["Kyoto"], ["Osaka"]),
            make_question("What is the capital of Canada?", ["Ottawa"], ["Toronto"], ["Vancouver"]),
        ]
        fields = {"questions": questions, "limit": len(questions), "phase": GamePhase.playing}
        fields.update(overrides)
        return Session(**fields)

    return _make
