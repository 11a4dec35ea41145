from __future__ import annotations

import random
from collections.abc import MutableSequence
from dataclasses import dataclass
from typing import TypeVar

from trivia import config
from trivia.api.models import Question
from trivia.content.questions import GroupedQuestions


T = TypeVar("T")


class MissingQuestionBucketError(KeyError):
    def __init__(self, category: str, difficulty: str) -> None:
        self.category = category
        self.difficulty = difficulty
        super().__init__(f"No questions for category={category!r} difficulty={difficulty!r}")

    def __str__(self) -> str:
        return str(self.args[0])


@dataclass(frozen=True, slots=True)
class NewGameState:
    count: int
    correct_count: int
    limit: int
    questions: list[Question]


def shuffle(items: MutableSequence[T], rng: random.Random) -> MutableSequence[T]:
    """Unbiased in-place Fisher-Yates shuffle; returns `items` for chaining."""

    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def new_game_state(
    *,
    category: str,
    difficulty: str,
    questions_per_game: int,
    grouped: GroupedQuestions,
    max_per_quiz: int = config.MAX_QUESTIONS_PER_QUIZ,
    rng: random.Random,
) -> NewGameState:
    """Draw a fresh play-through from one category/difficulty bucket.

    The bucket's pool is shuffled as a copy; the grouped data is never mutated.
    """

    pool = grouped.get(category, {}).get(difficulty)
    if pool is None:
        raise MissingQuestionBucketError(category, difficulty)

    limit = max(0, min(questions_per_game, len(pool), max_per_quiz))
    drawn = shuffle(list(pool), rng)[:limit]
    return NewGameState(count=0, correct_count=0, limit=limit, questions=list(drawn))
