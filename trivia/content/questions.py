from __future__ import annotations

from collections.abc import Iterable

from trivia import config
from trivia.api.models import Question


GroupedQuestions = dict[str, dict[str, list[Question]]]

SENTINEL_CATEGORY = config.DEFAULT_CATEGORY.lower()
SENTINEL_DIFFICULTY = config.DEFAULT_DIFFICULTY.lower()


def group_by_category_difficulty(
    questions: Iterable[Question],
    *,
    has_category: bool,
    has_difficulty: bool,
) -> GroupedQuestions:
    """Bucket questions as category -> difficulty -> [Question].

    Keys are lower-cased. A disabled axis puts every question into that axis'
    sentinel bucket regardless of the question's own value.
    """

    grouped: GroupedQuestions = {}
    for q in questions:
        category = (q.category or config.DEFAULT_CATEGORY) if has_category else config.DEFAULT_CATEGORY
        difficulty = (q.difficulty or config.DEFAULT_DIFFICULTY) if has_difficulty else config.DEFAULT_DIFFICULTY
        grouped.setdefault(category.lower(), {}).setdefault(difficulty.lower(), []).append(q)
    return grouped
