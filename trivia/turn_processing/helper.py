from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from trivia.api.models import Question, Session, SynonymEntry, TurnRequest, TurnResponse, TypeOverride
from trivia.content.fields import CHIP_MAX_LEN, DEFAULT_AUDIO
from trivia.prompts import Prompt
from trivia.text import clean_options, strip_emoji


RICH_RESPONSE = "RICH_RESPONSE"
ANSWER_TYPE = "answer"
TYPE_REPLACE = "TYPE_REPLACE"

_MISC_PROMPTS = "MISC_PROMPTS"


@dataclass(slots=True)
class ResponseCollector:
    """Everything a turn emits besides the session itself."""

    fragments: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    type_overrides: list[TypeOverride] = field(default_factory=list)
    expected_speech: list[str] = field(default_factory=list)
    next_action: str | None = None

    def add(self, *fragments: str) -> None:
        self.fragments.extend(str(f) for f in fragments if f)

    def to_response(self, session: Session) -> TurnResponse:
        return TurnResponse(
            fragments=list(self.fragments),
            suggestions=list(self.suggestions),
            list_items=list(self.list_items),
            type_overrides=list(self.type_overrides),
            expected_speech=list(self.expected_speech),
            next_action=str(self.next_action) if self.next_action else None,
            session=session,
        )


@dataclass(slots=True)
class TurnHelper:
    """Per-turn view over the request, the session and the response being built."""

    request: TurnRequest
    session: Session
    rng: random.Random
    out: ResponseCollector = field(default_factory=ResponseCollector)

    @property
    def locale(self) -> str:
        return self.request.locale

    @property
    def has_rich_response(self) -> bool:
        return RICH_RESPONSE in self.request.capabilities

    def audio(self, alias: str) -> str:
        urls = self.session.quiz_settings.audio(alias)
        if not urls:
            urls = list(DEFAULT_AUDIO[alias])
        return f'<audio src="{self.rng.choice(urls)}"/>'

    def current_question(self) -> Question:
        try:
            return self.session.questions[self.session.count]
        except IndexError as e:
            raise IndexError(
                f"No question at index {self.session.count} (have {len(self.session.questions)})"
            ) from e

    def question_suggestions(self) -> list[str]:
        """First (display) answer of each non-empty answer set of the current question."""

        q = self.current_question()
        return [answers[0] for answers in (q.correct_answer, q.incorrect_answer_1, q.incorrect_answer_2) if answers]

    def get_and_clear_user_answer(self) -> str | None:
        answer = self.session.user_answer
        self.session.user_answer = None
        return answer

    def add_rich_suggestions(self, *options: str) -> list[str]:
        """Attach options as chips, or as list items when any is too long for a chip."""

        cleaned = [strip_emoji(o).strip() for o in options]
        if any(_MISC_PROMPTS not in o and len(o) > CHIP_MAX_LEN for o in cleaned):
            self.out.list_items = cleaned
        else:
            self.out.suggestions.extend(cleaned)
        return cleaned

    def add_yes_no_suggestions(self) -> None:
        self.out.suggestions.extend([str(Prompt.MISC_PROMPTS_YES), str(Prompt.MISC_PROMPTS_NO)])

    @staticmethod
    def suggestion_tts(suggestions: Sequence[str]) -> str:
        """Spoken enumeration: "a, b, <or> c"."""

        parts: list[str] = []
        last = len(suggestions) - 1
        for idx, s in enumerate(suggestions):
            if idx == last - 1:
                parts.append(f"{s}, {Prompt.MISC_PROMPTS_OR} ")
            elif idx == last:
                parts.append(s)
            else:
                parts.append(f"{s}, ")
        return "".join(parts)

    def setup_speech_biasing(self, *entries: Sequence[str] | None) -> None:
        cleaned = [clean_options(e) for e in entries if e]
        cleaned = [e for e in cleaned if e]
        self.out.expected_speech = [s for e in cleaned for s in e]
        self.add_type_override(ANSWER_TYPE, *cleaned)

    def add_type_override(self, name: str, *synonym_entries: Sequence[str]) -> None:
        entries: list[SynonymEntry] = []
        for synonyms in synonym_entries:
            normalized = [s.lower().strip() for s in synonyms]
            normalized = list(dict.fromkeys(s for s in normalized if s))
            if not normalized:
                continue
            entries.append(SynonymEntry(name=normalized[0], synonyms=normalized))

        override = TypeOverride(name=name, mode=TYPE_REPLACE, entries=entries)
        for idx, existing in enumerate(self.out.type_overrides):
            if existing.name == name:
                self.out.type_overrides[idx] = override
                return
        self.out.type_overrides.append(override)
