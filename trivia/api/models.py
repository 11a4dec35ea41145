from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trivia import config
from trivia.content.fields import DEFAULT_AUDIO, SettingsAlias


END_CONVERSATION = "actions.scene.END_CONVERSATION"


class Action(StrEnum):
    ANSWER = "ANSWER"
    ANSWER_HELP = "ANSWER_HELP"
    ANSWER_ORDINAL = "ANSWER_ORDINAL"
    ANSWER_SKIP = "ANSWER_SKIP"
    ASK_QUESTION = "ASK_QUESTION"
    FINALIZE_SETUP = "FINALIZE_SETUP"
    GENERIC_NO_MATCH_1 = "GENERIC_NO_MATCH_1"
    GENERIC_NO_MATCH_2 = "GENERIC_NO_MATCH_2"
    GENERIC_NO_MATCH_MAX = "GENERIC_NO_MATCH_MAX"
    GENERIC_NO_INPUT_1 = "GENERIC_NO_INPUT_1"
    GENERIC_NO_INPUT_2 = "GENERIC_NO_INPUT_2"
    GENERIC_NO_INPUT_MAX = "GENERIC_NO_INPUT_MAX"
    GIVE_SCORE = "GIVE_SCORE"
    ASK_PLAY_AGAIN = "ASK_PLAY_AGAIN"
    PLAY_AGAIN_REPEAT = "PLAY_AGAIN_REPEAT"
    PLAY_AGAIN_YES = "PLAY_AGAIN_YES"
    PLAY_AGAIN_NO = "PLAY_AGAIN_NO"
    PROMPT_CATEGORY = "PROMPT_CATEGORY"
    PROMPT_DIFFICULTY = "PROMPT_DIFFICULTY"
    QUESTION_REPEAT = "QUESTION_REPEAT"
    QUIT_CONFIRMATION = "QUIT_CONFIRMATION"
    QUIT_NO = "QUIT_NO"
    QUIT_REPEAT = "QUIT_REPEAT"
    QUIT_YES = "QUIT_YES"
    RESTART_CONFIRMATION = "RESTART_CONFIRMATION"
    RESTART_NO = "RESTART_NO"
    RESTART_REPEAT = "RESTART_REPEAT"
    RESTART_YES = "RESTART_YES"
    ROUND_END = "ROUND_END"
    SET_CATEGORY = "SET_CATEGORY"
    SET_DIFFICULTY = "SET_DIFFICULTY"
    SETUP_QUIZ = "SETUP_QUIZ"
    WELCOME = "WELCOME"


class GamePhase(StrEnum):
    setup = "setup"
    playing = "playing"
    round_over = "round_over"
    ended = "ended"


class WireModel(BaseModel):
    """Snake_case attributes, camelCase on the wire; accepts either on input."""

    model_config = ConfigDict(populate_by_name=True)


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class Question(WireModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    question: str
    correct_answer: list[str] = Field(..., alias="correctAnswer", min_length=1)
    incorrect_answer_1: list[str] = Field(..., alias="incorrectAnswer1", min_length=1)
    incorrect_answer_2: list[str] | None = Field(default=None, alias="incorrectAnswer2")
    follow_up: str | None = Field(default=None, alias="followUp")
    difficulty: str | None = None
    category: str | None = None

    # Optional sheet columns validate to "" when blank.
    @field_validator("incorrect_answer_2", "follow_up", "difficulty", "category", mode="before")
    @classmethod
    def blank_optional_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


def _default_audio(alias: str):
    return Field(default_factory=lambda: list(DEFAULT_AUDIO[alias]), alias=alias)


class QuizSettings(WireModel):
    title: str = config.TITLE_DEFAULT
    questions_per_game: int = Field(config.QUESTIONS_PER_GAME_DEFAULT, alias=SettingsAlias.QUESTIONS_PER_GAME)
    personality: str | None = None

    audio_ding: list[str] = _default_audio(SettingsAlias.AUDIO_DING)
    audio_game_intro: list[str] = _default_audio(SettingsAlias.AUDIO_GAME_INTRO)
    audio_game_outro: list[str] = _default_audio(SettingsAlias.AUDIO_GAME_OUTRO)
    audio_correct: list[str] = _default_audio(SettingsAlias.AUDIO_CORRECT)
    audio_incorrect: list[str] = _default_audio(SettingsAlias.AUDIO_INCORRECT)
    audio_round_end: list[str] = _default_audio(SettingsAlias.AUDIO_ROUND_END)
    audio_calculating: list[str] = _default_audio(SettingsAlias.AUDIO_CALCULATING)

    randomize_questions: bool | None = Field(None, alias=SettingsAlias.RANDOMIZE_QUESTIONS)
    google_analytics_tracking_id: str | None = Field(None, alias=SettingsAlias.GOOGLE_ANALYTICS_TRACKING_ID)
    quit_prompt: str | None = Field(None, alias=SettingsAlias.QUIT_PROMPT)

    difficulty_prompt: str | None = Field(None, alias=SettingsAlias.DIFFICULTY_PROMPT)
    default_difficulty: str | None = Field(None, alias=SettingsAlias.DEFAULT_DIFFICULTY)
    difficulty_chip_1: str | None = Field(None, alias=SettingsAlias.DIFFICULTY_CHIP_1)
    difficulty_chip_2: str | None = Field(None, alias=SettingsAlias.DIFFICULTY_CHIP_2)
    difficulty_chip_3: str | None = Field(None, alias=SettingsAlias.DIFFICULTY_CHIP_3)

    category_prompt: str | None = Field(None, alias=SettingsAlias.CATEGORY_PROMPT)
    first_choice: str | None = Field(None, alias=SettingsAlias.FIRST_CHOICE)
    second_choice: str | None = Field(None, alias=SettingsAlias.SECOND_CHOICE)
    default_category: str | None = Field(None, alias=SettingsAlias.DEFAULT_CATEGORY)
    category_chip_1: str | None = Field(None, alias=SettingsAlias.CATEGORY_CHIP_1)
    category_chip_2: str | None = Field(None, alias=SettingsAlias.CATEGORY_CHIP_2)
    category_chip_3: str | None = Field(None, alias=SettingsAlias.CATEGORY_CHIP_3)

    @field_validator("randomize_questions", mode="before")
    @classmethod
    def blank_flag_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def category_chips(self) -> list[str]:
        return [c for c in (self.category_chip_1, self.category_chip_2, self.category_chip_3) if c]

    @property
    def difficulty_chips(self) -> list[str]:
        return [c for c in (self.difficulty_chip_1, self.difficulty_chip_2, self.difficulty_chip_3) if c]

    def audio(self, alias: str) -> list[str]:
        field_name = next(name for name, f in type(self).model_fields.items() if f.alias == alias)
        return getattr(self, field_name)


class DebugInfo(WireModel):
    status: int
    label: str
    version: str
    execution_id: str | None = Field(None, alias="executionId")
    message: str | None = None
    stack: str | None = None


class Session(WireModel):
    """Per-conversation session params, owned by the host between turns."""

    quiz_settings: QuizSettings = Field(default_factory=QuizSettings, alias="quizSettings")
    title: str | None = None

    count: int = 0
    correct_count: int = Field(0, alias="correctCount")
    question_number: int = Field(1, alias="questionNumber")
    limit: int = config.MAX_QUESTIONS_PER_QUIZ
    questions: list[Question] = Field(default_factory=list)

    category: str | None = None
    difficulty: str | None = None
    set_category: bool = Field(False, alias="setCategory")
    set_difficulty: bool = Field(False, alias="setDifficulty")
    has_category: bool = Field(False, alias="hasCategory")
    has_difficulty: bool = Field(False, alias="hasDifficulty")

    is_repeat: bool = Field(False, alias="isRepeat")
    is_replay: bool = Field(False, alias="isReplay")
    is_skip: bool = Field(False, alias="isSkip")

    selection: str | None = None
    suggestions: list[str] = Field(default_factory=list)
    current_question: Question | None = Field(None, alias="currentQuestion")
    correct_answer: str | None = Field(None, alias="correctAnswer")

    # Captured by the host from the `answer` type; read once then cleared.
    user_answer: str | None = Field(None, alias="UserAnswer")

    phase: GamePhase = GamePhase.setup
    debug_info: DebugInfo | None = Field(None, alias=config.DEBUG_KEY)

    def reset_to_defaults(self) -> None:
        fresh = Session()
        for name in SESSION_PARAM_FIELDS:
            setattr(self, name, getattr(fresh, name))


# Fields restored by SETUP_QUIZ. Host-captured slots, phase and diagnostics survive.
SESSION_PARAM_FIELDS: tuple[str, ...] = (
    "quiz_settings",
    "count",
    "correct_count",
    "question_number",
    "limit",
    "questions",
    "category",
    "difficulty",
    "set_category",
    "set_difficulty",
    "has_category",
    "has_difficulty",
    "is_repeat",
    "is_replay",
    "is_skip",
    "selection",
    "suggestions",
    "current_question",
    "correct_answer",
)


class SlotValue(WireModel):
    original: str | None = None
    resolved: str | None = None


class TurnRequest(WireModel):
    action: Action
    slots: dict[str, SlotValue] = Field(default_factory=dict)
    locale: str = "en"
    capabilities: list[str] = Field(default_factory=list)
    session: Session | None = None
    user_answer: str | None = Field(None, alias="userAnswer")
    last_seen_time: datetime | None = Field(None, alias="lastSeenTime")
    execution_id: str | None = Field(None, alias="executionId")


class SynonymEntry(WireModel):
    name: str
    synonyms: list[str]


class TypeOverride(WireModel):
    name: str
    mode: str = "TYPE_REPLACE"
    entries: list[SynonymEntry] = Field(default_factory=list)


class TurnResponse(WireModel):
    fragments: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    list_items: list[str] = Field(default_factory=list, alias="listItems")
    type_overrides: list[TypeOverride] = Field(default_factory=list, alias="typeOverrides")
    expected_speech: list[str] = Field(default_factory=list, alias="expectedSpeech")
    next_action: str | None = Field(None, alias="nextAction")
    session: Session
