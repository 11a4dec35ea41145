"""Sheet keys, wire aliases and field schemas for quiz content."""

from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any

from trivia import config
from trivia.schema import FieldSchema, SchemaType, as_list


QUIZ_Q_A = "quiz_q_a"
QUIZ_SETTINGS = "quiz_settings"
COLLECTIONS: tuple[str, ...] = (QUIZ_Q_A, QUIZ_SETTINGS)

# Settings rows are stored as {"value": ...} objects keyed by setting name.
SETTINGS_VALUE_KEY = "value"

CHIP_MAX_LEN = 25


class QuestionKey:
    QUESTION = "question"
    CORRECT_ANSWER = "correct_answer"
    INCORRECT_ANSWER_1 = "incorrect_answer_1"
    INCORRECT_ANSWER_2 = "incorrect_answer_2"
    FOLLOW_UP = "follow_up"
    DIFFICULTY = "difficulty"
    CATEGORY = "category"


class SettingsKey:
    TITLE = "title"
    QUESTIONS_PER_GAME = "questions_per_game"
    PERSONALITY = "personality"
    AUDIO_DING = "audio_ding"
    AUDIO_GAME_INTRO = "audio_game_intro"
    AUDIO_GAME_OUTRO = "audio_game_outro"
    AUDIO_CORRECT = "audio_correct"
    AUDIO_INCORRECT = "audio_incorrect"
    AUDIO_ROUND_END = "audio_round_end"
    AUDIO_CALCULATING = "audio_calculating"
    RANDOMIZE_QUESTIONS = "randomize_questions"
    GOOGLE_ANALYTICS_TRACKING_ID = "google_analytics_tracking_id"
    QUIT_PROMPT = "quit_prompt"
    DIFFICULTY_PROMPT = "difficulty_or_grade_level_prompt"
    DEFAULT_DIFFICULTY = "default_difficulty_or_grade_level"
    DIFFICULTY_CHIP_1 = "difficulty_or_grade_level_suggestion_chip_1"
    DIFFICULTY_CHIP_2 = "difficulty_or_grade_level_suggestion_chip_2"
    DIFFICULTY_CHIP_3 = "difficulty_or_grade_level_suggestion_chip_3"
    CATEGORY_PROMPT = "category_or_topic_prompt"
    FIRST_CHOICE = "first_choice"
    SECOND_CHOICE = "second_choice"
    DEFAULT_CATEGORY = "default_category_or_topic"
    CATEGORY_CHIP_1 = "category_or_topic_suggestion_chip_1"
    CATEGORY_CHIP_2 = "category_or_topic_suggestion_chip_2"
    CATEGORY_CHIP_3 = "category_or_topic_suggestion_chip_3"


class QuestionAlias:
    QUESTION = "question"
    CORRECT_ANSWER = "correctAnswer"
    INCORRECT_ANSWER_1 = "incorrectAnswer1"
    INCORRECT_ANSWER_2 = "incorrectAnswer2"
    FOLLOW_UP = "followUp"
    DIFFICULTY = "difficulty"
    CATEGORY = "category"


class SettingsAlias:
    TITLE = "title"
    QUESTIONS_PER_GAME = "questionsPerGame"
    PERSONALITY = "personality"
    AUDIO_DING = "audioDing"
    AUDIO_GAME_INTRO = "audioGameIntro"
    AUDIO_GAME_OUTRO = "audioGameOutro"
    AUDIO_CORRECT = "audioCorrect"
    AUDIO_INCORRECT = "audioIncorrect"
    AUDIO_ROUND_END = "audioRoundEnd"
    AUDIO_CALCULATING = "audioCalculating"
    RANDOMIZE_QUESTIONS = "randomizeQuestions"
    GOOGLE_ANALYTICS_TRACKING_ID = "googleAnalyticsTrackingId"
    QUIT_PROMPT = "quitPrompt"
    DIFFICULTY_PROMPT = "difficultyOrGradeLevelPrompt"
    DEFAULT_DIFFICULTY = "defaultDifficultyOrGradeLevel"
    DIFFICULTY_CHIP_1 = "difficultyOrGradeLevelSuggestionChip1"
    DIFFICULTY_CHIP_2 = "difficultyOrGradeLevelSuggestionChip2"
    DIFFICULTY_CHIP_3 = "difficultyOrGradeLevelSuggestionChip3"
    CATEGORY_PROMPT = "categoryOrTopicPrompt"
    FIRST_CHOICE = "firstChoice"
    SECOND_CHOICE = "secondChoice"
    DEFAULT_CATEGORY = "defaultCategoryOrTopic"
    CATEGORY_CHIP_1 = "categoryOrTopicSuggestionChip1"
    CATEGORY_CHIP_2 = "categoryOrTopicSuggestionChip2"
    CATEGORY_CHIP_3 = "categoryOrTopicSuggestionChip3"


_SOUNDS = "https://storage.googleapis.com/actionsprod.appspot.com/sounds/"

DEFAULT_AUDIO: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        SettingsAlias.AUDIO_GAME_INTRO: (
            _SOUNDS + "RobotIntro_Shortened1.ogg",
            _SOUNDS + "RobotIntro_Shortened2.ogg",
        ),
        SettingsAlias.AUDIO_GAME_OUTRO: (
            _SOUNDS + "RobotOutro_Shortened_v1.ogg",
            _SOUNDS + "RobotOutro_Shortened_v2.ogg",
        ),
        SettingsAlias.AUDIO_DING: (
            _SOUNDS + "Trivia-Bot_Sounds_TriviaDing.ogg",
            _SOUNDS + "Trivia-Bot_Sounds_TriviaDing2.ogg",
        ),
        SettingsAlias.AUDIO_CORRECT: (
            _SOUNDS + "Robot%20Template%20Correct%20Ding%201.ogg",
            _SOUNDS + "Robot%20Template%20Correct%20Ding%202.ogg",
        ),
        SettingsAlias.AUDIO_INCORRECT: (_SOUNDS + "Robot%20Template%20Incorrect%20Buzz%201.ogg",),
        SettingsAlias.AUDIO_ROUND_END: (_SOUNDS + "Trivia-Bot_Sounds_EndOfRound.ogg",),
        SettingsAlias.AUDIO_CALCULATING: (
            _SOUNDS + "Robot%20Template%20Sounds%20Calc%201.ogg",
            _SOUNDS + "Robot%20Template%20Sounds%20Calc%202.ogg",
            _SOUNDS + "Robot%20Template%20Sounds%20Calc%203.ogg",
        ),
    }
)


def limit_to_25(value: Any) -> Any:
    """Keep chip-sized text.

    Strings are cut to 25 characters. For answer lists, a first answer longer
    than 25 characters gets its truncation inserted in front so the canonical
    (chip) answer fits.
    """

    if isinstance(value, str):
        return value[:CHIP_MAX_LEN]
    if isinstance(value, list) and value:
        first = value[0]
        if isinstance(first, str) and len(first) > CHIP_MAX_LEN:
            return [first[:CHIP_MAX_LEN], *value]
    return value


def limit_answers_to_25(value: Any) -> Any:
    return limit_to_25(as_list(value))


def at_least_one(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError("must be a positive integer")
    return value


def _answers(alias: str, *, optional: bool = False) -> FieldSchema:
    return FieldSchema(type=SchemaType.STRING_LIST, alias=alias, optional=optional, process=limit_answers_to_25)


def _chip(alias: str) -> FieldSchema:
    return FieldSchema(type=SchemaType.STRING, alias=alias, optional=True, process=limit_to_25)


def _text(alias: str) -> FieldSchema:
    return FieldSchema(type=SchemaType.STRING, alias=alias, optional=True)


def _audio(alias: str) -> FieldSchema:
    return FieldSchema(type=SchemaType.URL_LIST, alias=alias, default=list(DEFAULT_AUDIO[alias]))


QUESTION_SCHEMA: MappingProxyType[str, FieldSchema] = MappingProxyType(
    {
        QuestionKey.QUESTION: FieldSchema(type=SchemaType.STRING, alias=QuestionAlias.QUESTION),
        QuestionKey.CORRECT_ANSWER: _answers(QuestionAlias.CORRECT_ANSWER),
        QuestionKey.INCORRECT_ANSWER_1: _answers(QuestionAlias.INCORRECT_ANSWER_1),
        QuestionKey.INCORRECT_ANSWER_2: _answers(QuestionAlias.INCORRECT_ANSWER_2, optional=True),
        QuestionKey.FOLLOW_UP: _text(QuestionAlias.FOLLOW_UP),
        QuestionKey.DIFFICULTY: _chip(QuestionAlias.DIFFICULTY),
        QuestionKey.CATEGORY: _chip(QuestionAlias.CATEGORY),
    }
)

SETTINGS_SCHEMA: MappingProxyType[str, FieldSchema] = MappingProxyType(
    {
        SettingsKey.TITLE: FieldSchema(type=SchemaType.STRING, alias=SettingsAlias.TITLE, default=config.TITLE_DEFAULT),
        SettingsKey.QUESTIONS_PER_GAME: FieldSchema(
            type=SchemaType.INTEGER,
            alias=SettingsAlias.QUESTIONS_PER_GAME,
            default=config.QUESTIONS_PER_GAME_DEFAULT,
            validate=at_least_one,
        ),
        SettingsKey.PERSONALITY: _text(SettingsAlias.PERSONALITY),
        SettingsKey.AUDIO_DING: _audio(SettingsAlias.AUDIO_DING),
        SettingsKey.AUDIO_GAME_INTRO: _audio(SettingsAlias.AUDIO_GAME_INTRO),
        SettingsKey.AUDIO_GAME_OUTRO: _audio(SettingsAlias.AUDIO_GAME_OUTRO),
        SettingsKey.AUDIO_CORRECT: _audio(SettingsAlias.AUDIO_CORRECT),
        SettingsKey.AUDIO_INCORRECT: _audio(SettingsAlias.AUDIO_INCORRECT),
        SettingsKey.AUDIO_ROUND_END: _audio(SettingsAlias.AUDIO_ROUND_END),
        SettingsKey.AUDIO_CALCULATING: _audio(SettingsAlias.AUDIO_CALCULATING),
        SettingsKey.RANDOMIZE_QUESTIONS: FieldSchema(
            type=SchemaType.BOOLEAN,
            alias=SettingsAlias.RANDOMIZE_QUESTIONS,
            optional=True,
        ),
        SettingsKey.GOOGLE_ANALYTICS_TRACKING_ID: _text(SettingsAlias.GOOGLE_ANALYTICS_TRACKING_ID),
        SettingsKey.QUIT_PROMPT: _text(SettingsAlias.QUIT_PROMPT),
        SettingsKey.DIFFICULTY_PROMPT: _text(SettingsAlias.DIFFICULTY_PROMPT),
        SettingsKey.DEFAULT_DIFFICULTY: _chip(SettingsAlias.DEFAULT_DIFFICULTY),
        SettingsKey.DIFFICULTY_CHIP_1: _chip(SettingsAlias.DIFFICULTY_CHIP_1),
        SettingsKey.DIFFICULTY_CHIP_2: _chip(SettingsAlias.DIFFICULTY_CHIP_2),
        SettingsKey.DIFFICULTY_CHIP_3: _chip(SettingsAlias.DIFFICULTY_CHIP_3),
        SettingsKey.CATEGORY_PROMPT: _text(SettingsAlias.CATEGORY_PROMPT),
        SettingsKey.FIRST_CHOICE: _chip(SettingsAlias.FIRST_CHOICE),
        SettingsKey.SECOND_CHOICE: _chip(SettingsAlias.SECOND_CHOICE),
        SettingsKey.DEFAULT_CATEGORY: _chip(SettingsAlias.DEFAULT_CATEGORY),
        SettingsKey.CATEGORY_CHIP_1: _chip(SettingsAlias.CATEGORY_CHIP_1),
        SettingsKey.CATEGORY_CHIP_2: _chip(SettingsAlias.CATEGORY_CHIP_2),
        SettingsKey.CATEGORY_CHIP_3: _chip(SettingsAlias.CATEGORY_CHIP_3),
    }
)


def settings_schema_defaults() -> dict[str, Any]:
    """Raw-keyed defaults for every settings key (None where no default exists)."""

    out: dict[str, Any] = {}
    for key, entry in SETTINGS_SCHEMA.items():
        out[key] = copy.deepcopy(entry.default) if entry.has_default else None
    return out
