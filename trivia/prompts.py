from __future__ import annotations

from enum import StrEnum


_PREFIX = "$resources.strings.main."


class Prompt(StrEnum):
    """Localized string resource references.

    Fragments are emitted as resource references; the host resolves them to
    locale text when composing the final speech markup.
    """

    GREETING_PROMPTS_1 = _PREFIX + "GREETING_PROMPTS_1"
    GREETING_PROMPTS_2 = _PREFIX + "GREETING_PROMPTS_2"
    STOP_PROMPTS = _PREFIX + "STOP_PROMPTS"
    RE_PROMPT = _PREFIX + "RE_PROMPT"
    QUIT_PROMPTS = _PREFIX + "QUIT_PROMPTS"
    PLAY_AGAIN_QUESTION_PROMPTS = _PREFIX + "PLAY_AGAIN_QUESTION_PROMPTS"
    FALLBACK_PROMPT_1 = _PREFIX + "FALLBACK_PROMPT_1"
    FALLBACK_PROMPT_2 = _PREFIX + "FALLBACK_PROMPT_2"
    RAPID_REPROMPTS = _PREFIX + "RAPID_REPROMPTS"
    REPEAT_PROMPTS = _PREFIX + "REPEAT_PROMPTS"
    RESTART_CONFIRMATION = _PREFIX + "RESTART_CONFIRMATION"
    RESTART_YES = _PREFIX + "RESTART_YES"
    SKIP_PROMPTS = _PREFIX + "SKIP_PROMPTS"
    RIGHT_ANSWER_PROMPTS_1 = _PREFIX + "RIGHT_ANSWER_PROMPTS_1"
    RIGHT_ANSWER_PROMPTS_2 = _PREFIX + "RIGHT_ANSWER_PROMPTS_2"
    WRONG_ANSWER_PROMPTS_1 = _PREFIX + "WRONG_ANSWER_PROMPTS_1"
    WRONG_ANSWER_PROMPTS_2 = _PREFIX + "WRONG_ANSWER_PROMPTS_2"
    GAME_OVER_PROMPTS_1 = _PREFIX + "GAME_OVER_PROMPTS_1"
    GAME_OVER_PROMPTS_2 = _PREFIX + "GAME_OVER_PROMPTS_2"
    NONE_CORRECT_PROMPTS = _PREFIX + "NONE_CORRECT_PROMPTS"
    SOME_CORRECT_PROMPTS = _PREFIX + "SOME_CORRECT_PROMPTS"
    ALL_CORRECT_PROMPTS = _PREFIX + "ALL_CORRECT_PROMPTS"
    YOUR_SCORE_PROMPTS = _PREFIX + "YOUR_SCORE_PROMPTS"
    HELP_PROMPTS = _PREFIX + "HELP_PROMPTS"
    LETS_PLAY_PROMPTS = _PREFIX + "LETS_PLAY_PROMPTS"
    ROUND_PROMPTS = _PREFIX + "ROUND_PROMPTS"
    FIRST_ROUND_PROMPTS = _PREFIX + "FIRST_ROUND_PROMPTS"
    FINAL_ROUND_PROMPTS = _PREFIX + "FINAL_ROUND_PROMPTS"
    NEXT_QUESTION_PROMPTS = _PREFIX + "NEXT_QUESTION_PROMPTS"
    NO_INPUT_PROMPTS_1 = _PREFIX + "NO_INPUT_PROMPTS_1"
    NO_INPUT_PROMPTS_2 = _PREFIX + "NO_INPUT_PROMPTS_2"
    NO_INPUT_PROMPTS_3 = _PREFIX + "NO_INPUT_PROMPTS_3"
    SELECTION_CONFIRMATION_PROMPTS = _PREFIX + "SELECTION_CONFIRMATION_PROMPTS"
    MISC_PROMPTS_YES = _PREFIX + "MISC_PROMPTS_YES"
    MISC_PROMPTS_NO = _PREFIX + "MISC_PROMPTS_NO"
    MISC_PROMPTS_OR = _PREFIX + "MISC_PROMPTS_OR"
