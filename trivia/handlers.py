"""Turn handlers, one per action.

Each handler reads and mutates the session and writes fragments, suggestions
and speech biasing into the turn's response collector. Handlers that continue
into another action call it directly.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from trivia import config
from trivia.api.models import END_CONVERSATION, Action, Session, TurnRequest
from trivia.content.fields import SettingsAlias
from trivia.content.questions import group_by_category_difficulty
from trivia.content.registry import ContentRepository
from trivia.content.settings import apply_settings
from trivia.fsm import advance, end_session
from trivia.game_setup import new_game_state, shuffle
from trivia.prompts import Prompt
from trivia.turn_processing.helper import ResponseCollector, TurnHelper


logger = logging.getLogger(__name__)

# Slot names filled by the host's slot resolver.
CATEGORY_SLOT = "category"
DIFFICULTY_SLOT = "difficulty"
ORDINAL_SLOT = "count"

ORDINAL_FIRST = "first"
ORDINAL_SECOND = "second"
ORDINAL_THIRD = "third"


@dataclass(frozen=True, slots=True)
class TurnContext:
    request: TurnRequest
    content: ContentRepository
    helper: TurnHelper
    rng: random.Random

    @property
    def out(self) -> ResponseCollector:
        return self.helper.out


Handler = Callable[[TurnContext, Session], None]


def _next_setup_action(session: Session) -> Action:
    if session.has_category and not session.set_category:
        return Action.PROMPT_CATEGORY
    if session.has_difficulty and not session.set_difficulty:
        return Action.PROMPT_DIFFICULTY
    return Action.FINALIZE_SETUP


def _next_question_action(session: Session) -> Action:
    return Action.ASK_QUESTION if session.count < session.limit else Action.ROUND_END


def _slot_value(ctx: TurnContext, name: str) -> str | None:
    slot = ctx.request.slots.get(name)
    return slot.resolved if slot is not None else None


# --- setup ---


def setup_quiz(ctx: TurnContext, session: Session) -> None:
    is_replay = session.is_replay
    session.reset_to_defaults()
    session.is_replay = is_replay

    resolved = ctx.content.load_settings(ctx.helper.locale)
    session.quiz_settings = apply_settings(session.quiz_settings, resolved)
    settings = session.quiz_settings

    session.title = settings.title
    session.has_category = bool(settings.category_chip_1 and settings.default_category and settings.category_prompt)
    session.has_difficulty = bool(
        settings.difficulty_chip_1 and settings.default_difficulty and settings.difficulty_prompt
    )

    if session.is_replay:
        session.category = None
        session.difficulty = None
        session.set_category = False
        session.set_difficulty = False

    advance(session, "reset")
    logger.info(
        "Quiz set up",
        extra={
            "event_type": "quiz_setup",
            "locale": ctx.helper.locale,
            "has_category": session.has_category,
            "has_difficulty": session.has_difficulty,
            "is_replay": session.is_replay,
        },
    )


def welcome(ctx: TurnContext, session: Session) -> None:
    if not session.is_replay:
        greeting = Prompt.GREETING_PROMPTS_2 if ctx.request.last_seen_time else Prompt.GREETING_PROMPTS_1
        ctx.out.add(ctx.helper.audio(SettingsAlias.AUDIO_GAME_INTRO), greeting)
    ctx.out.next_action = _next_setup_action(session)


def _prompt_axis(ctx: TurnContext, prompt: str | None, chips: list[str]) -> None:
    responses = [prompt or ""]
    suggestions = ctx.helper.add_rich_suggestions(*chips)
    if not ctx.helper.has_rich_response:
        responses.append(ctx.helper.suggestion_tts(suggestions))
    ctx.helper.setup_speech_biasing(*([chip] for chip in chips))
    ctx.out.add(*responses)


def prompt_category(ctx: TurnContext, session: Session) -> None:
    settings = session.quiz_settings
    _prompt_axis(ctx, settings.category_prompt, settings.category_chips)


def prompt_difficulty(ctx: TurnContext, session: Session) -> None:
    settings = session.quiz_settings
    _prompt_axis(ctx, settings.difficulty_prompt, settings.difficulty_chips)


def set_category(ctx: TurnContext, session: Session) -> None:
    session.category = ctx.request.slots[CATEGORY_SLOT].resolved
    session.selection = session.category
    session.set_category = True
    ctx.out.add(Prompt.SELECTION_CONFIRMATION_PROMPTS)
    ctx.out.next_action = _next_setup_action(session)


def set_difficulty(ctx: TurnContext, session: Session) -> None:
    session.difficulty = ctx.request.slots[DIFFICULTY_SLOT].resolved
    session.selection = session.difficulty
    session.set_difficulty = True
    ctx.out.add(Prompt.SELECTION_CONFIRMATION_PROMPTS)
    ctx.out.next_action = _next_setup_action(session)


def finalize_setup(ctx: TurnContext, session: Session) -> None:
    session.difficulty = (session.difficulty or config.DEFAULT_DIFFICULTY).lower()
    session.category = (session.category or config.DEFAULT_CATEGORY).lower()

    grouped = group_by_category_difficulty(
        ctx.content.load_questions(ctx.helper.locale),
        has_category=session.has_category,
        has_difficulty=session.has_difficulty,
    )
    state = new_game_state(
        category=session.category,
        difficulty=session.difficulty,
        questions_per_game=session.quiz_settings.questions_per_game,
        grouped=grouped,
        rng=ctx.rng,
    )

    session.is_replay = False
    session.is_repeat = False
    session.count = state.count
    session.correct_count = state.correct_count
    session.limit = state.limit
    session.questions = state.questions

    advance(session, "start_round")
    ctx.out.next_action = _next_question_action(session)


# --- question flow ---


def ask_question(ctx: TurnContext, session: Session, transition: str | None = None) -> None:
    is_repeat = session.is_repeat
    session.is_repeat = False

    if is_repeat:
        transition_prompts: list[str] = [Prompt.REPEAT_PROMPTS]
    elif session.count > 0:
        last = session.count >= session.limit - 1
        transition_prompts = [Prompt.FINAL_ROUND_PROMPTS if last else Prompt.NEXT_QUESTION_PROMPTS]
    else:
        transition_prompts = [Prompt.LETS_PLAY_PROMPTS, Prompt.FIRST_ROUND_PROMPTS]

    question = ctx.helper.current_question()
    responses: list[str] = [*transition_prompts, Prompt.ROUND_PROMPTS, question.question]
    if transition:
        responses.insert(0, transition)

    if not is_repeat:
        session.suggestions = list(shuffle(ctx.helper.question_suggestions(), ctx.rng))

    if not ctx.helper.has_rich_response:
        responses.append(ctx.helper.suggestion_tts(session.suggestions))
    responses.append(ctx.helper.audio(SettingsAlias.AUDIO_DING))

    session.current_question = question
    session.correct_answer = question.correct_answer[0]

    ctx.helper.setup_speech_biasing(question.correct_answer, question.incorrect_answer_1, question.incorrect_answer_2)
    ctx.helper.add_rich_suggestions(*session.suggestions)
    ctx.out.add(*responses)


def question_repeat(ctx: TurnContext, session: Session) -> None:
    session.is_repeat = True
    ask_question(ctx, session)


def answer(ctx: TurnContext, session: Session, submitted: str | None = None) -> None:
    if session.is_skip:
        session.is_skip = False
        ctx.out.add(Prompt.SKIP_PROMPTS)
        ctx.out.next_action = _next_question_action(session)
        return

    if submitted is None:
        submitted = ctx.helper.get_and_clear_user_answer()

    question = ctx.helper.current_question()
    session.count += 1
    session.question_number += 1

    is_correct = str(submitted).lower() == str(question.correct_answer[0]).lower()
    responses = [ctx.helper.audio(SettingsAlias.AUDIO_CALCULATING)]
    if is_correct:
        session.correct_count += 1
        responses += [
            ctx.helper.audio(SettingsAlias.AUDIO_CORRECT),
            Prompt.RIGHT_ANSWER_PROMPTS_1,
            Prompt.RIGHT_ANSWER_PROMPTS_2,
        ]
    else:
        responses += [
            ctx.helper.audio(SettingsAlias.AUDIO_INCORRECT),
            Prompt.WRONG_ANSWER_PROMPTS_1,
            Prompt.WRONG_ANSWER_PROMPTS_2,
        ]
    if question.follow_up:
        responses.append(question.follow_up)

    ctx.out.add(*responses)
    ctx.out.next_action = _next_question_action(session)
    logger.debug(
        "Answer scored",
        extra={"event_type": "answer_scored", "correct": is_correct, "count": session.count},
    )


def answer_ordinal(ctx: TurnContext, session: Session) -> None:
    ordinal = _slot_value(ctx, ORDINAL_SLOT)
    if not ordinal:
        generic_no_match(ctx, session)
        return

    suggestions = session.suggestions
    second = suggestions[1] if len(suggestions) > 1 else None
    ordinals = {
        ORDINAL_FIRST: suggestions[0] if suggestions else None,
        ORDINAL_SECOND: second,
        ORDINAL_THIRD: suggestions[2] if len(suggestions) > 2 else second,
    }
    choice = ordinals.get(ordinal.lower())
    if choice is None:
        generic_no_match(ctx, session)
        return
    answer(ctx, session, choice)


def answer_skip(ctx: TurnContext, session: Session) -> None:
    session.count += 1
    session.question_number += 1
    session.is_skip = True
    ctx.out.next_action = Action.ANSWER


def answer_help(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.HELP_PROMPTS)


def round_end(ctx: TurnContext, session: Session) -> None:
    score = session.correct_count
    if score == 0:
        result = Prompt.NONE_CORRECT_PROMPTS
    elif score == session.limit:
        result = Prompt.ALL_CORRECT_PROMPTS
    else:
        result = Prompt.SOME_CORRECT_PROMPTS

    ctx.out.add(
        ctx.helper.audio(SettingsAlias.AUDIO_ROUND_END),
        Prompt.GAME_OVER_PROMPTS_1,
        Prompt.GAME_OVER_PROMPTS_2,
        result,
    )
    advance(session, "finish_round")
    ctx.out.next_action = Action.ASK_PLAY_AGAIN


def give_score(ctx: TurnContext, session: Session) -> None:
    session.is_repeat = True
    ask_question(ctx, session, Prompt.YOUR_SCORE_PROMPTS)


# --- confirmations ---


def restart_confirmation(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.RESTART_CONFIRMATION)
    ctx.helper.add_yes_no_suggestions()


def restart_yes(ctx: TurnContext, session: Session) -> None:
    session.is_replay = True
    ctx.out.add(Prompt.RESTART_YES)
    ctx.out.next_action = Action.SETUP_QUIZ


def restart_no(ctx: TurnContext, session: Session) -> None:
    session.is_repeat = True
    quit_no(ctx, session)


def ask_play_again(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.PLAY_AGAIN_QUESTION_PROMPTS)
    ctx.helper.add_yes_no_suggestions()


def play_again_yes(ctx: TurnContext, session: Session) -> None:
    session.is_replay = True
    session.count = 0
    session.question_number = 1
    session.correct_count = 0
    ctx.out.add(Prompt.RE_PROMPT)
    ctx.out.next_action = Action.SETUP_QUIZ


def quit_confirmation(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.STOP_PROMPTS)
    ctx.helper.add_yes_no_suggestions()


def quit_yes(ctx: TurnContext, session: Session) -> None:
    quit_prompt = session.quiz_settings.quit_prompt or Prompt.QUIT_PROMPTS
    ctx.out.add(quit_prompt, ctx.helper.audio(SettingsAlias.AUDIO_GAME_OUTRO))
    end_session(session)
    ctx.out.next_action = END_CONVERSATION


def quit_no(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.RE_PROMPT)


# --- no-match / no-input ladder ---


def generic_no_match(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.RAPID_REPROMPTS)


def generic_no_match_max(ctx: TurnContext, session: Session) -> None:
    ctx.out.add(Prompt.FALLBACK_PROMPT_2)


def _say(prompt: Prompt) -> Handler:
    def handler(ctx: TurnContext, session: Session) -> None:
        ctx.out.add(prompt)

    handler.__name__ = f"say_{prompt.name.lower()}"
    return handler


HANDLERS: Mapping[Action, Handler] = MappingProxyType(
    {
        Action.SETUP_QUIZ: setup_quiz,
        Action.WELCOME: welcome,
        Action.PROMPT_CATEGORY: prompt_category,
        Action.PROMPT_DIFFICULTY: prompt_difficulty,
        Action.SET_CATEGORY: set_category,
        Action.SET_DIFFICULTY: set_difficulty,
        Action.FINALIZE_SETUP: finalize_setup,
        Action.ASK_QUESTION: ask_question,
        Action.QUESTION_REPEAT: question_repeat,
        Action.ANSWER: answer,
        Action.ANSWER_ORDINAL: answer_ordinal,
        Action.ANSWER_SKIP: answer_skip,
        Action.ANSWER_HELP: answer_help,
        Action.ROUND_END: round_end,
        Action.GIVE_SCORE: give_score,
        Action.RESTART_CONFIRMATION: restart_confirmation,
        Action.RESTART_REPEAT: restart_confirmation,
        Action.RESTART_YES: restart_yes,
        Action.RESTART_NO: restart_no,
        Action.ASK_PLAY_AGAIN: ask_play_again,
        Action.PLAY_AGAIN_REPEAT: ask_play_again,
        Action.PLAY_AGAIN_YES: play_again_yes,
        Action.PLAY_AGAIN_NO: quit_yes,
        Action.QUIT_CONFIRMATION: quit_confirmation,
        Action.QUIT_REPEAT: quit_confirmation,
        Action.QUIT_YES: quit_yes,
        Action.QUIT_NO: quit_no,
        Action.GENERIC_NO_MATCH_1: generic_no_match,
        Action.GENERIC_NO_MATCH_2: generic_no_match,
        Action.GENERIC_NO_MATCH_MAX: generic_no_match_max,
        Action.GENERIC_NO_INPUT_1: _say(Prompt.NO_INPUT_PROMPTS_1),
        Action.GENERIC_NO_INPUT_2: _say(Prompt.NO_INPUT_PROMPTS_2),
        Action.GENERIC_NO_INPUT_MAX: _say(Prompt.NO_INPUT_PROMPTS_3),
    }
)
