from __future__ import annotations

import random

import pytest

from trivia.actions import dispatch_turn
from trivia.api.models import END_CONVERSATION, Action, GamePhase, Session, TurnRequest
from trivia.content.fields import DEFAULT_AUDIO, SettingsAlias
from trivia.prompts import Prompt


def _turn(content, action: Action, session: Session | None = None, **kwargs):
    request = TurnRequest(action=action, session=session, **kwargs)
    return dispatch_turn(request, content=content, rng=random.Random(42))


def _is_audio(fragment: str, alias: str) -> bool:
    return any(fragment == f'<audio src="{url}"/>' for url in DEFAULT_AUDIO[alias])


# --- answering ---


def test_answer_matches_case_insensitively(content, playing_session) -> None:
    resp = _turn(content, Action.ANSWER, playing_session(), user_answer="paris")

    s = resp.session
    assert s.correct_count == 1
    assert s.count == 1
    assert s.question_number == 2
    assert s.user_answer is None
    assert _is_audio(resp.fragments[0], SettingsAlias.AUDIO_CALCULATING)
    assert _is_audio(resp.fragments[1], SettingsAlias.AUDIO_CORRECT)
    assert resp.fragments[2:4] == [Prompt.RIGHT_ANSWER_PROMPTS_1, Prompt.RIGHT_ANSWER_PROMPTS_2]
    assert resp.next_action == Action.ASK_QUESTION


def test_near_miss_answer_is_incorrect(content, playing_session) -> None:
    resp = _turn(content, Action.ANSWER, playing_session(), user_answer="Pari")

    assert resp.session.correct_count == 0
    assert resp.session.count == 1
    assert _is_audio(resp.fragments[1], SettingsAlias.AUDIO_INCORRECT)
    assert resp.fragments[2:] == [Prompt.WRONG_ANSWER_PROMPTS_1, Prompt.WRONG_ANSWER_PROMPTS_2]


def test_answer_reads_captured_session_answer(content, playing_session) -> None:
    resp = _turn(content, Action.ANSWER, playing_session(user_answer="PARIS"))

    assert resp.session.correct_count == 1
    assert resp.session.user_answer is None


def test_answer_appends_follow_up(content, playing_session, make_question) -> None:
    q = make_question(follow_up="Paris is on the Seine.")
    resp = _turn(content, Action.ANSWER, playing_session(questions=[q], limit=1), user_answer="Paris")

    assert resp.fragments[-1] == "Paris is on the Seine."
    assert resp.next_action == Action.ROUND_END


def test_ordinal_maps_to_current_suggestion(content, playing_session) -> None:
    session = playing_session(suggestions=["Paris", "London", "Berlin"])

    resp = _turn(content, Action.ANSWER_ORDINAL, session, slots={"count": {"resolved": "second"}})

    # "second" is London, scored exactly as if "London" had been said.
    assert resp.session.correct_count == 0
    assert resp.session.count == 1
    assert resp.fragments[2:] == [Prompt.WRONG_ANSWER_PROMPTS_1, Prompt.WRONG_ANSWER_PROMPTS_2]

    resp = _turn(content, Action.ANSWER_ORDINAL, session, slots={"count": {"resolved": "first"}})
    assert resp.session.correct_count == 1


def test_ordinal_third_falls_back_to_second(content, playing_session) -> None:
    session = playing_session(suggestions=["London", "Paris"])

    resp = _turn(content, Action.ANSWER_ORDINAL, session, slots={"count": {"resolved": "third"}})

    assert resp.session.correct_count == 1


def test_unresolved_ordinal_goes_to_no_match(content, playing_session) -> None:
    session = playing_session(suggestions=["Paris", "London", "Berlin"])

    for slots in ({}, {"count": {"original": "the middle one"}}):
        resp = _turn(content, Action.ANSWER_ORDINAL, session, slots=slots)
        assert resp.fragments == [Prompt.RAPID_REPROMPTS]
        assert resp.session.count == 0
        assert resp.session.correct_count == 0



def test_request_answer_is_only_captured_for_answer_turns(content, playing_session) -> None:
    session = playing_session(suggestions=["Paris", "London", "Berlin"])

    resp = _turn(
        content, Action.ANSWER_ORDINAL, session, slots={"count": {"resolved": "second"}}, user_answer="Paris"
    )

    assert resp.session.user_answer is None
    assert resp.session.correct_count == 0

    resp = _turn(content, Action.QUESTION_REPEAT, resp.session, user_answer="Tokyo")
    assert resp.session.user_answer is None

    resp = _turn(content, Action.ANSWER, resp.session)
    assert resp.session.correct_count == 0
    assert resp.session.count == 2

def test_skip_then_answer_advances_once(content, playing_session) -> None:
    skipped = _turn(content, Action.ANSWER_SKIP, playing_session())

    assert skipped.session.is_skip is True
    assert skipped.next_action == Action.ANSWER

    resp = _turn(content, Action.ANSWER, skipped.session, user_answer="Paris")

    assert resp.fragments == [Prompt.SKIP_PROMPTS]
    assert resp.session.is_skip is False
    assert resp.session.count == 1
    assert resp.session.question_number == 2
    assert resp.session.correct_count == 0


@pytest.mark.parametrize(
    ("correct_count", "expected"),
    [(0, Prompt.NONE_CORRECT_PROMPTS), (5, Prompt.ALL_CORRECT_PROMPTS), (3, Prompt.SOME_CORRECT_PROMPTS)],
)
def test_round_end_classification(content, playing_session, correct_count, expected) -> None:
    resp = _turn(content, Action.ROUND_END, playing_session(limit=5, count=5, correct_count=correct_count))

    assert _is_audio(resp.fragments[0], SettingsAlias.AUDIO_ROUND_END)
    assert resp.fragments[1:] == [Prompt.GAME_OVER_PROMPTS_1, Prompt.GAME_OVER_PROMPTS_2, expected]
    assert resp.session.phase == GamePhase.round_over
    assert resp.next_action == Action.ASK_PLAY_AGAIN


# --- asking ---


def test_first_question_without_rich_response(content, playing_session) -> None:
    resp = _turn(content, Action.ASK_QUESTION, playing_session())

    s = resp.session
    assert sorted(s.suggestions) == ["Berlin", "London", "Paris"]
    assert resp.fragments[:4] == [
        Prompt.LETS_PLAY_PROMPTS,
        Prompt.FIRST_ROUND_PROMPTS,
        Prompt.ROUND_PROMPTS,
        "What is the capital of France?",
    ]
    a, b, c = s.suggestions
    assert resp.fragments[4] == f"{a}, {b}, {Prompt.MISC_PROMPTS_OR} {c}"
    assert _is_audio(resp.fragments[5], SettingsAlias.AUDIO_DING)
    assert resp.suggestions == s.suggestions
    assert s.correct_answer == "Paris"
    assert s.current_question is not None and s.current_question.question == "What is the capital of France?"


def test_rich_response_skips_spoken_options(content, playing_session) -> None:
    resp = _turn(content, Action.ASK_QUESTION, playing_session(), capabilities=["SPEECH", "RICH_RESPONSE"])

    assert len(resp.fragments) == 5
    assert _is_audio(resp.fragments[-1], SettingsAlias.AUDIO_DING)


@pytest.mark.parametrize(
    ("count", "expected"),
    [(1, Prompt.NEXT_QUESTION_PROMPTS), (2, Prompt.FINAL_ROUND_PROMPTS)],
)
def test_transition_depends_on_position(content, playing_session, count, expected) -> None:
    resp = _turn(content, Action.ASK_QUESTION, playing_session(count=count))

    assert resp.fragments[0] == expected
    assert resp.fragments[1] == Prompt.ROUND_PROMPTS


def test_repeat_keeps_prior_suggestions(content, playing_session) -> None:
    session = playing_session(suggestions=["Berlin", "Paris", "London"])

    resp = _turn(content, Action.QUESTION_REPEAT, session)

    assert resp.fragments[0] == Prompt.REPEAT_PROMPTS
    assert resp.session.suggestions == ["Berlin", "Paris", "London"]
    assert resp.session.is_repeat is False


def test_give_score_prefixes_the_repeat(content, playing_session) -> None:
    resp = _turn(content, Action.GIVE_SCORE, playing_session(suggestions=["Paris", "London", "Berlin"]))

    assert resp.fragments[:2] == [Prompt.YOUR_SCORE_PROMPTS, Prompt.REPEAT_PROMPTS]
    assert resp.session.suggestions == ["Paris", "London", "Berlin"]


def test_answer_sets_become_speech_bias_entries(content, playing_session, make_question) -> None:
    q = make_question(correct=["Paris", "paris", "City of Light \U0001F4A1"], incorrect_2=[])
    resp = _turn(content, Action.ASK_QUESTION, playing_session(questions=[q], limit=1))

    (override,) = resp.type_overrides
    assert override.name == "answer"
    assert override.mode == "TYPE_REPLACE"
    assert [e.name for e in override.entries] == ["paris", "london"]
    assert override.entries[0].synonyms == ["paris", "city of light"]
    assert resp.expected_speech == ["Paris", "paris", "City of Light", "London"]
    assert sorted(resp.session.suggestions) == ["London", "Paris"]


def test_long_options_render_as_list_items(content, playing_session, make_question) -> None:
    q = make_question(correct=["A very long answer option text"], incorrect_1=["Short"], incorrect_2=[])
    resp = _turn(content, Action.ASK_QUESTION, playing_session(questions=[q], limit=1))

    assert resp.suggestions == []
    assert sorted(resp.list_items) == ["A very long answer option text", "Short"]


# --- setup ---


def test_setup_quiz_resolves_settings(content) -> None:
    resp = _turn(content, Action.SETUP_QUIZ)

    s = resp.session
    assert s.title == "Test Quiz"
    assert s.has_category is True
    assert s.has_difficulty is False
    assert s.quiz_settings.questions_per_game == 3
    assert s.quiz_settings.quit_prompt == "Thanks for testing!"
    assert s.phase == GamePhase.setup
    assert resp.fragments == []


def test_setup_quiz_resets_progress(content, playing_session) -> None:
    resp = _turn(content, Action.SETUP_QUIZ, playing_session(count=2, correct_count=2, is_skip=True))

    s = resp.session
    assert (s.count, s.correct_count, s.question_number) == (0, 0, 1)
    assert s.questions == []
    assert s.is_skip is False
    assert s.phase == GamePhase.setup


def test_setup_quiz_on_replay_clears_selection(content) -> None:
    session = Session(is_replay=True, category="science", set_category=True, difficulty="easy", set_difficulty=True)

    s = _turn(content, Action.SETUP_QUIZ, session).session

    assert s.is_replay is True
    assert (s.category, s.difficulty) == (None, None)
    assert (s.set_category, s.set_difficulty) == (False, False)


def test_welcome_greets_new_and_returning_users(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session

    new_user = _turn(content, Action.WELCOME, session)
    assert _is_audio(new_user.fragments[0], SettingsAlias.AUDIO_GAME_INTRO)
    assert new_user.fragments[1] == Prompt.GREETING_PROMPTS_1
    assert new_user.next_action == Action.PROMPT_CATEGORY

    returning = _turn(content, Action.WELCOME, session, last_seen_time="2024-05-01T10:00:00Z")
    assert returning.fragments[1] == Prompt.GREETING_PROMPTS_2


def test_welcome_is_silent_on_replay(content) -> None:
    resp = _turn(content, Action.WELCOME, Session(is_replay=True))

    assert resp.fragments == []
    assert resp.next_action == Action.FINALIZE_SETUP


def test_prompt_category_offers_chips(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session

    resp = _turn(content, Action.PROMPT_CATEGORY, session)

    assert resp.fragments == ["Choose a category", f"Geography, Science, {Prompt.MISC_PROMPTS_OR} History"]
    assert resp.suggestions == ["Geography", "Science", "History"]
    assert [e.name for e in resp.type_overrides[0].entries] == ["geography", "science", "history"]

    rich = _turn(content, Action.PROMPT_CATEGORY, session, capabilities=["RICH_RESPONSE"])
    assert rich.fragments == ["Choose a category"]


def test_set_category_records_selection(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session

    resp = _turn(content, Action.SET_CATEGORY, session, slots={"category": {"original": "geo", "resolved": "Geography"}})

    s = resp.session
    assert s.category == "Geography"
    assert s.selection == "Geography"
    assert s.set_category is True
    assert resp.fragments == [Prompt.SELECTION_CONFIRMATION_PROMPTS]
    assert resp.next_action == Action.FINALIZE_SETUP


def test_finalize_setup_draws_from_selected_bucket(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session
    session.category = "Geography"

    resp = _turn(content, Action.FINALIZE_SETUP, session)

    s = resp.session
    assert s.category == "geography"
    assert s.difficulty == "defaultdifficulty"
    assert s.limit == 3
    assert len(s.questions) == 3
    assert {q.category.lower() for q in s.questions} == {"geography"}
    assert s.phase == GamePhase.playing
    assert resp.next_action == Action.ASK_QUESTION



def test_finalize_setup_with_no_questions_goes_to_round_end(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session
    session.category = "Geography"
    session.quiz_settings.questions_per_game = 0

    resp = _turn(content, Action.FINALIZE_SETUP, session)

    assert resp.session.limit == 0
    assert resp.next_action == Action.ROUND_END

    resp = _turn(content, Action.ROUND_END, resp.session)
    assert resp.session.phase == GamePhase.round_over
    assert resp.next_action == Action.ASK_PLAY_AGAIN

def test_finalize_setup_without_category_support_uses_sentinels(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ, locale="fr").session
    assert session.has_category is False

    s = _turn(content, Action.FINALIZE_SETUP, session, locale="fr").session

    assert (s.category, s.difficulty) == ("defaultcategory", "defaultdifficulty")
    assert s.limit == 1


# --- confirmations ---


@pytest.mark.parametrize(
    ("action", "prompt"),
    [
        (Action.RESTART_CONFIRMATION, Prompt.RESTART_CONFIRMATION),
        (Action.RESTART_REPEAT, Prompt.RESTART_CONFIRMATION),
        (Action.ASK_PLAY_AGAIN, Prompt.PLAY_AGAIN_QUESTION_PROMPTS),
        (Action.PLAY_AGAIN_REPEAT, Prompt.PLAY_AGAIN_QUESTION_PROMPTS),
        (Action.QUIT_CONFIRMATION, Prompt.STOP_PROMPTS),
        (Action.QUIT_REPEAT, Prompt.STOP_PROMPTS),
    ],
)
def test_confirmations_offer_yes_no(content, action, prompt) -> None:
    resp = _turn(content, action, Session())

    assert resp.fragments == [prompt]
    assert resp.suggestions == [Prompt.MISC_PROMPTS_YES, Prompt.MISC_PROMPTS_NO]


def test_restart_no_marks_repeat_and_reprompts(content, playing_session) -> None:
    resp = _turn(content, Action.RESTART_NO, playing_session())

    assert resp.session.is_repeat is True
    assert resp.fragments == [Prompt.RE_PROMPT]


def test_restart_yes_requests_replay(content, playing_session) -> None:
    resp = _turn(content, Action.RESTART_YES, playing_session())

    assert resp.session.is_replay is True
    assert resp.fragments == [Prompt.RESTART_YES]
    assert resp.next_action == Action.SETUP_QUIZ


def test_play_again_yes_zeroes_counters(content, playing_session) -> None:
    resp = _turn(content, Action.PLAY_AGAIN_YES, playing_session(count=3, question_number=4, correct_count=2))

    s = resp.session
    assert s.is_replay is True
    assert (s.count, s.question_number, s.correct_count) == (0, 1, 0)
    assert resp.fragments == [Prompt.RE_PROMPT]
    assert resp.next_action == Action.SETUP_QUIZ


def test_quit_yes_uses_custom_quit_prompt(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session

    resp = _turn(content, Action.QUIT_YES, session)

    assert resp.fragments[0] == "Thanks for testing!"
    assert _is_audio(resp.fragments[1], SettingsAlias.AUDIO_GAME_OUTRO)
    assert resp.session.phase == GamePhase.ended
    assert resp.next_action == END_CONVERSATION


@pytest.mark.parametrize("action", [Action.QUIT_YES, Action.PLAY_AGAIN_NO])
def test_quit_without_custom_prompt(content, action) -> None:
    resp = _turn(content, action, Session(phase=GamePhase.round_over))

    assert resp.fragments[0] == Prompt.QUIT_PROMPTS
    assert resp.session.phase == GamePhase.ended
    assert resp.next_action == END_CONVERSATION


def test_answer_help(content, playing_session) -> None:
    resp = _turn(content, Action.ANSWER_HELP, playing_session())

    assert resp.fragments == [Prompt.HELP_PROMPTS]


@pytest.mark.parametrize(
    ("action", "prompt"),
    [
        (Action.GENERIC_NO_MATCH_1, Prompt.RAPID_REPROMPTS),
        (Action.GENERIC_NO_MATCH_2, Prompt.RAPID_REPROMPTS),
        (Action.GENERIC_NO_MATCH_MAX, Prompt.FALLBACK_PROMPT_2),
        (Action.GENERIC_NO_INPUT_1, Prompt.NO_INPUT_PROMPTS_1),
        (Action.GENERIC_NO_INPUT_2, Prompt.NO_INPUT_PROMPTS_2),
        (Action.GENERIC_NO_INPUT_MAX, Prompt.NO_INPUT_PROMPTS_3),
    ],
)
def test_fallback_ladder_does_not_touch_session(content, playing_session, action, prompt) -> None:
    session = playing_session(count=1, correct_count=1, suggestions=["Tokyo", "Kyoto", "Osaka"])

    resp = _turn(content, action, session)

    assert resp.fragments == [prompt]
    assert resp.session.model_dump(exclude={"debug_info"}) == session.model_dump(exclude={"debug_info"})


def test_every_action_has_a_handler() -> None:
    from trivia.handlers import HANDLERS

    assert set(HANDLERS) == set(Action)


# --- a whole game ---


def test_full_game_all_correct(content) -> None:
    session = _turn(content, Action.SETUP_QUIZ).session
    session = _turn(content, Action.WELCOME, session).session
    session = _turn(content, Action.SET_CATEGORY, session, slots={"category": {"resolved": "Geography"}}).session
    resp = _turn(content, Action.FINALIZE_SETUP, session)

    while resp.next_action == Action.ASK_QUESTION:
        asked = _turn(content, Action.ASK_QUESTION, resp.session)
        resp = _turn(content, Action.ANSWER, asked.session, user_answer=asked.session.correct_answer)

    assert resp.next_action == Action.ROUND_END
    end = _turn(content, Action.ROUND_END, resp.session)
    assert end.fragments[-1] == Prompt.ALL_CORRECT_PROMPTS
    assert end.session.correct_count == end.session.limit == 3

    again = _turn(content, Action.PLAY_AGAIN_YES, end.session)
    replay = _turn(content, Action.SETUP_QUIZ, again.session)
    assert replay.session.is_replay is True
    assert replay.session.category is None
    assert _turn(content, Action.WELCOME, replay.session).fragments == []
