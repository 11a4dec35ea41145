from __future__ import annotations

import logging
import random

from trivia.api.models import END_CONVERSATION, Action, Session, TurnRequest, TurnResponse
from trivia.content.registry import ContentRepository
from trivia.debug import set_debug_info
from trivia.fsm import end_session
from trivia.handlers import HANDLERS, TurnContext
from trivia.prompts import Prompt
from trivia.turn_processing.helper import ResponseCollector, TurnHelper
from trivia.turn_processing.validators import ValidationContext, pipeline_for_action


logger = logging.getLogger(__name__)


def dispatch_turn(
    request: TurnRequest,
    *,
    content: ContentRepository,
    rng: random.Random | None = None,
) -> TurnResponse:
    """Run one conversational turn and return the response plus the mutated session.

    The inbound session is copied, never mutated in place. Any exception raised
    while validating or handling the turn ends the conversation with a generic
    fallback prompt.
    """

    session = request.session.model_copy(deep=True) if request.session is not None else Session()
    if request.action == Action.ANSWER and request.user_answer is not None:
        session.user_answer = request.user_answer

    turn_rng = rng or random.Random()
    helper = TurnHelper(request=request, session=session, rng=turn_rng)
    ctx = TurnContext(request=request, content=content, helper=helper, rng=turn_rng)

    try:
        pipeline_for_action(request.action).validate(
            ctx=ValidationContext(action=request.action.value, locale=request.locale),
            session=session,
        )
        HANDLERS[request.action](ctx, session)
    except Exception as e:
        logger.exception(
            "An error has occurred handling [%s]",
            request.action.value,
            extra={
                "event_type": "turn_error",
                "action": request.action.value,
                "execution_id": request.execution_id,
                "phase": session.phase.value,
            },
        )
        end_session(session)
        set_debug_info(session, execution_id=request.execution_id, error=e)
        out = ResponseCollector(next_action=END_CONVERSATION)
        out.add(Prompt.FALLBACK_PROMPT_2)
        return out.to_response(session)

    set_debug_info(session, execution_id=request.execution_id)
    logger.info(
        "Turn handled",
        extra={
            "event_type": "turn_handled",
            "action": request.action.value,
            "execution_id": request.execution_id,
            "phase": session.phase.value,
            "next_action": helper.out.next_action,
        },
    )
    return helper.out.to_response(session)
