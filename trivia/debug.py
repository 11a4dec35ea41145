from __future__ import annotations

import traceback

from trivia import config
from trivia.api.models import DebugInfo, Session


STATUS_OK = 200
STATUS_ERROR = 500

SUCCESS_LABEL = "Webhook Fulfillment Successfully Executed"
FAILURE_LABEL = "Webhook Execution Error"


def build_debug_info(*, execution_id: str | None, error: BaseException | None = None) -> DebugInfo:
    if error is None:
        return DebugInfo(
            status=STATUS_OK,
            label=SUCCESS_LABEL,
            version=config.function_version(),
            execution_id=execution_id,
        )
    return DebugInfo(
        status=STATUS_ERROR,
        label=FAILURE_LABEL,
        version=config.function_version(),
        execution_id=execution_id,
        message=str(error),
        stack="".join(traceback.format_exception(error)),
    )


def set_debug_info(session: Session, *, execution_id: str | None, error: BaseException | None = None) -> None:
    """Attach the turn's diagnostic record to the session when debug mode is on."""

    if config.debug_enabled():
        session.debug_info = build_debug_info(execution_id=execution_id, error=error)
