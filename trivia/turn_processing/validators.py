from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType

from trivia.api.models import Action, GamePhase, Session


class TurnValidationError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators. Small enough to log as-is."""

    action: str
    locale: str


class TurnValidator(ABC):
    """A small, composable validation unit for an incoming action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, session: Session) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PhaseValidator(TurnValidator):
    allowed_phases: frozenset[GamePhase]

    def validate(self, *, ctx: ValidationContext, session: Session) -> None:
        if session.phase not in self.allowed_phases:
            allowed = ",".join(sorted(p.value for p in self.allowed_phases))
            raise TurnValidationError(
                f"Action '{ctx.action}' not allowed in phase '{session.phase.value}' (allowed: {allowed})"
            )


@dataclass(frozen=True, slots=True)
class EndedSessionValidator(TurnValidator):
    """Deny actions once the conversation has ended."""

    allow_actions: frozenset[str] = frozenset()

    def validate(self, *, ctx: ValidationContext, session: Session) -> None:
        if session.phase == GamePhase.ended and ctx.action not in self.allow_actions:
            raise TurnValidationError("Session has ended")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def validate(self, *, ctx: ValidationContext, session: Session) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, session=session)


QUESTION_FLOW_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.ASK_QUESTION,
        Action.QUESTION_REPEAT,
        Action.ANSWER,
        Action.ANSWER_ORDINAL,
        Action.ANSWER_SKIP,
        Action.GIVE_SCORE,
        Action.ROUND_END,
    }
)

DEFAULT_PIPELINE = ValidatorPipeline(validators=(EndedSessionValidator(),))

_QUESTION_FLOW_PIPELINE = ValidatorPipeline(
    validators=(
        EndedSessionValidator(),
        PhaseValidator(allowed_phases=frozenset({GamePhase.playing})),
    )
)

ACTION_PIPELINES: MappingProxyType[Action, ValidatorPipeline] = MappingProxyType(
    {action: _QUESTION_FLOW_PIPELINE for action in QUESTION_FLOW_ACTIONS}
)


def pipeline_for_action(action: Action) -> ValidatorPipeline:
    return ACTION_PIPELINES.get(action, DEFAULT_PIPELINE)
