from __future__ import annotations

from statemachine import State, StateMachine

from trivia.api.models import GamePhase, Session


class QuizFSM(StateMachine):
    """FSM wrapper around Session.phase.

    Handlers drive the transitions; the FSM only guards them.
    """

    setup = State(GamePhase.setup.value, value=GamePhase.setup.value, initial=True)
    playing = State(GamePhase.playing.value, value=GamePhase.playing.value)
    round_over = State(GamePhase.round_over.value, value=GamePhase.round_over.value)
    ended = State(GamePhase.ended.value, value=GamePhase.ended.value, final=True)

    reset = setup.to.itself() | playing.to(setup) | round_over.to(setup)
    start_round = setup.to(playing) | playing.to.itself() | round_over.to(playing)
    finish_round = playing.to(round_over)
    end = setup.to(ended) | playing.to(ended) | round_over.to(ended)

    def __init__(self, session: Session):
        self.session = session
        super().__init__(start_value=session.phase.value)

    @property
    def has_ended(self) -> bool:
        return self.current_state == self.ended

    def sync_phase_to_model(self) -> None:
        self.session.phase = GamePhase(str(self.current_state.value))


def advance(session: Session, event: str) -> None:
    """Fire `event` on the session's phase machine and write the phase back."""

    fsm = QuizFSM(session)
    fsm.send(event)
    fsm.sync_phase_to_model()


def end_session(session: Session) -> None:
    fsm = QuizFSM(session)
    if not fsm.has_ended:
        fsm.end()
    fsm.sync_phase_to_model()
