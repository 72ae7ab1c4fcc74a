"""
Phase transition table.

`next_phase` is a pure function of the current phase and a `TransitionContext`
built from the game state after the phase ran. `VALID_TRANSITIONS` is the
closed set of edges; anything outside it is an internal error.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from .game_engine import GamePhase, GameState
from .exceptions import IllegalPhaseTransition


P = GamePhase

VALID_TRANSITIONS: Dict[GamePhase, FrozenSet[GamePhase]] = {
    P.NIGHT_START: frozenset({P.NIGHT_GUARD_ACTION}),
    P.NIGHT_GUARD_ACTION: frozenset({P.NIGHT_WOLF_ACTION}),
    P.NIGHT_WOLF_ACTION: frozenset({P.NIGHT_WITCH_ACTION}),
    P.NIGHT_WITCH_ACTION: frozenset({P.NIGHT_SEER_ACTION}),
    P.NIGHT_SEER_ACTION: frozenset({P.NIGHT_RESOLVE}),
    P.NIGHT_RESOLVE: frozenset({P.DAY_START}),
    P.DAY_START: frozenset({P.BADGE_TRANSFER, P.HUNTER_SHOOT, P.DAY_BADGE_SIGNUP, P.DAY_SPEECH}),
    P.DAY_BADGE_SIGNUP: frozenset({P.DAY_BADGE_SPEECH, P.DAY_SPEECH}),
    P.DAY_BADGE_SPEECH: frozenset({P.DAY_BADGE_ELECTION}),
    P.DAY_BADGE_ELECTION: frozenset({P.DAY_PK_SPEECH, P.DAY_SPEECH}),
    P.DAY_PK_SPEECH: frozenset({P.DAY_BADGE_ELECTION, P.DAY_VOTE}),
    P.DAY_SPEECH: frozenset({P.DAY_VOTE}),
    P.DAY_VOTE: frozenset({P.DAY_RESOLVE}),
    P.DAY_RESOLVE: frozenset({P.DAY_PK_SPEECH, P.DAY_LAST_WORDS, P.NIGHT_START}),
    P.DAY_LAST_WORDS: frozenset({P.BADGE_TRANSFER, P.HUNTER_SHOOT, P.NIGHT_START}),
    P.BADGE_TRANSFER: frozenset({P.HUNTER_SHOOT, P.DAY_BADGE_SIGNUP, P.DAY_SPEECH, P.NIGHT_START}),
    P.HUNTER_SHOOT: frozenset({P.BADGE_TRANSFER, P.DAY_BADGE_SIGNUP, P.DAY_SPEECH, P.NIGHT_START}),
    P.GAME_END: frozenset(),
}


@dataclass(frozen=True)
class TransitionContext:
    """Everything the next-phase decision depends on."""
    round_number: int = 1
    winner_decided: bool = False
    badge_election_open: bool = False
    badge_candidates: int = 0
    tie_pending: bool = False
    pk_source: Optional[str] = None
    eliminated: bool = False
    pending_badge_transfer: bool = False
    pending_hunter_shot: bool = False
    reaction_origin: Optional[str] = None

    @property
    def is_first_round(self) -> bool:
        return self.round_number == 1

    @classmethod
    def from_state(cls, state: GameState) -> 'TransitionContext':
        return cls(
            round_number=state.round,
            winner_decided=state.winner is not None,
            badge_election_open=state.badge_election_open and state.round == 1,
            badge_candidates=len(state.badge_candidates),
            tie_pending=bool(state.pk_candidates),
            pk_source=state.pk_source,
            eliminated=state.day_eliminated is not None,
            pending_badge_transfer=state.pending_badge_transfer is not None,
            pending_hunter_shot=state.pending_hunter_shot is not None,
            reaction_origin=state.reaction_origin,
        )


def _day_opening(ctx: TransitionContext) -> GamePhase:
    if ctx.is_first_round and ctx.badge_election_open:
        return P.DAY_BADGE_SIGNUP
    return P.DAY_SPEECH


def _reaction_or(ctx: TransitionContext, fallback: GamePhase) -> GamePhase:
    # Badge hand-off goes first, then the hunter's shot
    if ctx.pending_badge_transfer:
        return P.BADGE_TRANSFER
    if ctx.pending_hunter_shot:
        return P.HUNTER_SHOOT
    return fallback


def _resume(ctx: TransitionContext) -> GamePhase:
    """Where play continues once every queued reaction is done."""
    if ctx.reaction_origin == "night":
        return _day_opening(ctx)
    return P.NIGHT_START


def next_phase(current: GamePhase, ctx: TransitionContext) -> GamePhase:
    """
    Compute the phase that follows `current`.

    Raises:
        IllegalPhaseTransition: If `current` is terminal
    """
    if current is P.GAME_END:
        raise IllegalPhaseTransition(current.value, None, "GAME_END is terminal")
    if ctx.winner_decided:
        return P.GAME_END

    if current is P.NIGHT_START:
        return P.NIGHT_GUARD_ACTION
    if current is P.NIGHT_GUARD_ACTION:
        return P.NIGHT_WOLF_ACTION
    if current is P.NIGHT_WOLF_ACTION:
        return P.NIGHT_WITCH_ACTION
    if current is P.NIGHT_WITCH_ACTION:
        return P.NIGHT_SEER_ACTION
    if current is P.NIGHT_SEER_ACTION:
        return P.NIGHT_RESOLVE
    if current is P.NIGHT_RESOLVE:
        return P.DAY_START
    if current is P.DAY_START:
        return _reaction_or(ctx, _day_opening(ctx))
    if current is P.DAY_BADGE_SIGNUP:
        return P.DAY_BADGE_SPEECH if ctx.badge_candidates > 1 else P.DAY_SPEECH
    if current is P.DAY_BADGE_SPEECH:
        return P.DAY_BADGE_ELECTION
    if current is P.DAY_BADGE_ELECTION:
        return P.DAY_PK_SPEECH if ctx.tie_pending else P.DAY_SPEECH
    if current is P.DAY_PK_SPEECH:
        return P.DAY_BADGE_ELECTION if ctx.pk_source == "badge" else P.DAY_VOTE
    if current is P.DAY_SPEECH:
        return P.DAY_VOTE
    if current is P.DAY_VOTE:
        return P.DAY_RESOLVE
    if current is P.DAY_RESOLVE:
        if ctx.tie_pending:
            return P.DAY_PK_SPEECH
        if ctx.eliminated:
            return P.DAY_LAST_WORDS
        return P.NIGHT_START
    if current is P.DAY_LAST_WORDS:
        return _reaction_or(ctx, P.NIGHT_START)
    if current is P.BADGE_TRANSFER:
        return P.HUNTER_SHOOT if ctx.pending_hunter_shot else _resume(ctx)
    if current is P.HUNTER_SHOOT:
        return P.BADGE_TRANSFER if ctx.pending_badge_transfer else _resume(ctx)

    raise IllegalPhaseTransition(current.value, None, f"No transition defined for {current.value}")


def check_transition(current: GamePhase, target: GamePhase) -> None:
    """
    Raise IllegalPhaseTransition unless `current -> target` is a legal edge.

    GAME_END is reachable from every non-terminal phase.
    """
    if target is P.GAME_END and current is not P.GAME_END:
        return
    if target not in VALID_TRANSITIONS.get(current, frozenset()):
        raise IllegalPhaseTransition(current.value, target.value)
