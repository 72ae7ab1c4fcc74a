"""
Tests for the phase transition table.
"""

import itertools
import pytest
from werewolf.core import (
    GamePhase, TransitionContext, next_phase, check_transition,
    VALID_TRANSITIONS, IllegalPhaseTransition
)


P = GamePhase


def test_night_runs_in_fixed_order():
    ctx = TransitionContext()
    order = [P.NIGHT_START]
    while order[-1] is not P.DAY_START:
        order.append(next_phase(order[-1], ctx))

    assert order == [
        P.NIGHT_START, P.NIGHT_GUARD_ACTION, P.NIGHT_WOLF_ACTION,
        P.NIGHT_WITCH_ACTION, P.NIGHT_SEER_ACTION, P.NIGHT_RESOLVE, P.DAY_START,
    ]


def test_first_day_opens_with_badge_signup():
    ctx = TransitionContext(round_number=1, badge_election_open=True)
    assert next_phase(P.DAY_START, ctx) is P.DAY_BADGE_SIGNUP


def test_later_days_open_with_speeches():
    ctx = TransitionContext(round_number=2, badge_election_open=True)
    assert next_phase(P.DAY_START, ctx) is P.DAY_SPEECH
    assert next_phase(P.DAY_START, TransitionContext(round_number=1)) is P.DAY_SPEECH


def test_night_death_reactions_come_before_day():
    """Badge hand-off first, then the Hunter."""
    both = TransitionContext(pending_badge_transfer=True, pending_hunter_shot=True, reaction_origin="night")
    hunter = TransitionContext(pending_hunter_shot=True, reaction_origin="night")

    assert next_phase(P.DAY_START, both) is P.BADGE_TRANSFER
    assert next_phase(P.BADGE_TRANSFER, hunter) is P.HUNTER_SHOOT
    assert next_phase(P.DAY_START, hunter) is P.HUNTER_SHOOT


def test_reactions_resume_where_they_came_from():
    night = TransitionContext(round_number=1, badge_election_open=True, reaction_origin="night")
    night_later = TransitionContext(round_number=3, reaction_origin="night")
    day = TransitionContext(round_number=1, badge_election_open=True, reaction_origin="day")

    assert next_phase(P.HUNTER_SHOOT, night) is P.DAY_BADGE_SIGNUP
    assert next_phase(P.HUNTER_SHOOT, night_later) is P.DAY_SPEECH
    assert next_phase(P.HUNTER_SHOOT, day) is P.NIGHT_START
    assert next_phase(P.BADGE_TRANSFER, day) is P.NIGHT_START


def test_hunter_shot_can_queue_a_badge_transfer():
    ctx = TransitionContext(pending_badge_transfer=True, reaction_origin="day")
    assert next_phase(P.HUNTER_SHOOT, ctx) is P.BADGE_TRANSFER


@pytest.mark.parametrize("candidates,expected", [
    (0, P.DAY_SPEECH), (1, P.DAY_SPEECH), (2, P.DAY_BADGE_SPEECH), (5, P.DAY_BADGE_SPEECH),
])
def test_badge_signup_branches(candidates, expected):
    assert next_phase(P.DAY_BADGE_SIGNUP, TransitionContext(badge_candidates=candidates)) is expected


def test_pk_rounds():
    badge_tie = TransitionContext(tie_pending=True, pk_source="badge")
    vote_tie = TransitionContext(tie_pending=True, pk_source="vote")

    assert next_phase(P.DAY_BADGE_ELECTION, badge_tie) is P.DAY_PK_SPEECH
    assert next_phase(P.DAY_PK_SPEECH, badge_tie) is P.DAY_BADGE_ELECTION
    assert next_phase(P.DAY_RESOLVE, vote_tie) is P.DAY_PK_SPEECH
    assert next_phase(P.DAY_PK_SPEECH, vote_tie) is P.DAY_VOTE
    assert next_phase(P.DAY_BADGE_ELECTION, TransitionContext()) is P.DAY_SPEECH


def test_day_resolve_branches():
    assert next_phase(P.DAY_RESOLVE, TransitionContext(eliminated=True)) is P.DAY_LAST_WORDS
    assert next_phase(P.DAY_RESOLVE, TransitionContext()) is P.NIGHT_START
    assert next_phase(P.DAY_LAST_WORDS, TransitionContext()) is P.NIGHT_START
    assert next_phase(
        P.DAY_LAST_WORDS, TransitionContext(pending_hunter_shot=True, reaction_origin="day")
    ) is P.HUNTER_SHOOT


def test_winner_ends_the_game_from_anywhere():
    ctx = TransitionContext(winner_decided=True)
    for phase in GamePhase:
        if phase is not P.GAME_END:
            assert next_phase(phase, ctx) is P.GAME_END
            check_transition(phase, P.GAME_END)


def test_game_end_is_terminal():
    with pytest.raises(IllegalPhaseTransition):
        next_phase(P.GAME_END, TransitionContext())
    with pytest.raises(IllegalPhaseTransition):
        check_transition(P.GAME_END, P.NIGHT_START)


def test_illegal_edge_rejected():
    with pytest.raises(IllegalPhaseTransition):
        check_transition(P.NIGHT_START, P.DAY_VOTE)
    with pytest.raises(IllegalPhaseTransition):
        check_transition(P.DAY_SPEECH, P.DAY_LAST_WORDS)


def test_next_phase_only_takes_table_edges():
    """Every computed transition, for every combination of flags, is in the table."""
    flags = itertools.product(
        (1, 2), (False, True), (0, 2), (False, True), (None, "badge", "vote"),
        (False, True), (False, True), (False, True), (None, "night", "day"),
    )
    for values in flags:
        ctx = TransitionContext(
            round_number=values[0], badge_election_open=values[1], badge_candidates=values[2],
            tie_pending=values[3], pk_source=values[4], eliminated=values[5],
            pending_badge_transfer=values[6], pending_hunter_shot=values[7], reaction_origin=values[8],
        )
        for phase in VALID_TRANSITIONS:
            if phase is P.GAME_END:
                continue
            check_transition(phase, next_phase(phase, ctx))
