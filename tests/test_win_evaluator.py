"""
Tests for the win condition.
"""

from werewolf.core import GameState, Player, Role, Team, Death, DeathCause, GamePhase, win_evaluator


def make_players(wolves, others):
    players = [Player(seat=i, role=Role.WEREWOLF) for i in range(wolves)]
    players += [Player(seat=wolves + i, role=Role.VILLAGER) for i in range(others)]
    return players


def test_game_continues():
    assert win_evaluator.evaluate(make_players(2, 3)) is None


def test_villagers_win_without_wolves():
    assert win_evaluator.evaluate(make_players(0, 3)) is Team.VILLAGER


def test_wolves_win_at_parity():
    assert win_evaluator.evaluate(make_players(2, 2)) is Team.WOLF
    assert win_evaluator.evaluate(make_players(3, 1)) is Team.WOLF


def test_dead_players_do_not_count():
    players = make_players(2, 4)
    players[2].kill()
    players[3].kill()
    assert win_evaluator.count_alive(players) == (2, 2)
    assert win_evaluator.evaluate(players) is Team.WOLF


def test_batch_deaths_checked_once(game_state):
    """A batch that kills the last werewolves ends the game for the villagers."""
    game_state.kill_players([
        Death(0, DeathCause.VOTE, 1),
        Death(1, DeathCause.POISON, 1),
        Death(2, DeathCause.HUNTER, 1),
    ])

    assert game_state.winner is Team.VILLAGER
    assert game_state.phase is GamePhase.GAME_END


def test_kill_ignores_dead_seats(game_state):
    first = game_state.kill_players([Death(7, DeathCause.WOLF, 1)])
    second = game_state.kill_players([Death(7, DeathCause.VOTE, 1)])

    assert len(first) == 1
    assert second == []
    assert len(game_state.deaths) == 1


def test_table_keeps_going_after_wolf_voted_out(game_state):
    """Voting out one of three werewolves leaves 2 against 7: no winner."""
    game_state.kill_players([Death(1, DeathCause.VOTE, 1)])

    assert game_state.winner is None
    assert win_evaluator.count_alive(game_state.players) == (2, 7)


def test_failed_game_has_no_winner():
    state = GameState(player_count=8, random_seed=1)
    state.fail_game("corrupted")

    assert state.is_over
    assert state.failed
    assert state.winner is None
