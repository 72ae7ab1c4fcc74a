"""
Tests for the decision broker: timeouts, failures and stale answers.
"""

import asyncio
import pytest
from werewolf.core import GameState, GamePhase, NightAction, Role, StaleResponse
from werewolf.agents import DecisionBroker, DummyAgent
from werewolf.config.game_config import GameConfig


def test_answer_is_returned(broker, install_agents):
    install_agents({7: {"vote": 3}})
    assert asyncio.run(broker.request(7, "vote", [3, 4])) == 3


def test_night_action_accepts_bare_seat(broker, install_agents):
    install_agents({6: {"night": 8}})
    action = asyncio.run(broker.request(6, "night_action", [8]))
    assert action == NightAction(target=8)


def test_timeout_becomes_skip(game_state, moderator, install_agents):
    config = GameConfig(decision_timeout_ms=20, use_announcements=False)
    broker = DecisionBroker(config)
    agents = install_agents({7: {"vote": 3}}, delay=0.5)
    broker.bind(game_state, agents, moderator)

    assert asyncio.run(broker.request(7, "vote", [3])) is None
    failures = [a for a in game_state.action_log if a["type"] == "decision_failed"]
    assert failures[0]["data"] == {"seat": 7, "action": "vote", "error": "DecisionTimeout"}


def test_crash_becomes_skip(broker, game_state, install_agents):
    install_agents({7: {"vote": ValueError("bad")}, 6: {"night": RuntimeError("boom")}})

    assert asyncio.run(broker.request(7, "vote", [3])) is None
    assert asyncio.run(broker.request(6, "night_action", [3])).is_skip


def test_out_of_range_answer_is_rejected(broker, moderator, install_agents):
    install_agents({7: {"vote": 42}})

    assert asyncio.run(broker.request(7, "vote", [3, 4])) is None
    assert moderator.rejections[0].seat == 7


def test_bool_is_not_a_seat(broker, install_agents):
    install_agents({7: {"vote": True}})
    assert asyncio.run(broker.request(7, "vote", [0, 1])) is None


def test_stale_answer_is_discarded(broker, game_state, install_agents):
    """The sub-phase moved on while the seat was thinking."""
    def answer_late(context):
        game_state.enter_phase(GamePhase.DAY_RESOLVE)
        return 3

    install_agents({7: {"vote": answer_late}})

    assert asyncio.run(broker.request(7, "vote", [3])) is None
    assert broker.discarded == 1
    assert not any(a["type"] == "decision_failed" for a in game_state.action_log)


def test_answer_from_replaced_game_is_stale(broker, game_state, moderator, install_agents):
    agents = install_agents()
    context = agents[7].build_context(game_state, [3])
    broker.bind(GameState(player_count=10, random_seed=3), {}, moderator)

    with pytest.raises(StaleResponse):
        broker.check_fresh(context.game_id, context.epoch)


def test_unknown_seat_gets_skip(broker):
    assert asyncio.run(broker.request(3, "speech")) == ""
    assert asyncio.run(broker.request(3, "badge_signup")) is False


def test_gather_runs_requests_concurrently(broker, install_agents):
    install_agents({seat: {"vote": 9 if seat != 9 else 0} for seat in range(10)}, delay=0.05)

    async def collect():
        started = asyncio.get_running_loop().time()
        answers = await broker.gather(list(range(10)), "vote", candidates=lambda seat: [0, 9])
        return answers, asyncio.get_running_loop().time() - started

    answers, elapsed = asyncio.run(collect())
    assert answers[0] == 9
    assert answers[9] == 0
    assert elapsed < 0.45


def test_human_seat_gets_longer_timeout(game_config):
    roles = [Role.WEREWOLF] * 3 + [Role.SEER, Role.WITCH, Role.HUNTER, Role.GUARD] + [Role.VILLAGER] * 3
    state = GameState(roles=roles, human_seat=4)
    broker = DecisionBroker(game_config)
    broker.bind(state, {})

    assert broker.timeout_for(4) == game_config.human_decision_timeout
    assert broker.timeout_for(5) == game_config.decision_timeout


def test_dummy_agents_answer_through_broker(game_state, game_config, moderator):
    broker = DecisionBroker(game_config)
    agents = {p.seat: DummyAgent(p, game_config) for p in game_state.players}
    broker.bind(game_state, agents, moderator)

    vote = asyncio.run(broker.request(7, "vote", [0, 1, 2]))
    speech = asyncio.run(broker.request(7, "speech"))

    assert vote in (0, 1, 2)
    assert "Player 7" in speech
    assert moderator.rejections == []
