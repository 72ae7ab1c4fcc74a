"""
Tests for the night phase handler.
"""

import asyncio
from unittest.mock import Mock
from werewolf.core import NightAction, POISON, ANTIDOTE
from werewolf.phases import NightPhaseHandler


GUARD, SEER, WITCH, HUNTER = 6, 3, 4, 5


def run_night(handler):
    async def night():
        await handler.run_guard()
        await handler.run_wolves()
        await handler.run_witch()
        await handler.run_seer()
        return handler.resolve()
    return asyncio.run(night())


def test_full_night(game_state, moderator, broker, game_config, install_agents):
    """Guard and wolves pick the same seat, the witch passes: peaceful dawn."""
    agents = install_agents({
        GUARD: {"night": HUNTER},
        0: {"night": HUNTER}, 1: {"night": HUNTER}, 2: {"night": 8},
        SEER: {"night": 0},
    })
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    outcome = run_night(handler)

    assert outcome.peaceful
    assert outcome.wolf_target == HUNTER
    assert game_state.players[SEER].seer_checks[1]["is_wolf"] is True
    assert agents[WITCH].kinds() == ["night_action"]
    assert agents[7].kinds() == []


def test_witch_is_told_the_victim(game_state, moderator, broker, game_config, install_agents):
    agents = install_agents({
        0: {"night": 8}, 1: {"night": 8}, 2: {"night": 8},
        WITCH: {"night": lambda ctx: NightAction(target=ctx.extra["wolf_target"], potion=ANTIDOTE)},
    })
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    outcome = run_night(handler)

    _, context = agents[WITCH].requests[0]
    assert context.extra["wolf_target"] == 8
    assert context.extra["can_save"] is True
    assert outcome.peaceful


def test_guard_target_hidden_from_witch(game_state, moderator, broker, game_config, install_agents):
    agents = install_agents({GUARD: {"night": 8}})
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    run_night(handler)

    _, context = agents[WITCH].requests[0]
    assert set(context.extra) == {"wolf_target", "can_save", "can_poison"}
    assert context.extra["wolf_target"] is None


def test_wolves_decide_in_parallel(game_state, moderator, broker, game_config, install_agents):
    agents = install_agents({0: {"night": 7}, 1: {"night": 7}, 2: {"night": 7}}, delay=0.01)
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    asyncio.run(handler.run_wolves())

    for wolf in (0, 1, 2):
        _, context = agents[wolf].requests[0]
        assert context.extra["teammates"] == [0, 1, 2]
    assert handler.resolver.wolf_target() == 7


def test_invalid_guard_target_becomes_skip(game_state, moderator, broker, game_config, install_agents):
    """A repeat protection is rejected, logged, and the guard protects nobody."""
    game_state.players[GUARD].guard_last_target = 8
    install_agents({GUARD: {"night": 8}, 0: {"night": 8}, 1: {"night": 8}, 2: {"night": 8}})
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    outcome = run_night(handler)

    assert len(moderator.rejections) == 1
    assert moderator.rejections[0].action_type == "guard"
    assert [d.seat for d in outcome.deaths] == [8]


def test_invalid_poison_becomes_skip(game_state, moderator, broker, game_config, install_agents):
    game_state.players[9].kill()
    install_agents({WITCH: {"night": NightAction(target=9, potion=POISON)}})
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    outcome = run_night(handler)

    assert outcome.poison_target is None
    assert game_state.players[WITCH].witch_has_poison
    assert [r.action_type for r in moderator.rejections] == ["witch"]


def test_witch_without_potions_is_not_asked(game_state, moderator, broker, game_config, install_agents):
    witch = game_state.players[WITCH]
    witch.witch_has_antidote = False
    witch.witch_has_poison = False
    agents = install_agents()
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    asyncio.run(handler.run_witch())

    assert agents[WITCH].requests == []


def test_dead_roles_are_skipped(game_state, moderator, broker, game_config, install_agents):
    game_state.players[SEER].kill()
    game_state.players[GUARD].kill()
    agents = install_agents()
    handler = NightPhaseHandler(game_state, moderator, broker, game_config)
    run_night(handler)

    assert agents[SEER].requests == []
    assert agents[GUARD].requests == []


def test_night_events(game_state, moderator, broker, game_config, install_agents):
    emitter = Mock()
    install_agents({0: {"night": 8}, 1: {"night": 8}, 2: {"night": 8}, SEER: {"night": 7}})
    handler = NightPhaseHandler(game_state, moderator, broker, game_config, event_emitter=emitter)
    run_night(handler)

    emitter.emit_night_action_resolved.assert_any_call("werewolf", 8, "killed", 1)
    emitter.emit_night_action_resolved.assert_any_call("seer", 7, "inspected", 1)
