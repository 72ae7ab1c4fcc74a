"""
Tests for the OpenAI-backed agent: prompts and reply parsing (no API calls).
"""

import asyncio
from unittest.mock import patch

from werewolf.core import NightAction, POISON
from werewolf.agents import SimpleLLMAgent, DecisionBroker, LLMEmptyResponseError


def make_agent(game_state, game_config, seat):
    return SimpleLLMAgent(game_state.players[seat], game_config)


@patch.object(SimpleLLMAgent, '_call_llm_async', return_value="I vote for player 7, definitely.")
def test_vote_parsed_from_reply(mock_llm, game_state, game_config):
    agent = make_agent(game_state, game_config, 3)
    context = agent.build_context(game_state, [0, 7, 8])

    assert asyncio.run(agent.request_vote(context)) == 7
    prompt, action_type, _ = mock_llm.call_args[0]
    assert action_type == "vote"
    assert "CANDIDATES: [0, 7, 8]" in prompt


@patch.object(SimpleLLMAgent, '_call_llm_async', return_value="ABSTAIN")
def test_abstain(mock_llm, game_state, game_config):
    agent = make_agent(game_state, game_config, 3)
    context = agent.build_context(game_state, [0, 7])
    assert asyncio.run(agent.request_vote(context)) is None


@patch.object(SimpleLLMAgent, '_call_llm_async', return_value="POISON 8")
def test_witch_reply(mock_llm, game_state, game_config):
    agent = make_agent(game_state, game_config, 4)
    context = agent.build_context(game_state, [7, 8], {"wolf_target": 7})

    assert asyncio.run(agent.request_night_action(context)) == NightAction(target=8, potion=POISON)
    prompt = mock_llm.call_args[0][0]
    assert "Tonight the werewolves attacked: 7" in prompt


def test_wolf_prompt_lists_teammates_only(game_state, game_config):
    wolf = make_agent(game_state, game_config, 0)
    villager = make_agent(game_state, game_config, 8)

    wolf_prompt = wolf.build_prompt(wolf.build_context(game_state, [7, 8]), "wolf_kill")
    villager_prompt = villager.build_prompt(villager.build_context(game_state, [7]), "vote")

    assert "Your fellow werewolves: [0, 1, 2]" in wolf_prompt
    assert "fellow werewolves" not in villager_prompt


@patch.object(SimpleLLMAgent, '_call_llm_async', return_value="Trust me, seat 9 is quiet.")
def test_speech_uses_speech_budget(mock_llm, game_state, game_config):
    agent = make_agent(game_state, game_config, 8)
    context = agent.build_context(game_state, extra={"last_words": True})

    assert asyncio.run(agent.request_speech(context)) == "Trust me, seat 9 is quiet."
    _, action_type, max_tokens = mock_llm.call_args[0]
    assert action_type == "last_words"
    assert max_tokens == game_config.max_speech_tokens


def test_empty_reply_becomes_skip(game_state, game_config, moderator):
    agent = make_agent(game_state, game_config, 8)
    broker = DecisionBroker(game_config)
    broker.bind(game_state, {8: agent}, moderator)

    error = LLMEmptyResponseError(8, "vote", "empty")
    with patch.object(SimpleLLMAgent, '_call_llm_async', side_effect=error):
        assert asyncio.run(broker.request(8, "vote", [0, 1])) is None

    failure = [a for a in game_state.action_log if a["type"] == "decision_failed"][0]
    assert failure["data"]["error"] == "LLMEmptyResponseError"
