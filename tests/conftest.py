"""
Pytest fixtures for Werewolf game tests.
"""

import asyncio
import pytest
from unittest.mock import patch
from typing import Any, Dict, Optional

from werewolf.core import GameState, Moderator, Role, NightAction
from werewolf.agents import BaseAgent, AgentContext, SimpleLLMAgent, DecisionBroker
from werewolf.config.game_config import GameConfig


# Seats 0-2 are werewolves, then one of each special role, then villagers
FIXED_ROLES = [
    Role.WEREWOLF, Role.WEREWOLF, Role.WEREWOLF,
    Role.SEER, Role.WITCH, Role.HUNTER, Role.GUARD,
    Role.VILLAGER, Role.VILLAGER, Role.VILLAGER,
]
SEER, WITCH, HUNTER, GUARD = 3, 4, 5, 6


class ScriptedAgent(BaseAgent):
    """
    Decision source answering from a script.

    Each answer is a value, a callable taking the AgentContext, or an
    exception instance to raise. Every request is remembered in `requests`.
    """

    def __init__(self, player, config, night=None, vote=None, speech="...", signup=False,
                 transfer=None, shot=None, delay: float = 0):
        super().__init__(player, config)
        self.answers: Dict[str, Any] = {
            "night_action": night,
            "vote": vote,
            "speech": speech,
            "badge_signup": signup,
            "badge_transfer": transfer,
            "hunter_shot": shot,
        }
        self.delay = delay
        self.requests = []

    async def _answer(self, kind: str, context: AgentContext) -> Any:
        self.requests.append((kind, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        value = self.answers[kind]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(context)
        return value

    def kinds(self):
        return [kind for kind, _ in self.requests]

    async def request_night_action(self, context):
        value = await self._answer("night_action", context)
        return value if value is not None else NightAction()

    async def request_vote(self, context):
        return await self._answer("vote", context)

    async def request_speech(self, context):
        return await self._answer("speech", context)

    async def request_badge_signup(self, context):
        return await self._answer("badge_signup", context)

    async def request_badge_transfer(self, context):
        return await self._answer("badge_transfer", context)

    async def request_hunter_shot(self, context):
        return await self._answer("hunter_shot", context)


@pytest.fixture(autouse=True)
def mock_llm_calls():
    """
    Automatically mock all LLM API calls for all tests.

    No test may reach the OpenAI API, even one that builds a SimpleLLMAgent
    without mocking its request methods.
    """
    with patch.object(SimpleLLMAgent, '_call_llm_async', return_value=""):
        yield


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        decision_timeout_ms=1000,
        human_decision_timeout_ms=2000,
        random_seed=7,
        use_announcements=False  # Disable for cleaner test output
    )


@pytest.fixture
def game_state():
    """A 10-seat game with werewolves at seats 0, 1 and 2."""
    return GameState(roles=list(FIXED_ROLES), random_seed=7)


@pytest.fixture
def moderator(game_state, game_config):
    """Create a moderator instance."""
    return Moderator(game_state, game_config)


@pytest.fixture
def broker(game_state, game_config, moderator):
    """Decision broker bound to the test game with no agents yet."""
    broker = DecisionBroker(game_config)
    broker.bind(game_state, {}, moderator)
    return broker


@pytest.fixture
def install_agents(game_state, game_config, broker, moderator):
    """
    Seat a ScriptedAgent everywhere and bind them to the broker.

    Usage: agents = install_agents({seat: {"vote": 7, ...}})
    """
    def _install(answers: Optional[Dict[int, Dict[str, Any]]] = None, delay: float = 0):
        answers = answers or {}
        agents = {
            player.seat: ScriptedAgent(player, game_config, delay=delay, **answers.get(player.seat, {}))
            for player in game_state.players
        }
        broker.bind(game_state, agents, moderator)
        return agents
    return _install


@pytest.fixture
def scripted_factory():
    """Agent factory for WerewolfGame seating ScriptedAgents."""
    def _factory(answers: Optional[Dict[int, Dict[str, Any]]] = None):
        answers = answers or {}
        return lambda player, config: ScriptedAgent(player, config, **answers.get(player.seat, {}))
    return _factory
