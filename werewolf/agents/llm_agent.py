"""
LLM Agent implementation using the OpenAI API.
"""

import os
import sys
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from .base_agent import BaseAgent, AgentContext, parse_seat, parse_witch_action, parse_yes
from .exceptions import LLMEmptyResponseError
from ..core import Player, Role, NightAction
from ..config.game_config import GameConfig, default_config


SYSTEM_PROMPT = (
    "You are a strategic player in a game of Werewolf. "
    "Make decisions based only on the information provided."
)

ROLE_GUIDES = {
    Role.WEREWOLF: [
        "WEREWOLF: each night the pack picks one victim.",
        "- Target players who seem to be the Seer or who lead the village",
        "- Never reveal your teammates during the day",
    ],
    Role.SEER: [
        "SEER: each night you learn whether one player is a werewolf.",
        "- Inspect players who steer votes or stay suspiciously quiet",
    ],
    Role.WITCH: [
        "WITCH: you have one antidote (save tonight's victim) and one poison (kill any player).",
        "- Each potion works once per game, and only one potion per night",
    ],
    Role.GUARD: [
        "GUARD: each night you protect one player from the werewolves.",
        "- You cannot protect the same player two nights in a row",
    ],
    Role.HUNTER: [
        "HUNTER: when you die you may shoot one living player.",
    ],
    Role.VILLAGER: [
        "VILLAGER: you have no night ability; find the werewolves by talking and voting.",
    ],
}

ACTION_INSTRUCTIONS = {
    "guard": "Which player do you protect tonight? Answer with the seat number only, or PASS.",
    "wolf_kill": "Which player does the pack attack tonight? Answer with the seat number only, or PASS.",
    "witch": "Answer SAVE to use the antidote on tonight's victim, POISON <seat> to poison a player, or PASS.",
    "seer_check": "Which player do you inspect tonight? Answer with the seat number only, or PASS.",
    "vote": "Who do you vote for? Answer with one candidate seat number only, or ABSTAIN.",
    "speech": "Give your speech to the table in a few sentences.",
    "last_words": "You have been eliminated. Give your last words in a few sentences.",
    "campaign": "You are running for the badge. Give your campaign speech in a few sentences.",
    "badge_signup": "Do you run for the badge? Answer YES or NO.",
    "badge_transfer": "You hold the badge and have died. Name the seat that inherits it, or PASS to tear it up.",
    "hunter_shot": "You are the Hunter and have died. Name the seat you shoot, or PASS.",
}

NIGHT_ACTIONS = {
    Role.GUARD: "guard",
    Role.WEREWOLF: "wolf_kill",
    Role.WITCH: "witch",
    Role.SEER: "seer_check",
}


class SimpleLLMAgent(BaseAgent):
    """LLM-backed decision source; every request is one chat completion."""

    def __init__(self, player: Player, config: GameConfig = default_config):
        super().__init__(player, config)
        self.model = config.llm_model or "gpt-4o-mini"
        self.temperature = config.llm_temperature
        self.last_latency_ms: Optional[float] = None
        self.last_usage: Optional[Dict[str, int]] = None

        api_key = os.getenv("OPENAI_API_KEY")
        # Allow initialization without API key in test environments (tests use mocking)
        if not api_key:
            is_test_env = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ
            if not is_test_env:
                raise ValueError("OPENAI_API_KEY environment variable not set")
            self.async_client = None
        else:
            self.async_client = AsyncOpenAI(api_key=api_key)

    async def _call_llm_async(self, prompt: str, action_type: str, max_tokens: int = 200) -> str:
        """
        Call the OpenAI API with the given prompt.

        Args:
            prompt: The prompt to send
            action_type: Request name, used in error reports
            max_tokens: Maximum tokens in response

        Returns:
            LLM response text

        Raises:
            LLMEmptyResponseError: On an empty reply or any API failure
        """
        # If async_client is None (test environment), return empty string (methods will be mocked)
        if self.async_client is None:
            return ""

        try:
            api_params: Dict[str, Any] = {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                "temperature": self.temperature
            }

            # Newer models take max_completion_tokens; gpt-5 models only support the default temperature
            if "gpt-5" in self.model:
                api_params["max_completion_tokens"] = max_tokens
                del api_params["temperature"]
            elif "gpt-4o" in self.model:
                api_params["max_completion_tokens"] = max_tokens
            else:
                api_params["max_tokens"] = max_tokens

            start_time = time.time()
            response = await self.async_client.chat.completions.create(**api_params)
            self.last_latency_ms = (time.time() - start_time) * 1000
            if response.usage:
                self.last_usage = {
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                }

            content = (response.choices[0].message.content or "").strip()
            if not content:
                raise LLMEmptyResponseError(
                    self.player.seat,
                    action_type,
                    f"LLM API returned empty response for seat {self.player.seat}. Model: {self.model}, Max tokens: {max_tokens}"
                )
            return content
        except LLMEmptyResponseError:
            raise
        except Exception as e:
            raise LLMEmptyResponseError(
                self.player.seat,
                action_type,
                f"LLM API call failed for seat {self.player.seat}: {e}"
            )

    def build_prompt(self, context: AgentContext, action_type: str) -> str:
        """
        Build the prompt for one request.

        Args:
            context: Current game context
            action_type: Key of ACTION_INSTRUCTIONS

        Returns:
            Formatted prompt string
        """
        snapshot = context.snapshot
        private = context.private_info
        team = self.player.team.value

        prompt_parts = [
            f"You are Player {context.seat}, the {context.role.value} on the {team} team.",
            "",
            "GAME RULES:",
            "- Villagers win when every werewolf is dead",
            "- Werewolves win when living werewolves are at least as many as everyone else",
            "- Roles are NOT revealed when players die",
            f"- Difficulty: {context.difficulty}",
            "",
        ]
        prompt_parts.extend(ROLE_GUIDES.get(context.role, []))
        prompt_parts.append("")

        # Private knowledge
        if private.get("known_wolves"):
            prompt_parts.append(f"Your fellow werewolves: {private['known_wolves']}")
        for round_number, check in sorted(private.get("seer_checks", {}).items()):
            verdict = "a werewolf" if check["is_wolf"] else "not a werewolf"
            prompt_parts.append(f"Night {round_number}: Player {check['target']} is {verdict}")
        if context.role is Role.WITCH:
            prompt_parts.append(
                f"Antidote left: {private.get('has_antidote')}, poison left: {private.get('has_poison')}"
            )
            if "wolf_target" in context.extra:
                prompt_parts.append(f"Tonight the werewolves attacked: {context.extra['wolf_target']}")
        if context.role is Role.GUARD and private.get("last_protected") is not None:
            prompt_parts.append(f"Last night you protected Player {private['last_protected']}")

        prompt_parts.extend([
            "",
            f"CURRENT PHASE: {context.phase.value}, ROUND {context.round_number}",
            f"ALIVE: {snapshot.get('alive', [])}",
            f"BADGE HOLDER: {snapshot.get('badge_holder')}",
        ])
        if context.candidates:
            prompt_parts.append(f"CANDIDATES: {context.candidates}")

        transcript = snapshot.get("transcript", [])[-20:]
        if transcript:
            prompt_parts.append("")
            prompt_parts.append("RECENT SPEECHES:")
            for entry in transcript:
                prompt_parts.append(f"  Round {entry['round']}, Player {entry['seat']}: {entry['text']}")

        prompt_parts.extend(["", ACTION_INSTRUCTIONS[action_type]])
        return "\n".join(prompt_parts)

    async def _ask(self, context: AgentContext, action_type: str, max_tokens: Optional[int] = None) -> str:
        prompt = self.build_prompt(context, action_type)
        return await self._call_llm_async(prompt, action_type, max_tokens or self.config.max_action_tokens)

    async def request_night_action(self, context: AgentContext) -> NightAction:
        action_type = NIGHT_ACTIONS.get(context.role)
        if action_type is None:
            return NightAction()
        response = await self._ask(context, action_type)
        if context.role is Role.WITCH:
            return parse_witch_action(response, context)
        return NightAction(target=parse_seat(response, context.candidates))

    async def request_vote(self, context: AgentContext) -> Optional[int]:
        response = await self._ask(context, "vote")
        return parse_seat(response, self._others(context.candidates))

    async def request_speech(self, context: AgentContext) -> str:
        if context.extra.get("last_words"):
            action_type = "last_words"
        elif context.extra.get("campaign"):
            action_type = "campaign"
        else:
            action_type = "speech"
        return await self._ask(context, action_type, self.config.max_speech_tokens)

    async def request_badge_signup(self, context: AgentContext) -> bool:
        return parse_yes(await self._ask(context, "badge_signup"))

    async def request_badge_transfer(self, context: AgentContext) -> Optional[int]:
        return parse_seat(await self._ask(context, "badge_transfer"), context.candidates)

    async def request_hunter_shot(self, context: AgentContext) -> Optional[int]:
        return parse_seat(await self._ask(context, "hunter_shot"), self._others(context.candidates))

    def _others(self, candidates: List[int]) -> List[int]:
        return [s for s in candidates if s != self.player.seat]
