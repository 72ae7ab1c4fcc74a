"""
Dummy Agent implementation with seeded random behavior.
"""

import random
from typing import List, Optional

from .base_agent import BaseAgent, AgentContext
from ..core import Player, Role, NightAction, ANTIDOTE, POISON
from ..config.game_config import GameConfig, default_config


POISON_CHANCE = 0.3
SIGNUP_CHANCE = 0.4


class DummyAgent(BaseAgent):
    """
    Simple dummy agent with reproducible random behavior:
    - Guard: protect a random living seat other than last night's
    - Werewolf: attack a random non-werewolf (any seat on "easy")
    - Witch: save the victim when allowed, later poison a random seat now and then
    - Seer: inspect a random seat not inspected before
    - Votes: a known werewolf for the Seer, a non-werewolf for werewolves, random otherwise
    """

    def __init__(self, player: Player, config: GameConfig = default_config):
        super().__init__(player, config)
        # Combine seed with seat so each agent has different but reproducible randomness
        seed = config.random_seed
        if seed is not None:
            self.random = random.Random(seed + player.seat)
        else:
            self.random = random.Random()

    def _pick(self, seats: List[int]) -> Optional[int]:
        return self.random.choice(seats) if seats else None

    def _teammates(self, context: AgentContext) -> List[int]:
        return context.private_info.get("known_wolves", [])

    def _plays_smart(self, context: AgentContext) -> bool:
        return context.difficulty != "easy"

    async def request_night_action(self, context: AgentContext) -> NightAction:
        """
        Get night action based on role.

        Args:
            context: Current game context

        Returns:
            NightAction for this seat
        """
        role = context.role
        others = [s for s in context.candidates if s != context.seat]

        if role is Role.GUARD:
            last = context.private_info.get("last_protected")
            return NightAction(target=self._pick([s for s in context.candidates if s != last]))

        if role is Role.WEREWOLF:
            if self._plays_smart(context):
                teammates = self._teammates(context)
                victims = [s for s in context.candidates if s not in teammates]
                return NightAction(target=self._pick(victims or others))
            return NightAction(target=self._pick(context.candidates))

        if role is Role.WITCH:
            victim = context.extra.get("wolf_target")
            if context.extra.get("can_save") and victim is not None:
                return NightAction(target=victim, potion=ANTIDOTE)
            if (context.extra.get("can_poison") and context.round_number > 1
                    and self.random.random() < POISON_CHANCE):
                target = self._pick([s for s in others if s != victim])
                if target is not None:
                    return NightAction(target=target, potion=POISON)
            return NightAction()

        if role is Role.SEER:
            checked = [c["target"] for c in context.private_info.get("seer_checks", {}).values()]
            fresh = [s for s in others if s not in checked]
            return NightAction(target=self._pick(fresh or others))

        return NightAction()

    async def request_vote(self, context: AgentContext) -> Optional[int]:
        """
        Get vote choice among the candidates.

        Args:
            context: Current game context

        Returns:
            Candidate seat (None only when there is nobody to vote for)
        """
        candidates = [s for s in context.candidates if s != context.seat]
        if not candidates:
            return None

        if self._plays_smart(context):
            if self.player.is_wolf:
                teammates = self._teammates(context)
                outsiders = [s for s in candidates if s not in teammates]
                if outsiders:
                    return self._pick(outsiders)
            elif self.player.role is Role.SEER:
                known = [
                    c["target"] for c in context.private_info.get("seer_checks", {}).values()
                    if c["is_wolf"] and c["target"] in candidates
                ]
                if known:
                    return known[0]

        return self._pick(candidates)

    async def request_speech(self, context: AgentContext) -> str:
        """Generate a short placeholder speech."""
        if context.extra.get("last_words"):
            return f"I am Player {context.seat}. Good luck to everyone, find the wolves."
        if context.extra.get("campaign"):
            return f"I am Player {context.seat}. Give me the badge and I will lead us well."
        return f"I am Player {context.seat}. I have nothing special to report this round."

    async def request_badge_signup(self, context: AgentContext) -> bool:
        return self.random.random() < SIGNUP_CHANCE

    async def request_badge_transfer(self, context: AgentContext) -> Optional[int]:
        """Hand the badge over; werewolves prefer a teammate."""
        if self.player.is_wolf and self._plays_smart(context):
            teammates = [s for s in context.candidates if s in self._teammates(context)]
            if teammates:
                return self._pick(teammates)
        return self._pick(context.candidates)

    async def request_hunter_shot(self, context: AgentContext) -> Optional[int]:
        return self._pick([s for s in context.candidates if s != context.seat])
