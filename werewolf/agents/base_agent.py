"""
Base agent interface: the decision source behind a seat.
"""

import re
from typing import Dict, List, Any, Optional
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..core import Player, GameState, GamePhase, Role, NightAction, ANTIDOTE, POISON
from ..config.game_config import GameConfig, default_config


@dataclass
class AgentContext:
    """Context information provided to an agent."""
    seat: int
    role: Role
    phase: GamePhase
    round_number: int
    snapshot: Dict[str, Any]
    private_info: Dict[str, Any]
    candidates: List[int] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    difficulty: str = "normal"
    game_id: int = 0
    epoch: int = 0

    @property
    def alive_seats(self) -> List[int]:
        return list(self.snapshot.get("alive", []))


class BaseAgent(ABC):
    """
    Abstract base class for all decision sources.

    Every request is a coroutine; the game wraps it in a timeout and treats
    any failure as a skip/abstain.
    """

    def __init__(self, player: Player, config: GameConfig = default_config):
        """
        Initialize the agent.

        Args:
            player: The player this agent represents
            config: Game configuration
        """
        self.player = player
        self.config = config

    @property
    def seat(self) -> int:
        return self.player.seat

    @abstractmethod
    async def request_night_action(self, context: AgentContext) -> NightAction:
        """
        Choose the night action for this seat's role.

        Args:
            context: Current game context; `context.candidates` lists legal-looking targets
                and `context.extra` carries role hints (the Witch gets `wolf_target`)

        Returns:
            NightAction with a target (None = skip) and, for the Witch, the potion
        """
        pass

    @abstractmethod
    async def request_vote(self, context: AgentContext) -> Optional[int]:
        """
        Vote among `context.candidates`.

        Returns:
            Candidate seat, or None to abstain
        """
        pass

    @abstractmethod
    async def request_speech(self, context: AgentContext) -> str:
        """
        Speak during the day. The text is only recorded, never interpreted.

        Returns:
            The speech text
        """
        pass

    async def request_badge_signup(self, context: AgentContext) -> bool:
        """Decide whether to run for the badge."""
        return False

    async def request_badge_transfer(self, context: AgentContext) -> Optional[int]:
        """Pick the badge successor among `context.candidates`, or None to tear the badge up."""
        return await self.request_vote(context)

    async def request_hunter_shot(self, context: AgentContext) -> Optional[int]:
        """Pick the seat to shoot among `context.candidates`, or None to hold fire."""
        return await self.request_vote(context)

    def build_context(self, game_state: GameState, candidates: Optional[List[int]] = None,
                      extra: Optional[Dict[str, Any]] = None) -> AgentContext:
        """
        Build context for the agent.

        Args:
            game_state: Current game state (only a snapshot leaves this method)
            candidates: Seats the request may name
            extra: Request-specific hints

        Returns:
            AgentContext with all relevant information
        """
        return AgentContext(
            seat=self.player.seat,
            role=self.player.role,
            phase=game_state.phase,
            round_number=game_state.round,
            snapshot=game_state.snapshot(reveal_roles=False),
            private_info=self.player.get_private_info(),
            candidates=list(candidates or []),
            extra=dict(extra or {}),
            difficulty=self.config.difficulty,
            game_id=game_state.game_id,
            epoch=game_state.decision_epoch,
        )


def parse_seat(text: str, candidates: List[int]) -> Optional[int]:
    """
    Extract a seat from free text.

    The first number that is one of the candidates wins; a skip word or no
    usable number means None.
    """
    if not text:
        return None
    lowered = text.strip().lower()
    for number in re.findall(r'\b(\d{1,2})\b', lowered):
        seat = int(number)
        if seat in candidates:
            return seat
    return None


def parse_witch_action(text: str, context: AgentContext) -> NightAction:
    """Read "SAVE", "POISON <seat>" or "PASS" from free text."""
    if not text:
        return NightAction()
    lowered = text.strip().lower()
    if "poison" in lowered:
        target = parse_seat(lowered.split("poison", 1)[1], context.candidates)
        return NightAction(target=target, potion=POISON) if target is not None else NightAction()
    if "save" in lowered or "antidote" in lowered:
        return NightAction(target=context.extra.get("wolf_target"), potion=ANTIDOTE)
    return NightAction()


def parse_yes(text: str) -> bool:
    """True for an answer that starts with yes/y/run."""
    if not text:
        return False
    first = text.strip().lower().split()[0] if text.strip() else ""
    return first.strip(".,!") in ("yes", "y", "run", "true")
