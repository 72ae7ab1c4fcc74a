"""
Reactions to a death: the badge hand-off and the Hunter's shot.
"""

from typing import Optional, TYPE_CHECKING

from ..core import GameState, Moderator, Death, DeathCause
from ..agents import DecisionBroker
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..events.event_emitter import EventEmitter


class ReactionHandler:
    """Resolves BADGE_TRANSFER and HUNTER_SHOOT."""

    def __init__(self, game_state: GameState, moderator: Moderator, broker: DecisionBroker,
                 config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.moderator = moderator
        self.broker = broker
        self.config = config
        self.event_emitter = event_emitter

    async def run_badge_transfer(self) -> Optional[int]:
        """
        The dead badge holder passes the badge on or tears it up.

        Returns:
            The new holder, or None when the badge left the game
        """
        state = self.game_state
        holder = state.pending_badge_transfer
        state.pending_badge_transfer = None
        if holder is None:
            return None

        successor = None
        if self.config.badge_transfer_policy == "transfer":
            candidates = [seat for seat in state.alive_seats() if seat != holder]
            successor = await self.broker.request(holder, "badge_transfer", candidates)

        state.assign_badge(successor)
        if successor is None:
            self.moderator.announce(f"Player {holder} tears up the badge.")
        else:
            self.moderator.announce(f"Player {holder} passes the badge to player {successor}.")
        if self.event_emitter:
            self.event_emitter.emit_badge_assigned(successor, "transfer" if successor is not None else "torn", state.round)
        return successor

    async def run_hunter_shot(self) -> Optional[int]:
        """
        The dead Hunter may shoot one living player.

        Returns:
            The seat shot, or None when the Hunter held fire
        """
        state = self.game_state
        hunter_seat = state.pending_hunter_shot
        state.pending_hunter_shot = None
        if hunter_seat is None:
            return None

        hunter = state.players[hunter_seat]
        hunter.hunter_can_shoot = False
        candidates = [seat for seat in state.alive_seats() if seat != hunter_seat]
        self.moderator.announce(f"Player {hunter_seat} is the Hunter and may take someone down.")
        target = await self.broker.request(hunter_seat, "hunter_shot", candidates)

        if target is None:
            self.moderator.announce("The Hunter holds fire.")
            if self.event_emitter:
                self.event_emitter.emit_night_action_resolved("hunter", None, "skipped", state.round)
            return None

        self.moderator.announce(f"The Hunter shoots player {target}.")
        if self.event_emitter:
            self.event_emitter.emit_night_action_resolved("hunter", target, "shot", state.round)
        state.kill_players([Death(target, DeathCause.HUNTER, state.round)], origin=state.reaction_origin or "day")
        return target
