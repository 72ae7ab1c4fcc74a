"""
Moderator: the narrator voice of the game and the log for rejected decisions.
"""

from typing import List, Optional, TYPE_CHECKING

from .game_engine import GameState, Death
from .exceptions import InvalidTarget
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..events.event_emitter import EventEmitter


class Moderator:
    """Announces the game flow and records rule rejections."""

    def __init__(self, game_state: GameState, config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.config = config
        self.event_emitter = event_emitter
        self.announcements: List[str] = []
        self.rejections: List[InvalidTarget] = []

    def announce(self, message: str) -> None:
        """Make a moderator announcement."""
        self.announcements.append(message)
        if self.config.use_announcements:
            print(f"[MODERATOR] {message}")
        if self.event_emitter:
            self.event_emitter.emit_announcement(
                message,
                self.game_state.phase.value,
                self.game_state.round
            )

    def player_speaks(self, seat: int, speech: str) -> None:
        """Record and print a player's speech."""
        self.game_state.record_speech(seat, speech)
        if self.config.use_announcements:
            print(f"[Player {seat}] {speech}")
        if self.event_emitter:
            self.event_emitter.emit_speech(seat, speech, self.game_state.phase.value, self.game_state.round)

    def log_rejection(self, error: InvalidTarget) -> None:
        """
        Log a rejected decision. The seat is treated as skipping and the
        reason never reaches the player.
        """
        self.rejections.append(error)
        self.game_state._log_action("decision_rejected", {
            "seat": error.seat,
            "action": error.action_type,
            "reason": error.message,
        })
        if self.config.verbose_rejections:
            print(f"[MODERATOR] rejected {error.action_type} from seat {error.seat}: {error.message}")

    def announce_night(self) -> None:
        self.announce(f"Night {self.game_state.round} falls. Everyone close your eyes.")

    def announce_dawn(self, deaths: List[Death]) -> None:
        """Morning announcement. Causes stay hidden, only seats are named."""
        if not deaths:
            self.announce("Dawn breaks. It was a peaceful night, nobody died.")
            return
        seats = ", ".join(str(d.seat) for d in deaths)
        self.announce(f"Dawn breaks. Last night these players died: {seats}.")

    def announce_winner(self) -> None:
        winner = self.game_state.winner
        if winner is None:
            self.announce("The game has ended without a winner.")
            return
        team = "Werewolves" if winner.value == "wolf" else "Villagers"
        self.announce(f"Game over. The {team} win!")
