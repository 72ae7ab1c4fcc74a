"""
Core game state: phases, the player registry and death bookkeeping.
"""

import itertools
import time
from enum import Enum
from typing import List, Optional, Dict, Any, TYPE_CHECKING
from dataclasses import dataclass, field

from .roles import Role, Team, deal_roles, get_role_distribution
from .player import Player
from .exceptions import IllegalPhaseTransition
from . import win_evaluator

if TYPE_CHECKING:
    from ..events.event_emitter import EventEmitter


class GamePhase(Enum):
    """Every state of the game master."""
    NIGHT_START = "night_start"
    NIGHT_GUARD_ACTION = "night_guard_action"
    NIGHT_WOLF_ACTION = "night_wolf_action"
    NIGHT_WITCH_ACTION = "night_witch_action"
    NIGHT_SEER_ACTION = "night_seer_action"
    NIGHT_RESOLVE = "night_resolve"
    DAY_START = "day_start"
    DAY_BADGE_SIGNUP = "day_badge_signup"
    DAY_BADGE_SPEECH = "day_badge_speech"
    DAY_BADGE_ELECTION = "day_badge_election"
    DAY_PK_SPEECH = "day_pk_speech"
    DAY_SPEECH = "day_speech"
    DAY_LAST_WORDS = "day_last_words"
    DAY_VOTE = "day_vote"
    DAY_RESOLVE = "day_resolve"
    BADGE_TRANSFER = "badge_transfer"
    HUNTER_SHOOT = "hunter_shoot"
    GAME_END = "game_end"


class DeathCause(Enum):
    """How a seat died."""
    WOLF = "wolf"
    POISON = "poison"
    VOTE = "vote"
    HUNTER = "hunter"


@dataclass
class Death:
    """A seat removed from play."""
    seat: int
    cause: DeathCause
    round_number: int


@dataclass
class NightSubmission:
    """One night action, kept only until the night resolves."""
    role: Role
    seat: int
    target: Optional[int]  # None = skip
    potion: Optional[str] = None  # Witch only: "antidote" or "poison"
    timestamp: float = field(default_factory=time.time)


@dataclass
class VoteRecord:
    """One ballot in a vote round."""
    voter: int
    target: Optional[int]  # None = abstain
    round_index: int = 0


# Process-wide so a restarted game never reuses an id
_game_ids = itertools.count(1)


@dataclass
class GameState:
    """Complete game state, owned by the game controller."""
    player_count: int = 10
    phase: GamePhase = GamePhase.NIGHT_START
    round: int = 1
    players: List[Player] = field(default_factory=list)

    # Per-night and per-vote buffers
    night_submissions: Dict[Role, List[NightSubmission]] = field(default_factory=dict)
    day_votes: Dict[int, VoteRecord] = field(default_factory=dict)  # {voter: record}
    revote_count: int = 0
    badge_revote_count: int = 0

    # Outcome
    winner: Optional[Team] = None
    failed: bool = False
    failure_reason: Optional[str] = None

    # Identity and request tagging
    game_id: int = field(default_factory=lambda: next(_game_ids))
    decision_epoch: int = 0

    # Badge
    badge_holder: Optional[int] = None
    badge_election_open: bool = True
    badge_candidates: List[int] = field(default_factory=list)

    # PK bookkeeping
    pk_candidates: List[int] = field(default_factory=list)
    pk_source: Optional[str] = None  # "badge" or "vote"

    # Reactions queued by deaths
    pending_badge_transfer: Optional[int] = None  # seat of the dead holder
    pending_hunter_shot: Optional[int] = None  # seat of the dead hunter
    reaction_origin: Optional[str] = None  # "night" or "day"

    # Results of the latest resolutions
    last_night_deaths: List[Death] = field(default_factory=list)
    day_eliminated: Optional[int] = None
    deaths: List[Death] = field(default_factory=list)

    # History
    transcript: List[Dict[str, Any]] = field(default_factory=list)
    action_log: List[Dict[str, Any]] = field(default_factory=list)

    # Setup
    random_seed: Optional[int] = None
    roles: Optional[List[Role]] = None  # Fixed seating, skips shuffling
    human_seat: Optional[int] = None

    # Event emitter for observers (optional)
    event_emitter: Optional['EventEmitter'] = None

    def __post_init__(self):
        """Initialize game state."""
        if not self.players:
            self.setup_game()

    def setup_game(self) -> None:
        """Deal roles and seat the players."""
        if self.roles is not None:
            expected = sorted(r.value for r in get_role_distribution(len(self.roles)))
            if sorted(r.value for r in self.roles) != expected:
                raise ValueError(f"Fixed seating does not match the {len(self.roles)}-player deck")
            dealt = list(self.roles)
            self.player_count = len(dealt)
        else:
            dealt = deal_roles(self.player_count, self.random_seed)

        self.players = [
            Player(seat=seat, role=role, is_human=(seat == self.human_seat))
            for seat, role in enumerate(dealt)
        ]

        # Werewolves know each other
        wolf_seats = [p.seat for p in self.players if p.is_wolf]
        for player in self.players:
            if player.is_wolf:
                player.known_wolves = wolf_seats.copy()

        self._log_action("game_start", {"players": len(self.players), "game_id": self.game_id})

    # Player registry

    def get_player(self, seat: Optional[int]) -> Optional[Player]:
        """Get player by seat."""
        if seat is None or not 0 <= seat < len(self.players):
            return None
        return self.players[seat]

    def get_alive_players(self) -> List[Player]:
        """Get all alive players in seat order."""
        return [p for p in self.players if p.alive]

    def alive_seats(self) -> List[int]:
        return [p.seat for p in self.players if p.alive]

    def get_alive_wolves(self) -> List[Player]:
        return [p for p in self.get_alive_players() if p.is_wolf]

    def get_alive_non_wolves(self) -> List[Player]:
        return [p for p in self.get_alive_players() if not p.is_wolf]

    def get_role_player(self, role: Role, alive_only: bool = True) -> Optional[Player]:
        """Get the (first) player holding a role."""
        for player in self.players:
            if player.role is role and (player.alive or not alive_only):
                return player
        return None

    def is_alive(self, seat: Optional[int]) -> bool:
        player = self.get_player(seat)
        return bool(player and player.alive)

    # Phase bookkeeping

    def enter_phase(self, phase: GamePhase) -> None:
        """Switch phase and invalidate every decision requested before."""
        if self.phase is GamePhase.GAME_END and phase is not GamePhase.GAME_END:
            raise IllegalPhaseTransition(self.phase.value, phase.value, "The game has already ended")
        self.phase = phase
        self.decision_epoch += 1
        self._log_action("phase_change", {"phase": phase.value})

    def start_night(self, new_round: bool = False) -> None:
        """Clear the night buffers, advancing the round counter after a finished day."""
        if new_round:
            self.round += 1
            if self.event_emitter:
                self.event_emitter.emit_round_start(self.round)
        self.night_submissions = {}
        self.last_night_deaths = []
        self.day_eliminated = None
        self.revote_count = 0
        self._log_action("night_start", {"round": self.round})

    def start_vote(self, source: str) -> None:
        """Clear ballots before a vote round."""
        self.day_votes = {}
        self._log_action("vote_start", {"source": source, "pk": list(self.pk_candidates)})

    # Deaths and win condition

    def kill_players(self, deaths: List[Death], origin: str = "day") -> List[Death]:
        """
        Apply a batch of deaths atomically, queue reactions, then check the win condition once.

        Args:
            deaths: Deaths to apply; seats already dead are ignored
            origin: "night" or "day", decides where the game resumes after the reactions

        Returns:
            The deaths that actually happened
        """
        applied: List[Death] = []
        for death in deaths:
            player = self.get_player(death.seat)
            if not player or not player.alive:
                continue
            player.kill()
            applied.append(death)
            self.deaths.append(death)

            if player.holds_badge:
                self.pending_badge_transfer = player.seat
            if player.role is Role.HUNTER and player.hunter_can_shoot:
                self.pending_hunter_shot = player.seat
            if self.has_pending_reaction and self.reaction_origin is None:
                self.reaction_origin = origin

            self._log_action("player_eliminated", {
                "seat": player.seat,
                "cause": death.cause.value,
                "round": death.round_number,
            })

        for death in applied:
            if self.event_emitter:
                self.event_emitter.emit_elimination(death.seat, death.cause.value, death.round_number)

        if applied:
            winner = self.check_win_condition()
            if winner:
                self.end_game(winner)
            else:
                self.emit_state()

        return applied

    def check_win_condition(self) -> Optional[Team]:
        """Return the winning team, or None while the game continues."""
        return win_evaluator.evaluate(self.players)

    def end_game(self, winner: Team) -> None:
        """End the game with a winner."""
        self.winner = winner
        self.pending_badge_transfer = None
        self.pending_hunter_shot = None
        self.enter_phase(GamePhase.GAME_END)
        self._log_action("game_over", {"winner": winner.value, "round": self.round})

    def fail_game(self, reason: str) -> None:
        """Terminate a corrupted game: GAME_END with no winner."""
        self.winner = None
        self.failed = True
        self.failure_reason = reason
        self.phase = GamePhase.GAME_END
        self.decision_epoch += 1
        self._log_action("game_failed", {"reason": reason})

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.GAME_END

    @property
    def has_pending_reaction(self) -> bool:
        """A hunter shot or badge hand-off is waiting to be resolved."""
        return self.pending_badge_transfer is not None or self.pending_hunter_shot is not None

    # Badge

    def assign_badge(self, seat: Optional[int]) -> None:
        """Give the badge to a seat, or remove it from play with None."""
        for player in self.players:
            player.holds_badge = False
        self.badge_holder = seat
        if seat is not None:
            self.players[seat].holds_badge = True
        self._log_action("badge_assigned", {"seat": seat})

    # History

    def record_speech(self, seat: int, text: str) -> None:
        """Append a speech to the transcript (text is never interpreted)."""
        player = self.get_player(seat)
        if player:
            player.add_speech(text)
        self.transcript.append({
            "round": self.round,
            "phase": self.phase.value,
            "seat": seat,
            "text": text,
        })

    def _log_action(self, action_type: str, data: Dict[str, Any]) -> None:
        """Log a game action."""
        self.action_log.append({
            "type": action_type,
            "phase": self.phase.value,
            "round": self.round,
            "data": data
        })

    # Snapshots for observers

    def snapshot(self, reveal_roles: Optional[bool] = None) -> Dict[str, Any]:
        """
        Read-only copy of the public state.

        Args:
            reveal_roles: Include every seat's role. Defaults to revealing only once the game is over.
        """
        if reveal_roles is None:
            reveal_roles = self.is_over

        players_data = []
        for player in self.players:
            data = player.public_view()
            if reveal_roles:
                data["role"] = player.role.value
            players_data.append(data)

        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "round": self.round,
            "players": players_data,
            "alive": self.alive_seats(),
            "badge_holder": self.badge_holder,
            "pk_candidates": list(self.pk_candidates),
            "revote_count": self.revote_count,
            "badge_revote_count": self.badge_revote_count,
            "last_night_deaths": [d.seat for d in self.last_night_deaths],
            "transcript": [dict(entry) for entry in self.transcript],
            "winner": self.winner.value if self.winner else None,
            "failed": self.failed,
        }

    def get_game_summary(self) -> Dict[str, Any]:
        """Get a summary of the current game state."""
        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "round": self.round,
            "alive_players": len(self.get_alive_players()),
            "alive_wolves": len(self.get_alive_wolves()),
            "alive_villagers": len(self.get_alive_non_wolves()),
            "badge_holder": self.badge_holder,
            "winner": self.winner.value if self.winner else None,
            "failed": self.failed,
        }

    def emit_state(self) -> None:
        """Push a snapshot to observers."""
        if self.event_emitter:
            self.event_emitter.emit_state_snapshot(self.snapshot())
