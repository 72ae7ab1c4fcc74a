"""
Game configuration and rule-variant switches.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict


MIN_PLAYERS = 8
MAX_PLAYERS = 12

WITCH_SELF_SAVE_OPTIONS = ("never", "first_night", "always")
BADGE_ROUNDING_OPTIONS = ("exact", "floor", "round")
BADGE_TRANSFER_OPTIONS = ("transfer", "discard")


@dataclass
class GameConfig:
    """Configuration for game parameters."""

    # Table
    player_count: int = 10  # 8..12, selects the role deck
    difficulty: str = "normal"  # Passed to decision sources only
    human_seat: Optional[int] = None  # Seat driven by HumanAgent (None = all AI)

    # Vote limits
    max_revote_count: int = 3  # PK rounds allowed for the day vote
    max_badge_revote_count: int = 4  # PK rounds allowed for the badge election

    # Decision timeouts
    decision_timeout_ms: int = 30000
    human_decision_timeout_ms: int = 120000

    # Badge
    badge_election_enabled: bool = True
    badge_vote_weight: float = 1.5
    badge_weight_rounding: str = "exact"  # "exact", "floor" or "round"
    badge_transfer_policy: str = "transfer"  # "transfer" or "discard"

    # Night rule variants
    guard_can_self_protect: bool = True
    witch_self_save: str = "first_night"  # "never", "first_night" or "always"
    poisoned_hunter_can_shoot: bool = True
    double_save_kills: bool = False

    # LLM settings
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.7
    max_action_tokens: int = 2000
    max_speech_tokens: int = 4000

    # Agent settings
    agent_type: str = "dummy_agent"  # Options: "simple_llm_agent" or "dummy_agent"
    agent_types: Optional[Dict[int, str]] = field(default=None)  # Per-seat agent types: {seat: "agent_type"}
    random_seed: Optional[int] = None  # Seeds role shuffling and dummy agents

    # Output
    use_announcements: bool = True
    verbose_rejections: bool = False
    record_runs: bool = False
    runs_dir: str = "runs"

    def validate(self) -> None:
        """Raise ValueError when a value is outside what the game supports."""
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(
                f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.player_count}"
            )
        if self.witch_self_save not in WITCH_SELF_SAVE_OPTIONS:
            raise ValueError(f"witch_self_save must be one of {WITCH_SELF_SAVE_OPTIONS}")
        if self.badge_weight_rounding not in BADGE_ROUNDING_OPTIONS:
            raise ValueError(f"badge_weight_rounding must be one of {BADGE_ROUNDING_OPTIONS}")
        if self.badge_transfer_policy not in BADGE_TRANSFER_OPTIONS:
            raise ValueError(f"badge_transfer_policy must be one of {BADGE_TRANSFER_OPTIONS}")
        if self.max_revote_count < 0 or self.max_badge_revote_count < 0:
            raise ValueError("revote limits cannot be negative")
        if self.decision_timeout_ms <= 0 or self.human_decision_timeout_ms <= 0:
            raise ValueError("decision timeouts must be positive")
        if self.human_seat is not None and not 0 <= self.human_seat < self.player_count:
            raise ValueError(f"human_seat {self.human_seat} is not a seat at a {self.player_count}-player table")

    @property
    def decision_timeout(self) -> float:
        """AI decision timeout in seconds."""
        return self.decision_timeout_ms / 1000

    @property
    def human_decision_timeout(self) -> float:
        """Human decision timeout in seconds."""
        return self.human_decision_timeout_ms / 1000


# Default configuration instance
default_config = GameConfig()
