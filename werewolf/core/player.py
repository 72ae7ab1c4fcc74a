"""
Player record: one seat at the table.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .roles import Role, Team


@dataclass
class Player:
    """Represents a seat in the game."""
    seat: int
    role: Role
    name: str = ""
    alive: bool = True
    is_human: bool = False

    # Role-specific flags
    guard_last_target: Optional[int] = None
    witch_has_antidote: bool = True
    witch_has_poison: bool = True
    hunter_can_shoot: bool = True
    holds_badge: bool = False

    # Private information
    known_wolves: List[int] = field(default_factory=list)  # For werewolves
    seer_checks: Dict[int, Dict[str, Any]] = field(default_factory=dict)  # {round: {"target": seat, "is_wolf": bool}}

    # History
    speeches: List[str] = field(default_factory=list)
    votes_cast: Dict[int, Optional[int]] = field(default_factory=dict)  # {round: target}

    def __post_init__(self):
        if not self.name:
            self.name = f"Player {self.seat}"
        # Ability flags only matter for their own role
        if self.role is not Role.WITCH:
            self.witch_has_antidote = False
            self.witch_has_poison = False
        if self.role is not Role.HUNTER:
            self.hunter_can_shoot = False

    def __str__(self) -> str:
        return f"{self.name} ({self.role.value})"

    @property
    def team(self) -> Team:
        return self.role.team

    @property
    def is_wolf(self) -> bool:
        """Check if player is a werewolf."""
        return self.role.is_wolf

    def add_speech(self, speech: str) -> None:
        """Add a speech to player's history."""
        self.speeches.append(speech)

    def add_seer_check(self, round_number: int, target: int, is_wolf: bool) -> None:
        """Record a Seer inspection result."""
        self.seer_checks[round_number] = {"target": target, "is_wolf": is_wolf}

    def kill(self) -> None:
        """Mark player as dead."""
        self.alive = False

    def get_private_info(self) -> Dict[str, Any]:
        """Get player's private information based on their role."""
        info: Dict[str, Any] = {"role": self.role.value}

        if self.is_wolf:
            info["known_wolves"] = list(self.known_wolves)
        elif self.role is Role.SEER:
            info["seer_checks"] = dict(self.seer_checks)
        elif self.role is Role.WITCH:
            info["has_antidote"] = self.witch_has_antidote
            info["has_poison"] = self.witch_has_poison
        elif self.role is Role.GUARD:
            info["last_protected"] = self.guard_last_target
        elif self.role is Role.HUNTER:
            info["can_shoot"] = self.hunter_can_shoot

        return info

    def public_view(self) -> Dict[str, Any]:
        """Fields every seat is allowed to see."""
        return {
            "seat": self.seat,
            "name": self.name,
            "alive": self.alive,
            "is_human": self.is_human,
            "holds_badge": self.holds_badge,
        }
