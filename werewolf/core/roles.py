"""
Role definitions and role decks for the Werewolf game.
"""

import random
from enum import Enum
from typing import Dict, List, Optional


class Team(Enum):
    """Player team affiliation."""
    WOLF = "wolf"
    VILLAGER = "villager"


class Role(Enum):
    """Player roles."""
    WEREWOLF = "werewolf"
    SEER = "seer"
    WITCH = "witch"
    HUNTER = "hunter"
    GUARD = "guard"
    VILLAGER = "villager"

    @property
    def team(self) -> Team:
        """Team this role plays for."""
        return Team.WOLF if self is Role.WEREWOLF else Team.VILLAGER

    @property
    def is_wolf(self) -> bool:
        return self is Role.WEREWOLF

    @property
    def has_night_action(self) -> bool:
        """Check if role acts during the night."""
        return self in (Role.WEREWOLF, Role.SEER, Role.WITCH, Role.GUARD)


# Werewolf and villager counts per table size. Every deck also holds
# exactly one Seer, Witch, Hunter and Guard.
DECK_SIZES: Dict[int, Dict[str, int]] = {
    8: {"werewolves": 2, "villagers": 2},
    9: {"werewolves": 3, "villagers": 2},
    10: {"werewolves": 3, "villagers": 3},
    11: {"werewolves": 4, "villagers": 3},
    12: {"werewolves": 4, "villagers": 4},
}

SPECIAL_ROLES = [Role.SEER, Role.WITCH, Role.HUNTER, Role.GUARD]


def get_role_distribution(player_count: int = 10) -> List[Role]:
    """
    Get the role deck for a table of the given size.

    Args:
        player_count: Number of seats (8..12)

    Returns:
        Unshuffled list of roles, one per seat

    Raises:
        ValueError: If no deck exists for the player count
    """
    sizes = DECK_SIZES.get(player_count)
    if sizes is None:
        raise ValueError(f"No role deck for {player_count} players (supported: {sorted(DECK_SIZES)})")

    deck = [Role.WEREWOLF] * sizes["werewolves"]
    deck.extend(SPECIAL_ROLES)
    deck.extend([Role.VILLAGER] * sizes["villagers"])
    return deck


def deal_roles(player_count: int, seed: Optional[int] = None) -> List[Role]:
    """Shuffle the deck for a table; the same seed always deals the same roles."""
    deck = get_role_distribution(player_count)
    rng = random.Random(seed) if seed is not None else random.Random()
    rng.shuffle(deck)
    return deck


def count_roles(roles: List[Role]) -> Dict[Role, int]:
    """Count how many seats hold each role."""
    counts = {role: 0 for role in Role}
    for role in roles:
        counts[role] += 1
    return counts
