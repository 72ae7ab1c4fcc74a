"""
Win condition evaluation.
"""

from typing import Iterable, Optional, TYPE_CHECKING

from .roles import Team

if TYPE_CHECKING:
    from .player import Player


def count_alive(players: Iterable['Player']) -> tuple[int, int]:
    """Return (living werewolves, living non-werewolves)."""
    wolves = 0
    others = 0
    for player in players:
        if not player.alive:
            continue
        if player.is_wolf:
            wolves += 1
        else:
            others += 1
    return wolves, others


def evaluate(players: Iterable['Player']) -> Optional[Team]:
    """
    Check if the game has ended and return the winning team.

    Villagers win once no werewolf is alive. Werewolves win as soon as living
    werewolves reach parity with everyone else. Returns None if the game continues.
    """
    wolves, others = count_alive(players)

    if wolves == 0:
        return Team.VILLAGER

    if wolves >= others:
        return Team.WOLF

    return None
