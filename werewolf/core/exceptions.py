"""
Exceptions for game-rule and state-machine errors.
"""

from typing import Optional


class InvalidTarget(Exception):
    """Raised when a decision names a seat the rules do not allow."""

    def __init__(self, seat: int, action_type: str, message: str = ""):
        self.seat = seat
        self.action_type = action_type
        self.message = message or f"Invalid target from seat {seat} during {action_type}"
        super().__init__(self.message)


class IllegalPhaseTransition(Exception):
    """Raised when the game reaches a state the rules cannot produce."""

    def __init__(self, current: Optional[str], target: Optional[str] = None, message: str = ""):
        self.current = current
        self.target = target
        self.message = message or f"Illegal phase transition {current} -> {target}"
        super().__init__(self.message)


class StaleResponse(Exception):
    """Raised for a decision that belongs to a finished game or a resolved sub-phase."""

    def __init__(self, game_id: int, epoch: int):
        self.game_id = game_id
        self.epoch = epoch
        super().__init__(f"Stale response for game {game_id}, epoch {epoch}")
