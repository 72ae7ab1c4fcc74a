"""
Vote tallying for the badge election and the day elimination vote.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Any

from .game_engine import VoteRecord
from .exceptions import IllegalPhaseTransition
from ..config.game_config import GameConfig, default_config


class VoteKind(Enum):
    """Which vote is being tallied."""
    BADGE = "badge"
    ELIMINATION = "vote"


@dataclass
class VoteResult:
    """Outcome of one vote round."""
    kind: VoteKind
    tally: Dict[int, float] = field(default_factory=dict)
    voters: Dict[int, List[int]] = field(default_factory=dict)  # {target: [voters]}
    abstained: List[int] = field(default_factory=list)
    winner: Optional[int] = None
    tied: List[int] = field(default_factory=list)
    needs_runoff: bool = False  # Tie with PK rounds left
    abandoned: bool = False  # Tie with no PK rounds left

    @property
    def resolved(self) -> bool:
        """Nothing more to do for this vote."""
        return not self.needs_runoff

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "tally": {str(seat): count for seat, count in self.tally.items()},
            "voters": {str(seat): list(v) for seat, v in self.voters.items()},
            "abstained": list(self.abstained),
            "winner": self.winner,
            "tied": list(self.tied),
            "needs_runoff": self.needs_runoff,
            "abandoned": self.abandoned,
        }


class VoteResolver:
    """Weighted plurality with PK runoffs bounded by the configured revote limits."""

    def __init__(self, config: GameConfig = default_config):
        self.config = config

    def badge_weight(self) -> float:
        """Weight of the badge holder's ballot after the configured rounding."""
        weight = self.config.badge_vote_weight
        if self.config.badge_weight_rounding == "floor":
            return float(math.floor(weight))
        if self.config.badge_weight_rounding == "round":
            # Half up, 1.5 -> 2
            return float(math.floor(weight + 0.5))
        return weight

    def vote_weight(self, voter: int, kind: VoteKind, badge_holder: Optional[int]) -> float:
        """The badge only weighs in on day eliminations."""
        if kind is VoteKind.ELIMINATION and badge_holder is not None and voter == badge_holder:
            return self.badge_weight()
        return 1.0

    def revote_limit(self, kind: VoteKind) -> int:
        if kind is VoteKind.BADGE:
            return self.config.max_badge_revote_count
        return self.config.max_revote_count

    def tally(self, records: Iterable[VoteRecord], kind: VoteKind,
              badge_holder: Optional[int] = None) -> VoteResult:
        """Count the ballots without deciding anything."""
        result = VoteResult(kind=kind)
        for record in sorted(records, key=lambda r: r.voter):
            if record.target is None:
                result.abstained.append(record.voter)
                continue
            weight = self.vote_weight(record.voter, kind, badge_holder)
            result.tally[record.target] = result.tally.get(record.target, 0.0) + weight
            result.voters.setdefault(record.target, []).append(record.voter)
        return result

    def resolve(self, records: List[VoteRecord], kind: VoteKind,
                badge_holder: Optional[int] = None, revote_count: int = 0) -> VoteResult:
        """
        Decide a vote round.

        Args:
            records: One ballot per eligible voter (abstentions included)
            kind: Badge election or day elimination
            badge_holder: Seat whose ballot is weighted in eliminations
            revote_count: PK rounds already played for this vote

        Returns:
            VoteResult with a winner, a runoff request, or an abandoned round

        Raises:
            IllegalPhaseTransition: If there is not a single ballot to count
        """
        if not records:
            raise IllegalPhaseTransition(kind.value, None, f"Cannot resolve a {kind.value} vote with no ballots")

        result = self.tally(records, kind, badge_holder)
        if not result.tally:
            # Everybody abstained
            result.abandoned = True
            return result

        top = max(result.tally.values())
        leaders = sorted(seat for seat, count in result.tally.items() if count == top)

        if len(leaders) == 1:
            result.winner = leaders[0]
            return result

        result.tied = leaders
        if revote_count < self.revote_limit(kind):
            result.needs_runoff = True
        else:
            result.abandoned = True
        return result
