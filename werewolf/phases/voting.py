"""
Voting: ballot collection for the badge election and the day vote, with PK runoffs.
"""

from typing import List, Optional, TYPE_CHECKING

from ..core import (
    GameState, Moderator, VoteRecord, VoteResolver, VoteResult, VoteKind,
    Death, DeathCause
)
from ..agents import DecisionBroker
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..events.event_emitter import EventEmitter


class VotingHandler:
    """Handles voting phases and tie-breaking."""

    def __init__(self, game_state: GameState, moderator: Moderator, broker: DecisionBroker,
                 config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.moderator = moderator
        self.broker = broker
        self.config = config
        self.event_emitter = event_emitter
        self.resolver = VoteResolver(config)

    def eligible_voters(self, candidates: List[int], runoff: bool) -> List[int]:
        """
        Living players who vote this round.

        In a PK revote the tied candidates sit out; if that leaves nobody,
        everyone alive votes.
        """
        alive = self.game_state.alive_seats()
        if not runoff:
            return alive
        voters = [seat for seat in alive if seat not in candidates]
        return voters or alive

    async def collect_votes(self, candidates: List[int], runoff: bool, round_index: int) -> List[VoteRecord]:
        """
        Collect one ballot from every eligible voter in parallel.

        Nobody may vote for themselves; a voter whose only candidate is
        themselves abstains without being asked.

        Returns:
            Ballots, abstentions included
        """
        voters = self.eligible_voters(candidates, runoff)
        askable = [seat for seat in voters if any(c != seat for c in candidates)]
        answers = await self.broker.gather(
            askable, "vote",
            candidates=lambda seat: [c for c in candidates if c != seat]
        )

        records = []
        for voter in voters:
            record = VoteRecord(voter=voter, target=answers.get(voter), round_index=round_index)
            records.append(record)
            self.game_state.day_votes[voter] = record
            self.game_state.players[voter].votes_cast[self.game_state.round] = record.target
        return records

    def _emit_result(self, result: VoteResult) -> None:
        for target, voters in sorted(result.voters.items()):
            self.moderator.announce(f"{result.tally[target]:g} votes for player {target}, voted: {voters}")
        if self.event_emitter:
            self.event_emitter.emit_vote_resolved(result.to_dict(), self.game_state.round)

    def _clear_runoff(self) -> None:
        self.game_state.pk_candidates = []
        self.game_state.pk_source = None

    # Day elimination vote

    async def run_day_vote(self) -> None:
        """Collect ballots for the day vote (or its PK revote)."""
        state = self.game_state
        runoff = state.pk_source == "vote" and bool(state.pk_candidates)
        candidates = list(state.pk_candidates) if runoff else state.alive_seats()

        state.start_vote("vote")
        if runoff:
            self.moderator.announce(f"Revote: choose between players {candidates} only.")
        else:
            self.moderator.announce("It is voting time.")
        await self.collect_votes(candidates, runoff, state.revote_count)

    def resolve_day_vote(self) -> VoteResult:
        """
        Tally the day vote. A unique leader is voted out; a tie opens a PK
        round while revotes remain, otherwise nobody leaves today.
        """
        state = self.game_state
        result = self.resolver.resolve(
            list(state.day_votes.values()),
            VoteKind.ELIMINATION,
            badge_holder=state.badge_holder,
            revote_count=state.revote_count,
        )
        self._clear_runoff()
        self._emit_result(result)

        if result.winner is not None:
            state.day_eliminated = result.winner
            self.moderator.announce(f"Player {result.winner} has been voted out.")
            state.kill_players([Death(result.winner, DeathCause.VOTE, state.round)], origin="day")
        elif result.needs_runoff:
            state.revote_count += 1
            state.pk_candidates = list(result.tied)
            state.pk_source = "vote"
        else:
            self.moderator.announce("No one is eliminated today.")
        return result

    # Badge election

    async def run_badge_election(self) -> VoteResult:
        """
        Collect and resolve a badge election round.

        Every living player votes at weight 1. A tie opens a PK round while
        badge revotes remain; past the limit nobody gets the badge.
        """
        state = self.game_state
        runoff = state.pk_source == "badge" and bool(state.pk_candidates)
        candidates = list(state.pk_candidates) if runoff else [
            seat for seat in state.badge_candidates if state.is_alive(seat)
        ]

        state.start_vote("badge")
        self.moderator.announce(f"Badge election between players {candidates}.")
        records = await self.collect_votes(candidates, runoff, state.badge_revote_count)

        result = self.resolver.resolve(
            records, VoteKind.BADGE, revote_count=state.badge_revote_count
        )
        self._clear_runoff()
        self._emit_result(result)

        if result.winner is not None:
            state.assign_badge(result.winner)
            state.badge_election_open = False
            self.moderator.announce(f"Player {result.winner} wins the badge.")
            if self.event_emitter:
                self.event_emitter.emit_badge_assigned(result.winner, "elected", state.round)
        elif result.needs_runoff:
            state.badge_revote_count += 1
            state.pk_candidates = list(result.tied)
            state.pk_source = "badge"
        else:
            state.badge_election_open = False
            self.moderator.announce("The election is abandoned. There will be no badge holder.")
            if self.event_emitter:
                self.event_emitter.emit_badge_assigned(None, "abandoned", state.round)
        return result
