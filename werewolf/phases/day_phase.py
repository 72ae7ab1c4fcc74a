"""
Day phase: morning announcement, speeches, badge signup and last words.
"""

from typing import List, Optional, TYPE_CHECKING

from ..core import GameState, Moderator
from ..agents import DecisionBroker
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..events.event_emitter import EventEmitter


class DayPhaseHandler:
    """Handles day phase speeches and the badge signup."""

    def __init__(self, game_state: GameState, moderator: Moderator, broker: DecisionBroker,
                 config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.moderator = moderator
        self.broker = broker
        self.config = config
        self.event_emitter = event_emitter

    def announce_dawn(self) -> None:
        """Morning announcement of last night's deaths."""
        alive = self.game_state.alive_seats()
        self.moderator.announce_dawn(self.game_state.last_night_deaths)
        self.moderator.announce(f"Day {self.game_state.round}. Players alive: {alive}")

    def speaking_order(self, speakers: Optional[List[int]] = None) -> List[int]:
        """
        Order in which living players speak.

        Starts after the badge holder (who speaks last); without a living
        holder, starts after the first seat that died last night; otherwise
        from the lowest seat.

        Args:
            speakers: Seats allowed to speak (defaults to every living seat)

        Returns:
            Seats in speaking order
        """
        seats = sorted(speakers if speakers is not None else self.game_state.alive_seats())
        if not seats:
            return []

        count = len(self.game_state.players)
        holder = self.game_state.badge_holder
        if holder is not None and self.game_state.is_alive(holder):
            start = holder + 1
        elif self.game_state.last_night_deaths:
            start = min(d.seat for d in self.game_state.last_night_deaths) + 1
        else:
            start = 0

        rotation = [(start + offset) % count for offset in range(count)]
        return [seat for seat in rotation if seat in seats]

    async def _speak(self, seat: int, extra: Optional[dict] = None) -> str:
        speech = await self.broker.request(seat, "speech", extra=extra)
        self.moderator.player_speaks(seat, speech)
        return speech

    async def run_day_speeches(self) -> None:
        """Every living player speaks once."""
        order = self.speaking_order()
        self.moderator.announce(f"Discussion begins. Speaking order: {order}")
        for seat in order:
            await self._speak(seat)

    async def run_last_words(self) -> None:
        """The seat voted out today gives its last words."""
        seat = self.game_state.day_eliminated
        if seat is None:
            return
        self.moderator.announce(f"Player {seat}, you may say your last words.")
        await self._speak(seat, {"last_words": True})

    async def run_badge_signup(self) -> None:
        """
        Ask every living player whether they run for the badge.

        No candidate leaves the game without a badge; a single candidate takes
        it unopposed. Either way the election is over.
        """
        state = self.game_state
        self.moderator.announce("Who wants to run for the badge?")
        answers = await self.broker.gather(state.alive_seats(), "badge_signup")
        state.badge_candidates = [seat for seat, running in answers.items() if running]
        state._log_action("badge_signup", {"candidates": list(state.badge_candidates)})

        if not state.badge_candidates:
            self.moderator.announce("Nobody runs for the badge. There will be no badge holder.")
            state.badge_election_open = False
        elif len(state.badge_candidates) == 1:
            winner = state.badge_candidates[0]
            self.moderator.announce(f"Player {winner} is the only candidate and takes the badge.")
            state.assign_badge(winner)
            state.badge_election_open = False
            if self.event_emitter:
                self.event_emitter.emit_badge_assigned(winner, "unopposed", state.round)
        else:
            self.moderator.announce(f"Badge candidates: {state.badge_candidates}")

    async def run_badge_speeches(self) -> None:
        """Candidates give campaign speeches in seat order."""
        for seat in sorted(self.game_state.badge_candidates):
            if self.game_state.is_alive(seat):
                await self._speak(seat, {"campaign": True})

    async def run_pk_speeches(self) -> None:
        """Only the tied candidates speak before the revote."""
        tied = list(self.game_state.pk_candidates)
        self.moderator.announce(f"Tie between players {tied}. Each of them speaks once more, then we revote.")
        for seat in tied:
            if self.game_state.is_alive(seat):
                await self._speak(seat, {"pk": True})
