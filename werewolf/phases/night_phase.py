"""
Night phase: collects the Guard, Werewolf, Witch and Seer decisions and resolves the night.
"""

from typing import Optional, TYPE_CHECKING

from ..core import (
    GameState, Moderator, Role, NightResolver, NightAction, NightOutcome,
    InvalidTarget, ANTIDOTE, POISON
)
from ..agents import DecisionBroker
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..events.event_emitter import EventEmitter


class NightPhaseHandler:
    """Handles night phase actions."""

    def __init__(self, game_state: GameState, moderator: Moderator, broker: DecisionBroker,
                 config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None):
        self.game_state = game_state
        self.moderator = moderator
        self.broker = broker
        self.config = config
        self.event_emitter = event_emitter
        self.resolver = NightResolver(game_state, config)

    async def run_guard(self) -> None:
        """Ask the living Guard whom to protect."""
        guard = self.game_state.get_role_player(Role.GUARD)
        if not guard:
            return

        action = await self.broker.request(guard.seat, "night_action", self.game_state.alive_seats())
        try:
            self.resolver.record_guard(guard.seat, action.target)
        except InvalidTarget as e:
            self.moderator.log_rejection(e)
            self.resolver.record_guard(guard.seat, None)

    async def run_wolves(self) -> None:
        """Ask every living werewolf for a victim in parallel; the pack's choice is computed at resolve time."""
        wolves = [p.seat for p in self.game_state.get_alive_wolves()]
        if not wolves:
            return

        alive = self.game_state.alive_seats()
        actions = await self.broker.gather(
            wolves, "night_action",
            candidates=lambda seat: alive,
            extra={"teammates": wolves}
        )
        for seat, action in actions.items():
            try:
                self.resolver.record_wolf_vote(seat, action.target)
            except InvalidTarget as e:
                self.moderator.log_rejection(e)
                self.resolver.record_wolf_vote(seat, None)

    async def run_witch(self) -> None:
        """Tell the Witch tonight's victim and ask for a potion."""
        witch = self.game_state.get_role_player(Role.WITCH)
        if not witch or not (witch.witch_has_antidote or witch.witch_has_poison):
            return

        victim = self.resolver.wolf_target()
        can_save = witch.witch_has_antidote and victim is not None and (
            victim != witch.seat or self.resolver.may_self_save()
        )
        extra = {
            "wolf_target": victim,
            "can_save": can_save,
            "can_poison": witch.witch_has_poison,
        }

        action = await self.broker.request(witch.seat, "night_action", self.game_state.alive_seats(), extra)
        try:
            self.resolver.record_witch(witch.seat, action)
        except InvalidTarget as e:
            self.moderator.log_rejection(e)
            self.resolver.record_witch(witch.seat, NightAction())

    async def run_seer(self) -> None:
        """Ask the Seer whom to inspect and record the answer privately."""
        seer = self.game_state.get_role_player(Role.SEER)
        if not seer:
            return

        candidates = [s for s in self.game_state.alive_seats() if s != seer.seat]
        action = await self.broker.request(seer.seat, "night_action", candidates)
        try:
            self.resolver.inspect(seer.seat, action.target)
        except InvalidTarget as e:
            self.moderator.log_rejection(e)
            self.resolver.inspect(seer.seat, None)

    def resolve(self) -> NightOutcome:
        """
        Resolve the night and apply its deaths.

        Returns:
            NightOutcome of the night
        """
        outcome = self.resolver.resolve()
        self._emit_outcome(outcome)
        return outcome

    def _emit_outcome(self, outcome: NightOutcome) -> None:
        if not self.event_emitter:
            return
        round_number = outcome.round_number
        emit = self.event_emitter.emit_night_action_resolved

        if outcome.guard_target is not None:
            emit("guard", outcome.guard_target, "protected", round_number)
        if outcome.wolf_target is not None:
            emit("werewolf", outcome.wolf_target, "saved" if outcome.saved_by else "killed", round_number)
        else:
            emit("werewolf", None, "skipped", round_number)
        if outcome.antidote_used:
            emit("witch", outcome.wolf_target, ANTIDOTE, round_number)
        if outcome.poison_target is not None:
            emit("witch", outcome.poison_target, POISON, round_number)
        if outcome.seer_target is not None:
            emit("seer", outcome.seer_target, "inspected", round_number)
