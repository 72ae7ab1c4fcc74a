"""
Night rules: accepts one action per acting role and turns them into the night's outcome.

Order of resolution:
    1. Guard protection is recorded before the wolves act.
    2. The wolves' victim is computed from their votes.
    3. The Witch decides knowing the victim (never the Guard's target).
    4. Deaths: guard or antidote saves the victim (both together still save),
       poison kills regardless of the guard.
    5. All deaths are applied at once, then the win condition is checked.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .game_engine import GameState, NightSubmission, Death, DeathCause
from .player import Player
from .roles import Role
from .exceptions import InvalidTarget
from ..config.game_config import GameConfig, default_config


ANTIDOTE = "antidote"
POISON = "poison"


@dataclass
class NightAction:
    """Typed night decision: a target or a skip, plus the potion for the Witch."""
    target: Optional[int] = None
    potion: Optional[str] = None

    @property
    def is_skip(self) -> bool:
        return self.potion is None and self.target is None


@dataclass
class NightOutcome:
    """What happened during one night."""
    round_number: int
    guard_target: Optional[int] = None
    wolf_target: Optional[int] = None
    antidote_used: bool = False
    poison_target: Optional[int] = None
    seer_target: Optional[int] = None
    seer_result: Optional[bool] = None
    saved_by: List[str] = field(default_factory=list)
    deaths: List[Death] = field(default_factory=list)

    @property
    def peaceful(self) -> bool:
        return not self.deaths

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": self.round_number,
            "wolf_target": self.wolf_target,
            "saved_by": list(self.saved_by),
            "deaths": [{"seat": d.seat, "cause": d.cause.value} for d in self.deaths],
        }


class NightResolver:
    """Validates night submissions and resolves them into deaths."""

    def __init__(self, game_state: GameState, config: GameConfig = default_config):
        self.game_state = game_state
        self.config = config

    def _actor(self, seat: int, role: Role, action_type: str) -> Player:
        player = self.game_state.get_player(seat)
        if not player or not player.alive or player.role is not role:
            raise InvalidTarget(seat, action_type, f"Seat {seat} cannot act as {role.value} tonight")
        return player

    def _require_alive_target(self, seat: int, target: int, action_type: str) -> Player:
        player = self.game_state.get_player(target)
        if not player or not player.alive:
            raise InvalidTarget(seat, action_type, f"Seat {target} is not a living player")
        return player

    def _submit(self, role: Role, seat: int, target: Optional[int], potion: Optional[str] = None) -> NightSubmission:
        submission = NightSubmission(role=role, seat=seat, target=target, potion=potion)
        self.game_state.night_submissions.setdefault(role, []).append(submission)
        return submission

    def _submissions(self, role: Role) -> List[NightSubmission]:
        return self.game_state.night_submissions.get(role, [])

    def record_guard(self, seat: int, target: Optional[int]) -> NightSubmission:
        """
        Record the Guard's protection.

        Raises:
            InvalidTarget: dead target, repeat of last night's target, or self when disallowed
        """
        guard = self._actor(seat, Role.GUARD, "guard")
        if self._submissions(Role.GUARD):
            raise InvalidTarget(seat, "guard", "Guard already acted tonight")
        if target is None:
            return self._submit(Role.GUARD, seat, None)

        self._require_alive_target(seat, target, "guard")
        if target == guard.guard_last_target:
            raise InvalidTarget(seat, "guard", f"Seat {target} was protected last night")
        if target == seat and not self.config.guard_can_self_protect:
            raise InvalidTarget(seat, "guard", "Guard cannot protect themselves")
        return self._submit(Role.GUARD, seat, target)

    def record_wolf_vote(self, seat: int, target: Optional[int]) -> NightSubmission:
        """Record one werewolf's choice of victim."""
        self._actor(seat, Role.WEREWOLF, "wolf_kill")
        if any(s.seat == seat for s in self._submissions(Role.WEREWOLF)):
            raise InvalidTarget(seat, "wolf_kill", "Werewolf already voted tonight")
        if target is not None:
            self._require_alive_target(seat, target, "wolf_kill")
        return self._submit(Role.WEREWOLF, seat, target)

    def wolf_target(self) -> Optional[int]:
        """
        The victim chosen by the pack.

        Plurality of the werewolves' votes; on a tie the tied target picked by
        the lowest-seated werewolf wins.
        """
        votes = sorted(
            (s for s in self._submissions(Role.WEREWOLF) if s.target is not None),
            key=lambda s: s.seat
        )
        if not votes:
            return None

        counts = Counter(s.target for s in votes)
        top = max(counts.values())
        tied = {target for target, count in counts.items() if count == top}
        for submission in votes:
            if submission.target in tied:
                return submission.target
        return None

    def may_self_save(self) -> bool:
        if self.config.witch_self_save == "always":
            return True
        if self.config.witch_self_save == "first_night":
            return self.game_state.round == 1
        return False

    def record_witch(self, seat: int, action: NightAction) -> NightSubmission:
        """
        Record the Witch's potion use.

        Raises:
            InvalidTarget: potion already used, antidote on anything but tonight's victim,
                self-save when disallowed, or a second potion tonight
        """
        witch = self._actor(seat, Role.WITCH, "witch")
        if self._submissions(Role.WITCH):
            raise InvalidTarget(seat, "witch", "Witch can use only one potion per night")
        if action.potion is None:
            return self._submit(Role.WITCH, seat, None)

        if action.potion == ANTIDOTE:
            if not witch.witch_has_antidote:
                raise InvalidTarget(seat, "witch", "Antidote already used")
            victim = self.wolf_target()
            if victim is None:
                raise InvalidTarget(seat, "witch", "Nobody was attacked tonight")
            target = victim if action.target is None else action.target
            if target != victim:
                raise InvalidTarget(seat, "witch", "Antidote can only save tonight's victim")
            if victim == seat and not self.may_self_save():
                raise InvalidTarget(seat, "witch", "Witch cannot save themselves")
            return self._submit(Role.WITCH, seat, victim, ANTIDOTE)

        if action.potion == POISON:
            if not witch.witch_has_poison:
                raise InvalidTarget(seat, "witch", "Poison already used")
            if action.target is None:
                raise InvalidTarget(seat, "witch", "Poison needs a target")
            self._require_alive_target(seat, action.target, "witch")
            return self._submit(Role.WITCH, seat, action.target, POISON)

        raise InvalidTarget(seat, "witch", f"Unknown potion '{action.potion}'")

    def inspect(self, seat: int, target: Optional[int]) -> Optional[bool]:
        """
        Seer inspection. Read-only for everyone but the Seer's own notes.

        Returns:
            True if the target is a werewolf, False if not, None on skip
        """
        seer = self._actor(seat, Role.SEER, "seer_check")
        if self._submissions(Role.SEER):
            raise InvalidTarget(seat, "seer_check", "Seer already inspected tonight")
        if target is None:
            self._submit(Role.SEER, seat, None)
            return None
        if target == seat:
            raise InvalidTarget(seat, "seer_check", "Seer cannot inspect themselves")
        checked = self._require_alive_target(seat, target, "seer_check")

        self._submit(Role.SEER, seat, target)
        seer.add_seer_check(self.game_state.round, target, checked.is_wolf)
        return checked.is_wolf

    def _single(self, role: Role) -> Optional[NightSubmission]:
        submissions = self._submissions(role)
        return submissions[0] if submissions else None

    def resolve(self) -> NightOutcome:
        """
        Turn tonight's submissions into deaths and apply them to the registry.

        Consumes used potions, updates the Guard's cooldown and clears the
        submission buffer.
        """
        state = self.game_state
        outcome = NightOutcome(round_number=state.round)

        guard_sub = self._single(Role.GUARD)
        witch_sub = self._single(Role.WITCH)
        seer_sub = self._single(Role.SEER)

        outcome.guard_target = guard_sub.target if guard_sub else None
        outcome.wolf_target = self.wolf_target()
        if seer_sub and seer_sub.target is not None:
            outcome.seer_target = seer_sub.target
            outcome.seer_result = state.players[seer_sub.target].is_wolf

        # Potions are spent whether or not they changed the outcome
        if witch_sub and witch_sub.potion == ANTIDOTE:
            state.players[witch_sub.seat].witch_has_antidote = False
            outcome.antidote_used = True
        if witch_sub and witch_sub.potion == POISON:
            state.players[witch_sub.seat].witch_has_poison = False
            outcome.poison_target = witch_sub.target

        # Cooldown only spans consecutive nights the guard acted
        guard = state.get_role_player(Role.GUARD)
        if guard:
            guard.guard_last_target = outcome.guard_target

        deaths: Dict[int, Death] = {}
        victim = outcome.wolf_target
        if victim is not None:
            guarded = outcome.guard_target == victim
            if guarded:
                outcome.saved_by.append("guard")
            if outcome.antidote_used:
                outcome.saved_by.append(ANTIDOTE)

            if guarded and outcome.antidote_used and self.config.double_save_kills:
                outcome.saved_by = []
                deaths[victim] = Death(victim, DeathCause.WOLF, state.round)
            elif not outcome.saved_by:
                deaths[victim] = Death(victim, DeathCause.WOLF, state.round)

        poisoned = outcome.poison_target
        if poisoned is not None:
            # Poison ignores the guard
            deaths[poisoned] = Death(poisoned, DeathCause.POISON, state.round)
            target = state.players[poisoned]
            if target.role is Role.HUNTER and not self.config.poisoned_hunter_can_shoot:
                target.hunter_can_shoot = False

        outcome.deaths = state.kill_players(sorted(deaths.values(), key=lambda d: d.seat), origin="night")
        state.last_night_deaths = list(outcome.deaths)
        state.night_submissions = {}
        state._log_action("night_resolved", outcome.to_dict())
        return outcome
