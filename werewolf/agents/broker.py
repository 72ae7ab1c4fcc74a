"""
Decision broker: asks seats for decisions with timeouts and stale-response filtering.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from .base_agent import BaseAgent
from .exceptions import DecisionTimeout
from ..core import GameState, NightAction, InvalidTarget, StaleResponse
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..core import Moderator


# Request kind -> (agent method, value used when the seat fails)
REQUESTS: Dict[str, tuple] = {
    "night_action": ("request_night_action", NightAction),
    "vote": ("request_vote", lambda: None),
    "speech": ("request_speech", lambda: ""),
    "badge_signup": ("request_badge_signup", lambda: False),
    "badge_transfer": ("request_badge_transfer", lambda: None),
    "hunter_shot": ("request_hunter_shot", lambda: None),
}

SEAT_REQUESTS = ("vote", "badge_transfer", "hunter_shot")


class DecisionBroker:
    """
    The only way the game talks to decision sources.

    Every request carries the (game_id, decision_epoch) it was issued in.
    Failures, timeouts and malformed answers turn into the request's skip
    value; answers arriving after the game or the sub-phase moved on are
    dropped without a trace.
    """

    def __init__(self, config: GameConfig = default_config):
        self.config = config
        self.game_state: Optional[GameState] = None
        self.agents: Dict[int, BaseAgent] = {}
        self.moderator: Optional['Moderator'] = None
        self.discarded = 0

    def bind(self, game_state: GameState, agents: Dict[int, BaseAgent], moderator: Optional['Moderator'] = None) -> None:
        """Point the broker at a (new) game. Older in-flight requests become stale."""
        self.game_state = game_state
        self.agents = agents
        self.moderator = moderator

    def timeout_for(self, seat: int) -> float:
        player = self.game_state.get_player(seat) if self.game_state else None
        if player and player.is_human:
            return self.config.human_decision_timeout
        return self.config.decision_timeout

    def check_fresh(self, game_id: int, epoch: int) -> None:
        """
        Raises:
            StaleResponse: If the game was replaced or the sub-phase already resolved
        """
        state = self.game_state
        if state is None or state.game_id != game_id or state.decision_epoch != epoch:
            raise StaleResponse(game_id, epoch)

    def _normalize(self, kind: str, seat: int, value: Any, candidates: List[int]) -> Any:
        """Coerce an answer into the typed result of the request, or raise InvalidTarget."""
        if kind == "night_action":
            if value is None:
                return NightAction()
            if isinstance(value, NightAction):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return NightAction(target=value)
            raise InvalidTarget(seat, kind, f"Unusable night action {value!r}")
        if kind in SEAT_REQUESTS:
            if value is None:
                return None
            if isinstance(value, bool) or not isinstance(value, int) or value not in candidates:
                raise InvalidTarget(seat, kind, f"Seat {value!r} is not among {candidates}")
            return value
        if kind == "speech":
            return "" if value is None else str(value)
        if kind == "badge_signup":
            return bool(value)
        raise ValueError(f"Unknown request kind: {kind}")

    def _record_failure(self, seat: int, kind: str, error: Exception) -> None:
        if isinstance(error, InvalidTarget):
            if self.moderator:
                self.moderator.log_rejection(error)
            return
        if self.game_state is not None:
            self.game_state._log_action("decision_failed", {
                "seat": seat,
                "action": kind,
                "error": type(error).__name__,
            })
        if self.config.verbose_rejections:
            print(f"[MODERATOR] seat {seat} failed {kind}: {error}")

    async def request(self, seat: int, kind: str, candidates: Optional[List[int]] = None,
                      extra: Optional[Dict[str, Any]] = None) -> Any:
        """
        Ask one seat for a decision.

        Args:
            seat: Seat to ask
            kind: One of REQUESTS
            candidates: Seats the answer may name
            extra: Request-specific hints for the agent

        Returns:
            The typed answer, or the skip value of the request kind
        """
        method_name, skip = REQUESTS[kind]
        agent = self.agents.get(seat)
        if agent is None or self.game_state is None:
            return skip()

        candidates = list(candidates or [])
        context = agent.build_context(self.game_state, candidates, extra)
        timeout = self.timeout_for(seat)

        try:
            answer = await asyncio.wait_for(getattr(agent, method_name)(context), timeout)
        except asyncio.TimeoutError:
            self._record_failure(seat, kind, DecisionTimeout(seat, kind, timeout))
            return skip()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Crashed seats abstain, the game goes on
            self._record_failure(seat, kind, e)
            return skip()

        try:
            self.check_fresh(context.game_id, context.epoch)
        except StaleResponse:
            self.discarded += 1
            return skip()

        try:
            return self._normalize(kind, seat, answer, candidates)
        except InvalidTarget as e:
            self._record_failure(seat, kind, e)
            return skip()

    async def gather(self, seats: List[int], kind: str,
                     candidates: Optional[Callable[[int], List[int]]] = None,
                     extra: Optional[Dict[str, Any]] = None) -> Dict[int, Any]:
        """
        Ask several seats at once and wait for every answer.

        Args:
            seats: Seats to ask
            kind: One of REQUESTS
            candidates: Function giving each seat its candidate list
            extra: Hints shared by all requests

        Returns:
            {seat: typed answer}
        """
        tasks = [
            self.request(seat, kind, candidates(seat) if candidates else None, extra)
            for seat in seats
        ]
        answers = await asyncio.gather(*tasks)
        return dict(zip(seats, answers))
