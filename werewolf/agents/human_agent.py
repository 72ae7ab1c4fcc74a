"""
Human seat: answers come from the console or from the presentation layer.
"""

import asyncio
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from .base_agent import BaseAgent, AgentContext, parse_seat, parse_witch_action, parse_yes
from ..core import Player, Role, NightAction
from ..config.game_config import GameConfig, default_config


class ConsoleReader:
    """
    One background thread reading console lines for the whole session.

    Each line goes to the question open at the moment it arrives. A line
    typed while no question is open (after a timeout, between phases) is
    dropped, so it never answers the next question.
    """

    def __init__(self, input_func: Callable[[str], str]):
        self.input_func = input_func
        self.closed = False
        self._target: Optional['HumanAgent'] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    def listen(self, agent: 'HumanAgent', loop: asyncio.AbstractEventLoop) -> None:
        """Route the next lines to `agent` on `loop`, starting the reader if needed."""
        self._target = agent
        self._loop = loop
        if self._thread is None:
            self._thread = threading.Thread(target=self._read_lines, daemon=True)
            self._thread.start()

    def _read_lines(self) -> None:
        while True:
            try:
                line = self.input_func("")
            except EOFError:
                self.closed = True
                return
            self._deliver(line)

    def _deliver(self, line: str) -> None:
        loop, agent = self._loop, self._target
        if loop is None or agent is None:
            return
        try:
            loop.call_soon_threadsafe(agent.submit_line, line)
        except RuntimeError:
            # Loop already closed: the line belongs to a finished game
            pass


class HumanAgent(BaseAgent):
    """
    Decision source for the human seat.

    Every request parks on a future tagged with (game_id, epoch) and published
    in `pending_prompt`. The presentation layer resolves it through `submit()`;
    in console mode a `ConsoleReader` feeds typed lines into the same path.
    """

    def __init__(self, player: Player, config: GameConfig = default_config,
                 input_func: Optional[Callable[[str], str]] = None,
                 console: Optional[ConsoleReader] = None):
        super().__init__(player, config)
        if console is None and input_func is not None:
            console = ConsoleReader(input_func)
        self.console = console
        self.pending_prompt: Optional[Dict[str, Any]] = None
        self._pending: Optional[asyncio.Future] = None
        self._pending_tag: Optional[Tuple[int, int]] = None

    def submit(self, game_id: int, epoch: int, value: Any) -> bool:
        """
        Deliver the human's answer.

        Args:
            game_id: Game the answer was given in
            epoch: Decision epoch shown with the prompt
            value: Typed answer (seat, None, NightAction, text or bool)

        Returns:
            False when the answer is stale or duplicate and was dropped
        """
        if self._pending is None or self._pending.done():
            return False
        if self._pending_tag != (game_id, epoch):
            return False
        self._pending.set_result(value)
        return True

    def submit_line(self, line: str) -> bool:
        """Answer the open question with a console line."""
        if self._pending_tag is None:
            return False
        return self.submit(*self._pending_tag, line)

    async def _wait_for_answer(self, context: AgentContext, kind: str, question: str) -> Any:
        loop = asyncio.get_running_loop()
        self._pending = loop.create_future()
        self._pending_tag = (context.game_id, context.epoch)
        self.pending_prompt = {
            "kind": kind,
            "question": question,
            "candidates": list(context.candidates),
            "game_id": context.game_id,
            "epoch": context.epoch,
        }
        if self.console is not None:
            print(f"{question}\n> ", end="", flush=True)
            self.console.listen(self, loop)
        try:
            return await self._pending
        finally:
            self._pending = None
            self._pending_tag = None
            self.pending_prompt = None

    async def _ask(self, context: AgentContext, kind: str, question: str) -> Tuple[bool, Any]:
        """Return (is_text, answer)."""
        answer = await self._wait_for_answer(context, kind, question)
        return isinstance(answer, str), answer

    def _question(self, context: AgentContext, text: str) -> str:
        candidates = f" Choices: {context.candidates}." if context.candidates else ""
        return f"[Seat {context.seat}, {context.role.value}] {text}{candidates}"

    async def request_night_action(self, context: AgentContext) -> NightAction:
        if context.role is Role.WITCH:
            victim = context.extra.get("wolf_target")
            text = f"Tonight the werewolves attacked {victim}. SAVE, POISON <seat> or PASS?"
        else:
            text = "Choose your target for tonight (number) or PASS."
        is_text, answer = await self._ask(context, "night_action", self._question(context, text))
        if not is_text:
            if isinstance(answer, NightAction):
                return answer
            return NightAction(target=answer if isinstance(answer, int) else None)
        if context.role is Role.WITCH:
            return parse_witch_action(answer, context)
        return NightAction(target=parse_seat(answer, context.candidates))

    async def request_vote(self, context: AgentContext) -> Optional[int]:
        return await self._ask_seat(context, "vote", "Who do you vote for? Number or ABSTAIN.")

    async def request_speech(self, context: AgentContext) -> str:
        _, answer = await self._ask(context, "speech", self._question(context, "Your speech:"))
        return str(answer) if answer is not None else ""

    async def request_badge_signup(self, context: AgentContext) -> bool:
        is_text, answer = await self._ask(context, "badge_signup", self._question(context, "Run for the badge? yes/no"))
        return parse_yes(answer) if is_text else bool(answer)

    async def request_badge_transfer(self, context: AgentContext) -> Optional[int]:
        return await self._ask_seat(context, "badge_transfer", "Pass the badge to (number) or PASS to tear it up.")

    async def request_hunter_shot(self, context: AgentContext) -> Optional[int]:
        return await self._ask_seat(context, "hunter_shot", "You may shoot one player (number) or PASS.")

    async def _ask_seat(self, context: AgentContext, kind: str, text: str) -> Optional[int]:
        is_text, answer = await self._ask(context, kind, self._question(context, text))
        if is_text:
            return parse_seat(answer, context.candidates)
        return answer if isinstance(answer, int) else None
