"""
Event emitter feeding observers (presentation layer, session statistics, run files).
"""

from typing import Callable, Dict, Any, Optional, List
from threading import Lock

from .run_recorder import RunRecorder


Listener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """Fans game events out to listeners and, optionally, a run recorder."""

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder
        self.listeners: List[Listener] = []
        self._lock = Lock()

    def add_listener(self, listener: Listener) -> None:
        """Register a callback receiving (event_type, payload)."""
        with self._lock:
            self.listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self.listeners:
                self.listeners.remove(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Deliver an event to every listener and the recorder."""
        with self._lock:
            listeners = list(self.listeners)

        for listener in listeners:
            try:
                listener(event_type, data)
            except Exception as e:
                # Observers must never break the game
                print(f"Error in event listener: {e}")

        if self.run_recorder:
            try:
                self.run_recorder.record_event(event_type, data)
            except Exception as e:
                # Don't let recording errors break the game
                print(f"Error recording event: {e}")

    def emit_game_start(self, game_id: int, players: List[int], human_seat: Optional[int] = None,
                        human_role: Optional[str] = None) -> None:
        """Emit game start event. Only the human seat's own role is revealed."""
        self._emit("game_start", {
            "game_id": game_id,
            "players": players,
            "human_seat": human_seat,
            "human_role": human_role
        })

    def emit_phase_change(self, phase: str, round_number: int) -> None:
        """Emit phase change event."""
        self._emit("phase_change", {
            "phase": phase,
            "round": round_number
        })

    def emit_round_start(self, round_number: int) -> None:
        """Emit round counter increment."""
        self._emit("round_start", {"round": round_number})

    def emit_state_snapshot(self, snapshot: Dict[str, Any]) -> None:
        """Emit a read-only state snapshot."""
        self._emit("state_snapshot", snapshot)

    def emit_announcement(self, message: str, phase: str, round_number: int) -> None:
        """Emit moderator announcement event."""
        self._emit("announcement", {
            "message": message,
            "phase": phase,
            "round": round_number
        })

    def emit_speech(self, seat: int, speech: str, phase: str, round_number: int) -> None:
        """Emit player speech event."""
        self._emit("speech", {
            "seat": seat,
            "speech": speech,
            "phase": phase,
            "round": round_number
        })

    def emit_night_action_resolved(self, actor: str, target: Optional[int], outcome: str, round_number: int) -> None:
        """
        Emit a resolved night action.

        Args:
            actor: Acting role ("guard", "werewolf", "witch", "seer", "hunter")
            target: Target seat or None for a skip
            outcome: Outcome kind, e.g. "protected", "killed", "saved", "poison", "inspected", "shot", "skipped"
            round_number: Current round
        """
        self._emit("night_action_resolved", {
            "actor": actor,
            "target": target,
            "outcome": outcome,
            "round": round_number
        })

    def emit_vote_resolved(self, result: Dict[str, Any], round_number: int) -> None:
        """Emit vote results event."""
        self._emit("vote_resolved", {
            **result,
            "round": round_number
        })

    def emit_elimination(self, seat: int, cause: str, round_number: int) -> None:
        """Emit player elimination event."""
        self._emit("elimination", {
            "seat": seat,
            "cause": cause,
            "round": round_number
        })

    def emit_badge_assigned(self, seat: Optional[int], reason: str, round_number: int) -> None:
        """Emit badge holder change (seat None = nobody holds the badge)."""
        self._emit("badge_assigned", {
            "seat": seat,
            "reason": reason,
            "round": round_number
        })

    def emit_game_end(self, winner: Optional[str], round_number: int, game_id: int) -> None:
        """Emit the terminal game-ended signal."""
        self._emit("game_end", {
            "winner": winner,
            "round": round_number,
            "game_id": game_id
        })

    def emit_failure(self, game_id: int) -> None:
        """Emit an opaque failure. Internal details stay in the action log."""
        self._emit("failure", {
            "game_id": game_id,
            "message": "The game could not continue."
        })
