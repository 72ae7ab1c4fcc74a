"""
JSONL recording of game events for offline inspection.

A run lives in <runs_dir>/<run_name>/: events.jsonl gets one line per emitted
event, metadata.json the seating and rule settings of the game.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, List


class RunRecorder:
    """Appends every emitted event to the current run."""

    EVENTS_FILE = "events.jsonl"
    METADATA_FILE = "metadata.json"

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.run_dir: Optional[Path] = None
        self._sequence = 0

    def create_run(self, run_name: Optional[str] = None) -> str:
        """
        Open a run directory. Events recorded before this call are ignored.

        Args:
            run_name: Directory name, "game_<timestamp>" when omitted

        Returns:
            The run name
        """
        run_name = run_name or datetime.now().strftime("game_%Y%m%d_%H%M%S")
        self.run_dir = self.runs_dir / run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        return run_name

    def get_run_path(self) -> Optional[Path]:
        return self.run_dir

    def _path(self, filename: str, run_name: Optional[str] = None) -> Optional[Path]:
        run_dir = self.run_dir if run_name is None else self.runs_dir / run_name
        return run_dir / filename if run_dir is not None else None

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        path = self._path(self.EVENTS_FILE)
        if path is None:
            return

        line = {
            "sequence": self._sequence,
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            "data": data,
        }
        self._sequence += 1
        with open(path, 'a') as f:
            f.write(json.dumps(line) + '\n')

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        """Write metadata.json, replacing the previous game's on restart."""
        path = self._path(self.METADATA_FILE)
        if path is None:
            return
        with open(path, 'w') as f:
            json.dump(metadata, f, indent=2)

    def load_events(self, run_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Read back the events of a run (the current one by default)."""
        path = self._path(self.EVENTS_FILE, run_name)
        if path is None or not path.exists():
            return []
        with open(path, 'r') as f:
            return [json.loads(line) for line in f if line.strip()]

    def summarize(self, run_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Outcome of a recorded run.

        A run may hold several games when the table was restarted; the
        outcome fields describe the last one.

        Returns:
            {"events", "games", "rounds", "winner", "failed"}
        """
        summary = {"events": 0, "games": 0, "rounds": 0, "winner": None, "failed": False}
        for event in self.load_events(run_name):
            summary["events"] += 1
            event_type, data = event["event_type"], event["data"]
            if event_type == "game_start":
                summary.update(games=summary["games"] + 1, rounds=0, winner=None, failed=False)
            elif event_type == "round_start":
                summary["rounds"] = data["round"]
            elif event_type == "game_end":
                summary["winner"] = data["winner"]
                summary["rounds"] = data["round"]
            elif event_type == "failure":
                summary["failed"] = True
        return summary
