# whist_keeper/action_log.py
from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional


class ActionLogger:
    """Accumulates a turn-by-turn journal of actions applied to a game."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries: List[str] = []
        self._lock = Lock()

    @property
    def entries(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def log_action(
        self,
        *,
        action: str,
        round_index: Optional[int],
        phase: Optional[str],
        details: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        header_parts = [f"Action: {action}"]
        if round_index is not None:
            header_parts.append(f"Round: {round_index + 1}")
        if phase is not None:
            header_parts.append(f"Phase: {phase}")
        header = " | ".join(header_parts)

        lines = [f"=== {header} ==="]
        for key, value in (details or {}).items():
            lines.append(f"{key}: {value}")
        if error:
            lines.append(f"Error: {error}")

        entry = "\n".join(lines).strip()
        with self._lock:
            self._entries.append(entry)

    def flush(self) -> None:
        with self._lock:
            if not self._entries:
                return
            to_write = "\n\n".join(self._entries)
            self._entries.clear()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(to_write + "\n\n")
