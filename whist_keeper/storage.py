# whist_keeper/storage.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from .config import DEFAULT_STORAGE_KEY
from .schedule import total_rounds
from .state import GameState, dict_to_game_state, game_state_to_dict

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """
    Where the current game is saved between runs.

    Implementations never raise: failures are logged, `load` returns None.
    """

    def load(self) -> Optional[GameState]:
        raise NotImplementedError

    def save(self, state: GameState) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


def serialize_state(state: GameState) -> str:
    return json.dumps(game_state_to_dict(state))


def deserialize_state(raw: str) -> GameState:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Saved game state is not a JSON object")
    state = dict_to_game_state(data)
    expected = total_rounds(state.num_players, state.game_mode)
    if state.total_rounds != expected:
        raise ValueError(
            f"Saved game has {state.total_rounds} rounds; expected {expected}"
        )
    if not 0 <= state.current_round < state.total_rounds:
        raise ValueError(f"Current round {state.current_round} is out of range")
    return state


class MemoryStore:
    """Key/value store kept in a dict; holds the same JSON text as the file store."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.key = key
        self.items: Dict[str, str] = {}

    def load(self) -> Optional[GameState]:
        raw = self.items.get(self.key)
        if raw is None:
            return None
        try:
            return deserialize_state(raw)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Error loading game state: %s", exc)
            return None

    def save(self, state: GameState) -> None:
        try:
            self.items[self.key] = serialize_state(state)
        except (TypeError, ValueError) as exc:
            logger.error("Error saving game state: %s", exc)

    def clear(self) -> None:
        self.items.pop(self.key, None)


class JsonFileStore:
    """
    Saves the game as a JSON string under `key` inside a JSON object file.

    Other keys in the file are kept untouched.
    """

    def __init__(self, path: Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _read_items(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _write_items(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(items, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def load(self) -> Optional[GameState]:
        try:
            raw = self._read_items().get(self.key)
            if raw is None:
                return None
            return deserialize_state(raw)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Error loading game state from %s: %s", self.path, exc)
            return None

    def save(self, state: GameState) -> None:
        try:
            try:
                items = self._read_items()
            except ValueError:
                logger.warning("Overwriting unreadable state file %s", self.path)
                items = {}
            items[self.key] = serialize_state(state)
            self._write_items(items)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving game state to %s: %s", self.path, exc)

    def clear(self) -> None:
        try:
            items = self._read_items()
            if self.key not in items:
                return
            del items[self.key]
            self._write_items(items)
        except (OSError, ValueError) as exc:
            logger.error("Error clearing game state in %s: %s", self.path, exc)
