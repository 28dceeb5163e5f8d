# whist_keeper/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .state import GameMode

logger = logging.getLogger(__name__)

# Load environment variables from a .env file if present.
load_dotenv()

# Saved games and exports live under the package unless overridden.
DATA_DIR = Path(__file__).resolve().parent / "data"

DEFAULT_STORAGE_KEY = "whist-game-state"
DEFAULT_STATE_FILE = DATA_DIR / "whist-game-state.json"
DEFAULT_EXPORT_DIR = DATA_DIR / "exports"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the score keeper.

    state_path: JSON file backing the saved session.
    storage_key: key under which the session is stored in that file.
    log_level: name of the logging level used by the CLI.
    default_mode: game mode used when a caller does not pick one.
    export_dir: folder that relative CSV and chart paths are written into.
    """
    state_path: Path
    storage_key: str = DEFAULT_STORAGE_KEY
    log_level: str = "INFO"
    default_mode: GameMode = GameMode.CLASSIC
    export_dir: Path = DEFAULT_EXPORT_DIR

    def export_path(self, path_like: str | Path) -> Path:
        """Anchor a relative export path in `export_dir`, creating the folder."""
        path = Path(path_like)
        if path.is_absolute():
            return path
        self.export_dir.mkdir(parents=True, exist_ok=True)
        return self.export_dir / path


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (and any .env file)."""
    env = os.environ if environ is None else environ

    raw_mode = env.get("WHIST_GAME_MODE", GameMode.CLASSIC.value).strip().lower()
    try:
        mode = GameMode(raw_mode)
    except ValueError:
        logger.warning(
            "Unknown WHIST_GAME_MODE '%s'; falling back to classic", raw_mode
        )
        mode = GameMode.CLASSIC

    state_path = env.get("WHIST_STATE_PATH")
    export_dir = env.get("WHIST_EXPORT_DIR")
    return Settings(
        state_path=Path(state_path) if state_path else DEFAULT_STATE_FILE,
        storage_key=env.get("WHIST_STORAGE_KEY") or DEFAULT_STORAGE_KEY,
        log_level=(env.get("WHIST_LOG_LEVEL") or "INFO").upper(),
        default_mode=mode,
        export_dir=Path(export_dir) if export_dir else DEFAULT_EXPORT_DIR,
    )
