# whist_keeper/__init__.py
from .errors import (
    InvalidActionError,
    InvalidBidError,
    InvalidSetupError,
    InvalidTrickError,
    WhistError,
)
from .session import GameSession
from .state import ConsecutiveState, GameMode, GameState, Phase, RoundState
from .storage import JsonFileStore, MemoryStore, SessionStore

__all__ = [
    "ConsecutiveState",
    "GameMode",
    "GameSession",
    "GameState",
    "InvalidActionError",
    "InvalidBidError",
    "InvalidSetupError",
    "InvalidTrickError",
    "JsonFileStore",
    "MemoryStore",
    "Phase",
    "RoundState",
    "SessionStore",
    "WhistError",
]
