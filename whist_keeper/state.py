# whist_keeper/state.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class GameMode(enum.Enum):
    CLASSIC = "classic"
    # 1-card rounds count towards streaks and can trigger the bonus.
    ALTERNATIVE = "alternative"


class Phase(enum.Enum):
    DEALER = "dealer"
    BIDDING = "bidding"
    PLAYING = "playing"
    TRICKS = "tricks"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ConsecutiveState:
    """
    Streak of immediately preceding correct or wrong calls for one player.

    At most one of the two counters is non-zero.
    """
    correct: int = 0
    wrong: int = 0


@dataclass
class RoundState:
    completed: bool = False
    # Bid values in bid order (position 0 is the first bidder).
    bids: List[int] = field(default_factory=list)
    # Indexed by player, filled when the round completes.
    tricks: List[int] = field(default_factory=list)
    scores: List[int] = field(default_factory=list)
    bonus_applied: List[bool] = field(default_factory=list)
    # Player indices in play order, frozen when bidding completes.
    trick_order: Optional[List[int]] = None


@dataclass
class GameState:
    players: List[str]
    game_mode: GameMode = GameMode.CLASSIC
    current_round: int = 0
    phase: Phase = Phase.DEALER
    # In-progress bids for the current round, in bid order.
    bids: List[int] = field(default_factory=list)
    # In-progress tricks: player index -> count. Missing key = not entered.
    tricks: Dict[int, int] = field(default_factory=dict)
    current_trick_player_index: int = 0
    selected_player_index: Optional[int] = None
    rounds: List[RoundState] = field(default_factory=list)

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    @property
    def current_round_state(self) -> RoundState:
        return self.rounds[self.current_round]


def round_state_to_dict(round_state: RoundState) -> Dict[str, Any]:
    """Convert a RoundState to a JSON-serializable dict."""
    return {
        "completed": round_state.completed,
        "bids": list(round_state.bids),
        "tricks": list(round_state.tricks),
        "scores": list(round_state.scores),
        "bonus_applied": list(round_state.bonus_applied),
        "trick_order": (
            list(round_state.trick_order)
            if round_state.trick_order is not None
            else None
        ),
    }


def dict_to_round_state(data: Dict[str, Any]) -> RoundState:
    if not isinstance(data, dict):
        raise ValueError(f"Round entry must be an object; got {data!r}")
    trick_order = data.get("trick_order")
    return RoundState(
        completed=bool(data.get("completed", False)),
        bids=[int(b) for b in data.get("bids") or []],
        tricks=[int(t) for t in data.get("tricks") or []],
        scores=[int(s) for s in data.get("scores") or []],
        bonus_applied=[bool(b) for b in data.get("bonus_applied") or []],
        trick_order=(
            [int(p) for p in trick_order] if trick_order is not None else None
        ),
    )


def game_state_to_dict(state: GameState) -> Dict[str, Any]:
    """Convert a GameState to a JSON-serializable dict."""
    return {
        "players": list(state.players),
        "game_mode": state.game_mode.value,
        "current_round": state.current_round,
        "phase": state.phase.value,
        "bids": list(state.bids),
        # JSON object keys are strings; converted back on load.
        "tricks": {str(pid): count for pid, count in state.tricks.items()},
        "current_trick_player_index": state.current_trick_player_index,
        "selected_player_index": state.selected_player_index,
        "rounds": [round_state_to_dict(r) for r in state.rounds],
    }


def dict_to_game_state(data: Dict[str, Any]) -> GameState:
    """
    Convert a dict back into a GameState.

    Snapshots written before game modes existed carry no `game_mode` and are
    loaded as classic games.
    """
    tricks = data.get("tricks") or {}
    if not isinstance(tricks, dict):
        raise ValueError("In-progress tricks must be an object keyed by player")
    rounds = data.get("rounds") or []
    if not isinstance(rounds, list):
        raise ValueError("Rounds must be a list")

    if not isinstance(data.get("players"), list):
        raise ValueError("Players must be a list of names")

    selected = data.get("selected_player_index")
    return GameState(
        players=[str(name) for name in data["players"]],
        game_mode=GameMode(data.get("game_mode") or GameMode.CLASSIC.value),
        current_round=int(data.get("current_round", 0)),
        phase=Phase(data.get("phase", Phase.DEALER.value)),
        bids=[int(b) for b in data.get("bids") or []],
        tricks={
            int(pid): int(count)
            for pid, count in tricks.items()
        },
        current_trick_player_index=int(
            data.get("current_trick_player_index", 0)
        ),
        selected_player_index=int(selected) if selected is not None else None,
        rounds=[dict_to_round_state(r) for r in rounds],
    )
