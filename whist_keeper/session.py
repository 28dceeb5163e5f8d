# whist_keeper/session.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence, Union

from . import editor, engine
from .action_log import ActionLogger
from .errors import InvalidActionError, WhistError
from .state import GameMode, GameState, Phase
from .storage import SessionStore

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]

REPLAY_PROMPT = (
    "Are you sure you want to replay this round? "
    "This will reset all bids and tricks for this round."
)
NEW_GAME_PROMPT = (
    "Are you sure you want to start a new game? This will clear all progress."
)


def _always_confirm(message: str) -> bool:
    return True


class GameSession:
    """
    The action surface a front end drives.

    Every action computes a new GameState with the pure functions in
    `engine`/`editor`, swaps it in, then saves it. A failed save is logged by
    the store and does not undo the change. Replaying a round and starting
    over ask the injected `confirm` callback first.
    """

    def __init__(
        self,
        store: SessionStore,
        confirm: Optional[ConfirmFn] = None,
        action_log: Optional[ActionLogger] = None,
        state: Optional[GameState] = None,
    ) -> None:
        self.store = store
        self.confirm: ConfirmFn = confirm or _always_confirm
        self.action_log = action_log
        self._state = state

    @classmethod
    def resume(
        cls,
        store: SessionStore,
        confirm: Optional[ConfirmFn] = None,
        action_log: Optional[ActionLogger] = None,
    ) -> "GameSession":
        """Open a session on whatever game the store holds (possibly none)."""
        state = store.load()
        if state is not None:
            logger.info(
                "Resumed game at round %d (%s)",
                state.current_round + 1,
                state.phase.value,
            )
        return cls(store, confirm=confirm, action_log=action_log, state=state)

    @property
    def state(self) -> Optional[GameState]:
        return self._state

    @property
    def has_game(self) -> bool:
        return self._state is not None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_game(self) -> GameState:
        if self._state is None:
            raise InvalidActionError("No game in progress")
        return self._state

    def _record(
        self,
        action: str,
        details: Dict[str, Any],
        error: Optional[str] = None,
    ) -> None:
        if self.action_log is None:
            return
        state = self._state
        self.action_log.log_action(
            action=action,
            round_index=state.current_round if state is not None else None,
            phase=state.phase.value if state is not None else None,
            details=details,
            error=error,
        )

    def _apply(
        self,
        action: str,
        transition: Callable[[GameState], GameState],
        **details: Any,
    ) -> GameState:
        current = self._require_game()
        try:
            new_state = transition(current)
        except WhistError as exc:
            self._record(action, details, error=str(exc))
            raise
        self._commit(new_state)
        self._record(action, details)
        return new_state

    def _commit(self, new_state: GameState) -> None:
        self._state = new_state
        self.store.save(new_state)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def start(
        self,
        player_names: Sequence[str],
        mode: Union[GameMode, str] = GameMode.CLASSIC,
    ) -> GameState:
        new_state = engine.start_game(player_names, mode)
        self._commit(new_state)
        self._record(
            "start",
            {"players": ", ".join(new_state.players), "mode": new_state.game_mode.value},
        )
        return new_state

    def set_phase(self, phase: Union[Phase, str]) -> GameState:
        return self._apply(
            "set_phase",
            lambda s: engine.set_phase(s, phase),
            phase=Phase(phase).value,
        )

    def submit_bid(self, value: int) -> GameState:
        return self._apply(
            "bid", lambda s: engine.submit_bid(s, value), bid=value
        )

    def submit_trick(
        self,
        value: int,
        player_index: Optional[int] = None,
    ) -> GameState:
        return self._apply(
            "tricks",
            lambda s: engine.submit_trick(s, value, player_index),
            tricks=value,
            player_index=player_index,
        )

    def select_player(self, index: int) -> GameState:
        return self._apply(
            "select_player",
            lambda s: engine.select_player(s, index),
            player_index=index,
        )

    def replay_round(self) -> bool:
        """Reset the current round after confirmation. Returns False if declined."""
        self._require_game()
        if not self.confirm(REPLAY_PROMPT):
            logger.info("Replay declined")
            return False
        self._apply("replay_round", engine.replay_round)
        return True

    def edit_round(
        self,
        round_index: int,
        player_index: int,
        bid: int,
        tricks: int,
    ) -> GameState:
        current = self._require_game()
        new_state = editor.edit_round(
            current, round_index, player_index, bid, tricks
        )
        if new_state is current:
            logger.warning(
                "Edit of round %d for player %d ignored",
                round_index,
                player_index,
            )
            return current
        self._commit(new_state)
        self._record(
            "edit_round",
            {
                "round": round_index + 1,
                "player_index": player_index,
                "bid": bid,
                "tricks": tricks,
            },
        )
        return new_state

    def new_game(self) -> bool:
        """Discard the game after confirmation. Returns False if declined."""
        if not self.confirm(NEW_GAME_PROMPT):
            logger.info("New game declined")
            return False
        self._record("new_game", {})
        self.store.clear()
        self._state = None
        logger.info("Cleared saved game")
        return True
