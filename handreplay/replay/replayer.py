from __future__ import annotations

import threading
from typing import Callable, Dict, Optional

import bittensor as bt

from handreplay.core.models import Hand
from handreplay.replay.cursor import (
    INITIAL_STATE,
    AwardPhase,
    ReplayState,
    format_chips,
    is_hand_over,
    next_acting_player,
    remaining_stack,
    snapshot_at,
    step_backward,
    step_forward,
    visible_bets,
    visible_board,
)
from handreplay.replay.snapshot import Snapshot, SnapshotTable


class Replayer:
    """Replay position for one hand.

    Manual steps and autoplay ticks both go through ``step_forward`` /
    ``step_backward`` under the same lock, so they never interleave.
    """

    def __init__(self, hand: Hand) -> None:
        self.hand = hand
        self.table = SnapshotTable(hand)
        self._state = INITIAL_STATE
        self._lock = threading.RLock()

    @property
    def state(self) -> ReplayState:
        with self._lock:
            return self._state

    @property
    def snapshot(self) -> Snapshot:
        with self._lock:
            return snapshot_at(self.hand, self._state.cursor, self.table)

    def step_forward(self) -> bool:
        """Advance one step. Returns False when the position did not change."""
        with self._lock:
            before = self._state
            self._state = step_forward(self.hand, before, self.table)
            return self._state != before

    def step_backward(self) -> bool:
        with self._lock:
            before = self._state
            self._state = step_backward(self.hand, before, self.table)
            return self._state != before

    def reset(self) -> None:
        with self._lock:
            self._state = INITIAL_STATE

    def view(self) -> Dict[str, object]:
        """Everything a table renderer needs for the current position."""
        with self._lock:
            state = self._state
            snapshot = snapshot_at(self.hand, state.cursor, self.table)
            bb = self.hand.big_blind
            stacks = {
                name: remaining_stack(self.hand, state, name, self.table)
                for name in self.hand.players
            }
            return {
                **state.to_payload(),
                "pot": snapshot.pot,
                "pot_label": format_chips(snapshot.pot, bb),
                "visible_bets": visible_bets(self.hand, state, self.table),
                "folds": sorted(snapshot.folds),
                "board": visible_board(self.hand, state.cursor.street),
                "stacks": stacks,
                "stack_labels": {name: format_chips(chips, bb) for name, chips in stacks.items()},
                "next_to_act": next_acting_player(self.hand, state.cursor),
                "hand_over": is_hand_over(self.hand, state.cursor, snapshot),
            }


class Autoplayer:
    """Steps a ``Replayer`` forward on a fixed interval until the hand is decided."""

    def __init__(
        self,
        replayer: Replayer,
        interval_s: float = 0.8,
        on_step: Optional[Callable[[Replayer], None]] = None,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.replayer = replayer
        self.interval_s = interval_s
        self.on_step = on_step
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._playing = False

    @property
    def playing(self) -> bool:
        return self._playing

    def start(self) -> None:
        with self._lock:
            if self._playing:
                return
            self._playing = True
            self._schedule()
        bt.logging.debug(f"Autoplay started ({self.interval_s:.2f}s interval)")

    def stop(self) -> None:
        with self._lock:
            self._playing = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def toggle(self) -> bool:
        if self._playing:
            self.stop()
        else:
            self.start()
        return self._playing

    def _schedule(self) -> None:
        self._timer = threading.Timer(self.interval_s, self.tick)
        self._timer.daemon = True
        self._timer.start()

    def tick(self) -> None:
        with self._lock:
            if not self._playing:
                return
        moved = self.replayer.step_forward()
        if self.on_step is not None:
            self.on_step(self.replayer)
        state = self.replayer.state
        if not moved or state.award_phase is not AwardPhase.NONE:
            bt.logging.debug(f"Autoplay stopped at {state.cursor} (award={state.award_phase.value})")
            self.stop()
            return
        with self._lock:
            if self._playing:
                self._schedule()
