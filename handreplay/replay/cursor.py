"""
Replay cursor and stepping.

A replay position is a ``ReplayState``: the cursor ``(street, index)`` plus the
award sub-state. ``step_forward`` and ``step_backward`` are pure functions from
one state to the next; they never touch the hand.

Stepping skips ``posts`` actions. Once the last street is exhausted the cursor
moves to ``showdown``; the next step there shows the award (a single winner gets
the full pot, several winners share it by their collected amounts) and the
step after that applies it to the stacks. When everyone but one player has folded the award is shown as soon as
the street ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from handreplay.core.models import STREETS, Hand, Winner
from handreplay.replay.snapshot import SHOWDOWN, STAGES, Snapshot, SnapshotTable, build_snapshot


class AwardPhase(str, Enum):
    NONE = "none"
    SHOW = "show"
    APPLIED = "applied"


@dataclass(frozen=True)
class Cursor:
    street: str = "preflop"
    index: int = -1

    @property
    def neutral(self) -> bool:
        return self.index == -1

    def __str__(self) -> str:
        return f"{self.street}:{self.index}"


@dataclass(frozen=True)
class ReplayState:
    cursor: Cursor = Cursor()
    award_phase: AwardPhase = AwardPhase.NONE
    award: Mapping[str, int] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, object]:
        return {
            "street": self.cursor.street,
            "action_index": self.cursor.index,
            "award_phase": self.award_phase.value,
            "award": dict(self.award),
        }


INITIAL_STATE = ReplayState()


def snapshot_at(hand: Hand, cursor: Cursor, table: Optional[SnapshotTable] = None) -> Snapshot:
    if table is not None:
        return table.get(cursor.street, cursor.index)
    return build_snapshot(hand, cursor.street, cursor.index)


def first_action_index(hand: Hand, street: str) -> int:
    """Index of the first non-post action; the past-end index when there is none."""
    actions = hand.street_actions(street)
    for idx, action in enumerate(actions):
        if action.action != "posts":
            return idx
    return len(actions)


def next_action_index(hand: Hand, street: str, index: int) -> Optional[int]:
    actions = hand.street_actions(street)
    for idx in range(index + 1, len(actions)):
        if actions[idx].action != "posts":
            return idx
    return None


def previous_action_index(hand: Hand, street: str, index: int) -> Optional[int]:
    actions = hand.street_actions(street)
    for idx in range(min(index, len(actions)) - 1, -1, -1):
        if actions[idx].action != "posts":
            return idx
    return None


def last_action_index(hand: Hand, street: str) -> Optional[int]:
    return previous_action_index(hand, street, len(hand.street_actions(street)))


def remaining_players(hand: Hand, snapshot: Snapshot) -> List[str]:
    return [name for name in hand.players if name not in snapshot.folds]


def is_hand_over(hand: Hand, cursor: Cursor, snapshot: Snapshot) -> bool:
    return cursor.street == SHOWDOWN or len(remaining_players(hand, snapshot)) <= 1


def split_pot(pot: int, winners: Sequence[Winner]) -> Dict[str, int]:
    """Share ``pot`` between winners in proportion to their collected amounts.

    Shares always add up to ``pot``; odd chips go to the first winner.
    """
    weights: Dict[str, int] = {}
    for w in winners:
        weights[w.player] = weights.get(w.player, 0) + max(0, w.amount)
    total = sum(weights.values())
    if total == 0:
        weights = {name: 1 for name in weights}
        total = len(weights)
    shares = {name: pot * weight // total for name, weight in weights.items()}
    first = next(iter(shares))
    shares[first] += pot - sum(shares.values())
    return shares


def award_amounts(hand: Hand, snapshot: Snapshot) -> Dict[str, int]:
    """Chips pushed to each winner when the award is shown.

    Parsed winners take precedence; otherwise the one player who has not folded
    takes the pot. Several survivors and no winner data means no award.
    """
    if len(hand.winners) == 1:
        return {hand.winners[0].player: snapshot.pot}
    if hand.winners:
        return split_pot(snapshot.pot, hand.winners)
    survivors = remaining_players(hand, snapshot)
    if len(survivors) == 1:
        return {survivors[0]: snapshot.pot}
    return {}


def _settle(hand: Hand, state: ReplayState, table: Optional[SnapshotTable]) -> ReplayState:
    if state.award_phase is AwardPhase.NONE:
        return state
    if is_hand_over(hand, state.cursor, snapshot_at(hand, state.cursor, table)):
        return state
    return replace(state, award_phase=AwardPhase.NONE, award={})


def step_forward(hand: Hand, state: ReplayState, table: Optional[SnapshotTable] = None) -> ReplayState:
    if hand is None:
        return state
    if state.award_phase is AwardPhase.SHOW:
        return replace(state, award_phase=AwardPhase.APPLIED)
    if state.award_phase is AwardPhase.APPLIED:
        return state

    cursor = state.cursor
    if cursor.street == SHOWDOWN:
        award = award_amounts(hand, snapshot_at(hand, cursor, table))
        if not award:
            return state
        return replace(state, award_phase=AwardPhase.SHOW, award=award)

    if cursor.neutral:
        moved = Cursor(cursor.street, first_action_index(hand, cursor.street))
        return _settle(hand, replace(state, cursor=moved), table)

    nxt = next_action_index(hand, cursor.street, cursor.index)
    if nxt is not None:
        return _settle(hand, replace(state, cursor=Cursor(cursor.street, nxt)), table)

    # End of the street: move on, and show the award if only one player is left.
    closing = snapshot_at(hand, cursor, table)
    moved = Cursor(STAGES[STAGES.index(cursor.street) + 1], -1)
    state = replace(state, cursor=moved)
    if len(remaining_players(hand, closing)) <= 1:
        award = award_amounts(hand, closing)
        if award:
            state = replace(state, award_phase=AwardPhase.SHOW, award=award)
    return _settle(hand, state, table)


def step_backward(hand: Hand, state: ReplayState, table: Optional[SnapshotTable] = None) -> ReplayState:
    if hand is None:
        return state
    if state.award_phase is AwardPhase.APPLIED:
        return replace(state, award_phase=AwardPhase.SHOW)
    if state.award_phase is AwardPhase.SHOW:
        state = replace(state, award_phase=AwardPhase.NONE, award={})

    cursor = state.cursor
    if not cursor.neutral and cursor.index == first_action_index(hand, cursor.street):
        return _settle(hand, replace(state, cursor=Cursor(cursor.street, -1)), table)

    prev = previous_action_index(hand, cursor.street, cursor.index)
    if prev is not None:
        return _settle(hand, replace(state, cursor=Cursor(cursor.street, prev)), table)

    for street in reversed(STAGES[: STAGES.index(cursor.street)]):
        last = last_action_index(hand, street)
        if last is not None:
            return _settle(hand, replace(state, cursor=Cursor(street, last)), table)

    return _settle(hand, replace(state, cursor=Cursor("preflop", -1)), table)


def visible_bets(hand: Hand, state: ReplayState, table: Optional[SnapshotTable] = None) -> Dict[str, int]:
    if state.award_phase is AwardPhase.SHOW:
        return dict(state.award)
    if state.award_phase is AwardPhase.APPLIED:
        return {}
    return dict(snapshot_at(hand, state.cursor, table).visible_bets)


def remaining_stack(
    hand: Hand,
    state: ReplayState,
    player: str,
    table: Optional[SnapshotTable] = None,
) -> int:
    """Chips behind for ``player`` at the cursor, never below zero."""
    seated = hand.players.get(player)
    if seated is None:
        return 0
    snapshot = snapshot_at(hand, state.cursor, table)
    remaining = seated.stack - hand.ante_paid(player) - snapshot.invested_by_player.get(player, 0)
    if state.award_phase is AwardPhase.APPLIED:
        remaining += state.award.get(player, 0)
    return max(0, remaining)


def format_chips(amount: int, big_blind: Optional[int]) -> str:
    if big_blind:
        return f"{amount / big_blind:.2f} BB"
    return f"{amount} chips"


def visible_board(hand: Hand, street: str) -> List[str]:
    if street == "preflop":
        return []
    if street == "flop":
        return list(hand.board[:3])
    if street == "turn":
        return list(hand.board[:4])
    return list(hand.board)


def next_acting_player(hand: Hand, cursor: Cursor) -> Optional[str]:
    """The player of the first non-post action after the cursor, on any later street."""
    if cursor.street not in STREETS:
        return None
    start = STREETS.index(cursor.street)
    for street in STREETS[start:]:
        begin = cursor.index + 1 if street == cursor.street else 0
        for action in hand.street_actions(street)[max(begin, 0):]:
            if action.action != "posts":
                return action.player
    return None
