"""
Table state at a replay cursor.

Nothing derived is stored per action: pot, chips in front of each player,
folded players and per-player investment are recomputed by walking the action
log from the start of the hand up to ``(street, action_index)``.

``action_index == -1`` is the neutral point of a street, before any action on
it. On preflop the neutral point still shows the blinds in front of their
posters.

Raises are "raises to X": X is the player's total for the street, so only
``X - already_in_this_street`` goes into the pot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from handreplay.core.models import STREETS, Hand
from handreplay.core.positions import find_big_blind_post, find_small_blind_post

SHOWDOWN = "showdown"
STAGES: Tuple[str, ...] = STREETS + (SHOWDOWN,)


@dataclass(frozen=True)
class Snapshot:
    pot: int = 0
    visible_bets: Mapping[str, int] = field(default_factory=dict)
    folds: FrozenSet[str] = frozenset()
    invested_by_player: Mapping[str, int] = field(default_factory=dict)
    blinds_map: Mapping[str, int] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, object]:
        return {
            "pot": self.pot,
            "visible_bets": dict(self.visible_bets),
            "folds": sorted(self.folds),
            "invested_by_player": dict(self.invested_by_player),
            "blinds_map": dict(self.blinds_map),
        }


def _check_stage(street: str) -> None:
    if street not in STAGES:
        raise ValueError(f"Unknown street {street!r} (expected one of {', '.join(STAGES)})")


def blinds_map(hand: Hand) -> Dict[str, int]:
    blinds: Dict[str, int] = {}
    for post in (find_small_blind_post(hand), find_big_blind_post(hand)):
        if post is not None:
            blinds[post.player] = blinds.get(post.player, 0) + post.amount
    return blinds


def build_snapshot(hand: Optional[Hand], street: str, action_index: int) -> Snapshot:
    """Snapshot after the action at ``action_index`` on ``street`` (inclusive)."""
    if hand is None:
        return Snapshot()
    _check_stage(street)

    pot = hand.ante_total
    invested: Dict[str, int] = {}
    street_invested: Dict[str, Dict[str, int]] = {st: {} for st in STREETS}
    folds = set()
    visible: Dict[str, int] = {}

    blinds = blinds_map(hand)
    for player, amount in blinds.items():
        pot += amount
        invested[player] = invested.get(player, 0) + amount
        street_invested["preflop"][player] = street_invested["preflop"].get(player, 0) + amount

    for st in STREETS:
        actions = hand.street_actions(st)
        is_target = st == street
        if is_target and st == "preflop":
            visible.update(blinds)
        last_idx = min(action_index, len(actions) - 1) if is_target else len(actions) - 1
        per_street = street_invested[st]

        for action in actions[: last_idx + 1]:
            player = action.player
            if action.action == "folds":
                folds.add(player)
            elif action.action in ("bets", "calls"):
                amount = action.amount or 0
                pot += amount
                invested[player] = invested.get(player, 0) + amount
                per_street[player] = per_street.get(player, 0) + amount
                if is_target:
                    if action.action == "bets":
                        visible[player] = amount
                    else:
                        visible[player] = visible.get(player, 0) + amount
            elif action.action == "raises":
                to_amount = action.amount or 0
                increment = max(0, to_amount - per_street.get(player, 0))
                pot += increment
                invested[player] = invested.get(player, 0) + increment
                per_street[player] = to_amount
                if is_target:
                    visible[player] = to_amount
            # posts are covered by the blinds and antes seeded above; checks move no chips

        if is_target:
            break

    if street == "preflop" and action_index == -1:
        visible = dict(blinds)

    return Snapshot(
        pot=pot,
        visible_bets=visible,
        folds=frozenset(folds),
        invested_by_player=invested,
        blinds_map=blinds,
    )


def snapshot_key(street: str, action_index: int) -> str:
    return f"{street}:{action_index}"


class SnapshotTable:
    """Every snapshot of one hand, computed up front and looked up by cursor."""

    def __init__(self, hand: Optional[Hand]) -> None:
        self.hand = hand
        self._table: Dict[str, Snapshot] = {}
        if hand is not None:
            for st in STREETS:
                for idx in range(-1, len(hand.street_actions(st))):
                    self._table[snapshot_key(st, idx)] = build_snapshot(hand, st, idx)

    def __len__(self) -> int:
        return len(self._table)

    def get(self, street: str, action_index: int) -> Snapshot:
        cached = self._table.get(snapshot_key(street, action_index))
        if cached is not None:
            return cached
        snap = build_snapshot(self.hand, street, action_index)
        self._table[snapshot_key(street, action_index)] = snap
        return snap
