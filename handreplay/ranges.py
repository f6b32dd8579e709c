"""
Preflop range-chart lookup.

Charts are static images laid out as ``<base>/<POS>/<N>BB.png`` where ``N`` is
one of the canonical depths. This module only works out which path belongs to
a spot; whether the file is really there is checked by ``RangeResolver.exists``
(a local ``Path.exists`` or an HTTP ``HEAD``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence

import requests

from handreplay.core.models import Hand
from handreplay.replay.cursor import Cursor, next_acting_player
from handreplay.replay.snapshot import Snapshot

CANONICAL_DEPTHS: Sequence[int] = (15, 20, 25, 30, 40, 50, 60, 80, 100)
DEFAULT_RANGE_BASE = "ranges/Main/7max/open"

RFI_POSITIONS: Sequence[str] = ("UTG", "LJ", "HJ", "CO", "BTN", "SB")
POSITION_ALIASES: Dict[str, str] = {
    "MP": "LJ",
    "UTG+1": "LJ",
    "EP": "UTG",
    "UTG2": "LJ",
    "UTG3": "HJ",
}


@dataclass(frozen=True)
class RangeSpot:
    position: str
    depth_bb: int


def nearest_depth(effective_bb: float, depths: Sequence[int] = CANONICAL_DEPTHS) -> int:
    """Closest canonical depth; on a tie the smaller depth wins."""
    best = depths[0]
    for depth in depths[1:]:
        if abs(depth - effective_bb) < abs(best - effective_bb):
            best = depth
    return best


def range_path(position: str, depth_bb: int, base: str = DEFAULT_RANGE_BASE) -> str:
    return f"{base.rstrip('/')}/{position}/{depth_bb}BB.png"


def effective_depth(hand: Hand, player: str, snapshot: Snapshot) -> Optional[int]:
    """Stack depth in big blinds between ``player`` and the deepest live opponent."""
    if not hand.big_blind or player not in hand.players:
        return None
    own = hand.players[player].stack // hand.big_blind
    others = [
        p.stack // hand.big_blind
        for name, p in hand.players.items()
        if name != player and name not in snapshot.folds
    ]
    if not others:
        return own
    return min(own, max(others))


def spot_for_next_actor(hand: Hand, cursor: Cursor, snapshot: Snapshot) -> Optional[RangeSpot]:
    """Position and canonical depth of whoever acts next; preflop only."""
    if cursor.street != "preflop":
        return None
    actor = next_acting_player(hand, cursor)
    if actor is None or actor not in hand.players:
        return None
    position = hand.players[actor].position
    depth = effective_depth(hand, actor, snapshot)
    if not position or depth is None:
        return None
    return RangeSpot(position=position, depth_bb=nearest_depth(depth))


def canonical_position(raw: str) -> Optional[str]:
    upper = str(raw or "").upper()
    mapped = POSITION_ALIASES.get(upper, upper)
    return mapped if mapped in RFI_POSITIONS else None


def derive_open_rfi(hand: Hand) -> Optional[RangeSpot]:
    """The first preflop raiser's position and effective depth (rounded)."""
    voluntary = [a for a in hand.street_actions("preflop") if a.action != "posts"]
    opener_action = next((a for a in voluntary if a.action == "raises"), None)
    if opener_action is None:
        return None
    opener = hand.players.get(opener_action.player)
    if opener is None:
        return None
    position = canonical_position(opener.position)
    if position is None:
        return None
    bb = max(1, hand.big_blind or 1)
    table_min = min(p.stack for p in hand.players.values())
    return RangeSpot(position=position, depth_bb=round(min(opener.stack, table_min) / bb))


class RangeResolver:
    def __init__(
        self,
        base: str = DEFAULT_RANGE_BASE,
        *,
        probe: bool = False,
        timeout_s: float = 2.0,
    ) -> None:
        self.base = base
        self.probe = probe
        self.timeout_s = timeout_s

    def path_for(self, spot: RangeSpot) -> str:
        return range_path(spot.position, spot.depth_bb, self.base)

    def exists(self, path: str) -> bool:
        if path.startswith(("http://", "https://")):
            try:
                r = requests.head(path, timeout=self.timeout_s, allow_redirects=True)
            except requests.RequestException:
                return False
            return r.ok
        return Path(path).exists()

    def resolve(self, hand: Hand, cursor: Cursor, snapshot: Snapshot) -> Optional[str]:
        spot = spot_for_next_actor(hand, cursor, snapshot)
        if spot is None:
            return None
        path = self.path_for(spot)
        if self.probe and not self.exists(path):
            return None
        return path
