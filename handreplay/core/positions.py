"""
Seat rotation and position labels.

Players are ordered by seat, rotated so the seat after the big blind poster
comes first, and labelled from a fixed table keyed by the number of players.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from handreplay.core.models import Action, Hand, Player

# Labels run from the first seat after the big blind round to the big blind itself.
POSITION_LABELS: Dict[int, Sequence[str]] = {
    2: ("SB", "BB"),
    3: ("BTN", "SB", "BB"),
    4: ("CO", "BTN", "SB", "BB"),
    5: ("HJ", "CO", "BTN", "SB", "BB"),
    6: ("LJ", "HJ", "CO", "BTN", "SB", "BB"),
    7: ("UTG", "LJ", "HJ", "CO", "BTN", "SB", "BB"),
    8: ("UTG", "LJ", "HJ", "CO", "BTN", "SB", "BB"),
}

# Visual slot per rotated index, hero first.
SEAT_LAYOUT: Dict[int, Sequence[int]] = {
    2: (4, 0),
    3: (4, 2, 0),
    4: (4, 2, 0, 6),
    5: (4, 3, 1, 0, 6),
    6: (4, 3, 2, 0, 6, 5),
    7: (4, 3, 2, 1, 0, 6, 5),
}

HERO_VISUAL_OFFSET = 4


def is_blind_post(action: Action) -> bool:
    return action.action == "posts" and not action.is_ante and action.amount is not None


def find_big_blind_post(hand: Hand) -> Optional[Action]:
    if not hand.big_blind:
        return None
    for action in hand.street_actions("preflop"):
        if is_blind_post(action) and action.amount == hand.big_blind:
            return action
    return None


def find_small_blind_post(hand: Hand) -> Optional[Action]:
    if not hand.big_blind:
        return None
    for action in hand.street_actions("preflop"):
        if is_blind_post(action) and action.amount * 2 == hand.big_blind:
            return action
    return None


def rotate_from_big_blind(hand: Hand) -> List[Player]:
    """Players by seat, rotated so the seat after the big blind poster is first.

    Without a big blind poster the plain seat order is returned.
    """
    ordered = hand.players_by_seat()
    bb_post = find_big_blind_post(hand)
    bb_player = hand.players.get(bb_post.player) if bb_post else None
    if bb_player is None:
        return ordered
    bb_idx = next(i for i, p in enumerate(ordered) if p.seat == bb_player.seat)
    first = (bb_idx + 1) % len(ordered)
    return ordered[first:] + ordered[:first]


def position_labels(hand: Hand) -> Dict[str, str]:
    """Map each player name to a position label.

    Every label is empty when there is no big blind poster or the table size has
    no entry in ``POSITION_LABELS``.
    """
    labels = {name: "" for name in hand.players}
    bb_post = find_big_blind_post(hand)
    if bb_post is None or bb_post.player not in hand.players:
        return labels
    rotated = rotate_from_big_blind(hand)
    table = POSITION_LABELS.get(len(rotated), ())
    for idx, player in enumerate(rotated):
        labels[player.name] = table[idx] if idx < len(table) else ""
    return labels


def assign_positions(hand: Hand) -> None:
    for name, label in position_labels(hand).items():
        hand.players[name].position = label


def rotate_for_hero(hand: Hand) -> List[Player]:
    """Order players hero-first for display and set ``visual_seat``.

    Only presentation changes; position labels are left untouched.
    """
    rotated = rotate_from_big_blind(hand)
    hero_idx = next((i for i, p in enumerate(rotated) if p.name == hand.hero), -1)
    if hero_idx == -1:
        for idx, player in enumerate(rotated):
            player.visual_seat = idx
        return rotated
    rotated = rotated[hero_idx:] + rotated[:hero_idx]
    layout = SEAT_LAYOUT.get(len(rotated))
    for idx, player in enumerate(rotated):
        if layout is not None:
            player.visual_seat = layout[idx]
        else:
            player.visual_seat = (idx + HERO_VISUAL_OFFSET) % len(rotated)
    return rotated
