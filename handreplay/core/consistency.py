"""
Consistency checks for parsed hands.

The parser is tolerant: unrecognised lines are skipped and nothing is
rejected. These checks report what a tolerant parse may have let through so a
caller can decide whether to trust a hand before replaying it.
"""

from __future__ import annotations

from typing import Iterable, List

from handreplay.core.models import ACTION_TYPES, STREETS, Hand
from handreplay.core.positions import POSITION_LABELS, find_big_blind_post

# Minimum board size once a street has seen any action.
_BOARD_FOR_STREET = {"preflop": 0, "flop": 3, "turn": 4, "river": 5}


def _deepest_street(hand: Hand) -> str:
    deepest = "preflop"
    for street in STREETS:
        if hand.street_actions(street):
            deepest = street
    return deepest


def validate_hand(hand: Hand, idx: int = 0, source: str = "hand") -> List[str]:
    errors: List[str] = []
    tag = f"[{source} #{idx}]"

    if hand.big_blind <= 0:
        errors.append(f"{tag} big blind missing or not positive: {hand.big_blind}")

    for street in STREETS:
        for a_idx, action in enumerate(hand.street_actions(street)):
            if action.player not in hand.players:
                errors.append(f"{tag} {street}[{a_idx}] unknown player {action.player!r}")
            if action.action not in ACTION_TYPES:
                errors.append(f"{tag} {street}[{a_idx}] unknown action {action.action!r}")

    for winner in hand.winners:
        if winner.player not in hand.players:
            errors.append(f"{tag} winner {winner.player!r} is not seated")

    for name, player in hand.players.items():
        if len(player.cards) > 2:
            errors.append(f"{tag} player {name!r} has {len(player.cards)} hole cards")

    deepest = _deepest_street(hand)
    expected = _BOARD_FOR_STREET[deepest]
    if len(hand.board) < expected:
        errors.append(
            f"{tag} board has {len(hand.board)} cards but {deepest} has actions (expected {expected})"
        )

    if len(hand.players) in POSITION_LABELS and find_big_blind_post(hand) is not None:
        unlabelled = sorted(name for name, p in hand.players.items() if not p.position)
        if unlabelled:
            errors.append(f"{tag} positions missing for {', '.join(unlabelled)}")

    return errors


def check_hands(hands: Iterable[Hand], source: str = "hand") -> List[str]:
    errors: List[str] = []
    for idx, hand in enumerate(hands):
        errors.extend(validate_hand(hand, idx, source))
    return errors
