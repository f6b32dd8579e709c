"""
Canonical JSON shape of a parsed hand.

``Hand.to_payload()`` produces this structure and ``from_standard_json`` reads
it back. Producers that already know the payouts may send them as ``winners``,
``collected`` or ``results`` instead of relying on the hand text.
"""

from __future__ import annotations

from typing import Any, Mapping

from handreplay.core.models import Hand

# Example 6-handed hand: CO opens, BTN calls, CO takes it down on the flop.
V0_JSON_HAND: dict[str, Any] = {
    "hand_id": "1001",
    "big_blind": 100,
    "button_seat": 5,
    "players": {
        "alice": {"name": "alice", "seat": 1, "stack": 10000, "cards": [], "position": "SB", "hero": False},
        "bob": {"name": "bob", "seat": 2, "stack": 8000, "cards": [], "position": "BB", "hero": False},
        "carol": {"name": "carol", "seat": 3, "stack": 12000, "cards": [], "position": "LJ", "hero": False},
        "dave": {"name": "dave", "seat": 4, "stack": 3000, "cards": ["Ah", "Kh"], "position": "HJ", "hero": True},
        "erin": {"name": "erin", "seat": 5, "stack": 9000, "cards": [], "position": "CO", "hero": False},
        "frank": {"name": "frank", "seat": 6, "stack": 6000, "cards": [], "position": "BTN", "hero": False},
    },
    "hero": "dave",
    "hero_cards": ["Ah", "Kh"],
    "board": ["7s", "Jd", "2c"],
    "actions": {
        "preflop": [
            {"player": "alice", "action": "posts", "amount": 10, "is_ante": True},
            {"player": "bob", "action": "posts", "amount": 10, "is_ante": True},
            {"player": "alice", "action": "posts", "amount": 50},
            {"player": "bob", "action": "posts", "amount": 100},
            {"player": "carol", "action": "folds", "amount": None},
            {"player": "dave", "action": "folds", "amount": None},
            {"player": "erin", "action": "raises", "amount": 250},
            {"player": "frank", "action": "calls", "amount": 250},
            {"player": "alice", "action": "folds", "amount": None},
            {"player": "bob", "action": "folds", "amount": None},
        ],
        "flop": [
            {"player": "erin", "action": "bets", "amount": 300},
            {"player": "frank", "action": "folds", "amount": None},
        ],
        "turn": [],
        "river": [],
    },
    "antes": [{"player": "alice", "amount": 10}, {"player": "bob", "amount": 10}],
    "ante_total": 20,
    "winners": [{"player": "erin", "amount": 670}],
    "investments": {"alice": 60, "bob": 110, "erin": 250, "frank": 250},
    "uncalled": [{"player": "erin", "amount": 300}],
}


def from_standard_json(payload: Mapping[str, Any]) -> Hand:
    """
    Convert a canonical hand payload into a Hand object.
    """
    return Hand.from_payload(payload)
