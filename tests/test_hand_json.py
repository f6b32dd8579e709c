from __future__ import annotations

import copy

from handreplay.core.hand_json import V0_JSON_HAND, from_standard_json
from handreplay.replay.snapshot import build_snapshot


def test_from_standard_json_parses_hand_and_winners():
    hand = from_standard_json(V0_JSON_HAND)

    assert hand.big_blind == 100
    assert len(hand.players) == 6
    assert hand.players["dave"].hero is True
    assert hand.players["erin"].position == "CO"
    assert len(hand.street_actions("preflop")) == 10
    assert [(w.player, w.amount) for w in hand.winners] == [("erin", 670)]
    assert hand.total_collected == 670

    payload = hand.to_payload()
    assert payload["winners"] == [{"player": "erin", "amount": 670}]
    assert payload["uncalled"] == [{"player": "erin", "amount": 300}]


def test_from_standard_json_reads_collected_when_winners_missing():
    payload = copy.deepcopy(V0_JSON_HAND)
    payload.pop("winners")
    payload["collected"] = [{"player": "erin", "amount": "670"}]
    hand = from_standard_json(payload)
    assert [(w.player, w.amount) for w in hand.winners] == [("erin", 670)]


def test_from_standard_json_accepts_player_list_and_camel_case():
    payload = copy.deepcopy(V0_JSON_HAND)
    payload["players"] = list(payload["players"].values())
    payload["bigBlind"] = payload.pop("big_blind")
    hand = from_standard_json(payload)
    assert hand.big_blind == 100
    assert sorted(hand.players) == ["alice", "bob", "carol", "dave", "erin", "frank"]


def test_example_hand_snapshot_uses_ante_total():
    hand = from_standard_json(V0_JSON_HAND)
    snap = build_snapshot(hand, "preflop", -1)
    assert snap.pot == 20 + 50 + 100
    assert snap.visible_bets == {"alice": 50, "bob": 100}
