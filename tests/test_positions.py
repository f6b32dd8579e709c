from __future__ import annotations

import pytest

from handreplay.core.models import Action, Hand, Player
from handreplay.core.positions import (
    POSITION_LABELS,
    find_big_blind_post,
    find_small_blind_post,
    position_labels,
    rotate_for_hero,
)


def _table(seats, sb, bb, big_blind=100, hero=None):
    players = {f"p{s}": Player(name=f"p{s}", seat=s, stack=5000) for s in seats}
    preflop = [
        Action(f"p{sb}", "posts", big_blind // 2),
        Action(f"p{bb}", "posts", big_blind),
    ]
    return Hand(
        big_blind=big_blind,
        players=players,
        hero=hero,
        actions={"preflop": preflop, "flop": [], "turn": [], "river": []},
    )


def test_six_handed_labels_follow_big_blind_regardless_of_seat_numbers():
    hand = _table(seats=[2, 4, 5, 7, 8, 9], sb=5, bb=7)
    labels = position_labels(hand)
    ordered = [labels[f"p{s}"] for s in (8, 9, 2, 4, 5, 7)]
    assert ordered == list(POSITION_LABELS[6])
    assert ordered == ["LJ", "HJ", "CO", "BTN", "SB", "BB"]


def test_heads_up_labels():
    hand = _table(seats=[1, 2], sb=1, bb=2)
    assert position_labels(hand) == {"p1": "SB", "p2": "BB"}


@pytest.mark.parametrize("size", [2, 3, 4, 5, 6, 7])
def test_every_player_labelled_for_supported_sizes(size):
    seats = list(range(1, size + 1))
    hand = _table(seats=seats, sb=seats[-2], bb=seats[-1])
    labels = position_labels(hand)
    assert sorted(labels.values()) == sorted(POSITION_LABELS[size])
    assert labels[f"p{seats[-1]}"] == "BB"


def test_no_big_blind_poster_gives_empty_labels():
    hand = _table(seats=[1, 2, 3], sb=1, bb=2)
    hand.actions["preflop"] = [Action("p1", "posts", 50)]
    assert position_labels(hand) == {"p1": "", "p2": "", "p3": ""}


def test_unsupported_table_size_gives_empty_labels():
    seats = list(range(1, 10))
    hand = _table(seats=seats, sb=1, bb=2)
    assert set(position_labels(hand).values()) == {""}


def test_ante_equal_to_big_blind_is_not_a_blind_post():
    hand = _table(seats=[1, 2, 3], sb=2, bb=3)
    hand.actions["preflop"].insert(0, Action("p1", "posts", 100, is_ante=True))
    assert find_big_blind_post(hand).player == "p3"
    assert find_small_blind_post(hand).player == "p2"


def test_hero_rotation_only_changes_visual_seats():
    hand = _table(seats=[1, 2, 3, 4, 5, 6], sb=1, bb=2, hero="p5")
    for name, label in position_labels(hand).items():
        hand.players[name].position = label
    before = {name: p.position for name, p in hand.players.items()}

    rotated = rotate_for_hero(hand)

    assert rotated[0].name == "p5"
    assert hand.players["p5"].visual_seat == 4
    assert {name: p.position for name, p in hand.players.items()} == before
    assert len({p.visual_seat for p in hand.players.values()}) == 6
