from __future__ import annotations

import requests

from handreplay.ranges import (
    RangeResolver,
    RangeSpot,
    canonical_position,
    derive_open_rfi,
    effective_depth,
    nearest_depth,
    range_path,
    spot_for_next_actor,
)
from handreplay.replay.cursor import Cursor
from handreplay.replay.snapshot import build_snapshot


def test_nearest_depth_rounds_to_canonical_set():
    assert nearest_depth(24) == 25
    assert nearest_depth(10) == 15
    assert nearest_depth(250) == 100
    assert nearest_depth(70) == 60  # 60 and 80 tie, smaller wins
    assert nearest_depth(35) == 30


def test_range_path_layout():
    assert range_path("CO", 40) == "ranges/Main/7max/open/CO/40BB.png"
    assert range_path("BTN", 100, base="https://cdn.example/ranges/") == "https://cdn.example/ranges/BTN/100BB.png"


def test_effective_depth_uses_deepest_live_opponent(six_max_hand):
    snap = build_snapshot(six_max_hand, "preflop", -1)
    assert effective_depth(six_max_hand, "hank", snap) == 25
    assert effective_depth(six_max_hand, "gina", snap) == 60


def test_spot_for_next_actor_preflop_only(six_max_hand):
    cursor = Cursor("preflop", -1)
    snap = build_snapshot(six_max_hand, cursor.street, cursor.index)
    assert spot_for_next_actor(six_max_hand, cursor, snap) == RangeSpot("LJ", 25)

    flop = Cursor("flop", -1)
    assert spot_for_next_actor(six_max_hand, flop, build_snapshot(six_max_hand, "flop", -1)) is None


def test_derive_open_rfi(six_max_hand, heads_up_hand):
    assert derive_open_rfi(six_max_hand) == RangeSpot("CO", 25)
    assert derive_open_rfi(heads_up_hand) == RangeSpot("SB", 10)


def test_canonical_position_aliases():
    assert canonical_position("mp") == "LJ"
    assert canonical_position("BTN") == "BTN"
    assert canonical_position("BB") is None


def test_resolver_without_probe_returns_path(six_max_hand):
    resolver = RangeResolver("charts")
    cursor = Cursor("preflop", -1)
    snap = build_snapshot(six_max_hand, "preflop", -1)
    assert resolver.resolve(six_max_hand, cursor, snap) == "charts/LJ/25BB.png"


def test_resolver_probe_checks_local_files(tmp_path, six_max_hand):
    resolver = RangeResolver(str(tmp_path), probe=True)
    cursor = Cursor("preflop", -1)
    snap = build_snapshot(six_max_hand, "preflop", -1)
    assert resolver.resolve(six_max_hand, cursor, snap) is None

    chart = tmp_path / "LJ" / "25BB.png"
    chart.parent.mkdir()
    chart.write_bytes(b"png")
    assert resolver.resolve(six_max_hand, cursor, snap) == str(chart)


def test_resolver_probe_over_http(monkeypatch):
    calls = []

    class _Resp:
        ok = False

    def fake_head(url, timeout, allow_redirects):
        calls.append((url, timeout))
        return _Resp()

    monkeypatch.setattr(requests, "head", fake_head)
    resolver = RangeResolver("https://cdn.example/open", probe=True, timeout_s=1.5)
    assert resolver.exists("https://cdn.example/open/CO/40BB.png") is False
    assert calls == [("https://cdn.example/open/CO/40BB.png", 1.5)]


def test_resolver_probe_network_error_means_missing(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(requests, "head", boom)
    assert RangeResolver(probe=True).exists("http://nowhere.invalid/x.png") is False
