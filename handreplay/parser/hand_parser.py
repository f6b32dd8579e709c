"""
Parser for plain-text hand histories.

The text holds one or more hands, each starting on a line that contains
``Hand #<digits>``. The log lists the newest hand first, so ``parse_hands``
returns hands in reverse text order (oldest first).

Parsing is line based and tolerant: lines that match no known shape are
skipped, and a block with no recognisable content is dropped.

Usage:
    from handreplay.parser import parse_file
    hands = parse_file(Path("history.txt"))
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from handreplay.core.models import STREETS, Action, Ante, Hand, Player
from handreplay.core.positions import assign_positions, rotate_for_hero
from handreplay.parser.winners import RE_SEAT_PREFIX, extract_winners, resolve_player_name

RE_HAND_START = re.compile(r"(?m)^(?=[^\n]*\bHand #\d+)")
RE_HAND_ID = re.compile(r"\bHand #(\d+)")
RE_STAKES = re.compile(r"\((\d[\d,]*)/(\d[\d,]*)\)")
RE_BUTTON = re.compile(r"Seat #(\d+) is the button|button is in seat #(\d+)", re.I)
RE_DEALT = re.compile(r"^Dealt to (?P<name>.+?) \[(?P<cards>[^\]]*)\]")
RE_BRACKETS = re.compile(r"\[\s*([^\]]*?)\s*\]")
RE_SEAT = re.compile(r"^Seat (?P<seat>\d+): (?P<name>.+?)\s+\((?P<stack>[\d,]+)\s+in chips\)")
RE_ACTION = re.compile(
    r"^(?P<player>[^:]+?):\s(?P<action>bets|raises|calls|checks|folds|posts)\b(?P<detail>.*)$"
)
RE_ANTE = re.compile(r"^(?P<player>[^:]+?): posts the ante (?P<amount>[\d,]+)")
RE_RAISE_TO = re.compile(r"\bto (\d[\d,]*)")
RE_FIRST_INT = re.compile(r"(\d[\d,]*)")
RE_UNCALLED = re.compile(r"^Uncalled bet \((?P<amount>[\d,]+)\) returned to (?P<player>.+?)\s*$")
RE_SHOWS = re.compile(r"^(?P<player>[^:]+?): shows \[(?P<cards>[^\]]+)\]")

STREET_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("*** FLOP ***", "flop"),
    ("*** TURN ***", "turn"),
    ("*** RIVER ***", "river"),
    ("*** SHOW DOWN ***", "showdown"),
    ("*** SUMMARY ***", "summary"),
)


class HandFileError(RuntimeError):
    """A hand-history file could not be read. Retrying with another file is safe."""


def _int(text: str) -> int:
    return int(text.replace(",", ""))


def normalize_text(raw_text: str) -> str:
    return raw_text.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff").strip()


def split_hands(raw_text: str) -> List[str]:
    """Cut the text into trimmed hand blocks, in text order."""
    text = normalize_text(raw_text)
    return [block.strip() for block in RE_HAND_START.split(text) if block.strip()]


def parse_cards(text: str) -> List[str]:
    return [card for card in text.split() if card]


def parse_header(lines: List[str], hand: Hand) -> None:
    for line in lines:
        if hand.hand_id is None:
            m_id = RE_HAND_ID.search(line)
            if m_id:
                hand.hand_id = m_id.group(1)
        if not hand.big_blind and "Hold'em" in line and "(" in line:
            m_stakes = RE_STAKES.search(line)
            if m_stakes:
                hand.big_blind = _int(m_stakes.group(2))
        if hand.button_seat is None:
            m_btn = RE_BUTTON.search(line)
            if m_btn:
                hand.button_seat = int(m_btn.group(1) or m_btn.group(2))


def parse_action_line(line: str) -> Optional[Action]:
    m_ante = RE_ANTE.match(line)
    if m_ante:
        return Action(
            player=m_ante.group("player").strip(),
            action="posts",
            amount=_int(m_ante.group("amount")),
            raw=line,
            is_ante=True,
        )

    match = RE_ACTION.match(line)
    if not match:
        return None
    action = match.group("action")
    detail = match.group("detail").strip()

    amount: Optional[int] = None
    if action == "raises":
        m_to = RE_RAISE_TO.search(detail)
        if m_to:
            amount = _int(m_to.group(1))
    elif action not in ("folds", "checks"):
        m_amt = RE_FIRST_INT.search(detail)
        if m_amt:
            amount = _int(m_amt.group(1))
    return Action(player=match.group("player").strip(), action=action, amount=amount, raw=line)


class _InvestmentTracker:
    """Running chips-in per player, used for net-profit figures."""

    def __init__(self) -> None:
        self.totals: Dict[str, int] = {}
        self.street: Dict[str, int] = {}

    def new_street(self) -> None:
        self.street = {}

    def add(self, player: str, amount: int) -> None:
        self.totals[player] = self.totals.get(player, 0) + amount

    def record(self, action: Action) -> None:
        if action.amount is None:
            return
        if action.is_ante:
            self.add(action.player, action.amount)
        elif action.action in ("posts", "bets", "calls"):
            self.add(action.player, action.amount)
            self.street[action.player] = self.street.get(action.player, 0) + action.amount
        elif action.action == "raises":
            increment = max(0, action.amount - self.street.get(action.player, 0))
            self.add(action.player, increment)
            self.street[action.player] = action.amount

    def refund(self, player: str, amount: int) -> None:
        if player in self.totals:
            self.totals[player] -= amount


def _apply_street_marker(line: str, hand: Hand) -> Optional[str]:
    for marker, street in STREET_MARKERS:
        if not line.startswith(marker):
            continue
        groups = RE_BRACKETS.findall(line)
        if street == "flop" and groups:
            hand.board = parse_cards(groups[0])
        elif street in ("turn", "river") and len(groups) >= 2:
            hand.board.extend(parse_cards(groups[-1]))
        return street
    return None


def parse_hand(raw_hand: str) -> Optional[Hand]:
    """Parse one hand block. Returns ``None`` when nothing in it is recognisable."""
    cleaned = normalize_text(raw_hand)
    if not cleaned:
        return None

    lines = [line.strip() for line in cleaned.split("\n")]
    hand = Hand(raw=cleaned)
    parse_header(lines, hand)

    investments = _InvestmentTracker()
    street = "preflop"
    in_summary = False

    for line in lines:
        if not line:
            continue

        new_street = _apply_street_marker(line, hand)
        if new_street is not None:
            street = new_street
            investments.new_street()
            if street == "summary":
                in_summary = True
                hand.summary_lines.append(line)
            continue

        if in_summary:
            hand.summary_lines.append(line)

        if line.startswith("Dealt to"):
            m_dealt = RE_DEALT.match(line)
            if m_dealt:
                hand.hero = m_dealt.group("name").strip()
                hand.hero_cards = parse_cards(m_dealt.group("cards"))
            continue

        m_seat = RE_SEAT.match(line)
        if m_seat or RE_SEAT_PREFIX.match(line):
            if m_seat:
                name = m_seat.group("name").strip()
                hand.players[name] = Player(
                    name=name,
                    seat=int(m_seat.group("seat")),
                    stack=_int(m_seat.group("stack")),
                )
            shown = RE_BRACKETS.search(line)
            if shown:
                name = resolve_player_name(line, hand.players.keys())
                if name in hand.players:
                    hand.players[name].cards = parse_cards(shown.group(1))
            continue

        m_uncalled = RE_UNCALLED.match(line)
        if m_uncalled:
            player = m_uncalled.group("player")
            amount = _int(m_uncalled.group("amount"))
            hand.uncalled.append(Ante(player=player, amount=amount))
            investments.refund(player, amount)
            continue

        m_shows = RE_SHOWS.match(line)
        if m_shows:
            name = m_shows.group("player").strip()
            if name in hand.players:
                hand.players[name].cards = parse_cards(m_shows.group("cards"))
            continue

        if street not in STREETS:
            continue
        action = parse_action_line(line)
        if action is None:
            continue
        hand.actions[street].append(action)
        investments.record(action)
        if action.is_ante:
            hand.antes.append(Ante(player=action.player, amount=action.amount))
            hand.ante_total += action.amount

    if hand.hero and hand.hero in hand.players:
        hand.players[hand.hero].cards = list(hand.hero_cards)
        hand.players[hand.hero].hero = True

    hand.investments = investments.totals
    assign_positions(hand)
    rotate_for_hero(hand)
    hand.winners = extract_winners(hand)
    hand.total_collected = sum(w.amount for w in hand.winners)

    if not _has_content(hand):
        return None
    return hand


def _has_content(hand: Hand) -> bool:
    return bool(
        hand.hand_id
        or hand.big_blind
        or hand.players
        or hand.hero
        or hand.board
        or any(hand.actions.values())
    )


def parse_hands(raw_text: str) -> List[Hand]:
    """Parse every hand in ``raw_text``; the result is in reverse text order."""
    if not isinstance(raw_text, str):
        return []
    parsed: List[Hand] = []
    for block in split_hands(raw_text):
        hand = parse_hand(block)
        if hand is not None:
            parsed.append(hand)
    parsed.reverse()
    return parsed


def parse_file(path: Path) -> List[Hand]:
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise HandFileError(f"Could not read file {path}: {exc}. Try another file?") from exc
    return parse_hands(text)
