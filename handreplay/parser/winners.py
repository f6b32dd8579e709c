"""
Winner extraction.

A hand can describe its payouts in several shapes: a structured list that an
upstream producer already filled in (``winners``, ``collected`` or ``results``),
or only the free text of the hand history. Each shape is a ``WinnerSource``; the
sources are tried in a fixed order and the first one that yields at least one
winner decides the result.

Within the summary text every line is matched against an ordered pattern list.
Matches are merged into a map keyed by player: a later line for the same player
overwrites the earlier amount, it is never added to it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from handreplay.core.models import Hand, Winner

RE_COLLECTED_FROM_POT = re.compile(r"^(?P<name>.+?)\s+collected\s+(?P<amount>[\d,]+)\s+from pot", re.I)
RE_SEAT_WON = re.compile(r"^Seat\s+\d+:\s*(?P<rest>.+?)\s.*\bwon\s*\((?P<amount>[\d,]+)\)", re.I)
RE_SEAT_COLLECTED_PAREN = re.compile(
    r"^Seat\s+\d+:\s*(?P<rest>.+?)\s.*\bcollected\s*\((?P<amount>[\d,]+)\)", re.I
)
RE_COLLECTED_PAREN = re.compile(r"^(?P<name>.+?)\s+collected\s*\((?P<amount>[\d,]+)\)", re.I)

RE_SEAT_PREFIX = re.compile(r"^Seat\s+\d+:\s*", re.I)

SUMMARY_PATTERNS: Sequence[re.Pattern] = (
    RE_COLLECTED_FROM_POT,
    RE_SEAT_WON,
    RE_SEAT_COLLECTED_PAREN,
    RE_COLLECTED_PAREN,
)


def _to_amount(value: object) -> Optional[int]:
    try:
        return int(float(str(value).replace(",", "").strip()))
    except (TypeError, ValueError):
        return None


def _merge(entries: Iterable[tuple]) -> Dict[str, int]:
    merged: Dict[str, int] = {}
    for name, amount in entries:
        player = str(name or "").strip()
        value = _to_amount(amount)
        if not player or value is None:
            continue
        merged[player] = value
    return merged


def resolve_player_name(text: str, known: Iterable[str]) -> str:
    """Return the known player name that prefixes ``text``, else its first token."""
    text = RE_SEAT_PREFIX.sub("", text.strip())
    for name in sorted(known, key=len, reverse=True):
        if text == name or text.startswith(name + " "):
            return name
    return text.split()[0] if text.split() else ""


@dataclass(frozen=True)
class StructuredWinners:
    """A list of ``{player, amount}`` entries stored under ``field``."""

    field: str = "winners"

    def extract(self, hand: Hand, payload: Optional[Mapping[str, object]]) -> Optional[List[Winner]]:
        entries = (payload or {}).get(self.field)
        if not isinstance(entries, list) or not entries:
            return None
        merged = _merge(
            (entry.get("player"), entry.get("amount"))
            for entry in entries
            if isinstance(entry, Mapping)
        )
        return [Winner(player, amount) for player, amount in merged.items()] or None


@dataclass(frozen=True)
class StructuredResults:
    """Result rows ``{player, amount, result}``; only rows whose result mentions "won" count."""

    field: str = "results"

    def extract(self, hand: Hand, payload: Optional[Mapping[str, object]]) -> Optional[List[Winner]]:
        entries = (payload or {}).get(self.field)
        if not isinstance(entries, list) or not entries:
            return None
        merged = _merge(
            (entry.get("player"), entry.get("amount"))
            for entry in entries
            if isinstance(entry, Mapping) and re.search("won", str(entry.get("result") or ""), re.I)
        )
        return [Winner(player, amount) for player, amount in merged.items()] or None


@dataclass(frozen=True)
class SummaryTextWinners:
    """Scan the summary lines and the raw hand text for payout lines."""

    def lines(self, hand: Hand, payload: Optional[Mapping[str, object]]) -> List[str]:
        lines: List[str] = list(hand.summary_lines)
        if hand.raw:
            lines.extend(hand.raw.split("\n"))
        return [line.strip() for line in lines if line.strip()]

    def extract(self, hand: Hand, payload: Optional[Mapping[str, object]]) -> Optional[List[Winner]]:
        known = list(hand.players.keys())
        found: List[tuple] = []
        for line in self.lines(hand, payload):
            for pattern in SUMMARY_PATTERNS:
                match = pattern.match(line)
                if not match:
                    continue
                if "rest" in match.groupdict():
                    name = resolve_player_name(line, known)
                else:
                    name = RE_SEAT_PREFIX.sub("", match.group("name").strip())
                found.append((name, match.group("amount")))
                break
        merged = _merge(found)
        if not merged:
            return None
        winners = [Winner(player, amount) for player, amount in merged.items()]
        return sorted(winners, key=lambda w: w.amount, reverse=True)


WinnerSource = Union[StructuredWinners, StructuredResults, SummaryTextWinners]

DEFAULT_SOURCES: Sequence[WinnerSource] = (
    StructuredWinners("winners"),
    StructuredWinners("collected"),
    StructuredResults("results"),
    SummaryTextWinners(),
)


def extract_winners(
    hand: Hand,
    payload: Optional[Mapping[str, object]] = None,
    sources: Sequence[WinnerSource] = DEFAULT_SOURCES,
) -> List[Winner]:
    for source in sources:
        winners = source.extract(hand, payload)
        if winners:
            return winners
    return []


def net_winnings(hand: Hand) -> Dict[str, int]:
    """Collected amount minus what the player put in (after uncalled-bet returns)."""
    return {w.player: w.amount - hand.investments.get(w.player, 0) for w in hand.winners}
