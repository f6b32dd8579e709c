"""
Core data models for parsed poker hands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

STREETS: tuple = ("preflop", "flop", "turn", "river")
ACTION_TYPES: tuple = ("posts", "bets", "calls", "raises", "folds", "checks")


def _opt_int(value: object) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(str(value).replace(",", ""))


@dataclass(frozen=True)
class Action:
    """One atomic event inside a street.

    ``amount`` is absolute for posts/bets/calls and the street total the player
    reaches for raises ("raises to X").
    """

    player: str
    action: str
    amount: Optional[int] = None
    raw: str = ""
    is_ante: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "Action":
        return cls(
            player=str(payload.get("player") or ""),
            action=str(payload.get("action") or ""),
            amount=_opt_int(payload.get("amount")),
            raw=str(payload.get("raw") or ""),
            is_ante=bool(payload.get("is_ante") or False),
        )

    def to_payload(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "player": self.player,
            "action": self.action,
            "amount": self.amount,
        }
        if self.raw:
            data["raw"] = self.raw
        if self.is_ante:
            data["is_ante"] = True
        return data


@dataclass(frozen=True)
class Ante:
    player: str
    amount: int

    def to_payload(self) -> Dict[str, object]:
        return {"player": self.player, "amount": self.amount}


@dataclass(frozen=True)
class Winner:
    """Gross amount a player collected from the pot."""

    player: str
    amount: int

    def to_payload(self) -> Dict[str, object]:
        return {"player": self.player, "amount": self.amount}


@dataclass
class Player:
    name: str
    seat: int
    stack: int
    cards: List[str] = field(default_factory=list)
    position: str = ""
    hero: bool = False
    visual_seat: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "Player":
        return cls(
            name=str(payload.get("name") or payload.get("id") or ""),
            seat=int(payload.get("seat") or 0),
            stack=int(payload.get("stack") or 0),
            cards=list(payload.get("cards") or []),
            position=str(payload.get("position") or ""),
            hero=bool(payload.get("hero") or False),
            visual_seat=_opt_int(payload.get("visual_seat")),
        )

    def to_payload(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "name": self.name,
            "seat": self.seat,
            "stack": self.stack,
            "cards": list(self.cards),
            "position": self.position,
            "hero": self.hero,
        }
        if self.visual_seat is not None:
            data["visual_seat"] = self.visual_seat
        return data


@dataclass
class Hand:
    """A single parsed hand. Built once by the parser and not mutated afterwards."""

    big_blind: int = 0
    players: Dict[str, Player] = field(default_factory=dict)
    hero: Optional[str] = None
    hero_cards: List[str] = field(default_factory=list)
    board: List[str] = field(default_factory=list)
    actions: Dict[str, List[Action]] = field(
        default_factory=lambda: {street: [] for street in STREETS}
    )
    antes: List[Ante] = field(default_factory=list)
    ante_total: int = 0
    winners: List[Winner] = field(default_factory=list)
    hand_id: Optional[str] = None
    button_seat: Optional[int] = None
    investments: Dict[str, int] = field(default_factory=dict)
    uncalled: List[Ante] = field(default_factory=list)
    total_collected: int = 0
    summary_lines: List[str] = field(default_factory=list)
    raw: str = ""

    def street_actions(self, street: str) -> List[Action]:
        return self.actions.get(street, [])

    def all_actions(self) -> List[Action]:
        return [action for street in STREETS for action in self.street_actions(street)]

    def players_by_seat(self) -> List[Player]:
        return sorted(self.players.values(), key=lambda p: p.seat)

    def ante_paid(self, player: str) -> int:
        return sum(ante.amount for ante in self.antes if ante.player == player)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "Hand":
        players_raw = payload.get("players") or {}
        if isinstance(players_raw, Mapping):
            players_iter: Sequence[Mapping[str, object]] = list(players_raw.values())
        else:
            players_iter = list(players_raw)
        players = {}
        for item in players_iter:
            player = Player.from_payload(item)
            players[player.name] = player

        actions_raw = payload.get("actions") or {}
        actions = {
            street: [Action.from_payload(a) for a in (actions_raw.get(street) or [])]
            for street in STREETS
        }
        antes = [
            Ante(player=str(a.get("player")), amount=int(a.get("amount") or 0))
            for a in (payload.get("antes") or [])
        ]
        uncalled = [
            Ante(player=str(a.get("player")), amount=int(a.get("amount") or 0))
            for a in (payload.get("uncalled") or [])
        ]

        hand = cls(
            big_blind=int(payload.get("big_blind") or payload.get("bigBlind") or 0),
            players=players,
            hero=payload.get("hero") or None,
            hero_cards=list(payload.get("hero_cards") or payload.get("heroCards") or []),
            board=list(payload.get("board") or []),
            actions=actions,
            antes=antes,
            ante_total=int(
                payload.get("ante_total")
                or payload.get("anteTotal")
                or sum(a.amount for a in antes)
            ),
            hand_id=payload.get("hand_id") or None,
            button_seat=_opt_int(payload.get("button_seat")),
            investments={str(k): int(v) for k, v in (payload.get("investments") or {}).items()},
            uncalled=uncalled,
            summary_lines=list(payload.get("summary_lines") or []),
            raw=str(payload.get("raw") or ""),
        )

        # Imported here to keep models free of a module-level dependency on the parser package.
        from handreplay.parser.winners import extract_winners

        hand.winners = extract_winners(hand, payload)
        hand.total_collected = sum(w.amount for w in hand.winners)
        return hand

    def to_payload(self) -> Dict[str, object]:
        return {
            "hand_id": self.hand_id,
            "big_blind": self.big_blind,
            "button_seat": self.button_seat,
            "players": {name: p.to_payload() for name, p in self.players.items()},
            "hero": self.hero,
            "hero_cards": list(self.hero_cards),
            "board": list(self.board),
            "actions": {
                street: [a.to_payload() for a in self.street_actions(street)]
                for street in STREETS
            },
            "antes": [a.to_payload() for a in self.antes],
            "ante_total": self.ante_total,
            "winners": [w.to_payload() for w in self.winners],
            "investments": dict(self.investments),
            "uncalled": [u.to_payload() for u in self.uncalled],
            "total_collected": self.total_collected,
        }
