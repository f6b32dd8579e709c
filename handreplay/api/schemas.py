from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    # Raw hand-history text, possibly many hands, newest first.
    text: str = Field(min_length=1)


class WinnerOut(BaseModel):
    player: str
    amount: int


class HandSummary(BaseModel):
    index: int
    hand_id: Optional[str] = None
    big_blind: int
    players: int
    hero: Optional[str] = None
    hero_cards: List[str] = []
    board: List[str] = []
    winners: List[WinnerOut] = []
    # Problems reported by the consistency checks; empty when the hand looks sound.
    issues: List[str] = []


class ParseResponse(BaseModel):
    count: int
    hands: List[HandSummary]


class SnapshotResponse(BaseModel):
    street: str
    action_index: int
    pot: int
    visible_bets: Dict[str, int]
    folds: List[str]
    invested_by_player: Dict[str, int]
    blinds_map: Dict[str, int]


class ReplayView(BaseModel):
    street: str
    action_index: int
    award_phase: str
    award: Dict[str, int]
    pot: int
    pot_label: str
    visible_bets: Dict[str, int]
    folds: List[str]
    board: List[str]
    stacks: Dict[str, int]
    stack_labels: Dict[str, str]
    next_to_act: Optional[str] = None
    hand_over: bool


class RangeResponse(BaseModel):
    # Chart for whoever acts next at the current replay position.
    position: Optional[str] = None
    depth_bb: Optional[int] = None
    path: Optional[str] = None
    # Chart for the first preflop raiser, independent of the replay position.
    open_position: Optional[str] = None
    open_depth_bb: Optional[int] = None
    open_path: Optional[str] = None
