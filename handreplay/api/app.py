from typing import Optional

import bittensor as bt
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from handreplay import __version__
from handreplay.api.schemas import (
    HandSummary,
    ParseRequest,
    ParseResponse,
    RangeResponse,
    ReplayView,
    SnapshotResponse,
    WinnerOut,
)
from handreplay.api.storage import InMemoryHandStore
from handreplay.core.consistency import validate_hand
from handreplay.core.models import Hand
from handreplay.parser.worker import ParseWorker
from handreplay.ranges import RangeResolver, derive_open_rfi, spot_for_next_actor
from handreplay.replay.replayer import Replayer
from handreplay.replay.snapshot import build_snapshot
from handreplay.utils.config import ReplayerEnvConfig, load_replayer_env

NO_HANDS_MESSAGE = "No hands found. Is this the correct hand-history format?"


def _summary(index: int, hand: Hand) -> HandSummary:
    return HandSummary(
        index=index,
        hand_id=hand.hand_id,
        big_blind=hand.big_blind,
        players=len(hand.players),
        hero=hand.hero,
        hero_cards=list(hand.hero_cards),
        board=list(hand.board),
        winners=[WinnerOut(player=w.player, amount=w.amount) for w in hand.winners],
        issues=validate_hand(hand, index),
    )


def create_app(config: Optional[ReplayerEnvConfig] = None) -> FastAPI:
    config = config or load_replayer_env()

    app = FastAPI(title="handreplay", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    store = InMemoryHandStore()
    worker = ParseWorker()
    resolver = RangeResolver(
        config.range_base,
        probe=config.range_probe,
        timeout_s=config.probe_timeout_s,
    )
    app.state.store = store
    app.state.worker = worker

    def _hand(hand_index: int) -> Hand:
        hand = store.get(hand_index)
        if hand is None:
            raise HTTPException(status_code=404, detail=f"No hand at index {hand_index}")
        return hand

    def _replayer(hand_index: int) -> Replayer:
        rep = store.replayer(hand_index)
        if rep is None:
            raise HTTPException(status_code=404, detail=f"No hand at index {hand_index}")
        return rep

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "hands": len(store.list()), "generation": store.generation}

    @app.post("/hands", response_model=ParseResponse)
    def load_hands(req: ParseRequest):
        hands = worker.submit(req.text).result()
        if not hands:
            raise HTTPException(status_code=422, detail=NO_HANDS_MESSAGE)
        store.replace(hands)
        bt.logging.info(f"Loaded {len(hands)} hands")
        return ParseResponse(
            count=len(hands),
            hands=[_summary(i, h) for i, h in enumerate(hands)],
        )

    @app.get("/hands", response_model=list[HandSummary])
    def list_hands():
        return [_summary(i, h) for i, h in enumerate(store.list())]

    @app.get("/hands/{hand_index}")
    def get_hand(hand_index: int):
        return _hand(hand_index).to_payload()

    @app.get("/hands/{hand_index}/snapshot", response_model=SnapshotResponse)
    def get_snapshot(
        hand_index: int,
        street: str = Query(default="preflop"),
        action_index: int = Query(default=-1, alias="index", ge=-1),
    ):
        hand = _hand(hand_index)
        try:
            snap = build_snapshot(hand, street, action_index)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc))
        return SnapshotResponse(street=street, action_index=action_index, **snap.to_payload())

    @app.get("/hands/{hand_index}/replay", response_model=ReplayView)
    def get_replay(hand_index: int):
        return _replayer(hand_index).view()

    @app.post("/hands/{hand_index}/replay/next", response_model=ReplayView)
    def replay_next(hand_index: int):
        rep = _replayer(hand_index)
        rep.step_forward()
        return rep.view()

    @app.post("/hands/{hand_index}/replay/prev", response_model=ReplayView)
    def replay_prev(hand_index: int):
        rep = _replayer(hand_index)
        rep.step_backward()
        return rep.view()

    @app.post("/hands/{hand_index}/replay/reset", response_model=ReplayView)
    def replay_reset(hand_index: int):
        rep = _replayer(hand_index)
        rep.reset()
        return rep.view()

    @app.get("/hands/{hand_index}/range", response_model=RangeResponse)
    def get_range(hand_index: int):
        rep = _replayer(hand_index)
        hand = rep.hand
        out = RangeResponse()
        spot = spot_for_next_actor(hand, rep.state.cursor, rep.snapshot)
        if spot is not None:
            out.position = spot.position
            out.depth_bb = spot.depth_bb
            out.path = resolver.resolve(hand, rep.state.cursor, rep.snapshot)
        opener = derive_open_rfi(hand)
        if opener is not None:
            out.open_position = opener.position
            out.open_depth_bb = opener.depth_bb
            out.open_path = resolver.path_for(opener)
        return out

    return app


app = create_app()
