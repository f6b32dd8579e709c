"""
Background parsing.

Large histories are parsed on a worker thread so an interactive caller stays
responsive. A request is one-shot: text in, the full list of hands out. A newer
request supersedes older ones; the older parse still finishes, but its result
is no longer delivered to the callback.
"""

from __future__ import annotations

import itertools
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

import bittensor as bt

from handreplay.core.models import Hand
from handreplay.parser.hand_parser import parse_hands

HandsCallback = Callable[[List[Hand]], None]


class ParseWorker:
    def __init__(self, on_result: Optional[HandsCallback] = None) -> None:
        self.on_result = on_result
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="handreplay-parse")
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    def submit(self, text: str) -> "Future[List[Hand]]":
        with self._lock:
            request_id = next(self._counter)
            self._latest = request_id
        future = self._executor.submit(parse_hands, text)
        future.add_done_callback(lambda f: self._deliver(request_id, f))
        return future

    def is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest

    def _deliver(self, request_id: int, future: "Future[List[Hand]]") -> None:
        if not self.is_current(request_id):
            bt.logging.debug(f"Dropping superseded parse result #{request_id}")
            return
        exc = future.exception()
        if exc is not None:
            bt.logging.error(f"Parse request #{request_id} failed: {exc}")
            return
        hands = future.result()
        if not hands:
            bt.logging.warning("No hands found. Is this the correct hand-history format?")
        else:
            bt.logging.info(f"Parsed {len(hands)} hands (request #{request_id})")
        if self.on_result is not None:
            self.on_result(hands)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ParseWorker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
