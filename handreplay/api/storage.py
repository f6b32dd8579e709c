import threading
from typing import Dict, List, Optional

from handreplay.core.models import Hand
from handreplay.replay.replayer import Replayer


class InMemoryHandStore:
    """The most recently parsed hand list plus one replayer per opened hand.

    Loading a new list replaces the old one wholesale; replayers for the old
    hands are discarded with it.
    """

    def __init__(self) -> None:
        self._hands: List[Hand] = []
        self._replayers: Dict[int, Replayer] = {}
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def replace(self, hands: List[Hand]) -> int:
        with self._lock:
            self._hands = list(hands)
            self._replayers = {}
            self._generation += 1
            return self._generation

    def list(self) -> List[Hand]:
        with self._lock:
            return list(self._hands)

    def get(self, index: int) -> Optional[Hand]:
        with self._lock:
            if 0 <= index < len(self._hands):
                return self._hands[index]
            return None

    def replayer(self, index: int) -> Optional[Replayer]:
        with self._lock:
            if not 0 <= index < len(self._hands):
                return None
            rep = self._replayers.get(index)
            if rep is None:
                rep = Replayer(self._hands[index])
                self._replayers[index] = rep
            return rep
