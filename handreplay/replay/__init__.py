from handreplay.replay.cursor import AwardPhase, Cursor, ReplayState, step_backward, step_forward
from handreplay.replay.snapshot import Snapshot, SnapshotTable, build_snapshot

__all__ = [
    "AwardPhase",
    "Cursor",
    "ReplayState",
    "Snapshot",
    "SnapshotTable",
    "build_snapshot",
    "step_backward",
    "step_forward",
]
