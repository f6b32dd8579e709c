from __future__ import annotations

from dataclasses import dataclass
from typing import List

from handreplay.ranges import DEFAULT_RANGE_BASE
from handreplay.utils.env import env_bool, env_float, env_int, env_str


@dataclass(frozen=True)
class ReplayerEnvConfig:
    autoplay_interval_ms: int
    range_base: str
    range_probe: bool
    probe_timeout_s: float
    api_host: str
    api_port: int
    cors_origins: List[str]

    @property
    def autoplay_interval_s(self) -> float:
        return self.autoplay_interval_ms / 1000.0


def _die(msg: str) -> None:
    raise SystemExit(f"[handreplay] {msg}")


def _read_int(name: str, default: int) -> int:
    try:
        return env_int(name, default)
    except ValueError:
        _die(f"{name} must be an integer, got {env_str(name)!r}.")


def _read_float(name: str, default: float) -> float:
    try:
        return env_float(name, default)
    except ValueError:
        _die(f"{name} must be a number, got {env_str(name)!r}.")


def load_replayer_env() -> ReplayerEnvConfig:
    """
    Load replayer settings from env/.env, rejecting values that cannot work.
    """
    interval_ms = _read_int("HANDREPLAY_AUTOPLAY_INTERVAL_MS", 800)
    if interval_ms <= 0:
        _die(f"HANDREPLAY_AUTOPLAY_INTERVAL_MS must be > 0 (got {interval_ms}).")

    probe_timeout_s = _read_float("HANDREPLAY_PROBE_TIMEOUT_S", 2.0)
    if probe_timeout_s <= 0:
        _die(f"HANDREPLAY_PROBE_TIMEOUT_S must be > 0 (got {probe_timeout_s}).")

    api_port = _read_int("HANDREPLAY_API_PORT", 8000)
    if not 1 <= api_port <= 65535:
        _die(f"HANDREPLAY_API_PORT out of range: {api_port}.")

    origins_raw = env_str("HANDREPLAY_CORS_ORIGINS", "*") or "*"
    if origins_raw == "*":
        cors_origins = ["*"]
    else:
        cors_origins = [x.strip() for x in origins_raw.split(",") if x.strip()]

    return ReplayerEnvConfig(
        autoplay_interval_ms=interval_ms,
        range_base=env_str("HANDREPLAY_RANGE_BASE", DEFAULT_RANGE_BASE) or DEFAULT_RANGE_BASE,
        range_probe=env_bool("HANDREPLAY_RANGE_PROBE", False),
        probe_timeout_s=probe_timeout_s,
        api_host=env_str("HANDREPLAY_API_HOST", "127.0.0.1") or "127.0.0.1",
        api_port=api_port,
        cors_origins=cors_origins,
    )
