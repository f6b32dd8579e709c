"""Typed environment readers. ``.env`` is loaded once, on import."""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

TRUTHY = {"y", "yes", "t", "true", "on", "1"}


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or "").strip()


def env_bool(name: str, default: bool = False) -> bool:
    return env_str(name, str(default)).lower() in TRUTHY


def _test_override(name: str) -> Optional[str]:
    """With TESTING=true, ``TEST_<NAME>`` wins over ``<NAME>``."""
    if not env_bool("TESTING", False):
        return None
    return env_str(f"TEST_{name}", "") or None


def env_int(name: str, default: int = 0) -> int:
    raw = _test_override(name) or env_str(name, str(default))
    return int(raw)


def env_float(name: str, default: float = 0.0) -> float:
    raw = _test_override(name) or env_str(name, str(default))
    return float(raw)
