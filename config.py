#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via ``TRAFFIC_VIEW_*`` environment variables
(see :meth:`ViewerSettings.from_env`). This module is a thin,
import-safe leaf — it never imports from other project packages.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

log = logging.getLogger(__name__)

# ── Backend endpoints ────────────────────────────────────────────────────────
DEFAULT_TOPOLOGY_URL: str = "http://localhost:8082/api/map/layout"
DEFAULT_FEED_URL: str = "ws://localhost:8082/ws/simulation"
DEFAULT_HTTP_TIMEOUT_S: float = 10.0

# ── State sync defaults ──────────────────────────────────────────────────────
DEFAULT_INFERENCE_MODE: str = "observed"
INFERENCE_MODES = ("observed", "evidence")
DEFAULT_BASELINE_REFRESH_S: float = 0.0   # 0 disables the refresher
DEFAULT_DROP_RATE: float = 0.0

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_WIDTH: int = 1000
WINDOW_HEIGHT: int = 700
TARGET_FPS: int = 60

# ── Demo backend ─────────────────────────────────────────────────────────────
DEMO_HOST: str = "127.0.0.1"
DEMO_PORT: int = 8082

ENV_PREFIX = "TRAFFIC_VIEW_"

T = TypeVar("T")


def _read(
    env: Mapping[str, str], name: str, cast: Callable[[str], T], default: T,
) -> T:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        log.warning("invalid %s%s=%r, using %r", ENV_PREFIX, name, raw, default)
        return default


def _inference_mode(raw: str) -> str:
    mode = raw.lower()
    if mode not in INFERENCE_MODES:
        raise ValueError(f"expected one of {INFERENCE_MODES}")
    return mode


@dataclass(frozen=True)
class ViewerSettings:
    """Resolved runtime configuration for one viewer session."""

    topology_url: str = DEFAULT_TOPOLOGY_URL
    feed_url: str = DEFAULT_FEED_URL
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    inference_mode: str = DEFAULT_INFERENCE_MODE
    baseline_refresh_s: float = DEFAULT_BASELINE_REFRESH_S
    drop_rate: float = DEFAULT_DROP_RATE
    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    fps: int = TARGET_FPS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ViewerSettings":
        env = os.environ if env is None else env
        return cls(
            topology_url=_read(env, "TOPOLOGY_URL", str, DEFAULT_TOPOLOGY_URL),
            feed_url=_read(env, "FEED_URL", str, DEFAULT_FEED_URL),
            http_timeout_s=_read(env, "HTTP_TIMEOUT_S", float, DEFAULT_HTTP_TIMEOUT_S),
            inference_mode=_read(env, "INFERENCE_MODE", _inference_mode, DEFAULT_INFERENCE_MODE),
            baseline_refresh_s=_read(
                env, "BASELINE_REFRESH_S", float, DEFAULT_BASELINE_REFRESH_S,
            ),
            drop_rate=min(1.0, max(0.0, _read(env, "DROP_RATE", float, DEFAULT_DROP_RATE))),
            width=_read(env, "WIDTH", int, WINDOW_WIDTH),
            height=_read(env, "HEIGHT", int, WINDOW_HEIGHT),
            fps=_read(env, "FPS", int, TARGET_FPS),
            log_level=_read(env, "LOG_LEVEL", str.upper, "INFO"),
        )

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO
