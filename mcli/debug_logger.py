#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Structured debug logger for mcli.

Writes one JSON object per line to <state_dir>/debug.log. Levels:
    0 - disabled
    1 - info: fetch results and errors
    2 - debug: fetch starts and view transitions

The level comes from MCLI_DEBUG, then the "debugLevel" setting. The
--debug command line flag forces level 2.
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_int_setting
from .paths import PathResolver

LEVEL_OFF = 0
LEVEL_INFO = 1
LEVEL_DEBUG = 2


def _resolve_level() -> int:
    raw = os.environ.get("MCLI_DEBUG")
    if raw is not None:
        if raw.lower() in ("true", "yes"):
            return LEVEL_DEBUG
        try:
            return max(LEVEL_OFF, min(LEVEL_DEBUG, int(raw)))
        except ValueError:
            return LEVEL_OFF
    return max(LEVEL_OFF, min(LEVEL_DEBUG, get_int_setting("debugLevel", LEVEL_OFF)))


class DebugLogger:
    """Append-only JSON-lines logger.

    Logging must never break the caller, so write failures are dropped.
    """

    def __init__(self, log_path: Optional[Path] = None, level: Optional[int] = None):
        self.log_path = log_path or PathResolver.debug_log()
        self.level = _resolve_level() if level is None else level

    def _write(self, event: Dict[str, Any]) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "pid": os.getpid(),
        }
        record.update(event)
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a") as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError:
            pass

    def fetch_start(self, op: str, **details: Any) -> None:
        if self.level >= LEVEL_DEBUG:
            self._write({"event": "fetch_start", "level": "debug", "op": op, **details})

    def fetch_result(self, op: str, count: int, duration_ms: float) -> None:
        if self.level >= LEVEL_INFO:
            self._write({
                "event": "fetch_result",
                "level": "info",
                "op": op,
                "count": count,
                "duration_ms": round(duration_ms, 1),
            })

    def error(self, op: str, err: BaseException) -> None:
        if self.level >= LEVEL_INFO:
            self._write({
                "event": "error",
                "level": "error",
                "op": op,
                "err": str(err),
                "err_type": type(err).__name__,
            })

    def fetch_error(self, op: str, err: BaseException) -> None:
        self.error(op, err)

    def view_change(self, old: str, new: str, **details: Any) -> None:
        if self.level >= LEVEL_DEBUG:
            self._write({"event": "view_change", "level": "debug", "from": old, "to": new, **details})


_logger: Optional[DebugLogger] = None


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = DebugLogger()
    return _logger


def set_level(level: int) -> None:
    """Override the level of the shared logger (used by --debug)."""
    get_logger().level = level


def reset_logger() -> None:
    """Drop the cached logger so the next get_logger() re-reads the environment."""
    global _logger
    _logger = None
