"""Structured log lines for the dungeon editor.

Each record is one line: ``level=... ts=... logger=...`` followed by the
caller's fields, or a compact JSON object when ``DGEN_LOG_JSON`` is truthy.
Fields whose value is ``None`` are dropped. Text values have spaces turned into
underscores so a line splits cleanly on whitespace.

``DGEN_LOG_LEVEL`` (debug, info, warn, error) is consulted at emit time, not at
import, so a test can switch it with monkeypatch.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
DEFAULT_LEVEL = "warn"
_TRUTHY = ("1", "true", "TRUE", "yes", "on")


def current_level() -> int:
    name = os.getenv("DGEN_LOG_LEVEL", DEFAULT_LEVEL).lower()
    return LEVELS.get(name, LEVELS[DEFAULT_LEVEL])


def json_mode() -> bool:
    return os.getenv("DGEN_LOG_JSON", "0") in _TRUTHY


def _as_text(value) -> str:
    if isinstance(value, (int, float)):
        return str(value)
    return str(value).replace(" ", "_")


def _render(level: str, fields: dict) -> str:
    stamp = int(time.time())
    kept = {k: v for k, v in fields.items() if v is not None}
    if json_mode():
        record = dict(kept, level=level, ts=stamp)
        try:
            return json.dumps(record, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": stamp, "error": "json_encode_failed"})
    head = [f"level={level}", f"ts={stamp}"]
    return " ".join(head + [f"{k}={_as_text(v)}" for k, v in kept.items()])


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "dgen"

    def _emit(self, level: str, fields: dict):
        if LEVELS[level] < current_level():
            return
        fields.setdefault("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(_render(level, fields), file=stream)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)

    def error(self, **fields):
        self._emit("error", fields)


_LOGGERS: dict[str, _Logger] = {}


def get_logger(name: str) -> _Logger:
    """Return the shared logger for ``name``, creating it on first use."""
    return _LOGGERS.setdefault(name, _Logger(name))


log = get_logger("dgen")
