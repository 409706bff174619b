import os
from dataclasses import dataclass
from typing import Optional

# Fixed by the on-disk format; a file never carries its own dimensions.
DUNGEON_WIDTH = 80
DUNGEON_HEIGHT = 21
DEFAULT_PATH = "dungeon.rlg"
DEFAULT_CURSOR = (40, 10)
MIN_ROOM_W = 3
MIN_ROOM_H = 2

_TRUTHY = ("1", "true", "TRUE", "yes", "on")


@dataclass
class DungeonConfig:
    width: int = DUNGEON_WIDTH
    height: int = DUNGEON_HEIGHT
    seed: Optional[int] = None
    path: str = DEFAULT_PATH
    strict_corridors: bool = False
    cursor_x: int = DEFAULT_CURSOR[0]
    cursor_y: int = DEFAULT_CURSOR[1]
    min_room_w: int = MIN_ROOM_W
    min_room_h: int = MIN_ROOM_H

    def __post_init__(self):
        if (self.width, self.height) != (DUNGEON_WIDTH, DUNGEON_HEIGHT):
            raise ValueError(
                f"dungeon dimensions are fixed at {DUNGEON_WIDTH}x{DUNGEON_HEIGHT}, got {self.width}x{self.height}"
            )
        if not (0 < self.cursor_x < self.width - 1 and 0 < self.cursor_y < self.height - 1):
            raise ValueError(f"default cursor {(self.cursor_x, self.cursor_y)} must be an interior cell")
        if self.min_room_w < MIN_ROOM_W or self.min_room_h < MIN_ROOM_H:
            raise ValueError(
                f"minimum room size {self.min_room_w}x{self.min_room_h} is below the file format floor {MIN_ROOM_W}x{MIN_ROOM_H}"
            )

    @classmethod
    def from_env(cls, **overrides) -> "DungeonConfig":
        """Build a config from ``DGEN_*`` environment variables.

        Explicit keyword overrides win over the environment; ``None`` overrides
        are ignored so CLI flags that were not given fall through.
        """
        values = {}
        seed_raw = os.getenv("DGEN_SEED")
        if seed_raw not in (None, ""):
            values["seed"] = int(seed_raw)
        path_raw = os.getenv("DGEN_DUNGEON_PATH")
        if path_raw:
            values["path"] = path_raw
        strict_raw = os.getenv("DGEN_STRICT_CORRIDORS")
        if strict_raw is not None:
            values["strict_corridors"] = strict_raw in _TRUTHY
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = [
    "DungeonConfig",
    "DUNGEON_WIDTH",
    "DUNGEON_HEIGHT",
    "DEFAULT_PATH",
    "DEFAULT_CURSOR",
    "MIN_ROOM_W",
    "MIN_ROOM_H",
]
