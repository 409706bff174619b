"""Dungeon model (hand-edited level, fixed 80x21 grid)

Layout:
    * Outer ring (row 0, row H-1, column 0, column W-1) is WALL_IMMUTABLE with hardness 255
      and is never touched after initialization.
    * Every other cell starts as WALL with a random hardness in [1, 254].
    * Rooms are rectangles of FLOOR_ROOM (hardness 0) separated from each other by at
      least one non-room cell. Corridors are single FLOOR_HALL cells (hardness 0).

Invariants enforced by code & tests (see ``check_invariants``):
    * hardness 0 <=> walkable tag, hardness 255 <=> WALL_IMMUTABLE, [1, 254] => WALL.
    * Room interiors never intersect, padding ring included.
    * Failed mutations leave the model untouched.

Public contract consumed elsewhere:
    Dungeon(DungeonConfig(...), rng=random.Random(...)) OR Dungeon(seed=..)
    Attributes: grid[x][y] (terrain tag), hardness[x][y], config, seed, cursor
    Queries: terrain_at, hardness_at, rooms, room, room_ids, room_at, player_start
    Mutators: reset, carve_corridor, restore_wall, place_room, remove_room,
              set_player_start, set_cursor, move_cursor
"""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .errors import NotFound, OutOfBounds, Rejected
from .rooms import Room, validate_room_bounds
from .tiles import (
    FLOOR_HALL,
    FLOOR_ROOM,
    HARDNESS_CARVED,
    HARDNESS_IMMUTABLE,
    HARDNESS_MAX_WALL,
    HARDNESS_MIN_WALL,
    WALKABLE,
    WALL,
    WALL_IMMUTABLE,
)

log = get_logger("dgen.dungeon")

RoomId = int


class Dungeon:
    def __init__(
        self,
        config: DungeonConfig | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
    ):
        if config is None:
            config = DungeonConfig(seed=seed)
        elif seed is not None:
            config.seed = seed
        self.config = config
        if rng is None:
            if self.config.seed is None:
                self.config.seed = random.randint(0, 2**31 - 1)
            rng = random.Random(self.config.seed)
        # Local RNG so hardness rolls are reproducible and independent of global random usage
        self._rng = rng
        self.seed = self.config.seed
        self.width = self.config.width
        self.height = self.config.height
        # 2D grids (column-major: grid[x][y])
        self.grid: List[List[str]] = [[WALL for _ in range(self.height)] for _ in range(self.width)]
        self.hardness: List[List[int]] = [[HARDNESS_MIN_WALL for _ in range(self.height)] for _ in range(self.width)]
        self._rooms: Dict[RoomId, Room] = {}
        self._next_room_id: RoomId = 0
        self._player: Tuple[int, int] = (0, 0)
        self.cursor: Tuple[int, int] = (self.config.cursor_x, self.config.cursor_y)
        self.reset()

    @classmethod
    def restore(
        cls,
        grid: List[List[str]],
        hardness: List[List[int]],
        rooms: Iterable[Room],
        player: Tuple[int, int] = (0, 0),
        *,
        config: DungeonConfig | None = None,
        rng: random.Random | None = None,
    ) -> "Dungeon":
        """Assemble a model from already validated state (used by the codec).

        Room ids are reassigned densely in the given order.
        """
        d = cls(config, rng=rng)
        d.grid = grid
        d.hardness = hardness
        d._rooms = {}
        for i, r in enumerate(rooms):
            d._rooms[i] = r
        d._next_room_id = len(d._rooms)
        d._player = player
        if player != (0, 0):
            d.cursor = player
        return d

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------
    def reset(self):
        """Immutable border, randomized interior walls, no rooms, no player start."""
        x_max = self.width - 1
        y_max = self.height - 1
        for x in range(self.width):
            for y in range(self.height):
                if x in (0, x_max) or y in (0, y_max):
                    self.grid[x][y] = WALL_IMMUTABLE
                    self.hardness[x][y] = HARDNESS_IMMUTABLE
                else:
                    self.grid[x][y] = WALL
                    self.hardness[x][y] = self._roll_hardness()
        self._rooms.clear()
        self._next_room_id = 0
        self._player = (0, 0)
        self.cursor = (self.config.cursor_x, self.config.cursor_y)

    def _roll_hardness(self) -> int:
        return self._rng.randint(HARDNESS_MIN_WALL, HARDNESS_MAX_WALL)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _require_in_bounds(self, x: int, y: int):
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y)

    def is_border(self, x: int, y: int) -> bool:
        return x in (0, self.width - 1) or y in (0, self.height - 1)

    def terrain_at(self, x: int, y: int) -> str:
        self._require_in_bounds(x, y)
        return self.grid[x][y]

    def hardness_at(self, x: int, y: int) -> int:
        self._require_in_bounds(x, y)
        return self.hardness[x][y]

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.grid[x][y] in WALKABLE

    @property
    def rooms(self) -> List[Room]:
        """Live rooms in creation order."""
        return list(self._rooms.values())

    def room_ids(self) -> List[RoomId]:
        return list(self._rooms.keys())

    def room(self, room_id: RoomId) -> Room:
        try:
            return self._rooms[room_id]
        except KeyError:
            raise NotFound(room_id) from None

    def room_at(self, x: int, y: int) -> Optional[RoomId]:
        self._require_in_bounds(x, y)
        for room_id, r in self._rooms.items():
            if r.contains(x, y):
                return room_id
        return None

    @property
    def player_start(self) -> Optional[Tuple[int, int]]:
        """``None`` while unset (stored as (0, 0))."""
        if self._player == (0, 0):
            return None
        return self._player

    # ------------------------------------------------------------------
    # Corridors & walls
    # ------------------------------------------------------------------
    def carve_corridor(self, x: int, y: int):
        self._require_in_bounds(x, y)
        if self.is_border(x, y):
            raise Rejected(f"cannot carve the immutable border at {(x, y)}")
        if self.config.strict_corridors and self.grid[x][y] == FLOOR_ROOM:
            raise Rejected(f"cell {(x, y)} belongs to a room")
        self.grid[x][y] = FLOOR_HALL
        self.hardness[x][y] = HARDNESS_CARVED

    def restore_wall(self, x: int, y: int):
        self._require_in_bounds(x, y)
        if self.is_border(x, y):
            raise Rejected(f"cannot modify the immutable border at {(x, y)}")
        if self.grid[x][y] == FLOOR_ROOM:
            raise Rejected(f"cell {(x, y)} belongs to a room; remove the room instead")
        self.grid[x][y] = WALL
        self.hardness[x][y] = self._roll_hardness()

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------
    def _bounds_reason(self, x: int, y: int, w: int, h: int) -> Optional[str]:
        return validate_room_bounds(
            x,
            y,
            w,
            h,
            width=self.width,
            height=self.height,
            min_w=self.config.min_room_w,
            min_h=self.config.min_room_h,
        )

    def _placement_reason(self, x: int, y: int, w: int, h: int) -> Optional[str]:
        reason = self._bounds_reason(x, y, w, h)
        if reason:
            return reason
        # Padding ring included; bounds check above keeps it on the grid
        for ix in range(x - 1, x + w + 1):
            for iy in range(y - 1, y + h + 1):
                if self.grid[ix][iy] == FLOOR_ROOM:
                    return f"cell {(ix, iy)} within the padded area is already room floor"
        candidate = Room(x, y, w, h)
        for room_id, r in self._rooms.items():
            if candidate.padded_overlaps(r):
                return f"too close to room {room_id}"
        return None

    def can_place_room(self, x: int, y: int, w: int, h: int) -> bool:
        return self._placement_reason(x, y, w, h) is None

    def place_room(self, x: int, y: int, w: int, h: int) -> RoomId:
        self._require_in_bounds(x, y)
        reason = self._placement_reason(x, y, w, h)
        if reason:
            log.debug(event="room_rejected", x=x, y=y, w=w, h=h, reason=reason)
            raise Rejected(reason)
        r = Room(x, y, w, h)
        for ix, iy in r.cells():
            self.grid[ix][iy] = FLOOR_ROOM
            self.hardness[ix][iy] = HARDNESS_CARVED
        room_id = self._next_room_id
        self._next_room_id += 1
        self._rooms[room_id] = r
        log.debug(event="room_placed", room_id=room_id, x=x, y=y, w=w, h=h)
        return room_id

    def remove_room(self, room_id: RoomId) -> Room:
        r = self._rooms.pop(room_id, None)
        if r is None:
            raise NotFound(room_id)
        for ix, iy in r.cells():
            self.grid[ix][iy] = WALL
            self.hardness[ix][iy] = self._roll_hardness()
        log.debug(event="room_removed", room_id=room_id)
        return r

    # ------------------------------------------------------------------
    # Player start & cursor
    # ------------------------------------------------------------------
    def set_player_start(self, x: int, y: int):
        self._require_in_bounds(x, y)
        if self.grid[x][y] not in WALKABLE:
            raise Rejected(f"player start {(x, y)} is not on a walkable cell")
        self._player = (x, y)

    def clear_player_start(self):
        self._player = (0, 0)

    def set_cursor(self, x: int, y: int):
        self._require_in_bounds(x, y)
        if self.is_border(x, y):
            raise Rejected(f"cursor cannot rest on the border at {(x, y)}")
        self.cursor = (x, y)

    def move_cursor(self, dx: int, dy: int) -> bool:
        """Step the cursor; refuses (returns False) when landing on or beyond the border."""
        cx, cy = self.cursor
        nx, ny = cx + dx, cy + dy
        if not self.in_bounds(nx, ny) or self.is_border(nx, ny):
            return False
        self.cursor = (nx, ny)
        return True

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def counts(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        for column in self.grid:
            for tag in column:
                out[tag] = out.get(tag, 0) + 1
        return out

    def check_invariants(self) -> List[str]:
        """Return a list of human readable structural violations (empty when sound)."""
        problems: List[str] = []
        for x in range(self.width):
            for y in range(self.height):
                tag = self.grid[x][y]
                hard = self.hardness[x][y]
                if self.is_border(x, y):
                    if tag != WALL_IMMUTABLE or hard != HARDNESS_IMMUTABLE:
                        problems.append(f"border cell {(x, y)} is {tag}/{hard}")
                    continue
                if hard == HARDNESS_CARVED:
                    if tag not in WALKABLE:
                        problems.append(f"carved cell {(x, y)} tagged {tag}")
                elif hard == HARDNESS_IMMUTABLE:
                    if tag != WALL_IMMUTABLE:
                        problems.append(f"hardness 255 at {(x, y)} tagged {tag}")
                elif tag != WALL:
                    problems.append(f"hardness {hard} at {(x, y)} tagged {tag}")
        entries = list(self._rooms.items())
        for i, (room_id, r) in enumerate(entries):
            reason = self._bounds_reason(r.x, r.y, r.w, r.h)
            if reason:
                problems.append(f"room {room_id} out of bounds: {reason}")
                continue
            stray = [(ix, iy) for ix, iy in r.cells() if self.grid[ix][iy] != FLOOR_ROOM]
            if stray:
                problems.append(f"room {room_id} interior not room floor at {stray[0]}")
            for other_id, other in entries[i + 1:]:
                if r.padded_overlaps(other):
                    problems.append(f"rooms {room_id} and {other_id} touch or overlap")
        return problems

    def __repr__(self):
        return f"<Dungeon {self.width}x{self.height} rooms={len(self._rooms)} seed={self.seed}>"


__all__ = ["Dungeon", "RoomId"]
