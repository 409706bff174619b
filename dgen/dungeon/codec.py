"""Binary persistence for :class:`Dungeon`.

File layout (all integers big-endian):

    offset  size     field
    0       12       magic ``DGEN-DUNGEON``
    12      4        version (only ``0`` is understood)
    16      4        total file size in bytes
    20      1        player start x (0 with y=0 means unset)
    21      1        player start y
    22      W*H      hardness bytes, row-major (y outer, x inner)
    22+W*H  4*n      rooms: x, y, width, height (one byte each), creation order

Terrain tags are not stored. On load they are derived from hardness
(0 -> hall floor, 255 -> immutable wall, else wall) and room interiors are then
stamped as room floor.

``decode`` validates the whole input before a model exists, so a failed load
never yields or mutates a dungeon. ``save`` encodes in memory and atomically
replaces the target file.
"""

from __future__ import annotations

import os
import random
import stat
import struct
import tempfile
from typing import List, Tuple

from ..logging_utils import get_logger
from .config import DUNGEON_HEIGHT, DUNGEON_WIDTH, DungeonConfig
from .dungeon import Dungeon
from .errors import (
    BadMagic,
    CorruptGrid,
    DecodeError,
    DungeonIOError,
    InvalidPosition,
    InvalidRoom,
    SizeMismatch,
    TruncatedRooms,
    VersionMismatch,
)
from .rooms import Room, validate_room_bounds
from .tiles import FLOOR_HALL, FLOOR_ROOM, HARDNESS_CARVED, HARDNESS_IMMUTABLE, WALL, WALL_IMMUTABLE

log = get_logger("dgen.codec")

MAGIC = b"DGEN-DUNGEON"
VERSION = 0
HEADER = struct.Struct(">12sIIBB")
HEADER_SIZE = HEADER.size  # 22
GRID_SIZE = DUNGEON_WIDTH * DUNGEON_HEIGHT
ROOM_RECORD_SIZE = 4
FIXED_SIZE = HEADER_SIZE + GRID_SIZE  # 1702

_VERSION_OFFSET = len(MAGIC)
_SIZE_OFFSET = _VERSION_OFFSET + 4


def encoded_size(num_rooms: int) -> int:
    return FIXED_SIZE + ROOM_RECORD_SIZE * num_rooms


def encode(dungeon: Dungeon) -> bytes:
    rooms = dungeon.rooms
    total = encoded_size(len(rooms))
    px, py = dungeon.player_start or (0, 0)
    buf = bytearray(HEADER.pack(MAGIC, VERSION, total, px, py))
    for y in range(dungeon.height):
        for x in range(dungeon.width):
            buf.append(dungeon.hardness[x][y])
    for r in rooms:
        buf += r.to_record()
    return bytes(buf)


def _check_header(data: bytes) -> Tuple[int, int]:
    if len(data) < len(MAGIC) or data[: len(MAGIC)] != MAGIC:
        raise BadMagic("not a dungeon file (magic mismatch)")
    if len(data) < _SIZE_OFFSET:
        raise SizeMismatch(None, len(data))
    (version,) = struct.unpack_from(">I", data, _VERSION_OFFSET)
    if version != VERSION:
        raise VersionMismatch(version, VERSION)
    if len(data) < HEADER_SIZE:
        raise SizeMismatch(None, len(data))
    _, _, total, px, py = HEADER.unpack_from(data, 0)
    if total != len(data):
        raise SizeMismatch(total, len(data))
    if total < FIXED_SIZE:
        raise SizeMismatch(total, len(data), detail=f"shorter than the fixed {FIXED_SIZE}-byte layout")
    return px, py


def _read_player(px: int, py: int) -> Tuple[int, int]:
    if px == 0 or py == 0:
        return (0, 0)
    if not (0 < px < DUNGEON_WIDTH - 1 and 0 < py < DUNGEON_HEIGHT - 1):
        raise InvalidPosition(f"player start {(px, py)} lies outside the playable interior")
    return (px, py)


def _read_grid(data: bytes) -> Tuple[List[List[str]], List[List[int]]]:
    grid = [[WALL] * DUNGEON_HEIGHT for _ in range(DUNGEON_WIDTH)]
    hardness = [[0] * DUNGEON_HEIGHT for _ in range(DUNGEON_WIDTH)]
    offset = HEADER_SIZE
    for y in range(DUNGEON_HEIGHT):
        for x in range(DUNGEON_WIDTH):
            value = data[offset]
            offset += 1
            hardness[x][y] = value
            if value == HARDNESS_CARVED:
                grid[x][y] = FLOOR_HALL
            elif value == HARDNESS_IMMUTABLE:
                grid[x][y] = WALL_IMMUTABLE
            else:
                grid[x][y] = WALL
    return grid, hardness


def _check_border(hardness: List[List[int]]):
    x_max, y_max = DUNGEON_WIDTH - 1, DUNGEON_HEIGHT - 1
    for x in range(DUNGEON_WIDTH):
        for y in (0, y_max):
            if hardness[x][y] != HARDNESS_IMMUTABLE:
                raise CorruptGrid(f"border cell {(x, y)} has hardness {hardness[x][y]}")
    for y in range(DUNGEON_HEIGHT):
        for x in (0, x_max):
            if hardness[x][y] != HARDNESS_IMMUTABLE:
                raise CorruptGrid(f"border cell {(x, y)} has hardness {hardness[x][y]}")


def _read_rooms(data: bytes) -> List[Room]:
    remainder = len(data) - FIXED_SIZE
    if remainder % ROOM_RECORD_SIZE:
        raise TruncatedRooms(f"{remainder} trailing bytes is not a whole number of room records")
    rooms: List[Room] = []
    for index in range(remainder // ROOM_RECORD_SIZE):
        start = FIXED_SIZE + index * ROOM_RECORD_SIZE
        x, y, w, h = data[start : start + ROOM_RECORD_SIZE]
        reason = validate_room_bounds(x, y, w, h)
        if reason:
            raise InvalidRoom(reason, index=index)
        r = Room(x, y, w, h)
        for other_index, other in enumerate(rooms):
            if r.padded_overlaps(other):
                raise InvalidRoom(f"touches or overlaps room {other_index}", index=index)
        rooms.append(r)
    return rooms


def decode(data: bytes, *, config: DungeonConfig | None = None, rng: random.Random | None = None) -> Dungeon:
    """Parse ``data`` into a new :class:`Dungeon`; raises a ``DecodeError`` subclass on corrupt input."""
    data = bytes(data)
    try:
        px, py = _check_header(data)
        player = _read_player(px, py)
        grid, hardness = _read_grid(data)
        _check_border(hardness)
        rooms = _read_rooms(data)
    except DecodeError as exc:
        log.warn(event="decode_rejected", error=type(exc).__name__, detail=str(exc), size=len(data))
        raise
    for r in rooms:
        for ix, iy in r.cells():
            grid[ix][iy] = FLOOR_ROOM
            hardness[ix][iy] = HARDNESS_CARVED
    return Dungeon.restore(grid, hardness, rooms, player, config=config, rng=rng)


# ------------------------------------------------------------------
# File helpers
# ------------------------------------------------------------------
def _target_mode(target: str) -> int:
    """Permission bits the saved file should carry.

    An existing file keeps its mode; a new one gets the usual 0o666 minus umask
    instead of the private mode temporary files are created with.
    """
    try:
        return stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(dungeon: Dungeon, path: str | os.PathLike | None = None) -> str:
    """Write ``dungeon`` to ``path`` (default: the dungeon's configured path).

    The full payload is built first and written to a temporary sibling which
    then replaces the target, so an interrupted save leaves the old file intact.
    """
    target = os.fspath(path if path is not None else dungeon.config.path)
    payload = encode(dungeon)
    directory = os.path.dirname(os.path.abspath(target))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile("wb", dir=directory, prefix=".dgen-", delete=False) as fh:
            tmp_path = fh.name
            fh.write(payload)
        os.chmod(tmp_path, _target_mode(target))
        os.replace(tmp_path, target)
    except OSError as exc:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        log.error(event="dungeon_save_failed", path=target, error=str(exc))
        raise DungeonIOError(target, exc) from exc
    log.info(event="dungeon_saved", path=target, rooms=len(dungeon.rooms), size=len(payload))
    return target


def load(
    path: str | os.PathLike | None = None,
    *,
    config: DungeonConfig | None = None,
    rng: random.Random | None = None,
) -> Dungeon:
    if path is None:
        path = config.path if config is not None else DungeonConfig().path
    target = os.fspath(path)
    try:
        with open(target, "rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise DungeonIOError(target, exc) from exc
    dungeon = decode(data, config=config, rng=rng)
    if config is None:
        dungeon.config.path = target
    log.info(event="dungeon_loaded", path=target, rooms=len(dungeon.rooms), size=len(data))
    return dungeon


__all__ = [
    "MAGIC",
    "VERSION",
    "HEADER_SIZE",
    "FIXED_SIZE",
    "ROOM_RECORD_SIZE",
    "encoded_size",
    "encode",
    "decode",
    "save",
    "load",
]
