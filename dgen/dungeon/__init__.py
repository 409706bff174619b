"""Public dungeon package interface.

Model, room descriptor, terrain constants, errors and the binary codec.
"""

from . import codec
from .codec import decode, encode, load, save
from .config import DUNGEON_HEIGHT, DUNGEON_WIDTH, DungeonConfig
from .dungeon import Dungeon
from .errors import (
    BadMagic,
    CorruptGrid,
    DecodeError,
    DungeonError,
    DungeonIOError,
    InvalidPosition,
    InvalidRoom,
    NotFound,
    OutOfBounds,
    Rejected,
    SizeMismatch,
    TruncatedRooms,
    VersionMismatch,
)
from .rooms import Room, validate_room_bounds
from .tiles import (
    DEBUG,
    FLOOR,
    FLOOR_HALL,
    FLOOR_ROOM,
    STAIRS,
    STAIRS_DOWN,
    STAIRS_UP,
    UNKNOWN,
    WALKABLE,
    WALL,
    WALL_IMMUTABLE,
)  # noqa: F401

__all__ = [
    "Dungeon",
    "DungeonConfig",
    "DUNGEON_WIDTH",
    "DUNGEON_HEIGHT",
    "Room",
    "validate_room_bounds",
    "codec",
    "encode",
    "decode",
    "save",
    "load",
    "DungeonError",
    "DecodeError",
    "BadMagic",
    "VersionMismatch",
    "SizeMismatch",
    "TruncatedRooms",
    "InvalidRoom",
    "InvalidPosition",
    "CorruptGrid",
    "OutOfBounds",
    "Rejected",
    "NotFound",
    "DungeonIOError",
    "DEBUG",
    "UNKNOWN",
    "WALL",
    "WALL_IMMUTABLE",
    "FLOOR",
    "FLOOR_ROOM",
    "FLOOR_HALL",
    "STAIRS",
    "STAIRS_UP",
    "STAIRS_DOWN",
    "WALKABLE",
]
