# Terrain tag constants centralized for modular imports
DEBUG = "G"
UNKNOWN = "U"
WALL = "W"
WALL_IMMUTABLE = "I"  # border ring, hardness always 255
FLOOR = "F"
FLOOR_ROOM = "R"
FLOOR_HALL = "T"
STAIRS = "S"
STAIRS_UP = "<"
STAIRS_DOWN = ">"

# Declaration order mirrors the terrain enumeration used by the editor
TERRAIN_TYPES = (
    DEBUG,
    UNKNOWN,
    WALL,
    WALL_IMMUTABLE,
    FLOOR,
    FLOOR_ROOM,
    FLOOR_HALL,
    STAIRS,
    STAIRS_UP,
    STAIRS_DOWN,
)

WALL_TYPES = frozenset({WALL, WALL_IMMUTABLE})
WALKABLE = frozenset({FLOOR, FLOOR_ROOM, FLOOR_HALL, STAIRS, STAIRS_UP, STAIRS_DOWN})

HARDNESS_CARVED = 0
HARDNESS_IMMUTABLE = 255
HARDNESS_MIN_WALL = 1
HARDNESS_MAX_WALL = 254

__all__ = [
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
    "TERRAIN_TYPES",
    "WALL_TYPES",
    "WALKABLE",
    "HARDNESS_CARVED",
    "HARDNESS_IMMUTABLE",
    "HARDNESS_MIN_WALL",
    "HARDNESS_MAX_WALL",
]
