class DungeonError(Exception):
    """Base exception for dungeon model and persistence failures."""


# ---------------- Decode -----------------------------------------------------
class DecodeError(DungeonError):
    """Raised when a byte sequence is not a valid dungeon file."""


class BadMagic(DecodeError):
    pass


class VersionMismatch(DecodeError):
    def __init__(self, found: int, expected: int):
        super().__init__(f"unsupported version {found} (expected {expected})")
        self.found = found
        self.expected = expected


class SizeMismatch(DecodeError):
    def __init__(self, declared: int | None, actual: int, detail: str | None = None):
        if detail is None:
            if declared is None:
                detail = f"header truncated at {actual} bytes"
            else:
                detail = f"declared size {declared} does not match actual size {actual}"
        super().__init__(detail)
        self.declared = declared
        self.actual = actual


class TruncatedRooms(DecodeError):
    pass


class InvalidRoom(DecodeError):
    def __init__(self, reason: str, index: int | None = None):
        prefix = f"room {index}: " if index is not None else ""
        super().__init__(prefix + reason)
        self.reason = reason
        self.index = index


class InvalidPosition(DecodeError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CorruptGrid(DecodeError):
    """Hardness bytes that break the immutable border."""


# ---------------- Mutation ---------------------------------------------------
class OutOfBounds(DungeonError):
    def __init__(self, x: int, y: int):
        super().__init__(f"coordinate {(x, y)} is outside the dungeon")
        self.x = x
        self.y = y


class Rejected(DungeonError):
    """An operation's precondition failed; the model was left unchanged."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotFound(DungeonError):
    def __init__(self, room_id):
        super().__init__(f"no room with id {room_id!r}")
        self.room_id = room_id


# ---------------- I/O --------------------------------------------------------
class DungeonIOError(DungeonError):
    def __init__(self, path, cause: OSError):
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


__all__ = [
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
]
