from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .config import DUNGEON_HEIGHT, DUNGEON_WIDTH, MIN_ROOM_H, MIN_ROOM_W


@dataclass(frozen=True)
class Room:
    x: int
    y: int
    w: int
    h: int

    def cells(self) -> Iterator[Tuple[int, int]]:
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def contains(self, x: int, y: int) -> bool:
        """Inclusive of the far edge: ``x == self.x + self.w`` still matches.

        Kept for compatibility with saved-editor behaviour; use :meth:`covers`
        for the exact interior.
        """
        return self.x <= x <= self.x + self.w and self.y <= y <= self.y + self.h

    def covers(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    def padded_overlaps(self, other: "Room", pad: int = 1) -> bool:
        return (
            self.x - pad < other.x + other.w
            and self.x + self.w + pad > other.x
            and self.y - pad < other.y + other.h
            and self.y + self.h + pad > other.y
        )

    def to_record(self) -> bytes:
        # MSB first: x, y, width, height
        return bytes((self.x, self.y, self.w, self.h))


def validate_room_bounds(
    x: int,
    y: int,
    w: int,
    h: int,
    width: int = DUNGEON_WIDTH,
    height: int = DUNGEON_HEIGHT,
    min_w: int = MIN_ROOM_W,
    min_h: int = MIN_ROOM_H,
) -> Optional[str]:
    """Return a human readable reason the rectangle is not a legal room, or None."""
    if w < min_w:
        return f"width {w} below minimum {min_w}"
    if h < min_h:
        return f"height {h} below minimum {min_h}"
    if x < 1 or y < 1:
        return f"origin {(x, y)} lies on the border"
    if x + w > width - 1:
        return f"x + width = {x + w} exceeds {width - 1}"
    if y + h > height - 1:
        return f"y + height = {y + h} exceeds {height - 1}"
    return None


__all__ = ["Room", "validate_room_bounds"]
