"""dgen: hand-built dungeon levels with a compact binary save format."""

__version__ = "0.2.0"
