"""dgen CLI entry point.

Batch editor for dungeon files: each subcommand loads the dungeon, applies one
operation and saves it back. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import sys
from textwrap import dedent

from colorama import Fore, Style, just_fix_windows_console
from dotenv import load_dotenv

from dgen import __version__
from dgen.dungeon import FLOOR_HALL, FLOOR_ROOM, Dungeon, DungeonConfig, DungeonError, codec
from dgen.logging_utils import log

just_fix_windows_console()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except (AttributeError, ValueError):  # pragma: no cover - closed or replaced stdout
    _COLOR_ENABLED = False


def _paint(color: str, text: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def _ok(text: str):
    print(f"{_paint(Fore.GREEN, '[OK]')} {text}")


def _info(text: str):
    print(f"{_paint(Fore.CYAN, '[INFO]')} {text}")


def _error(text: str):
    print(f"{_paint(Fore.RED, '[ERROR]')} {text}", file=sys.stderr)


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    dgen dungeon editor

    Create and edit 80x21 dungeon files from the command line. Configuration can
    be provided via CLI flags or environment variables. If both are present, CLI
    flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          DGEN_DUNGEON_PATH      Dungeon file to operate on (default: dungeon.rlg)
          DGEN_SEED              Seed for wall hardness rolls
          DGEN_STRICT_CORRIDORS  Refuse to carve corridors through rooms (1/0)
          DGEN_LOG_LEVEL         debug, info, warn or error (default: warn)
          DGEN_LOG_JSON          Emit log lines as JSON objects

        Examples:
          # Start a fresh dungeon in the current directory
          python run.py new

          # Add a 6x4 room and mark the player start inside it
          python run.py room-add 10 5 6 4
          python run.py start 12 6

          # Carve a corridor cell and inspect the result
          python run.py carve 17 6
          python run.py info
        """
    )

    parser = argparse.ArgumentParser(
        prog="dgen",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"dgen dungeon editor {__version__}",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="path",
        default=None,
        help="Dungeon file (default: env DGEN_DUNGEON_PATH or dungeon.rlg)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for wall hardness rolls (default: env DGEN_SEED or random)",
    )
    parser.add_argument(
        "--strict",
        dest="strict_corridors",
        action="store_true",
        default=None,
        help="Refuse to carve corridors over room floor",
    )

    subparsers = parser.add_subparsers(dest="command")

    new_parser = subparsers.add_parser("new", help="Create a freshly initialized dungeon file")
    new_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    subparsers.add_parser("info", help="Print dimensions, player start and rooms")
    subparsers.add_parser("check", help="Verify structural invariants of a dungeon file")

    carve_parser = subparsers.add_parser("carve", help="Carve a corridor cell")
    carve_parser.add_argument("x", type=int)
    carve_parser.add_argument("y", type=int)

    wall_parser = subparsers.add_parser("wall", help="Restore a wall on a corridor cell")
    wall_parser.add_argument("x", type=int)
    wall_parser.add_argument("y", type=int)

    room_add = subparsers.add_parser("room-add", help="Place a room (X Y WIDTH HEIGHT)")
    room_add.add_argument("x", type=int)
    room_add.add_argument("y", type=int)
    room_add.add_argument("w", type=int)
    room_add.add_argument("h", type=int)

    room_remove = subparsers.add_parser("room-remove", help="Remove a room by id (see `info`)")
    room_remove.add_argument("room_id", type=int)

    room_at = subparsers.add_parser("room-at", help="Report which room contains X Y")
    room_at.add_argument("x", type=int)
    room_at.add_argument("y", type=int)

    start_parser = subparsers.add_parser("start", help="Set the player start cell")
    start_parser.add_argument("x", type=int)
    start_parser.add_argument("y", type=int)

    # If no subcommand provided, default to info
    if len(argv) == 0:
        argv = ["info"]

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "info"
    return args


def _describe(d: Dungeon):
    counts = d.counts()
    start = d.player_start
    print(f"Dungeon {d.width}x{d.height} ({d.config.path})")
    print(f"  Player start: {start if start else 'unset'}")
    print(f"  Cursor:       {d.cursor}")
    print(f"  Room floor:   {counts.get(FLOOR_ROOM, 0)} cells")
    print(f"  Hall floor:   {counts.get(FLOOR_HALL, 0)} cells")
    print(f"  Rooms:        {len(d.rooms)}")
    for room_id, r in zip(d.room_ids(), d.rooms):
        print(f"    [{room_id}] x={r.x} y={r.y} w={r.w} h={r.h}")


def _run_command(args: argparse.Namespace, config: DungeonConfig) -> int:
    command = args.command
    if command == "new":
        if os.path.exists(config.path) and not args.force:
            _error(f"{config.path} already exists (use --force to overwrite)")
            return 1
        d = Dungeon(config)
        codec.save(d, config.path)
        _ok(f"Created {config.path} (seed {d.seed})")
        return 0

    d = codec.load(config.path, config=config)
    if command == "info":
        _describe(d)
        return 0
    if command == "check":
        problems = d.check_invariants()
        for p in problems:
            _error(p)
        if problems:
            return 1
        _ok(f"{config.path}: no violations")
        return 0
    if command == "room-at":
        room_id = d.room_at(args.x, args.y)
        if room_id is None:
            _info(f"No room at {(args.x, args.y)}")
        else:
            r = d.room(room_id)
            _info(f"Room {room_id} at {(args.x, args.y)}: x={r.x} y={r.y} w={r.w} h={r.h}")
        return 0

    if command == "carve":
        d.carve_corridor(args.x, args.y)
        message = f"Carved corridor at {(args.x, args.y)}"
    elif command == "wall":
        d.restore_wall(args.x, args.y)
        message = f"Restored wall at {(args.x, args.y)}"
    elif command == "room-add":
        room_id = d.place_room(args.x, args.y, args.w, args.h)
        message = f"Placed room {room_id} at {(args.x, args.y)} size {args.w}x{args.h}"
    elif command == "room-remove":
        d.remove_room(args.room_id)
        message = f"Removed room {args.room_id}"
    elif command == "start":
        d.set_player_start(args.x, args.y)
        message = f"Player start set to {(args.x, args.y)}"
    else:  # pragma: no cover - argparse restricts choices
        _error(f"Unknown command {command}")
        return 1
    codec.save(d, config.path)
    _ok(message)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file, override=True)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    try:
        config = DungeonConfig.from_env(
            path=args.path,
            seed=args.seed,
            strict_corridors=args.strict_corridors,
        )
    except ValueError as exc:
        _error(f"Invalid configuration: {exc}")
        return 1

    log.info(event="startup", command=args.command, path=config.path, strict=config.strict_corridors)

    try:
        return _run_command(args, config)
    except DungeonError as exc:
        _error(f"{type(exc).__name__}: {exc}")
        return 1


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
