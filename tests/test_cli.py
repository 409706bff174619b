import importlib
import sys

import pytest

from dgen import __version__
from dgen.dungeon import FLOOR_HALL, Room, codec

# Import run.py as a module and drive parse_args + main directly against temp files.


@pytest.fixture()
def run_module():
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


@pytest.fixture()
def level(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path / "level.rlg"


def _main(run_module, level, *argv):
    return run_module.main(["-f", str(level), *argv])


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert __version__ in out
    assert "dgen dungeon editor" in out


def test_default_command_is_info(run_module):
    assert run_module.parse_args([]).command == "info"
    assert run_module.parse_args(["-f", "x.rlg"]).command == "info"


def test_new_creates_file(run_module, level, capsys):
    assert _main(run_module, level, "--seed", "5", "new") == 0
    assert level.stat().st_size == 1702
    assert "Created" in capsys.readouterr().out
    # Refuses to clobber without --force
    assert _main(run_module, level, "new") == 1
    assert "already exists" in capsys.readouterr().err
    assert _main(run_module, level, "new", "--force") == 0


def test_seed_flag_is_reproducible(run_module, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    run_module.main(["-f", "a.rlg", "--seed", "11", "new"])
    run_module.main(["-f", "b.rlg", "--seed", "11", "new"])
    assert (tmp_path / "a.rlg").read_bytes() == (tmp_path / "b.rlg").read_bytes()


def test_edit_session(run_module, level, capsys):
    _main(run_module, level, "new")
    assert _main(run_module, level, "room-add", "10", "5", "3", "2") == 0
    assert _main(run_module, level, "room-add", "20", "5", "4", "3") == 0
    assert _main(run_module, level, "carve", "15", "6") == 0
    assert _main(run_module, level, "start", "11", "6") == 0
    assert _main(run_module, level, "room-remove", "1") == 0
    d = codec.load(level)
    assert d.rooms == [Room(10, 5, 3, 2)]
    assert d.grid[15][6] == FLOOR_HALL
    assert d.player_start == (11, 6)
    capsys.readouterr()
    assert _main(run_module, level, "info") == 0
    out = capsys.readouterr().out
    assert "[0] x=10 y=5 w=3 h=2" in out
    assert "Player start: (11, 6)" in out
    assert _main(run_module, level, "wall", "15", "6") == 0
    assert codec.load(level).grid[15][6] != FLOOR_HALL


def test_room_at(run_module, level, capsys):
    _main(run_module, level, "new")
    _main(run_module, level, "room-add", "10", "5", "3", "2")
    capsys.readouterr()
    assert _main(run_module, level, "room-at", "11", "6") == 0
    assert "Room 0" in capsys.readouterr().out
    assert _main(run_module, level, "room-at", "50", "6") == 0
    assert "No room" in capsys.readouterr().out


def test_rejected_edit_does_not_save(run_module, level, capsys):
    _main(run_module, level, "new")
    before = level.read_bytes()
    assert _main(run_module, level, "start", "20", "5") == 1
    assert "Rejected" in capsys.readouterr().err
    assert _main(run_module, level, "room-remove", "4") == 1
    assert "NotFound" in capsys.readouterr().err
    assert _main(run_module, level, "carve", "99", "5") == 1
    assert "OutOfBounds" in capsys.readouterr().err
    assert level.read_bytes() == before


def test_strict_flag(run_module, level, capsys):
    _main(run_module, level, "new")
    _main(run_module, level, "room-add", "10", "5", "3", "2")
    assert _main(run_module, level, "--strict", "carve", "11", "6") == 1
    assert _main(run_module, level, "carve", "11", "6") == 0


def test_check_command(run_module, level, capsys):
    _main(run_module, level, "new")
    assert _main(run_module, level, "check") == 0
    assert "no violations" in capsys.readouterr().out


def test_missing_or_corrupt_file(run_module, level, capsys):
    assert _main(run_module, level, "info") == 1
    assert "DungeonIOError" in capsys.readouterr().err
    level.write_bytes(b"not a dungeon")
    assert _main(run_module, level, "info") == 1
    assert "BadMagic" in capsys.readouterr().err


def test_env_file_argument(run_module, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "from_env.rlg"
    env_file = tmp_path / "custom.env"
    env_file.write_text(f"DGEN_DUNGEON_PATH={target}\nDGEN_SEED=8\n")
    # Registered with monkeypatch so the values loaded from the file are undone afterwards
    monkeypatch.setenv("DGEN_DUNGEON_PATH", "placeholder.rlg")
    monkeypatch.setenv("DGEN_SEED", "1")
    assert run_module.main(["--env-file", str(env_file), "new"]) == 0
    assert target.exists()


def test_cli_flag_beats_env(run_module, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DGEN_DUNGEON_PATH", str(tmp_path / "env.rlg"))
    assert run_module.main(["-f", str(tmp_path / "flag.rlg"), "new"]) == 0
    assert (tmp_path / "flag.rlg").exists()
    assert not (tmp_path / "env.rlg").exists()


def test_bad_env_seed(run_module, level, monkeypatch, capsys):
    monkeypatch.setenv("DGEN_SEED", "not-a-number")
    assert _main(run_module, level, "new") == 1
    assert "Invalid configuration" in capsys.readouterr().err
