import json

import pytest

from dgen.dungeon import Dungeon, DungeonConfig, codec
from dgen.logging_utils import get_logger


def test_key_value_format(monkeypatch, capsys):
    monkeypatch.setenv("DGEN_LOG_LEVEL", "debug")
    get_logger("dgen.test").info(event="hello", path="a b", rooms=3)
    out = capsys.readouterr().out.strip()
    assert out.startswith("level=info ts=")
    assert "event=hello" in out
    assert "path=a_b" in out
    assert "rooms=3" in out
    assert "logger=dgen.test" in out


def test_json_mode(monkeypatch, capsys):
    monkeypatch.setenv("DGEN_LOG_LEVEL", "info")
    monkeypatch.setenv("DGEN_LOG_JSON", "1")
    get_logger("dgen.test").warn(event="careful", skipped=None)
    rec = json.loads(capsys.readouterr().out)
    assert rec["event"] == "careful"
    assert rec["level"] == "warn"
    assert "skipped" not in rec


def test_level_threshold_and_stderr(monkeypatch, capsys):
    monkeypatch.setenv("DGEN_LOG_LEVEL", "error")
    log = get_logger("dgen.test")
    log.info(event="quiet")
    log.error(event="loud")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=loud" in captured.err


def test_logger_cache():
    assert get_logger("dgen.same") is get_logger("dgen.same")


def test_codec_logs_saves(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv("DGEN_LOG_LEVEL", "info")
    codec.save(Dungeon(seed=2), tmp_path / "x.rlg")
    assert "event=dungeon_saved" in capsys.readouterr().out


def test_decode_rejection_logged(capsys):
    with pytest.raises(Exception):
        codec.decode(b"garbage")
    assert "event=decode_rejected" in capsys.readouterr().out


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("DGEN_SEED", "42")
    monkeypatch.setenv("DGEN_DUNGEON_PATH", "levels/one.rlg")
    cfg = DungeonConfig.from_env()
    assert cfg.seed == 42
    assert cfg.path == "levels/one.rlg"
    assert cfg.strict_corridors is False
    # None overrides fall through to the environment
    assert DungeonConfig.from_env(seed=None).seed == 42
    assert DungeonConfig.from_env(seed=7).seed == 7


def test_config_defaults():
    cfg = DungeonConfig()
    assert (cfg.width, cfg.height) == (80, 21)
    assert cfg.path == "dungeon.rlg"
    assert (cfg.cursor_x, cfg.cursor_y) == (40, 10)


@pytest.mark.parametrize(
    "kwargs",
    [{"width": 75}, {"height": 75}, {"cursor_x": 0}, {"cursor_y": 20}, {"min_room_w": 2}, {"min_room_h": 1}],
)
def test_config_rejects_unsupported_geometry(kwargs):
    with pytest.raises(ValueError):
        DungeonConfig(**kwargs)


def test_raised_room_minimum_still_loads():
    d = Dungeon(DungeonConfig(seed=4, min_room_w=5, min_room_h=3))
    assert not d.can_place_room(10, 5, 4, 3)
    d.place_room(10, 5, 5, 3)
    assert codec.decode(codec.encode(d)).rooms == d.rooms
