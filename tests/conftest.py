import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from dgen.dungeon import Dungeon, DungeonConfig  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep DGEN_* variables from the developer shell out of tests."""
    for key in list(os.environ):
        if key.startswith("DGEN_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def dungeon(rng):
    return Dungeon(DungeonConfig(seed=1234), rng=rng)


@pytest.fixture()
def strict_dungeon():
    return Dungeon(DungeonConfig(seed=99, strict_corridors=True))
