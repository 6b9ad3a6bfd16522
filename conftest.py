from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parent
SRC_PATH = ROOT / "src"
if SRC_PATH.is_dir():
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture
def venue_path() -> Path:
    return ROOT / "data" / "venues" / "venue.json"


@pytest.fixture
def config_path() -> Path:
    return ROOT / "data" / "config" / "default.json"
