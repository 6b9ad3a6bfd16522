import json
import sys

from seatmap.app import generate_venue as gen
from seatmap.app import run_headless
from seatmap.core.model.dataset import build_dataset
from seatmap.core.model.layout import parse_layout


def test_full_scale_venue_parses() -> None:
    doc = gen.generate_venue(seed=3)
    layout = parse_layout(doc)
    assert layout.seat_count() == 10100
    assert doc["label"] == "MegaDome Stadium - 10100 Seats"
    assert len(layout.sections) == 8
    assert len(build_dataset(layout)) == 10100


def test_generation_is_seeded() -> None:
    assert gen.generate_venue(7, scale=0.2) == gen.generate_venue(7, scale=0.2)
    assert gen.generate_venue(7, scale=0.2) != gen.generate_venue(8, scale=0.2)


def test_rows_are_staggered() -> None:
    section = gen.generate_venue(scale=0.2)["sections"][0]
    first, second = section["rows"][0]["entities"][0], section["rows"][1]["entities"][0]
    assert first["x"] - second["x"] == 12.5
    assert first["id"] == "LOWER_A-1-01"


def test_main_writes_file(tmp_path, monkeypatch, capsys) -> None:
    out = tmp_path / "venues" / "big.json"
    monkeypatch.setattr(sys, "argv", ["generate_venue", "--out", str(out), "--scale", "0.2"])
    assert gen.main() == 0
    seats = parse_layout(json.loads(out.read_text(encoding="utf-8"))).seat_count()
    assert seats > 0
    assert f"seats={seats}" in capsys.readouterr().out


def test_resolve_layout_path(tmp_path) -> None:
    assert run_headless.resolve_layout_path("venue", tmp_path) == tmp_path / "data" / "venues" / "venue.json"
    assert run_headless.resolve_layout_path("maps/hall", tmp_path).as_posix() == "maps/hall.json"
    explicit = tmp_path / "x.json"
    assert run_headless.resolve_layout_path(str(explicit), tmp_path) == explicit


def test_headless_run_selects_adjacent(venue_path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["run_headless", "--layout", str(venue_path), "--adjacent", "2", "--heat-map"])
    assert run_headless.main() == 0
    out = capsys.readouterr().out
    assert "seats=36 renderer=naive" in out
    assert "visible=36" in out
    assert "selected=2/8 total=300" in out
    assert "ORCH-1-3 Orchestra row=1 col=3 price=150" in out


def test_headless_run_rejects_bad_layout(tmp_path, monkeypatch) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"id": "x"}), encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["run_headless", "--layout", str(bad)])
    assert run_headless.main() == 2
