from __future__ import annotations

import argparse
import logging
from pathlib import Path

from seatmap.config_loader import load_config
from seatmap.core.engine import SeatingEngine
from seatmap.core.model.layout import LayoutError


LAYOUTS_DIRNAME = Path("data/venues")


def resolve_layout_path(layout_arg: str, root: Path | None = None) -> Path:
    p = Path(layout_arg)
    if p.suffix:
        if root is not None and not p.is_absolute() and not p.exists():
            return root / p
        return p
    base = (root / LAYOUTS_DIRNAME) if root is not None else LAYOUTS_DIRNAME
    if p.parent == Path("."):
        return base / f"{p.name}.json"
    return p.with_suffix(".json")


def main() -> int:
    ap = argparse.ArgumentParser(description="Load a layout and plan one frame without a window")
    ap.add_argument("--layout", required=True, help="Layout name (e.g. venue) or path to json")
    ap.add_argument("--config", default=None)
    ap.add_argument("--set", action="append", default=None, dest="overrides")
    ap.add_argument("--width", type=int, default=1280)
    ap.add_argument("--height", type=int, default=800)
    ap.add_argument("--zoom", type=float, default=1.0)
    ap.add_argument("--adjacent", type=int, default=0, help="Select the first run of N adjacent seats")
    ap.add_argument("--heat-map", action="store_true")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(message)s",
    )

    root = Path(__file__).resolve().parents[3]
    engine = SeatingEngine(load_config(args.config, args.overrides))
    try:
        engine.load_layout_file(resolve_layout_path(args.layout, root))
    except LayoutError:
        return 2

    engine.act("ZOOM_BY", {"delta": args.zoom - engine.camera.zoom})
    if args.heat_map:
        engine.act("TOGGLE_HEAT_MAP")
    if args.adjacent:
        engine.act("SELECT_ADJACENT", {"count": args.adjacent})

    plan = engine.plan_frame(args.width, args.height)
    obs = engine.observe()
    print(
        f"layout={obs['layout']} seats={obs['seats']} renderer={obs['renderer']} "
        f"zoom={obs['zoom']:.2f} lod={plan.geometry.tier if plan.geometry else '-'}"
    )
    print(f"visible={plan.drawn_count} batches={len(plan.batches)} skipped={plan.skipped}")
    for batch in plan.batches[:10]:
        print(f"  {batch.color}: {len(batch.indices)}")
    print(f"selected={len(obs['selected'])}/{obs['max_selectable']} total={obs['total']}")
    for entry in obs["selected"]:
        print(f"  {entry['id']} {entry['section']} row={entry['row']} col={entry['column']} price={entry['price']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
