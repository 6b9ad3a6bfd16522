from __future__ import annotations

import argparse
import logging
from pathlib import Path

from seatmap.app.run_headless import resolve_layout_path
from seatmap.config_loader import load_config
from seatmap.gui.pyglet_app import run


def main() -> int:
    ap = argparse.ArgumentParser(description="Interactive seat map viewer")
    ap.add_argument("--layout", default="venue", help="Layout name (e.g. venue, large-venue) or path to json")
    ap.add_argument("--config", default=None, help="JSON config merged over the defaults")
    ap.add_argument("--set", action="append", default=None, dest="overrides", help="Override, e.g. selection.max_selectable=4")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(message)s",
    )

    root = Path(__file__).resolve().parents[3]
    config = load_config(args.config, args.overrides)
    run(resolve_layout_path(args.layout, root), config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
