from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import random
from typing import Any

from seatmap.core.model.layout import parse_layout


logger = logging.getLogger(__name__)

SEAT_STATUSES = ("available", "reserved", "sold", "held")
PRICE_TIERS = (1, 2, 3)

# (id, label, origin x, origin y, rows, seats per row)
SECTIONS: tuple[tuple[str, str, float, float, int, int], ...] = (
    ("LOWER_A", "Lower Bowl A", 100, 200, 40, 50),
    ("LOWER_B", "Lower Bowl B", 100, 800, 40, 50),
    ("UPPER_A", "Upper Bowl A", 100, 100, 30, 60),
    ("UPPER_B", "Upper Bowl B", 100, 900, 30, 60),
    ("CLUB_A", "Club Level A", 200, 300, 20, 40),
    ("CLUB_B", "Club Level B", 200, 700, 20, 40),
    ("PREMIUM_A", "Premium Section A", 300, 400, 15, 30),
    ("PREMIUM_B", "Premium Section B", 300, 600, 15, 30),
)


def generate_venue(seed: int = 1, *, scale: float = 1.0) -> dict[str, Any]:
    """Stadium-sized layout document; ``scale`` shrinks or grows every section."""
    rng = random.Random(seed)
    sections: list[dict[str, Any]] = []
    total = 0
    for section_id, label, ox, oy, rows, per_row in SECTIONS:
        n_rows = max(1, int(rows * scale))
        n_seats = max(1, int(per_row * scale))
        section_rows = []
        for row_index in range(1, n_rows + 1):
            entities = []
            for col in range(1, n_seats + 1):
                entities.append(
                    {
                        "id": f"{section_id}-{row_index}-{col:02d}",
                        "column": col,
                        # odd rows are staggered half a seat
                        "x": col * 25 + (row_index % 2) * 12.5,
                        "y": row_index * 20,
                        "tier": rng.choice(PRICE_TIERS),
                        "status": rng.choice(SEAT_STATUSES),
                    }
                )
            total += len(entities)
            section_rows.append({"index": row_index, "entities": entities})
        sections.append(
            {
                "id": section_id,
                "label": label,
                "originOffset": {"x": ox, "y": oy, "scale": 1},
                "rows": section_rows,
            }
        )
    logger.info("generated %s seats in %s sections", total, len(sections))
    return {
        "id": "stadium-megadome",
        "label": f"MegaDome Stadium - {total} Seats",
        "canvasExtent": {"width": 2000, "height": 1500},
        "sections": sections,
    }


def main() -> int:
    ap = argparse.ArgumentParser(description="Write a large generated venue layout")
    ap.add_argument("--out", default="data/venues/large-venue.json")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--scale", type=float, default=1.0)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(message)s",
    )

    venue = generate_venue(args.seed, scale=args.scale)
    seats = parse_layout(venue).seat_count()
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(venue, indent=2), encoding="utf-8")
    print(f"wrote {out} seats={seats}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
