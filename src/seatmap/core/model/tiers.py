from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class PriceTier:
    tier: int
    price: float
    label: str
    color: str


DEFAULT_PRICE_TIERS: dict[int, PriceTier] = {
    1: PriceTier(tier=1, price=150, label="Premium", color="#10b981"),
    2: PriceTier(tier=2, price=100, label="Standard", color="#3b82f6"),
    3: PriceTier(tier=3, price=75, label="Economy", color="#8b5cf6"),
}


def get_price_tier(tiers: Mapping[int, PriceTier], tier: int) -> PriceTier:
    try:
        return tiers[tier]
    except KeyError as exc:
        raise KeyError(f"Unknown price tier: {tier!r}") from exc


def price_for_tier(tiers: Mapping[int, PriceTier], tier: int) -> float:
    entry = tiers.get(tier)
    if entry is None:
        return 0
    return entry.price


def parse_price_tiers(raw: Mapping[str, Mapping]) -> dict[int, PriceTier]:
    tiers: dict[int, PriceTier] = {}
    for key, value in raw.items():
        tier = int(key)
        tiers[tier] = PriceTier(
            tier=tier,
            price=value["price"],
            label=str(value.get("label", f"Tier {tier}")),
            color=str(value["color"]),
        )
    return tiers


def describe_price_tier(tiers: Mapping[int, PriceTier], tier: int) -> str:
    try:
        entry = get_price_tier(tiers, tier)
    except KeyError:
        return f"tier {tier}"
    return f"{entry.label} ${entry.price:g}"
