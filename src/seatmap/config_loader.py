from __future__ import annotations

import copy
from dataclasses import dataclass
import hashlib
import json
from pathlib import Path
from typing import Any

from seatmap.core.model.tiers import PriceTier, parse_price_tiers
from seatmap.core.rules.colors import hex_to_rgb
from seatmap.core.rules.lod import SizingRules


_SUPPORTED_SCHEMA_VERSIONS = {1}
_ALLOWED_KEYS: dict[str, Any] = {
    "schema_version": None,
    "selection": {
        "max_selectable": None,
    },
    "viewport": {
        "min_zoom": None,
        "max_zoom": None,
        "zoom_step": None,
        "zoom_step_large": None,
    },
    "render": {
        "seat_size": None,
        "min_seat_size": None,
        "ultra_shrink": None,
        "lod_low_zoom": None,
        "lod_ultra_zoom": None,
        "culling_buffer": None,
        "naive_threshold": None,
    },
    # tier keys are free-form, validated in _validate_price_tiers
    "price_tiers": None,
}

DEFAULT_CONFIG: dict[str, Any] = {
    "schema_version": 1,
    "selection": {
        "max_selectable": 8,
    },
    "viewport": {
        "min_zoom": 0.5,
        "max_zoom": 3.0,
        "zoom_step": 0.1,
        "zoom_step_large": 0.2,
    },
    "render": {
        "seat_size": 12,
        "min_seat_size": 6,
        "ultra_shrink": 0.7,
        "lod_low_zoom": 0.8,
        "lod_ultra_zoom": 0.5,
        "culling_buffer": 100,
        "naive_threshold": 1000,
    },
    "price_tiers": {
        "1": {"price": 150, "label": "Premium", "color": "#10b981"},
        "2": {"price": 100, "label": "Standard", "color": "#3b82f6"},
        "3": {"price": 75, "label": "Economy", "color": "#8b5cf6"},
    },
}


@dataclass(frozen=True, slots=True)
class SelectionConfig:
    max_selectable: int


@dataclass(frozen=True, slots=True)
class ViewportConfig:
    min_zoom: float
    max_zoom: float
    zoom_step: float
    zoom_step_large: float


@dataclass(frozen=True, slots=True)
class RenderConfig:
    sizing: SizingRules
    culling_buffer: float
    naive_threshold: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    selection: SelectionConfig
    viewport: ViewportConfig
    render: RenderConfig
    price_tiers: dict[int, PriceTier]


def load_json_config(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"config root must be a JSON object: {p}")
    return payload


def load_config(path: str | Path | None = None, overrides_list: list[str] | None = None) -> AppConfig:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None:
        cfg = deep_merge(cfg, load_json_config(path))
    cfg = apply_overrides(cfg, overrides_list)
    _validate_config(cfg)
    return config_from_dict(cfg)


def default_config() -> AppConfig:
    return config_from_dict(copy.deepcopy(DEFAULT_CONFIG))


def config_from_dict(cfg: dict[str, Any]) -> AppConfig:
    sel = cfg["selection"]
    view = cfg["viewport"]
    render = cfg["render"]
    return AppConfig(
        selection=SelectionConfig(max_selectable=int(sel["max_selectable"])),
        viewport=ViewportConfig(
            min_zoom=float(view["min_zoom"]),
            max_zoom=float(view["max_zoom"]),
            zoom_step=float(view["zoom_step"]),
            zoom_step_large=float(view["zoom_step_large"]),
        ),
        render=RenderConfig(
            sizing=SizingRules(
                seat_size=float(render["seat_size"]),
                min_seat_size=float(render["min_seat_size"]),
                ultra_shrink=float(render["ultra_shrink"]),
                lod_low_zoom=float(render["lod_low_zoom"]),
                lod_ultra_zoom=float(render["lod_ultra_zoom"]),
            ),
            culling_buffer=float(render["culling_buffer"]),
            naive_threshold=int(render["naive_threshold"]),
        ),
        price_tiers=parse_price_tiers(cfg["price_tiers"]),
    )


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in out and isinstance(out[key], dict) and isinstance(value, dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def apply_overrides(cfg: dict[str, Any], overrides_list: list[str] | None) -> dict[str, Any]:
    if not overrides_list:
        return cfg

    out = cfg
    for item in overrides_list:
        if "=" not in item:
            raise ValueError(f"override must contain '=': {item}")
        path_str, value_str = item.split("=", 1)
        if not path_str:
            raise ValueError(f"override path empty: {item}")
        keys = path_str.split(".")
        if any(not key for key in keys):
            raise ValueError(f"override path has empty segment: {item}")
        value = _cast_scalar(value_str)

        cursor = out
        for key in keys[:-1]:
            if key not in cursor or not isinstance(cursor[key], dict):
                cursor[key] = {}
            cursor = cursor[key]
        cursor[keys[-1]] = value
    return out


def dump_effective_config(run_dir: str | Path, cfg: dict[str, Any]) -> str:
    run_path = Path(run_dir)
    run_path.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(cfg, sort_keys=True, ensure_ascii=False, indent=2).encode("utf-8")
    sha = hashlib.sha256(payload).hexdigest()

    eff_path = run_path / "effective_config.json"
    with eff_path.open("w", encoding="utf-8") as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2, sort_keys=True)

    (run_path / "effective_config.sha256").write_text(sha + "\n", encoding="utf-8")
    return sha


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    sizing = config.render.sizing
    return {
        "schema_version": 1,
        "selection": {"max_selectable": config.selection.max_selectable},
        "viewport": {
            "min_zoom": config.viewport.min_zoom,
            "max_zoom": config.viewport.max_zoom,
            "zoom_step": config.viewport.zoom_step,
            "zoom_step_large": config.viewport.zoom_step_large,
        },
        "render": {
            "seat_size": sizing.seat_size,
            "min_seat_size": sizing.min_seat_size,
            "ultra_shrink": sizing.ultra_shrink,
            "lod_low_zoom": sizing.lod_low_zoom,
            "lod_ultra_zoom": sizing.lod_ultra_zoom,
            "culling_buffer": config.render.culling_buffer,
            "naive_threshold": config.render.naive_threshold,
        },
        "price_tiers": {
            str(tier): {"price": entry.price, "label": entry.label, "color": entry.color}
            for tier, entry in sorted(config.price_tiers.items())
        },
    }


def _cast_scalar(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_dict(parent: dict[str, Any], key: str) -> dict[str, Any]:
    if key not in parent:
        raise ValueError(f"missing '{key}' section in config")
    value = parent[key]
    if not isinstance(value, dict):
        raise ValueError(f"config '{key}' must be a JSON object")
    return value


def _require_number(parent: dict[str, Any], key: str, *, section: str) -> float:
    if key not in parent:
        raise ValueError(f"missing '{section}.{key}' in config")
    value = parent[key]
    if not _is_number(value):
        raise ValueError(f"config '{section}.{key}' must be a number")
    return float(value)


def _validate_config(cfg: dict[str, Any]) -> None:
    unknown = _find_unknown_keys(cfg, _ALLOWED_KEYS, path="")
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ValueError(f"unknown config keys: {unknown_str}")

    schema_version = cfg.get("schema_version")
    if schema_version not in _SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported schema_version: {schema_version}")

    sel_cfg = _require_dict(cfg, "selection")
    if _require_number(sel_cfg, "max_selectable", section="selection") < 1:
        raise ValueError("selection.max_selectable must be >= 1")

    view_cfg = _require_dict(cfg, "viewport")
    min_zoom = _require_number(view_cfg, "min_zoom", section="viewport")
    max_zoom = _require_number(view_cfg, "max_zoom", section="viewport")
    if min_zoom <= 0:
        raise ValueError("viewport.min_zoom must be > 0")
    if min_zoom > max_zoom:
        raise ValueError("viewport.min_zoom must be <= viewport.max_zoom")
    for key in ("zoom_step", "zoom_step_large"):
        if _require_number(view_cfg, key, section="viewport") <= 0:
            raise ValueError(f"viewport.{key} must be > 0")

    render_cfg = _require_dict(cfg, "render")
    for key in ("seat_size", "min_seat_size", "ultra_shrink", "lod_low_zoom", "lod_ultra_zoom"):
        if _require_number(render_cfg, key, section="render") <= 0:
            raise ValueError(f"render.{key} must be > 0")
    if _require_number(render_cfg, "culling_buffer", section="render") < 0:
        raise ValueError("render.culling_buffer must be >= 0")
    if _require_number(render_cfg, "naive_threshold", section="render") < 0:
        raise ValueError("render.naive_threshold must be >= 0")
    if render_cfg["lod_ultra_zoom"] > render_cfg["lod_low_zoom"]:
        raise ValueError("render.lod_ultra_zoom must be <= render.lod_low_zoom")

    _validate_price_tiers(_require_dict(cfg, "price_tiers"))


def _validate_price_tiers(tiers: dict[str, Any]) -> None:
    for key, value in tiers.items():
        try:
            tier = int(key)
        except ValueError:
            raise ValueError(f"price_tiers key must be an integer: {key!r}") from None
        if tier < 1:
            raise ValueError(f"price_tiers key must be >= 1: {key!r}")
        if not isinstance(value, dict):
            raise ValueError(f"price_tiers.{key} must be a JSON object")
        price = _require_number(value, "price", section=f"price_tiers.{key}")
        if price < 0:
            raise ValueError(f"price_tiers.{key}.price must be >= 0")
        color = value.get("color")
        if not isinstance(color, str) or not color.startswith("#"):
            raise ValueError(f"price_tiers.{key}.color must be a '#rgb' or '#rrggbb' string")
        try:
            hex_to_rgb(color)
        except ValueError:
            raise ValueError(f"price_tiers.{key}.color must be a '#rgb' or '#rrggbb' string: {color!r}") from None


def _find_unknown_keys(value: Any, allowed: Any, *, path: str) -> list[str]:
    if not isinstance(value, dict) or not isinstance(allowed, dict):
        return []
    unknown: list[str] = []
    for key, sub_value in value.items():
        if key not in allowed:
            unknown.append(f"{path}{key}" if path else key)
            continue
        sub_allowed = allowed[key]
        if isinstance(sub_value, dict) and isinstance(sub_allowed, dict):
            child_path = f"{path}{key}."
            unknown.extend(_find_unknown_keys(sub_value, sub_allowed, path=child_path))
    return unknown
