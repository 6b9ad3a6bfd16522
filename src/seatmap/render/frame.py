from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Container, Iterable, Mapping, Protocol

from ..core.camera import Camera
from ..core.model.dataset import SeatDataset
from ..core.model.tiers import DEFAULT_PRICE_TIERS, PriceTier
from ..core.rules.colors import FOCUS_OUTLINE_COLOR, resolve_seat_color
from ..core.rules.culling import WorldRect, expanded_view_rect, visible_indices
from ..core.rules.lod import DEFAULT_SIZING, SeatGeometry, SizingRules, focus_outline_box, seat_geometry


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderSettings:
    sizing: SizingRules = DEFAULT_SIZING
    culling_buffer: float = 100.0
    naive_threshold: int = 1000
    price_tiers: Mapping[int, PriceTier] = field(default_factory=lambda: dict(DEFAULT_PRICE_TIERS))


@dataclass(frozen=True, slots=True)
class SeatBatch:
    color: str
    indices: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class FocusOutline:
    left: float
    top: float
    width: float
    height: float
    line_width: float
    color: str = FOCUS_OUTLINE_COLOR


@dataclass(frozen=True, slots=True)
class FramePlan:
    """Everything one tick draws, in world coordinates."""
    geometry: SeatGeometry | None
    batches: tuple[SeatBatch, ...] = ()
    view_rect: WorldRect | None = None
    focus_outline: FocusOutline | None = None
    skipped: bool = False

    @property
    def drawn_count(self) -> int:
        return sum(len(batch.indices) for batch in self.batches)

    def drawn_indices(self) -> list[int]:
        out: list[int] = []
        for batch in self.batches:
            out.extend(batch.indices)
        return out


SKIPPED_FRAME = FramePlan(geometry=None, skipped=True)


class SeatRenderer(Protocol):
    name: str

    def plan(
        self,
        dataset: SeatDataset,
        camera: Camera,
        selected_ids: Container[str],
        focused_id: str | None,
        heat_map: bool,
        surface_width: float,
        surface_height: float,
    ) -> FramePlan:
        ...


class _BaseRenderer:
    name = "base"

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings or RenderSettings()
        self._surface_missing = False

    def _surface_ok(self, surface_width: float, surface_height: float) -> bool:
        ok = surface_width > 0 and surface_height > 0
        if not ok and not self._surface_missing:
            logger.debug("draw surface unavailable (%sx%s), skipping frames", surface_width, surface_height)
        self._surface_missing = not ok
        return ok

    def _classify(
        self,
        dataset: SeatDataset,
        indices: Iterable[int],
        selected_ids: Container[str],
        focused_id: str | None,
        heat_map: bool,
    ) -> dict[str, list[int]]:
        by_color: dict[str, list[int]] = {}
        tiers = self.settings.price_tiers
        for idx in indices:
            record = dataset.records[idx]
            resolved = resolve_seat_color(
                record.seat.status,
                record.seat.tier,
                selected=record.id in selected_ids,
                focused=record.id == focused_id,
                heat_map=heat_map,
                tiers=tiers,
            )
            by_color.setdefault(resolved.color, []).append(idx)
        return by_color

    def _focus_outline(self, dataset: SeatDataset, idx: int, zoom: float) -> FocusOutline:
        record = dataset.records[idx]
        left, top, width, height = focus_outline_box(record.x, record.y, zoom, self.settings.sizing)
        return FocusOutline(
            left=left,
            top=top,
            width=width,
            height=height,
            line_width=max(2.0 / zoom, 1.0),
        )


class CulledBatchRenderer(_BaseRenderer):
    """Culls to the buffered viewport and batches survivors by color."""

    name = "culled"

    def plan(
        self,
        dataset: SeatDataset,
        camera: Camera,
        selected_ids: Container[str],
        focused_id: str | None,
        heat_map: bool,
        surface_width: float,
        surface_height: float,
    ) -> FramePlan:
        if not self._surface_ok(surface_width, surface_height):
            return SKIPPED_FRAME
        rect = expanded_view_rect(camera, surface_width, surface_height, self.settings.culling_buffer)
        visible = [int(i) for i in visible_indices(dataset, rect)]
        by_color = self._classify(dataset, visible, selected_ids, focused_id, heat_map)

        outline = None
        focus_idx = dataset.index_of(focused_id) if focused_id is not None else None
        if focus_idx is not None and rect.contains(dataset.records[focus_idx].x, dataset.records[focus_idx].y):
            outline = self._focus_outline(dataset, focus_idx, camera.zoom)

        return FramePlan(
            geometry=seat_geometry(camera.zoom, self.settings.sizing),
            batches=tuple(SeatBatch(color=color, indices=tuple(idx)) for color, idx in by_color.items()),
            view_rect=rect,
            focus_outline=outline,
        )


class NaiveRenderer(_BaseRenderer):
    """Draws every seat individually, without culling; meant for small layouts."""

    name = "naive"

    def plan(
        self,
        dataset: SeatDataset,
        camera: Camera,
        selected_ids: Container[str],
        focused_id: str | None,
        heat_map: bool,
        surface_width: float,
        surface_height: float,
    ) -> FramePlan:
        if not self._surface_ok(surface_width, surface_height):
            return SKIPPED_FRAME
        batches: list[SeatBatch] = []
        for idx in range(len(dataset)):
            for color, indices in self._classify(dataset, (idx,), selected_ids, focused_id, heat_map).items():
                batches.append(SeatBatch(color=color, indices=tuple(indices)))

        outline = None
        focus_idx = dataset.index_of(focused_id) if focused_id is not None else None
        if focus_idx is not None:
            outline = self._focus_outline(dataset, focus_idx, camera.zoom)

        return FramePlan(
            geometry=seat_geometry(camera.zoom, self.settings.sizing),
            batches=tuple(batches),
            focus_outline=outline,
        )


def choose_renderer(entity_count: int, settings: RenderSettings | None = None) -> SeatRenderer:
    settings = settings or RenderSettings()
    if entity_count <= settings.naive_threshold:
        return NaiveRenderer(settings)
    return CulledBatchRenderer(settings)
