"""Embeddable map view: shapes, zoom/pan operations and the render pass."""
from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pygame

from map_canvas import MapCanvas, draw_crosshair
from map_config import MapConfig
from map_coordinates import CoordinateMapper
from map_geometry import Rect, Vector
from map_hit_test import HitTester
from map_objects import MapObject, NoExplicitRenderPriority, RenderPriority
from map_update_scope import UpdateScope
from map_viewport import ViewportState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderDiagnostics:
    """Timing and geometry captured at the end of a render pass."""

    render_duration: float
    scale: float
    content_bounds: Rect
    viewport_bounds: Rect
    extent_bounds: Optional[Rect]
    object_count: int

    def describe(self) -> str:
        return (
            f"Render {self.render_duration * 1000:.2f} ms • scale {self.scale:.3f} • "
            f"{self.object_count} objects • content {self.content_bounds} • viewport {self.viewport_bounds}"
        )


class MapView:
    """Host-facing facade over the viewport state, mapper and hit tester.

    The host owns ``objects``. After mutating the list directly it must call
    ``on_shapes_changed()``; ``add``, ``remove`` and ``clear`` do that
    themselves. Zoom operations return ``(map_rect, viewport_rect)`` pairs,
    the viewport rectangle rounded to whole pixels.
    """

    def __init__(
        self,
        config: Optional[MapConfig] = None,
        render_priority: Optional[RenderPriority] = None,
    ) -> None:
        self.config = config or MapConfig()
        self.objects: List[MapObject] = []
        self.render_priority: RenderPriority = render_priority or NoExplicitRenderPriority()

        self.state = ViewportState(self.config)
        self.mapper = CoordinateMapper(self.state)
        self.hit_tester = HitTester(self.mapper)

        self.render_finished: List[Callable[[RenderDiagnostics], None]] = []
        self.diagnostics_captured: List[Callable[[RenderDiagnostics], None]] = []
        self.object_selected: List[Callable[[MapObject], None]] = []

        self.needs_redraw = True
        self._last_scale = 1.0
        self._lock = threading.Lock()
        self._is_updating = False
        self._shapes_pending = False
        self._update_scope: Optional[UpdateScope] = None
        self._pending: "queue.SimpleQueue[Callable[[], None]]" = queue.SimpleQueue()

    # ------------------------------------------------------------------
    # Content

    @property
    def is_updating(self) -> bool:
        return self._is_updating

    def begin_update(self, caller: Optional[str] = None) -> UpdateScope:
        """Open (or join) a batch-update scope; closing it recomputes and redraws once."""

        with self._lock:
            if not self._is_updating:
                self._is_updating = True
                self._update_scope = UpdateScope(self._end_update, caller, dispatch=self._pending.put)
            return self._update_scope

    def _end_update(self) -> None:
        with self._lock:
            self._is_updating = False
            shapes_pending = self._shapes_pending
            self._shapes_pending = False
        if shapes_pending:
            self.on_shapes_changed()
        self.invalidate()

    def process_pending(self) -> None:
        """Run work handed over from other threads; call this from the owning thread."""

        while True:
            try:
                action = self._pending.get_nowait()
            except queue.Empty:
                return
            action()

    def add(self, *objects: MapObject) -> None:
        self.objects.extend(objects)
        self.on_shapes_changed()

    def remove(self, name: str) -> None:
        self.objects[:] = [obj for obj in self.objects if obj.name != name]
        self.on_shapes_changed()

    def clear(self) -> None:
        self.objects.clear()
        self.on_shapes_changed()

    def find(self, name: str) -> Optional[MapObject]:
        return next((obj for obj in self.objects if obj.name == name), None)

    def on_shapes_changed(self) -> None:
        if self._is_updating:
            self._shapes_pending = True
            return
        self.state.on_content_changed(self.objects)
        self.invalidate()

    def set_viewport_size(self, width: float, height: float) -> None:
        self.state.on_viewport_resized(width, height)
        self.invalidate()

    def invalidate(self) -> None:
        """Request a redraw on the next frame."""

        if not self._is_updating:
            self.needs_redraw = True

    # ------------------------------------------------------------------
    # Rendering

    @property
    def zoom_level(self) -> float:
        """Scale of the active transform; 1.0 until there is something to show."""

        transform = self.state.transform()
        return transform.scale_x if transform is not None else self._last_scale

    def render(self, surface: pygame.Surface) -> Optional[RenderDiagnostics]:
        """Draw one frame. Returns ``None`` while a batch update is open."""

        if self._is_updating:
            return None

        start = time.perf_counter()
        surface.fill(self.config.background_color)
        viewport = self.state.viewport

        if viewport.width > 0:
            transform = self.state.transform()
            if transform is not None and self.objects:
                self._last_scale = transform.scale_x
                canvas = MapCanvas(surface, transform)
                for obj in self.render_priority.order(self.objects):
                    obj.draw(canvas)

            if self.config.show_crosshair:
                draw_crosshair(surface, viewport)

        diagnostics = RenderDiagnostics(
            render_duration=time.perf_counter() - start,
            scale=self._last_scale,
            content_bounds=self.state.content_bounds,
            viewport_bounds=viewport,
            extent_bounds=self.state.extent_bounds,
            object_count=len(self.objects),
        )
        self.needs_redraw = False

        for listener in self.render_finished:
            listener(diagnostics)
        if self.config.log_diagnostics:
            logger.debug(diagnostics.describe())
            for listener in self.diagnostics_captured:
                listener(diagnostics)
        return diagnostics

    # ------------------------------------------------------------------
    # Zoom and pan

    def zoom(self, level: float, viewport_point: Vector) -> Tuple[Rect, Rect]:
        """Zoom to ``level`` around the map point under ``viewport_point``, centered in the viewport."""

        self._apply_pending_shapes()
        map_point = self.viewport_to_map(viewport_point)
        viewport = self.state.viewport
        return self.zoom_at(level, map_point, (viewport.mid_x, viewport.mid_y))

    def zoom_at(self, level: float, map_point: Vector, viewport_center_on: Vector) -> Tuple[Rect, Rect]:
        """Zoom to ``level`` so that ``map_point`` lands on ``viewport_center_on``."""

        self._apply_pending_shapes()
        self.state.set_zoom(level, map_point, viewport_center_on)
        self.invalidate()
        return self._report(self.state.content_bounds)

    def zoom_to_extent(self, name: str) -> Tuple[Rect, Rect]:
        """Zoom so the named object fills the viewport. Raises ``KeyError`` for unknown names."""

        if self.find(name) is None:
            raise KeyError(f"Unknown map object: {name}")
        self._apply_pending_shapes()
        self.state.set_fit_extent(name)
        self.invalidate()
        self.state.transform()
        element = self.state.extent_bounds or self.state.content_bounds
        return self._report(element)

    def zoom_to_fit_all(self) -> Tuple[Rect, Rect]:
        self._apply_pending_shapes()
        self.state.set_fit_all()
        self.invalidate()
        return self._report(self.state.content_bounds)

    def pan(self, delta_x: float, delta_y: float) -> None:
        """Pan by map units; axes on which everything is visible do not move."""

        if self.state.apply_pan(delta_x, delta_y) is not None:
            self.invalidate()

    def _apply_pending_shapes(self) -> None:
        # Zooms inside a batch update see the shapes added so far.
        if self._shapes_pending:
            self.state.on_content_changed(self.objects)

    def _report(self, bounds: Rect) -> Tuple[Rect, Rect]:
        return bounds, self.map_rect_to_viewport(bounds).rounded()

    # ------------------------------------------------------------------
    # Coordinates and selection

    def map_to_viewport(self, map_point: Vector) -> Vector:
        return self.mapper.to_viewport_space(map_point)

    def viewport_to_map(self, viewport_point: Vector) -> Vector:
        return self.mapper.to_map_space(viewport_point)

    def map_rect_to_viewport(self, map_rect: Rect) -> Rect:
        return self.mapper.rect_to_viewport_space(map_rect)

    def find_object_at(self, viewport_point: Vector, for_selection: bool = False) -> Optional[MapObject]:
        return self.hit_tester.find(self.objects, viewport_point, for_selection)

    def select_at(self, viewport_point: Vector) -> Optional[MapObject]:
        """Hit-test selectable objects and notify ``object_selected`` listeners."""

        selected = self.find_object_at(viewport_point, for_selection=True)
        if selected is not None:
            logger.info("Selected map object %r", selected.name)
            for listener in self.object_selected:
                listener(selected)
        return selected
