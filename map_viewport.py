"""Zoom-mode state machine and transform cache for a map viewport."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

import map_matrix
from map_config import MapConfig, ZoomMode
from map_geometry import AffineTransform, Rect, Vector, union_all
from map_objects import MapObject

logger = logging.getLogger(__name__)


def aggregate_bounds(objects: Iterable[MapObject], include_origin: bool = False) -> Rect:
    """Union of the bounds of all visible objects.

    With ``include_origin`` the union is seeded with ``(0, 0)`` so the map
    origin is always part of the content.
    """

    seed = Rect() if include_origin else None
    return union_all((obj.bounds for obj in objects if obj.is_visible), seed)


class ViewportState:
    """Current zoom mode, content and viewport rectangles, and the active transform.

    The transform is computed lazily and cached together with the version
    it was computed for. Every change to the viewport size, the content or
    the zoom mode bumps the version, so the next ``transform()`` call
    recomputes it. Nothing is computed while there is no content or the
    viewport has no area.
    """

    def __init__(self, config: Optional[MapConfig] = None) -> None:
        self.config = config or MapConfig()
        self._objects: List[MapObject] = []
        self._content_bounds = Rect()
        self._viewport = Rect()

        self._mode = ZoomMode.FIT_ALL
        self._extent_name: Optional[str] = None
        self._zoom_level = 1.0
        self._zoom_center: Vector = (0.0, 0.0)
        self._viewport_center_on: Optional[Vector] = None
        self._extent_bounds: Optional[Rect] = None

        self._version = 0
        self._cache: Optional[Tuple[int, AffineTransform]] = None

    @property
    def mode(self) -> ZoomMode:
        return self._mode

    @property
    def extent_name(self) -> Optional[str]:
        return self._extent_name

    @property
    def zoom_level(self) -> float:
        return self._zoom_level

    @property
    def zoom_center(self) -> Vector:
        return self._zoom_center

    @property
    def viewport_center_on(self) -> Optional[Vector]:
        return self._viewport_center_on

    @property
    def content_bounds(self) -> Rect:
        return self._content_bounds

    @property
    def viewport(self) -> Rect:
        return self._viewport

    @property
    def extent_bounds(self) -> Optional[Rect]:
        """Bounds of the element the last extent computation zoomed to."""

        return self._extent_bounds

    @property
    def version(self) -> int:
        return self._version

    @property
    def has_content(self) -> bool:
        return not self._content_bounds.is_empty and not self._viewport.is_empty

    def invalidate(self) -> None:
        self._version += 1

    # ------------------------------------------------------------------
    # Transitions

    def set_fit_all(self) -> None:
        logger.debug("Zoom mode -> %s", ZoomMode.FIT_ALL.label())
        self._mode = ZoomMode.FIT_ALL
        self._extent_name = None
        self._zoom_level = 1.0
        self._zoom_center = (0.0, 0.0)
        self._viewport_center_on = None
        self._extent_bounds = None
        self.invalidate()

    def set_fit_extent(self, name: str) -> None:
        if self._find(name) is None:
            raise KeyError(f"Unknown map object: {name}")
        logger.debug("Zoom mode -> %s (%s)", ZoomMode.EXTENT.label(), name)
        self._mode = ZoomMode.EXTENT
        self._extent_name = name
        self._zoom_level = 1.0
        self._zoom_center = (0.0, 0.0)
        self._viewport_center_on = None
        self._extent_bounds = None
        self.invalidate()

    def set_zoom(self, level: float, map_point: Vector, viewport_center_on: Vector) -> None:
        if level <= 0:
            raise ValueError(f"Zoom level must be positive, got {level}")
        logger.debug("Zoom mode -> %s (level=%.3f at %s)", ZoomMode.POINT.label(), level, map_point)
        self._mode = ZoomMode.POINT
        self._extent_name = None
        self._zoom_level = level
        self._zoom_center = (float(map_point[0]), float(map_point[1]))
        self._viewport_center_on = (float(viewport_center_on[0]), float(viewport_center_on[1]))
        self._extent_bounds = None
        self.invalidate()

    def on_content_changed(self, objects: Iterable[MapObject]) -> None:
        """Take a new snapshot of the objects and recompute the content bounds.

        A change of content size larger than the configured tolerance resets
        the zoom to fit-all.
        """

        self._objects = list(objects)
        previous = self._content_bounds
        self._content_bounds = aggregate_bounds(self._objects, self.config.include_origin_in_bounds)
        logger.debug("Content bounds %s -> %s", previous, self._content_bounds)

        tolerance = self.config.content_change_tolerance
        if (
            abs(self._content_bounds.width - previous.width) > tolerance
            or abs(self._content_bounds.height - previous.height) > tolerance
        ):
            self.set_fit_all()
        else:
            self.invalidate()

    def on_viewport_resized(self, width: float, height: float) -> None:
        self._viewport = Rect(0.0, 0.0, max(0.0, float(width)), max(0.0, float(height)))
        logger.debug("Viewport resized to %gx%g", self._viewport.width, self._viewport.height)
        self.invalidate()

    # ------------------------------------------------------------------
    # Transform

    def transform(self) -> Optional[AffineTransform]:
        """Return the active transform, or ``None`` when there is nothing to render."""

        return self._cached()

    def apply_pan(self, delta_x: float, delta_y: float) -> Optional[AffineTransform]:
        """Pan the active transform by map units, keeping the current version."""

        current = self.transform()
        if current is None:
            return None
        panned = map_matrix.pan(current, delta_x, delta_y, self._viewport, self._content_bounds)
        self._cache = (self._version, panned)
        return panned

    def _cached(self) -> Optional[AffineTransform]:
        if self._cache is not None and self._cache[0] == self._version:
            return self._cache[1]

        if not self.has_content:
            self._cache = None
            return None

        logger.debug("Recomputing transform for version %d (%s)", self._version, self._mode.label())
        transform = self._compute()
        self._cache = (self._version, transform)
        return transform

    def _compute(self) -> AffineTransform:
        precision = self.config.scale_precision

        if self._mode is ZoomMode.EXTENT and self._extent_name:
            obj = self._find(self._extent_name)
            if obj is None:
                logger.warning("Map object %r no longer exists, zooming to fit all", self._extent_name)
                self._mode = ZoomMode.FIT_ALL
                self._extent_name = None
                self._extent_bounds = None
            else:
                element = obj.bounds.rounded()
                if element != Rect():
                    self._extent_bounds = element
                    return map_matrix.fit_extent(
                        element,
                        self._viewport,
                        self._content_bounds,
                        padding=self.config.extent_padding,
                        precision=precision,
                    )
                self._extent_bounds = self._content_bounds

        if self._mode is ZoomMode.POINT and self._viewport_center_on is not None:
            transform, _ = map_matrix.zoom_to_point(
                self._zoom_level,
                self._zoom_center[0],
                self._zoom_center[1],
                self._content_bounds,
                self._viewport,
                self._viewport_center_on,
                tolerance=self.config.center_tolerance,
                precision=precision,
            )
            return transform

        return map_matrix.fit_all(self._viewport, self._content_bounds, precision)

    def _find(self, name: str) -> Optional[MapObject]:
        for obj in self._objects:
            if obj.name == name:
                return obj
        return None
