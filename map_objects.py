"""Shapes that can be placed on a map, and the order in which they are drawn."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence

import pygame

from map_canvas import ColorValue, MapCanvas
from map_geometry import Rect, Vector


class MapObject:
    """Common contract for everything the map can draw and hit-test.

    Subclasses provide ``name``, ``is_visible``, ``is_selectable``, a
    ``bounds`` rectangle in map units, and ``draw_core``.
    """

    name: str
    is_visible: bool
    is_selectable: bool

    @property
    def bounds(self) -> Rect:
        raise NotImplementedError

    def draw(self, canvas: MapCanvas) -> None:
        if self.is_visible:
            self.draw_core(canvas)

    def draw_core(self, canvas: MapCanvas) -> None:
        raise NotImplementedError

    def contains(self, point: Vector) -> bool:
        """Loose containment: the point lies within the bounding box."""

        return self.bounds.contains(point)

    def tight_contains(self, point: Vector) -> bool:
        """Shape-specific containment used to break ties between overlapping boxes."""

        return self.contains(point)


@dataclass(eq=False)
class Square(MapObject):
    """An axis-aligned rectangle, filled unless ``outline_width`` is set."""

    name: str
    x: float
    y: float
    width: float
    height: float
    color: ColorValue
    is_selectable: bool = True
    is_visible: bool = True
    outline_width: float = 0.0

    @property
    def bounds(self) -> Rect:
        return Rect.from_size(self.x, self.y, self.width, self.height)

    def draw_core(self, canvas: MapCanvas) -> None:
        canvas.draw_rect(self.bounds, self.color, self.outline_width)


@dataclass(eq=False)
class Point(MapObject):
    """A filled circle labelled with its coordinates."""

    name: str
    x: float
    y: float
    radius: float
    color: ColorValue
    is_selectable: bool = True
    is_visible: bool = True

    @property
    def bounds(self) -> Rect:
        # The label is left out so that zooming to a point centers on the point itself.
        return Rect(self.x - self.radius, self.y - self.radius, self.x + self.radius, self.y + self.radius)

    def draw_core(self, canvas: MapCanvas) -> None:
        canvas.draw_circle((self.x, self.y), self.radius, self.color)
        canvas.draw_text(f"{self.x:g}x{self.y:g}", (self.x, self.y), self.color)

    def tight_contains(self, point: Vector) -> bool:
        return math.hypot(point[0] - self.x, point[1] - self.y) <= self.radius


def distance_to_segment(point: Vector, start: Vector, end: Vector) -> float:
    """Shortest distance from ``point`` to the segment ``start``-``end``."""

    if start == end:
        return math.hypot(point[0] - start[0], point[1] - start[1])
    px, py = point
    sx, sy = start
    ex, ey = end
    line_mag_sq = (ex - sx) ** 2 + (ey - sy) ** 2
    t = ((px - sx) * (ex - sx) + (py - sy) * (ey - sy)) / line_mag_sq
    t = max(0.0, min(1.0, t))
    closest = (sx + t * (ex - sx), sy + t * (ey - sy))
    return math.hypot(point[0] - closest[0], point[1] - closest[1])


@dataclass(eq=False)
class Path(MapObject):
    """A polyline drawn with a stroke; ``closed`` joins the last point back to the first."""

    name: str
    points: Sequence[Vector]
    color: ColorValue
    stroke_width: float = 2.0
    is_selectable: bool = True
    is_visible: bool = True
    closed: bool = False

    @property
    def bounds(self) -> Rect:
        return Rect.from_points(self.points)

    def draw_core(self, canvas: MapCanvas) -> None:
        canvas.draw_lines(self.points, self.color, self.stroke_width, self.closed)

    def tight_contains(self, point: Vector) -> bool:
        if not self.points:
            return False
        threshold = max(self.stroke_width / 2, 1.0)
        if len(self.points) == 1:
            return distance_to_segment(point, self.points[0], self.points[0]) <= threshold
        segments = list(zip(self.points, self.points[1:]))
        if self.closed and len(self.points) > 2:
            segments.append((self.points[-1], self.points[0]))
        return any(distance_to_segment(point, start, end) <= threshold for start, end in segments)


@dataclass(eq=False)
class Image(MapObject):
    """A pre-loaded bitmap stretched over its bounds."""

    name: str
    x: float
    y: float
    width: float
    height: float
    surface: pygame.Surface = field(repr=False)
    is_selectable: bool = False
    is_visible: bool = True

    @classmethod
    def from_file(cls, name: str, x: float, y: float, width: float, height: float, path: str) -> "Image":
        return cls(name, x, y, width, height, pygame.image.load(path))

    @property
    def bounds(self) -> Rect:
        return Rect.from_size(self.x, self.y, self.width, self.height)

    def draw_core(self, canvas: MapCanvas) -> None:
        canvas.blit_image(self.surface, self.bounds)


class RenderPriority:
    """Comparator deciding which objects are drawn first (and so end up underneath).

    Sorting is stable: objects that compare equal keep their insertion order.
    """

    def compare(self, first: Optional[MapObject], second: Optional[MapObject]) -> int:
        if first is second:
            return 0
        if second is None:
            return 1
        if first is None:
            return -1
        return self.compare_core(first, second)

    def compare_core(self, first: MapObject, second: MapObject) -> int:
        raise NotImplementedError

    def order(self, objects: Iterable[MapObject]) -> List[MapObject]:
        return sorted(objects, key=cmp_to_key(self.compare))


class NoExplicitRenderPriority(RenderPriority):
    """Draw in insertion order."""

    def compare_core(self, first: MapObject, second: MapObject) -> int:
        return 0
