"""Rectangles and scale/translate transforms shared by the map engine."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

Vector = Tuple[float, float]


class DegenerateRectError(ValueError):
    """Raised when a rectangle with no width or height is used as a divisor."""


class NonInvertibleTransformError(ValueError):
    """Raised when inverting a transform with a zero scale factor."""


def round_away(value: float) -> float:
    """Round half away from zero, so ``999.5`` becomes ``1000`` and ``-0.5`` becomes ``-1``."""

    return math.copysign(math.floor(abs(value) + 0.5), value)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its edges."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def from_size(cls, x: float, y: float, width: float, height: float) -> "Rect":
        return cls(x, y, x + width, y + height)

    @classmethod
    def from_points(cls, points: Iterable[Vector]) -> "Rect":
        """Return the bounding box of ``points``; an empty iterable gives ``Rect()``."""

        xs = []
        ys = []
        for x, y in points:
            xs.append(x)
            ys.append(y)
        if not xs:
            return cls()
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def mid_x(self) -> float:
        return self.left + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.top + self.height / 2

    @property
    def center(self) -> Vector:
        return self.mid_x, self.mid_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def corners(self) -> Tuple[Vector, Vector, Vector, Vector]:
        return (
            (self.left, self.top),
            (self.right, self.top),
            (self.right, self.bottom),
            (self.left, self.bottom),
        )

    def contains(self, point: Vector) -> bool:
        """Inclusive containment test on all four edges."""

        x, y = point
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def pad(self, padding: float) -> "Rect":
        return Rect(
            self.left - padding,
            self.top - padding,
            self.right + padding,
            self.bottom + padding,
        )

    def offset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )

    def rounded(self) -> "Rect":
        """Round every edge half away from zero.

        Scaled rectangles tend to land on ``999.9999`` instead of ``1000``;
        this is used where whole pixels are reported back to the host.
        """

        return Rect(
            round_away(self.left),
            round_away(self.top),
            round_away(self.right),
            round_away(self.bottom),
        )

    def is_close(self, other: "Rect", tolerance: float = 1e-6) -> bool:
        return (
            abs(self.left - other.left) <= tolerance
            and abs(self.top - other.top) <= tolerance
            and abs(self.right - other.right) <= tolerance
            and abs(self.bottom - other.bottom) <= tolerance
        )


def union_all(rects: Iterable[Rect], seed: Optional[Rect] = None) -> Rect:
    """Union of ``rects``; starts from ``seed`` when given, else from the first rectangle."""

    total = seed
    for rect in rects:
        total = rect if total is None else total.union(rect)
    return total if total is not None else Rect()


@dataclass(frozen=True)
class AffineTransform:
    """Scale followed by translation: ``x' = x * scale_x + translate_x``.

    Rotation and skew are not modelled, so the scale factors are also the
    diagonal of the matrix and the translation is its last column.
    """

    scale_x: float = 1.0
    scale_y: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @classmethod
    def scale(
        cls, sx: float, sy: Optional[float] = None, pivot_x: float = 0.0, pivot_y: float = 0.0
    ) -> "AffineTransform":
        """Scale around ``(pivot_x, pivot_y)``, which stays where it is."""

        if sy is None:
            sy = sx
        return cls(sx, sy, pivot_x - sx * pivot_x, pivot_y - sy * pivot_y)

    @classmethod
    def translation(cls, dx: float, dy: float) -> "AffineTransform":
        return cls(1.0, 1.0, dx, dy)

    def then(self, other: "AffineTransform") -> "AffineTransform":
        """Return the transform that applies ``self`` first and ``other`` second."""

        return AffineTransform(
            self.scale_x * other.scale_x,
            self.scale_y * other.scale_y,
            self.translate_x * other.scale_x + other.translate_x,
            self.translate_y * other.scale_y + other.translate_y,
        )

    def translated(self, dx: float, dy: float) -> "AffineTransform":
        """Shorthand for ``self.then(AffineTransform.translation(dx, dy))``."""

        return AffineTransform(self.scale_x, self.scale_y, self.translate_x + dx, self.translate_y + dy)

    def map_point(self, point: Vector) -> Vector:
        x, y = point
        return x * self.scale_x + self.translate_x, y * self.scale_y + self.translate_y

    def map_rect(self, rect: Rect) -> Rect:
        """Map all four corners and return their bounding box.

        A negative scale flips edges, so mapping only two corners is not enough.
        """

        return Rect.from_points(self.map_point(corner) for corner in rect.corners)

    @property
    def is_invertible(self) -> bool:
        return self.scale_x != 0 and self.scale_y != 0

    def invert(self) -> "AffineTransform":
        if not self.is_invertible:
            raise NonInvertibleTransformError(
                f"Cannot invert transform with scale ({self.scale_x}, {self.scale_y})"
            )
        return AffineTransform(
            1.0 / self.scale_x,
            1.0 / self.scale_y,
            -self.translate_x / self.scale_x,
            -self.translate_y / self.scale_y,
        )
