"""Transform calculations that place map content inside a viewport.

Every function here is pure: it takes rectangles in map space (content,
element) and viewport space (viewport) and returns an ``AffineTransform``
mapping the former onto the latter.
"""
from __future__ import annotations

import math
from typing import Optional, Tuple

from map_geometry import AffineTransform, DegenerateRectError, Rect, Vector

EXTENT_PADDING = 20.0  # map units added around an element when zooming to it
CENTER_TOLERANCE = 0.1  # midpoint drift tolerated before re-centering an axis


def scale_to_fit(outer: Rect, inner: Rect, precision: Optional[int] = None) -> float:
    """Return the largest uniform scale at which ``inner`` fits inside ``outer``.

    The width ratio is tried first; when that makes ``inner`` too tall the
    height ratio is used instead. ``precision`` rounds the result to that
    many decimals.
    """

    if inner.width <= 0 or inner.height <= 0:
        raise DegenerateRectError(f"Cannot scale to fit an empty rectangle: {inner}")

    scale = outer.width / inner.width
    if scale * inner.height > outer.height:
        scale = outer.height / inner.height

    if precision is not None:
        scale = round(scale, precision)
    return scale


def _fits_inside(bounds: Rect, viewport: Rect) -> bool:
    return bounds.width < viewport.width and bounds.height < viewport.height


def _overflows(bounds: Rect, viewport: Rect) -> bool:
    return (
        bounds.left < viewport.left
        or bounds.top < viewport.top
        or bounds.right > viewport.right
        or bounds.bottom > viewport.bottom
    )


def fit_all(viewport: Rect, content_bounds: Rect, precision: Optional[int] = None) -> AffineTransform:
    """Scale all content into the viewport and center it on the axis with slack."""

    scale = scale_to_fit(viewport, content_bounds, precision)
    matrix = AffineTransform.scale(scale)
    scaled = matrix.map_rect(content_bounds)

    translate_x = (viewport.width - scaled.width) / 2 if scaled.width < viewport.width else 0.0
    translate_y = (viewport.height - scaled.height) / 2 if scaled.height < viewport.height else 0.0

    # Move the scaled top-left onto the viewport origin. Content that does not
    # start at the map origin would otherwise drift right/down off screen.
    translate_x += viewport.left - scaled.left
    translate_y += viewport.top - scaled.top

    return matrix.translated(translate_x, translate_y)


def fit_extent(
    element_bounds: Rect,
    viewport: Rect,
    content_bounds: Rect,
    padding: float = EXTENT_PADDING,
    precision: Optional[int] = None,
) -> AffineTransform:
    """Maximise ``element_bounds`` in the viewport and center it there."""

    padded = element_bounds
    if element_bounds != content_bounds:
        # Leave a margin so the element's edges are visible.
        padded = element_bounds.pad(padding)

    scale = scale_to_fit(viewport, padded, precision)
    matrix = AffineTransform.scale(scale)

    center_x, center_y = matrix.map_point(padded.center)
    return matrix.translated(viewport.mid_x - center_x, viewport.mid_y - center_y)


def snap_to_edges(
    matrix: AffineTransform, viewport: Rect, content_bounds: Rect, inclusive: bool = True
) -> AffineTransform:
    """Close any gap between content and the viewport edge on axes where content covers it.

    An axis is considered when the mapped content is at least as large as the
    viewport (strictly larger when ``inclusive`` is false). If content right is
    800 and the viewport right is 1000, the map moves right by 200; if content
    right is 1100 nothing happens on that side.
    """

    bounds = matrix.map_rect(content_bounds)

    def covers(content_size: float, viewport_size: float) -> bool:
        return content_size >= viewport_size if inclusive else content_size > viewport_size

    offset_x = 0.0
    if covers(bounds.width, viewport.width):
        offset_x = max(0.0, viewport.right - bounds.right) + min(0.0, viewport.left - bounds.left)

    offset_y = 0.0
    if covers(bounds.height, viewport.height):
        offset_y = min(0.0, viewport.top - bounds.top) + max(0.0, viewport.bottom - bounds.bottom)

    if offset_x != 0 or offset_y != 0:
        matrix = matrix.translated(offset_x, offset_y)
    return matrix


def zoom_to_point(
    level: float,
    center_x: float,
    center_y: float,
    content_bounds: Rect,
    viewport: Rect,
    viewport_center_on: Vector,
    tolerance: float = CENTER_TOLERANCE,
    precision: Optional[int] = None,
) -> Tuple[AffineTransform, Rect]:
    """Zoom to ``level`` keeping map point ``(center_x, center_y)`` on ``viewport_center_on``.

    Zooming out further than "fit all" is clamped to the fit scale. Once
    positioned, edges are snapped to the viewport so no background shows on
    an axis the content covers, and axes the content does not cover are
    centered.

    Returns the transform and the content rectangle in viewport space.
    """

    if level <= 0:
        raise ValueError(f"Zoom level must be positive, got {level}")

    matrix = AffineTransform.scale(level)
    new_bounds = matrix.map_rect(content_bounds)

    if _fits_inside(new_bounds, viewport):
        # Never show the content smaller than "fits the viewport exactly".
        level = scale_to_fit(viewport, content_bounds, precision)
        matrix = AffineTransform.scale(level, level, center_x, center_y)

        left, top = matrix.map_point((content_bounds.left, content_bounds.top))
        if left < 0 or top < 0:
            matrix = matrix.translated(-min(0.0, left), -min(0.0, top))

        new_bounds = matrix.map_rect(content_bounds)

    if _fits_inside(new_bounds, viewport) and _overflows(new_bounds, viewport):
        matrix = matrix.translated(-min(new_bounds.left, 0.0), -min(new_bounds.top, 0.0))

    mapped_x, mapped_y = matrix.map_point((center_x, center_y))
    matrix = matrix.translated(viewport_center_on[0] - mapped_x, viewport_center_on[1] - mapped_y)

    matrix = snap_to_edges(matrix, viewport, content_bounds)
    new_bounds = matrix.map_rect(content_bounds)

    if new_bounds.height < viewport.height and abs(viewport.mid_y - new_bounds.mid_y) > tolerance:
        matrix = matrix.translated(0.0, viewport.mid_y - new_bounds.mid_y)
        new_bounds = matrix.map_rect(content_bounds)

    if new_bounds.width < viewport.width and abs(viewport.mid_x - new_bounds.mid_x) > tolerance:
        matrix = matrix.translated(viewport.mid_x - new_bounds.mid_x, 0.0)
        new_bounds = matrix.map_rect(content_bounds)

    return matrix, new_bounds


def pan(
    current: AffineTransform,
    delta_x: float,
    delta_y: float,
    viewport: Rect,
    content_bounds: Rect,
) -> AffineTransform:
    """Move the view by ``(delta_x, delta_y)`` map units.

    An axis on which the scaled content fits the viewport does not pan at
    all; sizes are compared after rounding up so sub-pixel noise does not
    unlock an axis.
    """

    scaled_pan_x = delta_x * current.scale_x
    scaled_pan_y = delta_y * current.scale_y

    if math.ceil(content_bounds.width * current.scale_x) <= math.ceil(viewport.width):
        scaled_pan_x = 0.0
    if math.ceil(content_bounds.height * current.scale_y) <= math.ceil(viewport.height):
        scaled_pan_y = 0.0

    matrix = current.translated(-scaled_pan_x, -scaled_pan_y)
    return snap_to_edges(matrix, viewport, content_bounds, inclusive=False)
