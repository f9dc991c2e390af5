"""Conversion between viewport pixels and map coordinates."""
from __future__ import annotations

import logging
from typing import Optional

from map_geometry import AffineTransform, NonInvertibleTransformError, Rect, Vector
from map_viewport import ViewportState

logger = logging.getLogger(__name__)


class CoordinateMapper:
    """Map points and rectangles through the viewport's active transform.

    When there is no transform yet (no content, zero-sized viewport) every
    mapping is the identity.
    """

    def __init__(self, state: ViewportState) -> None:
        self.state = state
        self._inverse_for: Optional[AffineTransform] = None
        self._inverse: Optional[AffineTransform] = None

    def to_map_space(self, viewport_point: Vector) -> Vector:
        """Map a viewport point back to the map; never fails during pointer tracking."""

        inverse = self._inverse_transform()
        if inverse is None:
            return viewport_point
        return inverse.map_point(viewport_point)

    def to_viewport_space(self, map_point: Vector) -> Vector:
        transform = self.state.transform()
        if transform is None:
            return map_point
        return transform.map_point(map_point)

    def rect_to_viewport_space(self, map_rect: Rect) -> Rect:
        transform = self.state.transform()
        if transform is None:
            return map_rect
        return transform.map_rect(map_rect)

    def _inverse_transform(self) -> Optional[AffineTransform]:
        transform = self.state.transform()
        if transform is None:
            return None
        if transform != self._inverse_for:
            self._inverse_for = transform
            try:
                self._inverse = transform.invert()
            except NonInvertibleTransformError:
                logger.warning("Transform %s is not invertible, using identity", transform)
                self._inverse = None
        return self._inverse
