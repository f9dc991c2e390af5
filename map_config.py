"""Configuration objects and enumerations for the map viewport."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class ZoomMode(Enum):
    """Which transform algorithm drives the viewport."""

    FIT_ALL = auto()
    EXTENT = auto()
    POINT = auto()

    def label(self) -> str:
        if self is ZoomMode.FIT_ALL:
            return "Fit all"
        if self is ZoomMode.EXTENT:
            return "Extent"
        return "Point"


@dataclass
class MapConfig:
    """Tunable constants and user-interaction switches for a map view."""

    # Margin added around a shape's bounds when zooming to its extent.
    extent_padding: float = 20.0
    # Midpoint drift (viewport units) tolerated before re-centering an axis.
    center_tolerance: float = 0.1
    # Change in content width/height (map units) that resets the zoom to fit-all.
    content_change_tolerance: float = 0.1
    include_origin_in_bounds: bool = False
    # Decimal places for fit scales; None keeps full precision.
    scale_precision: Optional[int] = None
    min_zoom_level: float = 0.1
    zoom_step: float = 0.1
    allow_user_zoom: bool = True
    allow_user_pan: bool = True
    show_crosshair: bool = False
    log_diagnostics: bool = False
    background_color: Tuple[int, int, int] = (255, 255, 255)

    def set_allow_user_zoom(self, allow: bool) -> None:
        """Enable or disable mouse-wheel zooming in the host."""

        self.allow_user_zoom = allow

    def set_allow_user_pan(self, allow: bool) -> None:
        """Enable or disable drag panning in the host."""

        self.allow_user_pan = allow

    def set_show_crosshair(self, show: bool) -> None:
        self.show_crosshair = show

    def set_log_diagnostics(self, enabled: bool) -> None:
        self.log_diagnostics = enabled

    def describe(self) -> str:
        """Return a short human-readable summary of the configuration."""

        zoom = "on" if self.allow_user_zoom else "off"
        pan = "on" if self.allow_user_pan else "off"
        return f"Zoom {zoom} • Pan {pan} • Padding {self.extent_padding:g}"
