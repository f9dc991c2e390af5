"""Drawing surface that takes map coordinates and paints viewport pixels."""
from __future__ import annotations

from typing import Dict, Sequence, Tuple, Union

import pygame

from map_geometry import AffineTransform, Rect, Vector

ColorValue = Union[str, Tuple[int, int, int], pygame.Color]

CROSSHAIR_COLOR = (255, 0, 0)
ALTERNATE_CROSSHAIR_COLOR = (0, 255, 0)
ALTERNATE_CROSSHAIR_OFFSET = (100, -100)

_fonts: Dict[int, pygame.font.Font] = {}


def _font(size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
        _fonts.clear()
    font = _fonts.get(size)
    if font is None:
        font = pygame.font.Font(None, size)
        _fonts[size] = font
    return font


def _round_point(point: Vector) -> Tuple[int, int]:
    return int(round(point[0])), int(round(point[1]))


def _to_pygame_rect(rect: Rect) -> pygame.Rect:
    left = int(round(rect.left))
    top = int(round(rect.top))
    return pygame.Rect(left, top, int(round(rect.right)) - left, int(round(rect.bottom)) - top)


class MapCanvas:
    """A pygame surface with the active map transform applied to every draw call.

    Lengths (radius, stroke width) are scaled by the transform's x scale and
    never drop below one pixel. Text is drawn at a fixed pixel size.
    """

    def __init__(self, surface: pygame.Surface, transform: AffineTransform) -> None:
        self.surface = surface
        self.transform = transform

    def _length(self, value: float) -> int:
        return max(1, int(value * abs(self.transform.scale_x)))

    def draw_rect(self, rect: Rect, color: ColorValue, width: float = 0) -> None:
        mapped = _to_pygame_rect(self.transform.map_rect(rect))
        pygame.draw.rect(self.surface, pygame.Color(color), mapped, self._length(width) if width else 0)

    def draw_circle(self, center: Vector, radius: float, color: ColorValue) -> None:
        mapped = _round_point(self.transform.map_point(center))
        pygame.draw.circle(self.surface, pygame.Color(color), mapped, self._length(radius))

    def draw_lines(
        self, points: Sequence[Vector], color: ColorValue, width: float = 1, closed: bool = False
    ) -> None:
        if len(points) < 2:
            return
        mapped = [_round_point(self.transform.map_point(p)) for p in points]
        pygame.draw.lines(self.surface, pygame.Color(color), closed, mapped, self._length(width))

    def draw_text(self, text: str, position: Vector, color: ColorValue, size: int = 18) -> None:
        rendered = _font(size).render(text, True, pygame.Color(color))
        self.surface.blit(rendered, _round_point(self.transform.map_point(position)))

    def blit_image(self, image: pygame.Surface, rect: Rect) -> None:
        target = _to_pygame_rect(self.transform.map_rect(rect))
        if target.width <= 0 or target.height <= 0:
            return
        self.surface.blit(pygame.transform.scale(image, target.size), target.topleft)


def draw_crosshair(surface: pygame.Surface, viewport: Rect) -> None:
    """Mark the viewport center in red and a point offset from it in green.

    Drawn in viewport pixels, independent of the map transform.
    """

    offset_x, offset_y = ALTERNATE_CROSSHAIR_OFFSET
    markers = (
        (viewport.mid_x, viewport.mid_y, CROSSHAIR_COLOR),
        (viewport.mid_x + offset_x, viewport.mid_y + offset_y, ALTERNATE_CROSSHAIR_COLOR),
    )
    for x, y, color in markers:
        pygame.draw.line(surface, color, _round_point((x, viewport.top)), _round_point((x, viewport.bottom)))
        pygame.draw.line(surface, color, _round_point((viewport.left, y)), _round_point((viewport.right, y)))
        pygame.draw.circle(surface, color, _round_point((x, y)), 2)
        label = _font(16).render(f"{x:g}x{y:g}", True, color)
        surface.blit(label, _round_point((x, y)))
