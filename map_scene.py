"""Interactive pygame scene hosting a map view."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import pygame

from map_config import MapConfig
from map_geometry import round_away
from map_objects import MapObject
from map_view import MapView

logger = logging.getLogger(__name__)


class MapScene:
    """Forward pointer, keyboard and resize events to a ``MapView`` and draw it.

    Mouse wheel zooms around the cursor, left drag pans, a left click
    without dragging selects, ``A`` fits everything, ``Tab`` steps through
    object extents and ``C`` toggles the crosshair.
    """

    HUD_BG = (20, 24, 40)
    HUD_BORDER = (70, 80, 120)
    HUD_TEXT = (230, 235, 245)

    def __init__(self, screen: pygame.Surface, view: Optional[MapView] = None) -> None:
        self.screen = screen
        self.view = view or MapView(MapConfig())
        self.config = self.view.config
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 22)
        self.running = True

        self.is_panning = False
        self._previous_pan_position: Optional[Tuple[int, int]] = None
        self._is_wheel_zooming = False
        self._wheel_anchor: Optional[Tuple[int, int]] = None
        self._extent_index = -1
        self.selected_name: Optional[str] = None

        self.view.object_selected.append(self._on_object_selected)
        self.view.set_viewport_size(*self.screen.get_size())

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.QUIT:
            self.running = False
            return False

        if event.type == pygame.KEYDOWN:
            self._handle_key(event)
        elif event.type == pygame.VIDEORESIZE:
            logger.debug("Window resized to %dx%d", event.w, event.h)
            self.view.set_viewport_size(event.w, event.h)
        elif event.type == pygame.WINDOWRESIZED:
            self.view.set_viewport_size(event.x, event.y)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button in (4, 5):
            self.handle_wheel(event.pos, 1 if event.button == 4 else -1)
        elif event.type == pygame.MOUSEMOTION:
            self.handle_motion(event.pos, event.buttons[0])
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.handle_click(event.pos)
        return True

    def _handle_key(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_a:
            self._extent_index = -1
            self.view.zoom_to_fit_all()
        elif event.key == pygame.K_c:
            self.config.set_show_crosshair(not self.config.show_crosshair)
            self.view.invalidate()
        elif event.key == pygame.K_TAB:
            self.cycle_extent()

    def handle_wheel(self, position: Tuple[int, int], direction: int) -> None:
        """Zoom one step around the cursor position captured at the start of the gesture."""

        if not self.config.allow_user_zoom or direction == 0:
            return

        if not self._is_wheel_zooming:
            self._is_wheel_zooming = True
            self._wheel_anchor = position

        step = self.config.zoom_step if direction > 0 else -self.config.zoom_step
        level = max(self.config.min_zoom_level, self.view.zoom_level + step)
        anchor_on_map = self.view.viewport_to_map(self._wheel_anchor)
        self.view.zoom_at(level, anchor_on_map, self._wheel_anchor)

    def handle_motion(self, position: Tuple[int, int], left_pressed: bool) -> None:
        # Any motion ends the wheel gesture.
        if self._is_wheel_zooming:
            self._is_wheel_zooming = False
            self._wheel_anchor = None
            return

        if not self.config.allow_user_pan:
            return

        if not left_pressed:
            self.is_panning = False
            self._previous_pan_position = None
            return

        if not self.is_panning and self._previous_pan_position is None:
            self.is_panning = True
            self._previous_pan_position = position
        elif self.is_panning:
            self._pan_to(position)

    def _pan_to(self, position: Tuple[int, int]) -> None:
        previous_x, previous_y = self.view.viewport_to_map(self._previous_pan_position)
        current_x, current_y = self.view.viewport_to_map(position)
        self.view.pan(round_away(previous_x - current_x), round_away(previous_y - current_y))
        self._previous_pan_position = position

    def handle_click(self, position: Tuple[int, int]) -> Optional[MapObject]:
        if self.is_panning:
            self.is_panning = False
            self._previous_pan_position = None
            return None
        return self.view.select_at(position)

    def cycle_extent(self) -> None:
        names: List[str] = [obj.name for obj in self.view.objects]
        if not names:
            return
        self._extent_index = (self._extent_index + 1) % len(names)
        logger.info("Zooming to extent of %s", names[self._extent_index])
        self.view.zoom_to_extent(names[self._extent_index])

    def _on_object_selected(self, obj: MapObject) -> None:
        self.selected_name = obj.name
        pygame.display.set_caption(f"Selected {obj.name}")

    def update(self) -> None:
        self.view.process_pending()

    def draw(self) -> None:
        self.view.render(self.screen)
        self._draw_hud()

    def _draw_hud(self) -> None:
        state = self.view.state
        hud_lines = [f"Scale {self.view.zoom_level:.3f} • {state.mode.label()}"]
        if self.selected_name:
            hud_lines.append(f"Selected : {self.selected_name}")

        surfaces = [self.font.render(line, True, self.HUD_TEXT) for line in hud_lines]
        max_width = max(surface.get_width() for surface in surfaces)
        total_height = sum(surface.get_height() for surface in surfaces) + (len(surfaces) - 1) * 4
        padding = 8
        hud_rect = pygame.Rect(12, 12, max_width + padding * 2, total_height + padding * 2)
        pygame.draw.rect(self.screen, self.HUD_BG, hud_rect, border_radius=8)
        pygame.draw.rect(self.screen, self.HUD_BORDER, hud_rect, 1, border_radius=8)
        y = hud_rect.top + padding
        for surface in surfaces:
            self.screen.blit(surface, (hud_rect.left + padding, y))
            y += surface.get_height() + 4

    def run(self) -> bool:
        """Main loop. Returns False if the app should close."""

        while self.running:
            for event in pygame.event.get():
                should_continue = self.handle_event(event)
                if not should_continue:
                    return False

            self.update()
            self.draw()
            pygame.display.flip()
            self.clock.tick(60)
        return True
