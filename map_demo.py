"""Demo launcher showing sample layouts in a resizable map window."""
from __future__ import annotations

import logging
from typing import Callable, Dict

import pygame

from map_config import MapConfig
from map_objects import Path, Point, Square
from map_scene import MapScene
from map_view import MapView

logger = logging.getLogger(__name__)


def squares_1000(view: MapView) -> None:
    view.add(
        Square("redSquare", 0, 0, 1000, 1000, "#FF0000"),
        Square("greenSquare", 100, 100, 800, 800, "#00FF00"),
        Square("blueSquare", 400, 400, 200, 200, "#0000FF"),
        Square("yellowSquare", 700, 200, 100, 100, "#FFCC00"),
        Square("lt", 1, 1, 20, 20, "#000000"),
        Square("rt", 979, 1, 20, 20, "#000000"),
        Square("lb", 1, 979, 20, 20, "#000000"),
        Square("rb", 979, 979, 20, 20, "#000000"),
        Square("frame", 200, 600, 200, 200, "#000000", outline_width=4),
        Path("triangle", [(600, 650), (800, 650), (700, 800)], "#0000FF", stroke_width=3, closed=True),
        Point("point1", 100, 100, 2, "#000000"),
        Point("point2", 400, 400, 2, "#000000"),
        Point("point3", 700, 200, 2, "#000000"),
        Point("point4", 750, 250, 2, "#000000"),
    )


def squares_1100(view: MapView) -> None:
    view.add(
        Square("redSquare", 0, 0, 1100, 1100, "#FF0000"),
        Square("greenSquare", 100, 100, 800, 800, "#00FF00"),
        Square("blueSquare", 400, 400, 200, 200, "#0000FF"),
        Square("yellowSquare", 700, 200, 100, 100, "#FFCC00"),
        Point("point1", 100, 100, 2, "#000000"),
        Point("point2", 400, 400, 2, "#000000"),
        Point("point3", 700, 200, 2, "#000000"),
        Point("point4", 750, 250, 2, "#000000"),
    )


def squares_negative(view: MapView) -> None:
    view.add(
        Square("redSquare", 0, 0, 1100, 1100, "#FF0000"),
        Square("greenSquare", 100, 100, 800, 800, "#00FF00"),
        Square("blueSquare", 400, 400, 200, 200, "#0000FF"),
        Square("yellowSquare", 700, 200, 100, 100, "#FFCC00"),
        Square("purpleSquare", -100, -100, 100, 100, "#690FAD"),
        Point("point0", -50, -50, 2, "#FFFFFF"),
        Point("point1", 100, 100, 2, "#000000"),
        Point("point2", 400, 400, 2, "#000000"),
        Point("point3", 700, 200, 2, "#000000"),
        Point("point4", 750, 250, 2, "#000000"),
    )


def squares_portrait(view: MapView) -> None:
    view.add(
        Square("redSquare", 0, 0, 400, 1000, "#FF0000"),
        Square("greenSquare", 50, 100, 300, 800, "#00FF00"),
        Square("blueSquare", 100, 400, 200, 200, "#0000FF"),
        Square("yellowSquare", 300, 200, 100, 100, "#FFCC00"),
        Point("point1", 50, 100, 2, "#000000"),
        Point("point2", 100, 400, 2, "#000000"),
        Point("point3", 300, 200, 2, "#000000"),
        Point("point4", 350, 250, 2, "#000000"),
    )


def squares_landscape(view: MapView) -> None:
    view.add(
        Square("redSquare", 0, 0, 1000, 400, "#FF0000"),
        Square("greenSquare", 100, 50, 800, 300, "#00FF00"),
        Square("blueSquare", 400, 100, 200, 200, "#0000FF"),
        Square("yellowSquare", 200, 300, 100, 100, "#FFCC00"),
        Point("point1", 100, 50, 2, "#000000"),
        Point("point2", 400, 100, 2, "#000000"),
        Point("point3", 200, 300, 2, "#000000"),
        Point("point4", 250, 350, 2, "#000000"),
    )


LAYOUTS: Dict[int, Callable[[MapView], None]] = {
    pygame.K_1: squares_1000,
    pygame.K_2: squares_1100,
    pygame.K_3: squares_negative,
    pygame.K_4: squares_portrait,
    pygame.K_5: squares_landscape,
}


class DemoScene(MapScene):
    """Map scene whose number keys swap between the sample layouts."""

    def load_layout(self, build: Callable[[MapView], None]) -> None:
        with self.view.begin_update(build.__name__):
            self.view.clear()
            build(self.view)
        self.selected_name = None
        logger.info("Loaded layout %s (%d objects)", build.__name__, len(self.view.objects))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.KEYDOWN and event.key in LAYOUTS:
            self.load_layout(LAYOUTS[event.key])
            return True
        return super().handle_event(event)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    pygame.init()
    screen = pygame.display.set_mode((1000, 1000), pygame.RESIZABLE)
    pygame.display.set_caption("Map viewport demo")

    config = MapConfig()
    logger.info("Starting map demo (%s)", config.describe())
    scene = DemoScene(screen, MapView(config))
    scene.load_layout(squares_1000)
    scene.run()

    pygame.quit()


if __name__ == "__main__":
    main()
