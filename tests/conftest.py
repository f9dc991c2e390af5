from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pygame  # noqa: E402

from map_geometry import Rect  # noqa: E402
from map_objects import Point, Square  # noqa: E402
from map_view import MapView  # noqa: E402


@pytest.fixture
def pygame_env():
    pygame.display.init()
    pygame.font.init()
    yield
    pygame.quit()


@pytest.fixture
def viewport() -> Rect:
    return Rect(0, 0, 1000, 1000)


def build_squares_1100():
    return [
        Square("redSquare", 0, 0, 1100, 1100, "#FF0000"),
        Square("greenSquare", 100, 100, 800, 800, "#00FF00"),
        Square("blueSquare", 400, 400, 200, 200, "#0000FF"),
        Square("yellowSquare", 700, 200, 100, 100, "#FFCC00"),
        Point("point1", 100, 100, 2, "#000000"),
        Point("point2", 400, 400, 2, "#000000"),
        Point("point3", 700, 200, 2, "#000000"),
        Point("point4", 750, 250, 2, "#000000"),
    ]


@pytest.fixture
def squares_view() -> MapView:
    view = MapView()
    view.set_viewport_size(1000, 1000)
    view.add(*build_squares_1100())
    return view
