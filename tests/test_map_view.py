from __future__ import annotations

import threading

import pygame
import pytest

from conftest import build_squares_1100
from map_config import MapConfig, ZoomMode
from map_geometry import Rect
from map_objects import RenderPriority, Square
from map_view import MapView


def test_zoom_to_fit_all_reports_rectangles(squares_view):
    squares_view.zoom(3, (500, 500))
    content, on_screen = squares_view.zoom_to_fit_all()
    assert content == Rect(0, 0, 1100, 1100)
    assert on_screen == Rect(0, 0, 1000, 1000)
    assert squares_view.state.mode is ZoomMode.FIT_ALL


def test_zoom_around_viewport_point(squares_view):
    content, on_screen = squares_view.zoom(2, (500, 500))

    assert content == Rect(0, 0, 1100, 1100)
    assert on_screen == Rect(-600, -600, 1600, 1600)
    assert squares_view.zoom_level == 2
    x, y = squares_view.map_to_viewport((550, 550))
    assert x == pytest.approx(500)
    assert y == pytest.approx(500)


def test_zoom_at_map_point(squares_view):
    squares_view.zoom_at(2, (400, 400), (500, 500))
    assert squares_view.map_to_viewport((400, 400)) == (500, 500)
    assert squares_view.viewport_to_map((500, 500)) == (400, 400)


def test_zoom_to_extent(squares_view):
    element, on_screen = squares_view.zoom_to_extent("yellowSquare")
    assert element == Rect(700, 200, 800, 300)
    assert on_screen == Rect(143, 143, 857, 857)
    assert squares_view.zoom_level == pytest.approx(1000 / 140)


def test_zoom_to_extent_twice_is_stable(squares_view):
    squares_view.zoom_to_extent("blueSquare")
    first = squares_view.state.transform()
    squares_view.zoom_to_extent("blueSquare")
    assert squares_view.state.transform() == first


def test_zoom_to_unknown_extent_raises(squares_view):
    with pytest.raises(KeyError):
        squares_view.zoom_to_extent("nope")


def test_removed_extent_target_falls_back(squares_view):
    squares_view.zoom_to_extent("yellowSquare")
    squares_view.remove("yellowSquare")
    assert squares_view.zoom_level == pytest.approx(1000 / 1100)
    assert squares_view.state.mode is ZoomMode.FIT_ALL


def test_pan_moves_zoomed_view(squares_view):
    squares_view.zoom_at(2, (400, 400), (500, 500))
    squares_view.needs_redraw = False
    squares_view.pan(50, 0)
    assert squares_view.map_to_viewport((400, 400)) == (400, 500)
    assert squares_view.needs_redraw


def test_pan_at_fit_all_is_locked(squares_view):
    squares_view.pan(50, 50)
    x, y = squares_view.map_to_viewport((0, 0))
    assert x == pytest.approx(0)
    assert y == pytest.approx(0)


def test_zoom_level_defaults_to_one_without_content():
    assert MapView().zoom_level == 1.0


def test_batch_update_defers_content_change():
    view = MapView()
    view.set_viewport_size(1000, 1000)

    with view.begin_update("test") as scope:
        assert view.begin_update("nested") is scope
        view.add(*build_squares_1100())
        assert view.is_updating
        assert view.state.content_bounds == Rect()
        view.needs_redraw = False
        view.invalidate()
        assert not view.needs_redraw

    assert not view.is_updating
    assert view.state.content_bounds == Rect(0, 0, 1100, 1100)
    assert view.needs_redraw


def test_batch_update_closed_on_other_thread_waits_for_owner():
    view = MapView()
    view.set_viewport_size(1000, 1000)
    scope = view.begin_update("worker")
    view.add(*build_squares_1100())

    worker = threading.Thread(target=scope.close)
    worker.start()
    worker.join()
    assert view.is_updating

    view.process_pending()
    assert not view.is_updating
    assert view.state.content_bounds == Rect(0, 0, 1100, 1100)


def test_render_draws_topmost_shape(squares_view):
    surface = pygame.Surface((1000, 1000))
    diagnostics = squares_view.render(surface)

    assert tuple(surface.get_at((500, 500)))[:3] == (0, 0, 255)
    assert tuple(surface.get_at((5, 995)))[:3] == (255, 0, 0)
    assert diagnostics.object_count == 8
    assert diagnostics.scale == pytest.approx(1000 / 1100)
    assert diagnostics.viewport_bounds == Rect(0, 0, 1000, 1000)
    assert not squares_view.needs_redraw


def test_render_without_content_fills_background():
    view = MapView(MapConfig(background_color=(10, 20, 30)))
    view.set_viewport_size(100, 100)
    surface = pygame.Surface((100, 100))

    diagnostics = view.render(surface)
    assert tuple(surface.get_at((50, 50)))[:3] == (10, 20, 30)
    assert diagnostics.object_count == 0
    assert diagnostics.scale == 1.0


def test_render_is_skipped_while_updating(squares_view):
    with squares_view.begin_update():
        assert squares_view.render(pygame.Surface((10, 10))) is None


def test_render_listeners(squares_view):
    finished = []
    captured = []
    squares_view.render_finished.append(finished.append)
    squares_view.diagnostics_captured.append(captured.append)

    squares_view.render(pygame.Surface((1000, 1000)))
    assert len(finished) == 1
    assert captured == []

    squares_view.config.set_log_diagnostics(True)
    squares_view.render(pygame.Surface((1000, 1000)))
    assert len(finished) == 2
    assert len(captured) == 1
    assert "8 objects" in captured[0].describe()


def test_crosshair(squares_view):
    squares_view.config.set_show_crosshair(True)
    surface = pygame.Surface((1000, 1000))
    squares_view.render(surface)
    assert tuple(surface.get_at((500, 10)))[:3] == (255, 0, 0)
    assert tuple(surface.get_at((600, 990)))[:3] == (0, 255, 0)


def test_render_priority_controls_draw_order():
    class ByName(RenderPriority):
        def compare_core(self, first, second):
            return (first.name > second.name) - (first.name < second.name)

    view = MapView(render_priority=ByName())
    view.set_viewport_size(100, 100)
    view.add(
        Square("b", 0, 0, 100, 100, "#00FF00"),
        Square("a", 0, 0, 100, 100, "#0000FF"),
    )
    surface = pygame.Surface((100, 100))
    view.render(surface)
    assert tuple(surface.get_at((50, 50)))[:3] == (0, 255, 0)


def test_select_at_notifies_listeners(squares_view):
    selected = []
    squares_view.object_selected.append(selected.append)

    assert squares_view.select_at((500, 500)).name == "blueSquare"
    assert squares_view.select_at((-10, -10)) is None
    assert [obj.name for obj in selected] == ["blueSquare"]


def test_find_object_at_uses_current_zoom(squares_view):
    squares_view.zoom_to_extent("yellowSquare")
    assert squares_view.find_object_at((500, 500)).name == "point4"
    assert squares_view.find_object_at((200, 200)).name == "yellowSquare"


def test_zoom_to_extent_inside_batch_update(squares_view):
    with squares_view.begin_update("test"):
        squares_view.add(Square("late", 2000, 2000, 100, 100, "#000000"))
        assert squares_view.find("late") is not None

        element, on_screen = squares_view.zoom_to_extent("late")
        assert element == Rect(2000, 2000, 2100, 2100)
        assert on_screen == Rect(143, 143, 857, 857)

        with pytest.raises(KeyError):
            squares_view.zoom_to_extent("nope")

    assert squares_view.state.mode is ZoomMode.EXTENT
    assert squares_view.state.extent_name == "late"
    assert squares_view.state.content_bounds == Rect(0, 0, 2100, 2100)
    assert squares_view.zoom_level == pytest.approx(1000 / 140)


def test_zoom_at_inside_batch_update_survives_close(squares_view):
    with squares_view.begin_update("test"):
        squares_view.add(Square("far", 1200, 1200, 100, 100, "#000000"))
        squares_view.zoom_at(2, (600, 600), (500, 500))

    assert squares_view.state.mode is ZoomMode.POINT
    assert squares_view.map_to_viewport((600, 600)) == (500, 500)


def test_map_rect_to_viewport(squares_view):
    squares_view.zoom_at(2, (400, 400), (500, 500))
    assert squares_view.map_rect_to_viewport(Rect(400, 400, 600, 600)) == Rect(500, 500, 900, 900)
