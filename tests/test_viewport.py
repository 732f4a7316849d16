import pytest
from PySide6.QtCore import QPointF

from puzzflow.canvas.viewport import Viewport


@pytest.fixture
def viewport():
    return Viewport()


def test_zoom_at_keeps_pointer_content_fixed(viewport):
    viewport.set_view(1.3, QPointF(-40, 25))
    pointer = QPointF(320, 180)
    before = viewport.screen_to_content(pointer)

    viewport.zoom_at(pointer, 2.2)

    after = viewport.screen_to_content(pointer)
    assert after.x() == pytest.approx(before.x())
    assert after.y() == pytest.approx(before.y())
    assert viewport.zoom == 2.2


def test_wheel_zooms_at_pointer(viewport):
    pointer = QPointF(100, 100)
    before = viewport.screen_to_content(pointer)
    viewport.wheel(pointer, -10)
    assert viewport.zoom == pytest.approx(1.1)
    after = viewport.screen_to_content(pointer)
    assert (after.x(), after.y()) == pytest.approx((before.x(), before.y()))


def test_wheel_clamps_to_wide_range(viewport):
    viewport.wheel(QPointF(0, 0), 10_000)
    assert viewport.zoom == pytest.approx(0.1)
    viewport.wheel(QPointF(0, 0), -10_000)
    assert viewport.zoom == pytest.approx(3.0)


def test_buttons_step_and_clamp_to_narrow_range(viewport):
    viewport.zoom_in()
    assert viewport.zoom == pytest.approx(1.1)
    for _ in range(20):
        viewport.zoom_in()
    assert viewport.zoom == pytest.approx(2.0)
    for _ in range(30):
        viewport.zoom_out()
    assert viewport.zoom == pytest.approx(0.5)


def test_buttons_step_once_from_wheel_zoom_outside_their_range(viewport):
    viewport.wheel(QPointF(0, 0), -150)
    assert viewport.zoom == pytest.approx(2.5)
    viewport.zoom_out()
    assert viewport.zoom == pytest.approx(2.4)
    viewport.zoom_in()
    assert viewport.zoom == pytest.approx(2.0)

    viewport.wheel(QPointF(0, 0), 180)
    assert viewport.zoom == pytest.approx(0.2)
    viewport.zoom_in()
    assert viewport.zoom == pytest.approx(0.3)
    viewport.zoom_out()
    assert viewport.zoom == pytest.approx(0.5)


def test_buttons_do_not_move_pan(viewport):
    viewport.set_view(1.0, QPointF(30, 40))
    viewport.zoom_in()
    assert viewport.pan == QPointF(30, 40)


def test_pan_follows_pointer(viewport):
    viewport.set_view(1.0, QPointF(5, 5))
    viewport.begin_pan(QPointF(100, 100))
    viewport.update_pan(QPointF(130, 80))
    assert viewport.pan == QPointF(35, -15)
    viewport.end_pan()
    viewport.update_pan(QPointF(500, 500))
    assert viewport.pan == QPointF(35, -15)


def test_reset(viewport):
    viewport.set_view(2.5, QPointF(-300, 10))
    viewport.reset()
    assert viewport.zoom == 1.0
    assert viewport.pan == QPointF(0, 0)
    assert viewport.zoom_percent == 100


def test_changed_signal(viewport):
    events = []
    viewport.changed.connect(lambda: events.append(True))
    viewport.zoom_in()
    viewport.wheel(QPointF(0, 0), -5)
    assert len(events) == 2
