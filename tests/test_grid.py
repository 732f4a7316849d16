from PySide6.QtCore import QRectF

from puzzflow.canvas.canvas_grid import GridRenderer


def test_dot_positions_snap_to_spacing_multiples():
    pts = GridRenderer.dot_positions(QRectF(-25, 5, 50, 30), 20)

    xs = sorted(set(pts[:, 0].tolist()))
    ys = sorted(set(pts[:, 1].tolist()))
    assert xs == [-40, -20, 0, 20, 40]
    assert ys == [0, 20, 40]
    assert pts.shape == (15, 2)


def test_dot_positions_with_invalid_spacing():
    assert GridRenderer.dot_positions(QRectF(0, 0, 100, 100), 0).shape == (0, 2)


def test_should_render_density_cutoff():
    rect = QRectF(0, 0, 100, 100)
    assert GridRenderer.should_render(rect, 10, 200)
    assert not GridRenderer.should_render(rect, 10, 100)
    assert not GridRenderer.should_render(rect, 0, 1000)
