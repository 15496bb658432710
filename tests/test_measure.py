import numpy as np
import pytest

from meshsection.model.camera import Viewport
from meshsection.model.measure import DistanceMeasurer, format_distance


def test_distance_is_symmetric():
    a, b = (1.0, 2.0, 3.0), (4.0, 6.0, 3.0)
    assert DistanceMeasurer.distance(a, b) == pytest.approx(5.0)
    assert DistanceMeasurer.distance(b, a) == DistanceMeasurer.distance(a, b)
    assert DistanceMeasurer.distance(a, a) == 0.0


def test_format_distance():
    assert format_distance(5.0) == "5.00 mm"
    assert format_distance(12.3456) == "12.35 mm"


def test_measure_label_and_anchor(top_ortho_camera, viewport):
    m = DistanceMeasurer.measure((-10.0, 0.0, 0.0), (10.0, 20.0, 0.0), top_ortho_camera, viewport)
    assert m.distance == pytest.approx(np.sqrt(800.0))
    assert m.label == "28.28 mm"
    assert np.allclose(m.midpoint, [0.0, 10.0, 0.0])
    # 10 world units up is 10 pixels above the center of a 100 px viewport
    assert m.anchor == pytest.approx((50.0, 40.0))


def test_measure_points_requires_two(top_ortho_camera, viewport):
    with pytest.raises(ValueError):
        DistanceMeasurer.measure_points([(0.0, 0.0, 0.0)], top_ortho_camera, viewport)


def test_reproject_follows_camera(top_ortho_camera, viewport):
    m = DistanceMeasurer.measure((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), top_ortho_camera, viewport)
    assert m.anchor == pytest.approx((55.0, 50.0))

    top_ortho_camera.set_orthographic_extents(25.0, 25.0)
    DistanceMeasurer.reproject(m, top_ortho_camera, Viewport(200, 100))
    assert m.anchor == pytest.approx((120.0, 50.0))
