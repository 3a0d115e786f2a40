import math

import numpy as np
import pytest

from landing.core.camera import PerspectiveCamera


def test_perspective_camera_defaults_match_landing_framing() -> None:
    camera = PerspectiveCamera(75.0, 16 / 9, 0.1, 1000.0, position=(0.0, -0.8, 7.0))

    assert camera.fov == 75.0
    assert camera.near == 0.1
    assert camera.far == 1000.0
    np.testing.assert_allclose(camera.get_camera_position(), [0.0, -0.8, 7.0], rtol=1e-6)


@pytest.mark.parametrize("width,height", [(1, 1), (1920, 1080), (375, 812), (3, 7), (4096, 1)])
def test_set_viewport_sets_exact_aspect(width: int, height: int) -> None:
    camera = PerspectiveCamera()
    camera.set_viewport(width, height)

    assert camera.aspect == width / height
    f = 1.0 / math.tan(math.radians(camera.fov) / 2.0)
    assert camera.get_projection_matrix()[0, 0] == pytest.approx(f / (width / height), rel=1e-5)
    assert camera.get_projection_matrix()[1, 1] == pytest.approx(f, rel=1e-5)


def test_view_matrix_moves_world_opposite_to_camera() -> None:
    camera = PerspectiveCamera(position=(0.0, -0.8, 7.0))
    origin = camera.get_view_matrix() @ np.array([0.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(origin[:3], [0.0, 0.8, -7.0], rtol=1e-6)


def test_origin_projects_inside_clip_volume() -> None:
    camera = PerspectiveCamera(75.0, 16 / 9, 0.1, 1000.0, position=(0.0, -0.8, 7.0))
    clip = camera.get_projection_matrix() @ camera.get_view_matrix() @ np.array([0.0, 0.0, 0.0, 1.0])
    ndc = clip[:3] / clip[3]
    assert np.all(np.abs(ndc) <= 1.0)
