import pytest

from pursuit.camera import Camera
from pursuit.constants import CAMERA_MODE_FOLLOW, CAMERA_MODE_MAP_VIEW, WORLD_TO_SCREEN_SCALE


def test_follow_mode_centres_the_player(map_config):
    camera = Camera((800, 600))
    camera.set_map(map_config)
    camera.follow_zoom = 1.0

    camera.update_follow((250.0, -120.0))

    assert camera.world_to_screen((250.0, -120.0)) == (400, 300)
    # y grows downward on screen as in the world
    assert camera.world_to_screen((250.0, -100.0))[1] > 300


def test_shake_offsets_the_view(map_config):
    camera = Camera((800, 600))
    camera.update_follow((0.0, 0.0), shake=(5.0, -3.0))

    assert camera.world_to_screen((0.0, 0.0)) == (405, 297)
    assert camera.screen_to_world((405, 297)) == pytest.approx((0.0, 0.0))


def test_map_view_fits_the_whole_map(map_config):
    camera = Camera((800, 600))
    camera.set_map(map_config)

    camera.toggle_camera_mode()

    assert camera.get_camera_mode() == CAMERA_MODE_MAP_VIEW
    left, top = camera.world_to_screen((-map_config.half_width, -map_config.half_height))
    right, bottom = camera.world_to_screen((map_config.half_width, map_config.half_height))
    assert 0 <= left and right <= 800
    assert 0 <= top and bottom <= 600

    # Following is ignored in map view
    camera.update_follow((500.0, 500.0))
    assert camera.world_to_screen((0.0, 0.0)) == (400, 300)

    camera.toggle_camera_mode()
    assert camera.get_camera_mode() == CAMERA_MODE_FOLLOW


def test_scale_is_at_least_one_pixel():
    camera = Camera((800, 600))

    assert camera.scale(0.1) == 1
    assert camera.scale(100.0) == int(100.0 * WORLD_TO_SCREEN_SCALE)
