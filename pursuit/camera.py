from typing import Tuple, Optional
from .config_set import MapConfig
from .constants import (
    CAMERA_MARGIN_FACTOR,
    MIN_ZOOM_FACTOR,
    MAX_ZOOM_FACTOR,
    WORLD_TO_SCREEN_SCALE,
    CAMERA_MODE_FOLLOW,
    CAMERA_MODE_MAP_VIEW,
)


class Camera:
    def __init__(self, window_size: Tuple[int, int]):
        self.window_size = window_size
        self.map_config: Optional[MapConfig] = None
        self.offset = (0.0, 0.0)  # Screen position of the world origin
        self.pixels_per_unit = WORLD_TO_SCREEN_SCALE
        self.shake_offset = (0.0, 0.0)

        # Follow the player by default, like the game itself
        self.camera_mode = CAMERA_MODE_FOLLOW
        self.follow_zoom = WORLD_TO_SCREEN_SCALE

    def set_map(self, map_config: Optional[MapConfig]):
        """Set the map shown in map view"""
        self.map_config = map_config
        if self.camera_mode == CAMERA_MODE_MAP_VIEW:
            self.calculate_auto_fit()

    def calculate_auto_fit(self):
        """Calculate camera parameters to fit the entire map on screen"""
        if self.map_config is None:
            return

        map_width = 2 * self.map_config.half_width
        map_height = 2 * self.map_config.half_height
        total_width = map_width * (1 + 2 * CAMERA_MARGIN_FACTOR)
        total_height = map_height * (1 + 2 * CAMERA_MARGIN_FACTOR)

        scale_x = self.window_size[0] / total_width
        scale_y = self.window_size[1] / total_height
        self.pixels_per_unit = max(MIN_ZOOM_FACTOR, min(MAX_ZOOM_FACTOR, min(scale_x, scale_y)))

        # Maps are centred on the world origin
        self.offset = (self.window_size[0] / 2, self.window_size[1] / 2)

    def update_follow(self, position: Tuple[float, float], shake: Tuple[float, float] = (0.0, 0.0)):
        """Centre the view on the followed position, jittered by the shake offset

        Args:
            position: (x, y) of the player in world coordinates
            shake: Screen-space jitter in pixels
        """
        self.shake_offset = shake
        if self.camera_mode != CAMERA_MODE_FOLLOW:
            return
        self.pixels_per_unit = self.follow_zoom
        self.offset = (
            self.window_size[0] / 2 - position[0] * self.pixels_per_unit,
            self.window_size[1] / 2 - position[1] * self.pixels_per_unit,
        )

    def world_to_screen(self, world_pos: Tuple[float, float]) -> Tuple[int, int]:
        """Convert world coordinates to screen coordinates (y grows downward in both)"""
        screen_x = int(world_pos[0] * self.pixels_per_unit + self.offset[0] + self.shake_offset[0])
        screen_y = int(world_pos[1] * self.pixels_per_unit + self.offset[1] + self.shake_offset[1])
        return (screen_x, screen_y)

    def screen_to_world(self, screen_pos: Tuple[int, int]) -> Tuple[float, float]:
        world_x = (screen_pos[0] - self.offset[0] - self.shake_offset[0]) / self.pixels_per_unit
        world_y = (screen_pos[1] - self.offset[1] - self.shake_offset[1]) / self.pixels_per_unit
        return (world_x, world_y)

    def scale(self, length: float) -> int:
        """Convert a world length to pixels, at least one pixel"""
        return max(1, int(length * self.pixels_per_unit))

    def toggle_camera_mode(self):
        """Toggle between follow and whole-map views"""
        if self.camera_mode == CAMERA_MODE_FOLLOW:
            self.camera_mode = CAMERA_MODE_MAP_VIEW
            self.calculate_auto_fit()
        else:
            self.camera_mode = CAMERA_MODE_FOLLOW

    def get_camera_mode(self) -> str:
        return self.camera_mode
