import math
import time
import logging
import numpy as np
import pygame
from typing import Optional
from .config_set import MapConfig
from .camera import Camera
from .weather_particles import WeatherParticles
from .constants import (
    DEFAULT_WINDOW_SIZE,
    DEFAULT_RENDER_FPS,
    WINDOW_CAPTION,
    FONT_SIZE,
    FPS_TEXT_MARGIN,
    CAMERA_MODE_TOGGLE_KEY,
    BACKGROUND_COLOR,
    GRID_COLOR,
    MAP_BORDER_COLOR,
    HUD_TEXT_COLOR,
    FLASH_COLOR,
    PAUSE_OVERLAY_ALPHA,
    PLAYER_COLOR,
    SHIELD_COLOR,
    STANDARD_AGENT_COLOR,
    HEAVY_AGENT_COLOR,
    INTERCEPTOR_AGENT_COLOR,
    STUNNED_AGENT_COLOR,
    CAR_TRAFFIC_COLOR,
    TRUCK_TRAFFIC_COLOR,
    HAZARD_COLOR,
    PICKUP_COLORS,
    PLAYER_DRAW_SIZE,
    AGENT_DRAW_SIZE,
    HEAVY_AGENT_DRAW_SIZE,
    CAR_DRAW_SIZE,
    TRUCK_DRAW_SIZE,
    PICKUP_DRAW_SIZE,
    MINIMAP_WIDTH,
    MINIMAP_HEIGHT,
    MINIMAP_MARGIN,
    MINIMAP_BG_COLOR,
    WEATHER_PARTICLE_ALPHA,
    RAIN_PARTICLE_COLOR,
    FOG_PARTICLE_COLOR,
    CONTACT_MARKER_TIME,
    CONTACT_MARKER_RADIUS,
)

# Setup module logger
logger = logging.getLogger(__name__)

AGENT_COLORS = {
    "standard": STANDARD_AGENT_COLOR,
    "heavy": HEAVY_AGENT_COLOR,
    "interceptor": INTERCEPTOR_AGENT_COLOR,
}


class Renderer:
    def __init__(self, window_size=DEFAULT_WINDOW_SIZE, render_fps=DEFAULT_RENDER_FPS,
                 map_config: Optional[MapConfig] = None, enable_fps_limit: bool = True):
        self.window_size = window_size
        self.render_fps = render_fps
        self.enable_fps_limit = enable_fps_limit
        self.window = None
        self.clock = None
        self.font = None
        self._initialized_pygame = False
        self.camera = Camera(window_size)
        self.map_config = map_config
        self.camera.set_map(map_config)

        # Cosmetic jitter, separate from the simulation generator
        self._shake_rng = np.random.default_rng()
        self.weather = WeatherParticles(window_size, np.random.default_rng())
        self.last_frame_time = None

    def init_pygame(self):
        if not self._initialized_pygame:
            pygame.init()
            pygame.display.init()
            pygame.font.init()
            self._initialized_pygame = True

    def set_map(self, map_config: MapConfig):
        self.map_config = map_config
        self.camera.set_map(map_config)

    def render_frame(self, snapshot: dict) -> None:
        """Draw one frame from an engine snapshot"""
        self.init_pygame()

        if self.window is None:
            self.window = pygame.display.set_mode(self.window_size)
            pygame.display.set_caption(WINDOW_CAPTION)
        if self.clock is None:
            self.clock = pygame.time.Clock()
        if self.font is None:
            self.font = pygame.font.Font(None, FONT_SIZE)

        self._handle_events()

        player = snapshot["player"]
        shake = snapshot["shake"]
        jitter = (0.0, 0.0)
        if shake > 0:
            jitter = tuple(float(v) for v in (self._shake_rng.random(2) - 0.5) * shake)
        self.camera.update_follow((player["x"], player["y"]), jitter)

        self.window.fill(BACKGROUND_COLOR)
        if self.map_config is not None:
            self._render_grid()
            self._render_decor()
        self._render_hazards(snapshot["hazard_zones"])
        self._render_obstacles(snapshot["obstacles"])
        self._render_pickups(snapshot["pickups"])
        for vehicle in snapshot["traffic"]:
            is_truck = vehicle["kind"] == "truck"
            self._render_vehicle((vehicle["x"], vehicle["y"]), vehicle["heading"],
                                 TRUCK_TRAFFIC_COLOR if is_truck else CAR_TRAFFIC_COLOR,
                                 TRUCK_DRAW_SIZE if is_truck else CAR_DRAW_SIZE)
        for agent in snapshot["agents"]:
            color = STUNNED_AGENT_COLOR if agent["stun"] > 0 else AGENT_COLORS[agent["kind"]]
            size = HEAVY_AGENT_DRAW_SIZE if agent["kind"] == "heavy" else AGENT_DRAW_SIZE
            self._render_vehicle((agent["x"], agent["y"]), agent["heading"], color, size)
        self._render_player(player)
        self._render_contacts(snapshot["recent_contacts"], snapshot["elapsed"])

        # Weather dims the world, the HUD stays readable
        if snapshot["visibility"] < 1.0:
            self._render_overlay(BACKGROUND_COLOR, int((1.0 - snapshot["visibility"]) * 255))
        self._render_weather(snapshot["weather_id"], snapshot["particles"])

        self._render_hud(snapshot)
        self._render_minimap(snapshot)
        if snapshot["flash"] > 0:
            self._render_overlay(FLASH_COLOR, int(min(1.0, snapshot["flash"]) * 0.45 * 255))
        if snapshot["paused"]:
            self._render_overlay((0, 0, 0), PAUSE_OVERLAY_ALPHA)
            self._render_centered_text("PAUSED")

        pygame.display.flip()

        if self.enable_fps_limit:
            self.clock.tick(self.render_fps)
        else:
            self.clock.tick()

    def tick_seconds(self) -> float:
        """Seconds since the previous frame, measured with a wall clock"""
        now = time.perf_counter()
        elapsed = 0.0 if self.last_frame_time is None else now - self.last_frame_time
        self.last_frame_time = now
        return elapsed

    def close(self):
        if self.window is not None:
            pygame.display.quit()
            pygame.quit()
            self.window = None
            self.clock = None
            self.font = None
            self._initialized_pygame = False
            self.last_frame_time = None

    def _handle_events(self):
        """Handle camera toggle, re-post everything else for the caller"""
        for event in pygame.event.get():
            if event.type == pygame.KEYDOWN and event.unicode.lower() == CAMERA_MODE_TOGGLE_KEY:
                self.camera.toggle_camera_mode()
                logger.info(f"Camera mode: {self.camera.get_camera_mode()}")
            else:
                pygame.event.post(event)

    def _render_grid(self):
        map_config = self.map_config
        spacing = map_config.grid
        half_w = map_config.half_width
        half_h = map_config.half_height

        x = -half_w
        while x <= half_w:
            pygame.draw.line(self.window, GRID_COLOR,
                             self.camera.world_to_screen((x, -half_h)),
                             self.camera.world_to_screen((x, half_h)))
            x += spacing
        y = -half_h
        while y <= half_h:
            pygame.draw.line(self.window, GRID_COLOR,
                             self.camera.world_to_screen((-half_w, y)),
                             self.camera.world_to_screen((half_w, y)))
            y += spacing

        top_left = self.camera.world_to_screen((-half_w, -half_h))
        bottom_right = self.camera.world_to_screen((half_w, half_h))
        border = pygame.Rect(top_left, (bottom_right[0] - top_left[0], bottom_right[1] - top_left[1]))
        pygame.draw.rect(self.window, MAP_BORDER_COLOR, border, 3)

    def _render_decor(self):
        for tile in self.map_config.decor:
            sx, sy = self.camera.world_to_screen((tile.x, tile.y))
            size = self.camera.scale(tile.size)
            try:
                color = pygame.Color(tile.color)
            except ValueError:
                color = pygame.Color(*GRID_COLOR)
            pygame.draw.rect(self.window, color, pygame.Rect(sx - size // 2, sy - size // 2, size, size), 1)

    def _render_hazards(self, zones):
        for zone in zones:
            center = self.camera.world_to_screen((zone["x"], zone["y"]))
            pygame.draw.circle(self.window, HAZARD_COLOR, center, self.camera.scale(zone["radius"]), 2)

    def _render_obstacles(self, obstacles):
        for obstacle in obstacles:
            center = self.camera.world_to_screen((obstacle["x"], obstacle["y"]))
            color = pygame.Color(0, 0, 0)
            color.hsva = (obstacle["hue"] % 360, 60, 70, 100)
            pygame.draw.circle(self.window, color, center, self.camera.scale(obstacle["radius"]))

    def _render_pickups(self, pickups):
        for pickup in pickups:
            center = self.camera.world_to_screen((pickup["x"], pickup["y"]))
            pulse = 1.0 + 0.2 * math.sin(pickup["phase"])
            pygame.draw.circle(self.window, PICKUP_COLORS[pickup["type"]], center,
                               self.camera.scale(PICKUP_DRAW_SIZE * pulse))

    def _render_vehicle(self, position: tuple, heading: float, color: tuple, size: float):
        """Render a vehicle as a rotated rectangle

        Args:
            position: (x, y) position in world coordinates
            heading: Orientation in radians
            color: Fill color
            size: Length in world units, width is half of it
        """
        half_length = size / 2.0
        half_width = size / 4.0
        cos_angle = math.cos(heading)
        sin_angle = math.sin(heading)

        corners = []
        for corner_x, corner_y in ((-half_length, -half_width), (half_length, -half_width),
                                   (half_length, half_width), (-half_length, half_width)):
            world_x = position[0] + corner_x * cos_angle - corner_y * sin_angle
            world_y = position[1] + corner_x * sin_angle + corner_y * cos_angle
            corners.append(self.camera.world_to_screen((world_x, world_y)))
        pygame.draw.polygon(self.window, color, corners)

    def _render_player(self, player: dict):
        position = (player["x"], player["y"])
        self._render_vehicle(position, player["heading"], PLAYER_COLOR, PLAYER_DRAW_SIZE)
        if player["shield"] > 0:
            pygame.draw.circle(self.window, SHIELD_COLOR, self.camera.world_to_screen(position),
                               self.camera.scale(PLAYER_DRAW_SIZE), 2)

    def _render_contacts(self, contacts, now: float):
        for contact in contacts:
            fade = 1.0 - (now - contact["timestamp"]) / CONTACT_MARKER_TIME
            if fade <= 0:
                continue
            center = self.camera.world_to_screen((contact["x"], contact["y"]))
            radius = self.camera.scale(CONTACT_MARKER_RADIUS * (2.0 - fade))
            pygame.draw.circle(self.window, FLASH_COLOR, center, max(1, radius), 1)

    def _render_weather(self, weather_id: str, count: int):
        self.weather.sync(weather_id, count)
        if not len(self.weather):
            return
        self.weather.advance()
        color = FOG_PARTICLE_COLOR if weather_id == "fog" else RAIN_PARTICLE_COLOR
        layer = pygame.Surface(self.window_size, pygame.SRCALPHA)
        for rect in self.weather.streaks():
            layer.fill((*color, WEATHER_PARTICLE_ALPHA), pygame.Rect(rect))
        self.window.blit(layer, (0, 0))

    def _render_hud(self, snapshot: dict):
        player = snapshot["player"]
        lines = [
            f"Score: {int(snapshot['score'])}",
            f"Best: {int(snapshot['best_score'])}",
            f"Combo: {int(snapshot['combo'])}x",
            f"Speed: {int(player['speed'])}",
            f"Heat: {int(snapshot['heat'])}%",
            f"Lives: {snapshot['lives']}",
            f"Wave: {snapshot['wave']}",
            f"Objective: {snapshot['objective']}",
            f"Boost: {int(player['boost'])}  Pulse: {int(player['pulse_charge'])}  Shield: {player['shield']:.1f}s",
        ]
        y = FPS_TEXT_MARGIN
        for line in lines:
            text = self.font.render(line, True, HUD_TEXT_COLOR)
            self.window.blit(text, (FPS_TEXT_MARGIN, y))
            y += text.get_height() + 2

        message = self.font.render(snapshot["message"], True, HUD_TEXT_COLOR)
        rect = message.get_rect()
        rect.centerx = self.window_size[0] // 2
        rect.bottom = self.window_size[1] - FPS_TEXT_MARGIN
        self.window.blit(message, rect)

        if self.clock is not None:
            fps_text = self.font.render(f"FPS: {self.clock.get_fps():.1f}", True, HUD_TEXT_COLOR)
            fps_rect = fps_text.get_rect()
            fps_rect.right = self.window_size[0] - FPS_TEXT_MARGIN
            fps_rect.top = FPS_TEXT_MARGIN
            self.window.blit(fps_text, fps_rect)

    def _render_minimap(self, snapshot: dict):
        if self.map_config is None:
            return
        left = self.window_size[0] - MINIMAP_WIDTH - MINIMAP_MARGIN
        top = self.window_size[1] - MINIMAP_HEIGHT - MINIMAP_MARGIN
        pygame.draw.rect(self.window, MINIMAP_BG_COLOR, pygame.Rect(left, top, MINIMAP_WIDTH, MINIMAP_HEIGHT))

        sx = MINIMAP_WIDTH / (2 * self.map_config.half_width)
        sy = MINIMAP_HEIGHT / (2 * self.map_config.half_height)

        def to_minimap(x, y):
            return (int(left + (x + self.map_config.half_width) * sx),
                    int(top + (y + self.map_config.half_height) * sy))

        for agent in snapshot["agents"]:
            pygame.draw.circle(self.window, AGENT_COLORS[agent["kind"]], to_minimap(agent["x"], agent["y"]), 2)
        player = snapshot["player"]
        pygame.draw.circle(self.window, PLAYER_COLOR, to_minimap(player["x"], player["y"]), 3)

    def _render_overlay(self, color: tuple, alpha: int):
        overlay = pygame.Surface(self.window_size, pygame.SRCALPHA)
        overlay.fill((*color, max(0, min(255, alpha))))
        self.window.blit(overlay, (0, 0))

    def _render_centered_text(self, text: str):
        surface = self.font.render(text, True, HUD_TEXT_COLOR)
        rect = surface.get_rect(center=(self.window_size[0] // 2, self.window_size[1] // 2))
        self.window.blit(surface, rect)
