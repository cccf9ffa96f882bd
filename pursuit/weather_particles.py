"""
Screen-space weather particles.

Rain, fog and storm drops live in window pixels rather than world units:
they fall past the camera regardless of where the player drives. The
count follows the active weather and the whole field is regenerated when
the weather changes.
"""

import numpy as np
from typing import Optional, Tuple
from .constants import (
    WEATHER_PARTICLE_STEP,
    WEATHER_PARTICLE_MIN_VX,
    WEATHER_PARTICLE_MAX_VX,
    WEATHER_PARTICLE_MIN_VY,
    WEATHER_PARTICLE_MAX_VY,
    WEATHER_PARTICLE_MIN_SIZE,
    WEATHER_PARTICLE_MAX_SIZE,
    WEATHER_PARTICLE_EDGE,
    WEATHER_PARTICLE_REENTRY_Y,
)

# Column layout of the particle array
X, Y, VX, VY, SIZE = range(5)


class WeatherParticles:
    def __init__(self, window_size: Tuple[int, int], rng: Optional[np.random.Generator] = None):
        self.window_size = window_size
        self.rng = rng or np.random.default_rng()
        self.weather_id: Optional[str] = None
        self.particles = np.zeros((0, 5))

    def __len__(self) -> int:
        return len(self.particles)

    def sync(self, weather_id: str, count: int) -> None:
        """Regenerate the field when the weather or its particle count changed"""
        if weather_id == self.weather_id and count == len(self.particles):
            return
        self.weather_id = weather_id
        width, height = self.window_size
        particles = np.empty((max(0, count), 5))
        particles[:, X] = self.rng.uniform(0, width, len(particles))
        particles[:, Y] = self.rng.uniform(0, height, len(particles))
        particles[:, VX] = self.rng.uniform(WEATHER_PARTICLE_MIN_VX, WEATHER_PARTICLE_MAX_VX, len(particles))
        particles[:, VY] = self.rng.uniform(WEATHER_PARTICLE_MIN_VY, WEATHER_PARTICLE_MAX_VY, len(particles))
        particles[:, SIZE] = self.rng.uniform(WEATHER_PARTICLE_MIN_SIZE, WEATHER_PARTICLE_MAX_SIZE, len(particles))
        self.particles = particles

    def advance(self) -> None:
        """Move every drop one frame and wrap the ones that left the window"""
        if not len(self.particles):
            return
        width, height = self.window_size
        p = self.particles
        p[:, X] += p[:, VX] * WEATHER_PARTICLE_STEP
        p[:, Y] += p[:, VY] * WEATHER_PARTICLE_STEP

        # Drops that fell out of the bottom come back in above the top
        fallen = p[:, Y] > height + WEATHER_PARTICLE_EDGE
        p[fallen, Y] = WEATHER_PARTICLE_REENTRY_Y
        p[fallen, X] = self.rng.uniform(0, width, int(fallen.sum()))

        p[p[:, X] > width + WEATHER_PARTICLE_EDGE, X] = -WEATHER_PARTICLE_EDGE
        p[p[:, X] < -WEATHER_PARTICLE_EDGE, X] = width + WEATHER_PARTICLE_EDGE

    def streaks(self):
        """Yield (x, y, width, height) rectangles, one per drop"""
        for x, y, _, _, size in self.particles:
            yield int(x), int(y), max(1, int(size)), max(1, int(size * 4))
