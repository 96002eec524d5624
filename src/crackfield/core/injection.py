"""Injection effect: a growing disc that fills the cracks it passes over."""
from dataclasses import dataclass
from typing import List
import math
import random
import pygame

from ..config.settings import injection as config


@dataclass
class Particle:
    """A dot travelling outward from its injection's centre."""
    angle: float
    distance: float
    max_distance: float
    speed: float
    size: float

    @property
    def visible(self) -> bool:
        return self.distance < self.max_distance


class Injection:
    """Transient radial fill effect."""

    def __init__(self, x: float, y: float, max_radius: float, speed: float,
                 particles: List[Particle]):
        self.x = x
        self.y = y
        self.radius = 0.0
        self.max_radius = max_radius
        self.life = 1.0
        self.speed = speed
        self.particles = particles

    @classmethod
    def create(cls, x: float, y: float, max_radius: float, speed: float,
               particle_count: int, rng: random.Random) -> 'Injection':
        """Create an injection with randomly scattered particles.

        Args:
            x, y: Centre of the injection
            max_radius: Radius beyond which the injection is removed
            speed: Radius growth per tick
            particle_count: Number of particles to emit
            rng: Random source

        Returns:
            The new injection
        """
        particles = [Particle(angle=rng.random() * math.pi * 2,
                              distance=0.0,
                              max_distance=rng.random() * 40 + 20,
                              speed=rng.random() + 0.5,
                              size=rng.random() * 3 + 1)
                     for _ in range(particle_count)]
        return cls(x, y, max_radius, speed, particles)

    def advance(self, max_radius: float) -> None:
        """Grow, age and move the particles by one tick.

        Args:
            max_radius: Current injection radius setting
        """
        self.radius += self.speed
        self.life -= config.LIFE_DECAY
        self.max_radius = max_radius
        for particle in self.particles:
            particle.distance += particle.speed

    @property
    def expired(self) -> bool:
        return self.life <= 0 or self.radius > self.max_radius

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the gradient disc and the particles.

        The injection is painted on its own layer and blitted, so overlapping
        injections blend instead of overwriting each other.

        Args:
            surface: Surface to draw on
        """
        if self.radius <= 0:
            return
        extent = self.radius
        for particle in self.particles:
            if particle.visible:
                extent = max(extent, particle.distance + particle.size)
        extent = int(math.ceil(extent)) + 1
        layer = pygame.Surface((extent * 2, extent * 2), pygame.SRCALPHA)
        centre = (extent, extent)

        # Approximate the radial gradient with concentric discs, outermost first
        rings = config.GRADIENT_RINGS
        for ring in range(rings, 0, -1):
            t = ring / rings
            radius = self.radius * t
            if t <= 0.6:
                alpha = self.life * (0.7 - 0.2 * t / 0.6)
            else:
                alpha = self.life * 0.5 * (1 - t) / 0.4
            if alpha <= 0:
                continue
            pygame.draw.circle(layer, (*config.COLOR, _alpha(alpha)), centre, radius)

        for particle in self.particles:
            if particle.visible:
                px = extent + math.cos(particle.angle) * particle.distance
                py = extent + math.sin(particle.angle) * particle.distance
                pygame.draw.circle(layer, (*config.COLOR, _alpha(self.life * 0.6)), (px, py), particle.size)

        surface.blit(layer, (self.x - extent, self.y - extent))

    def __repr__(self) -> str:
        return f"Injection(({self.x:.0f}, {self.y:.0f}), r={self.radius:.1f}, life={self.life:.2f})"


def _alpha(value: float) -> int:
    return max(0, min(255, int(255 * value)))
