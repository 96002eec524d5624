"""Shared helpers for the background tests."""
import random
import pygame

from crackfield.config.settings import BackgroundSettings
from crackfield.core.background import CrackInjectionBackground
from crackfield.core.crack import Crack, CrackPoint

WIDTH = 800
HEIGHT = 600


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_background(seed=7, populate=False, clock=None, **settings):
    surface = pygame.Surface((WIDTH, HEIGHT))
    return CrackInjectionBackground(surface, BackgroundSettings(**settings),
                                    rng=random.Random(seed), clock=clock or FakeClock(),
                                    populate=populate)


def make_crack(*coords, width=1.0, reveal_speed=0.01):
    points = [CrackPoint(x, y, width) for x, y in coords]
    return Crack(points, base_width=width, max_width=width * 2, reveal_speed=reveal_speed)
