"""Crack component for the background effect."""
from dataclasses import dataclass
from typing import List, Optional
import math
import random
import numpy
import pygame

from ..config.settings import crack as config
from ..utils.geometry import Point, angle_to, perpendicular_offset, pointer_displacement


@dataclass
class CrackPoint:
    """A single vertex of a crack."""
    x: float
    y: float
    width: float
    filled: bool = False

    @property
    def pos(self) -> Point:
        return (self.x, self.y)


class Crack:
    """A jagged polyline that reveals itself over time and can be filled."""

    def __init__(self, points: List[CrackPoint], base_width: float,
                 max_width: float, reveal_speed: float):
        """Initialize a new crack.

        Args:
            points: Vertices of the crack, in walk order
            base_width: Stroke width at the start of the crack
            max_width: Stroke width the crack widens toward
            reveal_speed: Increment of reveal progress per tick
        """
        self._points = tuple(points)
        self.base_width = base_width
        self.max_width = max_width
        self.reveal_speed = reveal_speed
        self.reveal_progress = 0.0
        self._coordinates: Optional[numpy.ndarray] = None

    @property
    def points(self):
        """The vertices. The sequence itself never changes after creation."""
        return self._points

    @property
    def coordinates(self) -> numpy.ndarray:
        """(n, 2) array of point coordinates."""
        if self._coordinates is None:
            self._coordinates = numpy.array([(p.x, p.y) for p in self._points],
                                            dtype=float).reshape(-1, 2)
        return self._coordinates

    def __len__(self) -> int:
        return len(self._points)

    def reveal(self, boost: float = 0.0) -> None:
        """Advance the reveal progress.

        Args:
            boost: Scroll growth boost in [0, 1], up to triples the speed
        """
        if self.reveal_progress >= 1:
            return
        self.reveal_progress = min(1.0, self.reveal_progress + self.reveal_speed * (1 + boost * 2))

    def visible_points(self) -> List[CrackPoint]:
        """Points currently revealed (always at least one)."""
        count = max(1, int(math.floor(len(self._points) * self.reveal_progress)))
        return list(self._points[:count])

    def draw(self, layer: pygame.Surface, shadow_layer: Optional[pygame.Surface],
             pointer: Point, rng: random.Random) -> None:
        """Draw the crack.

        Args:
            layer: Per-pixel alpha surface receiving the crack strokes
            shadow_layer: White surface multiplied onto the frame afterwards,
                or None to skip pseudo-3D shading
            pointer: Current pointer position, for the push-away effect
            rng: Random source for the darkness jitter
        """
        if not self._points or self.reveal_progress <= 0:
            return

        progress = self.reveal_progress
        visible = self.visible_points()
        displaced = [pointer_displacement(p.pos, pointer, config.POINTER_RADIUS, config.POINTER_FORCE)
                     for p in visible]

        for i in range(1, len(visible)):
            point = visible[i]
            prev = visible[i - 1]
            # Filled stretches are drawn below in the fill colour
            if point.filled and prev.filled:
                continue

            start = displaced[i - 1]
            end = displaced[i]
            width = point.width or self.base_width or 1
            darkness = 0.85 + rng.random() * 0.15
            pygame.draw.line(layer, (*config.COLOR, int(255 * darkness * progress)),
                             start, end, _stroke(width))

            if shadow_layer is None:
                continue
            angle = angle_to(start, end)
            if width > config.SHADOW_WIDTH and progress > config.SHADOW_REVEAL:
                ox, oy = perpendicular_offset(angle, width * 0.3)
                shade = int(255 * (1 - 0.4 * progress))
                pygame.draw.line(shadow_layer, (shade, shade, shade),
                                 (start[0] + ox, start[1] + oy), (end[0] + ox, end[1] + oy),
                                 _stroke(width * 0.3))
            if width > config.HIGHLIGHT_WIDTH and progress > config.HIGHLIGHT_REVEAL:
                ox, oy = perpendicular_offset(angle, -width * 0.25)
                pygame.draw.line(layer, (*config.HIGHLIGHT_COLOR, int(255 * 0.3 * progress)),
                                 (start[0] + ox, start[1] + oy), (end[0] + ox, end[1] + oy),
                                 _stroke(width * 0.2))

        self.draw_filled(layer)

    def draw_filled(self, layer: pygame.Surface) -> None:
        """Draw runs of consecutive filled points in the injection colour."""
        for prev, point in zip(self._points, self._points[1:]):
            if prev.filled and point.filled:
                pygame.draw.line(layer, config.FILLED_COLOR, prev.pos, point.pos,
                                 _stroke(point.width * config.FILLED_WIDTH_SCALE))

    def __repr__(self) -> str:
        return f"Crack(points={len(self._points)}, reveal={self.reveal_progress:.2f})"


def _stroke(width: float) -> int:
    return max(1, int(round(width)))
