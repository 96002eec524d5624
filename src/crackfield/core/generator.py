"""Procedural crack generation by biased random walks."""
from typing import List, Tuple
import logging
import math
import random

from .crack import Crack, CrackPoint
from .state import BackgroundState
from ..config.settings import BackgroundSettings, crack as config
from ..utils.geometry import Point, out_of_bounds, width_ramp


class CrackGenerator:
    """Grows cracks into a background's crack field.

    Every new crack goes through ``CrackField.add`` so the population limit
    is enforced on each push, including branches grown in the middle of
    another walk.
    """

    def __init__(self, state: BackgroundState, settings: BackgroundSettings, rng: random.Random):
        """Initialize the generator.

        Args:
            state: State of the background owning the crack field
            settings: Live settings of the background
            rng: Random source, seed it for reproducible geometry
        """
        self.state = state
        self.settings = settings
        self.rng = rng

    def create_cracks(self) -> None:
        """Replace the field with a fresh set of edge cracks and branches."""
        self.state.cracks.clear()
        if self.settings.low_quality:
            main_count = self.rng.randint(6, 9)
            branch_count = self.rng.randint(4, 7)
        else:
            main_count = self.rng.randint(8, 12)
            branch_count = self.rng.randint(5, 10)

        for _ in range(main_count):
            self.spawn_edge_crack()
        for _ in range(branch_count):
            self.branch_from_existing()

        logging.info(f"Generated crack field: {main_count} main cracks, {branch_count} branches, "
                     f"{len(self.state.cracks)} total")

    def spawn_edge_crack(self) -> Crack:
        """Start a main crack from a random point on a random screen edge."""
        width, height = self.state.size
        edge = self.rng.randrange(4)
        if edge == 0:    # top
            origin = (self.rng.random() * width, 0.0)
        elif edge == 1:  # right
            origin = (float(width), self.rng.random() * height)
        elif edge == 2:  # bottom
            origin = (self.rng.random() * width, float(height))
        else:            # left
            origin = (0.0, self.rng.random() * height)
        return self.grow_path(origin, is_main=True)

    def spawn_interior_crack(self) -> Crack:
        """Start a secondary crack from a random point inside the screen."""
        width, height = self.state.size
        return self.grow_path((self.rng.random() * width, self.rng.random() * height), is_main=False)

    def spawn_random_crack(self) -> Crack:
        """Autonomous crack: mostly fresh interior cracks, sometimes a branch."""
        if len(self.state.cracks) > 0 and self.rng.random() < 0.4:
            return self.branch_from_existing()
        return self.spawn_interior_crack()

    def branch_from_existing(self) -> Crack:
        """Grow a branch off an interior point of a random existing crack.

        Falls back to an interior crack when there is nothing to branch from.
        """
        cracks = self.state.cracks
        if len(cracks) == 0:
            return self.spawn_interior_crack()

        parent = cracks[self.rng.randrange(len(cracks))]
        if len(parent.points) < 3:
            return self.spawn_interior_crack()

        # Never the first or last point
        index = self.rng.randrange(1, len(parent.points) - 1)
        point = parent.points[index]
        following = parent.points[index + 1]
        heading = math.atan2(following.y - point.y, following.x - point.x)
        side = math.pi / 2 if self.rng.random() < 0.5 else -math.pi / 2
        angle = heading + (self.rng.random() - 0.5) * 2.5 + side
        return self.grow_branch(point.pos, angle)

    def grow_path(self, origin: Point, is_main: bool) -> Crack:
        """Walk a crack from ``origin`` and add it to the field.

        Args:
            origin: Starting point
            is_main: Main cracks are longer, wider and head toward the centre

        Returns:
            The new crack
        """
        rng = self.rng
        width, height = self.state.size
        low_quality = self.settings.low_quality

        if low_quality:
            segments = rng.randrange(25, 50) if is_main else rng.randrange(15, 35)
        else:
            segments = rng.randrange(40, 90) if is_main else rng.randrange(25, 65)

        x, y = origin
        if is_main:
            heading = math.atan2(height / 2 - y, width / 2 - x) + (rng.random() - 0.5) * 0.5
        else:
            heading = rng.random() * math.pi * 2

        base_width = rng.uniform(1.0, 2.5) if is_main else rng.uniform(0.4, 1.6)
        max_width = base_width * (1.5 + rng.random() * 1.5)
        attraction_chance = 0.05 if low_quality else 0.15

        points: List[CrackPoint] = []
        for step in range(segments):
            progress = step / segments
            grown = width_ramp(progress, 0.3, 0.5)
            point_width = base_width + (max_width - base_width) * grown + rng.random() * 0.3
            points.append(CrackPoint(x, y, _clamp(point_width, config.MIN_WIDTH, config.MAX_WIDTH)))

            sharp_turn = (rng.random() - 0.5) * 2.5 if rng.random() < 0.2 else 0.0
            angle = heading + (rng.random() - 0.5) * 1.8 + sharp_turn
            heading = angle + (rng.random() - 0.5) * 0.6

            if rng.random() < 0.3:
                length = rng.uniform(3, 11)
            else:
                length = rng.uniform(10, 40)
            x += math.cos(angle) * length
            y += math.sin(angle) * length

            if len(self.state.cracks) > 0 and rng.random() < attraction_chance:
                x, y = self._attract((x, y), angle, length)

            if out_of_bounds(x, y, width, height, config.BOUNDS_MARGIN):
                break

            if not low_quality and rng.random() < 0.08 and segments * 0.3 < step < segments * 0.9:
                self.grow_branch((x, y), angle + (rng.random() - 0.5) * 2.0)

        crack = Crack(points, base_width, max_width, reveal_speed=rng.uniform(0.001, 0.004))
        self.state.cracks.add(crack)
        return crack

    def grow_branch(self, origin: Point, angle: float) -> Crack:
        """Walk a short, thin branch from ``origin`` and add it to the field.

        Args:
            origin: Starting point
            angle: Initial heading in radians

        Returns:
            The new branch
        """
        rng = self.rng
        width, height = self.state.size
        segments = rng.randrange(6, 21)
        base_width = rng.uniform(0.2, 1.0)
        max_width = base_width * (1.2 + rng.random() * 0.8)

        x, y = origin
        points: List[CrackPoint] = []
        for step in range(segments):
            grown = width_ramp(step / segments, 0.4, 0.6)
            point_width = base_width + (max_width - base_width) * grown
            points.append(CrackPoint(x, y, _clamp(point_width, config.BRANCH_MIN_WIDTH, config.BRANCH_MAX_WIDTH)))

            sharp_turn = (rng.random() - 0.5) * 2.2 if rng.random() < 0.25 else 0.0
            angle = angle + (rng.random() - 0.5) * 1.5 + sharp_turn

            length = rng.uniform(3, 13)
            x += math.cos(angle) * length
            y += math.sin(angle) * length

            if out_of_bounds(x, y, width, height, config.BOUNDS_MARGIN):
                break

        crack = Crack(points, base_width, max_width, reveal_speed=rng.uniform(0.003, 0.008))
        self.state.cracks.add(crack)
        return crack

    def _attract(self, position: Point, angle: float, length: float) -> Tuple[float, float]:
        """Bend the walk toward the nearest crack when one is close."""
        nearest = self.state.cracks.nearest_point(*position)
        if nearest is None or nearest[2] >= config.ATTRACTION_DISTANCE:
            return position
        x, y = position
        toward = math.atan2(nearest[1] - y, nearest[0] - x)
        bent = angle + (toward - angle) * 0.4
        return (x + math.cos(bent) * length * 0.6,
                y + math.sin(bent) * length * 0.6)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
