"""Ordered crack population with oldest-first eviction."""
from typing import Iterator, List, Optional, Tuple
import logging
import numpy
from scipy.spatial import cKDTree

from .crack import Crack


class CrackField:
    """Owns the cracks of one background, in creation order.

    A spatial index over every crack point is rebuilt lazily whenever the
    population changes. Crack geometry never changes after creation, so the
    index stays valid between additions and evictions.
    """

    def __init__(self, limit: int):
        self.limit = limit
        self._cracks: List[Crack] = []
        self._tree: Optional[cKDTree] = None
        self._owners: List[Tuple[Crack, int]] = []

    def __len__(self) -> int:
        return len(self._cracks)

    def __iter__(self) -> Iterator[Crack]:
        return iter(list(self._cracks))

    def __getitem__(self, index: int) -> Crack:
        return self._cracks[index]

    @property
    def cracks(self) -> List[Crack]:
        return list(self._cracks)

    def add(self, crack: Crack) -> None:
        """Append a crack, evicting the oldest ones beyond the limit."""
        self._cracks.append(crack)
        self.trim(self.limit)
        self._tree = None

    def trim(self, limit: int) -> int:
        """Evict oldest cracks until at most ``limit`` remain.

        Returns:
            Number of evicted cracks
        """
        evicted = 0
        while len(self._cracks) > limit:
            self._cracks.pop(0)
            evicted += 1
        if evicted:
            self._tree = None
        return evicted

    def clear(self) -> None:
        self._cracks = []
        self._tree = None

    def _index(self) -> Optional[cKDTree]:
        if self._tree is None:
            self._owners = [(c, i) for c in self._cracks for i in range(len(c))]
            if not self._owners:
                return None
            coords = numpy.concatenate([c.coordinates for c in self._cracks if len(c)])
            self._tree = cKDTree(coords)
            logging.debug(f"Rebuilt crack index: {len(self._owners)} points")
        return self._tree

    def nearest_point(self, x: float, y: float) -> Optional[Tuple[float, float, float]]:
        """Find the nearest crack point.

        Returns:
            (x, y, distance) of the nearest point, or None if there are no cracks
        """
        tree = self._index()
        if tree is None:
            return None
        dist, idx = tree.query((x, y))
        crack, i = self._owners[int(idx)]
        point = crack.points[i]
        return point.x, point.y, float(dist)

    def fill_within(self, x: float, y: float, radius: float) -> int:
        """Mark every point strictly closer than ``radius`` as filled.

        Returns:
            Number of points that became filled
        """
        if radius <= 0:
            return 0
        tree = self._index()
        if tree is None:
            return 0
        r2 = radius * radius
        newly_filled = 0
        for idx in tree.query_ball_point((x, y), radius):
            crack, i = self._owners[idx]
            point = crack.points[i]
            if point.filled:
                continue
            dx = x - point.x
            dy = y - point.y
            if dx * dx + dy * dy < r2:
                point.filled = True
                newly_filled += 1
        return newly_filled
