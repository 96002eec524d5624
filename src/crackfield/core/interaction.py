"""Pointer, scroll and resize input for a background."""
from typing import Iterable, List, Optional, Tuple
import logging
import random
import pygame

from .generator import CrackGenerator
from .injection import Injection
from .state import BackgroundState, InteractionState
from ..config.settings import BackgroundSettings, crack as crack_config, injection as injection_config
from ..utils.geometry import Point


class PointerController:
    """Translates input callbacks into injections and new cracks.

    The host wires its native input events to the ``on_*`` callbacks, which
    can also be called directly with synthetic coordinates.
    """

    def __init__(self, state: BackgroundState, settings: BackgroundSettings,
                 generator: CrackGenerator, rng: random.Random,
                 exclusion_zones: Optional[Iterable[pygame.Rect]] = None):
        """Initialize the controller.

        Args:
            state: State of the background
            settings: Live settings of the background
            generator: Generator used for scroll-triggered cracks
            rng: Random source
            exclusion_zones: Overlay regions where presses do not inject
        """
        self.state = state
        self.settings = settings
        self.generator = generator
        self.rng = rng
        self.exclusion_zones: List[pygame.Rect] = [pygame.Rect(r) for r in exclusion_zones or ()]

    @property
    def interaction(self) -> InteractionState:
        return self.state.interaction

    def is_excluded(self, pos: Point) -> bool:
        """Check if a position lies over an overlay region."""
        return any(zone.collidepoint(pos) for zone in self.exclusion_zones)

    def add_injection(self, pos: Point) -> Optional[Injection]:
        """Start an injection at ``pos``.

        Returns:
            The new injection, or None once the background is disposed
        """
        if self.state.disposed:
            return None
        if self.settings.low_quality:
            particle_count = injection_config.LOW_QUALITY_PARTICLE_COUNT
        else:
            particle_count = injection_config.PARTICLE_COUNT
        injection = Injection.create(pos[0], pos[1],
                                     self.settings.injection_radius,
                                     self.settings.injection_speed,
                                     particle_count, self.rng)
        self.state.injections.append(injection)
        return injection

    def on_pointer_down(self, pos: Point) -> None:
        if self.state.disposed:
            return
        self.state.pointer = (float(pos[0]), float(pos[1]))
        if self.is_excluded(pos):
            return
        self.state.interaction = InteractionState.INJECTING
        self.state.pressed_at = self.state.pointer
        self.add_injection(pos)

    def on_pointer_move(self, pos: Point) -> None:
        if self.state.disposed:
            return
        self.state.pointer = (float(pos[0]), float(pos[1]))
        if self.state.interaction == InteractionState.INJECTING:
            self.add_injection(pos)

    def on_pointer_up(self, pos: Point) -> None:
        if self.state.disposed:
            return
        self.state.pointer = (float(pos[0]), float(pos[1]))
        self.state.interaction = InteractionState.IDLE

    def on_click(self, pos: Point) -> None:
        """A press and release without drag.

        Clicks arrive after the release. When the press at the same position
        already injected, the click only consumes that press; a click is
        therefore always worth exactly one injection.
        """
        state = self.state
        if state.disposed or state.interaction == InteractionState.INJECTING:
            return
        pos = (float(pos[0]), float(pos[1]))
        pressed_at, state.pressed_at = state.pressed_at, None
        if pressed_at == pos or self.is_excluded(pos):
            return
        self.add_injection(pos)

    def on_scroll(self, scroll_y: float) -> None:
        """Feed the current scroll offset.

        Args:
            scroll_y: Absolute vertical scroll offset in pixels
        """
        state = self.state
        if state.disposed:
            return
        sensitivity = self.settings.scroll_sensitivity
        delta = abs(scroll_y - state.last_scroll_y)
        state.last_scroll_y = scroll_y

        if delta <= crack_config.SCROLL_THRESHOLD:
            state.growth_boost = 0.0
            return

        state.growth_boost = min(1.0, delta / 100 * sensitivity)
        if (not self.settings.low_quality
                and self.rng.random() < sensitivity * 0.2
                and len(state.cracks) < self.settings.crack_count * 0.8):
            crack = self.generator.spawn_random_crack()
            logging.debug(f"Scroll of {delta:.0f}px spawned {crack}")

    def on_resize(self, size: Tuple[int, int]) -> None:
        """Resize the viewport. Existing cracks are kept as they are."""
        if self.state.disposed:
            return
        width, height = size
        if (width, height) == self.state.size:
            return
        self.state.width = int(width)
        self.state.height = int(height)
        logging.info(f"Resized background to {width}x{height}")
