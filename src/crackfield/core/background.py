"""The crack injection background: per-frame update and rendering."""
from typing import Any, Callable, Iterable, Optional
import logging
import random
import pygame

from .crack_field import CrackField
from .generator import CrackGenerator
from .interaction import PointerController
from .state import BackgroundState
from ..config import settings as config
from ..config.settings import BackgroundSettings


def reveal_cracks(state: BackgroundState) -> None:
    """Advance every crack's reveal, boosted by recent scrolling."""
    for crack in state.cracks:
        crack.reveal(state.growth_boost)


def advance_injections(state: BackgroundState, settings: BackgroundSettings, fill: bool = True) -> None:
    """Grow and age the injections, fill the cracks they cover and drop expired ones.

    Args:
        state: Background state
        settings: Live settings, the injection radius is re-read every tick
        fill: Whether to fill crack points this tick
    """
    alive = []
    for injection in state.injections:
        injection.advance(settings.injection_radius)
        if fill:
            state.cracks.fill_within(injection.x, injection.y, injection.radius)
        if not injection.expired:
            alive.append(injection)
    state.injections = alive


def render(state: BackgroundState, surface: pygame.Surface, rng: random.Random, shading: bool = True) -> None:
    """Paint one frame.

    Args:
        state: Background state
        surface: Target surface
        rng: Random source for the stroke darkness jitter
        shading: Draw the pseudo-3D shadow and highlight strokes
    """
    size = surface.get_size()
    surface.fill(config.display.BACKGROUND_COLOR)

    for injection in state.injections:
        injection.draw(surface)

    crack_layer = pygame.Surface(size, pygame.SRCALPHA)
    shadow_layer = None
    if shading:
        shadow_layer = pygame.Surface(size)
        shadow_layer.fill((255, 255, 255))
    for crack in state.cracks:
        crack.draw(crack_layer, shadow_layer, state.pointer, rng)

    if shadow_layer is not None:
        surface.blit(shadow_layer, (0, 0), special_flags=pygame.BLEND_RGB_MULT)
    surface.blit(crack_layer, (0, 0))


class CrackInjectionBackground:
    """Animated crack field drawn onto a surface.

    Call ``tick`` once per frame and feed input through ``controller``.
    ``dispose`` ends the background for good.
    """

    def __init__(self, surface: pygame.Surface, settings: Optional[BackgroundSettings] = None,
                 rng: Optional[random.Random] = None, clock: Optional[Callable[[], float]] = None,
                 exclusion_zones: Optional[Iterable[pygame.Rect]] = None,
                 populate: bool = True):
        """Mount the background on a surface.

        Args:
            surface: Surface to draw on, usually the display surface
            settings: Runtime settings, defaults if omitted
            rng: Random source, seed it for reproducible output
            clock: Millisecond clock, defaults to ``pygame.time.get_ticks``
            exclusion_zones: Overlay regions where presses do not inject
            populate: Generate the initial crack field
        """
        self.surface: Optional[pygame.Surface] = surface
        self.settings = settings or BackgroundSettings()
        self.rng = rng or random.Random()
        # Stroke jitter draws from its own stream so rendering never shifts the geometry
        self.render_rng = random.Random(self.rng.getrandbits(32))
        self.clock = clock or pygame.time.get_ticks

        width, height = surface.get_size()
        self.state = BackgroundState(width=width, height=height,
                                     cracks=CrackField(self.settings.crack_count),
                                     last_crack_time=self.clock())
        self.generator = CrackGenerator(self.state, self.settings, self.rng)
        self.controller = PointerController(self.state, self.settings, self.generator,
                                            self.rng, exclusion_zones)

        if populate:
            self.generator.create_cracks()
        logging.info(f"Mounted background {width}x{height}: {self.settings}")

    @property
    def disposed(self) -> bool:
        return self.surface is None

    @property
    def cracks(self):
        return self.state.cracks.cracks

    @property
    def injections(self):
        return list(self.state.injections)

    def tick(self) -> bool:
        """Run one frame.

        Returns:
            False if the background has been disposed and nothing was done
        """
        if self.surface is None:
            return False

        state = self.state
        settings = self.settings
        state.time += 0.01
        state.frame += 1

        now = self.clock()
        interval = settings.crack_interval + (self.rng.random() - 0.5) * settings.crack_interval * 0.5
        if now - state.last_crack_time > interval:
            if self.rng.random() > 0.3 and len(state.cracks) < settings.crack_count * 0.9:
                crack = self.generator.spawn_random_crack()
                logging.debug(f"Autonomous crack {crack}")
            state.last_crack_time = now

        reveal_cracks(state)
        # The scroll boost only lasts for the tick after the scroll
        state.growth_boost = 0.0

        fill = not settings.low_quality or state.frame % 2 == 0
        advance_injections(state, settings, fill=fill)
        render(state, self.surface, self.render_rng, shading=not settings.low_quality)
        return True

    def update_setting(self, key: str, value: Any) -> None:
        """Change a setting while running.

        Args:
            key: One of ``BackgroundSettings.keys()``
            value: New value

        Raises:
            ValueError: If the key is unknown or the value invalid
        """
        if key not in BackgroundSettings.keys():
            raise ValueError(f"Unknown setting {key!r}")
        if key == 'crack_count' and value < 1:
            raise ValueError(f"crack_count must be positive, got {value}")
        if key == 'scroll_sensitivity':
            value = min(1.0, max(0.0, value))

        setattr(self.settings, key, value)
        logging.info(f"Setting {key} = {value}")

        if key == 'crack_count':
            self.state.cracks.limit = value
            evicted = self.state.cracks.trim(value)
            if evicted:
                logging.info(f"Evicted {evicted} oldest cracks")
        elif key in ('injection_radius', 'injection_speed'):
            for injection in self.state.injections:
                injection.max_radius = self.settings.injection_radius
                injection.speed = self.settings.injection_speed

    def regenerate(self) -> None:
        """Throw the current cracks away and grow a new field."""
        if self.surface is None:
            return
        self.generator.create_cracks()

    def resize(self, surface: pygame.Surface) -> None:
        """Move to a new surface of possibly different size."""
        if self.surface is None:
            return
        self.surface = surface
        self.controller.on_resize(surface.get_size())

    def dispose(self) -> None:
        """Release the surface and drop all state. Safe to call twice."""
        if self.surface is None:
            return
        self.surface = None
        self.state.disposed = True
        self.state.cracks.clear()
        self.state.injections = []
        self.controller.exclusion_zones = []
        logging.info("Disposed background")
