"""Crack field configuration settings."""
from dataclasses import dataclass, fields
from typing import Tuple
import os
import pygame
import logging

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(module)s:%(lineno)d %(levelname)s %(asctime)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('crackfield.log', mode='a')
    ]
)


@dataclass
class DisplayConfig:
    """Display-related configuration."""
    WINDOW_WIDTH: int = 1200
    WINDOW_HEIGHT: int = 800
    CAPTION: str = "Crack Field"
    BACKGROUND_COLOR: Tuple[int, int, int] = (233, 236, 239)
    FPS: int = 60
    LOW_QUALITY_FPS: int = 30
    SCROLL_STEP: int = 40  # pixels of virtual scroll per wheel notch
    RESIZE_DEBOUNCE_MS: int = 150


@dataclass
class CrackConfig:
    """Crack geometry and rendering configuration."""
    COLOR: Tuple[int, int, int] = (20, 20, 20)
    SHADOW_COLOR: Tuple[int, int, int] = (0, 0, 0)
    HIGHLIGHT_COLOR: Tuple[int, int, int] = (60, 60, 60)
    FILLED_COLOR: Tuple[int, int, int, int] = (3, 17, 103, 153)
    MIN_WIDTH: float = 0.3
    MAX_WIDTH: float = 5.0
    BRANCH_MIN_WIDTH: float = 0.2
    BRANCH_MAX_WIDTH: float = 2.0
    SHADOW_WIDTH: float = 1.2
    SHADOW_REVEAL: float = 0.2
    HIGHLIGHT_WIDTH: float = 1.5
    HIGHLIGHT_REVEAL: float = 0.3
    FILLED_WIDTH_SCALE: float = 1.5
    POINTER_RADIUS: float = 100.0
    POINTER_FORCE: float = 4.0
    BOUNDS_MARGIN: float = 0.1
    ATTRACTION_DISTANCE: float = 100.0
    SCROLL_THRESHOLD: float = 10.0


@dataclass
class InjectionConfig:
    """Injection and particle configuration."""
    COLOR: Tuple[int, int, int] = (3, 17, 103)
    LIFE_DECAY: float = 0.008
    PARTICLE_COUNT: int = 5
    LOW_QUALITY_PARTICLE_COUNT: int = 2
    GRADIENT_RINGS: int = 16


@dataclass
class BackgroundSettings:
    """Runtime settings of the background effect.

    These are the only values that can be changed while the effect is running,
    see ``CrackInjectionBackground.update_setting``.
    """
    crack_interval: float = 2000.0  # ms between autonomous crack attempts
    crack_count: int = 50
    injection_radius: float = 80.0
    injection_speed: float = 1.5
    scroll_sensitivity: float = 0.7
    low_quality: bool = False

    def __post_init__(self):
        if self.crack_count < 1:
            raise ValueError(f"crack_count must be positive, got {self.crack_count}")
        self.scroll_sensitivity = min(1.0, max(0.0, self.scroll_sensitivity))
        if self.low_quality:
            self.crack_count = min(self.crack_count, 28)
            self.crack_interval = max(self.crack_interval, 4000.0)

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        """Names of the live-updatable settings."""
        return tuple(f.name for f in fields(cls) if f.name != 'low_quality')


def detect_low_performance() -> bool:
    """Guess whether the machine should run the effect in low-quality mode.

    Few cores or a small screen both count as a slow device.
    """
    cores = os.cpu_count() or 4
    small_screen = False
    if pygame.display.get_init():
        info = pygame.display.Info()
        if info.current_w > 0 and info.current_h > 0:
            small_screen = info.current_w < 1024 or info.current_h < 768
    return cores <= 4 or small_screen


# Create global instances
display = DisplayConfig()
crack = CrackConfig()
injection = InjectionConfig()
