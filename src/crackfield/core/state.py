"""Owned state of one running background."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from .crack_field import CrackField
from .injection import Injection


class InteractionState(Enum):
    """Pointer interaction state."""

    IDLE = auto()       # No button held
    INJECTING = auto()  # Button held, moving the pointer keeps injecting

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        return self.name.lower().capitalize()


@dataclass
class BackgroundState:
    """Everything a background mutates between ticks.

    Created once per background and handed explicitly to the update and
    render functions; nothing here is shared outside its background.
    """
    width: int
    height: int
    cracks: CrackField
    injections: List[Injection] = field(default_factory=list)
    pointer: Tuple[float, float] = (0.0, 0.0)
    interaction: InteractionState = InteractionState.IDLE
    time: float = 0.0
    last_crack_time: float = 0.0
    growth_boost: float = 0.0
    last_scroll_y: float = 0.0
    frame: int = 0
    # Position of the last press that injected, until a click consumes it
    pressed_at: Optional[Tuple[float, float]] = None
    disposed: bool = False

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)
