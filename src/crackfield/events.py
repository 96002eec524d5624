"""Event types for the background window."""
from enum import Enum

import pygame


class EventType(Enum):
    """Custom event types for the window."""
    APPLY_RESIZE = pygame.USEREVENT + 1
