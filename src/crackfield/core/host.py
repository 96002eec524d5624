"""Window hosting a crack injection background."""
from typing import Optional
import os
import sys
import logging
import pygame
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from .background import CrackInjectionBackground
from ..config import settings
from ..config.settings import BackgroundSettings, detect_low_performance
from ..events import EventType


class RestartHandler(FileSystemEventHandler):
    """File system event handler for auto-restart."""

    def on_modified(self, event):
        """Handle file modification event.

        Args:
            event: File system event
        """
        if event.src_path.endswith('.py'):
            current_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            python = sys.executable
            os.chdir(current_dir)
            os.execl(python, python, "-m", "crackfield")


class BackgroundWindow:
    """Resizable pygame window running the background until closed."""

    def __init__(self, background_settings: Optional[BackgroundSettings] = None,
                 enable_watcher: bool = False):
        """Initialize the window.

        Args:
            background_settings: Settings for the background, low quality
                mode is detected when omitted
            enable_watcher: Whether to enable auto-restart on file changes
        """
        self.observer = None
        if enable_watcher:
            self.observer = Observer()
            src_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            self.observer.schedule(RestartHandler(), path=src_dir, recursive=True)
            self.observer.start()

        pygame.init()
        if background_settings is None:
            background_settings = BackgroundSettings(low_quality=detect_low_performance())

        self.screen = pygame.display.set_mode(
            (settings.display.WINDOW_WIDTH, settings.display.WINDOW_HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption(settings.display.CAPTION)

        self.background = CrackInjectionBackground(self.screen, background_settings)
        self.clock = pygame.time.Clock()
        self.fps = (settings.display.LOW_QUALITY_FPS if background_settings.low_quality
                    else settings.display.FPS)
        self.scroll_y = 0.0
        self.pending_size = None

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Dispatch one pygame event.

        Returns:
            False when the window should close
        """
        controller = self.background.controller
        if event.type == pygame.QUIT:
            return False
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            controller.on_pointer_down(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            controller.on_pointer_up(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            controller.on_pointer_move(event.pos)
        elif event.type == pygame.MOUSEWHEEL:
            self.scroll_y = max(0.0, self.scroll_y - event.y * settings.display.SCROLL_STEP)
            controller.on_scroll(self.scroll_y)
        elif event.type == pygame.VIDEORESIZE:
            # Wait for the size to settle before resizing
            self.pending_size = event.size
            pygame.time.set_timer(EventType.APPLY_RESIZE.value, settings.display.RESIZE_DEBOUNCE_MS, loops=1)
        elif event.type == EventType.APPLY_RESIZE.value:
            self._apply_resize()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            elif event.key == pygame.K_r:
                logging.info("Regenerating crack field")
                self.background.regenerate()
        return True

    def _apply_resize(self) -> None:
        if self.pending_size is None:
            return
        self.screen = pygame.display.set_mode(self.pending_size, pygame.RESIZABLE)
        self.background.resize(self.screen)
        self.pending_size = None

    def run(self) -> None:
        """Run the main loop."""
        try:
            running = True
            while running:
                for event in pygame.event.get():
                    if not self.handle_event(event):
                        running = False
                        break
                if not running:
                    break
                if not self.background.tick():
                    break
                pygame.display.flip()
                self.clock.tick(self.fps)
        finally:
            self.background.dispose()
            if self.observer:
                self.observer.stop()
                self.observer.join()
            pygame.quit()
