"""
Main application module for the Mandelbrot viewport.

Contains the ExplorerApp class which handles:
- Window setup and main loop
- User input (scroll to zoom, arrow keys to pan, R to reset)
- Feeding input to the Viewport and frames from the Rasterizer
- Presenting each finished frame
"""

import logging

import pygame

from .config import RenderConfig
from .events import Direction, InputSnapshot, KeyEdgeTracker, events_from_snapshot
from .renderer import Rasterizer
from .viewport import Viewport


logger = logging.getLogger(__name__)

# Arrow keys -> pan direction
PAN_KEYS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}


class ExplorerApp:
    """
    Main application class for the Mandelbrot viewport.

    Handles the pygame window and event loop, and coordinates between
    the viewport, the rasterizer, and the display. The config is
    validated here, so a bad setup fails before any window opens.
    """

    def __init__(self, config=None):
        """
        Args:
            config: RenderConfig (default: RenderConfig())

        Raises:
            ConfigurationError for invalid settings
        """
        self.config = (config or RenderConfig()).validate()
        self.width = self.config.width
        self.height = self.config.height

        # Components
        self.viewport = Viewport.from_config(self.config)
        self.rasterizer = Rasterizer.from_config(self.config)
        self.key_edges = KeyEdgeTracker()

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Last finished frame, handed to the display
        self.frame = None
        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        pygame.display.set_caption("Compiling (first run only)...")
        self.rasterizer.warmup()
        logger.info(
            "Starting %dx%d viewer, max_iterations=%d",
            self.width, self.height, self.config.max_iterations
        )

        self.running = True
        while self.running:
            dt = self.clock.tick(self.config.fps) / 1000.0
            snapshot = self._poll_input()
            if not self.running:
                break
            self.on_update(dt, snapshot)
            self._draw()

        pygame.quit()

    def on_update(self, dt, snapshot):
        """
        Advance one frame: apply input, then render.

        Args:
            dt: Seconds since the previous frame
            snapshot: InputSnapshot for this frame

        Returns:
            The rendered FrameBuffer
        """
        events = events_from_snapshot(snapshot, self.key_edges)
        state = self.viewport.apply_navigation(events)
        self.frame = self.rasterizer.render(state)
        return self.frame

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height),
            pygame.DOUBLEBUF
        )
        self.clock = pygame.time.Clock()

    def _poll_input(self):
        """Drain pending pygame events into an InputSnapshot."""
        scroll_deltas = []
        reset = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEWHEEL:
                scroll_deltas.append(event.y)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    reset = True
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.key_edges.reset()

        pressed = pygame.key.get_pressed()
        held = frozenset(d for key, d in PAN_KEYS.items() if pressed[key])
        return InputSnapshot(tuple(scroll_deltas), held, reset)

    def _draw(self):
        """Present the current frame."""
        surface = pygame.image.frombuffer(
            self.frame.tobytes(), (self.width, self.height), "RGBA"
        )
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

        state = self.viewport.state
        pygame.display.set_caption(
            f"Mandelbrot - scale {state.scale:.3g}, center "
            f"({state.offset.x:.6g}, {state.offset.y:.6g}) - "
            f"scroll to zoom, arrows to pan, R to reset"
        )


def run(width=None, height=None, max_iter=None, settings_path=None):
    """
    Run the Mandelbrot viewport.

    Args:
        width: Window width (default from settings, 800)
        height: Window height (default from settings, 800)
        max_iter: Maximum iterations (default from settings, 256)
        settings_path: JSON settings file (default: bundled settings.json)
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )
    config = RenderConfig.from_settings(
        settings_path, width=width, height=height, max_iterations=max_iter
    )
    app = ExplorerApp(config)
    try:
        app.run()
    except KeyboardInterrupt:
        pass
    finally:
        pygame.quit()
