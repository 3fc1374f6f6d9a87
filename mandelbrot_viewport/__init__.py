"""
Mandelbrot Viewport Package

An interactive Mandelbrot set viewer: Numba JIT-compiled escape-time
rendering in parallel, palette coloring, and a pan/zoom viewport, with
a Pygame window for display.

Quick Start:
    from mandelbrot_viewport import run
    run()

Or from command line:
    python -m mandelbrot_viewport

Package Structure:
    - compute.py: JIT-compiled escape-time kernel
    - colormaps.py: Color palettes (Classic, Hot, Ocean, etc.)
    - mapping.py: Pixel to complex-plane mapping
    - events.py: Navigation events and key-edge detection
    - viewport.py: Pan/zoom state
    - renderer.py: Parallel frame rasterizer
    - config.py: Startup settings and validation
    - app.py: Main application and event loop

Controls:
    - Scroll: Zoom in/out (x2 per frame)
    - Arrow keys: Pan
    - R: Reset to default view
    - ESC: Quit
"""

from .colormaps import COLORMAPS, ColorPalette, get_colormap, list_colormap_names
from .compute import ComplexPoint, EscapeResult, EscapeTimeEvaluator
from .config import ConfigurationError, RenderConfig
from .events import Direction, InputSnapshot, KeyEdgeTracker, PanEvent, ResetEvent, ScrollEvent
from .mapping import CoordinateMapper, PixelCoordinate
from .renderer import FrameBuffer, Rasterizer
from .viewport import Viewport, ViewportState

__version__ = "1.0.0"
__all__ = [
    "run",
    "ExplorerApp",
    "COLORMAPS",
    "ColorPalette",
    "get_colormap",
    "list_colormap_names",
    "ComplexPoint",
    "EscapeResult",
    "EscapeTimeEvaluator",
    "ConfigurationError",
    "RenderConfig",
    "Direction",
    "InputSnapshot",
    "KeyEdgeTracker",
    "PanEvent",
    "ResetEvent",
    "ScrollEvent",
    "CoordinateMapper",
    "PixelCoordinate",
    "FrameBuffer",
    "Rasterizer",
    "Viewport",
    "ViewportState",
]


def __getattr__(name):
    """Load the pygame front end only when asked for."""
    if name in ("run", "ExplorerApp"):
        from . import app

        return getattr(app, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
