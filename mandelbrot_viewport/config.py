"""
Startup configuration for the Mandelbrot viewport.

All values are fixed once the render loop starts. Defaults can be
overridden from a JSON settings file (settings.json next to this module)
before the first frame; any invalid value raises ConfigurationError so
the loop never starts with a broken setup.
"""

import json
import logging
import math
import numbers
import os
from dataclasses import dataclass, fields, replace


logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


class ConfigurationError(ValueError):
    """Raised for startup settings that would make rendering impossible."""


@dataclass(frozen=True)
class RenderConfig:
    """
    Startup constants for the viewer.

    Attributes:
        width, height: Viewport size in pixels
        max_iterations: Iteration cap of the escape-time loop
        escape_radius: Divergence threshold on |z|
        initial_scale: Plane units per pixel at startup (default zoom)
        initial_offset: Plane point shown at the viewport center at startup
        pan_step: Pixels moved per directional key press
        palette: Name from COLORMAPS, or an explicit list of RGB triples
        chunk_size: Pixels per parallel work item in the rasterizer
        fps: Frame rate cap for the window loop
    """

    width: int = 800
    height: int = 800
    max_iterations: int = 256
    escape_radius: float = 2.0
    initial_scale: float = 1.0 / 200.0
    initial_offset: tuple = (-0.5, 0.0)
    pan_step: float = 50.0
    palette: object = 'Classic'
    chunk_size: int = 1024
    fps: int = 60

    def validate(self):
        """
        Check every setting, raising ConfigurationError on the first problem.

        Returns:
            self, so calls can be chained
        """
        for name in ('width', 'height', 'max_iterations', 'chunk_size', 'fps'):
            _require_int(name, getattr(self, name))
        for name in ('escape_radius', 'initial_scale', 'pan_step'):
            _require_finite(name, getattr(self, name))
        if not isinstance(self.initial_offset, (tuple, list)) or len(self.initial_offset) != 2:
            raise ConfigurationError(
                f"initial_offset must be an (x, y) pair, got {self.initial_offset!r}"
            )
        for value in self.initial_offset:
            _require_finite('initial_offset', value)

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Viewport must be non-empty, got {self.width}x{self.height}"
            )
        if self.max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be at least 1, got {self.max_iterations}"
            )
        if not self.escape_radius > 0:
            raise ConfigurationError(
                f"escape_radius must be positive, got {self.escape_radius}"
            )
        if not self.initial_scale > 0:
            raise ConfigurationError(
                f"initial_scale must be positive, got {self.initial_scale}"
            )
        if not self.pan_step > 0:
            raise ConfigurationError(f"pan_step must be positive, got {self.pan_step}")
        if self.chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.fps < 1:
            raise ConfigurationError(f"fps must be positive, got {self.fps}")
        # Builds the palette, which checks the color list itself
        self.build_palette()
        return self

    def build_palette(self):
        """Return the ColorPalette this config names or lists."""
        from .colormaps import ColorPalette, get_colormap

        if isinstance(self.palette, str):
            try:
                return get_colormap(self.palette)
            except KeyError:
                raise ConfigurationError(f"Unknown palette {self.palette!r}") from None
        return ColorPalette(self.palette)

    @classmethod
    def from_settings(cls, path=None, **overrides):
        """
        Build a config from a JSON settings file plus keyword overrides.

        Missing or unreadable files fall back to the defaults. Keyword
        overrides with a value of None are skipped.

        Raises:
            ConfigurationError for unknown keys or invalid values
        """
        settings = load_settings(path) or {}
        settings.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(settings) - known)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

        if isinstance(settings.get('initial_offset'), list):
            settings['initial_offset'] = tuple(settings['initial_offset'])
        if isinstance(settings.get('palette'), list):
            settings['palette'] = tuple(
                tuple(color) if isinstance(color, list) else color
                for color in settings['palette']
            )

        return replace(cls(), **settings).validate()


def _require_int(name, value):
    # bool is an int subclass but never a valid size or count
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _require_finite(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")


DEFAULT_CONFIG = RenderConfig()


def load_settings(path=None):
    """
    Load settings from a JSON file.

    Args:
        path: File to read (default: settings.json beside this module)

    Returns:
        Dict of settings, or None if the file is missing or not valid JSON
    """
    settings_path = path or SETTINGS_PATH
    try:
        with open(settings_path, 'r') as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", settings_path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", settings_path)
        return None
    return data
