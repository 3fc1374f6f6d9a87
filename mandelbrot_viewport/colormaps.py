"""
Color palettes for Mandelbrot visualization.

A palette is a short ordered list of RGB control colors. Escape counts
are spread over the whole list: iteration 0 gets the first color, and
counts in between are linearly interpolated between neighbouring
control colors. The last control color is reserved for points that
never escaped (iterations == cap) and is returned unmodified for them.

To add a new palette:
1. Add an entry to the COLORMAPS dictionary at the bottom of this file
2. Make its last color the one you want for the inside of the set
"""

import math

import numpy as np
from numba import jit

from .config import ConfigurationError


@jit(nopython=True, cache=True)
def palette_rgb(colors, iterations, cap):
    """
    Interpolate a color for an escape count.

    Args:
        colors: (N, 3) uint8 array of control colors, N >= 2
        iterations: Escape count, clamped to [0, cap]
        cap: Iteration cap (> 0)

    Returns:
        (r, g, b) tuple of ints
    """
    num_colors = colors.shape[0]
    if iterations < 0:
        iterations = 0
    elif iterations > cap:
        iterations = cap

    idx_dec = (num_colors - 1) * iterations / cap
    idx = int(math.floor(idx_dec))
    if idx >= num_colors - 1:
        # In-set color
        last = num_colors - 1
        return int(colors[last, 0]), int(colors[last, 1]), int(colors[last, 2])

    frac = idx_dec - idx
    r0 = float(colors[idx, 0])
    g0 = float(colors[idx, 1])
    b0 = float(colors[idx, 2])
    r = int(r0 + (float(colors[idx + 1, 0]) - r0) * frac)
    g = int(g0 + (float(colors[idx + 1, 1]) - g0) * frac)
    b = int(b0 + (float(colors[idx + 1, 2]) - b0) * frac)
    return r, g, b


class ColorPalette:
    """
    Immutable list of RGB control colors.

    Usage:
        palette = ColorPalette([(0, 0, 0), (255, 255, 255), (0, 0, 0)])
        palette.color_for(128, 256)  # -> (255, 255, 255)

    Attributes:
        colors: Read-only (N, 3) uint8 array
    """

    def __init__(self, colors):
        """
        Args:
            colors: Sequence of at least two (r, g, b) triples, channels 0-255

        Raises:
            ConfigurationError if the list is too short or malformed
        """
        try:
            raw = np.asarray(colors, dtype=np.float64)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Palette colors must be RGB triples, got {colors!r}") from None

        if raw.ndim != 2 or raw.shape[1] != 3:
            raise ConfigurationError(
                f"Palette must be a list of RGB triples, got shape {raw.shape}"
            )
        if raw.shape[0] < 2:
            raise ConfigurationError(
                f"Palette needs at least 2 colors, got {raw.shape[0]}"
            )
        if np.any(raw < 0) or np.any(raw > 255) or np.any(raw != np.floor(raw)):
            raise ConfigurationError("Palette channels must be integers in 0-255")

        self._colors = raw.astype(np.uint8)
        self._colors.flags.writeable = False

    @property
    def colors(self):
        return self._colors

    @property
    def last(self):
        """The in-set color."""
        return tuple(int(c) for c in self._colors[-1])

    def __len__(self):
        return self._colors.shape[0]

    def __getitem__(self, index):
        return tuple(int(c) for c in self._colors[index])

    def __eq__(self, other):
        if not isinstance(other, ColorPalette):
            return NotImplemented
        return np.array_equal(self._colors, other._colors)

    def __hash__(self):
        return hash(self._colors.tobytes())

    def __repr__(self):
        return f"ColorPalette({[self[i] for i in range(len(self))]!r})"

    def color_for(self, iterations, cap):
        """Return the (r, g, b) color for an escape count under iteration cap `cap`."""
        if cap < 1:
            raise ValueError(f"cap must be at least 1, got {cap}")
        r, g, b = palette_rgb(self._colors, int(iterations), int(cap))
        return int(r), int(g), int(b)


# Registry of all available palettes.
# Keys are display names, values are control color lists (last = in-set color).
# Add new palettes here to make them available by name in settings.json.
COLORMAPS = {
    # Deep blue -> white -> orange, black inside
    'Classic': [
        (0, 7, 100),
        (32, 107, 203),
        (237, 255, 255),
        (255, 170, 0),
        (0, 2, 0),
    ],
    # Black -> red -> orange -> yellow -> white, black inside
    'Hot': [
        (0, 0, 0),
        (255, 0, 0),
        (255, 165, 0),
        (255, 255, 0),
        (255, 255, 255),
        (0, 0, 0),
    ],
    # Deep blue -> cyan -> white
    'Ocean': [
        (0, 0, 50),
        (0, 128, 178),
        (0, 255, 255),
        (255, 255, 255),
        (0, 0, 20),
    ],
    # Dark green -> lime -> yellow
    'Forest': [
        (0, 80, 0),
        (50, 170, 20),
        (180, 255, 60),
        (255, 255, 120),
        (0, 20, 0),
    ],
    # Deep purple -> magenta -> pink -> white
    'Purple': [
        (100, 0, 80),
        (200, 50, 170),
        (255, 150, 220),
        (255, 255, 255),
        (20, 0, 20),
    ],
    # Black -> white, black inside
    'Grayscale': [
        (0, 0, 0),
        (255, 255, 255),
        (0, 0, 0),
    ],
}


def get_colormap(name):
    """
    Get a palette by name.

    Args:
        name: Key from COLORMAPS dictionary

    Returns:
        ColorPalette

    Raises:
        KeyError if name not found
    """
    return ColorPalette(COLORMAPS[name])


def get_default_colormap():
    """Get the default palette (Classic)."""
    return get_colormap('Classic')


def list_colormap_names():
    """Get list of available palette names."""
    return list(COLORMAPS.keys())
