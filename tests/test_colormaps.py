"""Palette interpolation, terminal color and validation."""

import numpy as np
import pytest

from mandelbrot_viewport.colormaps import (
    COLORMAPS,
    ColorPalette,
    get_colormap,
    get_default_colormap,
    list_colormap_names,
)
from mandelbrot_viewport.config import ConfigurationError

CAP = 100
COLORS = [(0, 0, 0), (200, 100, 50), (10, 20, 30)]


@pytest.fixture
def palette():
    return ColorPalette(COLORS)


def test_zero_iterations_is_first_color(palette):
    assert palette.color_for(0, CAP) == COLORS[0]


def test_cap_is_last_color(palette):
    assert palette.color_for(CAP, CAP) == palette.last == COLORS[-1]


def test_exact_control_points(palette):
    # idx_dec = 2 * 50 / 100 = 1.0
    assert palette.color_for(50, CAP) == COLORS[1]


def test_midpoint_interpolation(palette):
    # idx_dec = 0.5 between (0, 0, 0) and (200, 100, 50)
    assert palette.color_for(25, CAP) == (100, 50, 25)


def test_interpolation_truncates():
    palette = ColorPalette([(0, 0, 0), (255, 255, 255)])
    # idx_dec = 0.5 -> 127.5
    assert palette.color_for(1, 2) == (127, 127, 127)


@pytest.mark.parametrize("name", list(COLORMAPS))
def test_ramp_is_continuous(name):
    palette = get_colormap(name)
    colors = palette.colors.astype(int)
    max_delta = np.abs(np.diff(colors, axis=0)).max()
    bound = max_delta * (len(palette) - 1) / CAP + 1

    previous = np.array(palette.color_for(0, CAP))
    for n in range(1, CAP):
        current = np.array(palette.color_for(n, CAP))
        assert np.abs(current - previous).max() <= bound, f"jump at {n}"
        previous = current


def test_out_of_range_iterations_are_clamped(palette):
    assert palette.color_for(-5, CAP) == palette.color_for(0, CAP)
    assert palette.color_for(CAP + 10, CAP) == palette.last


def test_invalid_cap(palette):
    with pytest.raises(ValueError):
        palette.color_for(0, 0)


@pytest.mark.parametrize("colors", [
    [],
    [(1, 2, 3)],
    [(0, 0), (1, 1)],
    [(0, 0, 256), (0, 0, 0)],
    [(0, 0, -1), (0, 0, 0)],
    [(0, 0, 0.5), (0, 0, 0)],
    "red",
])
def test_invalid_palettes(colors):
    with pytest.raises(ConfigurationError):
        ColorPalette(colors)


def test_colors_are_read_only(palette):
    with pytest.raises(ValueError):
        palette.colors[0, 0] = 5


def test_palette_does_not_alias_input():
    colors = np.array(COLORS, dtype=np.uint8)
    palette = ColorPalette(colors)
    colors[0] = (9, 9, 9)
    assert palette[0] == (0, 0, 0)


def test_registry():
    assert list_colormap_names() == list(COLORMAPS)
    assert get_default_colormap() == get_colormap('Classic')
    for name in list_colormap_names():
        assert len(get_colormap(name)) >= 2
    with pytest.raises(KeyError):
        get_colormap('Nope')
