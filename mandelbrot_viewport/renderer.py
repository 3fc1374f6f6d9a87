"""
Parallel per-frame rasterizer.

The Rasterizer class handles:
- Mapping every pixel to the complex plane for the current viewport
- Running the escape-time kernel for each pixel
- Coloring each pixel from the palette
- Writing RGBA bytes into a fresh row-major frame buffer

All per-pixel work happens in one Numba kernel compiled with
parallel=True. The flattened pixel index range is split into chunks and
the chunks are distributed with prange (fork-join). Each pixel is written
at its own row-major offset, so the frame is identical whatever the
chunk size or number of threads.
"""

import logging
import time

import numpy as np
from numba import jit, prange

from .compute import DEFAULT_ESCAPE_RADIUS, escape_time
from .colormaps import ColorPalette, palette_rgb
from .config import ConfigurationError
from .mapping import plane_point


logger = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4
DEFAULT_CHUNK_SIZE = 1024


@jit(nopython=True, parallel=True, cache=True)
def rasterize(width, height, scale, offset_x, offset_y, max_iter, escape_radius,
              colors, chunk_size, out):
    """
    Render one frame into `out`.

    Args:
        width, height: Viewport dimensions in pixels
        scale, offset_x, offset_y: Viewport state
        max_iter: Iteration cap
        escape_radius: Escape threshold
        colors: (N, 3) uint8 palette control colors
        chunk_size: Pixels per parallel work item
        out: Flat uint8 array of width * height * 4 bytes, overwritten
    """
    total = width * height
    num_chunks = (total + chunk_size - 1) // chunk_size

    for chunk in prange(num_chunks):
        start = chunk * chunk_size
        end = min(start + chunk_size, total)
        for index in range(start, end):
            py = index // width
            px = index - py * width
            cx, cy = plane_point(px, py, width, height, scale, offset_x, offset_y)
            iterations = escape_time(cx, cy, max_iter, escape_radius)
            r, g, b = palette_rgb(colors, iterations, max_iter)

            base = index * 4
            out[base] = r
            out[base + 1] = g
            out[base + 2] = b
            out[base + 3] = 255


@jit(nopython=True, parallel=True, cache=True)
def compute_escape_counts(width, height, scale, offset_x, offset_y, max_iter,
                          escape_radius, out):
    """Fill `out` (height x width int64) with raw escape counts."""
    for py in prange(height):
        for px in range(width):
            cx, cy = plane_point(px, py, width, height, scale, offset_x, offset_y)
            out[py, px] = escape_time(cx, cy, max_iter, escape_radius)


class FrameBuffer:
    """
    One rendered frame: width x height RGBA8 pixels, row-major.

    Attributes:
        width, height: Dimensions in pixels
        pixels: (height, width, 4) uint8 array
    """

    def __init__(self, width, height, pixels):
        self.width = width
        self.height = height
        self.pixels = pixels

    def tobytes(self):
        """Row-major RGBA bytes, ready for upload to a display surface."""
        return self.pixels.tobytes()

    def pixel(self, x, y):
        """(r, g, b, a) of one pixel."""
        return tuple(int(c) for c in self.pixels[y, x])

    def __eq__(self, other):
        if not isinstance(other, FrameBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __len__(self):
        return self.pixels.size


class Rasterizer:
    """
    Renders complete frames for a fixed viewport size.

    Usage:
        rasterizer = Rasterizer(800, 600, palette, max_iterations=256)
        frame = rasterizer.render(viewport.state)
        display(frame.tobytes())

    Attributes:
        width, height: Viewport dimensions
        palette: ColorPalette used for every frame
        max_iterations: Iteration cap
        escape_radius: Escape threshold
        chunk_size: Pixels per parallel work item
    """

    def __init__(self, width, height, palette, max_iterations,
                 escape_radius=DEFAULT_ESCAPE_RADIUS, chunk_size=DEFAULT_CHUNK_SIZE):
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Viewport must be non-empty, got {width}x{height}")
        if max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be at least 1, got {max_iterations}"
            )
        if not escape_radius > 0:
            raise ConfigurationError(f"escape_radius must be positive, got {escape_radius}")
        if chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
        if not isinstance(palette, ColorPalette):
            palette = ColorPalette(palette)

        self.width = int(width)
        self.height = int(height)
        self.palette = palette
        self.max_iterations = int(max_iterations)
        self.escape_radius = float(escape_radius)
        self.chunk_size = int(chunk_size)

    @classmethod
    def from_config(cls, config):
        return cls(
            config.width, config.height, config.build_palette(),
            config.max_iterations, config.escape_radius, config.chunk_size,
        )

    def render(self, state):
        """
        Render the full frame for a ViewportState.

        Blocks until every pixel has been written.

        Returns:
            A newly allocated FrameBuffer
        """
        start = time.perf_counter()
        out = np.empty(self.width * self.height * BYTES_PER_PIXEL, dtype=np.uint8)
        rasterize(
            self.width, self.height,
            float(state.scale), float(state.offset.x), float(state.offset.y),
            self.max_iterations, self.escape_radius,
            self.palette.colors, self.chunk_size, out
        )
        logger.debug(
            "Rendered %dx%d frame in %.1f ms",
            self.width, self.height, (time.perf_counter() - start) * 1000
        )
        return FrameBuffer(
            self.width, self.height,
            out.reshape((self.height, self.width, BYTES_PER_PIXEL))
        )

    def escape_counts(self, state):
        """Raw (height, width) escape counts for a ViewportState."""
        out = np.empty((self.height, self.width), dtype=np.int64)
        compute_escape_counts(
            self.width, self.height,
            float(state.scale), float(state.offset.x), float(state.offset.y),
            self.max_iterations, self.escape_radius, out
        )
        return out

    def warmup(self):
        """
        Compile the kernels on a tiny grid.

        Call this once at startup to avoid a delay on the first real frame.
        """
        start = time.perf_counter()
        out = np.empty(4 * 4 * BYTES_PER_PIXEL, dtype=np.uint8)
        rasterize(4, 4, 1.0, 0.0, 0.0, 10, self.escape_radius,
                  self.palette.colors, 4, out)
        compute_escape_counts(4, 4, 1.0, 0.0, 0.0, 10, self.escape_radius,
                              np.empty((4, 4), dtype=np.int64))
        logger.info("JIT warm-up took %.2f s", time.perf_counter() - start)
