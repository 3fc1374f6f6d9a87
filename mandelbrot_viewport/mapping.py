"""Pixel to complex-plane coordinate mapping."""

from typing import NamedTuple

from numba import jit

from .compute import ComplexPoint


class PixelCoordinate(NamedTuple):
    x: int
    y: int


@jit(nopython=True, cache=True)
def plane_point(px, py, width, height, scale, offset_x, offset_y):
    """offset + (pixel - center) * scale, with center = (width / 2, height / 2)."""
    cx = offset_x + (px - width / 2.0) * scale
    cy = offset_y + (py - height / 2.0) * scale
    return cx, cy


class CoordinateMapper:
    """Maps pixels of a width x height viewport into the complex plane."""

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport must be non-empty, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

    @property
    def center(self):
        return self.width / 2.0, self.height / 2.0

    def map(self, pixel, viewport):
        """
        Args:
            pixel: (x, y) with 0 <= x < width and 0 <= y < height
            viewport: ViewportState snapshot

        Returns:
            ComplexPoint
        """
        px, py = pixel
        if not (0 <= px < self.width and 0 <= py < self.height):
            raise ValueError(f"Pixel {pixel!r} outside {self.width}x{self.height} viewport")
        cx, cy = plane_point(
            float(px), float(py), self.width, self.height,
            viewport.scale, viewport.offset.x, viewport.offset.y
        )
        return ComplexPoint(cx, cy)
