"""
Escape-time computation using Numba JIT compilation.

This module holds the central numeric kernel: iterate
z <- z² + c from z = 0 and count how many iterations complete before
|z| exceeds the escape radius. The compiled escape_time() is called
both by EscapeTimeEvaluator (one point at a time) and from inside the
parallel rasterizer kernel, so a single pixel and a whole frame always
agree exactly.

Kernels here must not be compiled with fastmath: the overflow guard
relies on NaN/Inf comparisons.
"""

import math
from typing import NamedTuple

from numba import jit


DEFAULT_ESCAPE_RADIUS = 2.0


class ComplexPoint(NamedTuple):
    """A point x + yi of the complex plane."""
    x: float
    y: float


class EscapeResult(NamedTuple):
    """Iterations completed before divergence, or the cap for in-set points."""
    iterations: int


@jit(nopython=True, cache=True)
def escape_time(cx, cy, max_iter, escape_radius):
    """
    Iterate z² + c for one point.

    Args:
        cx, cy: Real and imaginary parts of c
        max_iter: Iteration cap
        escape_radius: Divergence threshold on the Euclidean norm of z

    Returns:
        k, the number of iterations completed before the one whose
        result had |z| > escape_radius; max_iter if no iteration
        diverged or if z stopped being a finite number.
    """
    zr = 0.0
    zi = 0.0
    for k in range(max_iter):
        # z² + c = (zr² - zi², 2·zr·zi) + c
        zr, zi = zr * zr - zi * zi + cx, 2.0 * zr * zi + cy
        # Euclidean norm without overflow in the squares
        magnitude = math.hypot(zr, zi)
        if not math.isfinite(magnitude):
            return max_iter
        if magnitude > escape_radius:
            return k
    return max_iter


class EscapeTimeEvaluator:
    """
    Classifies plane points by escape time.

    Usage:
        evaluator = EscapeTimeEvaluator(max_iterations=256)
        evaluator.evaluate(ComplexPoint(0.0, 0.0)).iterations  # -> 256
    """

    def __init__(self, max_iterations, escape_radius=DEFAULT_ESCAPE_RADIUS):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        if not escape_radius > 0:
            raise ValueError(f"escape_radius must be positive, got {escape_radius}")
        self.max_iterations = int(max_iterations)
        self.escape_radius = float(escape_radius)

    def evaluate(self, c):
        """Return the EscapeResult for plane point c (any (x, y) pair)."""
        x, y = c
        return EscapeResult(
            int(escape_time(float(x), float(y), self.max_iterations, self.escape_radius))
        )
