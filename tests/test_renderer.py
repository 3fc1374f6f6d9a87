"""Frame rasterization: layout, determinism and agreement with the per-pixel pipeline."""

import numba
import numpy as np
import pytest

from mandelbrot_viewport.colormaps import ColorPalette
from mandelbrot_viewport.compute import ComplexPoint, EscapeTimeEvaluator
from mandelbrot_viewport.config import ConfigurationError, RenderConfig
from mandelbrot_viewport.mapping import CoordinateMapper
from mandelbrot_viewport.renderer import FrameBuffer, Rasterizer
from mandelbrot_viewport.viewport import ViewportState

WIDTH, HEIGHT = 24, 16
MAX_ITER = 50
PALETTE = ColorPalette([(0, 7, 100), (32, 107, 203), (237, 255, 255), (255, 170, 0), (0, 2, 0)])
STATE = ViewportState(3.0 / WIDTH, ComplexPoint(-0.5, 0.0))


@pytest.fixture
def rasterizer():
    return Rasterizer(WIDTH, HEIGHT, PALETTE, MAX_ITER, chunk_size=37)


def test_frame_layout(rasterizer):
    frame = rasterizer.render(STATE)
    assert isinstance(frame, FrameBuffer)
    assert (frame.width, frame.height) == (WIDTH, HEIGHT)
    assert frame.pixels.shape == (HEIGHT, WIDTH, 4)
    assert frame.pixels.dtype == np.uint8
    assert len(frame.tobytes()) == WIDTH * HEIGHT * 4
    assert np.all(frame.pixels[:, :, 3] == 255)


def test_bytes_are_row_major(rasterizer):
    frame = rasterizer.render(STATE)
    data = frame.tobytes()
    x, y = 5, 3
    base = (y * WIDTH + x) * 4
    assert tuple(data[base:base + 4]) == frame.pixel(x, y)


def test_matches_per_pixel_pipeline(rasterizer):
    """Every pixel equals mapper -> evaluator -> palette run one point at a time."""
    mapper = CoordinateMapper(WIDTH, HEIGHT)
    evaluator = EscapeTimeEvaluator(MAX_ITER)
    frame = rasterizer.render(STATE)

    for y in range(HEIGHT):
        for x in range(WIDTH):
            c = mapper.map((x, y), STATE)
            color = PALETTE.color_for(evaluator.evaluate(c).iterations, MAX_ITER)
            assert frame.pixel(x, y) == color + (255,), f"pixel ({x}, {y})"


def test_render_is_deterministic(rasterizer):
    first = rasterizer.render(STATE)
    second = rasterizer.render(STATE)
    assert first.tobytes() == second.tobytes()
    # Fresh buffer every frame
    assert first.pixels is not second.pixels


@pytest.mark.parametrize("chunk_size", [1, 7, WIDTH, 1000, 10 ** 6])
def test_chunking_does_not_change_output(rasterizer, chunk_size):
    other = Rasterizer(WIDTH, HEIGHT, PALETTE, MAX_ITER, chunk_size=chunk_size)
    assert other.render(STATE) == rasterizer.render(STATE)


def test_thread_count_does_not_change_output(rasterizer):
    threads = numba.get_num_threads()
    try:
        numba.set_num_threads(1)
        serial = rasterizer.render(STATE)
    finally:
        numba.set_num_threads(threads)
    assert rasterizer.render(STATE).tobytes() == serial.tobytes()


def test_center_is_in_set_and_corner_escapes():
    rasterizer = Rasterizer(16, 12, PALETTE, MAX_ITER)
    frame = rasterizer.render(ViewportState(1.0, ComplexPoint(0.0, 0.0)))
    # Center pixel (8, 6) maps to the origin
    assert frame.pixel(8, 6) == PALETTE.last + (255,)
    # Pixel (0, 0) maps to (-8, -6), outside the radius after one step
    assert frame.pixel(0, 0) == PALETTE[0] + (255,)


def test_escape_counts(rasterizer):
    counts = rasterizer.escape_counts(STATE)
    assert counts.shape == (HEIGHT, WIDTH)
    assert counts.min() >= 0 and counts.max() <= MAX_ITER

    mapper = CoordinateMapper(WIDTH, HEIGHT)
    evaluator = EscapeTimeEvaluator(MAX_ITER)
    for x, y in [(0, 0), (WIDTH // 2, HEIGHT // 2), (WIDTH - 1, HEIGHT - 1), (3, 11)]:
        assert counts[y, x] == evaluator.evaluate(mapper.map((x, y), STATE)).iterations


def test_warmup_runs(rasterizer):
    rasterizer.warmup()


def test_from_config():
    config = RenderConfig(width=10, height=8, max_iterations=20, palette='Grayscale')
    rasterizer = Rasterizer.from_config(config)
    frame = rasterizer.render(ViewportState(0.3, ComplexPoint(-0.5, 0.0)))
    assert frame.pixels.shape == (8, 10, 4)


@pytest.mark.parametrize("kwargs", [
    dict(width=0, height=10, palette=PALETTE, max_iterations=10),
    dict(width=10, height=-1, palette=PALETTE, max_iterations=10),
    dict(width=10, height=10, palette=PALETTE, max_iterations=0),
    dict(width=10, height=10, palette=[(0, 0, 0)], max_iterations=10),
    dict(width=10, height=10, palette=PALETTE, max_iterations=10, chunk_size=0),
    dict(width=10, height=10, palette=PALETTE, max_iterations=10, escape_radius=0.0),
])
def test_invalid_setup(kwargs):
    with pytest.raises(ConfigurationError):
        Rasterizer(**kwargs)
