"""
Allow running the package directly: python -m mandelbrot_viewport
"""
from .app import run

run()
