"""
pytest configuration and shared fixtures for the palette_quant test suite
"""

import numpy as np
import pytest

RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
WHITE = 0xFFFFFFFF
RANDO = 0xFF141216
MAX_COLORS = 256


@pytest.fixture
def noisy_pixels():
    """3000 opaque pixels scattered around four base colours, fixed seed."""
    rng = np.random.default_rng(1234)
    bases = np.array(
        [[200, 30, 40], [20, 160, 60], [30, 60, 210], [230, 220, 200]], dtype=np.int64
    )
    picks = rng.integers(0, len(bases), size=3000)
    jitter = rng.integers(-18, 19, size=(3000, 3))
    rgb = np.clip(bases[picks] + jitter, 0, 255)
    return ((255 << 24) | (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]).tolist()


@pytest.fixture
def gradient_pixels():
    """A 40x40 diagonal gradient packed as ARGB ints."""
    height, width = 40, 40
    out = []
    for y in range(height):
        for x in range(width):
            r = int(255 * x / width)
            g = int(255 * y / height)
            b = int(255 * (x + y) / (width + height))
            out.append((255 << 24) | (r << 16) | (g << 8) | b)
    return out


@pytest.fixture
def rgba_image():
    """A 4x4 RGBA uint8 image with a fully transparent bottom row."""
    image = np.zeros((4, 4, 4), dtype=np.uint8)
    image[0:2, :] = [255, 0, 0, 255]
    image[2, :] = [0, 0, 255, 255]
    image[3, :] = [0, 255, 0, 0]
    return image
