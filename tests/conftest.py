"""
Shared fixtures for pyanicursor tests.

Every image is built in memory with Pillow/numpy, so no binary fixture
files are needed.
"""
import io

import numpy as np
import pytest
from PIL import Image

from pyanicursor.cursor import Frame, FrameTimeline, Raster


# ── Sample colours ──────────────────────────────────────────────────────

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)
PALETTE = [RED, GREEN, BLUE, WHITE]


def solid_raster(color=RED, size=(2, 2)) -> Raster:
    w, h = size
    pixels = np.zeros((h, w, 4), dtype=np.ubyte)
    pixels[:, :] = color
    return Raster.from_buffer(pixels)


def png_bytes(color=RED, size=(2, 2)) -> bytes:
    buf = io.BytesIO()
    Image.new('RGBA', size, color).save(buf, format='PNG')
    return buf.getvalue()


def timeline(durations, size=(2, 2)) -> FrameTimeline:
    """one solid frame per duration, cycling through PALETTE"""
    return FrameTimeline(
        Frame(solid_raster(PALETTE[i % len(PALETTE)], size), d)
        for i, d in enumerate(durations)
    )


@pytest.fixture
def make_raster():
    """Factory for solid-colour rasters"""
    return solid_raster


@pytest.fixture
def make_png():
    """Factory for solid-colour PNG file bytes"""
    return png_bytes


@pytest.fixture
def make_timeline():
    """Factory for timelines of solid frames with given durations"""
    return timeline


@pytest.fixture
def gif_bytes():
    """Two-frame GIF, red for 50ms then blue for 120ms"""
    frames = [Image.new('RGB', (4, 4), (255, 0, 0)), Image.new('RGB', (4, 4), (0, 0, 255))]
    buf = io.BytesIO()
    frames[0].save(buf, format='GIF', save_all=True, append_images=frames[1:],
                   duration=[50, 120], loop=0)
    return buf.getvalue()
