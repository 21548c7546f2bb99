"""
Composites a layer stack into one square RGBA image at a point in time.

Each layer is placed with the canvas-style transform chain

    translate(center) . translate(x, y) . rotate(rotation) . scale(scale)

applied to its active frame centred on the local origin, so rotation and
scale pivot around the already-translated origin. Sampling is nearest
neighbour only; cursors are small and must stay crisp.
"""

import math
from typing import Optional

from PIL import Image, ImageDraw
import numpy as np

from .config import GUIDE_COLOR, HOTSPOT_FILL, HOTSPOT_OUTLINE, HOTSPOT_RADIUS
from .cursor import Hotspot, Raster
from .layers import Layer, LayerStack, Transform

__all__ = ['layer_matrix', 'render', 'render_layer']


def layer_matrix(transform: Transform, size: tuple, canvas_size: int) -> tuple:
    """
    Inverse affine coefficients (a, b, c, d, e, f) for Image.transform: they
    map a canvas point back into the source raster of the given size.
    """
    w, h = size
    ox = canvas_size / 2 + transform.x
    oy = canvas_size / 2 + transform.y
    theta = math.radians(transform.rotation)
    cos, sin = math.cos(theta), math.sin(theta)
    s = transform.scale

    a, b = cos / s, sin / s
    d, e = -sin / s, cos / s
    c = w / 2 - (a * ox + b * oy)
    f = h / 2 - (d * ox + e * oy)
    return a, b, c, d, e, f


def render_layer(raster: Raster, transform: Transform, canvas_size: int) -> Image.Image:
    """one layer frame transformed onto a transparent canvas_size square"""
    placed = raster.image.transform(
        (canvas_size, canvas_size),
        Image.Transform.AFFINE,
        layer_matrix(transform, raster.size, canvas_size),
        resample=Image.Resampling.NEAREST,
    )
    if transform.opacity < 1:
        pixels = np.array(placed)
        pixels[:, :, 3] = np.round(pixels[:, :, 3] * transform.opacity).astype(np.ubyte)
        placed = Image.fromarray(pixels)
    return placed


def _draw_layer(canvas: Image.Image, layer: Layer, elapsed_ms: float) -> Image.Image:
    if not layer.visible or not layer.timeline or layer.transform.opacity == 0:
        return canvas
    frame = layer.timeline.active_frame(elapsed_ms)
    return Image.alpha_composite(canvas, render_layer(frame.raster, layer.transform, canvas.width))


def _draw_guides(canvas: Image.Image) -> Image.Image:
    size = canvas.width
    overlay = Image.new('RGBA', canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    draw.line((size // 2, 0, size // 2, size - 1), fill=GUIDE_COLOR, width=1)
    draw.line((0, size // 2, size - 1, size // 2), fill=GUIDE_COLOR, width=1)
    return Image.alpha_composite(canvas, overlay)


def _draw_hotspot(canvas: Image.Image, hotspot: Hotspot) -> Image.Image:
    overlay = Image.new('RGBA', canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    r = HOTSPOT_RADIUS
    draw.ellipse((hotspot.x - r, hotspot.y - r, hotspot.x + r, hotspot.y + r),
                 fill=HOTSPOT_FILL, outline=HOTSPOT_OUTLINE)
    return Image.alpha_composite(canvas, overlay)


def render(stack: LayerStack, elapsed_ms: float, output_size: int,
           guides: bool = False, hotspot: Optional[Hotspot] = None) -> Image.Image:
    """composite every visible layer, bottom to top, into an output_size square"""
    if output_size <= 0:
        raise ValueError(f'output size must be positive, got {output_size}')

    canvas = Image.new('RGBA', (output_size, output_size), (0, 0, 0, 0))
    for layer in stack:
        canvas = _draw_layer(canvas, layer, elapsed_ms)

    # preview aids, never exported
    if guides:
        canvas = _draw_guides(canvas)
    if hotspot is not None:
        canvas = _draw_hotspot(canvas, hotspot)
    return canvas
