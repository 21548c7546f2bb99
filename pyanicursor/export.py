"""
Exports a cursor profile as PNG, CUR or ANI bytes.

Animated exports follow the dominant layer, the one with the most frames:
its frame count is the exported frame count and its per-frame delays set
both the render time of each frame and the ANI rate table. Other layers keep
their own clocks and are sampled at those times.
"""

from typing import Optional

from .ani import build_ani, ms_to_rate
from .compositor import render
from .config import DEFAULT_FRAME_DELAY_MS
from .cur import encode_cur
from .cursor import encode_png
from .errors import EncodeError
from .layers import Layer, LayerStack
from .log import get_logger
from .profile import CursorProfile, CursorRole

__all__ = ['dominant_layer', 'frame_times', 'export_frames', 'export_png',
           'export_cur', 'export_ani', 'export', 'export_basename', 'FORMATS']

log = get_logger(__name__)

FORMATS = ('png', 'cur', 'ani')


def dominant_layer(stack: LayerStack) -> Optional[Layer]:
    """the first layer with the most frames, or None if every layer is empty"""
    best = None
    for layer in stack:
        if layer.frame_count > (best.frame_count if best else 0):
            best = layer
    return best


def frame_times(stack: LayerStack, count: int) -> list:
    """(time offset, delay) in ms for each of `count` exported frames"""
    dominant = dominant_layer(stack)
    if dominant is None:
        return [(0, DEFAULT_FRAME_DELAY_MS)] * count

    durations = dominant.timeline.durations
    times = []
    offset = 0
    for i in range(count):
        delay = durations[i % len(durations)]
        times.append((offset, delay))
        offset += delay
    return times


def _render_png(profile: CursorProfile, elapsed_ms: float, index: int) -> bytes:
    image = render(profile.stack, elapsed_ms, profile.output_size)
    png = encode_png(image)
    if not png:
        raise EncodeError(f'frame {index} produced no image data')
    return png


def export_frames(profile: CursorProfile, count: int) -> tuple:
    """
    Render and encode `count` frames, one after the other. Returns the list
    of CUR blobs and the matching list of display rates.
    """
    icons, rates = [], []
    for i, (offset, delay) in enumerate(frame_times(profile.stack, count)):
        png = _render_png(profile, offset, i)
        icons.append(encode_cur(png, profile.hotspot, profile.output_size))
        rates.append(ms_to_rate(delay))
        log.debug('frame %d at %dms: %d bytes, rate %d', i, offset, len(png), rates[-1])
    return icons, rates


def export_png(profile: CursorProfile) -> bytes:
    return _render_png(profile, 0, 0)


def export_cur(profile: CursorProfile) -> bytes:
    icons, _ = export_frames(profile, 1)
    return icons[0]


def export_ani(profile: CursorProfile) -> bytes:
    dominant = dominant_layer(profile.stack)
    count = dominant.frame_count if dominant else 1
    icons, rates = export_frames(profile, count)
    data = build_ani(icons, rates)
    log.info('exported %d-frame animated cursor (%d bytes)', count, len(data))
    return data


def export(profile: CursorProfile, fmt: str) -> bytes:
    if fmt == 'png':
        return export_png(profile)
    if fmt == 'cur':
        return export_cur(profile)
    if fmt == 'ani':
        return export_ani(profile)
    raise ValueError(f'unknown export format {fmt!r}, expected one of {FORMATS}')


def export_basename(profile: CursorProfile, role: CursorRole) -> str:
    stem = profile.source_file_name.split('.')[0] or 'cursor'
    return f'{stem}_{role.key}'
