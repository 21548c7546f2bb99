"""Turns uploaded file bytes into a frame timeline."""

import io
import os

from PIL import Image, ImageSequence

from .ani import decode_ani
from .config import DEFAULT_FRAME_DELAY_MS
from .cur import DECODE_ERRORS, extract_frame, is_icon_directory
from .cursor import *
from .errors import FormatError
from .log import get_logger

__all__ = ['sniff_format', 'load_source', 'load_file', 'decode_gif', 'decode_image']

log = get_logger(__name__)


def sniff_format(data: bytes, file_name: str = '') -> str:
    """one of 'ani', 'cur', 'gif' or 'image'"""
    ext = os.path.splitext(file_name)[1].lower()
    if data[:4] == b'RIFF':
        return 'ani'
    if is_icon_directory(data):
        return 'cur'
    if data[:4] == b'GIF8':
        return 'gif'
    return {'.ani': 'ani', '.cur': 'cur', '.ico': 'cur', '.gif': 'gif'}.get(ext, 'image')


def decode_gif(data: bytes) -> FrameTimeline:
    frames = []
    with Image.open(io.BytesIO(data)) as img:
        for frame in ImageSequence.Iterator(img):
            delay = frame.info.get('duration') or DEFAULT_FRAME_DELAY_MS
            frames.append(Frame(Raster.from_image(frame), int(round(delay)) or 1))
    return FrameTimeline(frames)


def decode_image(data: bytes) -> FrameTimeline:
    return FrameTimeline([Frame(Raster.open(data), DEFAULT_FRAME_DELAY_MS)])


def load_source(data: bytes, file_name: str = '') -> FrameTimeline:
    """
    Decode any supported source into a timeline. Either every frame decodes
    or FormatError (carrying `file_name`) is raised.
    """
    data = bytes(data)
    if not data:
        raise FormatError('file is empty', file_name)

    kind = sniff_format(data, file_name)
    log.debug('loading %s as %s (%d bytes)', file_name or '<bytes>', kind, len(data))
    try:
        if kind == 'ani':
            timeline = decode_ani(data)
        elif kind == 'cur':
            timeline = FrameTimeline([Frame(extract_frame(data), DEFAULT_FRAME_DELAY_MS)])
        elif kind == 'gif':
            timeline = decode_gif(data)
        else:
            timeline = decode_image(data)
    except FormatError as e:
        e.file_name = e.file_name or file_name or None
        raise
    except DECODE_ERRORS as e:
        raise FormatError(f'cannot decode {kind} data ({e})', file_name or None) from e

    if not timeline:
        raise FormatError('source has no frames', file_name or None)
    return timeline


def load_file(path: str) -> FrameTimeline:
    with open(path, 'rb') as f:
        data = f.read()
    return load_source(data, os.path.basename(path))
