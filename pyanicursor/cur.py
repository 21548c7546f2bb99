"""
Decoder and encoder for single-image Windows cursors (.cur) and the icon
payloads embedded in animated cursors.

Layout written by `encode_cur`:

    ICONDIR       reserved=0 <H, type=2 <H, count=1 <H
    ICONDIRENTRY  width <B, height <B, colors <B, reserved <B,
                  hotspot x <H (planes in .ico), hotspot y <H (bit count in .ico),
                  bytes in resource <I, image offset <I
    PNG bytes
"""

import io
import struct
from typing import Optional, Union

from .config import CUR_HEADER_SIZE, DEFAULT_OUTPUT_SIZE, PNG_SIGNATURE
from .cursor import *
from .errors import EncodeError, FormatError
from .log import get_logger

__all__ = ['is_icon_directory', 'extract_frame', 'read_cur_hotspot',
           'encode_cur', 'open_cur', 'save_cur']

log = get_logger(__name__)

# what Pillow raises for data it cannot decode
DECODE_ERRORS = (OSError, ValueError, SyntaxError, IndexError, TypeError, struct.error)


def is_icon_directory(data: bytes) -> bool:
    """True for the `00 00 {01|02} 00` ICO/CUR directory signature"""
    return (len(data) >= 4 and data[0] == 0 and data[1] == 0
            and data[2] in (1, 2) and data[3] == 0)


def extract_frame(payload: bytes) -> Raster:
    """decode one icon payload (a standalone .cur/.ico, or a bare PNG) to a raster"""
    payload = bytes(payload)
    if not is_icon_directory(payload):
        # already a self-contained image
        try:
            return Raster.open(payload)
        except DECODE_ERRORS as e:
            raise FormatError(f'unreadable image payload ({e})') from e

    offset = payload.find(PNG_SIGNATURE)
    if offset != -1:
        log.debug('embedded PNG at offset %d', offset)
        try:
            return Raster.open(payload[offset:])
        except DECODE_ERRORS as e:
            raise FormatError(f'corrupt embedded PNG ({e})') from e

    return _legacy_bitmap(payload)


def _legacy_bitmap(payload: bytes) -> Raster:
    # best effort only: Pillow's ICO/CUR plugins understand the common DIB layouts
    try:
        return Raster.open(payload)
    except DECODE_ERRORS as e:
        reason = e

    width = height = DEFAULT_OUTPUT_SIZE
    if len(payload) >= 8:
        width = payload[6] or 256
        height = payload[7] or 256
    log.warning('legacy bitmap cursor frame could not be decoded (%s); '
                'using a %dx%d transparent placeholder', reason, width, height)
    return Raster.blank(width, height, placeholder=True)


def read_cur_hotspot(data: bytes) -> Optional[Hotspot]:
    """hotspot of the first directory entry, or None if `data` is not a cursor"""
    if len(data) < CUR_HEADER_SIZE:
        return None
    reserved, kind, count = struct.unpack('<HHH', data[:6])
    if reserved != 0 or kind != 2 or count < 1:
        return None
    x, y = struct.unpack('<HH', data[10:14])
    return Hotspot(x, y)


def encode_cur(png: bytes, hotspot: Hotspot, size: int) -> bytes:
    """wrap one PNG image and its hotspot in a single-entry cursor directory"""
    if not png:
        raise EncodeError('cannot build a cursor from empty image data')
    if not (0 <= hotspot.x <= 0xffff and 0 <= hotspot.y <= 0xffff):
        raise EncodeError(f'hotspot {tuple(hotspot)} does not fit the cursor directory')

    side = size if size < 256 else 0
    header = struct.pack('<HHH', 0, 2, 1)
    entry = struct.pack('<BBBBHHII',
        side,
        side,
        0,  # colors
        0,  # reserved
        hotspot.x,
        hotspot.y,
        len(png),
        CUR_HEADER_SIZE,
        )
    return header + entry + png


def open_cur(file: Union[io.BufferedReader, str]) -> tuple:
    """load a .cur/.ico file, returning (raster, hotspot or None)"""
    if isinstance(file, str):
        with open(file, 'rb') as f:
            data = f.read()
    else:
        data = file.read()
    return extract_frame(data), read_cur_hotspot(data)


def save_cur(data: bytes, file: Union[io.BufferedWriter, str]):
    if isinstance(file, str):
        with open(file, 'wb') as f:
            f.write(data)
    else:
        file.write(data)
