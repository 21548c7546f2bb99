"""
Implementation of decoder and encoder of the Windows animated cursor (.ani) format.

An .ani file is a RIFF container with form type ACON:

    RIFF <size> ACON
        anih  36-byte header; display rate (1/60 s) at offset 28, flags at 32
        rate  optional per-frame display rates, one <I each
        LIST <size> fram
            icon  a complete .cur/.ico file, one per frame
            ...

Every chunk is a fourcc, a <I payload length, the payload, and one zero pad
byte when the length is odd. The length never counts the pad byte.
"""

import io
import struct
from typing import Iterator, Sequence, Union

from .config import (ANI_DEFAULT_DISPLAY_RATE, ANI_FLAG_ICON, ANI_HEADER_SIZE,
                     JIFFY_MS)
from .cur import extract_frame
from .cursor import *
from .errors import EncodeError, FormatError
from .log import get_logger

__all__ = ['iter_chunks', 'rate_to_ms', 'ms_to_rate', 'decode_ani', 'open_ani',
           'write_chunk', 'build_ani', 'save_ani']

log = get_logger(__name__)


def iter_chunks(data: bytes, start: int = 12, end: int = None) -> Iterator[tuple]:
    """yield (fourcc, payload) for every chunk in data[start:end]"""
    if end is None:
        end = len(data)
    pos = start
    while pos + 8 <= end:
        fourcc = bytes(data[pos:pos + 4])
        size = struct.unpack('<I', data[pos + 4:pos + 8])[0]
        payload_start = pos + 8
        payload_end = payload_start + size
        if payload_end > end:
            raise FormatError(
                f'truncated {fourcc!r} chunk at offset {pos}: '
                f'declares {size} bytes, {end - payload_start} available')
        yield fourcc, bytes(data[payload_start:payload_end])
        pos = payload_end + (size & 1)


def rate_to_ms(rate: int) -> int:
    """display rate (1/60 s units) to a whole, positive number of milliseconds"""
    return max(1, round(rate * JIFFY_MS))


def ms_to_rate(delay_ms: float) -> int:
    return max(1, round(delay_ms / JIFFY_MS))


def decode_ani(data: bytes) -> FrameTimeline:
    if len(data) < 12 or data[:4] != b'RIFF':
        raise FormatError('not a RIFF file')
    if data[8:12] != b'ACON':
        log.debug('unexpected RIFF form type %r, reading it as ACON anyway', data[8:12])

    default_rate = ANI_DEFAULT_DISPLAY_RATE
    rates = []
    icons = []
    for fourcc, payload in iter_chunks(data):
        if fourcc == b'anih':
            if len(payload) >= ANI_HEADER_SIZE:
                default_rate = struct.unpack('<I', payload[28:32])[0]
            else:
                log.debug('short anih chunk (%d bytes), ignoring', len(payload))
        elif fourcc == b'rate':
            count = len(payload) // 4
            rates = list(struct.unpack(f'<{count}I', payload[:count * 4]))
        elif fourcc == b'LIST' and payload[:4] == b'fram':
            for sub_id, sub_payload in iter_chunks(payload, 4):
                if sub_id == b'icon':
                    icons.append(sub_payload)
        else:
            # unknown chunk type, skip it
            log.debug('skipping %r chunk (%d bytes)', fourcc, len(payload))

    log.debug('anih rate %d, %d rate overrides, %d icons', default_rate, len(rates), len(icons))
    if not icons:
        raise FormatError('animated cursor contains no frames')

    frames = []
    for i, icon in enumerate(icons):
        rate = rates[i] if i < len(rates) else default_rate
        frames.append(Frame(extract_frame(icon), rate_to_ms(rate)))
    return FrameTimeline(frames)


def open_ani(file: Union[io.BufferedReader, str]) -> FrameTimeline:
    """load a .ani file"""
    if isinstance(file, str):
        with open(file, 'rb') as f:
            data = f.read()
    else:
        data = file.read()
    return decode_ani(data)


def write_chunk(fourcc: bytes, payload: bytes) -> bytes:
    return fourcc + struct.pack('<I', len(payload)) + payload + (b'\x00' if len(payload) & 1 else b'')


def build_ani(icons: Sequence[bytes], rates: Sequence[int]) -> bytes:
    """serialise cursor blobs and their display rates into a RIFF/ACON file"""
    if len(icons) != len(rates):
        raise EncodeError(f'{len(icons)} frames but {len(rates)} rates')
    if not icons:
        raise EncodeError('an animated cursor needs at least one frame')

    n = len(icons)
    anih = struct.pack('<9I',
        ANI_HEADER_SIZE,
        n,  # frames
        n,  # steps
        0, 0, 0, 0,  # width, height, bit count, planes: taken from each icon
        ANI_DEFAULT_DISPLAY_RATE,
        ANI_FLAG_ICON,
        )
    rate = struct.pack(f'<{n}I', *rates)
    fram = b'fram' + b''.join(write_chunk(b'icon', icon) for icon in icons)

    body = b'ACON' + write_chunk(b'anih', anih) + write_chunk(b'rate', rate) + write_chunk(b'LIST', fram)
    return b'RIFF' + struct.pack('<I', len(body)) + body


def save_ani(icons: Sequence[bytes], rates: Sequence[int], file: Union[io.BufferedWriter, str]):
    data = build_ani(icons, rates)
    if isinstance(file, str):
        with open(file, 'wb') as f:
            f.write(data)
    else:
        file.write(data)
