import io
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from PIL import Image
import numpy as np

__all__ = ('Raster', 'Frame', 'FrameTimeline', 'Hotspot', 'active_frame', 'encode_png')


class Raster:
    """
    A decoded RGBA image.

    Built either from an in-memory pixel buffer (`from_buffer`) or from an
    image Pillow loaded for us (`from_image` / `open`). Everything past the
    extraction layer only uses `size`, `pixels()` and `image`.
    """

    def __init__(self, image: Image.Image, placeholder: bool = False):
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        self._image = image
        # set when a legacy bitmap could not be decoded
        self.placeholder = placeholder

    @classmethod
    def from_buffer(cls, pixels: np.ndarray) -> 'Raster':
        """build from a (h, w, 4) uint8 RGBA array"""
        pixels = np.ascontiguousarray(pixels, dtype=np.ubyte)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f'expected an (h, w, 4) array, got {pixels.shape}')
        return cls(Image.fromarray(pixels))

    @classmethod
    def from_image(cls, image: Image.Image) -> 'Raster':
        image.load()
        return cls(image.convert('RGBA'))

    @classmethod
    def open(cls, data: Union[bytes, io.BufferedReader]) -> 'Raster':
        """decode encoded image bytes (PNG, ICO, ...) with Pillow"""
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = io.BytesIO(bytes(data))
        with Image.open(data) as img:
            return cls.from_image(img)

    @classmethod
    def blank(cls, width: int, height: int, placeholder: bool = False) -> 'Raster':
        return cls(Image.new('RGBA', (width, height), (0, 0, 0, 0)), placeholder)

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> tuple:
        return self._image.size

    def pixels(self) -> np.ndarray:
        return np.asarray(self._image, dtype=np.ubyte)

    def __repr__(self):
        extra = ', placeholder' if self.placeholder else ''
        return f'Raster({self.width}x{self.height}{extra})'


@dataclass(frozen=True)
class Frame:
    raster: Raster
    duration: int = 100  # duration of this frame in milliseconds

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError(f'frame duration must be positive, got {self.duration}')

    @property
    def size(self) -> tuple:
        return self.raster.size


class FrameTimeline:
    """An ordered, immutable run of frames that loops on its own clock."""

    __slots__ = ('_frames',)

    def __init__(self, frames: Iterable[Frame] = ()):
        self._frames = tuple(frames)

    @property
    def frames(self) -> tuple:
        return self._frames

    @property
    def total_duration(self) -> int:
        return sum(f.duration for f in self._frames)

    @property
    def durations(self) -> list:
        return [f.duration for f in self._frames]

    def active_frame(self, elapsed_ms: float) -> Frame:
        return active_frame(self, elapsed_ms)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __getitem__(self, index) -> Frame:
        return self._frames[index]

    def __bool__(self) -> bool:
        return bool(self._frames)

    def __repr__(self):
        return f'FrameTimeline({len(self._frames)} frames, {self.total_duration}ms)'


@dataclass(frozen=True)
class Hotspot:
    """click point inside the output canvas, not clamped to it"""
    x: int = 0
    y: int = 0

    def __iter__(self):
        return iter((self.x, self.y))


def active_frame(timeline: FrameTimeline, elapsed_ms: float) -> Frame:
    """the frame showing at `elapsed_ms` into an endlessly looping timeline"""
    frames = timeline.frames
    if not frames:
        raise ValueError('empty timeline has no active frame')
    if len(frames) == 1:
        return frames[0]

    t = elapsed_ms % timeline.total_duration
    end = 0
    for frame in frames:
        end += frame.duration
        if t < end:
            return frame
    # float drift past the last boundary
    return frames[-1]


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format='PNG')
    return buf.getvalue()
