"""
Live preview clock.

The preview only reads model state: each tick renders the active profile at
the current elapsed time. Pausing freezes the elapsed time, so a paused
preview keeps showing the same composite.
"""

import time
from typing import Callable, Optional

from PIL import Image

from .compositor import render
from .config import THUMBNAIL_SIZE
from .profile import CursorSet

__all__ = ('Preview', 'thumbnails')


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class Preview:
    def __init__(self, cursor_set: CursorSet, clock: Callable[[], float] = None,
                 guides: bool = True):
        self.cursor_set = cursor_set
        self.guides = guides
        self._clock = clock or _monotonic_ms
        self._elapsed = 0.0
        self._last: Optional[float] = None
        self._playing = True

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def elapsed_ms(self) -> float:
        self._advance()
        return self._elapsed

    def _advance(self):
        now = self._clock()
        if self._last is not None and self._playing:
            self._elapsed += now - self._last
        self._last = now

    def play(self):
        self._advance()
        self._playing = True

    def pause(self):
        self._advance()
        self._playing = False

    def toggle(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.play()
        return self._playing

    def restart(self):
        self._elapsed = 0.0
        self._last = None

    def tick(self) -> Image.Image:
        """one preview frame of the active profile"""
        profile = self.cursor_set.active
        return render(profile.stack, self.elapsed_ms, profile.output_size,
                      guides=self.guides, hotspot=profile.hotspot)


def thumbnails(cursor_set: CursorSet, elapsed_ms: float,
               size: int = THUMBNAIL_SIZE) -> dict:
    """small composites for every role that has something to show"""
    thumbs = {}
    for role, profile in cursor_set:
        if profile.has_frames:
            thumbs[role] = render(profile.stack, elapsed_ms, size)
    return thumbs
