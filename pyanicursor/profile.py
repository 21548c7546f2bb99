"""
Per-role cursor profiles and the editing session that owns them.

A Windows cursor scheme has a fixed set of roles. A `CursorSet` creates a
profile for every one of them up front; profiles are edited in place but
never created or dropped afterwards.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .config import DEFAULT_OUTPUT_SIZE
from .cursor import FrameTimeline, Hotspot
from .errors import FormatError, LayerError
from .layers import Layer, LayerStack, Transform
from .log import get_logger
from .sources import load_source

__all__ = ('CursorRole', 'CursorProfile', 'CursorSet', 'default_hotspot')

log = get_logger(__name__)


class CursorRole(Enum):
    NORMAL = ('normal', 'Normal Select', 'tl')
    LINK = ('link', 'Link Select', 'tl')
    TEXT = ('text', 'Text Select', 'center')
    BUSY = ('busy', 'Busy', 'center')
    WORKING = ('working', 'Working in Background', 'tl')
    UNAVAILABLE = ('unavailable', 'Unavailable', 'tl')
    HELP = ('help', 'Help Select', 'tl')
    ALTERNATE = ('alternate', 'Alternate Select', 'tl')
    PRECISION = ('precision', 'Precision Select', 'center')
    MOVE = ('move', 'Move / Pan', 'center')
    LOCATION = ('location', 'Location Select', 'tl')
    PERSON = ('person', 'Person Select', 'tl')
    VERT = ('vert', 'Vertical Resize', 'center')
    HORZ = ('horz', 'Horizontal Resize', 'center')
    DIAG1 = ('diag1', 'Diagonal Resize 1', 'center')
    DIAG2 = ('diag2', 'Diagonal Resize 2', 'center')

    def __init__(self, key: str, label: str, anchor: str):
        self.key = key
        self.label = label
        # 'tl' (top-left) or 'center'
        self.anchor = anchor

    @classmethod
    def from_key(cls, key: str) -> 'CursorRole':
        for role in cls:
            if role.key == key:
                return role
        raise ValueError(f'unknown cursor role {key!r}')


def default_hotspot(role: CursorRole, size: int) -> Hotspot:
    if role.anchor == 'center':
        return Hotspot(size // 2, size // 2)
    return Hotspot(0, 0)


@dataclass
class CursorProfile:
    stack: LayerStack = field(default_factory=LayerStack)
    hotspot: Hotspot = field(default_factory=Hotspot)
    output_size: int = DEFAULT_OUTPUT_SIZE
    source_file_name: str = ''

    def __post_init__(self):
        if self.output_size <= 0:
            raise ValueError(f'output size must be positive, got {self.output_size}')

    @property
    def has_frames(self) -> bool:
        return any(layer.timeline for layer in self.stack)


class CursorSet:
    """Every role's profile plus which one is being edited."""

    def __init__(self):
        self._profiles = {role: CursorProfile() for role in CursorRole}
        self.active_role = CursorRole.NORMAL

    def __getitem__(self, role: CursorRole) -> CursorProfile:
        return self._profiles[role]

    def __iter__(self):
        return iter(self._profiles.items())

    def __len__(self) -> int:
        return len(self._profiles)

    @property
    def active(self) -> CursorProfile:
        return self._profiles[self.active_role]

    def activate(self, role: CursorRole) -> CursorProfile:
        self.active_role = role
        return self.active

    def _profile(self, role: Optional[CursorRole]) -> CursorProfile:
        return self._profiles[role or self.active_role]

    # sources

    def upload(self, data: bytes, file_name: str, replace_id: str = None,
               role: CursorRole = None) -> Layer:
        """
        Decode `data` and either replace the timeline of layer `replace_id`
        or add it as a new overlay layer. The profile is untouched when
        decoding fails.

        Loading into an empty profile's base layer also sizes the profile to
        the source and resets the hotspot to the role default.
        """
        role = role or self.active_role
        profile = self._profiles[role]
        try:
            timeline = load_source(data, file_name)
        except FormatError as e:
            log.error('failed to load %s: %s', file_name, e.message)
            raise

        if replace_id is None:
            layer = Layer(name=file_name, timeline=timeline)
            profile.stack = profile.stack.add_layer(layer)
            log.info('%s: added layer %r (%d frames)', role.key, file_name, len(timeline))
            return layer

        target = profile.stack.get(replace_id)
        profile.stack = profile.stack.replace_timeline(replace_id, timeline, name=file_name)
        if target.is_base and not profile.source_file_name:
            self._adopt_base_source(role, profile, timeline, file_name)
        log.info('%s: replaced layer %r with %r (%d frames)',
                 role.key, replace_id, file_name, len(timeline))
        return profile.stack.get(replace_id)

    @staticmethod
    def _adopt_base_source(role: CursorRole, profile: CursorProfile,
                           timeline: FrameTimeline, file_name: str):
        width, height = timeline[0].size
        side = max(width, height)
        size = DEFAULT_OUTPUT_SIZE if side <= DEFAULT_OUTPUT_SIZE else side
        profile.source_file_name = file_name
        profile.output_size = size
        profile.hotspot = default_hotspot(role, size)

    # layer edits

    def remove_layer(self, layer_id: str, role: CursorRole = None):
        profile = self._profile(role)
        profile.stack = profile.stack.remove_layer(layer_id)

    def move_layer(self, layer_id: str, direction: str, role: CursorRole = None):
        profile = self._profile(role)
        profile.stack = profile.stack.move_layer(layer_id, direction)

    def select_layer(self, layer_id: str, role: CursorRole = None):
        profile = self._profile(role)
        profile.stack = profile.stack.select(layer_id)

    def toggle_visibility(self, layer_id: str, role: CursorRole = None):
        profile = self._profile(role)
        layer = profile.stack.get(layer_id)
        profile.stack = profile.stack.set_visible(layer_id, not layer.visible)

    def set_locked(self, layer_id: str, locked: bool, role: CursorRole = None):
        profile = self._profile(role)
        profile.stack = profile.stack.set_locked(layer_id, locked)

    def update_transform(self, layer_id: str, role: CursorRole = None, **changes) -> Transform:
        """change some transform fields of an unlocked layer"""
        profile = self._profile(role)
        layer = profile.stack.get(layer_id)
        if layer.locked:
            raise LayerError(f'layer {layer_id!r} is locked')
        transform = replace(layer.transform, **changes)
        profile.stack = profile.stack.set_transform(layer_id, transform)
        return transform

    # profile settings

    def set_hotspot(self, x: int, y: int, role: CursorRole = None):
        self._profile(role).hotspot = Hotspot(int(x), int(y))

    def set_output_size(self, size: int, role: CursorRole = None):
        if size <= 0:
            raise ValueError(f'output size must be positive, got {size}')
        self._profile(role).output_size = int(size)
