"""
Layers and the ordered, copy-on-write stack they are composited from.

Index 0 of a stack is the bottom of the render order. Every mutator returns a
new `LayerStack`, so a stack handed to the compositor or an export never
changes underneath it.
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, Optional

from .cursor import FrameTimeline
from .errors import LayerError
from .log import get_logger

__all__ = ('Transform', 'LayerRole', 'Layer', 'LayerStack', 'new_layer_id', 'BASE_LAYER_ID')

log = get_logger(__name__)

BASE_LAYER_ID = 'base'


@dataclass(frozen=True)
class Transform:
    x: float = 0
    y: float = 0
    scale: float = 1
    rotation: float = 0  # degrees, clockwise on screen
    opacity: float = 1

    def __post_init__(self):
        if not (self.scale > 0 and math.isfinite(self.scale)):
            raise ValueError(f'scale must be positive, got {self.scale}')
        if not 0 <= self.opacity <= 1:
            raise ValueError(f'opacity must be within [0, 1], got {self.opacity}')


class LayerRole(Enum):
    BASE = 'base'
    OVERLAY = 'overlay'

    @property
    def removable(self) -> bool:
        return self is LayerRole.OVERLAY

    @property
    def reorderable(self) -> bool:
        return True

    @property
    def timeline_replaceable(self) -> bool:
        return True


def new_layer_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class Layer:
    id: str = field(default_factory=new_layer_id)
    name: str = ''
    timeline: FrameTimeline = field(default_factory=FrameTimeline)
    transform: Transform = field(default_factory=Transform)
    visible: bool = True
    locked: bool = False
    role: LayerRole = LayerRole.OVERLAY

    @classmethod
    def base(cls, timeline: FrameTimeline = None, name: str = 'Base Layer') -> 'Layer':
        return cls(id=BASE_LAYER_ID, name=name, timeline=timeline or FrameTimeline(),
                   role=LayerRole.BASE)

    @property
    def is_base(self) -> bool:
        return self.role is LayerRole.BASE

    @property
    def frame_count(self) -> int:
        return len(self.timeline)


class LayerStack:
    __slots__ = ('_layers', '_selected_id')

    def __init__(self, layers=None, selected_id: Optional[str] = None):
        layers = tuple(layers) if layers is not None else (Layer.base(),)
        if not layers:
            raise LayerError('a layer stack needs at least one layer')
        bases = sum(1 for layer in layers if layer.is_base)
        if bases != 1:
            raise LayerError(f'a layer stack needs exactly one base layer, got {bases}')
        ids = [layer.id for layer in layers]
        if len(set(ids)) != len(ids):
            raise LayerError('layer ids must be unique')
        self._layers = layers
        if selected_id is None or selected_id not in ids:
            selected_id = layers[0].id
        self._selected_id = selected_id

    # queries

    @property
    def layers(self) -> tuple:
        return self._layers

    @property
    def selected_id(self) -> str:
        return self._selected_id

    @property
    def selected(self) -> Layer:
        return self.get(self._selected_id)

    @property
    def base(self) -> Layer:
        return next(layer for layer in self._layers if layer.is_base)

    def index_of(self, layer_id: str) -> int:
        for i, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return i
        raise LayerError(f'no layer with id {layer_id!r}')

    def get(self, layer_id: str) -> Layer:
        return self._layers[self.index_of(layer_id)]

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __getitem__(self, index) -> Layer:
        return self._layers[index]

    def __repr__(self):
        names = ', '.join(layer.name or layer.id for layer in self._layers)
        return f'LayerStack([{names}], selected={self._selected_id!r})'

    # mutations, each returning a new stack

    def add_layer(self, layer: Layer) -> 'LayerStack':
        if layer.is_base:
            raise LayerError('a stack already has its base layer')
        return LayerStack(self._layers + (layer,), layer.id)

    def remove_layer(self, layer_id: str) -> 'LayerStack':
        layer = self.get(layer_id)
        if not layer.role.removable:
            log.debug('refusing to remove %s layer %r', layer.role.value, layer_id)
            return self
        layers = tuple(l for l in self._layers if l.id != layer_id)
        selected = self._selected_id if self._selected_id != layer_id else layers[0].id
        return LayerStack(layers, selected)

    def move_layer(self, layer_id: str, direction: str) -> 'LayerStack':
        """swap with the neighbour above ('up') or below ('down') in render order"""
        if direction not in ('up', 'down'):
            raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")
        index = self.index_of(layer_id)
        other = index + 1 if direction == 'up' else index - 1
        if not 0 <= other < len(self._layers):
            return self
        layers = list(self._layers)
        layers[index], layers[other] = layers[other], layers[index]
        return LayerStack(layers, self._selected_id)

    def select(self, layer_id: str) -> 'LayerStack':
        self.index_of(layer_id)
        return LayerStack(self._layers, layer_id)

    def _update(self, layer_id: str, **changes) -> 'LayerStack':
        index = self.index_of(layer_id)
        layers = list(self._layers)
        layers[index] = replace(layers[index], **changes)
        return LayerStack(layers, self._selected_id)

    def set_visible(self, layer_id: str, visible: bool) -> 'LayerStack':
        return self._update(layer_id, visible=visible)

    def set_locked(self, layer_id: str, locked: bool) -> 'LayerStack':
        return self._update(layer_id, locked=locked)

    def set_transform(self, layer_id: str, transform: Transform) -> 'LayerStack':
        return self._update(layer_id, transform=transform)

    def rename(self, layer_id: str, name: str) -> 'LayerStack':
        return self._update(layer_id, name=name)

    def replace_timeline(self, layer_id: str, timeline: FrameTimeline, name: str = None) -> 'LayerStack':
        if not self.get(layer_id).role.timeline_replaceable:
            raise LayerError(f'layer {layer_id!r} does not accept a new timeline')
        if name is None:
            return self._update(layer_id, timeline=timeline)
        return self._update(layer_id, timeline=timeline, name=name)
