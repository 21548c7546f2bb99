"""Tests for cursor roles, profiles and the editing session"""

import pytest

from pyanicursor.cursor import Hotspot
from pyanicursor.errors import FormatError, LayerError
from pyanicursor.layers import BASE_LAYER_ID
from pyanicursor.profile import CursorProfile, CursorRole, CursorSet, default_hotspot


@pytest.fixture
def cursors():
    return CursorSet()


class TestCursorRole:
    """Tests for the closed role enumeration"""

    def test_sixteen_roles(self):
        assert len(CursorRole) == 16
        assert CursorRole.from_key('diag2') is CursorRole.DIAG2

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            CursorRole.from_key('sparkle')

    def test_default_hotspots(self):
        assert default_hotspot(CursorRole.NORMAL, 48) == Hotspot(0, 0)
        assert default_hotspot(CursorRole.TEXT, 48) == Hotspot(24, 24)
        assert default_hotspot(CursorRole.BUSY, 33) == Hotspot(16, 16)


class TestCursorSet:
    """Tests for the per-role editing session"""

    def test_every_role_has_a_profile(self, cursors):
        assert len(cursors) == 16
        for role, profile in cursors:
            assert len(profile.stack) == 1
            assert profile.stack.base.id == BASE_LAYER_ID
            assert profile.output_size == 32
            assert profile.hotspot == Hotspot(0, 0)
        assert cursors[CursorRole.NORMAL] is not cursors[CursorRole.LINK]

    def test_activate(self, cursors):
        assert cursors.active_role is CursorRole.NORMAL
        assert cursors.activate(CursorRole.MOVE) is cursors[CursorRole.MOVE]

    def test_base_upload_adopts_size_and_hotspot(self, cursors, make_png):
        cursors.activate(CursorRole.TEXT)
        cursors.upload(make_png(size=(48, 40)), 'beam.png', replace_id=BASE_LAYER_ID)
        profile = cursors.active
        assert profile.output_size == 48
        assert profile.hotspot == Hotspot(24, 24)
        assert profile.source_file_name == 'beam.png'
        assert profile.stack.base.name == 'beam.png'

    def test_small_base_upload_keeps_32(self, cursors, make_png):
        cursors.upload(make_png(size=(16, 16)), 'dot.png', replace_id=BASE_LAYER_ID)
        assert cursors.active.output_size == 32

    def test_second_base_upload_keeps_settings(self, cursors, make_png):
        cursors.upload(make_png(size=(16, 16)), 'dot.png', replace_id=BASE_LAYER_ID)
        cursors.set_hotspot(3, 4)
        cursors.upload(make_png(size=(64, 64)), 'big.png', replace_id=BASE_LAYER_ID)
        profile = cursors.active
        assert (profile.output_size, profile.hotspot) == (32, Hotspot(3, 4))
        assert profile.source_file_name == 'dot.png'

    def test_upload_adds_selected_overlay(self, cursors, make_png):
        layer = cursors.upload(make_png(), 'sparkle.png', role=CursorRole.BUSY)
        stack = cursors[CursorRole.BUSY].stack
        assert stack[-1] is layer
        assert stack.selected_id == layer.id
        assert not layer.is_base
        assert len(cursors[CursorRole.NORMAL].stack) == 1

    def test_failed_upload_leaves_profile_untouched(self, cursors):
        before = cursors.active.stack
        with pytest.raises(FormatError):
            cursors.upload(b'garbage', 'bad.ani', replace_id=BASE_LAYER_ID)
        assert cursors.active.stack is before
        assert cursors.active.source_file_name == ''

    def test_locked_layer_rejects_transform(self, cursors, make_png):
        layer = cursors.upload(make_png(), 'sparkle.png')
        cursors.set_locked(layer.id, True)
        with pytest.raises(LayerError):
            cursors.update_transform(layer.id, x=5)
        cursors.set_locked(layer.id, False)
        assert cursors.update_transform(layer.id, x=5, rotation=45).x == 5
        assert cursors.active.stack.get(layer.id).transform.rotation == 45

    def test_layer_edits(self, cursors, make_png):
        layer = cursors.upload(make_png(), 'sparkle.png')
        cursors.toggle_visibility(layer.id)
        assert not cursors.active.stack.get(layer.id).visible
        cursors.move_layer(layer.id, 'down')
        assert cursors.active.stack[0].id == layer.id
        cursors.select_layer(BASE_LAYER_ID)
        cursors.remove_layer(layer.id)
        assert len(cursors.active.stack) == 1
        cursors.remove_layer(BASE_LAYER_ID)
        assert len(cursors.active.stack) == 1

    def test_hotspot_not_clamped(self, cursors):
        cursors.set_hotspot(500, 500)
        assert cursors.active.hotspot == Hotspot(500, 500)

    def test_output_size_must_be_positive(self, cursors):
        with pytest.raises(ValueError):
            cursors.set_output_size(0)
        with pytest.raises(ValueError):
            CursorProfile(output_size=-1)
