"""Tests for CUR encoding and CUR/ICO frame extraction"""

import io
import logging
import struct

import numpy as np
import pytest

from pyanicursor.cur import (encode_cur, extract_frame, is_icon_directory, open_cur,
                             read_cur_hotspot, save_cur)
from pyanicursor.cursor import Hotspot, Raster, encode_png
from pyanicursor.errors import EncodeError, FormatError


def legacy_cur(width=16, height=16) -> bytes:
    """a cursor directory whose image is an (unreadable) bitmap, not a PNG"""
    header = struct.pack('<HHH', 0, 2, 1)
    entry = struct.pack('<BBBBHHII', width, height, 0, 0, 1, 1, 40, 22)
    return header + entry + bytes(40)


class TestEncodeCur:
    """Tests for the single-image cursor layout"""

    def test_layout(self, make_png):
        png = make_png()
        data = encode_cur(png, Hotspot(3, 4), 32)
        assert struct.unpack('<HHH', data[:6]) == (0, 2, 1)
        width, height, colors, reserved, hx, hy, length, offset = struct.unpack('<BBBBHHII', data[6:22])
        assert (width, height, colors, reserved) == (32, 32, 0, 0)
        assert (hx, hy) == (3, 4)
        assert length == len(png)
        assert offset == 22
        assert data[22:] == png

    def test_large_size_writes_zero(self, make_png):
        data = encode_cur(make_png(), Hotspot(), 256)
        assert data[6] == 0 and data[7] == 0

    def test_round_trip(self):
        """Encoded pixels and hotspot come back unchanged"""
        pixels = np.random.default_rng(7).integers(0, 256, (32, 32, 4), dtype=np.ubyte)
        source = Raster.from_buffer(pixels)
        data = encode_cur(encode_png(source.image), Hotspot(5, 7), 32)

        assert (extract_frame(data).pixels() == pixels).all()
        assert read_cur_hotspot(data) == Hotspot(5, 7)

    def test_hotspot_not_clamped(self, make_png):
        data = encode_cur(make_png(), Hotspot(500, 500), 32)
        assert read_cur_hotspot(data) == Hotspot(500, 500)

    def test_hotspot_out_of_range(self, make_png):
        with pytest.raises(EncodeError):
            encode_cur(make_png(), Hotspot(-1, 0), 32)
        with pytest.raises(EncodeError):
            encode_cur(make_png(), Hotspot(0, 70000), 32)

    def test_empty_image(self):
        with pytest.raises(EncodeError):
            encode_cur(b'', Hotspot(), 32)


class TestExtractFrame:
    """Tests for locating and decoding the image inside an icon payload"""

    def test_signature(self):
        assert is_icon_directory(b'\x00\x00\x02\x00')
        assert is_icon_directory(b'\x00\x00\x01\x00')
        assert not is_icon_directory(b'\x00\x00\x03\x00')
        assert not is_icon_directory(b'\x89PNG')

    def test_bare_png(self, make_png):
        raster = extract_frame(make_png((0, 255, 0, 255), (3, 5)))
        assert raster.size == (3, 5)
        assert tuple(raster.pixels()[0, 0]) == (0, 255, 0, 255)

    def test_embedded_png_in_icon(self, make_png):
        """ICO (type 1) payloads are scanned for PNG data too"""
        png = make_png(size=(4, 4))
        data = struct.pack('<HHH', 0, 1, 1) + struct.pack('<BBBBHHII', 4, 4, 0, 0, 1, 32, len(png), 22) + png
        assert extract_frame(data).size == (4, 4)
        assert read_cur_hotspot(data) is None

    def test_not_an_image(self):
        with pytest.raises(FormatError):
            extract_frame(b'definitely not an image')

    def test_corrupt_embedded_png(self):
        data = struct.pack('<HHH', 0, 2, 1) + bytes(16) + b'\x89PNG\r\n\x1a\n' + bytes(8)
        with pytest.raises(FormatError):
            extract_frame(data)

    def test_legacy_bitmap_placeholder(self, caplog):
        """Undecodable bitmap frames degrade to a transparent placeholder"""
        with caplog.at_level(logging.WARNING, logger='pyanicursor'):
            raster = extract_frame(legacy_cur(16, 24))
        assert raster.placeholder
        assert raster.size == (16, 24)
        assert raster.pixels()[:, :, 3].max() == 0
        assert 'legacy bitmap' in caplog.text


class TestCurFiles:
    """Tests for reading and writing .cur files"""

    def test_save_and_open(self, tmp_path, make_png):
        path = str(tmp_path / 'arrow.cur')
        save_cur(encode_cur(make_png(size=(8, 8)), Hotspot(2, 3), 8), path)
        raster, hotspot = open_cur(path)
        assert raster.size == (8, 8)
        assert hotspot == Hotspot(2, 3)

    def test_file_objects(self, make_png):
        buf = io.BytesIO()
        save_cur(encode_cur(make_png(), Hotspot(1, 1), 2), buf)
        buf.seek(0)
        raster, hotspot = open_cur(buf)
        assert raster.size == (2, 2)
        assert hotspot == Hotspot(1, 1)

    def test_hotspot_of_short_data(self):
        assert read_cur_hotspot(b'\x00\x00\x02\x00') is None
