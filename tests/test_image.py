"""
Object image loading.
"""

import pytest

from lc3vm.errors import ImageError
from lc3vm.image import (image_words, load_image, load_image_file, load_words,
                         parse_hex_words)
from lc3vm.memory import Memory


def image_bytes(words):
    return b"".join(bytes([w >> 8, w & 0xFF]) for w in words)


class TestLoadImage:

    def test_origin_and_payload(self):
        mem = Memory()
        assert load_image(b"\x30\x00\xAA\xAA\xBB\xBB", mem) == (0x3000, 2)
        assert mem.read(0x3000) == 0xAAAA
        assert mem.read(0x3001) == 0xBBBB
        assert mem.read(0x2FFF) == 0
        assert mem.read(0x3002) == 0
        assert sum(1 for w in mem.words if w) == 2

    def test_odd_length_is_padded(self):
        mem = Memory()
        load_image(b"\x30\x00\x12", mem)
        assert mem.read(0x3000) == 0x1200

    def test_origin_only(self):
        mem = Memory()
        assert load_image(b"\x40\x00", mem) == (0x4000, 0)

    @pytest.mark.parametrize("data", [b"", b"\x30"])
    def test_too_short(self, data):
        with pytest.raises(ImageError):
            load_image(data, Memory())

    def test_payload_wraps(self):
        mem = Memory()
        load_image(image_bytes([0xFFFF, 1, 2]), mem)
        assert mem.read(0xFFFF) == 1
        assert mem.read(0x0000) == 2

    def test_later_image_wins(self):
        mem = Memory()
        load_image(image_bytes([0x3000, 0xA0, 0xA1, 0xA2, 0xA3]), mem)
        load_image(image_bytes([0x3002, 0xB2, 0xB3]), mem)
        assert mem.dump(0x3000, 0x3004) == [0xA0, 0xA1, 0xB2, 0xB3]

    def test_image_words(self):
        assert image_words(b"\x01\x02\x03") == [0x0102, 0x0300]

    def test_load_words_needs_origin(self):
        with pytest.raises(ImageError):
            load_words([], Memory())


class TestLoadImageFile:

    def test_file(self, tmp_path):
        path = tmp_path / "prog.obj"
        path.write_bytes(image_bytes([0x3000, 0xF025]))
        mem = Memory()
        assert load_image_file(str(path), mem) == (0x3000, 1)
        assert mem.read(0x3000) == 0xF025

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageError) as info:
            load_image_file(str(tmp_path / "nope.obj"), Memory())
        assert "nope.obj" in str(info.value)

    def test_truncated_file(self, tmp_path):
        path = tmp_path / "short.obj"
        path.write_bytes(b"\x30")
        with pytest.raises(ImageError) as info:
            load_image_file(str(path), Memory())
        assert "short.obj" in str(info.value)


class TestHexWords:

    def test_listing(self):
        text = "x3000 0x5020 ; clear R0\nX1025 xF025\n"
        assert parse_hex_words(text) == [0x3000, 0x5020, 0x1025, 0xF025]

    @pytest.mark.parametrize("text", ["x3000 1234", "xZZ", "x10000", "x-1", "0x"])
    def test_bad_words(self, text):
        with pytest.raises(ImageError):
            parse_hex_words(text)
