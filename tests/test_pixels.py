import numpy as np
import pytest

from gimsplit.exceptions import UnsupportedFormatError
from gimsplit.images.gim.pixels import (
    PixelFormat,
    decode_color,
    decode_colors,
    decode_row,
    row_size,
    scale5,
    scale6,
)


def test_lookup():
    assert PixelFormat.lookup(0) == PixelFormat.RGB565
    assert PixelFormat.lookup(7) == PixelFormat.INDEX32

    with pytest.raises(UnsupportedFormatError) as e:
        PixelFormat.lookup(8)

    assert e.value.code == 8


def test_properties():
    assert PixelFormat.RGBA8888.is_color
    assert PixelFormat.INDEX4.is_indexed
    assert PixelFormat.INDEX16.is_indexed
    assert not PixelFormat.INDEX16.is_supported
    assert PixelFormat.INDEX4.palette_capacity == 16
    assert PixelFormat.INDEX8.palette_capacity == 256
    assert PixelFormat.RGB565.palette_capacity == 0


def test_row_size():
    assert row_size(PixelFormat.RGB565, 3) == 6
    assert row_size(PixelFormat.RGBA4444, 3) == 6
    assert row_size(PixelFormat.RGBA8888, 3) == 12
    assert row_size(PixelFormat.INDEX8, 3) == 3
    # half a byte is dropped
    assert row_size(PixelFormat.INDEX4, 3) == 1
    assert row_size(PixelFormat.INDEX32, 3) == 0


def test_scale_truncates():
    assert scale5(31) == 255
    assert scale6(63) == 255
    # 16 * 255 / 31 = 131.6...
    assert scale5(16) == 131
    # 32 * 255 / 63 = 129.5...
    assert scale6(32) == 129


def test_rgb565():
    assert decode_color(PixelFormat.RGB565, b'\x00\x00') == (0, 0, 0, 255)
    assert decode_color(PixelFormat.RGB565, b'\xff\xff') == (255, 255, 255, 255)
    # red is in the top bits
    assert decode_color(PixelFormat.RGB565, b'\x00\xf8') == (255, 0, 0, 255)
    assert decode_color(PixelFormat.RGB565, b'\xe0\x07') == (0, 255, 0, 255)
    assert decode_color(PixelFormat.RGB565, b'\x1f\x00') == (0, 0, 255, 255)


def test_rgba5551():
    assert decode_color(PixelFormat.RGBA5551, b'\x00\x80') == (0, 0, 0, 255)
    assert decode_color(PixelFormat.RGBA5551, b'\x00\x7c') == (255, 0, 0, 0)
    assert decode_color(PixelFormat.RGBA5551, b'\xe0\x03') == (0, 255, 0, 0)
    assert decode_color(PixelFormat.RGBA5551, b'\x1f\x00') == (0, 0, 255, 0)


def test_rgba4444_is_not_rescaled():
    assert decode_color(PixelFormat.RGBA4444, b'\xff\xff') == (30, 30, 30, 30)
    # low nibble of the first byte is blue, high nibble of the second is alpha
    assert decode_color(PixelFormat.RGBA4444, b'\x21\x43') == (6, 4, 2, 8)


def test_rgba8888_reversed():
    assert decode_color(PixelFormat.RGBA8888, b'\x01\x02\x03\x04') == (2, 3, 4, 1)


def test_indexed_has_no_color():
    for pixel_format in (PixelFormat.INDEX4, PixelFormat.INDEX8, PixelFormat.INDEX16, PixelFormat.INDEX32):
        with pytest.raises(UnsupportedFormatError):
            decode_color(pixel_format, b'\x00\x00\x00\x00')


def test_decode_colors():
    colors = decode_colors(PixelFormat.RGB565, b'\x00\x00\xff\xff\x1f\x00', 3)

    assert colors == [(0, 0, 0, 255), (255, 255, 255, 255), (0, 0, 255, 255)]

    with pytest.raises(UnsupportedFormatError):
        decode_colors(PixelFormat.INDEX32, b'', 1)


@pytest.mark.parametrize('pixel_format', [
    PixelFormat.RGB565,
    PixelFormat.RGBA5551,
    PixelFormat.RGBA4444,
    PixelFormat.RGBA8888,
])
def test_row_agrees_with_color(pixel_format):
    raw = bytes(range(0, 256, 3))[:64]

    row = decode_row(pixel_format, raw)
    count = len(raw) * 8 // pixel_format.bits_per_pixel

    assert row.shape == (count, 4)
    assert row.dtype == np.uint8
    assert [tuple(int(_) for _ in pixel) for pixel in row] == decode_colors(pixel_format, raw, count)


def test_index4_row_low_nibble_first():
    assert list(decode_row(PixelFormat.INDEX4, b'\x10\x32')) == [0, 1, 2, 3]


def test_index8_row():
    assert list(decode_row(PixelFormat.INDEX8, b'\x00\x07\xff')) == [0, 7, 255]


def test_unsupported_row():
    with pytest.raises(UnsupportedFormatError) as e:
        decode_row(PixelFormat.INDEX16, b'\x00\x00')

    assert e.value.code == 6


def test_rgba8888_agrees_with_row():
    raw = b'\x80\x11\x22\x33' + b'\x00\xff\xfe\xfd'

    assert decode_colors(PixelFormat.RGBA8888, raw, 2) == [(0x11, 0x22, 0x33, 0x80), (0xff, 0xfe, 0xfd, 0x00)]
    assert decode_row(PixelFormat.RGBA8888, raw).tolist() == [[0x11, 0x22, 0x33, 0x80], [0xff, 0xfe, 0xfd, 0x00]]
