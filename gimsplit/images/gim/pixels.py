'''
Pixel formats of the GIM images and how to decode them.

Colors are returned as (red, green, blue, alpha) tuples with 8 bits channels.
Two flavours of decoding are available: decode_color() works on a single entry
using bit fields (this is what palettes use), decode_row() works on a whole
row at once with numpy. They MUST agree.
'''
import logging
from enum import Enum

import numpy as np
from bitstring import Bits

from gimsplit.exceptions import UnsupportedFormatError


logger = logging.getLogger(__name__)


class PixelFormat(Enum):
    RGB565   = 0x00
    RGBA5551 = 0x01
    RGBA4444 = 0x02
    RGBA8888 = 0x03
    INDEX4   = 0x04
    INDEX8   = 0x05
    INDEX16  = 0x06
    INDEX32  = 0x07

    @classmethod
    def lookup(cls, code):
        '''The only way to obtain a format from a raw code.'''
        try:
            return cls(code)
        except ValueError:
            raise UnsupportedFormatError(code) from None

    @property
    def bits_per_pixel(self):
        return _BITS_PER_PIXEL[self]

    @property
    def is_color(self):
        return self in (PixelFormat.RGB565, PixelFormat.RGBA5551, PixelFormat.RGBA4444, PixelFormat.RGBA8888)

    @property
    def is_indexed(self):
        return not self.is_color

    @property
    def is_supported(self):
        return self.bits_per_pixel > 0

    @property
    def palette_capacity(self):
        '''Number of colors an image in this format can address.'''
        if not self.is_indexed or not self.is_supported:
            return 0

        return 1 << self.bits_per_pixel


# the 16 and 32 bits indexed formats are not handled, so they don't occupy space
_BITS_PER_PIXEL = {
    PixelFormat.RGB565:   16,
    PixelFormat.RGBA5551: 16,
    PixelFormat.RGBA4444: 16,
    PixelFormat.RGBA8888: 32,
    PixelFormat.INDEX4:    4,
    PixelFormat.INDEX8:    8,
    PixelFormat.INDEX16:   0,
    PixelFormat.INDEX32:   0,
}


def row_size(pixel_format, width):
    '''Bytes needed to store width pixels, truncated to whole bytes.'''
    return width * pixel_format.bits_per_pixel // 8


def scale5(value):
    return value * 255 // 31


def scale6(value):
    return value * 255 // 63


def _word(raw, length):
    return Bits(uint=int.from_bytes(raw[:length // 8], 'little'), length=length)


def rgb565_to_color(raw):
    red, green, blue = _word(raw, 16).unpack('uint:5, uint:6, uint:5')

    return scale5(red), scale6(green), scale5(blue), 0xff


def rgba5551_to_color(raw):
    alpha, red, green, blue = _word(raw, 16).unpack('uint:1, uint:5, uint:5, uint:5')

    return scale5(red), scale5(green), scale5(blue), 0xff if alpha else 0x00


def rgba4444_to_color(raw):
    '''The nibbles are only doubled, so the channels go from 0 to 30.'''
    alpha, red, green, blue = _word(raw, 16).unpack('uint:4, uint:4, uint:4, uint:4')

    return red * 2, green * 2, blue * 2, alpha * 2


def rgba8888_to_color(raw):
    '''The bytes are in the order A, R, G, B: the little endian word reads 0xBBGGRRAA.'''
    blue, green, red, alpha = _word(raw, 32).unpack('uint:8, uint:8, uint:8, uint:8')

    return red, green, blue, alpha


def _unsupported_color(pixel_format):
    def decode(raw):
        raise UnsupportedFormatError(pixel_format.value)

    return decode


_COLOR_DECODERS = {
    PixelFormat.RGB565:   rgb565_to_color,
    PixelFormat.RGBA5551: rgba5551_to_color,
    PixelFormat.RGBA4444: rgba4444_to_color,
    PixelFormat.RGBA8888: rgba8888_to_color,
    PixelFormat.INDEX4:   _unsupported_color(PixelFormat.INDEX4),
    PixelFormat.INDEX8:   _unsupported_color(PixelFormat.INDEX8),
    PixelFormat.INDEX16:  _unsupported_color(PixelFormat.INDEX16),
    PixelFormat.INDEX32:  _unsupported_color(PixelFormat.INDEX32),
}


def decode_color(pixel_format, raw):
    '''Decode a single color entry: indexed formats have no color on their own.'''
    return _COLOR_DECODERS[pixel_format](raw)


def decode_colors(pixel_format, raw, count):
    '''Slice raw in count entries of the size of the format and decode each one.'''
    step = pixel_format.bits_per_pixel // 8
    if step == 0:
        raise UnsupportedFormatError(pixel_format.value)

    return [decode_color(pixel_format, raw[_ * step:(_ + 1) * step]) for _ in range(count)]


def _row_words(raw):
    return np.frombuffer(raw, dtype='<u2').astype(np.uint32)


def rgb565_row(raw):
    words = _row_words(raw)
    row = np.empty((len(words), 4), dtype=np.uint8)
    row[:, 0] = ((words >> 11) & 0x1f) * 255 // 31
    row[:, 1] = ((words >> 5) & 0x3f) * 255 // 63
    row[:, 2] = (words & 0x1f) * 255 // 31
    row[:, 3] = 0xff

    return row


def rgba5551_row(raw):
    words = _row_words(raw)
    row = np.empty((len(words), 4), dtype=np.uint8)
    row[:, 0] = ((words >> 10) & 0x1f) * 255 // 31
    row[:, 1] = ((words >> 5) & 0x1f) * 255 // 31
    row[:, 2] = (words & 0x1f) * 255 // 31
    row[:, 3] = np.where(words >> 15, 0xff, 0x00)

    return row


def rgba4444_row(raw):
    '''Each source byte becomes two bytes: the low nibble first, then the high one.'''
    data = np.frombuffer(raw, dtype=np.uint8)
    expanded = np.empty(len(data) * 2, dtype=np.uint8)
    expanded[0::2] = (data & 0x0f) * 2
    expanded[1::2] = (data >> 4) * 2

    # the expanded bytes are in memory order B, G, R, A
    return expanded.reshape(-1, 4)[:, [2, 1, 0, 3]]


def rgba8888_row(raw):
    data = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 4)

    return data[:, [1, 2, 3, 0]]


def index4_row(raw):
    '''Two indexes for byte, low nibble first.'''
    data = np.frombuffer(raw, dtype=np.uint8)

    return np.stack([data & 0x0f, data >> 4], axis=1).reshape(-1)


def index8_row(raw):
    return np.frombuffer(raw, dtype=np.uint8).copy()


def _unsupported_row(pixel_format):
    def decode(raw):
        raise UnsupportedFormatError(pixel_format.value)

    return decode


_ROW_DECODERS = {
    PixelFormat.RGB565:   rgb565_row,
    PixelFormat.RGBA5551: rgba5551_row,
    PixelFormat.RGBA4444: rgba4444_row,
    PixelFormat.RGBA8888: rgba8888_row,
    PixelFormat.INDEX4:   index4_row,
    PixelFormat.INDEX8:   index8_row,
    PixelFormat.INDEX16:  _unsupported_row(PixelFormat.INDEX16),
    PixelFormat.INDEX32:  _unsupported_row(PixelFormat.INDEX32),
}


def decode_row(pixel_format, raw):
    '''Decode a whole row of pixels.

    It returns an array of shape (n, 4) with RGBA colors for the color
    formats and an array of shape (n,) of indexes for the indexed ones.'''
    return _ROW_DECODERS[pixel_format](raw)
