import logging
from typing import Tuple

from gimsplit.streams import Stream
from gimsplit.exceptions import InvalidPaletteException
from . import DataSubHeader
from .pixels import PixelFormat, decode_colors, row_size
from .tree import BlockRecord


logger = logging.getLogger(__name__)


Color = Tuple[int, int, int, int]


def decode_palette(stream: Stream, block: BlockRecord) -> Tuple[Color, ...]:
    '''Extract the colors of a PALETTE block, in order.

    The palette has as many entries as the width declared in its header and
    its entries can only be raw colors.'''
    data = stream.window(block.payload_offset, block.end)
    header = DataSubHeader(data)

    pixel_format = PixelFormat.lookup(header.format.value)
    if not pixel_format.is_color:
        raise InvalidPaletteException(pixel_format.value)

    count = header.width.value

    data.seek(header.resolve_pixels(block.payload_offset))
    raw = data.read(row_size(pixel_format, count))

    logger.debug('palette at 0x%x with %d entries of %s', block.start, count, pixel_format.name)

    return tuple(decode_colors(pixel_format, raw, count))


def default_palette(capacity: int) -> Tuple[Color, ...]:
    '''Grayscale ramp used when an indexed image has no palette.'''
    if capacity < 2:
        return ((0x00, 0x00, 0x00, 0xff),) * capacity

    return tuple((_ * 255 // (capacity - 1),) * 3 + (0xff,) for _ in range(capacity))


def fit_palette(palette, capacity: int) -> Tuple[Color, ...]:
    '''Make the palette exactly capacity entries long: the extra entries are
    dropped and the missing ones are taken from the default palette.'''
    palette = tuple(palette[:capacity])

    return palette + default_palette(capacity)[len(palette):]
