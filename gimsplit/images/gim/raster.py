'''
Rebuild the raster contained into an IMAGE block.

The rows are read one after the other starting from the pixels offset of the
data header; between two rows some padding is skipped, computed as the size of
the row modulo the pitch.
'''
import logging

import numpy as np
from PIL import Image

from gimsplit.streams import Stream
from gimsplit.diagnostics import Diagnostic, DiagnosticKind, ignore
from gimsplit.exceptions import (
    UnsupportedFormatError,
    FormatError,
    MissingPaletteWarning,
)
from . import DataSubHeader
from .pixels import PixelFormat, decode_row, row_size
from .palette import default_palette, fit_palette
from .tree import BlockRecord


logger = logging.getLogger(__name__)


class RasterImage(object):
    '''A decoded image: either RGBA pixels with shape (height, width, 4) or
    indexes with shape (height, width) together with their palette.'''

    def __init__(self, width, height, pixels, palette=None, pixel_format=None):
        self.width = width
        self.height = height
        self.pixels = pixels
        self.palette = palette
        self.pixel_format = pixel_format

    def __repr__(self):
        return '<%s(%dx%d %s)>' % (
            self.__class__.__name__,
            self.width,
            self.height,
            self.pixel_format.name if self.pixel_format else 'RGBA',
        )

    @property
    def is_indexed(self):
        return self.palette is not None

    def color_at(self, x, y):
        if self.is_indexed:
            return self.palette[self.pixels[y, x]]

        return tuple(int(_) for _ in self.pixels[y, x])

    def to_image(self) -> Image.Image:
        size = (self.width, self.height)

        if not self.is_indexed:
            return Image.frombytes('RGBA', size, self.pixels.tobytes())

        image = Image.frombytes('P', size, self.pixels.tobytes())
        image.putpalette(b''.join(bytes(_) for _ in self.palette), rawmode='RGBA')

        return image


def decode_image(stream: Stream, block: BlockRecord, palette=None, listener=ignore) -> RasterImage:
    '''Extract the image of an IMAGE block.

    Indexed images are resolved with palette, if it's missing the default
    palette is used and MISSING_PALETTE is notified to the listener.'''
    data = stream.window(block.payload_offset, block.end)
    header = DataSubHeader(data)

    pixel_format = PixelFormat.lookup(header.format.value)
    if not pixel_format.is_supported:
        raise UnsupportedFormatError(pixel_format.value)

    width, height, pitch = header.width.value, header.height.value, header.pitch.value

    logger.debug('image at 0x%x is %s %s', block.start, header, pixel_format.name)

    if pitch == 0:
        raise FormatError(message=f'image at 0x{block.start:x} has a zero pitch')

    if pixel_format.is_indexed:
        capacity = pixel_format.palette_capacity
        if palette is None:
            logger.warning('indexed image at 0x%x without palette, using the default one', block.start)
            listener(Diagnostic(
                DiagnosticKind.MISSING_PALETTE,
                exception=MissingPaletteWarning(f'image at 0x{block.start:x} has no palette'),
                offset=block.start,
            ))
            palette = default_palette(capacity)
        palette = fit_palette(palette, capacity)
        pixels = np.zeros((height, width), dtype=np.uint8)
    else:
        palette = None
        pixels = np.zeros((height, width, 4), dtype=np.uint8)

    source_size = row_size(pixel_format, width)
    padding = source_size % pitch

    data.seek(header.resolve_pixels(block.payload_offset))
    for y in range(height):
        if y and padding:
            data.read(padding)

        row = decode_row(pixel_format, data.read(source_size))
        # a 4bpp row with odd width leaves its last pixel untouched
        pixels[y, :len(row)] = row

    return RasterImage(width, height, pixels, palette=palette, pixel_format=pixel_format)
