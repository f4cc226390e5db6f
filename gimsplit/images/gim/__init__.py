'''
# Graphic Image Map

Raster image container used by the PSP (and, big-endian, by the PS3).

The file starts with a 16 bytes header and then is a tree of blocks: each
block begins with a 16 bytes header indicating its type, its size (header
included) and where its next block and its data are, both as offsets from the
start of the header itself

  .-------------------------------.
  | MIG.00.1PSP\\0 + 4 reserved    |
  | ROOT                          |
  |   PICTURE                     |
  |     IMAGE                     |
  |     PALETTE                   |
  |   PICTURE ...                 |
  |   FILEINFO                    |
  '-------------------------------'

ROOT and PICTURE contain other blocks, the others are leaves. IMAGE and
PALETTE leaves start their data with a secondary header describing the pixels.

The format is documented at <https://www.psdevwiki.com/ps3/Graphic_Image_Map_(GIM)>.
'''
from enum import Enum

from gimsplit.core import Chunk
from gimsplit.enum import Compliant
from gimsplit import fields


GIM_MAGIC    = b'MIG.00.1'
GIM_PLATFORM = b'PSP\x00'

BLOCK_HEADER_SIZE = 0x10


class BlockType(Enum):
    ROOT     = 0x02
    PICTURE  = 0x03
    IMAGE    = 0x04
    PALETTE  = 0x05
    FILEINFO = 0xff

    @property
    def is_container(self):
        return self in (BlockType.ROOT, BlockType.PICTURE)


class GIMHeader(Chunk):
    magic    = fields.StringField(8, default=GIM_MAGIC, is_magic=True, compliant=Compliant.MAGIC)
    platform = fields.StringField(4, default=GIM_PLATFORM, is_magic=True, compliant=Compliant.MAGIC)
    reserved = fields.StringField(4)


class BlockHeader(Chunk):
    '''Types not in BlockType are kept as plain integers.'''
    type         = fields.StructField('H', enum=BlockType, default=BlockType.ROOT)
    flags        = fields.StructField('H')
    block_size   = fields.StructField('I', default=BLOCK_HEADER_SIZE)
    next_offset  = fields.StructField('I', default=BLOCK_HEADER_SIZE)
    data_offset  = fields.StructField('I', default=BLOCK_HEADER_SIZE)


class DataSubHeader(Chunk):
    '''
    Header at the start of the data of IMAGE and PALETTE blocks.

    For a palette width is the number of entries and height is 1. The pixels
    offsets are from the start of this header.
    '''
    length       = fields.StructField('H', default=0x30)
    reference    = fields.StructField('H')
    format       = fields.StructField('H')
    order        = fields.StructField('H')
    width        = fields.StructField('H')
    height       = fields.StructField('H')
    bpp_align    = fields.StructField('H')
    pitch        = fields.StructField('H')
    height_align = fields.StructField('H')
    dim_count    = fields.StructField('H')
    reserved     = fields.StringField(4)
    index_start  = fields.StructField('i')
    pixels_start = fields.StructField('i')
    pixels_end   = fields.StructField('i')
    plane_mask   = fields.StructField('i')
    level_type   = fields.StructField('h')
    level_count  = fields.StructField('h')
    frame_type   = fields.StructField('h')
    frame_count  = fields.StructField('h')

    def __str__(self):
        return '%dx%d fmt=%d pitch=%d' % (
            self.width.value,
            self.height.value,
            self.format.value,
            self.pitch.value,
        )

    @property
    def pixels_offset(self):
        '''Where the pixels are with respect to the end of this header.'''
        return self.pixels_start.value - self.length.value

    def resolve_pixels(self, payload_offset):
        return payload_offset + self.length.value + self.pixels_offset
