'''
Re-package a PICTURE block into a minimal GIM file of its own.

The result contains the file header, a ROOT block sized for the picture, the
PICTURE header and then each child of the picture with its data copied as it
is. All the offsets are rewritten relative to the headers as they are
emitted, so the new file is self-consistent wherever the blocks came from.
'''
import logging

from gimsplit.streams import Stream
from . import GIMHeader, BlockHeader, BlockType, BLOCK_HEADER_SIZE
from .tree import BlockRecord


logger = logging.getLogger(__name__)


def make_header(block_type, flags, block_size, next_offset, data_offset) -> bytes:
    header = BlockHeader()
    header.type = block_type
    header.flags = flags
    header.block_size = block_size
    header.next_offset = next_offset
    header.data_offset = data_offset

    return header.raw


def export_picture(stream: Stream, picture: BlockRecord, root_flags=0) -> bytes:
    '''Return the raw GIM file containing only picture and its direct children.'''
    parts = [
        GIMHeader().raw,
        make_header(BlockType.ROOT, root_flags, BLOCK_HEADER_SIZE + picture.size, BLOCK_HEADER_SIZE, BLOCK_HEADER_SIZE),
        make_header(picture.type, picture.flags, picture.size, BLOCK_HEADER_SIZE, BLOCK_HEADER_SIZE),
    ]

    for child in picture.children:
        # the body is copied as it is, so the offsets inside it keep their meaning
        data_offset = child.payload_offset - child.start
        next_offset = child.next_offset - child.start if child.is_container else child.size

        stream.seek(child.start + BLOCK_HEADER_SIZE)
        body = stream.read(child.size - BLOCK_HEADER_SIZE)

        logger.debug('exporting %s with 0x%x bytes of data', child, len(body))

        parts.append(make_header(child.type, child.flags, child.size, next_offset, data_offset))
        parts.append(body)

    return b''.join(parts)
