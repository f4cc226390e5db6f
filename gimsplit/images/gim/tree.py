'''
Build the tree of blocks of a GIM file.

The walk is done in two passes: first the headers are read in file order into a
flat list of (depth, record) with all the offsets already made absolute and
validated, then the list is folded into the tree. No recursion is involved in
the reading, the nesting is tracked with an explicit stack bounded by
MAX_DEPTH.
'''
import logging
from collections import namedtuple
from typing import List, Tuple

from gimsplit.streams import Stream
from gimsplit.exceptions import (
    BlockChainException,
    RootTypeException,
)
from . import (
    GIMHeader,
    BlockHeader,
    BlockType,
    BLOCK_HEADER_SIZE,
)


logger = logging.getLogger(__name__)

# ROOT -> PICTURE -> leaves is what is found in the wild
MAX_DEPTH = 16


class BlockRecord(namedtuple('BlockRecord', 'type flags size start end next_offset payload_offset children')):
    '''A block of the file with its offsets resolved as absolute.

    type is a BlockType or the integer code for the unknown ones.'''
    __slots__ = ()

    def __str__(self):
        return '%s flags=0x%x size=0x%x @0x%x next=0x%x data=0x%x' % (
            self.type_name, self.flags, self.size, self.start, self.next_offset, self.payload_offset)

    @property
    def type_name(self):
        return self.type.name if isinstance(self.type, BlockType) else 'UNKNOWN(0x%x)' % self.type

    @property
    def is_container(self):
        return isinstance(self.type, BlockType) and self.type.is_container

    @property
    def payload_size(self):
        return self.end - self.payload_offset

    def find_all(self, block_type):
        return [_ for _ in self.children if _.type == block_type]

    def find(self, block_type):
        '''First child with the given type, None if missing.'''
        return next((_ for _ in self.children if _.type == block_type), None)


def read_header(stream: Stream) -> BlockRecord:
    '''Read the 16 bytes header at the actual position making its offsets absolute.'''
    start = stream.tell()

    header = BlockHeader(stream)

    size = header.block_size.value
    record = BlockRecord(
        type=header.type.value,
        flags=header.flags.value,
        size=size,
        start=start,
        end=start + size,
        next_offset=start + header.next_offset.value,
        payload_offset=start + header.data_offset.value,
        children=(),
    )

    logger.debug('read block %s', record)

    if size < BLOCK_HEADER_SIZE:
        raise BlockChainException(message=f'block at 0x{start:x} has size 0x{size:x} smaller than its header')

    for name in ('next_offset', 'payload_offset'):
        if not start <= getattr(record, name) <= record.end:
            raise BlockChainException(message='%s 0x%x of block at 0x%x outside of [0x%x, 0x%x]' % (
                name, getattr(record, name), start, start, record.end))

    return record


def scan_headers(stream: Stream, container_end: int) -> List[Tuple[int, BlockRecord]]:
    '''First pass: all the headers from the actual position to container_end
    in file order, each one with its depth.

    A container's children start at its next offset and end with it; after
    a leaf the walk continues at its end.'''
    entries = []
    open_containers = [container_end]

    while open_containers:
        if stream.tell() >= open_containers[-1]:
            open_containers.pop()
            continue

        record = read_header(stream)
        depth = len(open_containers) - 1
        entries.append((depth, record))

        if record.is_container:
            if len(open_containers) > MAX_DEPTH:
                raise BlockChainException(message=f'blocks nested deeper than {MAX_DEPTH} at 0x{record.start:x}')

            following = record.next_offset
            open_containers.append(record.end)
        else:
            following = record.end

        if following < record.start + BLOCK_HEADER_SIZE:
            raise BlockChainException(message=f'block at 0x{record.start:x} does not advance past its own header')

        stream.seek(following)

    return entries


def assemble(entries: List[Tuple[int, BlockRecord]]) -> Tuple[BlockRecord, ...]:
    '''Second pass: fold the flat list of headers into the tree.

    Going backward the children of a block are exactly the blocks one level
    deeper met since the previous block at its same level or above.'''
    pending = {}

    for depth, record in reversed(entries):
        children = pending.pop(depth + 1, [])
        record = record._replace(children=tuple(reversed(children)))
        pending.setdefault(depth, []).append(record)

    return tuple(reversed(pending.get(0, [])))


def build_children(stream: Stream, container_end: int) -> Tuple[BlockRecord, ...]:
    '''The blocks from the actual position of the stream up to container_end.'''
    return assemble(scan_headers(stream, container_end))


def parse_container(data) -> BlockRecord:
    '''Parse a whole GIM file and return its ROOT block.

    data can be anything accepted by Stream.'''
    stream = data if isinstance(data, Stream) else Stream(data)

    GIMHeader(stream)

    root = read_header(stream)
    if root.type != BlockType.ROOT:
        raise RootTypeException(message=f'first block is {root.type_name} instead of ROOT')

    stream.seek(root.next_offset)

    return root._replace(children=build_children(stream, root.end))
