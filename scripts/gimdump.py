#!/usr/bin/env python3
import logging
import os
import sys

from gimsplit.streams import Stream
from gimsplit.images.gim import BlockType, DataSubHeader
from gimsplit.images.gim.tree import parse_container
from gimsplit.images.gim.utils import walk, get_blocks_by_type, read_file_info

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s <gim file>' % progname)
    sys.exit(1)


def dump_data_header(stream, block, indent):
    header = DataSubHeader(stream.window(block.payload_offset, block.end))
    print(f'''{indent}  format {header.format.value} order {header.order.value} {header.width.value}x{header.height.value} pitch {header.pitch.value}
{indent}  pixels 0x{header.pixels_start.value:x}-0x{header.pixels_end.value:x} planes 0x{header.plane_mask.value:x}
{indent}  levels {header.level_count.value} (type {header.level_type.value}) frames {header.frame_count.value} (type {header.frame_type.value})''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    stream = Stream(sys.argv[1])
    root = parse_container(stream)

    for depth, block in walk(root):
        indent = '  ' * depth
        print(f'{indent}{block}')
        if block.type in (BlockType.IMAGE, BlockType.PALETTE):
            dump_data_header(stream, block, indent)
        elif block.type == BlockType.FILEINFO:
            for line in read_file_info(stream, block):
                print(f'{indent}  {line}')

    images = get_blocks_by_type(root, BlockType.IMAGE)
    palettes = get_blocks_by_type(root, BlockType.PALETTE)
    print(f'{len(images)} images, {len(palettes)} palettes')
