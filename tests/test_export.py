import pytest

import gimbuilder
from gimsplit.exceptions import FormatError
from gimsplit.images.gim import BlockType, GIMHeader, BLOCK_HEADER_SIZE
from gimsplit.images.gim.export import export_picture, make_header
from gimsplit.images.gim.tree import parse_container, BlockRecord
from gimsplit.streams import Stream


def payloads(stream, block):
    result = []
    for child in block.children:
        stream.seek(child.payload_offset)
        result.append(stream.read(child.size - BLOCK_HEADER_SIZE))

    return result


def test_make_header():
    assert make_header(BlockType.PALETTE, 0x0102, 0x40, 0x40, 0x10) == (
        b'\x05\x00\x02\x01'
        b'\x40\x00\x00\x00'
        b'\x40\x00\x00\x00'
        b'\x10\x00\x00\x00'
    )


def test_export_minimal_file_is_the_same(sample_gim):
    stream = Stream(sample_gim)
    root = parse_container(stream)

    assert export_picture(stream, root.children[0]) == sample_gim


def test_export_round_trip():
    first = gimbuilder.picture(gimbuilder.image(3, 1, 1, b'\x01\x02\x03\x04'), flags=0x11)
    second = gimbuilder.picture(
        gimbuilder.palette(1, 4, gimbuilder.rgba5551(1, 2, 3, 4)),
        gimbuilder.image(4, 2, 2, b'\x10\x32'),
        gimbuilder.leaf(0x1234, b'opaque!!'),
        flags=0x22,
    )
    data = gimbuilder.gim(first, second, gimbuilder.file_info('info'), root_flags=0x33)

    stream = Stream(data)
    root = parse_container(stream)
    picture = root.children[1]

    exported = export_picture(stream, picture, root_flags=root.flags)

    assert exported[:0x10] == GIMHeader().raw

    new_stream = Stream(exported)
    new_root = parse_container(new_stream)

    assert new_root.flags == 0x33
    assert new_root.size == BLOCK_HEADER_SIZE + picture.size
    assert len(new_root.children) == 1

    new_picture = new_root.children[0]
    assert new_picture.flags == 0x22
    assert new_picture.size == picture.size
    assert [(_.type, _.flags, _.size) for _ in new_picture.children] == [
        (_.type, _.flags, _.size) for _ in picture.children]
    assert payloads(new_stream, new_picture) == payloads(stream, picture)


def test_export_data_not_after_the_header():
    """The source blocks can have their data anywhere inside them"""
    # IMAGE header with data at 0x20 and 0x10 bytes of garbage in between
    payload = gimbuilder.data_payload(3, 1, 1, b'\x01\x02\x03\x04')
    image = make_header(BlockType.IMAGE, 0, 0x20 + len(payload), 0x20 + len(payload), 0x20) + b'\xee' * 0x10 + payload
    picture_block = make_header(BlockType.PICTURE, 0, 0x10 + len(image), 0x10, 0x10) + image
    data = gimbuilder.gim(picture_block)

    stream = Stream(data)
    picture = parse_container(stream).children[0]

    exported = Stream(export_picture(stream, picture))
    child = parse_container(exported).children[0].children[0]

    assert child.payload_offset == child.start + 0x20
    assert child.next_offset == child.end
    exported.seek(child.payload_offset)
    assert exported.read(child.payload_size) == payload


def test_export_truncated_payload():
    """A child whose data goes beyond the buffer cannot be exported"""
    picture = BlockRecord(
        type=BlockType.PICTURE, flags=0, size=0x30, start=0, end=0x30,
        next_offset=0x10, payload_offset=0x10,
        children=(
            BlockRecord(type=BlockType.IMAGE, flags=0, size=0x20, start=0x10, end=0x30,
                        next_offset=0x30, payload_offset=0x20, children=()),
        ),
    )

    with pytest.raises(FormatError):
        export_picture(Stream(b'\x00' * 0x28), picture)
