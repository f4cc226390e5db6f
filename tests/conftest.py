import pytest

import gimbuilder


# RGBA5551 words and their decoded colors
PALETTE_WORDS = (0x8000, 0xfc00, 0x83e0, 0x001f)
PALETTE_COLORS = (
    (0x00, 0x00, 0x00, 0xff),
    (0xff, 0x00, 0x00, 0xff),
    (0x00, 0xff, 0x00, 0xff),
    (0x00, 0x00, 0xff, 0x00),
)


@pytest.fixture
def palette_colors():
    return PALETTE_COLORS


@pytest.fixture
def palette_block():
    return gimbuilder.palette(1, 4, gimbuilder.rgba5551(*PALETTE_WORDS), flags=0x0a)


@pytest.fixture
def image_block():
    '''2x2 4bpp image with indexes 0, 1, 2, 3'''
    return gimbuilder.image(4, 2, 2, b'\x10\x32', flags=0x0b)


@pytest.fixture
def sample_gim(palette_block, image_block):
    '''ROOT -> PICTURE -> {PALETTE, IMAGE}'''
    return gimbuilder.gim(gimbuilder.picture(palette_block, image_block, flags=0x0c))
