from enum import Enum, auto

import pytest

from gimsplit.enum import Compliant
from gimsplit.exceptions import UnpackException, MagicException
from gimsplit.fields import StructField, StringField
from gimsplit.meta import Endianess
from gimsplit.streams import Stream


def test_structfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = StructField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\xfe\xca\x00\x00'


def test_structfield_unpack():
    field = StructField('I')
    stream = Stream(b'\x01\x02\x03\x04\xff')

    field.unpack(stream)

    assert field.value == 0x04030201
    assert stream.tell() == 4


def test_structfield_big_endian():
    field = StructField('H', endianess=Endianess.BIG_ENDIAN, default=0x0102)

    assert field.raw == b'\x01\x02'


def test_structfield_signed():
    field = StructField('h')
    field.unpack(Stream(b'\xfe\xff'))

    assert field.value == -2


def test_structfield_short_data():
    with pytest.raises(UnpackException):
        StructField('I').unpack(Stream(b'\x01\x02'))


class DummyEnum(Enum):
    NONE = 0
    FIRST = auto()
    SECOND = auto()


def test_structfield_enum():
    field = StructField('I', enum=DummyEnum, compliant=Compliant.ENUM)

    assert field.value == DummyEnum.NONE

    field.value = DummyEnum.SECOND

    assert field.value == DummyEnum.SECOND
    assert field.raw == b'\x02\x00\x00\x00'

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x04\x00\x00\x00'))


def test_structfield_enum_not_compliant():
    """Unknown values are kept as integers"""
    field = StructField('I', enum=DummyEnum)

    field.unpack(Stream(b'\x04\x00\x00\x00'))

    assert field.value == 4
    assert field.raw == b'\x04\x00\x00\x00'


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert len(field.raw) == field.size
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = bytes(range(0x10))

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_stringfield_from_default():
    field = StringField(default=b'kebab')

    assert len(field) == 5
    assert field.value == b'kebab'

    with pytest.raises(ValueError):
        StringField()


def test_magic():
    field = StringField(default=b'MAGIC', is_magic=True, compliant=Compliant.MAGIC)

    with pytest.raises(MagicException):
        field.unpack(Stream(b'MAGIK'))

    field.unpack(Stream(b'MAGIC'))
    assert field.value == b'MAGIC'


def test_magic_not_compliant():
    """Without compliance a wrong magic is only logged"""
    field = StringField(default=b'MAGIC', is_magic=True, compliant=Compliant.NONE)

    field.unpack(Stream(b'MAGIK'))

    assert field.value == b'MAGIK'
