"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
    MagicException,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: a Chunk is an
    ordered sequence of fields (or other chunks) laid out contiguously.

    Passing some data (bytes or a Stream) to the constructor unpacks it
    starting from the current position of the stream.
    """

    def __init__(self, data=None, **kwargs):
        super().__init__(**kwargs)

        if data is not None:
            stream = data if isinstance(data, Stream) else Stream(data)
            self.logger.debug('unpacking \'%s\' from %r', self.__class__.__name__, stream)
            self.unpack(stream)
        else:
            self.relayout()

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_value(self):
        return self

    def _set_value(self, value):
        raise AttributeError(f'you cannot set the value of the chunk \'{self.__class__.__name__}\', set its fields')

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def _get_size(self):
        '''the size MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        return {name: (field.offset, field.size) for name, field in self.get_fields()}

    def relayout(self, offset=0):
        '''Set the offset of each field as if the chunk were packed at the given offset.'''
        self.offset = offset

        size = 0
        for _, field in self.get_fields():
            size += field.relayout(offset=offset + size)

        return size

    def pack(self) -> bytes:
        return b''.join(field.pack() for _, field in self.get_fields())

    def unpack(self, stream):
        '''Read the fields one after the other from the actual position of the stream.

        A failure inside a field is re-raised as ChunkUnpackException (or MagicException)
        with the name of the field prepended to the chain.'''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            field.offset = stream.tell()
            self.logger.debug('unpacking %s.%s at 0x%x', self.__class__.__name__, field_name, field.offset)

            try:
                field.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                raise ChunkUnpackException(chain=[field_name] + e.chain, message=e.message) from e
            except MagicException as e:
                raise MagicException(chain=[field_name] + e.chain, message=e.message) from e

        if hasattr(self, 'validate'):
            self.validate()
