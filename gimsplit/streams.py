import logging
import os
from contextlib import contextmanager

from .exceptions import UnpackException


logger = logging.getLogger(__name__)


class Stream(object):
    '''Random access cursor over an in-memory buffer.

    The cursor lives inside a window [start, end) of the buffer: every seek()
    and read() is checked against it and fails with UnpackException instead
    of going out of range. Offsets are always absolute with respect to the
    whole buffer, also for the windows obtained via window().'''

    def __init__(self, obj, start=0, end=None):
        '''Here we normalize the object in order to be accessed as a buffer'''
        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)

        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % obj.__class__.__name__)

        init_method()

        self.start = start
        self.end = len(self.buffer) if end is None else end

        if not 0 <= self.start <= self.end <= len(self.buffer):
            raise UnpackException(message='window [0x%x, 0x%x) outside of the buffer (0x%x bytes)' % (
                self.start, self.end, len(self.buffer)))

        self.position = self.start

    def __repr__(self):
        return '<%s(0x%x-0x%x @ 0x%x)>' % (self.__class__.__name__, self.start, self.end, self.position)

    def __len__(self):
        return self.end - self.start

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'', self.obj)
        with open(self.obj, 'rb') as f:
            self.buffer = memoryview(f.read())

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.buffer = memoryview(self.obj)

    init_bytearray = init_bytes

    def init_memoryview(self):
        self.buffer = self.obj

    def tell(self):
        return self.position

    @property
    def remaining(self):
        return self.end - self.position

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if not self.start <= offset <= self.end:
            raise UnpackException(message='seek to 0x%x outside of [0x%x, 0x%x]' % (offset, self.start, self.end))

        self.position = offset

        return self

    def read(self, n):
        '''Read exactly n bytes or fail'''
        if n < 0 or n > self.remaining:
            raise UnpackException(message='reading 0x%x bytes at 0x%x but only 0x%x are available' % (
                n, self.position, self.remaining))

        data = self.buffer[self.position:self.position + n].tobytes()
        self.position += n

        return data

    def read_all(self):
        return self.read(self.remaining)

    def window(self, start, end):
        '''Return a new cursor, positioned at start, that cannot go outside [start, end).

        The window must lie inside the window of this stream.'''
        if not self.start <= start <= end <= self.end:
            raise UnpackException(message='window [0x%x, 0x%x) outside of [0x%x, 0x%x)' % (
                start, end, self.start, self.end))

        return Stream(self.buffer, start=start, end=end)

    def save(self):
        self.history.append(self.position)

    def restore(self):
        self.position = self.history.pop()

    @contextmanager
    def preserve(self):
        '''Restore the position on exit whatever happened in between.'''
        self.save()
        try:
            yield self
        finally:
            self.restore()
