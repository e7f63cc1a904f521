import io
import logging
import os

from .exceptions import IOFailure, SeekFailure, TruncatedRead


logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024


class Stream(object):
    '''This is a simple wrapper around bytes/file objects to uniform
    their properties: reads and seeks are translated into the exceptions
    of this package and short reads are detected.

    The stream closes only the file objects it opened itself, a handle
    passed by the caller stays under the caller's responsibility.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.owned = False

        if isinstance(obj, (str, os.PathLike)):
            self.init_path()
        elif isinstance(obj, (bytes, bytearray)):
            self.init_bytes()

    def __repr__(self):
        return f'<{self.__class__.__name__}({self._type.__name__})>'

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def init_path(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        try:
            self.obj = open(self.obj, 'rb')
        except OSError as e:
            raise IOFailure(chain=[], msg=str(e)) from e
        self.owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)
        self.owned = True

    @property
    def closed(self):
        return self.obj.closed

    def close(self):
        if self.owned and not self.obj.closed:
            logger.debug('closing %r' % self)
            self.obj.close()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        try:
            self.obj.seek(offset)
        except (OSError, ValueError) as e:
            raise SeekFailure(chain=[], msg=f'cannot seek at offset {offset}: {e}') from e

        return self

    def tell(self):
        try:
            return self.obj.tell()
        except (OSError, ValueError) as e:
            raise IOFailure(chain=[], msg=str(e)) from e

    def read(self, size=-1):
        try:
            return self.obj.read(size)
        except (OSError, ValueError) as e:
            raise IOFailure(chain=[], msg=str(e)) from e

    def remaining(self):
        '''Number of bytes between the current position and the end.'''
        try:
            offset = self.obj.tell()
            end = self.obj.seek(0, io.SEEK_END)
            self.obj.seek(offset)
        except (OSError, ValueError) as e:
            raise IOFailure(chain=[], msg=str(e)) from e

        return max(end - offset, 0)

    def read_exactly(self, size):
        '''Read size bytes or fail with TruncatedRead, never a partial result.

        The size comes from the data itself so it's checked against what is
        left before asking for it.'''
        offset = self.tell()
        available = self.remaining()
        if size > available:
            raise TruncatedRead(
                chain=[],
                msg=f'expected {size} bytes at offset {offset}, only {available} left')

        data = self.read(size)

        if len(data) != size:
            raise TruncatedRead(
                chain=[],
                msg=f'expected {size} bytes at offset {offset}, got {len(data)}')

        return data

    def iter_chunks(self, chunk_size=CHUNK_SIZE):
        '''Yield chunks of at most chunk_size bytes until the end of the stream.'''
        if chunk_size <= 0:
            raise ValueError(f'chunk size must be positive, not {chunk_size}')

        while True:
            data = self.read(chunk_size)
            if not data:
                return
            yield data

    def read_all(self, chunk_size=CHUNK_SIZE):
        '''Returns all the data from the current position to the end.'''
        return b''.join(self.iter_chunks(chunk_size))

    def stat(self):
        try:
            return os.fstat(self.obj.fileno())
        except (OSError, ValueError) as e:
            raise IOFailure(chain=[], msg=f'cannot stat {self!r}: {e}') from e
