"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream once its offset is known.
"""
import logging
import struct
from typing import NamedTuple

from .meta import FieldBase, Endianess
from .properties import ChunkPhase, Offset
from .streams import Stream, CHUNK_SIZE
from .exceptions import MagicHeaderMismatch


logger = logging.getLogger(__name__)

LENGTH_PREFIX_FORMAT = '<I'
LENGTH_PREFIX_SIZE = struct.calcsize(LENGTH_PREFIX_FORMAT)


class Section(NamedTuple):
    """Length-prefixed block of bytes extracted from a container."""
    length: int
    data: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "Section":
        return cls(len(data), data)

    def __repr__(self):
        return f'<{self.__class__.__name__}(length={self.length})>'


def read_section(stream: Stream, offset: int) -> Section:
    '''Read a little endian 32 bits length followed by that many bytes.

    Either the whole section is returned or an exception is raised.'''
    stream.seek(offset)
    prefix = stream.read_exactly(LENGTH_PREFIX_SIZE)
    length = struct.unpack(LENGTH_PREFIX_FORMAT, prefix)[0]

    logger.debug('section at offset %d declares %d bytes' % (offset, length))

    return Section(length, stream.read_exactly(length))


def copy_payload(stream: Stream, offset: int, chunk_size: int = CHUNK_SIZE) -> Section:
    '''Read everything from offset to the end of the stream.

    The total length is not known in advance: the data is read in chunks of
    chunk_size bytes until the end of input.'''
    stream.seek(offset)

    data = stream.read_all(chunk_size)

    logger.debug('copied %d bytes of payload from offset %d' % (len(data), offset))

    return Section.from_bytes(data)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.where = offset if isinstance(offset, Offset) else Offset(offset or 0)
        self.offset = None

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __str__(self):
        return str(self.value)

    def resolve_offset(self):
        return self.where.resolve(self)

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def unpack(self, stream):
        '''Fill the field reading from stream at self.offset.

        Every subclass must leave the value untouched when it fails.'''
        self._phase = ChunkPhase.UNPACKING
        try:
            self.value = self._unpack(stream)
        except Exception:
            self._phase = ChunkPhase.ERROR
            raise
        self._phase = ChunkPhase.DONE

    def _unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers from bytes.

    With is_magic the value must be equal to the default (or equals_to),
    otherwise MagicHeaderMismatch is raised.
    """

    def __init__(self, format, default=0, equals_to=None, is_magic=False,
                 endianess=Endianess.LITTLE_ENDIAN, **kw):
        self.format = format
        self.endianess = endianess
        self.is_magic = is_magic
        super().__init__(default=default if equals_to is None else equals_to, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value) if self.value is not None else None)

    def value_from_default(self):
        # nothing is read until the field is unpacked
        return None

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _unpack(self, stream):
        stream.seek(self.offset)
        value = struct.unpack(self.get_format(), stream.read_exactly(self.size))[0]

        if self.is_magic and value != self.default:
            self.logger.warning(f'the magic doesn\'t correspond: 0x{value:08x} != 0x{self.default:08x}')
            raise MagicHeaderMismatch(
                chain=[],
                msg=f'expected magic 0x{self.default:08x}, found 0x{value:08x}')

        return value


class PaddingField(Field):
    '''Reserved bytes: they must be present but their content is discarded.'''

    def __init__(self, n, **kw):
        self.length = n
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.length})>'

    def _get_size(self):
        return self.length

    def _unpack(self, stream):
        stream.seek(self.offset)
        stream.read_exactly(self.length)


class SectionField(Field):
    """Represent a length prefixed block of bytes: its size includes the prefix."""

    def _get_size(self):
        if self.value is None:
            raise AttributeError(f'size of field "{self.name}" is unknown until unpacked')

        return LENGTH_PREFIX_SIZE + self.value.length

    def _unpack(self, stream):
        return read_section(stream, self.offset)


class TrailingField(Field):
    '''Takes as much stream as possible'''

    def __init__(self, chunk_size=CHUNK_SIZE, **kw):
        if chunk_size <= 0:
            raise ValueError(f'chunk size must be positive, not {chunk_size}')

        self.chunk_size = chunk_size
        super().__init__(**kw)

    def _get_size(self):
        if self.value is None:
            raise AttributeError(f'size of field "{self.name}" is unknown until unpacked')

        return self.value.length

    def _unpack(self, stream):
        return copy_payload(stream, self.offset, chunk_size=self.chunk_size)
