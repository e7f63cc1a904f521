"""
Core module for the abstraction of a file format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import NcmException
from .properties import ChunkPhase


class Chunk(metaclass=MetaChunk):
    """
    Main class that defines a format: it's an ordered list of fields, each one
    declaring its offset, usually with respect to the field preceding it.

    The chunk owns the stream only if it was created from a path or from raw
    bytes; a file object passed as source is left open on close().
    """

    def __init__(self, filepath=None, source=None):
        self.logger = logging.getLogger(f'{self.__module__}.{self.__class__.__name__}')
        if filepath is None and source is None:
            raise ValueError(f"{self.__class__.__name__} needs a path or a source to read from")

        self._phase = ChunkPhase.INIT
        self.filepath = filepath
        self.stream = Stream(source if source is not None else filepath)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.stream.close()

    def get_ordered_fields_name(self) -> List[str]:
        return self._fields

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

    @property
    def phase(self):
        return self._phase

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        '''Offset and size of each field unpacked so far.'''
        result = {}
        for name, field in self.get_fields():
            if field._phase != ChunkPhase.DONE:
                break
            result[name] = (field.offset, field.size)

        return result

    def unpack_field(self, stream, field_name):
        '''Resolve the offset of a single field and unpack it.

        Any exception of this package gets the name of the field appended
        to its chain.'''
        field = getattr(self, field_name)
        field.offset = field.resolve_offset()

        self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, field.offset))

        try:
            field.unpack(stream)
        except NcmException as e:
            e.chain.append(field_name)
            raise

        return field

    def unpack(self, stream):
        '''Walk the fields in order: the offset of a field can be computed only
        after the fields it depends on are unpacked so there is no other
        order possible.

        Fields already unpacked are left as they are; on error the walk stops
        and the fields from the failing one onward stay empty.'''
        self._phase = ChunkPhase.UNPACKING
        try:
            for field_name, field in self.get_fields():
                if field._phase == ChunkPhase.DONE:
                    continue
                self.unpack_field(stream, field_name)
        except Exception:
            self._phase = ChunkPhase.ERROR
            raise

        self._phase = ChunkPhase.DONE

        return self
