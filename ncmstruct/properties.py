import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk or of a field'''
    INIT      = 0
    UNPACKING = auto()
    DONE      = auto()
    ERROR     = auto()


def next_offset(start, size, gap=0):
    '''The offset right after a piece of data starting at start and
    long size bytes, skipping gap bytes.

    This is the single step of the ladder: chaining it through the fields
    of a chunk gives the position of each one.'''
    return start + size + gap


class Offset(object):
    '''Where a field starts, expressed in absolute terms.'''

    def __init__(self, value=0):
        self.value = value

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value})>'

    def follows(self):
        '''Name of the sibling this offset depends on, None if absolute.'''
        return None

    def resolve(self, field):
        return self.value


class After(Offset):
    '''This makes the relation between the position of fields explicit.

    The expression names a sibling of the field at the same level, like

        class Example(Chunk):
            length = fields.StructField('I', offset=0)
            data   = fields.SectionField(offset=After('.length', gap=2))

    so that "data" starts right after "length" plus two bytes. The sibling
    must be already unpacked since its size is known only at that point.
    '''

    def __init__(self, expression, gap=0):
        super().__init__(value=None)
        self.expression = expression
        self.gap = gap

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression}, gap={self.gap})>'

    def follows(self):
        return self.expression.lstrip('.')

    def resolve(self, field):
        name = self.follows()
        sibling = getattr(field.father, name)

        if sibling._phase != ChunkPhase.DONE:
            raise AttributeError(
                f'field "{field.name}" needs "{name}" to be unpacked before resolving its offset')

        offset = next_offset(sibling.offset, sibling.size, self.gap)
        logger.debug(' resolved %r as %d' % (self, offset))

        return offset
