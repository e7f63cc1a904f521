"""
# ncmstruct: NCM containers for humans.

A container is described declaratively as an ordered list of fields, each
one knowing how to unpack itself from a stream and where it starts with
respect to the fields before it

    class NcmFile(Chunk):
        magic_a  = fields.StructField('I', equals_to=MAGIC_HEADER_1, is_magic=True, offset=0)
        ...
        key      = fields.SectionField(offset=After('.reserved'))
        metadata = fields.SectionField(offset=After('.key'))

Unpacking walks the fields in declaration order: a field can compute its
offset only when the one it follows is done, so the layout is resolved
strictly front to back.

The blocks are extracted as they are, still encrypted.
"""
from .music.ncm import NcmFile
from .fields import Section
from .exceptions import (
    NcmException,
    InvalidExtension,
    MagicHeaderMismatch,
    SeekFailure,
    TruncatedRead,
    IOFailure,
)
