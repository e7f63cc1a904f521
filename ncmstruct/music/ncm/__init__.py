'''
# NCM

Container used by a well known music streaming client for the tracks it
downloads: the key, the metadata and the audio are encrypted, the cover is
a plain image.

All the integers are little endian and unsigned; each block is prefixed by
its length on 32 bits and separated from the next by a few bytes that are
not interpreted here

    | offset | size | content                          |
    |--------|------|----------------------------------|
    | 0      | 4    | magic "CTEN"                     |
    | 4      | 4    | magic "FDAM"                     |
    | 8      | 2    | reserved                         |
    | 10     | 4+Lk | key                              |
    |        | 4+Lm | metadata                         |
    |        | 9    | flags                            |
    |        | 4+Lc | cover image                      |
    |        | 4    | trailer                          |
    |        | ...  | audio, up to the end of the file |

so the position of each block is known only after the lengths of all the
previous ones have been read.
'''
import os

from ncmstruct.core import Chunk
from ncmstruct import fields
from ncmstruct.exceptions import InvalidExtension
from ncmstruct.properties import After, ChunkPhase


MAGIC_HEADER_1 = 0x4e455443
MAGIC_HEADER_2 = 0x4d414446

EXTENSION = '.ncm'


class NcmFile(Chunk):
    '''
    An NCM file on disk: create it from a path (or pass an already open
    handle/raw bytes as source), then call parse() to populate it

        with NcmFile('track.ncm') as ncm:
            ncm.parse()
            key = ncm.key.value.data

    Until a field is unpacked its value is None.
    '''
    magic_a  = fields.StructField('I', equals_to=MAGIC_HEADER_1, is_magic=True, offset=0)
    magic_b  = fields.StructField('I', equals_to=MAGIC_HEADER_2, is_magic=True, offset=After('.magic_a'))
    reserved = fields.PaddingField(2, offset=After('.magic_b'))
    key      = fields.SectionField(offset=After('.reserved'))
    metadata = fields.SectionField(offset=After('.key'))
    flags    = fields.PaddingField(9, offset=After('.metadata'))
    cover    = fields.SectionField(offset=After('.flags'))
    trailer  = fields.PaddingField(4, offset=After('.cover'))
    audio    = fields.TrailingField(offset=After('.trailer'))

    SECTIONS = ('key', 'metadata', 'cover', 'audio')

    def __init__(self, filepath, source=None):
        filepath = os.path.normpath(os.fspath(filepath))
        self.dirname, self.filename = os.path.split(filepath)
        # from the last dot of the name, a leading one included: '.ncm' has extension '.ncm'
        dot = self.filename.rfind('.')
        self.ext = self.filename[dot:] if dot != -1 else ''
        self.valid = False

        super().__init__(filepath=filepath, source=source)

    @property
    def path(self):
        return self.filepath

    @property
    def sections(self):
        '''The sections extracted so far, by name.'''
        result = {}
        for name in self.SECTIONS:
            value = getattr(self, name).value
            if value is not None:
                result[name] = value

        return result

    def stat(self):
        return self.stream.stat()

    def validate(self):
        '''Check the extension and then the magic header.'''
        self.valid = False

        if self.ext.lower() != EXTENSION:
            raise InvalidExtension(chain=[], msg=f'extension \'{self.ext}\' is not \'{EXTENSION}\'')

        self.check_header()
        self.valid = True

    def check_header(self):
        '''Both the magic values must match; the stream is left at offset 8.'''
        for name in ('magic_a', 'magic_b'):
            self.unpack_field(self.stream, name)

    def parse(self):
        '''Validate and extract all the sections.

        On error the sections before the failing one keep their value,
        the others stay None.'''
        if self._phase == ChunkPhase.DONE:
            return self

        try:
            self.validate()
        except Exception:
            self._phase = ChunkPhase.ERROR
            raise

        self.logger.debug('\'%s\' is valid, extracting sections' % self.path)

        return self.unpack(self.stream)
