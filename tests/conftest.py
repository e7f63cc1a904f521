import io
import struct

import pytest

from ncmstruct.music.ncm import MAGIC_HEADER_1, MAGIC_HEADER_2


def make_ncm(key=b'', metadata=b'', cover=b'', audio=b'',
             magic=(MAGIC_HEADER_1, MAGIC_HEADER_2),
             reserved=b'\x01\x02', flags=b'\xaa' * 9, trailer=b'\xbb' * 4,
             key_length=None):
    return b''.join([
        struct.pack('<II', *magic),
        reserved,
        struct.pack('<I', len(key) if key_length is None else key_length), key,
        struct.pack('<I', len(metadata)), metadata,
        flags,
        struct.pack('<I', len(cover)), cover,
        trailer,
        audio,
    ])


class FlakyIO(io.BytesIO):
    '''Fails with an OSError after a given number of reads.'''

    def __init__(self, data, fail_after):
        super().__init__(data)
        self.fail_after = fail_after

    def read(self, size=-1):
        if self.fail_after == 0:
            raise OSError('device unplugged')
        self.fail_after -= 1
        return super().read(size)


@pytest.fixture
def build_ncm():
    '''Build the raw bytes of a container from its sections.'''
    return make_ncm


@pytest.fixture
def flaky_io():
    return FlakyIO


@pytest.fixture
def sections():
    return {
        'key': bytes(range(128)),
        'metadata': b'163 key(Don\'t modify):' + b'\x42' * 300,
        'cover': b'\x89PNG' + b'\x00' * 60,
        'audio': bytes(_ % 251 for _ in range(5000)),
    }


@pytest.fixture
def ncm_data(sections):
    return make_ncm(**sections)


@pytest.fixture
def ncm_path(tmp_path, ncm_data):
    path = tmp_path / 'track.ncm'
    path.write_bytes(ncm_data)

    return path
