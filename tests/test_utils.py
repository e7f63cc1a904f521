import io
import os

import pytest
from PIL import Image

from ncmstruct import NcmFile, TruncatedRead
from ncmstruct.music.ncm.utils import dump_sections, get_cover_extension, get_cover_image


def image_bytes(format):
    buffer = io.BytesIO()
    Image.new('RGB', (5, 3), 'red').save(buffer, format=format)

    return buffer.getvalue()


@pytest.mark.parametrize('format,ext', [
    ('PNG', '.png'),
    ('JPEG', '.jpg'),
])
def test_cover_image(format, ext, build_ncm):
    ncm = NcmFile('track.ncm', source=build_ncm(cover=image_bytes(format))).parse()

    image = get_cover_image(ncm)

    assert image.format == format
    assert image.size == (5, 3)
    assert get_cover_extension(ncm) == ext


@pytest.mark.parametrize('cover', [b'', b'not an image at all'])
def test_cover_image_missing(cover, build_ncm):
    ncm = NcmFile('track.ncm', source=build_ncm(cover=cover)).parse()

    assert get_cover_image(ncm) is None
    assert get_cover_extension(ncm) == '.bin'


def test_dump_sections(tmp_path, build_ncm):
    sections = {
        'key': b'\x01' * 16,
        'metadata': b'music:{}',
        'cover': image_bytes('PNG'),
        'audio': b'\xfe' * 2048,
    }
    ncm = NcmFile('track.ncm', source=build_ncm(**sections)).parse()

    outdir = tmp_path / 'track'
    paths = dump_sections(ncm, str(outdir))

    assert [os.path.basename(_) for _ in paths] == ['key.bin', 'metadata.bin', 'cover.png', 'audio.bin']

    for name, data in sections.items():
        path = next(_ for _ in paths if os.path.basename(_).startswith(name))
        with open(path, 'rb') as f:
            assert f.read() == data


def test_dump_sections_partial(tmp_path, build_ncm):
    data = build_ncm(key=b'kebab', metadata=b'x' * 100)
    ncm = NcmFile('track.ncm', source=data[:30])

    with pytest.raises(TruncatedRead):
        ncm.parse()

    paths = dump_sections(ncm, str(tmp_path))

    assert [os.path.basename(_) for _ in paths] == ['key.bin']
