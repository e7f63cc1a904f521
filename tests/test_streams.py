import io

import pytest

from ncmstruct.exceptions import IOFailure, SeekFailure, TruncatedRead
from ncmstruct.streams import Stream


def test_bytes_stream_read_all():
    stream = Stream(b'\x01\x02\x03\x04\x05')

    assert stream.read(1) == b'\x01'
    assert stream.read(1) == b'\x02'
    assert stream.read_all() == b'\x03\x04\x05'
    assert stream.tell() == 5


def test_file_stream_read_all(tmp_path):
    path_data = tmp_path / 'auaua'
    path_data.write_bytes(b'\x01\x02\x03\x04\x05')

    with Stream(str(path_data)) as stream:
        assert stream.read(1) == b'\x01'
        assert stream.read(1) == b'\x02'
        assert stream.read_all() == b'\x03\x04\x05'
        assert stream.tell() == 5

    assert stream.closed


@pytest.mark.parametrize('chunk_size', [1, 2, 3, 7, 1024])
def test_iter_chunks(chunk_size):
    data = bytes(range(200))
    chunks = list(Stream(data).iter_chunks(chunk_size))

    assert all(len(_) <= chunk_size for _ in chunks)
    assert b''.join(chunks) == data


def test_iter_chunks_wrong_size():
    with pytest.raises(ValueError):
        list(Stream(b'abc').iter_chunks(0))


def test_read_exactly():
    stream = Stream(b'kebab')

    assert stream.read_exactly(2) == b'ke'
    assert stream.read_exactly(0) == b''

    with pytest.raises(TruncatedRead):
        stream.read_exactly(4)


def test_seek_failure():
    with pytest.raises(SeekFailure):
        Stream(b'kebab').seek(-1)

    with pytest.raises(ValueError):
        Stream(b'kebab').seek('0')


def test_closed_handle():
    handle = io.BytesIO(b'kebab')
    stream = Stream(handle)
    handle.close()

    with pytest.raises(IOFailure):
        stream.read(1)

    with pytest.raises(SeekFailure):
        stream.seek(0)


def test_read_failure(flaky_io):
    stream = Stream(flaky_io(b'kebab', fail_after=1))

    assert stream.read(1) == b'k'

    with pytest.raises(IOFailure):
        stream.read(1)


def test_open_missing_file(tmp_path):
    with pytest.raises(IOFailure):
        Stream(str(tmp_path / 'missing'))


def test_handle_is_not_owned():
    handle = io.BytesIO(b'kebab')

    with Stream(handle):
        pass

    assert not handle.closed


def test_stat(tmp_path):
    path_data = tmp_path / 'auaua'
    path_data.write_bytes(b'\x00' * 10)

    with Stream(path_data) as stream:
        assert stream.stat().st_size == 10

    with pytest.raises(IOFailure):
        Stream(b'kebab').stat()


def test_read_exactly_more_than_left(flaky_io):
    '''A size larger than the data left is refused before reading.'''
    stream = Stream(flaky_io(b'kebab', fail_after=0))
    stream.seek(2)

    assert stream.remaining() == 3

    with pytest.raises(TruncatedRead):
        stream.read_exactly(0xfffffff0)

    assert stream.tell() == 2


def test_remaining_past_the_end():
    stream = Stream(b'kebab')
    stream.seek(10)

    assert stream.remaining() == 0
