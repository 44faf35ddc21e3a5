import pytest

from eslstation.protocol import BLOCK_DATA_SIZE
from eslstation.transfers import (
    block_count,
    block_slice,
    complete_transfer,
    file_md5,
    pending_filename,
    raw_filename,
    stage_pending,
)

MAC = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08])


@pytest.mark.parametrize(
    "length, expected",
    [(0, 0), (1, 1), (BLOCK_DATA_SIZE, 1), (BLOCK_DATA_SIZE + 1, 2), (3 * BLOCK_DATA_SIZE, 3)],
)
def test_block_count(length, expected):
    assert block_count(length) == expected


def test_block_count_negative():
    with pytest.raises(ValueError):
        block_count(-1)


def test_block_slices_reassemble():
    data = bytes(i % 251 for i in range(2 * BLOCK_DATA_SIZE + 100))
    parts = [block_slice(data, i) for i in range(block_count(len(data)))]
    assert b"".join(chunk for _, chunk in parts) == data
    assert [bid for bid, _ in parts] == [0, 1, 2]
    assert all(len(chunk) <= BLOCK_DATA_SIZE for _, chunk in parts)


def test_block_slice_past_end_serves_last():
    data = bytes(BLOCK_DATA_SIZE + 10)
    assert block_slice(data, 9) == block_slice(data, 1)
    assert block_slice(data, 9)[0] == 1


def test_block_slice_errors():
    with pytest.raises(ValueError):
        block_slice(b"", 0)
    with pytest.raises(ValueError):
        block_slice(b"abc", -1)


def test_filenames():
    assert pending_filename(MAC) == "/current/0807060504030201.pending"
    assert raw_filename(MAC) == "/current/0807060504030201.raw"


def test_filename_bad_mac():
    with pytest.raises(ValueError):
        pending_filename(b"\x01\x02")


def test_stage_and_complete(tmp_path):
    src = tmp_path / "render.raw"
    src.write_bytes(b"image-data")
    staged = stage_pending(tmp_path, src, MAC)
    assert staged == tmp_path / "current" / "0807060504030201.pending"
    assert staged.read_bytes() == b"image-data"
    assert not src.exists()

    raw = complete_transfer(tmp_path, MAC)
    assert raw == tmp_path / "current" / "0807060504030201.raw"
    assert raw.read_bytes() == b"image-data"
    assert not staged.exists()


def test_stage_replaces_older_pending(tmp_path):
    first = tmp_path / "a"
    first.write_bytes(b"old")
    stage_pending(tmp_path, first, MAC)
    second = tmp_path / "b"
    second.write_bytes(b"new")
    staged = stage_pending(tmp_path, second, MAC)
    assert staged.read_bytes() == b"new"


def test_stage_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        stage_pending(tmp_path, tmp_path / "missing", MAC)
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    with pytest.raises(ValueError):
        stage_pending(tmp_path, empty, MAC)


def test_complete_without_keeping_raw(tmp_path):
    src = tmp_path / "x"
    src.write_bytes(b"payload")
    staged = stage_pending(tmp_path, src, MAC)
    assert complete_transfer(tmp_path, MAC, keep_raw=False) is None
    assert not staged.exists()


def test_complete_without_pending_keeps_existing_raw(tmp_path):
    raw = tmp_path / "current" / "0807060504030201.raw"
    raw.parent.mkdir()
    raw.write_bytes(b"shown")
    assert complete_transfer(tmp_path, MAC) == raw
    assert raw.read_bytes() == b"shown"


def test_complete_nothing(tmp_path):
    assert complete_transfer(tmp_path, MAC) is None


def test_file_md5(tmp_path):
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    assert file_md5(empty).hex() == "d41d8cd98f00b204e9800998ecf8427e"
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"one")
    b.write_bytes(b"two")
    assert len(file_md5(a)) == 16
    assert file_md5(a) != file_md5(b)
    assert file_md5(a) == file_md5(a)