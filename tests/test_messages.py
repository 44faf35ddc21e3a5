import pytest

from eslstation.messages import (
    add_checksum,
    cancel_request,
    data_request,
    file_request,
    idle_request,
    segmented_data_request,
    segmented_info_request,
    tag_command_request,
    verify_checksum,
)
from eslstation.protocol import DataType, PendingData, TagCommand

MAC = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08])


def test_add_checksum_sets_first_byte():
    assert add_checksum(b"\x00\x01\x02") == b"\x03\x01\x02"


def test_checksum_round_trip():
    packet = add_checksum(bytes(range(40)))
    assert verify_checksum(packet)


def test_checksum_detects_corruption():
    packet = bytearray(add_checksum(b"\x00hello"))
    packet[2] ^= 0x01
    assert not verify_checksum(bytes(packet))


def test_checksum_empty():
    with pytest.raises(ValueError):
        add_checksum(b"")
    assert verify_checksum(b"") is False


def test_idle_request_clipped_to_max_sleep():
    pending = idle_request(MAC, 500, 40)
    assert pending.availdatainfo.next_check_in == 40
    assert pending.availdatainfo.data_type == DataType.NOUPDATE
    assert pending.attempts_left == 50
    assert pending.target_mac == MAC


def test_idle_request_zero_is_none():
    assert idle_request(MAC, 0, 40) is None


def test_idle_request_bad_mac():
    with pytest.raises(ValueError):
        idle_request(b"\x01\x02", 5, 40)


def test_data_request():
    pending = data_request(MAC, b"abcdef", DataType.NFC_RAW_CONTENT, 1234)
    info = pending.availdatainfo
    assert info.data_size == 6
    assert info.data_type == DataType.NFC_RAW_CONTENT
    assert info.data_ver == 1234
    assert pending.attempts_left == 10


def test_file_request_version_from_md5():
    md5 = bytes(range(16))
    pending = file_request(MAC, md5, 4736, DataType.IMG_RAW_1BPP, 1, 15)
    packed = pending.pack()
    assert packed[1:9] == md5[:8]
    info = pending.availdatainfo
    assert info.data_size == 4736
    assert info.data_type_argument == 1
    assert info.next_check_in == 15
    assert pending.attempts_left == 60 * 24


def test_file_request_short_md5():
    with pytest.raises(ValueError):
        file_request(MAC, b"\x01\x02", 1, DataType.IMG_RAW_1BPP, 0, 0)


def test_segmented_text_in_wire_bytes():
    pending = segmented_data_request(MAC, "abcdefghij", 0x04, True)
    packed = pending.pack()
    assert packed[1:11] == b"abcdefghij"
    assert pending.availdatainfo.data_size >> 16 == 0x04
    assert pending.availdatainfo.data_type == DataType.UK_SEGMENTED
    assert pending.availdatainfo.data_type_argument == 1
    assert pending.attempts_left == 120


def test_segmented_round_trip():
    pending = segmented_data_request(MAC, "  12  days", 0x02, False)
    assert PendingData.unpack(pending.pack()) == pending


def test_segmented_info_request():
    pending = segmented_info_request(MAC)
    assert pending.availdatainfo.data_type == DataType.UK_SEGMENTED
    assert pending.availdatainfo.data_ver == 0
    assert pending.availdatainfo.data_size == 0


def test_tag_command_request():
    pending = tag_command_request(MAC, TagCommand.SCAN)
    assert pending.availdatainfo.data_type == DataType.COMMAND_DATA
    assert pending.availdatainfo.data_type_argument == TagCommand.SCAN


def test_cancel_request_is_empty():
    pending = cancel_request(MAC)
    packed = pending.pack()
    assert packed[-8:] == MAC
    assert packed[:-8] == bytes(len(packed) - 8)