"""Building the data-available announcements sent to tags, and their checksums."""

from __future__ import annotations

from typing import Optional

from eslstation.protocol import MAC_LENGTH, AvailDataInfo, DataType, PendingData

DATA_ATTEMPTS = 10
FILE_ATTEMPTS = 60 * 24
SEGMENTED_ATTEMPTS = 120
SEGMENT_TEXT_LENGTH = 10


def add_checksum(data: bytes) -> bytes:
    """Return data with its first byte replaced by the 8-bit sum of the others."""
    data = bytes(data)
    if not data:
        raise ValueError("cannot checksum an empty packet")
    return bytes([sum(data[1:]) & 0xFF]) + data[1:]


def verify_checksum(data: bytes) -> bool:
    """True if the first byte is the 8-bit sum of the remaining bytes."""
    data = bytes(data)
    if not data:
        return False
    return data[0] == sum(data[1:]) & 0xFF


def _mac(mac: bytes) -> bytes:
    mac = bytes(mac)
    if len(mac) != MAC_LENGTH:
        raise ValueError(f"mac must be {MAC_LENGTH} bytes, got {len(mac)}")
    return mac


def idle_request(mac: bytes, next_checkin: int, max_sleep: int) -> Optional[PendingData]:
    """Tell a tag to sleep; None when there is no time left to sleep."""
    mac = _mac(mac)
    next_checkin = min(next_checkin, max_sleep)
    if next_checkin <= 0:
        return None
    info = AvailDataInfo(data_type=DataType.NOUPDATE, next_check_in=next_checkin)
    return PendingData(info, DATA_ATTEMPTS + max_sleep, mac)


def data_request(mac: bytes, data: bytes, data_type: int, version: int) -> PendingData:
    """Announce an in-memory payload of the given type."""
    mac = _mac(mac)
    info = AvailDataInfo(
        data_ver=version & 0xFFFFFFFFFFFFFFFF,
        data_size=len(data),
        data_type=data_type,
        next_check_in=0,
    )
    return PendingData(info, DATA_ATTEMPTS, mac)


def file_request(
    mac: bytes, md5: bytes, size: int, data_type: int, lut: int, next_checkin: int
) -> PendingData:
    """Announce a file; its version is the first eight bytes of its MD5."""
    mac = _mac(mac)
    md5 = bytes(md5)
    if len(md5) < 8:
        raise ValueError("md5 must hold at least 8 bytes")
    info = AvailDataInfo(
        data_ver=int.from_bytes(md5[:8], "little"),
        data_size=size,
        data_type=data_type,
        data_type_argument=lut,
        next_check_in=next_checkin,
    )
    return PendingData(info, FILE_ATTEMPTS, mac)


def segmented_data_request(mac: bytes, text: str, icons: int, inverted: bool) -> PendingData:
    """Announce ten characters of segment text plus icon bits for a segmented tag.

    The text fills the eight version bytes and spills its last two characters
    into the low half of the size field; the icons occupy the high half.
    """
    mac = _mac(mac)
    raw = text.encode("latin-1")[:SEGMENT_TEXT_LENGTH].ljust(SEGMENT_TEXT_LENGTH, b"\x00")
    data_size = ((icons << 16) & 0xFFFF0000) | int.from_bytes(raw[8:10], "little")
    info = AvailDataInfo(
        data_ver=int.from_bytes(raw[:8], "little"),
        data_size=data_size,
        data_type=DataType.UK_SEGMENTED,
        data_type_argument=1 if inverted else 0,
        next_check_in=0,
    )
    return PendingData(info, SEGMENTED_ATTEMPTS, mac)


def segmented_info_request(mac: bytes) -> PendingData:
    """Ask a segmented tag to show its own information screen."""
    mac = _mac(mac)
    info = AvailDataInfo(data_type=DataType.UK_SEGMENTED)
    return PendingData(info, SEGMENTED_ATTEMPTS, mac)


def tag_command_request(mac: bytes, cmd: int) -> PendingData:
    """Ask a tag to execute a command."""
    mac = _mac(mac)
    info = AvailDataInfo(data_type=DataType.COMMAND_DATA, data_type_argument=cmd, next_check_in=0)
    return PendingData(info, SEGMENTED_ATTEMPTS, mac)


def cancel_request(mac: bytes) -> PendingData:
    """An empty announcement that cancels whatever is pending for a tag."""
    return PendingData(AvailDataInfo(), 0, _mac(mac))