"""Tag hardware types, data types and the packed structures exchanged with tags."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

PROTO_PAN_ID = 0x4447
RADIO_MAX_PACKET_LEN = 125

ADDR_MODE_NONE = 0
ADDR_MODE_SHORT = 2
ADDR_MODE_LONG = 3

FRAME_TYPE_BEACON = 0
FRAME_TYPE_DATA = 1
FRAME_TYPE_ACK = 2
FRAME_TYPE_MAC_CMD = 3

SHORT_MAC_UNUSED = 0x10000000

MAC_LENGTH = 8
BLOCK_PART_DATA_SIZE = 99
BLOCK_MAX_PARTS = 42
BLOCK_DATA_SIZE = 4096
BLOCK_REQ_PARTS_BYTES = 6
BLOCK_XFER_BUFFER_SIZE = BLOCK_DATA_SIZE + 4  # data plus the size/checksum header


class HwType(enum.IntEnum):
    SOLUM_154_SSD1619 = 0x00
    SOLUM_29_SSD1619 = 0x01
    SOLUM_42_SSD1619 = 0x02
    SOLUM_29_UC8151 = 0x11
    SOLUM_SEG_UK = 0xF0
    SOLUM_SEG_EU = 0xF1
    SOLUM_NODISPLAY = 0xFF


class Capability(enum.IntFlag):
    SUPPORTS_CUSTOM_LUTS = 0x04
    ALT_LUT_SIZE = 0x08
    HAS_EXT_POWER = 0x10
    HAS_WAKE_BUTTON = 0x20
    HAS_NFC = 0x40
    NFC_WAKE = 0x80


class DataType(enum.IntEnum):
    NOUPDATE = 0x00
    IMG_BMP = 0x02
    FW_UPDATE = 0x03
    IMG_DIFF = 0x10
    IMG_RAW_1BPP = 0x20
    IMG_RAW_2BPP = 0x21
    IMG_RAW_1BPP_DIRECT = 0x3F
    UK_SEGMENTED = 0x51
    EU_SEGMENTED = 0x52
    NFC_RAW_CONTENT = 0xA0
    NFC_URL_DIRECT = 0xA1
    TAG_CONFIG_DATA = 0xA8
    COMMAND_DATA = 0xAF
    CUSTOM_LUT_OTA = 0xB0


class TagCommand(enum.IntEnum):
    REBOOT = 0
    SCAN = 1
    RESET_SETTINGS = 2


class PacketType(enum.IntEnum):
    AVAIL_DATA_SHORTREQ = 0xE3
    BLOCK_REQUEST = 0xE4
    AVAIL_DATA_REQ = 0xE5
    AVAIL_DATA_INFO = 0xE6
    BLOCK_PARTIAL_REQUEST = 0xE7
    BLOCK_PART = 0xE8
    BLOCK_REQUEST_ACK = 0xE9
    XFER_COMPLETE = 0xEA
    XFER_COMPLETE_ACK = 0xEB
    CANCEL_XFER = 0xEC
    PING = 0xED
    PONG = 0xEE


class TagScreenType(enum.IntEnum):
    EINK_BW_1BPP = 0
    EINK_BW_2BPP = 1
    EINK_BW_4BPP = 2
    EINK_BWY_ONLY = 3
    EINK_BWY_2BPP = 4
    EINK_BWY_4BPP = 5
    EINK_BWR_ONLY = 6
    EINK_BWR_2BPP = 7
    EINK_BWR_4BPP = 8
    EINK_BWY_3BPP = 9
    EINK_BWR_3BPP = 10
    EINK_BW_3BPP = 11
    PERSISTENT_LCD_1BPP = 12
    EINK_BWY_5COLORS = 13
    EINK_BWR_5COLORS = 14
    EINK_BWY_6COLORS = 15
    EINK_BWR_6COLORS = 16
    OTHER = 0x7F


class LutGroup(enum.IntEnum):
    NEGATIVE = 0
    FASTBLINK = 1
    SLOWBLINK = 2
    SET = 3
    IMPROVE_SHARPNESS = 4
    IMPROVE_REDS = 5
    UNUSED = 6
    UNKNOWN = 7
    UNUSED3 = 8
    UNUSED4 = 9


def _pack(fmt: str, *values) -> bytes:
    try:
        return struct.pack(fmt, *values)
    except struct.error as exc:
        raise ValueError(str(exc)) from exc


def _unpack(fmt: str, data: bytes, name: str) -> tuple:
    size = struct.calcsize(fmt)
    if len(data) != size:
        raise ValueError(f"{name} needs {size} bytes, got {len(data)}")
    return struct.unpack(fmt, bytes(data))


def _fixed(name: str, value: bytes, length: int) -> bytes:
    value = bytes(value)
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    return value


@dataclass
class MacFcs:
    """The 16-bit IEEE 802.15.4 frame control field."""

    frame_type: int = 0
    secure: int = 0
    frame_pending: int = 0
    ack_required: int = 0
    pan_id_compressed: int = 0
    rfu1: int = 0
    rfu2: int = 0
    dest_addr_type: int = 0
    frame_version: int = 0
    src_addr_type: int = 0

    SIZE: ClassVar[int] = 2
    _LAYOUT: ClassVar[tuple] = (
        ("frame_type", 0, 3),
        ("secure", 3, 1),
        ("frame_pending", 4, 1),
        ("ack_required", 5, 1),
        ("pan_id_compressed", 6, 1),
        ("rfu1", 7, 1),
        ("rfu2", 8, 2),
        ("dest_addr_type", 10, 2),
        ("frame_version", 12, 2),
        ("src_addr_type", 14, 2),
    )

    def pack(self) -> bytes:
        value = 0
        for name, shift, width in self._LAYOUT:
            item = int(getattr(self, name))
            if not 0 <= item < (1 << width):
                raise ValueError(f"{name} does not fit in {width} bits: {item}")
            value |= item << shift
        return struct.pack("<H", value)

    @classmethod
    def unpack(cls, data: bytes) -> MacFcs:
        (value,) = _unpack("<H", data, cls.__name__)
        return cls(**{name: (value >> shift) & ((1 << width) - 1) for name, shift, width in cls._LAYOUT})


@dataclass
class AvailDataReq:
    """A tag's check-in report."""

    checksum: int = 0
    last_packet_lqi: int = 0
    last_packet_rssi: int = 0
    temperature: int = 0
    battery_mv: int = 0
    hw_type: int = 0
    wakeup_reason: int = 0
    capabilities: int = 0

    FORMAT: ClassVar[str] = "<BBbbHBBB"
    SIZE: ClassVar[int] = struct.calcsize("<BBbbHBBB")

    def pack(self) -> bytes:
        return _pack(
            self.FORMAT,
            self.checksum,
            self.last_packet_lqi,
            self.last_packet_rssi,
            self.temperature,
            self.battery_mv,
            self.hw_type,
            self.wakeup_reason,
            self.capabilities,
        )

    @classmethod
    def unpack(cls, data: bytes) -> AvailDataReq:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


@dataclass
class AvailDataInfo:
    """The access point's answer telling a tag what data is waiting."""

    checksum: int = 0
    data_ver: int = 0
    data_size: int = 0
    data_type: int = 0
    data_type_argument: int = 0
    next_check_in: int = 0

    FORMAT: ClassVar[str] = "<BQIBBH"
    SIZE: ClassVar[int] = struct.calcsize("<BQIBBH")

    def pack(self) -> bytes:
        return _pack(
            self.FORMAT,
            self.checksum,
            self.data_ver,
            self.data_size,
            self.data_type,
            self.data_type_argument,
            self.next_check_in,
        )

    @classmethod
    def unpack(cls, data: bytes) -> AvailDataInfo:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


@dataclass
class PendingData:
    """Data announced for one tag, with the number of attempts left."""

    availdatainfo: AvailDataInfo = field(default_factory=AvailDataInfo)
    attempts_left: int = 0
    target_mac: bytes = bytes(MAC_LENGTH)

    TAIL: ClassVar[str] = "<H8s"
    SIZE: ClassVar[int] = AvailDataInfo.SIZE + struct.calcsize("<H8s")

    def pack(self) -> bytes:
        mac = _fixed("target_mac", self.target_mac, MAC_LENGTH)
        return self.availdatainfo.pack() + _pack(self.TAIL, self.attempts_left, mac)

    @classmethod
    def unpack(cls, data: bytes) -> PendingData:
        data = bytes(data)
        if len(data) != cls.SIZE:
            raise ValueError(f"{cls.__name__} needs {cls.SIZE} bytes, got {len(data)}")
        info = AvailDataInfo.unpack(data[: AvailDataInfo.SIZE])
        attempts, mac = _unpack(cls.TAIL, data[AvailDataInfo.SIZE :], cls.__name__)
        return cls(info, attempts, mac)


@dataclass
class BlockRequest:
    """A tag's request for one block of a transfer."""

    checksum: int = 0
    ver: int = 0
    block_id: int = 0
    request_type: int = 0
    requested_parts: bytes = bytes(BLOCK_REQ_PARTS_BYTES)

    FORMAT: ClassVar[str] = "<BQBB6s"
    SIZE: ClassVar[int] = struct.calcsize("<BQBB6s")

    def pack(self) -> bytes:
        parts = _fixed("requested_parts", self.requested_parts, BLOCK_REQ_PARTS_BYTES)
        return _pack(self.FORMAT, self.checksum, self.ver, self.block_id, self.request_type, parts)

    @classmethod
    def unpack(cls, data: bytes) -> BlockRequest:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


@dataclass
class BlockRequestAck:
    checksum: int = 0
    please_wait_ms: int = 0

    FORMAT: ClassVar[str] = "<BH"
    SIZE: ClassVar[int] = struct.calcsize("<BH")

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.checksum, self.please_wait_ms)

    @classmethod
    def unpack(cls, data: bytes) -> BlockRequestAck:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


@dataclass
class EspBlockRequest:
    """A block request as forwarded by the radio to the station."""

    checksum: int = 0
    ver: int = 0
    block_id: int = 0
    src: bytes = bytes(MAC_LENGTH)

    FORMAT: ClassVar[str] = "<BQB8s"
    SIZE: ClassVar[int] = struct.calcsize("<BQB8s")

    def pack(self) -> bytes:
        src = _fixed("src", self.src, MAC_LENGTH)
        return _pack(self.FORMAT, self.checksum, self.ver, self.block_id, src)

    @classmethod
    def unpack(cls, data: bytes) -> EspBlockRequest:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


@dataclass
class EspXferComplete:
    checksum: int = 0
    src: bytes = bytes(MAC_LENGTH)

    FORMAT: ClassVar[str] = "<B8s"
    SIZE: ClassVar[int] = struct.calcsize("<B8s")

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.checksum, _fixed("src", self.src, MAC_LENGTH))

    @classmethod
    def unpack(cls, data: bytes) -> EspXferComplete:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


@dataclass
class EspAvailDataReq:
    """A tag check-in as forwarded by the radio to the station."""

    checksum: int = 0
    src: bytes = bytes(MAC_LENGTH)
    adr: AvailDataReq = field(default_factory=AvailDataReq)

    HEAD: ClassVar[str] = "<B8s"
    SIZE: ClassVar[int] = struct.calcsize("<B8s") + AvailDataReq.SIZE

    def pack(self) -> bytes:
        src = _fixed("src", self.src, MAC_LENGTH)
        return _pack(self.HEAD, self.checksum, src) + self.adr.pack()

    @classmethod
    def unpack(cls, data: bytes) -> EspAvailDataReq:
        data = bytes(data)
        if len(data) != cls.SIZE:
            raise ValueError(f"{cls.__name__} needs {cls.SIZE} bytes, got {len(data)}")
        head = struct.calcsize(cls.HEAD)
        checksum, src = _unpack(cls.HEAD, data[:head], cls.__name__)
        return cls(checksum, src, AvailDataReq.unpack(data[head:]))


@dataclass
class EspSetChannelPower:
    checksum: int = 0
    channel: int = 0
    power: int = 0

    FORMAT: ClassVar[str] = "<BBB"
    SIZE: ClassVar[int] = struct.calcsize("<BBB")

    def pack(self) -> bytes:
        return _pack(self.FORMAT, self.checksum, self.channel, self.power)

    @classmethod
    def unpack(cls, data: bytes) -> EspSetChannelPower:
        return cls(*_unpack(cls.FORMAT, data, cls.__name__))


def format_mac(mac: bytes) -> str:
    """Colon-separated lower-case MAC, most significant byte first."""
    mac = _fixed("mac", mac, MAC_LENGTH)
    return ":".join(f"{b:02x}" for b in reversed(mac))


def mac_to_hex(mac: bytes) -> str:
    """Upper-case hex MAC without separators, most significant byte first."""
    mac = _fixed("mac", mac, MAC_LENGTH)
    return "".join(f"{b:02X}" for b in reversed(mac))