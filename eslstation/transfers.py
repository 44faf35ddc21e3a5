"""Block-wise serving of pending tag data and the files that track transfers."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional, Tuple

from eslstation.protocol import BLOCK_DATA_SIZE, mac_to_hex

CURRENT_DIR = "current"


def block_count(length: int) -> int:
    """Number of blocks needed to carry length bytes."""
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    return -(-length // BLOCK_DATA_SIZE)


def block_slice(data: bytes, block_id: int) -> Tuple[int, bytes]:
    """The block a tag asked for, as (block id actually served, block bytes).

    A request past the end is answered with the last block.
    """
    if block_id < 0:
        raise ValueError(f"block id must not be negative, got {block_id}")
    total = block_count(len(data))
    if total == 0:
        raise ValueError("no data to serve")
    block_id = min(block_id, total - 1)
    start = block_id * BLOCK_DATA_SIZE
    return block_id, bytes(data[start : start + BLOCK_DATA_SIZE])


def pending_filename(mac: bytes) -> str:
    """Storage path of the image waiting to be sent to a tag."""
    return f"/{CURRENT_DIR}/{mac_to_hex(mac)}.pending"


def raw_filename(mac: bytes) -> str:
    """Storage path of the image a tag is currently showing."""
    return f"/{CURRENT_DIR}/{mac_to_hex(mac)}.raw"


def _under(root, name: str) -> Path:
    return Path(root) / name.lstrip("/")


def stage_pending(root, source, mac: bytes) -> Path:
    """Move a freshly rendered file into place as the tag's pending image.

    An older pending image is replaced. Returns the new path.
    """
    source = Path(source)
    if not source.is_file():
        raise FileNotFoundError(f"File not found. {source}")
    if source.stat().st_size == 0:
        raise ValueError(f"File has size 0. {source}")
    target = _under(root, pending_filename(mac))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.unlink(missing_ok=True)
    source.replace(target)
    return target


def complete_transfer(root, mac: bytes, keep_raw: bool = True) -> Optional[Path]:
    """Turn the tag's pending image into its current image after a transfer.

    With keep_raw false the pending image is simply discarded. Returns the
    path of the current image if one exists afterwards.
    """
    pending = _under(root, pending_filename(mac))
    raw = _under(root, raw_filename(mac))
    if pending.exists():
        raw.unlink(missing_ok=True)
        if keep_raw:
            pending.replace(raw)
        else:
            pending.unlink()
    return raw if raw.exists() else None


def file_md5(path) -> bytes:
    """The 16-byte MD5 digest of a file's contents."""
    digest = hashlib.md5()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(65536), b""):
            digest.update(chunk)
    return digest.digest()