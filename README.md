# eslstation

Helpers for an access point that serves e-paper electronic shelf label
tags: the binary structures exchanged with tags, the "data available"
announcements, block-wise transfers, rendering images into the bit
planes tags display, and small formatters for generated content.

## Modules

- `eslstation.protocol` – enumerations (`HwType`, `Capability`,
  `DataType`, `TagCommand`, `PacketType`, `TagScreenType`, `LutGroup`)
  and packed little-endian structures with `pack()` / `unpack()`:
  `MacFcs`, `AvailDataReq`, `AvailDataInfo`, `PendingData`,
  `BlockRequest`, `BlockRequestAck`, `EspBlockRequest`,
  `EspXferComplete`, `EspAvailDataReq`, `EspSetChannelPower`.
  `unpack()` raises `ValueError` on a wrong length. `format_mac()` and
  `mac_to_hex()` print an 8-byte MAC most significant byte first.
- `eslstation.messages` – `add_checksum()` / `verify_checksum()` (the
  first byte is the 8-bit sum of the rest) and builders returning
  `PendingData`: `idle_request()` (returns `None` when there is no time
  to sleep), `data_request()`, `file_request()` (version taken from the
  first eight MD5 bytes), `segmented_data_request()`,
  `segmented_info_request()`, `tag_command_request()` and
  `cancel_request()`.
- `eslstation.transfers` – `block_count()` and `block_slice()` for
  4096-byte blocks (a request past the end gets the last block),
  `pending_filename()` / `raw_filename()`, `stage_pending()` and
  `complete_transfer()` for the per-tag `.pending` and `.raw` files
  under a storage root, and `file_md5()`.
- `eslstation.imaging` – `render_plane()`, `render_buffer()`,
  `image_to_file()` and `jpeg_to_file()` turn a Pillow image into a 1bpp
  black plane followed, if red was used, by a red plane. `RenderParams`
  holds rotation, dithering (Burkes), the optional gray palette entry and
  bit depth; `has_red` is set during rendering. Landscape images other
  than 400x300 are rotated to portrait.
- `eslstation.weather` – `wind_speed_to_beaufort()`,
  `wind_direction_icon()`, `normalize_weather_code()`, `weather_icon()`,
  `weather_text()`, `is_severe()`, `segments_for_weather()`, URL
  builders `geocode_url()`, `current_weather_url()`, `forecast_url()`,
  and `parse_buienradar()` returning 24 `RainSample` entries.
- `eslstation.content` – `ContentMode`, `Display` / `display_for()`,
  `url_encode()`, `format_http_date()`, `epoch_to_display()`,
  `nfc_url_payload()` (an NDEF URI record in a TLV), `parse_lut_bytes()`
  (always 76 bytes), the segment formatters `segments_for_number()`,
  `segments_for_date()`, `segments_static()`, and `load_template()` for
  JSON layout templates.

## Examples

```python
from eslstation.protocol import AvailDataInfo, DataType

info = AvailDataInfo(data_ver=1, data_size=4736,
                     data_type=DataType.IMG_RAW_1BPP,
                     data_type_argument=0, next_check_in=15)
raw = info.pack()
assert AvailDataInfo.unpack(raw).data_size == 4736
```

```python
from eslstation.messages import add_checksum, verify_checksum

packet = add_checksum(bytes([0, 1, 2, 3]))
assert verify_checksum(packet)
```

```python
from PIL import Image
from eslstation.imaging import RenderParams, image_to_file

image = Image.new("RGB", (296, 128), "white")
image_to_file(image, "tag.raw", RenderParams(dither=True))
```

```python
from eslstation.content import url_encode
from eslstation.weather import wind_speed_to_beaufort

url_encode("a b")             # "a%20b"
wind_speed_to_beaufort(10.0)  # 5
```

## What it does not do

The package builds and parses data; it does not run a station. There is
no radio or serial link to tags, no web server or file manager, no
firmware updating of the station, no programming of tags, and no
network fetching (the weather helpers only build URLs and parse
replies). Text and fonts are not drawn; rendering starts from an image
you supply.

## Tests

The test suite uses pytest; install the `test` extra to get it.