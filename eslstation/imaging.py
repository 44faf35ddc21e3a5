"""Turning images into the bit-plane buffers that e-paper tags display."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from PIL import Image

from eslstation.protocol import DataType


@dataclass(frozen=True)
class Rgb:
    r: int
    g: int
    b: int

    @classmethod
    def from_rgb565(cls, value: int) -> Rgb:
        """Expand a 16-bit RGB565 colour to 8 bits per channel."""
        return cls(
            ((value >> 8) & 0xF8) | ((value >> 13) & 0x07),
            ((value >> 3) & 0xFC) | ((value >> 9) & 0x03),
            ((value << 3) & 0xF8) | ((value >> 2) & 0x07),
        )


@dataclass
class RenderParams:
    """Options for rendering; has_red is set while rendering if red is used."""

    rotate: int = 0
    dither: bool = False
    gray_lut: bool = False
    bpp: int = 8
    has_red: bool = False
    data_type: int = DataType.IMG_RAW_1BPP


WHITE = Rgb(255, 255, 255)
BLACK = Rgb(0, 0, 0)
RED = Rgb(255, 0, 0)
GRAY = Rgb(160, 160, 160)


def color_distance(c1: Rgb, c2: Rgb, error: Sequence[float]) -> int:
    """Weighted squared distance between c1 (plus diffusion error) and c2."""
    r_diff = int(c1.r + error[0] - c2.r)
    g_diff = int(c1.g + error[1] - c2.g)
    b_diff = int(c1.b + error[2] - c2.b)
    return 3 * r_diff * r_diff + 6 * g_diff * g_diff + b_diff * b_diff


def _as_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    if "A" in image.getbands() or image.mode == "P":
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        background.alpha_composite(rgba)
        return background.convert("RGB")
    return image.convert("RGB")


def render_plane(image: Image.Image, params: RenderParams, red: bool) -> bytes:
    """Render one 1-bit plane (black or red) of the image, MSB first per byte."""
    if params.rotate not in (0, 1, 2, 3):
        raise ValueError(f"rotation must be 0-3, got {params.rotate}")
    rgb = _as_rgb(image)
    width, height = rgb.size
    pixels = rgb.load()

    rotate = params.rotate
    bufw, bufh = width, height
    if bufw > bufh and bufw != 400 and bufh != 300:
        rotate = (rotate + 3) % 4
        bufw, bufh = height, width

    sources = {
        0: lambda x, y: (x, y),
        1: lambda x, y: (y, bufw - 1 - x),
        2: lambda x, y: (bufw - 1 - x, bufh - 1 - y),
        3: lambda x, y: (bufh - 1 - y, x),
    }
    source = sources[rotate]
    cache: dict[int, Rgb] = {}

    def read(x: int, y: int) -> Rgb:
        if 0 <= x < width and 0 <= y < height:
            r, g, b = pixels[x, y][:3]
            value = ((r & 0xF8) << 8) | ((g & 0xFC) << 3) | (b >> 3)
        else:
            value = 0xFFFF
        color = cache.get(value)
        if color is None:
            color = cache[value] = Rgb.from_rgb565(value)
        return color

    size = bufw * bufh // 8
    buffer = bytearray(size)
    palette = [WHITE, BLACK, RED] + ([GRAY] if params.gray_lut else [])
    num_colors = 2 if params.bpp == 1 else len(palette)

    old = [[0.0, 0.0, 0.0] for _ in range(bufw + 4)]
    for y in range(bufh):
        new = [[0.0, 0.0, 0.0] for _ in range(bufw + 4)]
        for x in range(bufw):
            color = read(*source(x, y))
            err = old[x]
            best_index = 0
            best_distance = color_distance(color, palette[0], err)
            for index in range(1, num_colors):
                distance = color_distance(color, palette[index], err)
                if distance < best_distance:
                    best_distance = distance
                    best_index = index

            byte_index = (y * bufw + x) // 8
            bit = 1 << (7 - (x % 8))
            set_bit = False
            if best_index == 1:
                set_bit = not red
            elif best_index == 2:
                params.has_red = True
                set_bit = red
            elif best_index == 3:
                params.has_red = True
                set_bit = True
            if set_bit and byte_index < size:
                buffer[byte_index] |= bit

            if params.dither:
                chosen = palette[best_index]
                e = (color.r + err[0] - chosen.r, color.g + err[1] - chosen.g, color.b + err[2] - chosen.b)
                spread = [(new, x, 4.0), (new, x + 1, 8.0), (old, x + 1, 4.0), (new, x + 2, 16.0), (old, x + 2, 8.0)]
                if x > 0:
                    spread.append((new, x - 1, 8.0))
                if x > 1:
                    spread.append((new, x - 2, 16.0))
                for row, column, divisor in spread:
                    cell = row[column]
                    for channel in range(3):
                        cell[channel] += e[channel] / divisor
        old = new
    return bytes(buffer)


def render_buffer(image: Image.Image, params: RenderParams) -> bytes:
    """The black plane, followed by the red plane when red was used."""
    black = render_plane(image, params, False)
    if params.has_red:
        return black + render_plane(image, params, True)
    return black


def image_to_file(image: Image.Image, path, params: RenderParams) -> None:
    Path(path).write_bytes(render_buffer(image, params))


def jpeg_to_file(source, dest, params: RenderParams) -> None:
    """Decode an image file onto a white canvas and write its tag buffer."""
    try:
        with Image.open(source) as img:
            img.load()
            canvas = _as_rgb(img).copy()
    except OSError as exc:
        raise ValueError(f"invalid jpg: {source}") from exc
    image_to_file(canvas, dest, params)