"""Decode uncompressed 24/32 bpp Windows BMP images into a character grid.

Conventions:
- Only the high nibble of each pixel's first sample byte is looked at. For
  32 bpp data the samples are taken to be R,G,B,A; the header's bitfield
  masks are not consulted.
- By default a lit sample (>= 0x10) becomes FOREGROUND. With
  ``dark_foreground=True`` the mapping is inverted so that ink is
  FOREGROUND, which is what the QR trimmer expects.
- Rows are returned top first whatever the storage order.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import BinaryIO

from mfaqr import byterange
from mfaqr.errors import InvalidFormat, UnsupportedFormat, UnsupportedPlatform
from mfaqr.grid import BACKGROUND, FOREGROUND, normalize_row_order, resample

log = logging.getLogger(__name__)

BMP_MAGIC = 0x4D42  # "BM"
HEADER_SIZE = 54

BI_RGB = 0
BI_BITFIELDS = 3

# (bits per pixel, compression)
SUPPORTED_LAYOUTS = {(24, BI_RGB), (32, BI_RGB), (32, BI_BITFIELDS)}

# File header (14 bytes) followed by BITMAPINFOHEADER (40 bytes).
HEADER_LAYOUT = [
    (2, False, 1),  # magic
    (4, False, 1),  # file size
    (2, False, 2),  # reserved
    (4, False, 1),  # pixel data offset
    (4, False, 1),  # DIB header size
    (4, True, 2),  # width, height
    (2, False, 2),  # planes, bits per pixel
    (4, False, 1),  # compression
    (4, False, 1),  # image size
    (4, True, 2),  # x/y pixels per metre
    (4, False, 2),  # colours used, important colours
]

_LIT = str.maketrans("0123456789abcdef", BACKGROUND + FOREGROUND * 15)
_DARK = str.maketrans("0123456789abcdef", FOREGROUND + BACKGROUND * 15)


@dataclass(frozen=True)
class BmpHeader:
    magic: int
    pixel_offset: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int

    @property
    def top_down(self) -> bool:
        return self.height < 0

    @property
    def pixel_stride(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def row_size(self) -> int:
        """Bytes per stored row, padded to a multiple of 4."""
        return (self.width * self.pixel_stride + 3) // 4 * 4

    @property
    def abs_height(self) -> int:
        return abs(self.height)


def check_platform() -> None:
    if sys.byteorder != "little":
        raise UnsupportedPlatform(f"BMP decoding needs a little-endian host, this one is {sys.byteorder}-endian")


def read_header(stream: BinaryIO) -> BmpHeader:
    fields = byterange.read_fields(stream, 0, HEADER_SIZE, HEADER_LAYOUT)
    magic, _size, _r1, _r2, offset, _dib, width, height, planes, bpp, compression = fields[:11]
    header = BmpHeader(magic, offset, width, height, planes, bpp, compression)
    log.debug("BMP header: %s", header)

    if header.magic != BMP_MAGIC:
        raise InvalidFormat(f"Not a BMP image (magic=0x{header.magic:04X})")
    if header.pixel_offset < HEADER_SIZE:
        raise InvalidFormat(f"Pixel data offset {header.pixel_offset} overlaps the header")
    if header.width <= 0 or header.height == 0:
        raise InvalidFormat(f"Invalid BMP dimensions {header.width}x{header.height}")

    if (header.bits_per_pixel, header.compression) not in SUPPORTED_LAYOUTS:
        raise UnsupportedFormat(header.bits_per_pixel, header.compression)
    return header


def decode_bmp(stream: BinaryIO, *, dark_foreground: bool = False) -> list[str]:
    check_platform()
    header = read_header(stream)

    row_size = header.row_size
    byterange.skip(stream, header.pixel_offset - HEADER_SIZE)
    payload = byterange.read_exact(stream, row_size * header.abs_height)

    table = _DARK if dark_foreground else _LIT
    used = header.width * header.pixel_stride * 2  # nibbles, padding excluded
    nibbles = (
        payload[i : i + row_size].hex()[:used].translate(table)
        for i in range(0, len(payload), row_size)
    )
    rows = resample(nibbles, header.pixel_stride * 2)
    return normalize_row_order(rows, header.top_down)
