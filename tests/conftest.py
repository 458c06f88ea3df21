from __future__ import annotations

import io
import struct

import pytest
import segno

TEST_URI = "otpauth://totp/demo:alice?secret=JBSWY3DPEHPK3PXP&issuer=demo"

# '#' top-left, centre and the bottom two left cells.
SMALL_IMAGE = ["#  ", " # ", "## "]


def make_bmp(
    rows: list[str],
    bpp: int = 24,
    top_down: bool = False,
    compression: int = 0,
    fg_value: int = 0xFF,
    magic: bytes = b"BM",
    gap: int = 0,
) -> bytes:
    """Build a BMP whose '#' pixels have every sample set to ``fg_value``."""
    h = len(rows)
    w = len(rows[0])
    stride = bpp // 8
    row_size = (w * stride + 3) // 4 * 4
    bg_value = 0xFF - fg_value

    pixel_rows = []
    for row in rows:
        data = bytearray()
        for ch in row:
            v = fg_value if ch == "#" else bg_value
            data += bytes([v] * stride)
        data += b"\x00" * (row_size - len(data))
        pixel_rows.append(bytes(data))
    if not top_down:
        pixel_rows.reverse()

    offset = 54 + gap
    img_size = row_size * h
    header = struct.pack(
        "<2sIHHIIiiHHIIiiII",
        magic,
        offset + img_size,
        0,
        0,
        offset,
        40,
        w,
        -h if top_down else h,
        1,
        bpp,
        compression,
        img_size,
        2835,
        2835,
        0,
        0,
    )
    return header + b"\x00" * gap + b"".join(pixel_rows)


def qr_rows(content: str = TEST_URI, scale: int = 1, border: int = 4) -> list[str]:
    qr = segno.make(content, error="L", micro=False)
    return ["".join("#" if dark else " " for dark in row) for row in qr.matrix_iter(scale=scale, border=border)]


def pad(rows: list[str], left: int = 0, top: int = 0, right: int = 0, bottom: int = 0) -> list[str]:
    width = left + len(rows[0]) + right
    blank = " " * width
    return [blank] * top + [" " * left + r + " " * right for r in rows] + [blank] * bottom


@pytest.fixture
def small_image() -> list[str]:
    return list(SMALL_IMAGE)


@pytest.fixture
def qr_expected() -> list[str]:
    """One character per module with the standard 4-module quiet zone."""
    return qr_rows(scale=1, border=4)


@pytest.fixture
def qr_png() -> bytes:
    buf = io.BytesIO()
    segno.make(TEST_URI, error="L", micro=False).save(buf, kind="png", scale=3, border=6)
    return buf.getvalue()
