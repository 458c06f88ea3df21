"""Read a byte range from a binary stream and unpack it as typed fields.

A layout is a sequence of ``(width, signed, count)`` groups, e.g. the BMP
file header starts with ``[(2, False, 1), (4, False, 1), (2, False, 2)]``.
Integers are little-endian.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, Sequence

from mfaqr.errors import InvalidFormat, TruncatedData

Layout = Sequence[tuple[int, bool, int]]

_CODES = {1: "b", 2: "h", 4: "i", 8: "q"}

# Header-derived sizes are untrusted; never ask read() for more than this.
CHUNK_SIZE = 64 * 1024


def layout_format(layout: Layout) -> str:
    """Build the ``struct`` format string for ``layout``."""
    parts = ["<"]
    for width, signed, count in layout:
        code = _CODES.get(width)
        if code is None:
            raise ValueError(f"Unsupported field width {width}")
        if count < 1:
            raise ValueError(f"Field count must be positive, got {count}")
        parts.append(f"{count}{code if signed else code.upper()}")
    return "".join(parts)


def read_exact(stream: BinaryIO, n: int) -> bytes:
    # read() may return fewer bytes than asked for (pipes, sockets).
    buf = bytearray()
    while len(buf) < n:
        chunk = stream.read(min(n - len(buf), CHUNK_SIZE))
        if not chunk:
            raise TruncatedData(n, len(buf))
        buf += chunk
    return bytes(buf)


def skip(stream: BinaryIO, n: int) -> None:
    if n < 0:
        raise InvalidFormat(f"Cannot skip backwards ({n} bytes)")
    remaining = n
    while remaining:
        chunk = stream.read(min(remaining, CHUNK_SIZE))
        if not chunk:
            raise TruncatedData(n, n - remaining)
        remaining -= len(chunk)


def read_fields(stream: BinaryIO, skip_bytes: int, count: int, layout: Layout) -> tuple[int, ...]:
    fmt = layout_format(layout)
    if struct.calcsize(fmt) != count:
        raise ValueError(f"Layout {fmt!r} covers {struct.calcsize(fmt)} bytes, not {count}")
    skip(stream, skip_bytes)
    return struct.unpack(fmt, read_exact(stream, count))
