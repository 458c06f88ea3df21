"""Decode plain PBM (``P1``) text into a character grid.

Format: magic ``P1``, width, height, then ``width*height`` digits where
1 = black (FOREGROUND) and 0 = white (BACKGROUND). Digits may be packed
or separated by whitespace; ``#`` starts a comment running to end of line.
"""

from __future__ import annotations

import re

from mfaqr.errors import InvalidFormat, TruncatedData
from mfaqr.grid import BACKGROUND, FOREGROUND

PBM_MAGIC = "P1"

_COMMENT = re.compile(r"#[^\n]*")
_SYMBOLS = str.maketrans("01", BACKGROUND + FOREGROUND)


def _header_tokens(text: str) -> tuple[list[str], str]:
    parts = text.split(maxsplit=3)
    if len(parts) < 3:
        raise InvalidFormat(f"Truncated PBM header: {text[:32]!r}")
    return parts[:3], parts[3] if len(parts) > 3 else ""


def decode_pbm(data: bytes | str) -> list[str]:
    if isinstance(data, bytes):
        data = data.decode("ascii", errors="replace")
    text = _COMMENT.sub(" ", data)

    (magic, width_tok, height_tok), raster = _header_tokens(text)
    if magic != PBM_MAGIC:
        raise InvalidFormat(f"Not a plain PBM image (magic={magic!r})")
    try:
        width, height = int(width_tok), int(height_tok)
    except ValueError:
        raise InvalidFormat(f"Invalid PBM dimensions {width_tok!r}x{height_tok!r}") from None
    if width <= 0 or height <= 0:
        raise InvalidFormat(f"Invalid PBM dimensions {width}x{height}")

    digits = "".join(raster.split())
    bad = digits.strip("01")
    if bad:
        raise InvalidFormat(f"Unexpected character {bad[0]!r} in PBM raster")
    expected = width * height
    if len(digits) < expected:
        raise TruncatedData(expected, len(digits), "digits")

    symbols = digits[:expected].translate(_SYMBOLS)
    return [symbols[i : i + width] for i in range(0, expected, width)]
