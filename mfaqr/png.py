"""PNG front-end: hand PNG bytes to a converter and decode what comes back.

PNG is never parsed here. One of three converters turns it into something
the grid decoders understand:

- ``MAGICK``: ImageMagick writes plain PBM to stdout (``pbm.decode_pbm``).
- ``SIPS``: macOS ``sips`` writes a BMP file. It will not read or write
  pipes, so the round trip goes through a private temporary directory
  (``bmp.decode_bmp``).
- ``PILLOW``: Pillow thresholds the image in-process and emits plain PBM.

For every route black pixels end up as FOREGROUND.
"""

from __future__ import annotations

import enum
import io
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from mfaqr.bmp import decode_bmp
from mfaqr.errors import DecodeFailed, IOFailure, NoDecoderAvailable
from mfaqr.pbm import PBM_MAGIC, decode_pbm

log = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class Converter(enum.Enum):
    MAGICK = "magick"
    SIPS = "sips"
    PILLOW = "pillow"


def magick_executable() -> Optional[str]:
    """ImageMagick 7 ships ``magick``; 6 only has ``convert``."""
    return shutil.which("magick") or shutil.which("convert")


def detect_converter() -> Converter:
    if magick_executable():
        return Converter.MAGICK
    if shutil.which("sips"):
        return Converter.SIPS
    return Converter.PILLOW


def _run(cmd: list[str], stdin: Optional[bytes] = None) -> bytes:
    log.debug("Running %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, input=stdin, capture_output=True)
    except OSError as e:
        raise IOFailure(f"Cannot run {cmd[0]}: {e}") from e
    if proc.returncode != 0:
        raise DecodeFailed(cmd[0], proc.returncode, proc.stderr.decode(errors="replace"))
    return proc.stdout


def via_magick(data: bytes) -> list[str]:
    exe = magick_executable() or "magick"
    out = _run([exe, "png:-", "-compress", "none", "pbm:-"], stdin=data)
    return decode_pbm(out)


def via_sips(data: bytes) -> list[str]:
    try:
        with tempfile.TemporaryDirectory(prefix="mfaqr-") as td:
            png_path = Path(td) / "qr.png"
            bmp_path = Path(td) / "qr.bmp"
            png_path.write_bytes(data)
            _run(["sips", "-s", "format", "bmp", str(png_path), "--out", str(bmp_path)])
            with bmp_path.open("rb") as f:
                return decode_bmp(f, dark_foreground=True)
    except IOFailure:
        raise
    except OSError as e:
        raise IOFailure(f"Temporary file round trip failed: {e}") from e


def to_plain_pbm(img: Image.Image) -> str:
    """Render ``img`` as P1 text. Any pixel darker than mid-grey is black."""
    if img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        img = img.convert("RGBA")
        flat = Image.new("RGBA", img.size, (255, 255, 255, 255))
        flat.alpha_composite(img)
        img = flat
    img = img.convert("L")

    w, h = img.size
    px = list(img.getdata())
    lines = [PBM_MAGIC, f"{w} {h}"]
    for y in range(h):
        row = px[y * w : (y + 1) * w]
        lines.append("".join("1" if p < 128 else "0" for p in row))
    return "\n".join(lines) + "\n"


def via_pillow(data: bytes) -> list[str]:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeFailed("pillow", None, str(e)) from e
    return decode_pbm(to_plain_pbm(img))


_ROUTES = {
    Converter.MAGICK: via_magick,
    Converter.SIPS: via_sips,
    Converter.PILLOW: via_pillow,
}


def decode_png(data: bytes, converter: Optional[Converter]) -> list[str]:
    if converter is None:
        raise NoDecoderAvailable("No PNG converter available (install ImageMagick, or use sips or Pillow)")
    log.debug("Decoding %d PNG bytes with %s", len(data), converter.value)
    return _ROUTES[converter](data)
