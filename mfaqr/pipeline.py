"""Bytes in, character grid or rendered text out."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Optional

from mfaqr.bmp import decode_bmp
from mfaqr.errors import InvalidFormat
from mfaqr.grid import resample
from mfaqr.pbm import PBM_MAGIC, decode_pbm
from mfaqr.png import PNG_SIGNATURE, Converter, decode_png
from mfaqr.qr import trim_qr
from mfaqr.render import DEFAULT_PALETTE, Palette, render

log = logging.getLogger(__name__)

BMP = "bmp"
PNG = "png"
PBM = "pbm"


def sniff_format(data: bytes) -> str:
    if data.startswith(b"BM"):
        return BMP
    if data.startswith(PNG_SIGNATURE):
        return PNG
    if data.lstrip().startswith(PBM_MAGIC.encode()):
        return PBM
    raise InvalidFormat(f"Unrecognised image data (starts with {data[:8]!r})")


@dataclass(frozen=True)
class PipelineConfig:
    converter: Optional[Converter]
    debug: bool = False
    width_scale: int = 2
    # Map black BMP pixels to FOREGROUND instead of lit ones.
    bmp_dark_foreground: bool = False
    palette: Palette = field(default=DEFAULT_PALETTE)

    def __post_init__(self) -> None:
        if self.width_scale < 1:
            raise ValueError(f"width_scale must be >= 1, got {self.width_scale}")


class Pipeline:
    def __init__(self, config: PipelineConfig) -> None:
        self.config = config

    def decode(self, data: bytes) -> list[str]:
        kind = sniff_format(data)
        log.debug("Decoding %d bytes as %s", len(data), kind)
        if kind == BMP:
            return decode_bmp(io.BytesIO(data), dark_foreground=self.config.bmp_dark_foreground)
        if kind == PBM:
            return decode_pbm(data)
        return decode_png(data, self.config.converter)

    def trim(self, grid: list[str]) -> list[str]:
        return trim_qr(grid)

    def qr_grid(self, data: bytes) -> list[str]:
        grid = self.decode(data)
        if self.config.debug:
            log.debug("Decoded %dx%d grid:\n%s", len(grid[0]) if grid else 0, len(grid), "\n".join(grid))
        return self.trim(grid)

    def render_grid(self, grid: list[str]) -> str:
        wide = resample(grid, 1, self.config.width_scale)
        return render(wide, self.config.palette)

    def render(self, data: bytes) -> str:
        return self.render_grid(self.qr_grid(data))
