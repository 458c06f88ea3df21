"""Locate a QR code in a character grid and crop it to one symbol per module.

The first row holding any FOREGROUND crosses the top edge of the two upper
finder patterns::

    <l1 background><l2 foreground><l3 mixed, ends on foreground><background>

A finder pattern is 7 modules wide, which gives the module scale. The
output keeps a 4-module quiet zone on every side.
"""

from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass
from typing import Iterable

from mfaqr.errors import InvalidQRCode
from mfaqr.grid import BACKGROUND, FOREGROUND, blank_row, is_blank, resample

log = logging.getLogger(__name__)

FINDER_MODULES = 7
QUIET_ZONE = 4

_EDGE = re.compile(
    "^({bg}*)({fg}+)((?:[{bg}{fg}]*{fg})?){bg}*$".format(
        bg=re.escape(BACKGROUND), fg=re.escape(FOREGROUND)
    )
)


@dataclass(frozen=True)
class QRGeometry:
    module_scale: int
    trim_offset: int
    region_length: int

    @property
    def modules(self) -> int:
        """Modules across the region, quiet zones included."""
        return self.region_length // self.module_scale

    @property
    def symbol_modules(self) -> int:
        return self.modules - 2 * QUIET_ZONE


def find_geometry(row: str) -> QRGeometry:
    m = _EDGE.match(row)
    if not m:
        raise InvalidQRCode("Finder pattern not found", row)
    l1, l2, l3 = (len(g) for g in m.groups())

    scale = l2 // FINDER_MODULES
    geom = QRGeometry(
        module_scale=scale,
        trim_offset=l1 - QUIET_ZONE * scale,
        region_length=l2 + l3 + 2 * QUIET_ZONE * scale,
    )
    log.debug("QR geometry from runs (%d, %d, %d): %s", l1, l2, l3, geom)

    if scale <= 0:
        raise InvalidQRCode(f"Finder run of {l2} is narrower than {FINDER_MODULES} pixels", row)
    if geom.trim_offset < 0:
        raise InvalidQRCode(f"Left margin of {l1} is narrower than the quiet zone", row)
    if geom.trim_offset + geom.region_length > len(row):
        raise InvalidQRCode(f"QR region {geom} runs past the row end ({len(row)})", row)
    if geom.region_length % scale:
        raise InvalidQRCode(f"QR region {geom.region_length} is not a multiple of module scale {scale}", row)
    return geom


def trim_qr(rows: Iterable[str]) -> list[str]:
    """Crop ``rows`` to the QR code plus quiet zone, one character per module."""
    rows = iter(rows)
    for first in rows:
        if not is_blank(first):
            break
    else:
        raise InvalidQRCode("No foreground found in image")

    geom = find_geometry(first)
    lo, hi = geom.trim_offset, geom.trim_offset + geom.region_length
    wanted = geom.symbol_modules

    body = []
    for row in itertools.islice(itertools.chain([first], rows), 0, None, geom.module_scale):
        if len(row) != len(first):
            raise InvalidQRCode(f"Row length {len(row)} differs from {len(first)}", row)
        body.append(row[lo:hi])
        if len(body) == wanted:
            break
    if len(body) < wanted:
        raise InvalidQRCode(f"Image ends after {len(body)} of {wanted} module rows")

    quiet = [blank_row(geom.region_length)] * QUIET_ZONE
    return list(resample(quiet + body + quiet, geom.module_scale))
