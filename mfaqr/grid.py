"""Character grid helpers shared by every stage.

A grid is a sequence of equal-length strings over two symbols,
``FOREGROUND`` and ``BACKGROUND``.
"""

from __future__ import annotations

from typing import Iterable, Iterator

FOREGROUND = "#"
BACKGROUND = " "


def resample(rows: Iterable[str], d: int, u: int = 1) -> Iterator[str]:
    """Replace each run of ``d`` characters with its first character, ``u`` times.

    This is lossy: the other ``d - 1`` characters of a run are discarded, so
    resampling back up only restores rows whose runs were uniform.
    """
    if d < 1 or u < 1:
        raise ValueError(f"Resample factors must be >= 1 (d={d}, u={u})")
    for row in rows:
        if d == 1 and u == 1:
            yield row
        else:
            yield "".join(ch * u for ch in row[::d])


def normalize_row_order(rows: Iterable[str], top_down: bool) -> list[str]:
    rows = list(rows)
    if not top_down:
        rows.reverse()
    return rows


def blank_row(length: int) -> str:
    return BACKGROUND * length


def is_blank(row: str) -> bool:
    return FOREGROUND not in row
