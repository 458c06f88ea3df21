"""Render a character grid as solid ANSI colour blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from mfaqr.grid import FOREGROUND

RESET = "\x1b[0m"

_ANSI = re.compile(r"\x1b\[[0-9;]*m")
_RUNS = re.compile(f"{re.escape(FOREGROUND)}+")


@dataclass(frozen=True)
class Palette:
    """SGR sequences for the two symbols. Text colour matches the background
    so the symbol characters themselves are invisible."""

    light: str = "\x1b[37;47m"
    dark: str = "\x1b[30;40m"

    def inverted(self) -> "Palette":
        return Palette(light=self.dark, dark=self.light)


DEFAULT_PALETTE = Palette()


def render_row(row: str, palette: Palette = DEFAULT_PALETTE) -> str:
    body = _RUNS.sub(lambda m: f"{palette.dark}{m.group(0)}{palette.light}", row)
    return f"{palette.light}{body}{RESET}"


def render(grid: Iterable[str], palette: Palette = DEFAULT_PALETTE) -> str:
    return "\n".join(render_row(row, palette) for row in grid)


def strip_ansi(text: str) -> list[str]:
    if not text:
        return []
    return _ANSI.sub("", text).split("\n")
