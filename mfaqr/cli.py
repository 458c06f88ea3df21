"""Show a QR code image as colour blocks in the terminal.

Usage:
    mfaqr show qr.png              # decode, crop and render
    aws iam create-virtual-mfa-device ... | mfaqr show -
    mfaqr show --grid qr.bmp       # print the plain '#'/' ' grid
    mfaqr make "otpauth://totp/demo?secret=JBSWY3DPEHPK3PXP"

The PNG converter is detected automatically; override it with
``--converter`` or the MFAQR_CONVERTER environment variable
(magick, sips, pillow or none).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from mfaqr.errors import MfaQrError
from mfaqr.png import Converter, detect_converter
from mfaqr.pipeline import Pipeline, PipelineConfig
from mfaqr.render import DEFAULT_PALETTE
from mfaqr.source import make_qr_png

log = logging.getLogger(__name__)

CONVERTER_CHOICES = [c.value for c in Converter] + ["none", "auto"]


def resolve_converter(name: Optional[str]) -> Optional[Converter]:
    name = (name or os.environ.get("MFAQR_CONVERTER") or "auto").lower()
    if name == "auto":
        return detect_converter()
    if name == "none":
        return None
    try:
        return Converter(name)
    except ValueError:
        raise ValueError(f"Unknown converter {name!r}; expected one of {', '.join(CONVERTER_CHOICES)}") from None


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mfaqr", description="Render QR code images in the terminal")
    ap.add_argument("--debug", action="store_true", help="Log decoder details to stderr")
    sub = ap.add_subparsers(dest="command", required=True)

    def add_render_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--converter", choices=CONVERTER_CHOICES, default=None, help="PNG converter (default: auto)")
        p.add_argument("--invert", action="store_true", help="Swap the block colours")
        p.add_argument("--width-scale", type=int, default=2, help="Columns per module (default: 2)")
        p.add_argument("--grid", action="store_true", help="Print the character grid instead of colour blocks")

    show = sub.add_parser("show", help="Render a BMP, PNG or plain PBM image")
    show.add_argument("image", help="Image path, or - for stdin")
    show.add_argument("--no-trim", action="store_true", help="Skip QR detection and cropping")
    show.add_argument("--bmp-ink", action="store_true", help="Treat black BMP pixels as foreground")
    add_render_options(show)

    make = sub.add_parser("make", help="Generate a QR code and render it")
    make.add_argument("text")
    make.add_argument("--scale", type=int, default=4, help="PNG pixels per module (default: 4)")
    make.add_argument("--png", type=Path, default=None, help="Also write the PNG here")
    add_render_options(make)
    return ap


def _read_input(arg: str) -> bytes:
    if arg == "-":
        return sys.stdin.buffer.read()
    return Path(arg).read_bytes()


def build_config(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        converter=resolve_converter(args.converter),
        debug=args.debug,
        width_scale=args.width_scale,
        bmp_dark_foreground=getattr(args, "bmp_ink", False),
        palette=DEFAULT_PALETTE.inverted() if args.invert else DEFAULT_PALETTE,
    )


def run(args: argparse.Namespace, config: PipelineConfig) -> str:
    log.debug("Config: %s", config)
    pipeline = Pipeline(config)

    if args.command == "make":
        data = make_qr_png(args.text, scale=args.scale)
        if args.png:
            args.png.write_bytes(data)
            log.info("Wrote %s (%d bytes)", args.png, len(data))
    else:
        data = _read_input(args.image)

    grid = pipeline.decode(data)
    if not getattr(args, "no_trim", False):
        grid = pipeline.trim(grid)
    if args.grid:
        return "\n".join(grid)
    return pipeline.render_grid(grid)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        config = build_config(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        out = run(args, config)
    except (MfaQrError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
