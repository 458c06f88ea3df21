"""Error kinds raised by the decode and render pipeline."""

from __future__ import annotations


class MfaQrError(Exception):
    """Base class for every failure the pipeline reports."""


class UnsupportedPlatform(MfaQrError):
    pass


class InvalidFormat(MfaQrError, ValueError):
    pass


class TruncatedData(InvalidFormat):
    def __init__(self, expected: int, got: int, unit: str = "bytes") -> None:
        super().__init__(f"Truncated input: expected {expected} {unit}, got {got}")
        self.expected = expected
        self.got = got


class UnsupportedFormat(MfaQrError):
    def __init__(self, bits_per_pixel: int, compression: int) -> None:
        super().__init__(
            f"Unsupported BMP layout: bits_per_pixel={bits_per_pixel}, compression={compression}"
        )
        self.bits_per_pixel = bits_per_pixel
        self.compression = compression


class NoDecoderAvailable(MfaQrError):
    pass


class DecodeFailed(MfaQrError):
    def __init__(self, tool: str, returncode: int | None, stderr: str = "") -> None:
        msg = f"{tool} failed with exit status {returncode}"
        if stderr:
            msg += f": {stderr.strip()}"
        super().__init__(msg)
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr


class InvalidQRCode(MfaQrError):
    def __init__(self, reason: str, row: str | None = None) -> None:
        msg = reason if row is None else f"{reason}: {row!r}"
        super().__init__(msg)
        self.row = row


class IOFailure(MfaQrError, OSError):
    pass
