"""Generate QR code PNGs locally.

This produces the same kind of bytes a virtual MFA device enrolment returns
(a black-on-white QR PNG), which makes it handy for trying the pipeline
offline.
"""

from __future__ import annotations

import io
from urllib.parse import quote, urlencode

import segno


def make_qr(content: str, error: str = "L") -> segno.QRCode:
    # Low error correction keeps the symbol small.
    return segno.make(content, error=error, micro=False)


def make_qr_png(content: str, *, scale: int = 4, border: int = 4, error: str = "L") -> bytes:
    if scale < 1:
        raise ValueError(f"scale must be >= 1, got {scale}")
    buf = io.BytesIO()
    make_qr(content, error).save(buf, kind="png", scale=scale, border=border)
    return buf.getvalue()


def otpauth_uri(secret: str, account: str, issuer: str = "") -> str:
    label = quote(f"{issuer}:{account}" if issuer else account)
    params = {"secret": secret}
    if issuer:
        params["issuer"] = issuer
    return f"otpauth://totp/{label}?{urlencode(params)}"
