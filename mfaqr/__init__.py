"""Decode BMP/PNG/PBM images of QR codes and render them in a terminal."""

from mfaqr.errors import (
    DecodeFailed,
    InvalidFormat,
    InvalidQRCode,
    IOFailure,
    MfaQrError,
    NoDecoderAvailable,
    TruncatedData,
    UnsupportedFormat,
    UnsupportedPlatform,
)
from mfaqr.pipeline import Pipeline, PipelineConfig
from mfaqr.png import Converter, detect_converter

__version__ = "0.1.0"
