"""Raw byte layout for RGB images.

A raw record is a 4-byte big-endian width, a 4-byte big-endian height and
then ``width * height * 3`` bytes of interleaved pixel data in B,G,R order::

    | width:i32 | height:i32 | b g r | b g r | ... |
"""

from __future__ import annotations

import logging
import numbers
import struct
from pathlib import Path

import numpy as np

from .image import decode_image_bytes, resize_image, scaled_size

logger = logging.getLogger(__name__)

HEADER = struct.Struct(">ii")
HEADER_SIZE = HEADER.size
CHANNELS = 3


def read_header(raw: bytes) -> tuple[int, int]:
    """Return ``(width, height)`` stored in the first 8 bytes of `raw`."""

    if len(raw) < HEADER_SIZE:
        raise ValueError(f"Raw image needs at least {HEADER_SIZE} header bytes, got {len(raw)}")
    width, height = HEADER.unpack_from(raw, 0)
    if width < 0 or height < 0:
        raise ValueError(f"Raw image has negative dimensions: {width}x{height}")
    return width, height


def encode_raw(pixels_bgr_u8_hwc: np.ndarray) -> bytes:
    """Encode a ``BGR/u8/HWC`` array into the raw byte layout."""

    if not isinstance(pixels_bgr_u8_hwc, np.ndarray):
        raise TypeError(f"Expected np.ndarray, got {type(pixels_bgr_u8_hwc)}")
    if pixels_bgr_u8_hwc.dtype != np.uint8:
        raise ValueError(f"Expected dtype=uint8, got {pixels_bgr_u8_hwc.dtype}")
    if pixels_bgr_u8_hwc.ndim != 3 or pixels_bgr_u8_hwc.shape[2] != CHANNELS:
        raise ValueError(f"Expected shape (H,W,3), got {pixels_bgr_u8_hwc.shape}")

    height, width = pixels_bgr_u8_hwc.shape[:2]
    return HEADER.pack(width, height) + np.ascontiguousarray(pixels_bgr_u8_hwc).tobytes()


def decode_raw(raw: bytes) -> tuple[int, int, np.ndarray]:
    """Decode the raw byte layout into ``(width, height, pixels)``.

    `pixels` is a read-only ``(H, W, 3)`` uint8 view over `raw`.
    """

    width, height = read_header(raw)
    expected = HEADER_SIZE + width * height * CHANNELS
    if len(raw) != expected:
        raise ValueError(
            f"Raw image of {width}x{height} must be {expected} bytes long, got {len(raw)}"
        )
    pixels = np.frombuffer(raw, dtype=np.uint8, offset=HEADER_SIZE)
    return width, height, pixels.reshape(height, width, CHANNELS)


def read_image(path: str | Path, scale_to: int = -1) -> bytes:
    """Read an image file and return it in the raw byte layout.

    Parameters
    ----------
    path:
        JPEG/PNG/BMP file.
    scale_to:
        -1 keeps the original size. Otherwise the short side is scaled to
        `scale_to` and the long side follows the aspect ratio.
    """

    if isinstance(scale_to, bool) or not isinstance(scale_to, numbers.Integral):
        raise ValueError(f"scale_to must be -1 or a positive int, got {scale_to!r}")
    scale_to = int(scale_to)
    if scale_to != -1 and scale_to <= 0:
        raise ValueError(f"scale_to must be -1 or a positive int, got {scale_to!r}")

    in_path = Path(path)
    try:
        with in_path.open("rb") as f:
            buf = f.read()
        image = decode_image_bytes(buf)
        height, width = image.shape[:2]
        image = resize_image(image, scaled_size(width, height, scale_to))
        return encode_raw(image)
    except Exception:
        logger.exception("Can't read file %s", in_path)
        raise


def convert_to_byte(data, length: int, width: int, scale_to: float = 255.0) -> bytes:
    """Convert a float buffer back into ``length * width * 3`` pixel bytes.

    Each value is multiplied by `scale_to`, truncated toward zero and reduced
    to its low 8 bits (values outside [0, 255] wrap).
    """

    n = int(length) * int(width) * CHANNELS
    arr = np.asarray(data, dtype=np.float64).reshape(-1)
    if arr.size < n:
        raise ValueError(f"Need at least {n} values for {width}x{length}x{CHANNELS}, got {arr.size}")

    scaled = np.trunc(arr[:n] * float(scale_to)).astype(np.int64)
    return (scaled & 0xFF).astype(np.uint8).tobytes()
