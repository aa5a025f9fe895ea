"""Image file and byte-layout helpers."""

from __future__ import annotations

from .image import decode_image_bytes, resize_image, scaled_size, write_image
from .raw import convert_to_byte, decode_raw, encode_raw, read_header, read_image

__all__ = [
    "convert_to_byte",
    "decode_image_bytes",
    "decode_raw",
    "encode_raw",
    "read_header",
    "read_image",
    "resize_image",
    "scaled_size",
    "write_image",
]
