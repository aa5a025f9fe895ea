"""Reader for IDX files (the MNIST image/label container).

Header: two zero bytes, a dtype code, the number of dimensions, then one
big-endian uint32 per dimension. Only unsigned byte payloads are supported.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Optional

import numpy as np

from pyimgset.images import GreyImage

logger = logging.getLogger(__name__)

_UBYTE = 0x08


def _parse_header(buf: bytes, *, name: str) -> tuple[tuple[int, ...], int]:
    if len(buf) < 4:
        raise ValueError(f"{name}: IDX file too short ({len(buf)} bytes)")
    zero, dtype_code, ndim = struct.unpack_from(">HBB", buf, 0)
    if zero != 0:
        raise ValueError(f"{name}: bad IDX magic {buf[:4].hex()}")
    if dtype_code != _UBYTE:
        raise ValueError(f"{name}: unsupported IDX dtype code 0x{dtype_code:02x} (only ubyte)")

    header_size = 4 + 4 * ndim
    if len(buf) < header_size:
        raise ValueError(f"{name}: truncated IDX header")
    dims = struct.unpack_from(f">{ndim}I", buf, 4)
    return tuple(int(d) for d in dims), header_size


def read_idx(path: str | Path) -> np.ndarray:
    """Read an IDX file into a uint8 array shaped by the file's dimensions."""

    in_path = Path(path)
    buf = in_path.read_bytes()
    dims, header_size = _parse_header(buf, name=str(in_path))

    count = int(np.prod(dims)) if dims else 1
    if len(buf) - header_size != count:
        raise ValueError(
            f"{in_path}: expected {count} payload bytes for dims {dims}, "
            f"got {len(buf) - header_size}"
        )
    return np.frombuffer(buf, dtype=np.uint8, offset=header_size).reshape(dims)


def load_grey_images(
    images_path: str | Path,
    labels_path: Optional[str | Path] = None,
    *,
    scale: float = 255.0,
    first_label: int = 0,
) -> list[GreyImage]:
    """Load every image of an IDX images file as a :class:`GreyImage`.

    Each image is copied straight out of the file body with
    :meth:`GreyImage.copy_from_bytes` at its record offset.
    """

    in_path = Path(images_path)
    buf = in_path.read_bytes()
    dims, header_size = _parse_header(buf, name=str(in_path))
    if len(dims) != 3:
        raise ValueError(f"{in_path}: expected 3 dims (N,H,W), got {dims}")
    n, height, width = dims

    labels = None
    if labels_path is not None:
        labels = read_idx(labels_path)
        if labels.ndim != 1 or labels.shape[0] != n:
            raise ValueError(
                f"Labels file has {labels.shape} entries but images file has {n} images"
            )

    frame = width * height
    images: list[GreyImage] = []
    for i in range(n):
        label = float(labels[i]) + first_label if labels is not None else 0.0
        img = GreyImage(width=width, height=height, label=label)
        img.copy_from_bytes(buf, scale=scale, offset=header_size + i * frame)
        images.append(img)

    logger.info("Loaded %d grey images (%dx%d) from %s", n, width, height, in_path)
    return images
