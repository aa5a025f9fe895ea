"""Image containers backed by flat float buffers.

The buffers are what the training pipeline consumes: a ``GreyImage`` holds
``width * height`` values, an ``RGBImage`` holds ``width * height * 3``
values interleaved per pixel in B,G,R order (the order of the raw byte
layout in :mod:`pyimgset.io.raw`).

Buffers may be larger than the current image after :meth:`Image.copy_from`
reuses a bigger allocation; only the leading ``width * height * channels``
values are meaningful.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from PIL import Image as PILImage

from pyimgset.io.image import write_image
from pyimgset.io.raw import HEADER_SIZE, read_header, read_image
from pyimgset.utils.optional_deps import require


class Image:
    """Abstract image: flat float32 buffer, size and a scalar label."""

    channels: int = 0

    def __init__(
        self,
        data: Optional[NDArray] = None,
        width: int = 0,
        height: int = 0,
        label: float = 0.0,
    ) -> None:
        if type(self) is Image:
            raise TypeError("Image is abstract; use GreyImage or RGBImage")
        width, height = int(width), int(height)
        if width < 0 or height < 0:
            raise ValueError(f"Image size must be non-negative, got {width}x{height}")

        if data is None:
            data = np.zeros(width * height * self.channels, dtype=np.float32)
        else:
            data = np.asarray(data, dtype=np.float32).reshape(-1)
            if data.shape[0] < width * height * self.channels:
                raise ValueError(
                    f"Buffer of {data.shape[0]} values is too small for "
                    f"{width}x{height}x{self.channels}"
                )

        self._data = data
        self._width = width
        self._height = height
        self._label = float(label)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def content(self) -> NDArray[np.float32]:
        return self._data

    @property
    def label(self) -> float:
        return self._label

    @label.setter
    def label(self, value: float) -> None:
        self._label = float(value)

    @property
    def size(self) -> int:
        """Number of meaningful values in the buffer."""
        return self._width * self._height * self.channels

    def set_label(self, label: float):
        self._label = float(label)
        return self

    def _ensure_capacity(self, n: int) -> None:
        if self._data.shape[0] < n:
            self._data = np.zeros(n, dtype=np.float32)

    def copy_from(self, other: "Image"):
        """Copy size, label and pixel values of `other` into this image.

        The existing buffer is reused when it is large enough.
        """

        if not isinstance(other, type(self)):
            raise TypeError(f"Expected {type(self).__name__}, got {type(other).__name__}")

        self._width = other._width
        self._height = other._height
        self._label = other._label
        n = self.size
        self._ensure_capacity(n)
        self._data[:n] = other._data[:n]
        return self

    def to_hwc(self) -> NDArray[np.float32]:
        """Return a ``(H, W, C)`` view of the meaningful part of the buffer."""
        return self._data[: self.size].reshape(self._height, self._width, self.channels)

    def to_tensor(self):
        """Return a ``float32`` torch tensor shaped ``(C, H, W)``."""

        torch = require("torch", purpose="Image.to_tensor")
        chw = np.transpose(self.to_hwc(), (2, 0, 1)).copy()
        return torch.from_numpy(chw)

    def _to_u8(self, scale: float) -> NDArray[np.uint8]:
        scaled = np.trunc(self.to_hwc() * float(scale))
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def to_pil(self, scale: float = 255.0) -> PILImage.Image:
        raise NotImplementedError

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(width={self._width}, height={self._height}, "
            f"label={self._label})"
        )


class GreyImage(Image):
    """Single-channel image."""

    channels = 1

    def copy_from_bytes(self, source: bytes, scale: float = 1.0, offset: int = 0) -> "GreyImage":
        """Fill the buffer from unsigned bytes of `source` starting at `offset`.

        Every buffer slot is filled, so the buffer length (not the image size)
        decides how many bytes are read.
        """

        n = self._data.shape[0]
        if offset < 0 or n + offset > len(source):
            raise ValueError(
                f"Cannot copy {n} bytes at offset {offset} from a source of {len(source)} bytes"
            )
        pixels = np.frombuffer(source, dtype=np.uint8, count=n, offset=offset)
        self._data[:] = pixels.astype(np.float32) / np.float32(scale)
        return self

    def to_pil(self, scale: float = 255.0) -> PILImage.Image:
        return PILImage.fromarray(self._to_u8(scale)[..., 0])


class RGBImage(Image):
    """Three-channel image, interleaved B,G,R per pixel."""

    channels = 3

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        scale_to: int = -1,
        scale: float = 255.0,
        label: float = 0.0,
    ) -> "RGBImage":
        return cls(label=label).copy_from_raw(read_image(path, scale_to), scale=scale)

    def copy_from_raw(self, raw: bytes, scale: float = 255.0) -> "RGBImage":
        """Fill this image from the raw byte layout. The label is kept."""

        width, height = read_header(raw)
        n = width * height * self.channels
        if len(raw) != HEADER_SIZE + n:
            raise ValueError(
                f"Raw image of {width}x{height} must be {HEADER_SIZE + n} bytes long, got {len(raw)}"
            )

        self._width = width
        self._height = height
        self._ensure_capacity(n)
        pixels = np.frombuffer(raw, dtype=np.uint8, count=n, offset=HEADER_SIZE)
        self._data[:n] = pixels.astype(np.float32) / np.float32(scale)
        return self

    def copy_to(self, storage: NDArray, offset: int) -> None:
        """Write the image in planar form into the flat `storage` at `offset`.

        Plane ``k`` holds channel ``k`` of every pixel, in buffer order.
        """

        frame = self._width * self._height
        if offset < 0 or frame * 3 + offset > storage.shape[0]:
            raise ValueError(
                f"Storage of {storage.shape[0]} values cannot hold {frame * 3} values at offset {offset}"
            )
        pixels = self._data[: frame * 3].reshape(frame, 3)
        for k in range(3):
            start = offset + k * frame
            storage[start : start + frame] = pixels[:, k]

    def save(self, path: str | Path, scale: float = 255.0, format: str = "jpg") -> Path:
        """Write the image to `path`, JPEG-encoded unless `format` says otherwise."""

        return write_image(path, self._to_u8(scale), format=format)

    def to_pil(self, scale: float = 255.0) -> PILImage.Image:
        return PILImage.fromarray(np.ascontiguousarray(self._to_u8(scale)[..., ::-1]))
