from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np


def _to_bgr_u8(image: np.ndarray) -> np.ndarray:
    """Reduce any decoded OpenCV image to ``BGR/u8/HWC``.

    - 16-bit inputs are scaled down to 8 bits
    - grey inputs are expanded to three channels
    - alpha is composited over a black background
    """

    if image.dtype == np.uint16:
        image = (image.astype(np.float32) / 257.0).round().astype(np.uint8)
    elif image.dtype != np.uint8:
        raise ValueError(f"Unsupported image dtype: {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.ndim == 3 and image.shape[2] == 1:
        return cv2.cvtColor(image[..., 0], cv2.COLOR_GRAY2BGR)
    if image.ndim == 3 and image.shape[2] == 4:
        alpha = image[..., 3:4].astype(np.float32) / 255.0
        bgr = image[..., :3].astype(np.float32) * alpha
        return np.clip(np.rint(bgr), 0, 255).astype(np.uint8)
    if image.ndim == 3 and image.shape[2] == 3:
        return image

    raise ValueError(f"Unsupported image shape: {image.shape}")


def decode_image_bytes(buf: bytes) -> np.ndarray:
    """Decode encoded image bytes (JPEG/PNG/BMP) into a ``BGR/u8/HWC`` array."""

    arr = np.frombuffer(buf, dtype=np.uint8)
    if arr.size == 0:
        raise ValueError("Invalid image data: empty buffer.")
    image = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError("Invalid image data or unsupported format.")
    return np.ascontiguousarray(_to_bgr_u8(image))


def scaled_size(width: int, height: int, scale_to: int) -> tuple[int, int]:
    """Return ``(new_w, new_h)`` after scaling the short side to `scale_to`.

    `scale_to == -1` keeps the original size. The long side is scaled with
    integer division so the aspect ratio is kept up to truncation.
    """

    if scale_to == -1:
        return int(width), int(height)
    if int(scale_to) <= 0:
        raise ValueError(f"scale_to must be -1 or a positive int, got {scale_to!r}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Cannot scale an empty image ({width}x{height})")

    if width < height:
        return int(scale_to), int(scale_to) * int(height) // int(width)
    return int(scale_to) * int(width) // int(height), int(scale_to)


def resize_image(image: np.ndarray, size_wh: tuple[int, int]) -> np.ndarray:
    """Resize an image to (W,H) with area interpolation.

    Notes
    -----
    Unlike most helpers in `pyimgset`, sizes here follow OpenCV's (W,H)
    order since they come straight from :func:`scaled_size`.
    """

    w, h = int(size_wh[0]), int(size_wh[1])
    if (image.shape[1], image.shape[0]) == (w, h):
        return image
    return cv2.resize(image, (w, h), interpolation=cv2.INTER_AREA)


def write_image(path: str | Path, image_bgr_u8: np.ndarray, *, format: str = "jpg") -> Path:
    """Encode `image_bgr_u8` with OpenCV and write it to `path`.

    The encoding is taken from `format`, not from the file extension.
    """

    out_path = Path(path)
    ext = "." + str(format).lower().lstrip(".")
    ok, encoded = cv2.imencode(ext, np.ascontiguousarray(image_bgr_u8))
    if not ok:
        raise RuntimeError(f"Failed to encode image as {ext!r} for {out_path}")

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(encoded.tobytes())
    return out_path
