"""In-buffer preprocessing for :mod:`pyimgset.images` containers.

`normalize` and `hflip` work in place and return the image so they can be
chained inside :class:`Compose`. Crops return a new image of the same type.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from pyimgset.images import Image

logger = logging.getLogger(__name__)


def _check_same_type(images: Sequence[Image]) -> type:
    kinds = {type(img) for img in images}
    if len(kinds) != 1:
        names = sorted(k.__name__ for k in kinds)
        raise ValueError(f"Expected images of a single type, got {names}")
    return kinds.pop()


def compute_mean_std(images: Iterable[Image]) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    """Per-channel mean and standard deviation over every pixel of `images`."""

    images = list(images)
    if not images:
        raise ValueError("compute_mean_std needs at least one image")
    kind = _check_same_type(images)

    channels = kind.channels
    total = np.zeros(channels, dtype=np.float64)
    total_sq = np.zeros(channels, dtype=np.float64)
    count = 0
    for img in images:
        pixels = img.to_hwc().reshape(-1, channels).astype(np.float64)
        total += pixels.sum(axis=0)
        total_sq += np.square(pixels).sum(axis=0)
        count += pixels.shape[0]

    if count == 0:
        raise ValueError("compute_mean_std needs at least one non-empty image")
    mean = total / count
    var = np.maximum(total_sq / count - np.square(mean), 0.0)
    std = np.sqrt(var)
    logger.debug("mean=%s std=%s over %d pixels", mean, std, count)
    return tuple(float(m) for m in mean), tuple(float(s) for s in std)


def normalize(image: Image, mean: Sequence[float], std: Sequence[float]) -> Image:
    """Channel-wise ``(v - mean[c]) / std[c]`` on the image buffer, in place."""

    if len(mean) != image.channels or len(std) != image.channels:
        raise ValueError(
            f"Expected {image.channels} mean/std values for {type(image).__name__}, "
            f"got {len(mean)}/{len(std)}"
        )
    if any(float(s) == 0.0 for s in std):
        raise ValueError(f"std must be non-zero, got {tuple(std)}")

    hwc = image.to_hwc()
    hwc -= np.asarray(mean, dtype=np.float32)
    hwc /= np.asarray(std, dtype=np.float32)
    return image


def _crop(image: Image, left: int, top: int, crop_w: int, crop_h: int) -> Image:
    window = image.to_hwc()[top : top + crop_h, left : left + crop_w]
    return type(image)(window.copy(), crop_w, crop_h, image.label)


def _check_crop(image: Image, crop_w: int, crop_h: int) -> None:
    if crop_w <= 0 or crop_h <= 0:
        raise ValueError(f"Crop size must be positive, got {crop_w}x{crop_h}")
    if crop_w > image.width or crop_h > image.height:
        raise ValueError(
            f"Crop size {crop_w}x{crop_h} must be <= image size {image.width}x{image.height}"
        )


def center_crop(image: Image, crop_w: int, crop_h: int) -> Image:
    """Return the central ``crop_w x crop_h`` window as a new image."""

    _check_crop(image, crop_w, crop_h)
    left = (image.width - crop_w) // 2
    top = (image.height - crop_h) // 2
    return _crop(image, left, top, crop_w, crop_h)


def random_crop(
    image: Image,
    crop_w: int,
    crop_h: int,
    rng: Optional[np.random.Generator] = None,
) -> Image:
    """Return a uniformly placed ``crop_w x crop_h`` window as a new image."""

    _check_crop(image, crop_w, crop_h)
    rng = rng if rng is not None else np.random.default_rng()
    left = int(rng.integers(0, image.width - crop_w + 1))
    top = int(rng.integers(0, image.height - crop_h + 1))
    return _crop(image, left, top, crop_w, crop_h)


def hflip(image: Image) -> Image:
    """Mirror the image left to right, in place."""

    hwc = image.to_hwc()
    hwc[...] = hwc[:, ::-1].copy()
    return image


class Compose:
    """Compose a sequence of image callables."""

    def __init__(self, transforms: Iterable[Callable[[Image], Image]]) -> None:
        self.transforms: List[Callable[[Image], Image]] = list(transforms)

    def __call__(self, image: Image) -> Image:
        for transform in self.transforms:
            image = transform(image)
        return image
