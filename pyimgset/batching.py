from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np
import torch

from pyimgset.images import Image, RGBImage


def to_batch(images: Sequence[Image]) -> Tuple[torch.Tensor, torch.Tensor]:
    """Stack same-sized images into ``(N, C, H, W)`` data and ``(N,)`` labels.

    RGB images are laid out through :meth:`RGBImage.copy_to`, so channel
    planes follow the buffer's interleaving order.
    """

    images = list(images)
    if not images:
        raise ValueError("to_batch needs at least one image")

    first = images[0]
    kind = type(first)
    for img in images[1:]:
        if type(img) is not kind:
            raise ValueError(f"Mixed image types in batch: {kind.__name__} and {type(img).__name__}")
        if (img.width, img.height) != (first.width, first.height):
            raise ValueError(
                f"All images in a batch must share one size, got {first.width}x{first.height} "
                f"and {img.width}x{img.height}"
            )

    channels, height, width = kind.channels, first.height, first.width
    frame = channels * height * width
    storage = np.empty(len(images) * frame, dtype=np.float32)
    labels = np.empty(len(images), dtype=np.float32)

    for i, img in enumerate(images):
        if isinstance(img, RGBImage):
            img.copy_to(storage, i * frame)
        else:
            storage[i * frame : (i + 1) * frame] = img.content[:frame]
        labels[i] = img.label

    data = torch.from_numpy(storage).view(len(images), channels, height, width)
    return data, torch.from_numpy(labels)


def iter_batches(
    images: Iterable[Image],
    batch_size: int,
    *,
    drop_last: bool = False,
) -> Iterator[Tuple[torch.Tensor, torch.Tensor]]:
    """Yield :func:`to_batch` results over consecutive chunks of `images`."""

    if int(batch_size) <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size!r}")

    chunk: list[Image] = []
    for img in images:
        chunk.append(img)
        if len(chunk) == batch_size:
            yield to_batch(chunk)
            chunk = []

    if chunk and not drop_last:
        yield to_batch(chunk)
