"""Class-per-subdirectory image folders.

Expected layout::

    root/
      <class_a>/*.jpg|*.jpeg|*.png|*.bmp
      <class_b>/...

Classes are sorted by directory name and numbered from `first_label`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from torch.utils.data import Dataset

from pyimgset.config.loader import DEFAULT_EXTENSIONS, LoaderConfig
from pyimgset.images import RGBImage
from pyimgset.transforms import center_crop, normalize

logger = logging.getLogger(__name__)


def find_image_folder(
    root: str | Path,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    *,
    first_label: int = 0,
) -> list[tuple[Path, int]]:
    """List ``(path, label)`` pairs of every image below `root`'s class dirs."""

    root_path = Path(root)
    if not root_path.is_dir():
        raise NotADirectoryError(str(root_path))

    allowed = {str(e).lower() for e in extensions}
    class_dirs = sorted(p for p in root_path.iterdir() if p.is_dir())

    samples: list[tuple[Path, int]] = []
    for index, class_dir in enumerate(class_dirs):
        label = first_label + index
        for p in sorted(class_dir.rglob("*")):
            if p.is_file() and p.suffix.lower() in allowed:
                samples.append((p, label))

    logger.info(
        "Found %d images in %d classes under %s", len(samples), len(class_dirs), root_path
    )
    return samples


class ImageFolderDataset(Dataset):
    """Torch dataset over an image folder, returning ``(tensor (3,H,W), label)``.

    Images go through :meth:`RGBImage.from_file`, then an optional center
    crop and per-channel normalization on the float buffer.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        scale_to: int = -1,
        scale: float = 255.0,
        crop: Optional[tuple[int, int]] = None,
        mean: Optional[Sequence[float]] = None,
        std: Optional[Sequence[float]] = None,
        first_label: int = 0,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        if (mean is None) != (std is None):
            raise ValueError("mean and std must be given together")
        if mean is not None and std is not None and (len(mean) != 3 or len(std) != 3):
            raise ValueError(
                f"mean/std need one value per channel (3), got {len(mean)}/{len(std)}"
            )
        self.root = Path(root)
        self.samples = find_image_folder(self.root, extensions, first_label=first_label)
        self.scale_to = scale_to
        self.scale = scale
        self.crop = crop
        self.mean = mean
        self.std = std

    @classmethod
    def from_config(cls, root: str | Path, config: LoaderConfig) -> "ImageFolderDataset":
        return cls(
            root,
            scale_to=config.scale_to,
            scale=config.scale,
            crop=config.crop,
            mean=config.mean,
            std=config.std,
            first_label=config.first_label,
            extensions=config.extensions,
        )

    def __len__(self) -> int:
        return len(self.samples)

    def load(self, idx: int) -> RGBImage:
        path, label = self.samples[idx]
        image = RGBImage.from_file(path, self.scale_to, self.scale, label=float(label))
        if self.crop is not None:
            image = center_crop(image, *self.crop)
        if self.mean is not None and self.std is not None:
            normalize(image, self.mean, self.std)
        return image

    def __getitem__(self, idx: int):
        image = self.load(idx)
        return image.to_tensor(), int(image.label)

    def labels(self) -> np.ndarray:
        return np.asarray([label for _, label in self.samples], dtype=np.int64)
