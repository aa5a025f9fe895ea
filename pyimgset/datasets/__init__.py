"""
Dataset helpers that turn image folders and raw records into containers
and tensors.
"""

from .folder import ImageFolderDataset, find_image_folder
from .raw_manifest import RawManifestDataset, read_manifest

__all__ = [
    "ImageFolderDataset",
    "RawManifestDataset",
    "find_image_folder",
    "read_manifest",
]
