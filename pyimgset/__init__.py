"""pyimgset - image containers and byte codecs for training pipelines.

Keep top-level imports lightweight: `torch` is only pulled in by the
batching and dataset modules. Exports are lazy-loaded on demand so that
`import pyimgset` stays cheap.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Modules
    "batching",
    "config",
    "datasets",
    "images",
    "io",
    "transforms",
    "utils",
    # Containers
    "Image",
    "GreyImage",
    "RGBImage",
    # Raw byte layout
    "read_image",
    "convert_to_byte",
    "encode_raw",
    "decode_raw",
    # Batching
    "to_batch",
    "iter_batches",
]


_LAZY_SUBMODULES = {
    "batching",
    "config",
    "datasets",
    "images",
    "io",
    "transforms",
    "utils",
}

_LAZY_EXPORTS = {
    "Image": ("images", "Image"),
    "GreyImage": ("images", "GreyImage"),
    "RGBImage": ("images", "RGBImage"),
    "read_image": ("io.raw", "read_image"),
    "convert_to_byte": ("io.raw", "convert_to_byte"),
    "encode_raw": ("io.raw", "encode_raw"),
    "decode_raw": ("io.raw", "decode_raw"),
    "to_batch": ("batching", "to_batch"),
    "iter_batches": ("batching", "iter_batches"),
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin delegation
    if name in _LAZY_SUBMODULES:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module

    target = _LAZY_EXPORTS.get(name)
    if target is not None:
        module_name, attr = target
        module = import_module(f"{__name__}.{module_name}")
        value = getattr(module, attr)
        globals()[name] = value
        return value

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover - tooling convenience
    return sorted(set(globals()) | set(__all__))
