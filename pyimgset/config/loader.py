from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

DEFAULT_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp")


def _require_mapping(value: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{name} must be a dict/object, got {type(value).__name__}")
    return value


def _parse_int(value: Any, *, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be int, got {value!r}")
    try:
        return int(value)
    except Exception as exc:  # noqa: BLE001 - validation boundary
        raise ValueError(f"{name} must be int, got {value!r}") from exc


def _parse_float(value: Any, *, name: str) -> float:
    try:
        return float(value)
    except Exception as exc:  # noqa: BLE001 - validation boundary
        raise ValueError(f"{name} must be float, got {value!r}") from exc


def _parse_scale_to(value: Any) -> int:
    scale_to = _parse_int(value, name="scale_to")
    if scale_to != -1 and scale_to <= 0:
        raise ValueError(f"scale_to must be -1 or positive, got {scale_to}")
    return scale_to


def _parse_crop(value: Any) -> tuple[int, int] | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"crop must be a list/tuple of length 2 (W, H) or null, got {value!r}")
    w = _parse_int(value[0], name="crop[0]")
    h = _parse_int(value[1], name="crop[1]")
    if w <= 0 or h <= 0:
        raise ValueError(f"crop must be positive, got {(w, h)}")
    return (w, h)


def _parse_channels(value: Any, *, name: str) -> tuple[float, ...] | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{name} must be a list of 3 floats (B, G, R) or null, got {value!r}")
    return tuple(_parse_float(v, name=name) for v in value)


def _parse_extensions(value: Any) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_EXTENSIONS
    if isinstance(value, str) or not isinstance(value, (list, tuple)) or not value:
        raise ValueError(f"extensions must be a non-empty list of strings, got {value!r}")
    out = []
    for ext in value:
        ext = str(ext).strip().lower()
        if not ext:
            raise ValueError("extensions must not contain empty entries")
        out.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(out)


@dataclass(frozen=True)
class LoaderConfig:
    """How images are read, scaled and batched for training."""

    scale_to: int = -1
    scale: float = 255.0
    crop: tuple[int, int] | None = None
    mean: tuple[float, ...] | None = None
    std: tuple[float, ...] | None = None
    batch_size: int = 32
    first_label: int = 0
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS

    @classmethod
    def from_dict(cls, raw: Any) -> "LoaderConfig":
        data = _require_mapping(raw, name="loader config")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown loader config keys: {unknown}. Allowed: {sorted(known)}")

        scale = _parse_float(data.get("scale", 255.0), name="scale")
        if scale == 0.0:
            raise ValueError("scale must be non-zero")

        batch_size = _parse_int(data.get("batch_size", 32), name="batch_size")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        mean = _parse_channels(data.get("mean"), name="mean")
        std = _parse_channels(data.get("std"), name="std")
        if (mean is None) != (std is None):
            raise ValueError("mean and std must be given together")
        if std is not None and any(s == 0.0 for s in std):
            raise ValueError(f"std must be non-zero, got {std}")

        return cls(
            scale_to=_parse_scale_to(data.get("scale_to", -1)),
            scale=scale,
            crop=_parse_crop(data.get("crop")),
            mean=mean,
            std=std,
            batch_size=batch_size,
            first_label=_parse_int(data.get("first_label", 0), name="first_label"),
            extensions=_parse_extensions(data.get("extensions")),
        )
