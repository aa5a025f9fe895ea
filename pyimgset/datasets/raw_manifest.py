"""Read raw byte layout records listed in a JSONL manifest.

Each manifest line is an object with at least ``raw_path`` (relative to the
manifest's directory unless absolute) and ``label``. The converter CLI also
records ``width``, ``height`` and ``source``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

from pyimgset.images import RGBImage

logger = logging.getLogger(__name__)


def read_manifest(path: str | Path) -> list[dict[str, Any]]:
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    records: list[dict[str, Any]] = []
    with manifest_path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{manifest_path}:{lineno}: invalid JSON ({exc})") from exc
            if not isinstance(rec, dict):
                raise ValueError(f"{manifest_path}:{lineno}: expected a JSON object")
            if "raw_path" not in rec or "label" not in rec:
                raise ValueError(f"{manifest_path}:{lineno}: missing 'raw_path' or 'label'")
            records.append(rec)
    return records


class RawManifestDataset:
    """Sequence of :class:`RGBImage` built from raw records with `copy_from_raw`."""

    def __init__(self, manifest_path: str | Path, *, scale: float = 255.0) -> None:
        self.manifest_path = Path(manifest_path)
        self.base_dir = self.manifest_path.parent
        self.records = read_manifest(self.manifest_path)
        self.scale = scale
        logger.info("Loaded %d raw records from %s", len(self.records), self.manifest_path)

    def __len__(self) -> int:
        return len(self.records)

    def _resolve(self, raw_path: str) -> Path:
        p = Path(raw_path)
        return p if p.is_absolute() else self.base_dir / p

    def __getitem__(self, idx: int) -> RGBImage:
        rec = self.records[idx]
        raw = self._resolve(str(rec["raw_path"])).read_bytes()
        image = RGBImage(label=float(rec["label"]))
        return image.copy_from_raw(raw, scale=self.scale)

    def __iter__(self) -> Iterator[RGBImage]:
        for idx in range(len(self)):
            yield self[idx]
