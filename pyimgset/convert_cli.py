from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pyimgset.config import LoaderConfig, load_config
from pyimgset.datasets.folder import find_image_folder
from pyimgset.io.raw import read_header, read_image

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.jsonl"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pyimgset-convert")

    parser.add_argument("--root", required=True, help="Image folder (one subdirectory per class)")
    parser.add_argument("--out", required=True, help="Output directory for .raw files and manifest")
    parser.add_argument(
        "--scale-to",
        type=int,
        default=None,
        help="Scale the short side to this many pixels; -1 keeps the original size. Default: -1",
    )
    parser.add_argument(
        "--first-label",
        type=int,
        default=None,
        help="Label of the first class (classes sorted by name). Default: 0",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional JSON/YAML loader config; command-line flags override it",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every converted file")
    return parser


def _resolve_config(args: argparse.Namespace) -> LoaderConfig:
    raw: dict[str, Any] = load_config(args.config) if args.config else {}
    if args.scale_to is not None:
        raw["scale_to"] = args.scale_to
    if args.first_label is not None:
        raw["first_label"] = args.first_label
    return LoaderConfig.from_dict(raw)


def convert_image_folder(
    *,
    root: str | Path,
    out_dir: str | Path,
    config: LoaderConfig | None = None,
) -> tuple[list[dict[str, Any]], int]:
    """Convert every image under `root` into a raw byte layout file.

    Returns the manifest records written and the number of skipped images.
    """

    cfg = config or LoaderConfig()
    root_path = Path(root)
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    samples = find_image_folder(root_path, cfg.extensions, first_label=cfg.first_label)

    records: list[dict[str, Any]] = []
    skipped = 0
    for src, label in samples:
        # a.png and a.bmp must not share a.raw
        rel = src.relative_to(root_path)
        rel = rel.with_name(rel.name + ".raw")
        try:
            raw = read_image(src, cfg.scale_to)
        except Exception as exc:  # noqa: BLE001 - skip unreadable inputs
            logger.warning("Skipping %s: %s", src, exc)
            skipped += 1
            continue

        dst = out_path / rel
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_bytes(raw)
        width, height = read_header(raw)
        logger.info("Wrote %s (%dx%d, label=%d)", dst, width, height, label)

        records.append(
            {
                "raw_path": rel.as_posix(),
                "label": label,
                "width": width,
                "height": height,
                "source": str(src),
            }
        )

    with (out_path / MANIFEST_NAME).open("w", encoding="utf-8") as f:
        for rec in records:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    return records, skipped


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _resolve_config(args)
        records, skipped = convert_image_folder(root=args.root, out_dir=args.out, config=config)
    except Exception as exc:  # noqa: BLE001 - CLI boundary
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"converted {len(records)} images, skipped {skipped}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
