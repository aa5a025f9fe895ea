from __future__ import annotations

import json
from pathlib import Path

from PIL import Image


def _write_rgb(path: Path, size=(8, 6)) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(10, 20, 30)).save(path)


def _make_folder(tmp_path: Path) -> Path:
    root = tmp_path / "images"
    _write_rgb(root / "ants" / "a0.png")
    _write_rgb(root / "bees" / "b0.jpg")
    (root / "bees" / "broken.jpg").write_bytes(b"not an image")
    return root


def test_convert_cli_writes_raw_files_and_manifest(tmp_path: Path, capsys) -> None:
    from pyimgset.convert_cli import main
    from pyimgset.datasets.raw_manifest import RawManifestDataset
    from pyimgset.io.raw import read_header

    root = _make_folder(tmp_path)
    out = tmp_path / "out"

    code = main(["--root", str(root), "--out", str(out), "--scale-to", "3"])
    assert code == 0
    assert "converted 2 images, skipped 1" in capsys.readouterr().out

    rows = [json.loads(line) for line in (out / "manifest.jsonl").read_text("utf-8").splitlines()]
    assert [(r["raw_path"], r["label"]) for r in rows] == [("ants/a0.png.raw", 0), ("bees/b0.jpg.raw", 1)]
    assert all((r["width"], r["height"]) == (4, 3) for r in rows)
    assert read_header((out / "ants" / "a0.png.raw").read_bytes()) == (4, 3)

    ds = RawManifestDataset(out / "manifest.jsonl")
    assert [img.label for img in ds] == [0.0, 1.0]


def test_convert_cli_config_with_flag_override(tmp_path: Path) -> None:
    from pyimgset.convert_cli import main

    root = _make_folder(tmp_path)
    out = tmp_path / "out"
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"first_label": 5, "extensions": [".png"]}), encoding="utf-8")

    code = main(["--root", str(root), "--out", str(out), "--config", str(cfg), "--first-label", "1"])
    assert code == 0

    rows = [json.loads(line) for line in (out / "manifest.jsonl").read_text("utf-8").splitlines()]
    assert [(r["raw_path"], r["label"], r["width"], r["height"]) for r in rows] == [
        ("ants/a0.png.raw", 1, 8, 6)
    ]


def test_convert_cli_missing_root_returns_error(tmp_path: Path, capsys) -> None:
    from pyimgset.convert_cli import main

    code = main(["--root", str(tmp_path / "missing"), "--out", str(tmp_path / "out")])
    assert code == 2
    assert "error:" in capsys.readouterr().err


def test_convert_cli_invalid_config_returns_error(tmp_path: Path, capsys) -> None:
    from pyimgset.convert_cli import main

    root = _make_folder(tmp_path)
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"scale_to": 0}), encoding="utf-8")

    code = main(["--root", str(root), "--out", str(tmp_path / "out"), "--config", str(cfg)])
    assert code == 2
    assert "scale_to" in capsys.readouterr().err


def test_convert_cli_same_stem_different_suffix_kept_apart(tmp_path: Path) -> None:
    from pyimgset.convert_cli import main
    from pyimgset.datasets.raw_manifest import RawManifestDataset

    root = tmp_path / "images"
    _write_rgb(root / "cat" / "a.png", size=(4, 4))
    _write_rgb(root / "cat" / "a.bmp", size=(6, 6))
    out = tmp_path / "out"

    code = main(["--root", str(root), "--out", str(out)])
    assert code == 0

    rows = [json.loads(line) for line in (out / "manifest.jsonl").read_text("utf-8").splitlines()]
    assert sorted(r["raw_path"] for r in rows) == ["cat/a.bmp.raw", "cat/a.png.raw"]

    ds = RawManifestDataset(out / "manifest.jsonl")
    assert [(r["width"], r["height"]) for r in rows] == [(img.width, img.height) for img in ds]
    assert sorted(img.width for img in ds) == [4, 6]
