from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pyimgset.utils.optional_deps import require

_YAML_SUFFIXES = (".yml", ".yaml")


def _read_yaml(path: Path) -> Any:
    yaml = require("yaml", purpose="YAML config files")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a loader config file into a Python dict.

    Supported formats:
    - JSON (.json) always
    - YAML (.yml/.yaml) only when PyYAML is installed
    """

    config_path = Path(path)
    suffix = config_path.suffix.lower()

    if suffix == ".json":
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    elif suffix in _YAML_SUFFIXES:
        data = _read_yaml(config_path)
    else:
        raise ValueError(
            f"Unsupported config extension: {suffix!r} for {str(config_path)!r}. "
            "Supported: .json, .yml, .yaml."
        )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            "Config must be an object/dict at the top level, "
            f"got {type(data).__name__} from {str(config_path)!r}."
        )
    return dict(data)
