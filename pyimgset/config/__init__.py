from __future__ import annotations

from .io import load_config
from .loader import DEFAULT_EXTENSIONS, LoaderConfig

__all__ = ["DEFAULT_EXTENSIONS", "LoaderConfig", "load_config"]
