"""Import helpers that fail with an install hint.

`torch` and `PyYAML` are only needed by parts of `pyimgset`; importing them
through :func:`require` keeps the error actionable when they are missing.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Optional, Tuple


_PIP_NAME_OVERRIDES = {
    "cv2": "opencv-python",
    "PIL": "Pillow",
    "yaml": "PyYAML",
}

_EXTRA_FOR_MODULE = {
    "yaml": "yaml",
}


def optional_import(module_name: str) -> Tuple[Optional[ModuleType], Optional[BaseException]]:
    """Attempt to import a module, returning (module, error)."""

    try:
        return import_module(module_name), None
    except ImportError as exc:
        return None, exc


def install_hint(module_name: str) -> str:
    root = str(module_name).split(".", 1)[0]
    extra = _EXTRA_FOR_MODULE.get(root)
    if extra:
        return f"pip install 'pyimgset[{extra}]'"
    return f"pip install '{_PIP_NAME_OVERRIDES.get(root, root)}'"


def require(module_name: str, *, purpose: Optional[str] = None) -> ModuleType:
    """Import `module_name`, raising a clean ImportError with install hint if missing."""

    module, error = optional_import(module_name)
    if module is not None:
        return module

    context = f" for {purpose}" if purpose else ""
    raise ImportError(
        f"Optional dependency '{module_name}' is required{context}.\n"
        f"Install it via:\n  {install_hint(module_name)}\n"
        f"Original error: {error}"
    ) from error
