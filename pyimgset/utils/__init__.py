"""Utility helpers for pyimgset."""

from __future__ import annotations

from .optional_deps import install_hint, optional_import, require

__all__ = ["install_hint", "optional_import", "require"]
