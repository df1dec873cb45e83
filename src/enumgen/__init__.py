"""
enumgen - enum helpers for Go.

Scans Go sources for type declarations annotated with an
``//enum: A | B=2 | C`` directive and generates a companion
``<type>_enum.go`` file with String, Parse, IsValid and friends.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import (
    EnumgenError,
    GenerationError,
    MalformedDeclaration,
    ParseError,
    UnsupportedBaseType,
)


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("enumgen")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "EnumgenError",
    "ParseError",
    "MalformedDeclaration",
    "UnsupportedBaseType",
    "GenerationError",
]
