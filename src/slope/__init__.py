"""
Slope - a small expression language for piecewise functions and finite sets.

Arithmetic, boolean logic, set algebra and user-defined functions,
evaluated directly from source text.
"""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import EvaluationError, ParseError, SlopeError
from .core.expression_lang import Environment, execute, new_environment, run


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
        return _metadata_version("slope")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "Environment",
    "execute",
    "new_environment",
    "run",
    "SlopeError",
    "ParseError",
    "EvaluationError",
]
