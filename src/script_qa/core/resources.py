"""importlib.resources helpers for accessing the built-in configuration.

Works both in development (editable install) and in a packaged wheel.
"""

from __future__ import annotations

from pathlib import Path


def _resources_dir() -> Path:
    """Return the Path to resources/ inside the package."""
    import importlib.resources as _ir

    ref = _ir.files("script_qa.resources")
    # hatchling ships resources as data files, so this is always a real directory.
    return Path(str(ref))


def get_default_config_path() -> Path:
    """Return the absolute Path to the built-in ``default.yml``."""
    return _resources_dir() / "default.yml"
