"""Distribution metadata read from the installed ``construction-workflows`` package."""

from __future__ import annotations

import importlib.metadata

__all__ = ("__project__", "__version__")

_DISTRIBUTION = "construction-workflows"

__version__ = importlib.metadata.version(_DISTRIBUTION)
"""Installed version of the distribution."""
__project__ = importlib.metadata.metadata(_DISTRIBUTION)["Name"]
"""Distribution name as published."""
