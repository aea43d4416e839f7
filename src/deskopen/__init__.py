"""
deskopen - Open files and URLs with their default application.

Resolves the MIME type of the argument through the freedesktop association
files and launches the matching desktop entry.
"""

from __future__ import annotations

__version__ = "0.1.0"

from deskopen.deskopen import open_target

__all__ = ["open_target", "__version__"]
