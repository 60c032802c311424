from __future__ import annotations

from .dirsizeconfig import DirSizeConfig
from .dirsizeguard import DirSizeGuard

__version__ = "0.1.0"

__all__ = [
    "DirSizeConfig",
    "DirSizeGuard",
]
