from __future__ import annotations

from . import const

__all__ = ["const"]
