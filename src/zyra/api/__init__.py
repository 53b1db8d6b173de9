"""REST surface for the scheduler, execution tracker, history and validator."""

from __future__ import annotations

from .app import create_app
from .context import ZyraRuntime

__all__ = ["ZyraRuntime", "create_app"]
