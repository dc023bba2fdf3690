"""loadchart Python package.

Public API:
  - import from `loadchart.api` (preferred) or `import loadchart` (re-export)
"""

from __future__ import annotations

from .api import *  # noqa: F401,F403
from . import api as _api

__all__ = list(_api.__all__)
