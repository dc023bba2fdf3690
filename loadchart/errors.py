"""Error taxonomy for a loadchart run."""

from __future__ import annotations

from typing import Optional


class LoadchartError(Exception):
    """Base class for failures that abort a run without publishing."""


class ConfigError(LoadchartError, ValueError):
    """Raised when required configuration is missing or invalid."""


class NotionError(LoadchartError):
    """Raised when a Notion API call fails (network, auth, query)."""

    def __init__(self, message: str, *, status: Optional[int] = None, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code

    def __str__(self) -> str:
        msg = super().__str__()
        if self.status is None:
            return msg
        if self.code:
            return f"HTTP {self.status} ({self.code}): {msg}"
        return f"HTTP {self.status}: {msg}"


class EmbedNotFoundError(LoadchartError):
    """Raised when the destination page has no embed block to update."""


class DeadlineExceeded(LoadchartError):
    """Raised when the overall run deadline passes before the run completes."""


class PipelineError(LoadchartError):
    """Raised by the entry point when a run ends in failure."""
