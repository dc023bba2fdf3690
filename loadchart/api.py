"""loadchart.api

Stable *library* entrypoint for loadchart.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from loadchart.allocation import allocate, round2, single_day_index, spread_span
from loadchart.categories import NEUTRAL_GRAY, category_options, palette_color, resolve_categories
from loadchart.chart import axis_max, build_chart_config, chart_url, render_chart, summary_text
from loadchart.config import MODE_SINGLE, MODE_SPREAD, Config
from loadchart.errors import (
    ConfigError,
    DeadlineExceeded,
    EmbedNotFoundError,
    LoadchartError,
    NotionError,
    PipelineError,
)
from loadchart.labels import make_labels
from loadchart.model import OTHER, Allocation, Category, Failure, Result, Success, Task
from loadchart.normalize import task_from_page, tasks_from_pages
from loadchart.notion import NotionClient, open_tasks_filter
from loadchart.pipeline import RunReport, handler, run
from loadchart.publish import STATUS_REPLACED, STATUS_UNCHANGED, find_embed_block, publish_chart


# --- Public API exports -------------------------------------------------------
_PUBLIC_EXPORTS = [
    # entry points
    "handler",
    "run",
    "RunReport",
    "Config",
    "MODE_SPREAD",
    "MODE_SINGLE",
    # records
    "Task",
    "Category",
    "Allocation",
    "OTHER",
    "Success",
    "Failure",
    "Result",
    # components
    "NotionClient",
    "open_tasks_filter",
    "task_from_page",
    "tasks_from_pages",
    "category_options",
    "resolve_categories",
    "palette_color",
    "NEUTRAL_GRAY",
    "allocate",
    "spread_span",
    "single_day_index",
    "round2",
    "make_labels",
    "axis_max",
    "summary_text",
    "build_chart_config",
    "chart_url",
    "render_chart",
    "find_embed_block",
    "publish_chart",
    "STATUS_REPLACED",
    "STATUS_UNCHANGED",
    # errors
    "LoadchartError",
    "ConfigError",
    "NotionError",
    "EmbedNotFoundError",
    "DeadlineExceeded",
    "PipelineError",
]

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports ------------------------------------------------------
