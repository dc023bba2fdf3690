# loadchart/pipeline.py
"""One run: fetch tasks -> resolve categories -> allocate -> render -> publish.

Publishing is the only write and happens last, so any failure before it
leaves the embedded chart untouched.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from .allocation import allocate
from .categories import category_options, resolve_categories
from .chart import render_chart
from .config import Config
from .errors import LoadchartError, PipelineError
from .labels import make_labels
from .model import Allocation, Failure, Result, Success
from .normalize import tasks_from_pages
from .notion import NotionClient, open_tasks_filter
from .publish import publish_chart
from .util.console import eprint, obs_enabled
from .util.deadline import Deadline
from .util.tz import today_date

STATUS_DRY_RUN = "Dry run"


class Workspace(Protocol):
    def query_database(self, database_id: str, filter: Optional[Dict[str, Any]] = None, *, page_size: int = 100) -> List[Dict[str, Any]]: ...

    def retrieve_database(self, database_id: str) -> Dict[str, Any]: ...

    def list_block_children(self, block_id: str, *, page_size: int = 50) -> List[Dict[str, Any]]: ...

    def update_embed(self, block_id: str, url: str) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class RunReport:
    status: str
    chart_url: str
    allocation: Allocation
    task_count: int
    today: dt.date


def run(
    cfg: Config,
    *,
    client: Optional[Workspace] = None,
    today: Optional[dt.date] = None,
    dry_run: bool = False,
) -> Result:
    """Run the whole pipeline once. Known failures come back as Failure, never half-applied."""
    deadline = Deadline(cfg.deadline_s)
    ws = client if client is not None else NotionClient.from_config(cfg, deadline=deadline)

    try:
        tz = cfg.tzinfo()
        day0 = today if today is not None else today_date(tz)

        pages = ws.query_database(cfg.database_id, open_tasks_filter(cfg))
        tasks = tasks_from_pages(pages, cfg, tz)

        deadline.check("category lookup")
        database = ws.retrieve_database(cfg.database_id)
        categories = resolve_categories(category_options(database, cfg.category_property), cfg.priority)

        alloc = allocate(
            tasks,
            categories,
            today=day0,
            num_days=cfg.num_days,
            short_window=cfg.short_window,
            mode=cfg.mode,
        )
        url = render_chart(
            alloc,
            make_labels(day0, cfg.num_days),
            axis_floor=cfg.axis_floor,
            unit=cfg.unit,
        )

        if dry_run:
            status = STATUS_DRY_RUN
        else:
            deadline.check("publishing")
            status = publish_chart(ws, cfg.page_id, url)
    except LoadchartError as ex:
        return Failure(reason=str(ex), error=ex)

    if obs_enabled():
        eprint(
            f"[loadchart.pipeline] run.ok status={status!r} tasks={len(tasks)} "
            f"categories={len(categories)} ms={deadline.elapsed_ms()}"
        )
    return Success(RunReport(status=status, chart_url=url, allocation=alloc, task_count=len(tasks), today=day0))


def handler(event: Any = None, context: Any = None) -> str:
    """Invocation entry point: runs once with config from the environment.

    Returns "Replaced" or "No replacement"; raises on any failure.
    """
    cfg = Config.from_env()
    result = run(cfg)
    if isinstance(result, Failure):
        eprint(f"[loadchart] ERROR: {result.reason}")
        raise PipelineError(result.reason) from result.error
    return result.value.status
