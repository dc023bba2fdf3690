# loadchart/normalize.py
from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, List, Optional, Tuple

from .config import MODE_SPREAD, Config
from .model import Task
from .util.console import eprint, obs_enabled
from .util.dates import parse_notion_date


def _props(page: Dict[str, Any]) -> Dict[str, Any]:
    p = page.get("properties")
    return p if isinstance(p, dict) else {}


def _title(props: Dict[str, Any]) -> str:
    for prop in props.values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            parts = prop.get("title") or []
            if isinstance(parts, list):
                return "".join(
                    str(x.get("plain_text") or "") for x in parts if isinstance(x, dict)
                ).strip()
    return ""


def _number(prop: Any) -> float:
    if not isinstance(prop, dict):
        return 0.0
    v = prop.get("number")
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        # formula/rollup numbers
        inner = prop.get("formula") or prop.get("rollup")
        v = inner.get("number") if isinstance(inner, dict) else None
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return 0.0
    v = float(v)
    return v if math.isfinite(v) else 0.0


def _date_range(prop: Any) -> Tuple[Optional[str], Optional[str]]:
    if not isinstance(prop, dict):
        return None, None
    d = prop.get("date")
    if not isinstance(d, dict):
        return None, None
    start = d.get("start") if isinstance(d.get("start"), str) else None
    end = d.get("end") if isinstance(d.get("end"), str) else None
    return start, end


def _category(prop: Any) -> Optional[str]:
    if not isinstance(prop, dict):
        return None
    for key in ("select", "status"):
        v = prop.get(key)
        if isinstance(v, dict):
            name = str(v.get("name") or "").strip()
            return name or None
    ms = prop.get("multi_select")
    if isinstance(ms, list):
        for v in ms:
            if isinstance(v, dict):
                name = str(v.get("name") or "").strip()
                if name:
                    return name
    return None


def _parse(raw: Optional[str], tz: dt.tzinfo, *, page_id: str, field: str) -> Optional[dt.date]:
    d = parse_notion_date(raw, tz)
    if raw and d is None and obs_enabled():
        eprint(f"[loadchart.normalize] WARN: invalid {field} date page={page_id!r} value={raw!r}")
    return d


def task_from_page(page: Any, cfg: Config, tz: dt.tzinfo) -> Optional[Task]:
    """Typed Task from a Notion page object.

    Missing or malformed fields degrade to defaults (effort 0, no date, no
    category); only non-object input is dropped.
    """
    if not isinstance(page, dict):
        return None

    page_id = str(page.get("id") or "")
    props = _props(page)

    if cfg.mode == MODE_SPREAD:
        start_raw, range_end_raw = _date_range(props.get(cfg.start_property))
        end_raw, _ = _date_range(props.get(cfg.end_property))
        if end_raw is None:
            end_raw = range_end_raw
    else:
        start_raw, _ = _date_range(props.get(cfg.date_property))
        end_raw = None

    return Task(
        name=_title(props),
        effort=_number(props.get(cfg.effort_property)),
        start=_parse(start_raw, tz, page_id=page_id, field="start"),
        end=_parse(end_raw, tz, page_id=page_id, field="end"),
        category=_category(props.get(cfg.category_property)),
        page_id=page_id,
    )


def tasks_from_pages(pages: List[Any], cfg: Config, tz: dt.tzinfo) -> List[Task]:
    out: List[Task] = []
    for p in pages:
        t = task_from_page(p, cfg, tz)
        if t is not None:
            out.append(t)
    return out
