# loadchart/util/dates.py
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

from .tz import civil_date

_DATE_ONLY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s, "%Y-%m-%d").date()


def parse_notion_date(s: Any, tz: dt.tzinfo) -> Optional[dt.date]:
    """Civil date in `tz` for a Notion date string.

    Date-only values ("2024-03-05") are taken as written; they are never shifted
    through UTC. Datetimes with an offset are converted to `tz` first.
    Returns None for anything unparseable.
    """
    if not isinstance(s, str):
        return None
    raw = s.strip()
    if not raw:
        return None

    m = _DATE_ONLY_RE.match(raw)
    if m:
        try:
            return dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    try:
        d = dt.datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return civil_date(d, tz)
