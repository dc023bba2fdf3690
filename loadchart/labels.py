# loadchart/labels.py
from __future__ import annotations

import datetime as dt
from typing import List

# Fixed English abbreviations; strftime("%a") follows the process locale.
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _md(d: dt.date) -> str:
    return f"{d.month}/{d.day}"


def day_label(today: dt.date, index: int) -> str:
    d = today + dt.timedelta(days=index)
    if index == 0:
        return f"Today {_md(d)}"
    if index == 1:
        return f"Tomorrow {_md(d)}"
    return f"{_WEEKDAYS[d.weekday()]} {_md(d)}"


def make_labels(today: dt.date, num_days: int) -> List[str]:
    """X-axis labels for `num_days` days starting at `today`."""
    return [day_label(today, i) for i in range(max(0, int(num_days)))]
