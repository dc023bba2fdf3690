# loadchart/allocation.py
"""Work allocation: spread each task's effort over a day x category grid.

Day index 0 is "today" as a civil date in the reference timezone. Past dates
clamp to day 0; anything at or beyond `num_days` is dropped.

Two modes:
  - spread: effort is divided evenly over every day from start to end
    (both clipped to today), rounded to 2 decimals per day.
  - single: the whole effort lands on the task's one date.
"""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence

from .categories import NEUTRAL_GRAY
from .config import MODE_SINGLE, MODE_SPREAD
from .model import OTHER, Allocation, Category, Task, day_totals
from .util.console import eprint, obs_enabled
from .util.tz import days_between


def round2(x: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(repr(float(x))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def spread_span(task: Task, today: dt.date) -> tuple[int, int]:
    """(first_day, span_days) for a spread-mode task.

    Missing start -> today; missing end -> start. Both are clipped to today,
    and an end before the start collapses to a single day.
    """
    start = task.start or today
    end = task.end or start
    eff_start = max(start, today)
    eff_end = max(end, today)
    if eff_end < eff_start:
        eff_end = eff_start
    span_days = days_between(eff_start, eff_end) + 1
    first_day = days_between(today, eff_start)
    return first_day, span_days


def single_day_index(task: Task, today: dt.date) -> int:
    """Day index for a single-day task; a missing date counts as today."""
    d = task.start or today
    return max(0, days_between(today, d))


def _bucket(task: Task, index: Dict[str, int], other: int) -> int:
    if task.category and task.category in index:
        return index[task.category]
    if task.category and obs_enabled():
        eprint(f"[loadchart.allocation] WARN: unknown category {task.category!r}; counting as {OTHER}")
    return other


def allocate(
    tasks: Iterable[Task],
    categories: Sequence[Category],
    *,
    today: dt.date,
    num_days: int,
    short_window: int = 7,
    mode: str = MODE_SPREAD,
) -> Allocation:
    if mode not in (MODE_SPREAD, MODE_SINGLE):
        raise ValueError(f"Unknown allocation mode: {mode!r}")
    num_days = int(num_days)
    if num_days < 1:
        raise ValueError("num_days must be >= 1")
    short_window = min(max(1, int(short_window)), num_days)

    cats = list(categories)
    if not cats or cats[-1].name != OTHER:
        cats.append(Category(name=OTHER, order=len(cats), color=NEUTRAL_GRAY))
    index = {c.name: c.order for c in cats}
    other = index[OTHER]

    grid: List[List[float]] = [[0.0] * num_days for _ in cats]

    for t in tasks:
        row = grid[_bucket(t, index, other)]
        effort = float(t.effort or 0.0)

        if mode == MODE_SINGLE:
            day = single_day_index(t, today)
            if day < num_days:
                row[day] += effort
            continue

        first_day, span_days = spread_span(t, today)
        per_day = round2(effort / span_days)
        lo = max(0, first_day)
        hi = min(num_days, first_day + span_days)
        for day in range(lo, hi):
            row[day] += per_day

    series = tuple(tuple(round2(v) for v in row) for row in grid)
    totals = day_totals(series, num_days)

    alloc = Allocation(
        categories=tuple(cats),
        series=series,
        num_days=num_days,
        short_window=short_window,
        peak=round2(max(totals)),
        near_term_total=round2(sum(totals[:short_window])),
        window_total=round2(sum(totals)),
    )
    if obs_enabled():
        eprint(f"[loadchart.allocation] totals={[round2(v) for v in totals]} peak={alloc.peak}")
    return alloc
