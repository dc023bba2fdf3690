# loadchart/model.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

OTHER = "Other"


@dataclass(frozen=True)
class Task:
    name: str
    effort: float

    start: Optional[dt.date] = None
    end: Optional[dt.date] = None
    category: Optional[str] = None

    page_id: str = ""


@dataclass(frozen=True)
class Category:
    name: str
    order: int
    color: str


def day_totals(series: Sequence[Sequence[float]], num_days: int) -> List[float]:
    """Sum across categories for each day index."""
    return [sum(s[i] for s in series) for i in range(num_days)]


@dataclass(frozen=True)
class Allocation:
    """Effort per category per day.

    series[order][day] is the summed effort of category `categories[order]`
    on day index `day` (0 = today in the reference timezone).
    """

    categories: Tuple[Category, ...]
    series: Tuple[Tuple[float, ...], ...]
    num_days: int
    short_window: int

    peak: float
    near_term_total: float
    window_total: float

    def day_totals(self) -> List[float]:
        return day_totals(self.series, self.num_days)

    def series_for(self, name: str) -> Tuple[float, ...]:
        for c in self.categories:
            if c.name == name:
                return self.series[c.order]
        raise KeyError(name)


T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    reason: str
    error: Optional[BaseException] = None
    ok: bool = field(default=False, init=False)


Result = Union[Success[Any], Failure]


__all__ = [
    "OTHER",
    "Task",
    "Category",
    "Allocation",
    "day_totals",
    "Success",
    "Failure",
    "Result",
]
