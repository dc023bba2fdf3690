# loadchart/chart.py
"""Chart rendering via QuickChart.

The renderer is pure: the same labels, series and bounds always produce the
same URL, which is what lets the publisher skip no-op updates.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Sequence
from urllib.parse import quote

from .model import Allocation

QUICKCHART_BASE = "https://quickchart.io"

CHART_WIDTH = 800
CHART_HEIGHT = 300
CHART_BACKGROUND = "transparent"
GRID_COLOR = "rgba(0, 0, 0, 0.7)"


def axis_max(peak: float, floor: int = 8) -> int:
    """Y-axis upper bound: peak rounded up to a multiple of 4, never below `floor`."""
    return max(int(math.ceil(max(0.0, float(peak)) / 4.0)) * 4, int(floor))


def _num(x: float) -> str:
    s = f"{float(x):.2f}".rstrip("0").rstrip(".")
    return s if s not in ("", "-0") else "0"


def summary_text(alloc: Allocation, unit: str = "h") -> str:
    return (
        f"Peak {_num(alloc.peak)}{unit} | "
        f"Next {alloc.short_window}d {_num(alloc.near_term_total)}{unit} | "
        f"{alloc.num_days}d {_num(alloc.window_total)}{unit}"
    )


def build_chart_config(
    labels: Sequence[str],
    datasets: Sequence[Dict[str, Any]],
    *,
    y_max: int,
    title: str,
) -> Dict[str, Any]:
    """Chart.js (v2) stacked bar config for QuickChart."""
    with_data = [d for d in datasets if any(v for v in d.get("data", []))]
    return {
        "type": "bar",
        "data": {
            "labels": list(labels),
            "datasets": list(datasets),
        },
        "options": {
            "title": {"display": bool(title), "text": title},
            "legend": {"display": len(with_data) > 1},
            "scales": {
                "xAxes": [
                    {
                        "stacked": True,
                        "gridLines": {"color": GRID_COLOR},
                        "ticks": {
                            "minRotation": 0,
                            "maxRotation": 45,
                            "padding": 0,
                            "labelOffset": 0,
                        },
                    }
                ],
                "yAxes": [
                    {
                        "stacked": True,
                        "gridLines": {"color": GRID_COLOR},
                        "ticks": {"min": 0, "max": int(y_max)},
                    }
                ],
            },
        },
    }


def chart_url(
    config: Dict[str, Any],
    *,
    width: int = CHART_WIDTH,
    height: int = CHART_HEIGHT,
    background: str = CHART_BACKGROUND,
    base_url: str = QUICKCHART_BASE,
    device_pixel_ratio: float = 1.0,
    fmt: str = "png",
) -> str:
    """Image URL for a chart config, laid out like the QuickChart client's getUrl()."""
    c = json.dumps(config, separators=(",", ":"), ensure_ascii=False)
    url = (
        f"{base_url.rstrip('/')}/chart?c={quote(c, safe='')}"
        f"&w={int(width)}&h={int(height)}"
        f"&devicePixelRatio={float(device_pixel_ratio):.1f}&f={fmt}"
    )
    if background:
        url += f"&bkg={quote(background, safe='')}"
    return url


def datasets_for(alloc: Allocation) -> List[Dict[str, Any]]:
    return [
        {
            "label": c.name,
            "data": list(alloc.series[c.order]),
            "backgroundColor": c.color,
        }
        for c in alloc.categories
    ]


def render_chart(alloc: Allocation, labels: Sequence[str], *, axis_floor: int = 8, unit: str = "h") -> str:
    config = build_chart_config(
        labels,
        datasets_for(alloc),
        y_max=axis_max(alloc.peak, axis_floor),
        title=summary_text(alloc, unit),
    )
    return chart_url(config)
