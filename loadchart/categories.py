# loadchart/categories.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .model import OTHER, Category
from .util.console import eprint, obs_enabled

NEUTRAL_GRAY = "#9B9A97"

# Notion option color tokens -> chart colors.
PALETTE: Dict[str, str] = {
    "gray": "#787774",
    "brown": "#9F6B53",
    "orange": "#D9730D",
    "yellow": "#CB912F",
    "green": "#448361",
    "blue": "#337EA9",
    "purple": "#9065B0",
    "pink": "#C14C8A",
    "red": "#D44C47",
}


def palette_color(token: Optional[str]) -> str:
    """Chart color for a Notion color token; unknown or missing tokens map to gray."""
    if not token:
        return NEUTRAL_GRAY
    return PALETTE.get(str(token).strip().lower()) or NEUTRAL_GRAY


def category_options(database: Any, prop_name: str) -> List[Tuple[str, Optional[str]]]:
    """(name, color token) pairs for a select/status/multi_select property, in declaration order.

    A database without that property yields no options.
    """
    if not isinstance(database, dict):
        return []
    props = database.get("properties")
    if not isinstance(props, dict):
        return []
    prop = props.get(prop_name)
    if not isinstance(prop, dict):
        return []

    for key in ("select", "status", "multi_select"):
        spec = prop.get(key)
        if not isinstance(spec, dict):
            continue
        opts = spec.get("options")
        if not isinstance(opts, list):
            return []
        out: List[Tuple[str, Optional[str]]] = []
        seen = set()
        for o in opts:
            if not isinstance(o, dict):
                continue
            name = str(o.get("name") or "").strip()
            if not name or name in seen:
                continue
            seen.add(name)
            color = o.get("color") if isinstance(o.get("color"), str) else None
            out.append((name, color))
        return out
    return []


def resolve_categories(
    options: Iterable[Tuple[str, Optional[str]]],
    priority: Optional[Sequence[str]] = None,
) -> List[Category]:
    """Ordered categories with colors, "Other" last.

    Order is the caller's priority list when it names exactly the schema's
    categories (as sets), otherwise schema declaration order.
    """
    opts = list(options)
    colors = {name: color for name, color in opts}
    declared = [name for name, _ in opts]

    names = declared
    if priority:
        wanted = [str(p).strip() for p in priority if str(p).strip()]
        if set(wanted) == set(declared) and len(wanted) == len(set(wanted)):
            names = wanted
        elif obs_enabled():
            eprint(
                "[loadchart.categories] WARN: priority list does not match schema categories; "
                f"using schema order (priority={sorted(set(wanted))!r} schema={sorted(declared)!r})"
            )

    out: List[Category] = []
    for name in names:
        if name == OTHER:
            continue
        out.append(Category(name=name, order=len(out), color=palette_color(colors.get(name))))
    out.append(Category(name=OTHER, order=len(out), color=palette_color(colors.get(OTHER))))
    return out
