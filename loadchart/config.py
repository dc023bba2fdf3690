# loadchart/config.py
from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from .errors import ConfigError
from .util.tz import normalize_tz_name, resolve_tz

MODE_SPREAD = "spread"
MODE_SINGLE = "single"
MODES = (MODE_SPREAD, MODE_SINGLE)

REQUIRED_ENV = ("NOTION_API_KEY", "NOTION_DATABASE_ID", "NOTION_PAGE_ID")

DEFAULT_TZ = "America/New_York"
DEFAULT_DAYS = 14
DEFAULT_SHORT_WINDOW = 7
DEFAULT_AXIS_FLOOR = 8
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_DEADLINE_S = 60.0


@dataclass(frozen=True)
class Config:
    """Everything one run needs, built once and passed to each component."""

    api_key: str
    database_id: str
    page_id: str

    mode: str = MODE_SPREAD
    tz: str = DEFAULT_TZ
    num_days: int = DEFAULT_DAYS
    short_window: int = DEFAULT_SHORT_WINDOW
    axis_floor: int = DEFAULT_AXIS_FLOOR

    effort_property: str = "Hours"
    start_property: str = "Start"
    end_property: str = "Finish"
    date_property: str = "Date"
    category_property: str = "Category"

    status_property: str = "Status"
    status_type: str = "select"
    done_status: str = "Done"

    priority: Tuple[str, ...] = ()
    unit: str = "h"

    timeout_s: float = DEFAULT_TIMEOUT_S
    deadline_s: float = DEFAULT_DEADLINE_S

    def tzinfo(self) -> dt.tzinfo:
        try:
            return resolve_tz(self.tz)
        except ValueError as ex:
            raise ConfigError(str(ex)) from ex

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        env = os.environ if environ is None else environ

        def get(name: str, default: str = "") -> str:
            return (env.get(name, default) or "").strip()

        missing = [n for n in REQUIRED_ENV if not get(n)]
        if missing:
            raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

        mode = (get("LOADCHART_MODE", MODE_SPREAD) or MODE_SPREAD).lower()
        if mode not in MODES:
            raise ConfigError(f"LOADCHART_MODE must be one of {', '.join(MODES)}; got {mode!r}")

        spread = mode == MODE_SPREAD
        priority = tuple(p.strip() for p in get("LOADCHART_PRIORITY").split(",") if p.strip())

        cfg = cls(
            api_key=get("NOTION_API_KEY"),
            database_id=get("NOTION_DATABASE_ID"),
            page_id=get("NOTION_PAGE_ID"),
            mode=mode,
            tz=normalize_tz_name(get("LOADCHART_TZ", DEFAULT_TZ) or DEFAULT_TZ),
            num_days=_int_env(env, "LOADCHART_DAYS", DEFAULT_DAYS),
            short_window=_int_env(env, "LOADCHART_SHORT_WINDOW", DEFAULT_SHORT_WINDOW),
            axis_floor=_int_env(env, "LOADCHART_AXIS_FLOOR", DEFAULT_AXIS_FLOOR),
            effort_property=get("LOADCHART_EFFORT_PROP") or ("Hours" if spread else "Points"),
            start_property=get("LOADCHART_START_PROP") or "Start",
            end_property=get("LOADCHART_END_PROP") or "Finish",
            date_property=get("LOADCHART_DATE_PROP") or "Date",
            category_property=get("LOADCHART_CATEGORY_PROP") or "Category",
            status_property=get("LOADCHART_STATUS_PROP", "Status"),
            status_type=(get("LOADCHART_STATUS_TYPE") or "select").lower(),
            done_status=get("LOADCHART_DONE_STATUS") or "Done",
            priority=priority,
            unit=get("LOADCHART_UNIT") or ("h" if spread else "pts"),
            timeout_s=_float_env(env, "LOADCHART_TIMEOUT_S", DEFAULT_TIMEOUT_S),
            deadline_s=_float_env(env, "LOADCHART_DEADLINE_S", DEFAULT_DEADLINE_S),
        )
        return validate_config(cfg)


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer; got {raw!r}") from None


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name, "") or "").strip()
    if not raw:
        return default
    try:
        v = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number; got {raw!r}") from None
    if v <= 0:
        raise ConfigError(f"{name} must be > 0; got {raw!r}")
    return v


def validate_config(cfg: Config) -> Config:
    if cfg.mode not in MODES:
        raise ConfigError(f"mode must be one of {', '.join(MODES)}; got {cfg.mode!r}")
    if cfg.num_days < 1:
        raise ConfigError(f"num_days must be >= 1; got {cfg.num_days}")
    if cfg.axis_floor < 0:
        raise ConfigError(f"axis_floor must be >= 0; got {cfg.axis_floor}")
    if cfg.status_type not in ("select", "status"):
        raise ConfigError(f"status_type must be 'select' or 'status'; got {cfg.status_type!r}")
    try:
        resolve_tz(cfg.tz)
    except ValueError as ex:
        raise ConfigError(str(ex)) from ex

    short = min(max(1, int(cfg.short_window)), int(cfg.num_days))
    if short != cfg.short_window:
        cfg = replace(cfg, short_window=short)
    return cfg
