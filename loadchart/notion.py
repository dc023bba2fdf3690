# loadchart/notion.py
from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional
from urllib import parse, request
from urllib.error import HTTPError

from .config import Config
from .errors import NotionError
from .util.console import eprint, obs_enabled
from .util.deadline import Deadline

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

# Safety valve for a cursor that never stops advertising has_more.
MAX_PAGES = 1000


def open_tasks_filter(cfg: Config) -> Optional[Dict[str, Any]]:
    """Database filter that excludes finished tasks, or None when disabled."""
    if not cfg.status_property:
        return None
    return {
        "property": cfg.status_property,
        cfg.status_type: {"does_not_equal": cfg.done_status},
    }


class NotionClient:
    """Minimal Notion REST client for the calls a run makes.

    Every call is blocking and honours both the per-request timeout and the
    run-wide deadline. Paginated endpoints are fully drained before returning.
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout_s: float = 30.0,
        deadline: Optional[Deadline] = None,
        base_url: str = NOTION_API_BASE,
    ) -> None:
        self._api_key = api_key
        self._timeout_s = float(timeout_s)
        self._deadline = deadline or Deadline(None)
        self._base_url = base_url.rstrip("/")

    @classmethod
    def from_config(cls, cfg: Config, *, deadline: Optional[Deadline] = None) -> "NotionClient":
        return cls(cfg.api_key, timeout_s=cfg.timeout_s, deadline=deadline)

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        what = f"{method} {path}"
        timeout = self._deadline.timeout_for(self._timeout_s, what)

        data = None if body is None else json.dumps(body).encode("utf-8")
        req = request.Request(url, data=data, method=method)
        req.add_header("Authorization", f"Bearer {self._api_key}")
        req.add_header("Notion-Version", NOTION_VERSION)
        if data is not None:
            req.add_header("Content-Type", "application/json")

        t0 = time.monotonic()
        try:
            with request.urlopen(req, timeout=timeout) as resp:
                text = resp.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            raw = ""
            try:
                raw = e.read().decode("utf-8", errors="replace")
            except Exception:
                raw = ""
            code = None
            message = raw or str(e.reason)
            try:
                err = json.loads(raw)
                if isinstance(err, dict):
                    code = err.get("code") if isinstance(err.get("code"), str) else None
                    message = str(err.get("message") or message)
            except ValueError:
                pass
            raise NotionError(f"{what} failed: {message}", status=e.code, code=code) from e
        except OSError as e:
            raise NotionError(f"{what} failed: {getattr(e, 'reason', e)}") from e

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        try:
            obj = json.loads(text)
        except ValueError as e:
            raise NotionError(f"{what} returned invalid JSON after {elapsed_ms}ms: {e}") from e
        if not isinstance(obj, dict):
            raise NotionError(f"{what} did not return a JSON object")
        if obs_enabled():
            eprint(f"[loadchart.notion] {method.lower()}.ok path={path} ms={elapsed_ms}")
        return obj

    def _drain(self, method: str, path: str, body: Optional[Dict[str, Any]], page_size: int) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        pages = 0
        while True:
            pages += 1
            if pages > MAX_PAGES:
                raise NotionError(f"{method} {path} did not finish paginating after {MAX_PAGES} pages")

            if method == "GET":
                q: Dict[str, Any] = {"page_size": page_size}
                if cursor:
                    q["start_cursor"] = cursor
                resp = self._request("GET", f"{path}?{parse.urlencode(q)}")
            else:
                b = dict(body or {})
                b["page_size"] = page_size
                if cursor:
                    b["start_cursor"] = cursor
                resp = self._request(method, path, b)

            results = resp.get("results")
            if not isinstance(results, list):
                raise NotionError(f"{method} {path} response is missing a results list")
            out.extend(r for r in results if isinstance(r, dict))

            cursor = resp.get("next_cursor") if resp.get("has_more") else None
            if not cursor:
                break

        if obs_enabled():
            eprint(f"[loadchart.notion] drain.ok path={path} pages={pages} results={len(out)}")
        return out

    def query_database(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        *,
        page_size: int = 100,
    ) -> List[Dict[str, Any]]:
        body: Dict[str, Any] = {}
        if filter:
            body["filter"] = filter
        return self._drain("POST", f"/databases/{database_id}/query", body, page_size)

    def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/databases/{database_id}")

    def list_block_children(self, block_id: str, *, page_size: int = 50) -> List[Dict[str, Any]]:
        return self._drain("GET", f"/blocks/{block_id}/children", None, page_size)

    def update_embed(self, block_id: str, url: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/blocks/{block_id}", {"embed": {"url": url}})
