from __future__ import annotations

import io
import json
import unittest
from unittest import mock
from urllib.error import HTTPError, URLError

from loadchart.config import Config
from loadchart.errors import DeadlineExceeded, NotionError
from loadchart.notion import NOTION_VERSION, NotionClient, open_tasks_filter
from loadchart.util.deadline import Deadline


class _FakeResponse:
    def __init__(self, payload: dict):
        self._payload = payload

    def read(self) -> bytes:
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _cfg(**kw) -> Config:
    return Config(api_key="secret", database_id="db", page_id="pg", **kw)


class TestNotionClientContract(unittest.TestCase):
    def test_query_drains_all_pages(self) -> None:
        responses = [
            _FakeResponse({"results": [{"id": "a"}, {"id": "b"}], "has_more": True, "next_cursor": "c1"}),
            _FakeResponse({"results": [{"id": "c"}], "has_more": False, "next_cursor": None}),
        ]
        seen = []

        def fake_urlopen(req, timeout=None):  # type: ignore[no-untyped-def]
            seen.append((req, timeout))
            return responses.pop(0)

        client = NotionClient("secret", timeout_s=5)
        with mock.patch("loadchart.notion.request.urlopen", side_effect=fake_urlopen):
            out = client.query_database("db", {"property": "Status", "select": {"does_not_equal": "Done"}})

        self.assertEqual([r["id"] for r in out], ["a", "b", "c"])
        self.assertEqual(len(seen), 2)

        req1, timeout1 = seen[0]
        self.assertEqual(req1.get_method(), "POST")
        self.assertEqual(req1.full_url, "https://api.notion.com/v1/databases/db/query")
        self.assertEqual(req1.get_header("Authorization"), "Bearer secret")
        self.assertEqual(req1.get_header("Notion-version"), NOTION_VERSION)
        self.assertGreater(float(timeout1 or 0), 0.0)
        self.assertLessEqual(float(timeout1), 5.0)

        body1 = json.loads(req1.data.decode("utf-8"))
        body2 = json.loads(seen[1][0].data.decode("utf-8"))
        self.assertNotIn("start_cursor", body1)
        self.assertEqual(body1["filter"]["select"], {"does_not_equal": "Done"})
        self.assertEqual(body2["start_cursor"], "c1")
        self.assertEqual(body2["page_size"], 100)

    def test_block_children_use_get_with_cursor(self) -> None:
        responses = [
            _FakeResponse({"results": [{"id": "b1"}], "has_more": True, "next_cursor": "n2"}),
            _FakeResponse({"results": [{"id": "b2"}], "has_more": False}),
        ]
        seen = []

        def fake_urlopen(req, timeout=None):  # type: ignore[no-untyped-def]
            seen.append(req)
            return responses.pop(0)

        with mock.patch("loadchart.notion.request.urlopen", side_effect=fake_urlopen):
            out = NotionClient("k").list_block_children("page")

        self.assertEqual([b["id"] for b in out], ["b1", "b2"])
        self.assertEqual(seen[0].get_method(), "GET")
        self.assertIsNone(seen[0].data)
        self.assertIn("/blocks/page/children?page_size=50", seen[0].full_url)
        self.assertIn("start_cursor=n2", seen[1].full_url)

    def test_update_embed_patches_block(self) -> None:
        seen = []

        def fake_urlopen(req, timeout=None):  # type: ignore[no-untyped-def]
            seen.append(req)
            return _FakeResponse({"id": "blk"})

        with mock.patch("loadchart.notion.request.urlopen", side_effect=fake_urlopen):
            NotionClient("k").update_embed("blk", "https://chart")

        self.assertEqual(seen[0].get_method(), "PATCH")
        self.assertTrue(seen[0].full_url.endswith("/blocks/blk"))
        self.assertEqual(json.loads(seen[0].data.decode("utf-8")), {"embed": {"url": "https://chart"}})

    def test_http_error_carries_notion_code(self) -> None:
        body = b'{"object":"error","status":401,"code":"unauthorized","message":"API token is invalid."}'
        err = HTTPError("https://api.notion.com/v1/databases/db", 401, "Unauthorized", None, io.BytesIO(body))
        with mock.patch("loadchart.notion.request.urlopen", side_effect=err):
            with self.assertRaises(NotionError) as ctx:
                NotionClient("bad").retrieve_database("db")
        self.assertEqual(ctx.exception.status, 401)
        self.assertEqual(ctx.exception.code, "unauthorized")
        self.assertIn("API token is invalid.", str(ctx.exception))

    def test_network_error_becomes_notion_error(self) -> None:
        with mock.patch("loadchart.notion.request.urlopen", side_effect=URLError("no route")):
            with self.assertRaises(NotionError) as ctx:
                NotionClient("k").retrieve_database("db")
        self.assertIsNone(ctx.exception.status)
        self.assertIn("no route", str(ctx.exception))

    def test_missing_results_is_an_error(self) -> None:
        with mock.patch("loadchart.notion.request.urlopen", return_value=_FakeResponse({"object": "list"})):
            with self.assertRaises(NotionError):
                NotionClient("k").query_database("db")

    def test_expired_deadline_stops_before_request(self) -> None:
        ticks = iter([0.0, 5.0, 5.0, 5.0])
        deadline = Deadline(1.0, clock=lambda: next(ticks))
        with mock.patch("loadchart.notion.request.urlopen") as uo:
            with self.assertRaises(DeadlineExceeded):
                NotionClient("k", deadline=deadline).retrieve_database("db")
        self.assertFalse(uo.called)

    def test_open_tasks_filter(self) -> None:
        self.assertEqual(
            open_tasks_filter(_cfg()),
            {"property": "Status", "select": {"does_not_equal": "Done"}},
        )
        self.assertEqual(
            open_tasks_filter(_cfg(status_type="status", done_status="Complete")),
            {"property": "Status", "status": {"does_not_equal": "Complete"}},
        )
        self.assertIsNone(open_tasks_filter(_cfg(status_property="")))


if __name__ == "__main__":
    unittest.main(verbosity=2)
