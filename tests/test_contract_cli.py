from __future__ import annotations

import datetime as dt
import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from loadchart import cli
from loadchart.model import Failure, Success

ENV = {"NOTION_API_KEY": "k", "NOTION_DATABASE_ID": "db", "NOTION_PAGE_ID": "pg"}


class TestCliContract(unittest.TestCase):
    def test_dry_run_prints_url_and_passes_overrides(self) -> None:
        report = SimpleNamespace(status="Dry run", chart_url="https://quickchart.io/chart?c=x")
        out = io.StringIO()
        with patch.dict(os.environ, ENV, clear=True), patch("loadchart.cli.run", return_value=Success(report)) as r:
            with redirect_stdout(out):
                rc = cli.main(["--dry-run", "--today", "2026-03-10", "--days", "7", "--mode", "single", "--tz", "UTC"])

        self.assertEqual(rc, 0)
        self.assertEqual(out.getvalue().strip(), "https://quickchart.io/chart?c=x")
        cfg = r.call_args.args[0]
        self.assertEqual((cfg.num_days, cfg.mode, cfg.tz, cfg.effort_property), (7, "single", "UTC", "Points"))
        self.assertEqual(r.call_args.kwargs, {"today": dt.date(2026, 3, 10), "dry_run": True})

    def test_prints_status_on_publish(self) -> None:
        report = SimpleNamespace(status="No replacement", chart_url="u")
        out = io.StringIO()
        with patch.dict(os.environ, ENV, clear=True), patch("loadchart.cli.run", return_value=Success(report)):
            with redirect_stdout(out):
                rc = cli.main([])
        self.assertEqual(rc, 0)
        self.assertEqual(out.getvalue().strip(), "No replacement")

    def test_missing_configuration_exits_2(self) -> None:
        err = io.StringIO()
        with tempfile.TemporaryDirectory() as td, patch.dict(os.environ, {}, clear=True), redirect_stderr(err):
            rc = cli.main(["--env-file", str(Path(td) / "missing.env")])
        self.assertEqual(rc, 2)
        self.assertIn("NOTION_API_KEY", err.getvalue())

    def test_failure_exits_2(self) -> None:
        err = io.StringIO()
        with patch.dict(os.environ, ENV, clear=True), patch(
            "loadchart.cli.run", return_value=Failure(reason="HTTP 401: nope")
        ), redirect_stderr(err):
            rc = cli.main([])
        self.assertEqual(rc, 2)
        self.assertIn("HTTP 401: nope", err.getvalue())

    def test_invalid_today_exits_2(self) -> None:
        with patch.dict(os.environ, ENV, clear=True), redirect_stderr(io.StringIO()):
            self.assertEqual(cli.main(["--today", "03/10/2026"]), 2)

    def test_env_file_supplies_notion_settings(self) -> None:
        report = SimpleNamespace(status="Replaced", chart_url="u")
        with tempfile.TemporaryDirectory() as td:
            env_file = Path(td) / ".env"
            env_file.write_text(
                "NOTION_API_KEY=secret-from-file\nNOTION_DATABASE_ID=db-file\nNOTION_PAGE_ID=pg-file\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, {}, clear=True), patch(
                "loadchart.cli.run", return_value=Success(report)
            ) as r, redirect_stdout(io.StringIO()):
                rc = cli.main(["--env-file", str(env_file)])

        self.assertEqual(rc, 0)
        cfg = r.call_args.args[0]
        self.assertEqual((cfg.api_key, cfg.database_id, cfg.page_id), ("secret-from-file", "db-file", "pg-file"))

    def test_process_environment_wins_over_env_file(self) -> None:
        report = SimpleNamespace(status="Replaced", chart_url="u")
        with tempfile.TemporaryDirectory() as td:
            env_file = Path(td) / ".env"
            env_file.write_text("NOTION_API_KEY=from-file\n", encoding="utf-8")
            with patch.dict(os.environ, ENV, clear=True), patch(
                "loadchart.cli.run", return_value=Success(report)
            ) as r, redirect_stdout(io.StringIO()):
                rc = cli.main(["--env-file", str(env_file)])

        self.assertEqual(rc, 0)
        self.assertEqual(r.call_args.args[0].api_key, "k")


if __name__ == "__main__":
    unittest.main(verbosity=2)
