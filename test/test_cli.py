"""Tests for the click command line."""

import json
import logging
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudQuery.cli.ui import cli
from CloudQuery.client.rest import Response
from CloudQuery.services.executor import QueryExecutor
from CloudQuery.utils.log import log


_CONFIG_YAML = """
log:
  level: WARNING
  to_file: false
  dir: log

server:
  base_url: https://api.example.com
  api_version: "1.1"
  app_id_env: CQ_CLI_TEST_APP_ID
  app_key_env: CQ_CLI_TEST_APP_KEY
  timeout: 30
  max_retries: 1
"""


class _StubTransport:
    def __init__(self, response: Response) -> None:
        self.response = response
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method, endpoint, parameters=None):
        self.calls.append((method, endpoint, dict(parameters or {})))
        return self.response


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.yml"
        self.config_path.write_text(_CONFIG_YAML, encoding="utf-8")
        self.runner = CliRunner()

    def tearDown(self) -> None:
        self._tmp.cleanup()
        log.handlers.clear()
        log.addHandler(logging.NullHandler())
        log.setLevel(logging.NOTSET)
        log.propagate = True

    def _invoke(self, *args: str):
        return self.runner.invoke(cli, ["--config", str(self.config_path), *args])

    def test_compile_prints_request_parameters(self) -> None:
        result = self._invoke(
            "compile",
            "Post",
            "--equal",
            "likes=10",
            "--equal",
            "status=draft",
            "--prefix",
            "title=a.b",
            "--desc",
            "createdAt",
            "--include",
            "author",
            "--limit",
            "5",
        )

        self.assertEqual(result.exit_code, 0, result.output)
        parameters = json.loads(result.stdout)
        self.assertEqual(parameters["className"], "Post")
        self.assertEqual(parameters["order"], "-createdAt")
        self.assertEqual(parameters["include"], "author")
        self.assertEqual(parameters["limit"], 5)
        self.assertEqual(
            json.loads(parameters["where"]),
            {"$and": [{"likes": 10}, {"status": "draft"}], "title": {"$regex": "^a\\.b"}},
        )

    def test_bad_pair_is_usage_error(self) -> None:
        result = self._invoke("compile", "Post", "--equal", "novalue")

        self.assertEqual(result.exit_code, 2)

    def test_find_prints_objects(self) -> None:
        transport = _StubTransport(
            Response(value={"results": [{"objectId": "a", "createdAt": "2016-04-19T08:00:00.000Z", "title": "t"}]})
        )
        with patch("CloudQuery.cli.runner.create_query_executor", return_value=QueryExecutor(client=transport)):
            result = self._invoke("find", "Post", "--exists", "title")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            json.loads(result.stdout.strip()),
            {"className": "Post", "objectId": "a", "createdAt": "2016-04-19T08:00:00.000Z", "title": "t"},
        )
        self.assertEqual(transport.calls[0][1], "classes/Post")

    def test_count_prints_number(self) -> None:
        transport = _StubTransport(Response(value={"count": 42}))
        with patch("CloudQuery.cli.runner.create_query_executor", return_value=QueryExecutor(client=transport)):
            result = self._invoke("count", "Post", "--limit", "3")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout.strip(), "42")
        self.assertEqual(transport.calls[0][2]["limit"], 0)

    def test_count_without_credentials_aborts(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with patch("CloudQuery.cli.ui.load_dotenv"):
                result = self._invoke("count", "Post")

        self.assertEqual(result.exit_code, 1)


if __name__ == "__main__":
    unittest.main()
