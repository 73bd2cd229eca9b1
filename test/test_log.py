"""Tests for logger configuration."""

import logging
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudQuery.utils.log import configure_logging, log


class TestConfigureLogging(unittest.TestCase):
    def tearDown(self) -> None:
        for handler in log.handlers:
            handler.close()
        log.handlers.clear()
        log.addHandler(logging.NullHandler())
        log.setLevel(logging.NOTSET)
        log.propagate = True

    def test_console_only(self) -> None:
        configure_logging(level="warning")

        self.assertEqual(len(log.handlers), 1)
        self.assertEqual(log.level, logging.WARNING)
        self.assertFalse(log.propagate)

    def test_file_mirror_uses_abbreviated_levels(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            configure_logging(level="INFO", action="find", log_to_file=True, log_dir=tmp)
            log.debug("hello %s", "file")
            for handler in log.handlers:
                handler.flush()

            files = list((Path(tmp) / "find").glob("find_*.log"))
            self.assertEqual(len(files), 1)
            content = files[0].read_text(encoding="utf-8")
            for handler in log.handlers:
                handler.close()
            log.handlers.clear()

        self.assertIn("[DEBG] hello file", content)


if __name__ == "__main__":
    unittest.main()
