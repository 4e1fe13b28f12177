"""Tests for logger setup.

Covers: sq.common.logger
"""

import logging
import os
import shutil
import tempfile
import time
import unittest
from pathlib import Path


class TestGetLogger(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.log_dir = Path(self.tmpdir) / "logs"
        self.name = f"sq_test_{id(self)}"

    def tearDown(self):
        logger = logging.getLogger(self.name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_creates_expected_handlers_and_files(self):
        from sq.common.logger import get_logger
        logger = get_logger(name=self.name, log_dir=self.log_dir, console=True, historical_debugs=3)
        names = sorted(h.get_name() for h in logger.handlers)
        self.assertEqual(names, sorted([
            f"{self.name}:persistent",
            f"{self.name}:latest",
            f"{self.name}:historical_debug",
            f"{self.name}:console",
        ]))
        self.assertFalse(logger.propagate)
        self.assertTrue((self.log_dir / f"{self.name}.log").exists())
        self.assertTrue((self.log_dir / "latest.log").exists())
        self.assertEqual(len(list((self.log_dir / "debug").glob(f"{self.name}_*.log"))), 1)

    def test_second_call_adds_no_handlers(self):
        from sq.common.logger import get_logger
        first = get_logger(name=self.name, log_dir=self.log_dir, console=True, historical_debugs=3)
        count = len(first.handlers)
        second = get_logger(name=self.name, log_dir=self.log_dir, console=True, historical_debugs=3)
        self.assertIs(first, second)
        self.assertEqual(len(second.handlers), count)

    def test_non_persistent_skips_rotating_file(self):
        from sq.common.logger import get_logger
        logger = get_logger(name=self.name, log_dir=self.log_dir, persistent=False, historical_debugs=0)
        self.assertEqual([h.get_name() for h in logger.handlers], [f"{self.name}:latest"])
        self.assertFalse((self.log_dir / "debug").exists())

    def test_only_newest_debug_runs_kept(self):
        from sq.common.logger import get_logger
        debug_dir = self.log_dir / "debug"
        debug_dir.mkdir(parents=True)
        now = time.time()
        old_runs = []
        for i in range(4):
            path = debug_dir / f"{self.name}_2020-01-0{i + 1}_00-00-00.log"
            path.write_text("old run", encoding="utf-8")
            # Older files get older mtimes
            os.utime(path, (now - 1000 * (4 - i), now - 1000 * (4 - i)))
            old_runs.append(path)
        unrelated = debug_dir / "someone_else_2020-01-01_00-00-00.log"
        unrelated.write_text("keep", encoding="utf-8")

        get_logger(name=self.name, log_dir=self.log_dir, historical_debugs=2)

        remaining = sorted(p.name for p in debug_dir.glob(f"{self.name}_*.log"))
        self.assertEqual(len(remaining), 2)
        # Newest leftover run survives next to this run's own file
        self.assertIn(old_runs[-1].name, remaining)
        self.assertTrue(unrelated.exists())

    def test_logger_writes_formatted_records(self):
        from sq.common.logger import get_logger
        logger = get_logger(name=self.name, log_dir=self.log_dir, historical_debugs=0)
        logger.warning("night 3 could not be stopped")
        for handler in logger.handlers:
            handler.flush()
        text = (self.log_dir / "latest.log").read_text(encoding="utf-8")
        self.assertIn("WARNING", text)
        self.assertIn("night 3 could not be stopped", text)


if __name__ == "__main__":
    unittest.main()
