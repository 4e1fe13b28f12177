"""Tests for the nights table: SleepNight and SleepDatabaseDao.

Covers: sq.database.night, sq.database.dao
"""

import shutil
import sqlite3
import tempfile
import unittest
from pathlib import Path

from tests.qt_support import qt_app, SignalRecorder


# ──────────────────────────────────────────────────────────────────────────
# night.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestSleepNight(unittest.TestCase):

    def test_new_night_is_in_progress(self):
        from sq.database import SleepNight, UNRATED
        night = SleepNight()
        self.assertEqual(night.night_id, 0)
        self.assertEqual(night.start_time_milli, night.end_time_milli)
        self.assertEqual(night.sleep_quality, UNRATED)
        self.assertTrue(night.is_in_progress)
        self.assertEqual(night.duration_milli, 0)

    def test_start_defaults_to_now(self):
        from sq.database import SleepNight
        from sq.util import now_millis
        before = now_millis()
        night = SleepNight()
        after = now_millis()
        self.assertGreaterEqual(night.start_time_milli, before)
        self.assertLessEqual(night.start_time_milli, after)

    def test_finished_night(self):
        from sq.database import SleepNight
        night = SleepNight(start_time_milli=1_000, end_time_milli=8_000, sleep_quality=4)
        self.assertFalse(night.is_in_progress)
        self.assertEqual(night.duration_milli, 7_000)
        self.assertEqual(night.to_dict(), {
            "night_id": 0,
            "start_time_milli": 1_000,
            "end_time_milli": 8_000,
            "sleep_quality": 4,
        })


# ──────────────────────────────────────────────────────────────────────────
# dao.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestSleepDatabaseDao(unittest.TestCase):

    def setUp(self):
        qt_app()
        self.tmpdir = tempfile.mkdtemp()
        self.db_path = Path(self.tmpdir) / "nested" / "sleep.db"
        from sq.database import SleepDatabaseDao
        self.dao = SleepDatabaseDao(self.db_path)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_creates_database_file_and_parent_dirs(self):
        self.assertTrue(self.db_path.exists())

    def test_empty_table(self):
        self.assertIsNone(self.dao.get_tonight())
        self.assertEqual(self.dao.get_all_nights(), [])
        self.assertIsNone(self.dao.get(1))

    def test_insert_assigns_increasing_ids(self):
        from sq.database import SleepNight
        first = self.dao.insert(SleepNight(start_time_milli=100))
        second = self.dao.insert(SleepNight(start_time_milli=200))
        self.assertGreater(first.night_id, 0)
        self.assertGreater(second.night_id, first.night_id)

    def test_get_returns_stored_values(self):
        from sq.database import SleepNight
        stored = self.dao.insert(SleepNight(start_time_milli=100, end_time_milli=500, sleep_quality=2))
        loaded = self.dao.get(stored.night_id)
        self.assertEqual(loaded, stored)

    def test_get_tonight_is_most_recent(self):
        from sq.database import SleepNight
        self.dao.insert(SleepNight(start_time_milli=100, end_time_milli=300))
        latest = self.dao.insert(SleepNight(start_time_milli=400))
        self.assertEqual(self.dao.get_tonight().night_id, latest.night_id)

    def test_get_all_nights_newest_first(self):
        from sq.database import SleepNight
        ids = [self.dao.insert(SleepNight(start_time_milli=t)).night_id for t in (100, 200, 300)]
        nights = self.dao.get_all_nights()
        self.assertEqual([n.night_id for n in nights], list(reversed(ids)))

    def test_update_overwrites_row(self):
        from sq.database import SleepNight
        night = self.dao.insert(SleepNight(start_time_milli=100))
        night.end_time_milli = 900
        night.sleep_quality = 5
        self.assertEqual(self.dao.update(night), 1)
        loaded = self.dao.get(night.night_id)
        self.assertEqual(loaded.end_time_milli, 900)
        self.assertEqual(loaded.sleep_quality, 5)
        self.assertFalse(loaded.is_in_progress)

    def test_update_missing_row_is_noop(self):
        from sq.database import SleepNight
        self.assertEqual(self.dao.update(SleepNight(night_id=42, start_time_milli=1)), 0)
        self.assertEqual(self.dao.get_all_nights(), [])

    def test_clear_keeps_table(self):
        from sq.database import SleepNight
        self.dao.insert(SleepNight())
        self.dao.insert(SleepNight())
        self.assertEqual(self.dao.clear(), 2)
        self.assertEqual(self.dao.get_all_nights(), [])
        # Table still usable after clearing
        night = self.dao.insert(SleepNight())
        self.assertEqual(self.dao.get_tonight().night_id, night.night_id)

    def test_reopening_existing_database_keeps_rows(self):
        from sq.database import SleepDatabaseDao, SleepNight
        self.dao.insert(SleepNight(start_time_milli=100))
        reopened = SleepDatabaseDao(self.db_path)
        self.assertEqual(len(reopened.get_all_nights()), 1)

    def test_writes_emit_nights_changed(self):
        from sq.database import SleepNight
        recorder = SignalRecorder(self.dao.nights_changed)
        night = self.dao.insert(SleepNight())
        self.dao.update(night)
        self.dao.clear()
        self.assertEqual(recorder.count, 3)

    def test_reads_do_not_emit(self):
        recorder = SignalRecorder(self.dao.nights_changed)
        self.dao.get_all_nights()
        self.dao.get_tonight()
        self.dao.get(1)
        self.assertEqual(recorder.count, 0)

    def test_table_layout(self):
        with sqlite3.connect(self.db_path) as conn:
            columns = [row[1] for row in conn.execute("PRAGMA table_info(daily_sleep_quality_table)")]
        self.assertEqual(columns, ["night_id", "start_time_milli", "end_time_milli", "quality_rating"])


if __name__ == "__main__":
    unittest.main()
