"""SQLite access for the nights table.

Every call opens its own connection, so the DAO can be used from whichever
background thread the dispatcher runs work on. Writes fire ``nights_changed``
so anything showing the full history can re-read it.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from PySide6.QtCore import QObject, Signal
from sq.common.logger import log
from sq.database.night import SleepNight

TABLE = "daily_sleep_quality_table"

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {TABLE} (
    night_id INTEGER PRIMARY KEY AUTOINCREMENT,
    start_time_milli INTEGER NOT NULL,
    end_time_milli INTEGER NOT NULL,
    quality_rating INTEGER NOT NULL DEFAULT -1
)
"""
_COLUMNS = "night_id, start_time_milli, end_time_milli, quality_rating"


def _row_to_night(row):
    if row is None:
        return None
    return SleepNight(
        night_id=row["night_id"],
        start_time_milli=row["start_time_milli"],
        end_time_milli=row["end_time_milli"],
        sleep_quality=row["quality_rating"],
    )


class SleepDatabaseDao(QObject):

    # Emitted after any insert, update or clear, possibly from a worker thread.
    nights_changed = Signal()

    def __init__(self, db_path: Path, parent=None):
        super().__init__(parent)
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._get_conn() as conn:
            conn.execute(_SCHEMA)
        log.info(f"Opened sleep database at '{self.db_path}'")

    @contextmanager
    def _get_conn(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    #region === Writes ===

    def insert(self, night: SleepNight) -> SleepNight:
        with self._get_conn() as conn:
            cursor = conn.execute(
                f"INSERT INTO {TABLE} (start_time_milli, end_time_milli, quality_rating) VALUES (?, ?, ?)",
                (night.start_time_milli, night.end_time_milli, night.sleep_quality),
            )
            night.night_id = cursor.lastrowid
        log.debug(f"Inserted night {night.night_id} starting at {night.start_time_milli}")
        self.nights_changed.emit()
        return night

    def update(self, night: SleepNight):
        with self._get_conn() as conn:
            cursor = conn.execute(
                f"UPDATE {TABLE} SET start_time_milli = ?, end_time_milli = ?, quality_rating = ? WHERE night_id = ?",
                (night.start_time_milli, night.end_time_milli, night.sleep_quality, night.night_id),
            )
            updated = cursor.rowcount
        if updated:
            log.debug(f"Updated night {night.night_id} (end={night.end_time_milli}, quality={night.sleep_quality})")
            self.nights_changed.emit()
        else:
            log.warning(f"Tried to update night {night.night_id}, but no such row exists")
        return updated

    # Deletes all rows but keeps the table itself.
    def clear(self):
        with self._get_conn() as conn:
            cursor = conn.execute(f"DELETE FROM {TABLE}")
            removed = cursor.rowcount
        log.info(f"Cleared {removed} nights from '{self.db_path}'")
        self.nights_changed.emit()
        return removed

    #endregion === Writes ===

    #region === Reads ===

    def get(self, key: int) -> SleepNight | None:
        with self._get_conn() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM {TABLE} WHERE night_id = ?", (key,)).fetchone()
        return _row_to_night(row)

    # Most recent night regardless of whether it has finished.
    def get_tonight(self) -> SleepNight | None:
        with self._get_conn() as conn:
            row = conn.execute(f"SELECT {_COLUMNS} FROM {TABLE} ORDER BY night_id DESC LIMIT 1").fetchone()
        return _row_to_night(row)

    def get_all_nights(self) -> list[SleepNight]:
        with self._get_conn() as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM {TABLE} ORDER BY night_id DESC").fetchall()
        return [_row_to_night(row) for row in rows]

    #endregion === Reads ===
