"""State holder behind the tracker page.

Owns "tonight" (the night currently being tracked, if any), the formatted
history and the enabled state of the Start/Stop/Clear buttons. All database
work goes through the Dispatcher, so nothing here blocks the UI thread, and
every piece of state is only ever touched back on the UI thread.
"""

from dataclasses import replace
from PySide6.QtCore import QObject, Signal, Slot
from sq.common.logger import log
from sq.core.dispatch import Dispatcher, describe_failure
from sq.core.snapshot import create_snapshot, prune_snapshots
from sq.database import SleepNight
from sq.util import format_nights, now_millis

CLEARED_MESSAGE = "All your data is gone forever."


class SleepTrackerViewModel(QObject):

    nights_string_changed = Signal(str)
    tonight_changed = Signal(object)
    start_button_state_changed = Signal(bool)
    stop_button_state_changed = Signal(bool)
    clear_button_state_changed = Signal(bool)
    navigate_to_sleep_quality_changed = Signal(object)
    show_snackbar_changed = Signal(bool)
    error_message = Signal(str)

    def __init__(self, database, dispatcher: Dispatcher | None = None, snapshot_before_clear=True,
                 snapshot_dir=None, parent=None):
        super().__init__(parent)
        self.database = database
        self.dispatcher = dispatcher or Dispatcher(parent=self)
        self.snapshot_before_clear = snapshot_before_clear
        self.snapshot_dir = snapshot_dir

        self._nights = []
        self._nights_string = format_nights([])
        self._tonight = None
        self._navigate_to_sleep_quality = None
        self._show_snackbar = False
        self._starting = False

        self.database.nights_changed.connect(self._reload_nights)

        self.initialise_tonight()
        self._reload_nights()

    #region === Observable state ===

    @property
    def nights(self):
        return list(self._nights)

    @property
    def nights_string(self):
        return self._nights_string

    @property
    def tonight(self):
        return self._tonight

    @property
    def start_button_state(self):
        return self._tonight is None

    @property
    def stop_button_state(self):
        return self._tonight is not None

    @property
    def clear_button_state(self):
        return len(self._nights) > 0

    @property
    def navigate_to_sleep_quality(self):
        return self._navigate_to_sleep_quality

    @property
    def show_snackbar(self):
        return self._show_snackbar

    def _set_tonight(self, night):
        was_tracking = self._tonight is not None
        self._tonight = night
        self.tonight_changed.emit(night)
        if was_tracking != (night is not None):
            log.debug(f"Tonight is now {'night ' + str(night.night_id) if night else 'empty'}")
            self.start_button_state_changed.emit(self.start_button_state)
            self.stop_button_state_changed.emit(self.stop_button_state)

    def _set_nights(self, nights):
        had_nights = self.clear_button_state
        self._nights = nights
        self._nights_string = format_nights(nights)
        self.nights_string_changed.emit(self._nights_string)
        if had_nights != self.clear_button_state:
            self.clear_button_state_changed.emit(self.clear_button_state)

    def _set_navigate_to_sleep_quality(self, night):
        self._navigate_to_sleep_quality = night
        self.navigate_to_sleep_quality_changed.emit(night)

    def _set_show_snackbar(self, value):
        self._show_snackbar = value
        self.show_snackbar_changed.emit(value)

    #endregion === Observable state ===

    #region === Background reads ===

    # Runs on the worker. The latest night only counts as tonight while it hasn't been stopped.
    def get_tonight_from_database(self):
        night = self.database.get_tonight()
        if night is not None and not night.is_in_progress:
            night = None
        return night

    def initialise_tonight(self):
        self._launch(self.get_tonight_from_database, then=self._set_tonight, label="load tonight")

    @Slot()
    def _reload_nights(self):
        self._launch(self.database.get_all_nights, then=self._set_nights, label="load nights")

    #endregion === Background reads ===

    #region === Commands ===

    # Every job launched here reports its own failures on error_message, the shared dispatcher's other users don't.
    def _launch(self, work, then=None, label=None, on_error=None):
        def failed(error):
            if on_error is not None:
                on_error(error)
            self.error_message.emit(describe_failure(label, error))

        self.dispatcher.launch(work, then=then, label=label, on_error=failed)

    def on_start_tracking(self):
        if self._tonight is not None:
            log.debug(f"Start requested while night {self._tonight.night_id} is already being tracked, ignoring")
            return
        if self._starting:
            log.debug("Start requested while a start is still in flight, ignoring")
            return

        # Another start may have landed before this one ran, pick that night up instead of adding a second.
        def start():
            night = self.get_tonight_from_database()
            if night is None:
                self.database.insert(SleepNight())
                night = self.get_tonight_from_database()
            return night

        def started(night):
            self._starting = False
            self._set_tonight(night)

        def start_failed(_):
            self._starting = False

        log.info("Starting to track a new night")
        self._starting = True
        self._launch(start, then=started, label="start tracking", on_error=start_failed)

    def on_stop_tracking(self):
        old_night = self._tonight
        if old_night is None:
            return

        # A stop within the same millisecond would still look in progress.
        night = replace(old_night, end_time_milli=max(now_millis(), old_night.start_time_milli + 1))

        # Tonight is released straight away so a second Stop has nothing left to act on.
        self._set_tonight(None)

        def stopped(updated):
            if not updated:
                log.warning(f"Night {night.night_id} was gone before it could be stopped, skipping the rating")
                return
            log.info(f"Stopped tracking night {night.night_id} after {night.duration_milli} ms")
            self._set_navigate_to_sleep_quality(night)

        def stop_failed(_):
            if self._tonight is None:
                self._set_tonight(old_night)

        self._launch(lambda: self.database.update(night), then=stopped, label="stop tracking", on_error=stop_failed)

    def on_clear_sleep_data(self):
        snapshot = self.snapshot_before_clear

        def clear():
            if snapshot:
                nights = self.database.get_all_nights()
                if nights:
                    try:
                        create_snapshot(nights, "before clear", self.snapshot_dir)
                        prune_snapshots(self.snapshot_dir)
                    except OSError:
                        log.warning("Could not snapshot nights before clearing, clearing anyway", exc_info=True)
            return self.database.clear()

        def cleared(removed):
            log.info(f"Cleared sleep data ({removed} nights)")
            self._set_tonight(None)
            self._set_show_snackbar(True)

        self._launch(clear, then=cleared, label="clear sleep data")

    def done_navigating(self):
        self._set_navigate_to_sleep_quality(None)

    def done_showing_snackbar(self):
        self._set_show_snackbar(False)

    # Called when the owner goes away: nothing queued should still land on us afterwards.
    def on_cleared(self):
        try:
            self.database.nights_changed.disconnect(self._reload_nights)
        except (RuntimeError, TypeError):
            log.debug("nights_changed was already disconnected")
        self.dispatcher.cancel()

    #endregion === Commands ===
