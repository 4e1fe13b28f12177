from PySide6.QtCore import QObject, Signal
from sq.common.logger import log
from sq.core.dispatch import Dispatcher, describe_failure

QUALITY_RATINGS = range(0, 6)


# Rates one finished night, then asks to go back to the tracker.
class SleepQualityViewModel(QObject):

    navigate_to_sleep_tracker_changed = Signal(bool)
    error_message = Signal(str)

    def __init__(self, sleep_night_key, database, dispatcher: Dispatcher | None = None, parent=None):
        super().__init__(parent)
        self.sleep_night_key = sleep_night_key
        self.database = database
        self.dispatcher = dispatcher or Dispatcher(parent=self)
        self._navigate_to_sleep_tracker = False

    @property
    def navigate_to_sleep_tracker(self):
        return self._navigate_to_sleep_tracker

    def _set_navigate_to_sleep_tracker(self, value):
        self._navigate_to_sleep_tracker = value
        self.navigate_to_sleep_tracker_changed.emit(value)

    def on_set_sleep_quality(self, quality):
        if not isinstance(quality, int) or isinstance(quality, bool) or quality not in QUALITY_RATINGS:
            raise ValueError(f"Sleep quality must be between 0 and 5, got {quality!r}")

        key = self.sleep_night_key

        def rate():
            night = self.database.get(key)
            if night is None:
                log.warning(f"Night {key} vanished before it could be rated {quality}")
                return None
            night.sleep_quality = quality
            self.database.update(night)
            return night

        def rated(night):
            if night is not None:
                log.info(f"Rated night {night.night_id} as {quality}")
            self._set_navigate_to_sleep_tracker(True)

        label = "set sleep quality"
        self.dispatcher.launch(rate, then=rated, label=label,
                               on_error=lambda error: self.error_message.emit(describe_failure(label, error)))

    def done_navigating(self):
        self._set_navigate_to_sleep_tracker(False)
