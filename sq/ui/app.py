import sys
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
)
from sq.common.logger import log
from sq.core import config
from sq.core.dispatch import Dispatcher
from sq.database import SleepDatabaseDao
from sq.sleepquality import SleepQualityViewModel
from sq.sleeptracker import SleepTrackerViewModel, CLEARED_MESSAGE
from sq.ui.pages import SleepQualityPage, TrackerPage

SNACKBAR_MS = 3000


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of the sleep tracker. Shows the tracker page, and swaps to the quality page whenever a night is stopped.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Track My Sleep Quality")

        # -- Settings --
        self.config = config.load_settings()
        s = self.config["settings"]
        self.confirm_clear = s["confirm_clear"]
        if s["always_on_top"]:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        # -- Data --
        self.dispatcher = Dispatcher(parent=self)
        self.database = SleepDatabaseDao(config.DATABASE_PATH, parent=self)
        self.tracker = SleepTrackerViewModel(
            self.database,
            dispatcher=self.dispatcher,
            snapshot_before_clear=s["snapshot_before_clear"],
            parent=self,
        )
        self.quality = None

        # -- Pages --
        self._stack = QStackedWidget()
        self.tracker_page = TrackerPage()
        self.quality_page = SleepQualityPage()
        self._stack.addWidget(self.tracker_page)
        self._stack.addWidget(self.quality_page)
        self.setCentralWidget(self._stack)
        self.resize(420, 560)

        self._bind_tracker()
        self.quality_page.rated.connect(self._on_rated)

    # ------------------------------------------------------------------ #
    #  Tracker bindings                                                    #
    # ------------------------------------------------------------------ #

    def _bind_tracker(self):
        page = self.tracker_page
        vm = self.tracker

        page.start_button.clicked.connect(vm.on_start_tracking)
        page.stop_button.clicked.connect(vm.on_stop_tracking)
        page.clear_button.clicked.connect(self._on_clear)

        vm.start_button_state_changed.connect(page.start_button.setEnabled)
        vm.stop_button_state_changed.connect(page.stop_button.setEnabled)
        vm.clear_button_state_changed.connect(page.clear_button.setEnabled)
        vm.nights_string_changed.connect(page.set_history)
        vm.navigate_to_sleep_quality_changed.connect(self._on_navigate_to_sleep_quality)
        vm.show_snackbar_changed.connect(self._on_show_snackbar)
        vm.error_message.connect(self._on_error)

        page.start_button.setEnabled(vm.start_button_state)
        page.stop_button.setEnabled(vm.stop_button_state)
        page.clear_button.setEnabled(vm.clear_button_state)
        page.set_history(vm.nights_string)

    def _on_clear(self):
        if self.confirm_clear:
            if QMessageBox.question(
                    self, "Confirm Clear",
                    "Delete every recorded night?"
            ) != QMessageBox.Yes:
                return
        self.tracker.on_clear_sleep_data()

    def _on_show_snackbar(self, show):
        if show:
            self.statusBar().showMessage(CLEARED_MESSAGE, SNACKBAR_MS)
            self.tracker.done_showing_snackbar()

    def _on_error(self, message):
        self.statusBar().showMessage(message, SNACKBAR_MS * 2)

    # ------------------------------------------------------------------ #
    #  Navigation                                                          #
    # ------------------------------------------------------------------ #

    def _on_navigate_to_sleep_quality(self, night):
        if night is None:
            return
        self.quality = SleepQualityViewModel(night.night_id, self.database, dispatcher=self.dispatcher, parent=self)
        self.quality.navigate_to_sleep_tracker_changed.connect(self._on_navigate_to_sleep_tracker)
        self.quality.error_message.connect(self._on_error)
        self._stack.setCurrentWidget(self.quality_page)
        self.tracker.done_navigating()

    def _on_rated(self, quality):
        if self.quality is not None:
            self.quality.on_set_sleep_quality(quality)

    def _on_navigate_to_sleep_tracker(self, navigate):
        if not navigate:
            return
        self._stack.setCurrentWidget(self.tracker_page)
        quality, self.quality = self.quality, None
        quality.done_navigating()
        quality.deleteLater()

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        self.tracker.on_cleared()
        self.dispatcher.wait(5000)
        try:
            config.save_settings(self.config)
        except OSError as e:
            log.warning("Failed to save settings on exit", exc_info=True)
            QMessageBox.warning(self, "Save Error",
                                f"Failed to save settings:\n{e}")
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
