"""Page widgets: the tracker page and the sleep quality page.

Pages only lay out widgets and forward clicks. Whatever they display comes in
through the view model signals that MainWindow wires up.
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)
from sq.sleepquality import QUALITY_RATINGS
from sq.util import convert_numeric_quality_to_string


class TrackerPage(QWidget):

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        btn_row = QHBoxLayout()
        self.start_button = QPushButton("Start")
        self.stop_button = QPushButton("Stop")
        self.clear_button = QPushButton("Clear")
        for btn in (self.start_button, self.stop_button, self.clear_button):
            btn.setMinimumWidth(90)
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

        self.history = QTextBrowser()
        self.history.setOpenLinks(False)
        layout.addWidget(self.history, 1)

    def set_history(self, html):
        self.history.setHtml(html)


class SleepQualityPage(QWidget):

    # Rating the user picked, 0..5
    rated = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        title = QLabel("How was your sleep?")
        title.setAlignment(Qt.AlignCenter)
        title_font = QFont()
        title_font.setPointSize(16)
        title_font.setBold(True)
        title.setFont(title_font)
        layout.addWidget(title)

        grid = QGridLayout()
        self.rating_buttons = {}
        for i, quality in enumerate(QUALITY_RATINGS):
            btn = QPushButton(f"{quality}\n{convert_numeric_quality_to_string(quality)}")
            btn.setMinimumSize(96, 64)
            btn.clicked.connect(lambda _checked=False, q=quality: self.rated.emit(q))
            grid.addWidget(btn, i // 3, i % 3)
            self.rating_buttons[quality] = btn
        layout.addLayout(grid)
        layout.addStretch(1)
