import logging
import sys

import numpy as np
from PyQt6.QtWidgets import QApplication, QMainWindow, QVBoxLayout, QHBoxLayout, QWidget, QPushButton, QListWidget, QListWidgetItem, QSpacerItem, QSizePolicy
from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtGui import QColor
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

import settings
from scan_presenter import ScanPresenter, run_scan_job
from wifi_network import signal_color

logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=settings.log_level(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


class ScanWorker(QThread):
    """Runs one scan job off the UI thread."""

    scan_finished = pyqtSignal(list)
    scan_failed = pyqtSignal(object)

    def __init__(self, job, parent=None):
        super().__init__(parent)
        self.job = job

    def run(self):
        run_scan_job(self.job, self.scan_finished.emit, self.scan_failed.emit)


class SignalChart(FigureCanvas):
    def __init__(self):
        super().__init__(Figure(figsize=(5, 3)))

    def plot(self, records):
        self.figure.clear()
        ax = self.figure.add_subplot(111)
        if not records:
            ax.text(0.5, 0.5, "No networks", ha="center", va="center", transform=ax.transAxes)
            ax.set_axis_off()
        else:
            positions = np.arange(len(records))
            signals = [record.signal_percent for record in records]
            colors = [signal_color(record.signal_percent) for record in records]
            ax.barh(positions, signals, color=colors, edgecolor="#5c6370")
            ax.set_yticks(positions)
            ax.set_yticklabels([record.name for record in records], fontsize=8)
            ax.invert_yaxis()  # same order as the list
            ax.set_xlim(0, 100)
            ax.set_xlabel("Signal (%)", fontsize=8)
            ax.grid(True, axis="x", alpha=0.3)
        self.figure.tight_layout()
        self.draw()


class WirelessScannerWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Wireless Scanner")
        self.setGeometry(100, 100, 700, 600)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        button_layout = QHBoxLayout()
        button_layout.addSpacerItem(QSpacerItem(0, 0, QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Minimum))
        self.scan_button = QPushButton("Scan")
        self.scan_button.setFixedSize(90, 30)
        button_layout.addWidget(self.scan_button)
        main_layout.addLayout(button_layout)

        # QListWidget scrolls on its own
        self.network_list = QListWidget()
        main_layout.addWidget(self.network_list, stretch=2)

        self.chart = SignalChart()
        main_layout.addWidget(self.chart, stretch=1)

        self.worker = None
        self._on_done = None
        self._on_error = None
        self.presenter = ScanPresenter(self.dispatch, on_change=self.render)
        self.scan_button.clicked.connect(self.presenter.request_scan)

        self.render()

    def dispatch(self, job, on_done, on_error):
        self._on_done = on_done
        self._on_error = on_error
        if self.worker is not None:
            # the previous thread may still be returning from run()
            self.worker.wait()
        self.worker = ScanWorker(job)
        # Slots on the window run on the UI thread
        self.worker.scan_finished.connect(self.deliver_result)
        self.worker.scan_failed.connect(self.deliver_error)
        self.worker.start()

    def deliver_result(self, networks):
        self._on_done(networks)

    def deliver_error(self, error):
        self._on_error(error)

    def render(self):
        self.scan_button.setText(self.presenter.button_label())
        self.network_list.clear()
        for text, color in self.presenter.rows():
            item = QListWidgetItem(text)
            item.setForeground(QColor(color))
            self.network_list.addItem(item)
        self.chart.plot(self.presenter.records)

    def closeEvent(self, event):
        if self.worker is not None and self.worker.isRunning():
            # scans cannot be cancelled; let the command finish
            logger.info("Waiting for running scan to finish")
            self.worker.wait()
        super().closeEvent(event)


def main():
    setup_logging()
    app = QApplication(sys.argv)
    window = WirelessScannerWindow()
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
