"""Tests for the Qt worker and window dispatch, run on the offscreen platform."""

import os
import unittest
from unittest.mock import MagicMock

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PyQt6.QtWidgets import QApplication
except ImportError:  # pragma: no cover
    QApplication = None

if QApplication is not None:
    from main import ScanWorker, WirelessScannerWindow

from wifi_network import NetworkRecord


@unittest.skipIf(QApplication is None, "PyQt6 is not installed")
class TestScanWorker(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def _run(self, job):
        finished, failed = [], []
        worker = ScanWorker(job)
        worker.scan_finished.connect(finished.append)
        worker.scan_failed.connect(failed.append)
        worker.run()  # synchronously, on this thread
        return finished, failed

    def test_emits_networks(self):
        records = [NetworkRecord("HomeNet", "aa:bb:cc:dd:ee:ff", 72)]
        finished, failed = self._run(lambda: records)
        self.assertEqual(finished, [records])
        self.assertEqual(failed, [])

    def test_unexpected_error_emits_failure(self):
        def job():
            raise ValueError("embedded null byte")

        with self.assertLogs("scan_presenter", level="ERROR"):
            finished, failed = self._run(job)
        self.assertEqual(finished, [])
        self.assertIsInstance(failed[0], ValueError)


@unittest.skipIf(QApplication is None, "PyQt6 is not installed")
class TestWindowDispatch(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self.window = WirelessScannerWindow()

    def tearDown(self):
        if self.window.worker is not None:
            self.window.worker.wait()
        self.window.close()

    def test_waits_for_previous_worker(self):
        previous = MagicMock()
        self.window.worker = previous
        self.window.dispatch(lambda: [], MagicMock(), MagicMock())
        previous.wait.assert_called_once_with()
        self.assertIsInstance(self.window.worker, ScanWorker)

    def test_initial_render(self):
        self.assertEqual(self.window.scan_button.text(), "Scan")
        self.assertEqual(self.window.network_list.count(), 0)


if __name__ == "__main__":
    unittest.main()
