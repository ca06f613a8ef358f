"""Scan state machine behind the window.

The presenter owns the current record list and the scanning flag. It knows
nothing about Qt: the window hands it a ``dispatch`` callable that runs a job
in the background and calls back on the UI thread.
"""

import logging
from enum import Enum

from wifi_network import signal_color
from wifi_scanner import ScannerError, scan_networks

logger = logging.getLogger(__name__)


def run_scan_job(job, on_done, on_error):
    """Run ``job`` and hand its result to exactly one of the callbacks.

    No exception escapes, so a failing scan never takes down the thread
    running it.
    """
    try:
        networks = job()
    except ScannerError as e:
        on_error(e)
        return
    except Exception as e:
        logger.exception("Unexpected error during scan")
        on_error(e)
        return
    on_done(networks)


class ScanState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"


class ScanPresenter:
    def __init__(self, dispatch, on_change=None, job=scan_networks):
        self.dispatch = dispatch
        self.on_change = on_change
        self.job = job
        self.state = ScanState.IDLE
        self.records = []

    @property
    def scanning(self) -> bool:
        return self.state is ScanState.SCANNING

    def request_scan(self) -> bool:
        """Start a scan unless one is already in flight.

        Returns False when the request is dropped.
        """
        if self.scanning:
            logger.debug("Scan already in progress, ignoring request")
            return False
        logger.info("Starting scan...")
        self.state = ScanState.SCANNING
        self.records = []
        self._notify()
        self.dispatch(self.job, self.complete_scan, self.fail_scan)
        return True

    def complete_scan(self, records):
        self.records = list(records)
        self.state = ScanState.IDLE
        logger.info("Scan finished with %d networks", len(self.records))
        self._notify()

    def fail_scan(self, error):
        logger.error("Scan failed: %s", error)
        self.records = []
        self.state = ScanState.IDLE
        self._notify()

    def rows(self):
        return [(record.display_text(), signal_color(record.signal_percent)) for record in self.records]

    def button_label(self) -> str:
        return "Scanning..." if self.scanning else "Scan"

    def _notify(self):
        if self.on_change is not None:
            self.on_change()
