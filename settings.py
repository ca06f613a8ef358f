"""Runtime settings, overridable through environment variables."""

import logging
import os

LOG_LEVEL = os.environ.get("WIFI_SCANNER_LOG_LEVEL", "INFO").upper()


def log_level(name=None):
    """Numeric level for ``name`` (default LOG_LEVEL), INFO if unknown."""
    level = logging.getLevelName(name or LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


AIRPORT_PATH = os.environ.get(
    "WIFI_SCANNER_AIRPORT_PATH",
    "/System/Library/PrivateFrameworks/Apple80211.framework/Versions/Current/Resources/airport",
)


def _read_timeout(value):
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        return None
    return timeout if timeout > 0 else None


# None means the scan command may run indefinitely
SCAN_TIMEOUT = _read_timeout(os.environ.get("WIFI_SCANNER_TIMEOUT"))
