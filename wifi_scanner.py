import logging
import platform
import re
import subprocess
from abc import ABC, abstractmethod

import settings
from wifi_network import NetworkRecord

logger = logging.getLogger(__name__)

MAC_RE = re.compile(r"^[0-9A-Fa-f]{1,2}([:-][0-9A-Fa-f]{1,2}){5}$")
NMCLI_ESCAPE_RE = re.compile(r"\\(.)")


class ScannerError(Exception):
    """Base class for scan failures."""


class CommandError(ScannerError):
    """The network listing command could not be run or exited non-zero."""

    def __init__(self, command, returncode=None, stderr=""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Failed to execute {self.command[0]}: {stderr}"
        else:
            message = f"{self.command[0]} exited with status {returncode}: {stderr}"
        super().__init__(message)


class UnsupportedPlatformError(ScannerError):
    pass


def run_command(command, timeout=None) -> str:
    """Run ``command`` once and return its standard output.

    Undecodable bytes in the output are replaced rather than rejected.
    Raises CommandError if the process cannot be spawned, times out or
    exits with a non-zero status.
    """
    logger.debug("Running: %s", " ".join(command))
    try:
        result = subprocess.run(
            command, capture_output=True, text=True, errors="replace", timeout=timeout
        )
    except OSError as e:
        raise CommandError(command, None, str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(command, None, f"timed out after {timeout} seconds") from e
    if result.returncode != 0:
        raise CommandError(command, result.returncode, (result.stderr or "").strip())
    return result.stdout


class WiFiScanner(ABC):
    @abstractmethod
    def command(self) -> list[str]:
        pass

    @abstractmethod
    def parse(self, output: str) -> list[NetworkRecord]:
        pass

    def scan(self) -> str:
        return run_command(self.command(), timeout=settings.SCAN_TIMEOUT)

    def scan_networks(self) -> list[NetworkRecord]:
        networks = self.parse(self.scan())
        logger.info("Found %d networks", len(networks))
        return networks


def _split_first_field(text):
    """Split nmcli terse output at the first colon not escaped as ``\\:``."""
    i = 0
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == ":":
            return text[:i], text[i + 1:]
        i += 1
    return None


def _unescape(value):
    return NMCLI_ESCAPE_RE.sub(r"\1", value)


class LinuxWiFiScanner(WiFiScanner):
    def command(self) -> list[str]:
        return ["nmcli", "-t", "-f", "SSID,BSSID,SIGNAL", "dev", "wifi"]

    def parse(self, output: str) -> list[NetworkRecord]:
        networks = []
        for line in output.splitlines():
            if not line.strip():
                continue
            # SSID:BSSID:SIGNAL, read from the right
            rest, sep, signal_str = line.rpartition(":")
            if not sep:
                logger.debug("Skipping malformed line: %r", line)
                continue
            try:
                signal = int(signal_str.strip())
            except ValueError:
                logger.debug("Invalid signal value %r, skipping: %r", signal_str, line)
                continue
            fields = _split_first_field(rest)
            if fields is None:
                logger.debug("Missing BSSID field, skipping: %r", line)
                continue
            name = _unescape(fields[0])
            bssid = _unescape(fields[1])
            if not name.strip() or not bssid.strip():
                logger.debug("Empty SSID or BSSID, skipping: %r", line)
                continue
            networks.append(NetworkRecord(name, bssid, signal))
        return networks


class WindowsWiFiScanner(WiFiScanner):
    def command(self) -> list[str]:
        return ["netsh", "wlan", "show", "networks", "mode=bssid"]

    def parse(self, output: str) -> list[NetworkRecord]:
        networks = []
        current_ssid = None
        current_bssid = None

        for line in output.splitlines():
            line = line.strip()
            if ":" not in line:
                continue
            key, value = line.split(":", 1)
            key = key.strip()
            value = value.strip()

            if key.startswith("SSID"):
                current_ssid = value
                current_bssid = None
            elif key.startswith("BSSID"):
                current_bssid = value if current_ssid is not None else None
            elif key.startswith("Signal") and current_bssid:
                signal_str = value.replace("%", "").strip()
                try:
                    signal = int(signal_str)
                except ValueError:
                    logger.debug("Invalid signal value %r for BSSID %s, skipping.", signal_str, current_bssid)
                    current_bssid = None
                    continue
                if current_ssid:
                    networks.append(NetworkRecord(current_ssid, current_bssid, signal))
                else:
                    logger.debug("Skipping hidden network with BSSID %s", current_bssid)
                # one signal line per access point
                current_bssid = None
        return networks


class MacWiFiScanner(WiFiScanner):
    def command(self) -> list[str]:
        return [settings.AIRPORT_PATH, "-s"]

    def parse(self, output: str) -> list[NetworkRecord]:
        networks = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 3:
                continue
            if MAC_RE.match(parts[0]):
                logger.debug("Skipping hidden network with BSSID %s", parts[0])
                continue
            mac_index = next(
                (i for i in range(1, len(parts) - 1) if MAC_RE.match(parts[i])), None
            )
            if mac_index is None:
                ssid, bssid, signal_str = parts[0], parts[1], parts[2]
            else:
                ssid = " ".join(parts[:mac_index])
                bssid = parts[mac_index]
                signal_str = parts[mac_index + 1]
            try:
                signal = int(signal_str)
            except ValueError:
                logger.debug("Invalid signal value %r, skipping: %r", signal_str, line)
                continue
            if signal < 0:
                # airport reports RSSI in dBm
                signal = max(0, min(100, (signal + 100) * 2))
            networks.append(NetworkRecord(ssid, bssid, signal))
        return networks


SCANNERS = {
    "Linux": LinuxWiFiScanner,
    "Windows": WindowsWiFiScanner,
    "Darwin": MacWiFiScanner,
}


def get_scanner(system=None) -> WiFiScanner:
    system = system or platform.system()
    try:
        scanner_class = SCANNERS[system]
    except KeyError:
        raise UnsupportedPlatformError(f"Unsupported platform: {system}") from None
    logger.debug("Using %s", scanner_class.__name__)
    return scanner_class()


def parse_networks(raw_text: str, system: str) -> list[NetworkRecord]:
    return get_scanner(system).parse(raw_text)


def scan_networks(scanner=None) -> list[NetworkRecord]:
    scanner = scanner or get_scanner()
    return scanner.scan_networks()
