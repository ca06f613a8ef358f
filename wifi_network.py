from dataclasses import dataclass

DARK_RED = "#8b0000"
ORANGE = "#ffa500"
YELLOW = "#ffff00"
GREEN = "#00ff00"
BLACK = "#000000"


@dataclass
class NetworkRecord:
    name: str
    hardware_address: str
    signal_percent: int

    def display_text(self) -> str:
        return f"SSID: {self.name} | BSSID: {self.hardware_address} | Strength: {self.signal_percent}%"


def signal_color(signal_percent: int) -> str:
    if 0 <= signal_percent <= 20:
        return DARK_RED
    elif 21 <= signal_percent <= 50:
        return ORANGE
    elif 51 <= signal_percent <= 80:
        return YELLOW
    elif 81 <= signal_percent <= 100:
        return GREEN
    return BLACK  # out of range
