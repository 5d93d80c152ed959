"""Dashboard state fed by controller packets, with change notifications."""

from __future__ import annotations

import logging
from typing import Any, Callable

log = logging.getLogger(__name__)

MIN_RPM = 30
TIRE_ANGLE_OFFSET = 45

# Frame offsets of the fields in each message type.
_LSB_RPM, _MSB_RPM = 3, 4
_LSB_MOTORCURR, _MSB_MOTORCURR = 5, 6
_LSB_VBAT, _MSB_VBAT = 7, 8
_LSB_ERROR, _MSB_ERROR = 9, 10
_SPEED, _TIREANGLE = 3, 4

_SIGNALS = (
    "rpm_text",
    "rpm_dial",
    "speed_text",
    "speed_dial",
    "kph_text",
    "kph_dial",
    "consumption_text",
    "voltage_text",
    "amp_dial",
    "amp_text",
    "motor_temp",
    "esc_temp",
    "tire_angle",
    "error_code",
)


def _word(packet, lsb: int, msb: int) -> int:
    return (packet[msb] << 8) | packet[lsb]


class Backend:
    """Holds the values shown on the dashboard and sends steering commands."""

    def __init__(self, link) -> None:
        self.rpm_text = "0000"
        self.rpm_dial = 0.0
        self.speed_text = "00"
        self.speed_dial = 0.0
        self.consumption_text = "00.0"
        self.voltage_text = "00"
        self.amp_dial = 0.0
        self.amp_text = "00.0"
        self.motor_temp = False
        self.esc_temp = False
        self.tire_angle = 0
        self.error_code = 8  # link error shown until the first message arrives
        self._listeners: dict[str, list[Callable[[Any], object]]] = {
            name: [] for name in _SIGNALS
        }
        self._link = link
        link.on_packet = self.process_packet
        try:
            link.open()
        except OSError as exc:
            log.warning("Failed to open serial port: %s", exc)

    def connect(self, name: str, callback: Callable[[Any], object]) -> None:
        """Call *callback* with the new value whenever *name* is updated."""
        if name not in self._listeners:
            raise KeyError(f"unknown signal: {name}")
        self._listeners[name].append(callback)

    def _update(self, name: str, value: Any) -> None:
        setattr(self, name, value)
        for callback in self._listeners[name]:
            callback(value)

    def process_packet(self, packet) -> None:
        msg_type = packet[1]
        if msg_type == 0x00:
            rpm = _word(packet, _LSB_RPM, _MSB_RPM)
            if rpm < MIN_RPM:
                rpm = 0
            self._update("rpm_dial", float(rpm))
            self._update("rpm_text", str(rpm))
            self._update("voltage_text", str(_word(packet, _LSB_VBAT, _MSB_VBAT)))
            current = _word(packet, _LSB_MOTORCURR, _MSB_MOTORCURR)
            self._update("amp_text", str(current))
            self._update("amp_dial", float(current))
            self._update("error_code", _word(packet, _LSB_ERROR, _MSB_ERROR))
        elif msg_type == 0x02:
            speed = packet[_SPEED]
            self._update("speed_dial", float(speed))
            self._update("speed_text", str(speed))
            self._update("tire_angle", packet[_TIREANGLE] - TIRE_ANGLE_OFFSET)

    def write_serial_data(self, data: str) -> None:
        self._link.write(data.encode("utf-8"))

    def send_left(self) -> None:
        self.write_serial_data("1")

    def send_right(self) -> None:
        self.write_serial_data("2")

    def send_center(self) -> None:
        self.write_serial_data("0")