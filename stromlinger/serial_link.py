"""Connection to the motor controller over a USB serial port."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import serial
from serial.tools import list_ports

from .protocol import Packet, PacketParser

log = logging.getLogger(__name__)

VENDOR_ID = 4292
PRODUCT_ID = 60000
BAUD_RATE = 115200


def find_port(vendor_id: int = VENDOR_ID, product_id: int = PRODUCT_ID) -> Optional[str]:
    """Return the device name of the first port with the given USB ids, if any."""
    for info in list_ports.comports():
        if info.vid is None or info.pid is None:
            continue
        if info.vid == vendor_id and info.pid == product_id:
            return info.device
    return None


class SerialLink:
    """Serial port that decodes incoming frames and hands packets to *on_packet*."""

    def __init__(self, on_packet: Optional[Callable[[Packet], object]] = None) -> None:
        self.on_packet = on_packet
        self._port = None
        self._parser = PacketParser()

    @property
    def is_open(self) -> bool:
        return self._port is not None and bool(self._port.is_open)

    def open(self) -> None:
        """Find the controller and open its port; raise ConnectionError on failure."""
        name = find_port()
        if name is None:
            raise ConnectionError("Device not found.")
        self.close()
        try:
            port = serial.Serial(
                port=name,
                baudrate=BAUD_RATE,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
                timeout=0,
            )
        except serial.SerialException as exc:
            raise ConnectionError(f"Failed to open serial port {name}.") from exc
        self._port = port
        self._parser.reset()
        log.debug("Serial port %s opened successfully.", name)

    def close(self) -> None:
        if self._port is not None:
            if self._port.is_open:
                self._port.close()
            self._port = None

    def write(self, data: bytes) -> None:
        if self.is_open:
            self._port.write(bytes(data))
        else:
            log.warning("Serial port is not writable.")

    def data_ready(self) -> list[Packet]:
        """Read what is waiting, deliver every complete packet and return them."""
        if not self.is_open:
            log.warning("Serial port is not readable.")
            return []
        chunk = self._port.read(self._port.in_waiting)
        packets = self._parser.feed(chunk)
        if self.on_packet is not None:
            for packet in packets:
                self.on_packet(packet)
        return packets

    def __enter__(self) -> "SerialLink":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()