"""Framing and checksums for the motor controller's serial packets."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional

HEADER_BYTE = 0x81
FRAME_SIZE = 13
DATA_SIZE = 8


def crc16(data: Iterable[int]) -> int:
    """Return the CRC16-CCITT (initial value 0xFFFF, polynomial 0x1021) of *data*."""
    crc = 0xFFFF
    for byte in data:
        crc ^= (byte & 0xFF) << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


class ParserState(enum.IntEnum):
    """Parser states; each value is also the frame offset of the byte it expects."""

    HEADER = 0
    TYPE = 1
    LENGTH = 2
    DATA = 3
    CRC_MSB = 11
    CRC_LSB = 12


@dataclass(frozen=True)
class Packet:
    """One complete frame: header, type, length, eight data bytes and a CRC."""

    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", bytes(self.raw))
        if len(self.raw) != FRAME_SIZE:
            raise ValueError(f"a packet holds {FRAME_SIZE} bytes, got {len(self.raw)}")

    def __getitem__(self, index):
        return self.raw[index]

    def type(self) -> int:
        """The message type byte."""
        return self.raw[ParserState.TYPE]

    def length(self) -> int:
        """The length byte as sent by the controller."""
        return self.raw[ParserState.LENGTH]

    @property
    def data(self) -> bytes:
        return self.raw[ParserState.DATA:ParserState.DATA + DATA_SIZE]

    @property
    def checksum(self) -> int:
        return int.from_bytes(self.raw[ParserState.CRC_MSB:], "big")


class PacketParser:
    """Byte-wise state machine that turns a serial stream into checked packets."""

    def __init__(self) -> None:
        self._buffer = bytearray(FRAME_SIZE)
        self._state = ParserState.HEADER
        self._data_index = 0

    @property
    def state(self) -> ParserState:
        return self._state

    def reset(self) -> None:
        """Drop any partly received frame and wait for the next header."""
        self._state = ParserState.HEADER
        self._data_index = 0

    def feed(self, data: Iterable[int]) -> list[Packet]:
        """Consume *data* and return the packets whose checksum matched."""
        packets = []
        for byte in data:
            packet = self._step(byte)
            if packet is not None:
                packets.append(packet)
        return packets

    def _step(self, byte: int) -> Optional[Packet]:
        buffer = self._buffer
        state = self._state
        if state is ParserState.HEADER:
            if byte == HEADER_BYTE:
                buffer[ParserState.HEADER] = byte
                self._state = ParserState.TYPE
        elif state is ParserState.TYPE:
            buffer[ParserState.TYPE] = byte
            self._state = ParserState.LENGTH
        elif state is ParserState.LENGTH:
            buffer[ParserState.LENGTH] = byte
            self._state = ParserState.DATA
        elif state is ParserState.DATA:
            buffer[ParserState.DATA + self._data_index] = byte
            self._data_index += 1
            if self._data_index >= DATA_SIZE:
                self._data_index = 0
                self._state = ParserState.CRC_MSB
        elif state is ParserState.CRC_MSB:
            buffer[ParserState.CRC_MSB] = byte
            self._state = ParserState.CRC_LSB
        else:
            buffer[ParserState.CRC_LSB] = byte
            self._state = ParserState.HEADER
            return self._complete()
        return None

    def _complete(self) -> Optional[Packet]:
        buffer = self._buffer
        covered = buffer[ParserState.LENGTH] - 2
        if not 0 <= covered <= FRAME_SIZE:
            return None
        received = (buffer[ParserState.CRC_MSB] << 8) | buffer[ParserState.CRC_LSB]
        if crc16(buffer[:covered]) != received:
            return None
        return Packet(bytes(buffer))