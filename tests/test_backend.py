import logging

import pytest

from stromlinger.backend import Backend
from stromlinger.protocol import FRAME_SIZE, HEADER_BYTE, Packet


class FakeLink:
    def __init__(self, fail=False):
        self.on_packet = None
        self.opened = False
        self.written = []
        self.fail = fail

    def open(self):
        if self.fail:
            raise ConnectionError("Device not found.")
        self.opened = True

    def write(self, data):
        self.written.append(data)


def packet(msg_type, data):
    return Packet(bytes([HEADER_BYTE, msg_type, FRAME_SIZE]) + bytes(data) + b"\x00\x00")


def test_initial_values():
    backend = Backend(FakeLink())
    assert backend.rpm_text == "0000"
    assert backend.speed_text == "00"
    assert backend.consumption_text == "00.0"
    assert backend.voltage_text == "00"
    assert backend.amp_text == "00.0"
    assert backend.error_code == 8
    assert backend.tire_angle == 0


def test_init_opens_and_wires_link():
    link = FakeLink()
    backend = Backend(link)
    assert link.opened is True
    assert link.on_packet == backend.process_packet


def test_open_failure_is_logged_not_raised(caplog):
    with caplog.at_level(logging.WARNING):
        backend = Backend(FakeLink(fail=True))
    assert "Device not found" in caplog.text
    assert backend.error_code == 8


def test_esc_message_updates_values():
    backend = Backend(FakeLink())
    backend.process_packet(packet(0x00, [200, 0, 12, 0, 48, 0, 3, 0]))
    assert backend.rpm_dial == 200.0
    assert backend.rpm_text == "200"
    assert backend.amp_text == "12"
    assert backend.amp_dial == 12.0
    assert backend.voltage_text == "48"
    assert backend.error_code == 3


def test_high_byte_is_most_significant():
    backend = Backend(FakeLink())
    backend.process_packet(packet(0x00, [0, 1, 0, 0, 0, 0, 0, 0]))
    assert backend.rpm_text == "256"


@pytest.mark.parametrize("rpm", [0, 1, 29])
def test_low_rpm_reads_zero(rpm):
    backend = Backend(FakeLink())
    backend.process_packet(packet(0x00, [rpm, 0, 0, 0, 0, 0, 0, 0]))
    assert backend.rpm_dial == 0.0
    assert backend.rpm_text == "0"


def test_rpm_threshold_is_kept():
    backend = Backend(FakeLink())
    backend.process_packet(packet(0x00, [30, 0, 0, 0, 0, 0, 0, 0]))
    assert backend.rpm_text == "30"


def test_speed_message_updates_speed_and_angle():
    backend = Backend(FakeLink())
    backend.process_packet(packet(0x02, [25, 45, 0, 0, 0, 0, 0, 0]))
    assert backend.speed_dial == 25.0
    assert backend.speed_text == "25"
    assert backend.tire_angle == 0
    backend.process_packet(packet(0x02, [25, 0, 0, 0, 0, 0, 0, 0]))
    assert backend.tire_angle == -45


def test_temperature_message_changes_nothing():
    backend = Backend(FakeLink())
    backend.process_packet(packet(0x01, [9, 9, 9, 9, 9, 9, 9, 9]))
    assert backend.rpm_text == "0000"
    assert backend.speed_text == "00"
    assert backend.error_code == 8


def test_signals_fire_in_order():
    backend = Backend(FakeLink())
    fired = []
    for name in ("rpm_dial", "rpm_text", "voltage_text", "amp_text", "amp_dial", "error_code"):
        backend.connect(name, lambda value, name=name: fired.append((name, value)))
    backend.process_packet(packet(0x00, [100, 0, 7, 0, 50, 0, 0, 0]))
    assert fired == [
        ("rpm_dial", 100.0),
        ("rpm_text", "100"),
        ("voltage_text", "50"),
        ("amp_text", "7"),
        ("amp_dial", 7.0),
        ("error_code", 0),
    ]


def test_connect_unknown_signal():
    backend = Backend(FakeLink())
    with pytest.raises(KeyError):
        backend.connect("warp_speed", print)


def test_steering_commands():
    link = FakeLink()
    backend = Backend(link)
    backend.send_left()
    backend.send_right()
    backend.send_center()
    backend.write_serial_data("hé")
    assert link.written == [b"1", b"2", b"0", "hé".encode("utf-8")]