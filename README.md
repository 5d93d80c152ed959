# stromlinger

Telemetry link between a dashboard and a vehicle's motor controller over
a USB serial port.

The controller sends fixed-size 13-byte frames:

| offset | content                             |
|--------|-------------------------------------|
| 0      | header, always `0x81`               |
| 1      | message type                        |
| 2      | length                              |
| 3–10   | eight data bytes                    |
| 11–12  | CRC16-CCITT, most significant first |

The checksum covers the first `length - 2` bytes of the frame. The parser
drops any frame whose checksum does not match, and any frame whose length
byte puts that range outside the frame.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Parsing frames

`stromlinger.protocol.PacketParser` is a byte-by-byte state machine.
`feed(data)` takes any chunk of received bytes and returns a list of
every complete `Packet` whose checksum matched. Partial frames carry over
between calls. `reset()` drops a partial frame, and the `state` property
shows which byte the parser expects next (a `ParserState`).

```python
from stromlinger.protocol import PacketParser, crc16

parser = PacketParser()
for packet in parser.feed(chunk):
    print(packet.type(), packet.length(), packet.data.hex(), packet.checksum)
```

A `Packet` wraps the 13 raw bytes (`packet.raw`) and can be indexed like
them. `type()` and `length()` return bytes 1 and 2. The `data` property
holds the eight data bytes and `checksum` holds the received CRC.
Building a `Packet` from anything other than 13 bytes raises `ValueError`.

`crc16(data)` computes CRC16-CCITT with an initial value of `0xFFFF`
and polynomial `0x1021`.

## Talking to the controller

`stromlinger.serial_link.find_port(vendor_id, product_id)` returns the
device name of the first serial port with the given USB identifiers. It
returns `None` if no such port exists. The defaults are vendor 4292 and
product 60000.

`SerialLink(on_packet)` finds that device with the default identifiers.
`open()` opens it at 115200 baud, 8N1, with no flow control. It raises
`ConnectionError` if the device is missing or the port cannot be opened.
`data_ready()` reads whatever bytes are waiting and passes each valid
packet to `on_packet`. It also returns the list of those packets.
`write(data)` sends bytes. If the port is closed, writing and reading
only log a warning. The link is also a context manager.

```python
from stromlinger.serial_link import SerialLink

with SerialLink(on_packet=print) as link:
    while True:
        link.data_ready()
```

## Dashboard values

`stromlinger.backend.Backend(link)` decodes packets into the values a
dashboard shows. It makes itself the link's `on_packet` handler and
tries to open the link. If the link fails to open, it logs a warning and
carries on.

The attributes are:

- `rpm_text`, `rpm_dial`
- `speed_text`, `speed_dial`
- `voltage_text`
- `amp_text`, `amp_dial`
- `tire_angle`
- `error_code`

Message type `0x00` sets the RPM, voltage, motor current and error code.
An RPM below 30 is shown as 0. Message type `0x02` sets the speed and the
tire angle, which is the received byte minus 45. Other message types are
ignored. `error_code` starts at 8 until the first `0x00` message arrives.

`connect(name, callback)` registers a callback for an attribute. The
backend calls it with the new value each time a packet updates that
attribute. An unknown name raises `KeyError`.

The attributes `consumption_text`, `motor_temp` and `esc_temp` hold their
start values. `kph_text` and `kph_dial` are accepted by `connect()`. No
packet updates any of these five, so their callbacks are never called.

`send_left()`, `send_right()` and `send_center()` send `"1"`, `"2"` and
`"0"` back over the link. `write_serial_data(text)` sends any text as
UTF-8.

## What this package does not do

The package has no dashboard display and no command to start one. It
also runs no read loop of its own: the caller must call
`SerialLink.data_ready()` whenever data is expected. It decodes nothing
from message type `0x01`, which carries the controller temperatures.