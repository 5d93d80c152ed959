"""Serial telemetry link: frame parsing, CRC checking and decoded dashboard values."""

__version__ = "0.1.0"
__all__ = ["protocol", "serial_link", "backend"]