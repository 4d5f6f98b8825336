"""
Actuator Transports
===================

Deliver commands to the chassis as line-delimited JSON.

Backends:
    - SerialTransport: pyserial port (default /dev/ttyAMA0 @ 115200)
    - LogTransport: logs every message (dry run, no hardware)

Error Policy:
    There is no safe degraded mode for a rover without its actuator link.
    Open and write failures raise TransportError and are NOT retried here.
    Close failures are logged at ERROR and not raised: close() runs during
    shutdown, where the error that caused the shutdown must propagate.
"""

import json
import logging
from typing import List, Optional, Protocol

import serial

from curio_agent.models.commands import HandshakeCommand, TransportCommand


logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when the actuator link cannot be opened or written."""
    pass


class Transport(Protocol):
    """Protocol for actuator transports."""

    def open(self) -> None:
        ...

    def send(self, command: TransportCommand) -> None:
        ...

    def close(self) -> None:
        ...


def encode_command(command: TransportCommand) -> bytes:
    """Serialize a command to one JSON line."""
    return (json.dumps(command.to_message()) + "\n").encode("utf-8")


class SerialTransport:
    """
    Serial-port transport.

    Opening the port also writes the handshake; both steps are fatal on
    failure.

    Attributes:
        port: Serial device path
        baudrate: Baud rate
        write_timeout: Seconds before a blocked write fails
    """

    def __init__(
        self,
        port: str = "/dev/ttyAMA0",
        baudrate: int = 115200,
        write_timeout: float = 1.0,
        handshake: Optional[HandshakeCommand] = None,
    ) -> None:
        self.port = port
        self.baudrate = baudrate
        self.write_timeout = write_timeout
        self.handshake = handshake or HandshakeCommand()
        self._serial: Optional[serial.Serial] = None
        self._sent_count: int = 0

    @property
    def sent_count(self) -> int:
        return self._sent_count

    def open(self) -> None:
        try:
            self._serial = serial.Serial(
                self.port,
                baudrate=self.baudrate,
                write_timeout=self.write_timeout,
            )
        except (serial.SerialException, ValueError) as e:
            raise TransportError(f"Cannot open serial port {self.port}: {e}") from e

        logger.info(f"SerialTransport opened: port={self.port}, baudrate={self.baudrate}")
        self.send(self.handshake)

    def send(self, command: TransportCommand) -> None:
        if self._serial is None:
            raise TransportError("Serial port is not open")
        data = encode_command(command)
        try:
            self._serial.write(data)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Serial write failed on {self.port}: {e}") from e
        self._sent_count += 1

    def close(self) -> None:
        if self._serial is None:
            return
        port, self._serial = self._serial, None
        try:
            port.close()
        except (serial.SerialException, OSError) as e:
            logger.error(f"Serial close failed on {self.port}: {e}")
            return
        logger.info(f"SerialTransport closed after {self._sent_count} messages")


class LogTransport:
    """
    Dry-run transport.

    Encodes every command exactly like SerialTransport and logs it at
    DEBUG level; keeps the encoded lines for inspection.
    """

    def __init__(self, keep_last: int = 100) -> None:
        self.keep_last = keep_last
        self.lines: List[bytes] = []
        self._open = False

    def open(self) -> None:
        self._open = True
        logger.info("LogTransport opened (dry run, no actuator link)")
        self.send(HandshakeCommand())

    def send(self, command: TransportCommand) -> None:
        if not self._open:
            raise TransportError("LogTransport is not open")
        line = encode_command(command)
        self.lines.append(line)
        del self.lines[:-self.keep_last]
        logger.debug(f"-> {line.decode('utf-8').rstrip()}")

    def close(self) -> None:
        self._open = False
        logger.info("LogTransport closed")
