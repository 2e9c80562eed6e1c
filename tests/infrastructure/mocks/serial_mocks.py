"""Mock serial ports and port listings for HC-05 scan testing.

Provides ``serial.Serial``-compatible fakes that answer the WHOIS query (or
misbehave on purpose) so probes and scans run without hardware.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import serial


@dataclass
class MockSerialConfig:
    """Configuration for a mock serial port."""
    port: str = "/dev/ttyMOCK0"
    baudrate: int = 9600
    timeout: float = 0.05
    write_timeout: Optional[float] = 0.05


@dataclass
class MockPortInfo:
    """Stand-in for pyserial's ``ListPortInfo``."""
    device: str
    vid: Optional[int] = None
    pid: Optional[int] = None
    hwid: str = "n/a"
    subsystem: Optional[str] = None
    description: str = "n/a"


class MockSerialDevice:
    """Base mock serial port.

    Bytes queued with ``queue_response`` become readable once their delay has
    elapsed. ``read`` returns what is available (up to ``size``) or, like
    pyserial, an empty ``bytes`` after the read timeout.
    """

    def __init__(self, config: Optional[MockSerialConfig] = None):
        self.config = config or MockSerialConfig()
        self._is_open = True
        self._lock = threading.Lock()
        self._pending: List[Tuple[float, bytes]] = []
        self._write_log: List[bytes] = []
        self.write_error: Optional[Exception] = None
        self.read_error: Optional[Exception] = None
        self.close_error: Optional[Exception] = None
        self.on_close: Optional[Callable[["MockSerialDevice"], None]] = None

    # =========================================================================
    # Serial-compatible interface
    # =========================================================================

    @property
    def port(self) -> str:
        return self.config.port

    @property
    def baudrate(self) -> int:
        return self.config.baudrate

    @property
    def timeout(self) -> float:
        return self.config.timeout

    @property
    def is_open(self) -> bool:
        return self._is_open

    def close(self) -> None:
        if not self._is_open:
            return
        self._is_open = False
        if self.on_close:
            self.on_close(self)
        if self.close_error is not None:
            raise self.close_error

    def read(self, size: int = 1) -> bytes:
        if not self._is_open:
            raise serial.PortNotOpenError()
        if self.read_error is not None:
            raise self.read_error

        data = self._take_ready(size)
        if data:
            return data
        time.sleep(self.config.timeout)
        return self._take_ready(size)

    def write(self, data: bytes) -> int:
        if not self._is_open:
            raise serial.PortNotOpenError()
        if self.write_error is not None:
            raise self.write_error

        self._write_log.append(bytes(data))
        return len(data)

    # =========================================================================
    # Mock control methods
    # =========================================================================

    def _take_ready(self, size: int) -> bytes:
        now = time.monotonic()
        out = bytearray()
        with self._lock:
            while self._pending and self._pending[0][0] <= now and len(out) < size:
                ready_at, chunk = self._pending.pop(0)
                room = size - len(out)
                out.extend(chunk[:room])
                if len(chunk) > room:
                    self._pending.insert(0, (ready_at, chunk[room:]))
        return bytes(out)

    def queue_response(self, data: bytes, delay: float = 0.0) -> None:
        """Make ``data`` readable ``delay`` seconds from now."""
        with self._lock:
            self._pending.append((time.monotonic() + delay, bytes(data)))
            self._pending.sort(key=lambda item: item[0])

    def get_write_log(self) -> List[bytes]:
        return self._write_log.copy()


class MockHC05Device(MockSerialDevice):
    """Mock HC-05 that answers WHOIS with a fixed reply.

    ``reply`` may be split into ``chunks`` delivered ``chunk_interval`` apart
    to mimic a slow link.
    """

    DEFAULT_REPLY = b"WHOIS ID=HC05-01;NAME=Sensor1\r\n"

    def __init__(
        self,
        reply: Optional[bytes] = DEFAULT_REPLY,
        config: Optional[MockSerialConfig] = None,
        reply_delay: float = 0.0,
        chunks: int = 1,
        chunk_interval: float = 0.01,
    ):
        super().__init__(config)
        self.reply = reply
        self.reply_delay = reply_delay
        self.chunks = max(1, chunks)
        self.chunk_interval = chunk_interval

    def write(self, data: bytes) -> int:
        written = super().write(data)
        if self.reply is not None and b"WHOIS" in data:
            step = max(1, -(-len(self.reply) // self.chunks))
            for index, start in enumerate(range(0, len(self.reply), step)):
                self.queue_response(
                    self.reply[start:start + step],
                    self.reply_delay + index * self.chunk_interval,
                )
        return written


class MockSerialFactory:
    """Callable replacing ``serial.Serial`` for a set of named ports.

    Tracks how many ports are open at once so tests can check the
    concurrency limit.
    """

    def __init__(self, devices: Optional[Dict[str, Callable[[], MockSerialDevice]]] = None):
        self._devices = dict(devices or {})
        self._lock = threading.Lock()
        self.open_errors: Dict[str, Exception] = {}
        self.calls: List[Dict[str, object]] = []
        self.opened: List[MockSerialDevice] = []
        self.currently_open = 0
        self.max_open = 0

    def add(self, port: str, builder: Callable[[], MockSerialDevice]) -> None:
        self._devices[port] = builder

    def __call__(self, port: str, baudrate: int = 9600, timeout: float = 0.05,
                 write_timeout: Optional[float] = None, **kwargs) -> MockSerialDevice:
        with self._lock:
            self.calls.append({"port": port, "baudrate": baudrate, "timeout": timeout,
                               "write_timeout": write_timeout})
        if port in self.open_errors:
            raise self.open_errors[port]
        builder = self._devices.get(port)
        if builder is None:
            raise serial.SerialException(f"could not open port {port}: [Errno 2] No such file or directory")

        device = builder()
        device.config.port = port
        device.config.baudrate = baudrate
        device.config.timeout = timeout
        device.config.write_timeout = write_timeout
        device.on_close = self._on_close
        with self._lock:
            self.opened.append(device)
            self.currently_open += 1
            self.max_open = max(self.max_open, self.currently_open)
        return device

    def _on_close(self, device: MockSerialDevice) -> None:
        with self._lock:
            self.currently_open -= 1


def make_port_lister(ports: List[MockPortInfo]) -> Callable[[], List[MockPortInfo]]:
    """Return a ``comports``-style callable yielding ``ports``."""
    return lambda: list(ports)
