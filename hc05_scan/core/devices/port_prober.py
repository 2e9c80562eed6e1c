"""
Single-port WHOIS probe.

A probe opens one port, writes the query, collects bytes until the response
deadline passes and classifies the outcome. It blocks for the whole deadline,
so the scanner runs each probe on a worker thread.

Outcomes:
    found    - reply carried an ID, a DeviceInfo is returned
    timeout  - nothing (or nothing starting with WHOIS) arrived in time
    error    - open/write/read failed, or the WHOIS reply had no ID
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple

import serial

from hc05_scan.core.logging_utils import get_module_logger
from .models import DeviceInfo, ScanConfig, ScanProgress
from .progress import ProgressSink, safe_emit
from .types import ScanStatus
from .whois_protocol import (
    FIELD_FW,
    FIELD_ID,
    FIELD_NAME,
    FIELD_ORG,
    decode_reply,
    encode_query,
    extract_fields,
)

logger = get_module_logger("PortProber")

# Bounds each read call so the poll loop notices the deadline promptly
READ_TIMEOUT_S = 0.05
CHUNK_SIZE = 256

SerialFactory = Callable[..., Any]


class PortProber:
    """Runs WHOIS probes with one shared configuration.

    Usage:
        prober = PortProber(ScanConfig(timeout_ms=400), progress_sink=print)
        device = prober.probe("/dev/rfcomm0")
    """

    def __init__(
        self,
        config: ScanConfig,
        progress_sink: Optional[ProgressSink] = None,
        serial_factory: Optional[SerialFactory] = None,
    ):
        self.config = config
        self._progress_sink = progress_sink
        self._serial_factory = serial_factory

    def _emit(self, port_name: str, status: ScanStatus) -> None:
        safe_emit(self._progress_sink, ScanProgress(port_name, status))

    def _open(self, port_name: str):
        factory = self._serial_factory or serial.Serial
        return factory(
            port=port_name,
            baudrate=self.config.baud_rate,
            timeout=READ_TIMEOUT_S,
            write_timeout=READ_TIMEOUT_S,
        )

    def probe(self, port_name: str) -> Optional[DeviceInfo]:
        """Probe ``port_name`` once. Returns the device or None.

        Port failures end in an ``error`` status rather than an exception.
        """
        self._emit(port_name, ScanStatus.SCANNING)

        try:
            port = self._open(port_name)
        except (serial.SerialException, OSError, ValueError) as e:
            logger.debug("Cannot open %s: %s", port_name, e)
            self._emit(port_name, ScanStatus.ERROR)
            return None
        except Exception as e:
            logger.warning("Unexpected error opening %s: %r", port_name, e)
            self._emit(port_name, ScanStatus.ERROR)
            return None

        status, device = ScanStatus.ERROR, None
        try:
            status, device = self._exchange(port, port_name)
        finally:
            self._close(port, port_name)
            self._emit(port_name, status)
        return device

    def _close(self, port, port_name: str) -> None:
        # a link dropping after the reply must not discard the outcome
        try:
            port.close()
        except (serial.SerialException, OSError) as e:
            logger.debug("Closing %s failed: %s", port_name, e)

    def _exchange(self, port, port_name: str) -> Tuple[ScanStatus, Optional[DeviceInfo]]:
        try:
            port.write(encode_query())
        except (serial.SerialException, OSError) as e:
            logger.debug("Write to %s failed: %s", port_name, e)
            return ScanStatus.ERROR, None

        buffer = self._collect(port, port_name)
        if buffer is None:
            return ScanStatus.ERROR, None

        response = decode_reply(buffer)
        fields = extract_fields(response)
        if fields is None:
            if response:
                logger.debug("Unrecognised reply on %s: %r", port_name, response[:64])
            return ScanStatus.TIMEOUT, None

        device_id = fields.get(FIELD_ID)
        if device_id is None:
            logger.warning("WHOIS reply on %s has no %s field: %r", port_name, FIELD_ID, response[:64])
            return ScanStatus.ERROR, None

        device = DeviceInfo(
            port=port_name,
            id=device_id,
            name=fields.get(FIELD_NAME),
            org=fields.get(FIELD_ORG),
            fw=fields.get(FIELD_FW),
            raw=fields,
        )
        logger.info("Found %s on %s", device.id, port_name)
        return ScanStatus.FOUND, device

    def _collect(self, port, port_name: str) -> Optional[bytearray]:
        """Read until the deadline; None means a read failed."""
        deadline = time.monotonic() + self.config.timeout_s
        buffer = bytearray()
        while time.monotonic() < deadline:
            try:
                chunk = port.read(CHUNK_SIZE)
            except (serial.SerialException, OSError) as e:
                logger.debug("Read from %s failed: %s", port_name, e)
                return None
            # an empty read is pyserial's per-read timeout, keep polling
            if chunk:
                buffer.extend(chunk)
        return buffer


def probe_port(
    port_name: str,
    config: ScanConfig,
    progress_sink: Optional[ProgressSink] = None,
    serial_factory: Optional[SerialFactory] = None,
) -> Optional[DeviceInfo]:
    """Convenience wrapper running a single probe."""
    return PortProber(config, progress_sink, serial_factory).probe(port_name)


__all__ = ["READ_TIMEOUT_S", "CHUNK_SIZE", "PortProber", "probe_port"]
