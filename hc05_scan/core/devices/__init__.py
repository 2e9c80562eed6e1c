"""
HC-05 device discovery.

This package probes unidentified serial ports with the WHOIS query and
collects the identities of the Bluetooth-serial bridges that answer.
"""

from .types import ScanStatus, PortType
from .models import (
    DEFAULT_BAUD_RATE,
    DEFAULT_TIMEOUT_MS,
    DEFAULT_PARALLELISM,
    ScanConfig,
    ScanProgress,
    DeviceInfo,
)
from .whois_protocol import (
    encode_query,
    parse_response,
    decode_reply,
    extract_fields,
)
from .progress import (
    PROGRESS_EVENT,
    ProgressSink,
    null_sink,
    LoggingProgressSink,
    QueueProgressSink,
)
from .port_enumerator import classify_port, list_candidate_ports
from .port_prober import PortProber, probe_port
from .hc05_scanner import ScanError, HC05Scanner, detect_hc05

__all__ = [
    # Types
    'ScanStatus',
    'PortType',

    # Models
    'DEFAULT_BAUD_RATE',
    'DEFAULT_TIMEOUT_MS',
    'DEFAULT_PARALLELISM',
    'ScanConfig',
    'ScanProgress',
    'DeviceInfo',

    # Protocol
    'encode_query',
    'parse_response',
    'decode_reply',
    'extract_fields',

    # Progress
    'PROGRESS_EVENT',
    'ProgressSink',
    'null_sink',
    'LoggingProgressSink',
    'QueueProgressSink',

    # Scanning
    'classify_port',
    'list_candidate_ports',
    'PortProber',
    'probe_port',
    'ScanError',
    'HC05Scanner',
    'detect_hc05',
]
