"""
Core type definitions for HC-05 discovery.

These enums are shared by the prober, the orchestrator and the progress
sinks. Their values are the strings the host shell receives.
"""

from enum import Enum


class ScanStatus(str, Enum):
    """Lifecycle status reported for a single probed port."""
    SCANNING = "scanning"    # Probe started
    FOUND = "found"          # Device replied with a usable identity
    TIMEOUT = "timeout"      # No reply, or reply without the WHOIS prefix
    ERROR = "error"          # Open/write/read failure, or reply without an ID

    @property
    def is_terminal(self) -> bool:
        return self is not ScanStatus.SCANNING


class PortType(Enum):
    """Hardware class reported by port enumeration."""
    USB = "USB"
    PCI = "PCI"
    BLUETOOTH = "Bluetooth"
    UNKNOWN = "Unknown"      # Candidate for a serial bridge such as the HC-05
