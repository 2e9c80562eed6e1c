"""
Serial port enumeration and candidate filtering.

Only ports whose hardware class cannot be identified are probed: USB, PCI
and native Bluetooth ports announce themselves, while an HC-05 bridged onto
a plain UART (or an RFCOMM binding) does not.
"""

from typing import Any, Callable, Iterable, List, Optional

import serial.tools.list_ports

from hc05_scan.core.logging_utils import get_module_logger
from .types import PortType

logger = get_module_logger("PortEnumerator")

PortLister = Callable[[], Iterable[Any]]

# Linux sysfs subsystem names reported by pyserial
_SUBSYSTEM_TYPES = {
    "usb": PortType.USB,
    "usb-serial": PortType.USB,
    "pci": PortType.PCI,
    "bluetooth": PortType.BLUETOOTH,
}

# Windows hardware id prefixes
_HWID_PREFIXES = (
    ("BTHENUM", PortType.BLUETOOTH),
    ("USB", PortType.USB),
    ("FTDIBUS", PortType.USB),
    ("PCI", PortType.PCI),
)


def classify_port(port_info: Any) -> PortType:
    """Return the hardware class of a pyserial ``ListPortInfo``."""
    if getattr(port_info, "vid", None) is not None:
        return PortType.USB

    subsystem = getattr(port_info, "subsystem", None)
    if subsystem:
        port_type = _SUBSYSTEM_TYPES.get(str(subsystem).lower())
        if port_type is not None:
            return port_type

    hwid = str(getattr(port_info, "hwid", "") or "").upper()
    for prefix, port_type in _HWID_PREFIXES:
        if hwid.startswith(prefix):
            return port_type

    return PortType.UNKNOWN


def list_candidate_ports(port_lister: Optional[PortLister] = None) -> List[str]:
    """Return names of enumerated ports of unknown type, in enumeration order.

    ``port_lister`` defaults to pyserial's ``comports``. Its errors propagate
    to the caller.
    """
    lister = port_lister or serial.tools.list_ports.comports
    candidates: List[str] = []
    for port_info in lister():
        name = getattr(port_info, "device", None)
        if not name:
            continue
        port_type = classify_port(port_info)
        if port_type is PortType.UNKNOWN:
            candidates.append(name)
        else:
            logger.debug("Skipping %s (%s)", name, port_type.value)
    return candidates


__all__ = ["PortLister", "classify_port", "list_candidate_ports"]
