"""Discover HC-05 Bluetooth-serial bridges on unidentified serial ports."""

from __future__ import annotations

from importlib import metadata
from typing import Optional, Sequence

from .core.devices import (
    DeviceInfo,
    ScanConfig,
    ScanError,
    ScanProgress,
    ScanStatus,
    detect_hc05,
)

try:
    __version__ = metadata.version("hc05-scan")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev
    __version__ = "0.0.0"


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Convenience wrapper that runs the command line scanner."""
    from .cli.scan import main

    return main(list(argv) if argv is not None else None)


__all__ = [
    "__version__",
    "DeviceInfo",
    "ScanConfig",
    "ScanError",
    "ScanProgress",
    "ScanStatus",
    "detect_hc05",
    "run",
]
