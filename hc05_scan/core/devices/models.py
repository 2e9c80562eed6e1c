"""Data model for HC-05 discovery: configuration, progress and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .types import ScanStatus

DEFAULT_BAUD_RATE = 9600
DEFAULT_TIMEOUT_MS = 400
DEFAULT_PARALLELISM = 4

# Host shells send camelCase keys; Python callers use snake_case
_CONFIG_KEY_ALIASES = {
    "baudRate": "baud_rate",
    "timeoutMs": "timeout_ms",
}


@dataclass(frozen=True)
class ScanConfig:
    """Settings shared read-only by every probe of one scan.

    ``parallelism`` is coerced to at least 1, so a configured 0 still
    lets one probe run at a time.
    """
    baud_rate: int = DEFAULT_BAUD_RATE
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    parallelism: int = DEFAULT_PARALLELISM

    def __post_init__(self) -> None:
        for name in ("baud_rate", "timeout_ms", "parallelism"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.baud_rate <= 0:
            raise ValueError(f"baud_rate must be positive, got {self.baud_rate}")
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be non-negative, got {self.timeout_ms}")
        if self.parallelism < 1:
            object.__setattr__(self, "parallelism", 1)

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "ScanConfig":
        """Build a config from snake_case or camelCase keys, ignoring unknown ones."""
        kwargs: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            name = _CONFIG_KEY_ALIASES.get(key, key)
            if name in ("baud_rate", "timeout_ms", "parallelism") and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, int]:
        return {
            "baud_rate": self.baud_rate,
            "timeout_ms": self.timeout_ms,
            "parallelism": self.parallelism,
        }


@dataclass(frozen=True)
class ScanProgress:
    """One lifecycle notification for one port."""
    port: str
    status: ScanStatus

    def to_dict(self) -> Dict[str, str]:
        return {"port": self.port, "status": self.status.value}


@dataclass
class DeviceInfo:
    """Identity reported by a device that answered the WHOIS query."""
    port: str
    id: str
    name: Optional[str] = None
    org: Optional[str] = None
    fw: Optional[str] = None
    raw: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "port": self.port,
            "id": self.id,
            "name": self.name,
            "org": self.org,
            "fw": self.fw,
            "raw": dict(self.raw),
        }


__all__ = [
    "DEFAULT_BAUD_RATE",
    "DEFAULT_TIMEOUT_MS",
    "DEFAULT_PARALLELISM",
    "ScanConfig",
    "ScanProgress",
    "DeviceInfo",
]
