import asyncio
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import aiofiles

from hc05_scan.core.devices.models import ScanConfig
from hc05_scan.core.logging_utils import get_module_logger

logger = get_module_logger("ConfigLoader")

SCAN_CONFIG_DEFAULTS: Dict[str, Any] = ScanConfig().to_dict()


class ConfigLoader:
    """Loader for ``key = value`` config files.

    Blank lines and ``#`` comments are skipped, inline comments stripped.
    Values are typed against ``defaults`` when the key is known there.
    """

    @staticmethod
    async def load_async(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        config = defaults.copy() if defaults else {}

        if not await asyncio.to_thread(config_path.exists):
            logger.debug("Config file not found at %s, using defaults", config_path)
            return config

        try:
            async with aiofiles.open(config_path, 'r', encoding='utf-8') as f:
                lines = await f.readlines()
        except OSError as e:
            logger.error("Failed to read config %s: %s", config_path, e)
            return config

        config.update(ConfigLoader._parse_lines(lines, defaults, strict))
        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        config = defaults.copy() if defaults else {}

        if not config_path.exists():
            logger.debug("Config file not found at %s, using defaults", config_path)
            return config

        logger.debug("Loading config from: %s", config_path)

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except OSError as e:
            logger.error("Failed to read config %s: %s", config_path, e)
            return config

        config.update(ConfigLoader._parse_lines(lines, defaults, strict))
        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def _parse_lines(
        lines: Iterable[str],
        defaults: Optional[Dict[str, Any]],
        strict: bool
    ) -> Dict[str, Any]:
        parsed: Dict[str, Any] = {}
        for line_num, line in enumerate(lines, 1):
            line = line.strip()

            if not line or line.startswith('#'):
                continue

            if '=' not in line:
                logger.warning("Invalid config line %d (missing '='): %s", line_num, line)
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.split('#', 1)[0].strip()

            if strict and defaults is not None and key not in defaults:
                logger.warning(
                    "Unknown config key '%s' (line %d) - ignored in strict mode",
                    key, line_num
                )
                continue

            if defaults and key in defaults:
                parsed[key] = ConfigLoader._parse_value_with_type(value, type(defaults[key]), defaults[key])
            else:
                parsed[key] = ConfigLoader._parse_value(value)
        return parsed

    @staticmethod
    def _parse_value(value: str) -> Any:
        value_lower = value.lower()
        if value_lower in ('true', 'false', 'yes', 'no', 'on', 'off'):
            return value_lower in ('true', 'yes', 'on')

        try:
            return int(value, 0)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type, fallback: Any = None) -> Any:
        if target_type == bool:
            return value.lower() in ('true', 'yes', 'on', '1')

        if target_type is int:
            try:
                return int(value, 0)  # decimal, hex (0x...), octal (0o...), binary (0b...)
            except ValueError:
                logger.warning("Failed to parse '%s' as int, keeping %r", value, fallback)
                return fallback if fallback is not None else 0

        if target_type is float:
            try:
                return float(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as float, keeping %r", value, fallback)
                return fallback if fallback is not None else 0.0

        return value


_SCAN_CONFIG_KEYS = set(SCAN_CONFIG_DEFAULTS) | {"baudRate", "timeoutMs"}


def _to_scan_config(values: Dict[str, Any], config_path: Path) -> ScanConfig:
    for key in values:
        if key not in _SCAN_CONFIG_KEYS:
            logger.warning("Unknown scan setting '%s' in %s - ignored", key, config_path)
    return ScanConfig.from_mapping(values)


def load_scan_config(config_path: Optional[Path]) -> ScanConfig:
    """Read a ScanConfig from ``config_path``.

    A missing file gives the defaults. Both ``baud_rate`` and ``baudRate``
    spellings are accepted. Raises ValueError for out-of-range values.
    """
    if config_path is None:
        return ScanConfig()
    path = Path(config_path)
    return _to_scan_config(ConfigLoader.load(path), path)


async def load_scan_config_async(config_path: Optional[Path]) -> ScanConfig:
    """Async version of load_scan_config() reading through aiofiles."""
    if config_path is None:
        return ScanConfig()
    path = Path(config_path)
    return _to_scan_config(await ConfigLoader.load_async(path), path)


__all__ = [
    "SCAN_CONFIG_DEFAULTS",
    "ConfigLoader",
    "load_scan_config",
    "load_scan_config_async",
]
