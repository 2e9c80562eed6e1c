from .config_loader import ConfigLoader, load_scan_config, load_scan_config_async
from .logging_config import configure_logging
from .logging_utils import get_module_logger, StructuredLogger

__all__ = [
    'ConfigLoader',
    'load_scan_config',
    'load_scan_config_async',
    'configure_logging',
    'get_module_logger',
    'StructuredLogger',
]
