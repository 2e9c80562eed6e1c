"""Shared pytest configuration and fixtures for the HC-05 scanner test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "hardware: mark test as requiring physical hardware"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that require an HC-05 attached to this host",
    )


def pytest_collection_modifyitems(config, items):
    """Skip hardware tests unless --run-hardware is specified."""
    if config.getoption("--run-hardware"):
        return

    skip_hardware = pytest.mark.skip(reason="Need --run-hardware option to run")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fast_config():
    """ScanConfig with a short deadline so probes finish quickly."""
    from hc05_scan.core.devices import ScanConfig
    return ScanConfig(baud_rate=9600, timeout_ms=120, parallelism=4)


@pytest.fixture
def progress_events():
    """List collecting ScanProgress events, plus the sink appending to it."""
    events = []
    return events, events.append


@pytest.fixture
def serial_factory():
    """Empty MockSerialFactory; tests add ports to it."""
    from tests.infrastructure.mocks.serial_mocks import MockSerialFactory
    return MockSerialFactory()

