"""Root conftest.py for hwtest-visa.

Makes the ``src`` layout importable without installation and provides the
fixtures shared by the unit tests.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config

PROJECT_ROOT = Path(__file__).parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from hwtest_visa.driver import VisaDriver  # noqa: E402
from hwtest_visa.emulator import SimulatedTransport  # noqa: E402

SIM_ADDRESS = "GPIB0::22::INSTR"
SIM_IDENTITY = "ACME,MODEL,SN,1.0"


def pytest_configure(config: Config) -> None:
    """Register custom markers.

    Args:
        config: pytest configuration object.
    """
    config.addinivalue_line(
        "markers",
        "uses_mock: Test uses mocking",
    )
    config.addinivalue_line(
        "markers",
        "integration: Integration test requiring real hardware",
    )


@pytest.fixture
def sim() -> SimulatedTransport:
    """A simulated transport with one instrument at ``SIM_ADDRESS``."""
    transport = SimulatedTransport()
    transport.add_instrument(SIM_ADDRESS, SIM_IDENTITY)
    return transport


@pytest.fixture
def driver(sim: SimulatedTransport) -> VisaDriver:
    """A driver bound to the ``sim`` transport."""
    return VisaDriver(sim)
