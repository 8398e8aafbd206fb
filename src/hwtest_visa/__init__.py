"""Session-oriented VISA driver for hwtest instrument automation.

This package talks to laboratory instruments over a VISA transport (GPIB,
USB, serial, TCP/LAN). It includes:

- Resource manager acquisition and session open/close
- Raw write, and raw read with reassembly of chunked responses
- Write-then-read queries, including a bulk variant for binary transfers
- Attribute access, with timeout convenience accessors
- Translation of VISA status codes into exceptions
- A pyvisa-backed transport and an in-process simulated transport

Typical usage::

    from hwtest_visa import VisaDriver

    driver = VisaDriver()
    rm = driver.acquire_resource_manager()
    session = driver.open_session(rm, "GPIB0::22::INSTR")
    print(driver.identify(session))
    driver.close_session(session)
    driver.release_resource_manager(rm)
"""

from hwtest_visa.config import VisaConfig
from hwtest_visa.driver import VisaDriver
from hwtest_visa.emulator import SimulatedTransport
from hwtest_visa.errors import Phase, VisaError, VisaOutOfResourcesError, VisaStatusError
from hwtest_visa.query import parse_idn_response
from hwtest_visa.reader import BULK_CHUNK_SIZE, DEFAULT_CHUNK_SIZE, ChunkedReader
from hwtest_visa.status import VI_SUCCESS, VI_SUCCESS_MAX_CNT, StatusClass, check_status, classify
from hwtest_visa.transport import VisaTransport
from hwtest_visa.types import AttributeId, InstrumentIdentity, ResourceManagerHandle, SessionHandle
from hwtest_visa.visa import PyVisaTransport

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Driver
    "VisaDriver",
    "VisaConfig",
    # Transports
    "PyVisaTransport",
    "SimulatedTransport",
    "VisaTransport",
    # Reading
    "BULK_CHUNK_SIZE",
    "ChunkedReader",
    "DEFAULT_CHUNK_SIZE",
    # Status
    "StatusClass",
    "VI_SUCCESS",
    "VI_SUCCESS_MAX_CNT",
    "check_status",
    "classify",
    # Types
    "AttributeId",
    "InstrumentIdentity",
    "ResourceManagerHandle",
    "SessionHandle",
    "parse_idn_response",
    # Errors
    "Phase",
    "VisaError",
    "VisaOutOfResourcesError",
    "VisaStatusError",
]
