"""pyvisa-backed VISA transport.

This module adapts pyvisa's low-level VISA library (the object found at
``ResourceManager().visalib``) to the :class:`VisaTransport` protocol. The
library is loaded lazily on first use so that constructing a driver never
touches the VISA installation.

pyvisa backends raise :class:`pyvisa.errors.VisaIOError` for error codes
instead of returning them. The adapter converts those exceptions back into
raw status codes so that the driver sees one uniform contract.

Backend specifications follow pyvisa: ``""`` for the system VISA library,
``"@py"`` for pyvisa-py, ``"@sim"`` for pyvisa-sim.
"""

from __future__ import annotations

import logging
from typing import Any

from pyvisa.constants import StatusCode
from pyvisa.errors import VisaIOError
from pyvisa.highlevel import open_visa_library

logger = logging.getLogger(__name__)


class PyVisaTransport:
    """VISA transport backed by pyvisa's low-level library.

    Implements the :class:`hwtest_visa.transport.VisaTransport` protocol.

    Attributes:
        backend: The pyvisa backend specification.
        is_loaded: Whether the VISA library has been loaded.

    Args:
        backend: pyvisa backend specification (e.g. ``"@py"``). Defaults to
            the system VISA library.

    Example:
        >>> transport = PyVisaTransport("@py")
        >>> rm, status = transport.open_default_rm()
        >>> session, status = transport.open(rm, "TCPIP::192.168.1.100::INSTR")
    """

    def __init__(self, backend: str = "") -> None:
        self._backend = backend
        self._library: Any = None

    # -- Properties ----------------------------------------------------------

    @property
    def backend(self) -> str:
        """The pyvisa backend specification."""
        return self._backend

    @property
    def is_loaded(self) -> bool:
        """Return True once the VISA library has been loaded."""
        return self._library is not None

    # -- Transport interface -------------------------------------------------

    def open_default_rm(self) -> tuple[int, int]:
        """Load the VISA library if needed and open the default resource manager.

        A library that cannot be found or loaded is reported as
        ``VI_ERROR_LIBRARY_NFOUND`` rather than raised.
        """
        try:
            rm, status = self._lib().open_default_resource_manager()
        except VisaIOError as exc:
            return 0, exc.error_code
        return int(rm), int(status)

    def open(self, rm: int, address: str) -> tuple[int, int]:
        try:
            session, status = self._lib().open(rm, address)
        except VisaIOError as exc:
            return 0, exc.error_code
        return int(session), int(status)

    def clear(self, session: int) -> int:
        try:
            return int(self._lib().clear(session))
        except VisaIOError as exc:
            return exc.error_code

    def close(self, handle: int) -> int:
        try:
            return int(self._lib().close(handle))
        except VisaIOError as exc:
            return exc.error_code

    def write(self, session: int, data: bytes) -> tuple[int, int]:
        try:
            count, status = self._lib().write(session, data)
        except VisaIOError as exc:
            return 0, exc.error_code
        return int(count), int(status)

    def read(self, session: int, count: int) -> tuple[bytes, int]:
        try:
            data, status = self._lib().read(session, count)
        except VisaIOError as exc:
            return b"", exc.error_code
        return bytes(data), int(status)

    def read_stb(self, session: int) -> tuple[int, int]:
        try:
            stb, status = self._lib().read_stb(session)
        except VisaIOError as exc:
            return 0, exc.error_code
        return int(stb), int(status)

    def get_attribute(self, session: int, attribute: int) -> tuple[int, int]:
        """Read an attribute value.

        Attribute ids unknown to pyvisa and values that are not integers are
        reported as ``VI_ERROR_NSUP_ATTR``.
        """
        try:
            value, status = self._lib().get_attribute(session, attribute)
            return int(value), int(status)
        except VisaIOError as exc:
            return 0, exc.error_code
        except (KeyError, ValueError, TypeError) as exc:
            logger.debug("Unsupported attribute 0x%X on session %d: %r", attribute, session, exc)
            return 0, int(StatusCode.error_nonsupported_attribute)

    def set_attribute(self, session: int, attribute: int, value: int) -> int:
        try:
            return int(self._lib().set_attribute(session, attribute, value))
        except VisaIOError as exc:
            return exc.error_code
        except (KeyError, ValueError, TypeError) as exc:
            logger.debug("Unsupported attribute 0x%X on session %d: %r", attribute, session, exc)
            return int(StatusCode.error_nonsupported_attribute)

    # -- Private helpers -----------------------------------------------------

    def _lib(self) -> Any:
        """Return the VISA library, loading it on first use.

        Raises:
            VisaIOError: With ``VI_ERROR_LIBRARY_NFOUND`` if the backend cannot
                be loaded, so every primitive reports it as a status code.
        """
        if self._library is None:
            try:
                self._library = open_visa_library(self._backend)
            except (OSError, ValueError) as exc:
                logger.error("Failed to load VISA library %r: %s", self._backend, exc)
                raise VisaIOError(int(StatusCode.error_library_not_found)) from exc
        return self._library
