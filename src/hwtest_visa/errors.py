"""Exception types for hwtest-visa.

All exceptions raised by this package inherit from :class:`VisaError`, so a
caller can catch every driver failure with a single except clause.

Exception hierarchy:
    VisaError (base)
    +-- VisaStatusError: The transport returned a failure status code
    +-- VisaOutOfResourcesError: A local buffer could not be allocated
"""

from __future__ import annotations

from enum import Enum


class Phase(Enum):
    """The operation phase that produced a transport failure.

    The value is the human-readable label embedded in error messages.
    """

    RESOURCE_MANAGER = "resource manager"
    OPEN = "open"
    CLEAR = "clear"
    CLOSE = "close"
    WRITE = "write"
    READ = "read"
    STATUS_BYTE = "status byte"
    GET_ATTRIBUTE = "get attribute"
    SET_ATTRIBUTE = "set attribute"
    GET_TIMEOUT = "get timeout"
    SET_TIMEOUT = "set timeout"


class VisaError(Exception):
    """Base exception for all hwtest-visa errors."""


class VisaStatusError(VisaError):
    """Raised when a transport call returns a failure status.

    The raw VISA status code is preserved so callers can compare it against
    :class:`pyvisa.constants.StatusCode` members.

    Attributes:
        phase: Which operation failed.
        status: The raw (negative) VISA status code.

    Example:
        >>> try:
        ...     driver.read(session)
        ... except VisaStatusError as e:
        ...     if e.status == StatusCode.error_timeout:
        ...         print("instrument did not answer")
    """

    def __init__(self, phase: Phase, status: int) -> None:
        """Initialize the status error.

        Args:
            phase: The operation phase that failed.
            status: The raw VISA status code.
        """
        self.phase = phase
        self.status = int(status)
        super().__init__(f"VISA {phase.value} error: {self.status}")


class VisaOutOfResourcesError(VisaError):
    """Raised when the receive buffer cannot grow.

    This is a local resource failure with no device interaction behind it,
    so it does not derive from :class:`VisaStatusError`.
    """

    def __init__(self, message: str = "Out of memory") -> None:
        super().__init__(message)
