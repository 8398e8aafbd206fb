"""VISA transport protocol definition.

This module defines the :class:`VisaTransport` protocol: the primitives the
driver layer needs from an underlying VISA implementation. Every primitive
returns the raw VISA status code instead of raising, so the driver decides
how each code is classified and reported.

Implementations include:
- :class:`hwtest_visa.visa.PyVisaTransport`: pyvisa's low-level library
- :class:`hwtest_visa.emulator.SimulatedTransport`: in-process simulation
"""

from __future__ import annotations

from typing import Protocol


class VisaTransport(Protocol):
    """Protocol for the low-level VISA primitives.

    Handles cross this boundary as plain integers. The driver modules wrap
    them in :mod:`hwtest_visa.types` handles.
    """

    def open_default_rm(self) -> tuple[int, int]:
        """Open the default resource manager.

        Returns:
            ``(rm_handle, status)``.
        """
        ...

    def open(self, rm: int, address: str) -> tuple[int, int]:
        """Open a session to *address* under resource manager *rm*.

        Returns:
            ``(session_handle, status)``.
        """
        ...

    def clear(self, session: int) -> int:
        """Clear the device's input and output buffers."""
        ...

    def close(self, handle: int) -> int:
        """Close a session or resource manager handle."""
        ...

    def write(self, session: int, data: bytes) -> tuple[int, int]:
        """Write *data* verbatim.

        Returns:
            ``(bytes_written, status)``.
        """
        ...

    def read(self, session: int, count: int) -> tuple[bytes, int]:
        """Read at most *count* bytes.

        Returns:
            ``(data, status)``. ``status`` is ``VI_SUCCESS_MAX_CNT`` when
            *count* bytes were read and the message continues.
        """
        ...

    def read_stb(self, session: int) -> tuple[int, int]:
        """Read the service request status byte.

        Returns:
            ``(status_byte, status)``.
        """
        ...

    def get_attribute(self, session: int, attribute: int) -> tuple[int, int]:
        """Read an attribute value.

        Returns:
            ``(value, status)``.
        """
        ...

    def set_attribute(self, session: int, attribute: int, value: int) -> int:
        """Write an attribute value."""
        ...
