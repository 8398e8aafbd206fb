"""Handle-based VISA driver.

:class:`VisaDriver` binds a transport and a configuration and exposes every
driver operation as a method taking plain handles, which is the surface a
command-dispatch layer calls into.

Typical usage::

    from hwtest_visa import VisaDriver

    driver = VisaDriver()
    rm = driver.acquire_resource_manager()
    with driver.session(rm, "TCPIP::192.168.1.100::INSTR") as session:
        driver.set_timeout(session, 5000)
        print(driver.identify(session))
        waveform = driver.write_read_bulk(session, b"CURV?\\n")
    driver.release_resource_manager(rm)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from hwtest_visa import attributes, query, resource_manager
from hwtest_visa import session as sessions
from hwtest_visa.config import VisaConfig
from hwtest_visa.reader import DEFAULT_CHUNK_SIZE, ChunkedReader
from hwtest_visa.visa import PyVisaTransport

if TYPE_CHECKING:
    from hwtest_visa.transport import VisaTransport
    from hwtest_visa.types import (
        AttributeId,
        InstrumentIdentity,
        ResourceManagerHandle,
        SessionHandle,
    )


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("ascii")
    return bytes(data)


class VisaDriver:
    """Session-oriented VISA driver.

    All methods block until the transport answers or the session timeout
    expires. A session must not be used from more than one thread at a time.

    Attributes:
        transport: The underlying transport.
        config: The active configuration.

    Args:
        transport: Transport to use. Defaults to a :class:`PyVisaTransport`
            for ``config.backend``.
        config: Driver configuration. Defaults to :class:`VisaConfig()`.
    """

    def __init__(
        self,
        transport: VisaTransport | None = None,
        config: VisaConfig | None = None,
    ) -> None:
        self.config = config or VisaConfig()
        self.transport: VisaTransport = transport or PyVisaTransport(self.config.backend)

    # -- Resource manager ----------------------------------------------------

    def acquire_resource_manager(self) -> ResourceManagerHandle:
        """Open the default resource manager."""
        return resource_manager.acquire(self.transport)

    def release_resource_manager(self, rm: ResourceManagerHandle) -> None:
        """Close a resource manager."""
        resource_manager.release(self.transport, rm)

    # -- Session lifecycle ---------------------------------------------------

    def open_session(self, rm: ResourceManagerHandle, address: str) -> SessionHandle:
        """Open a session to *address* and clear its I/O buffers.

        The configured timeout, if any, is applied before returning.
        """
        return sessions.open_session(
            self.transport,
            rm,
            address,
            close_on_clear_failure=self.config.close_on_clear_failure,
            timeout_ms=self.config.timeout_ms,
        )

    def close_session(self, session: SessionHandle) -> None:
        """Close a session."""
        sessions.close_session(self.transport, session)

    @contextmanager
    def session(self, rm: ResourceManagerHandle, address: str) -> Iterator[SessionHandle]:
        """Open a session for the duration of a ``with`` block.

        The session is closed on exit. When the block raises, a failing close
        is logged and the block's exception propagates unchanged.
        """
        handle = self.open_session(rm, address)
        try:
            yield handle
        except BaseException:
            sessions.close_quietly(self.transport, handle)
            raise
        self.close_session(handle)

    # -- I/O -----------------------------------------------------------------

    def write(self, session: SessionHandle, data: bytes | str) -> None:
        """Send *data* verbatim. ``str`` is encoded as ASCII."""
        sessions.write(self.transport, session, _as_bytes(data))

    def read(self, session: SessionHandle) -> bytes:
        """Read one complete message in 1024-byte chunks."""
        return ChunkedReader(DEFAULT_CHUNK_SIZE).read(self.transport, session)

    def write_read(self, session: SessionHandle, command: bytes | str) -> bytes:
        """Send *command* and read the full response in 1024-byte chunks."""
        return query.write_read(self.transport, session, _as_bytes(command))

    def write_read_bulk(self, session: SessionHandle, command: bytes | str) -> bytes:
        """Send *command* and read the full response in 1,000,000-byte chunks."""
        return query.write_read_bulk(self.transport, session, _as_bytes(command))

    def identify(self, session: SessionHandle) -> bytes:
        """Query ``*IDN?``, returning only the last chunk of a long reply."""
        return query.identify(self.transport, session)

    def get_identity(self, session: SessionHandle) -> InstrumentIdentity:
        """Query and parse ``*IDN?``."""
        return query.get_identity(self.transport, session)

    def read_status_byte(self, session: SessionHandle) -> int:
        """Read the service request status byte."""
        return sessions.read_status_byte(self.transport, session)

    # -- Attributes ----------------------------------------------------------

    def get_attribute(self, session: SessionHandle, attribute: AttributeId) -> int:
        """Read an attribute value."""
        return attributes.get_attribute(self.transport, session, attribute)

    def set_attribute(self, session: SessionHandle, attribute: AttributeId, value: int) -> None:
        """Write an attribute value."""
        attributes.set_attribute(self.transport, session, attribute, value)

    def get_timeout(self, session: SessionHandle) -> int:
        """Return the I/O timeout in milliseconds."""
        return attributes.get_timeout(self.transport, session)

    def set_timeout(self, session: SessionHandle, millis: int) -> None:
        """Set the I/O timeout in milliseconds."""
        attributes.set_timeout(self.transport, session, millis)
