"""Instrument session lifecycle and raw I/O.

A session is opened from a resource manager by address and must be closed
explicitly. Handles are not tracked for liveness: using a closed or unknown
handle is reported by the transport as a failure status.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pyvisa.constants import VI_ATTR_TMO_VALUE

from hwtest_visa.errors import Phase, VisaStatusError
from hwtest_visa.status import StatusClass, check_status, classify
from hwtest_visa.types import SessionHandle

if TYPE_CHECKING:
    from hwtest_visa.transport import VisaTransport
    from hwtest_visa.types import ResourceManagerHandle

logger = logging.getLogger(__name__)


def open_session(
    transport: VisaTransport,
    rm: ResourceManagerHandle,
    address: str,
    *,
    close_on_clear_failure: bool = True,
    timeout_ms: int | None = None,
) -> SessionHandle:
    """Open a session and clear the device's I/O buffers.

    The clear is part of opening: stale bytes left by a previous session
    would otherwise be returned by the first read. If the clear (or applying
    *timeout_ms*) fails, the new session is closed before the error is
    raised, unless *close_on_clear_failure* is False, in which case the
    session is left open and unreachable.

    Args:
        transport: The VISA transport.
        rm: An open resource manager handle.
        address: VISA resource address, passed through unparsed.
        close_on_clear_failure: Close the session if post-open setup fails.
        timeout_ms: I/O timeout applied after the clear, if given.

    Returns:
        Handle of the open session.

    Raises:
        VisaStatusError: With phase ``OPEN``, ``CLEAR`` or ``SET_TIMEOUT``.
    """
    raw, status = transport.open(rm, address)
    check_status(status, Phase.OPEN)
    session = SessionHandle(raw)

    try:
        check_status(transport.clear(session), Phase.CLEAR)
        if timeout_ms is not None:
            check_status(
                transport.set_attribute(session, VI_ATTR_TMO_VALUE, timeout_ms),
                Phase.SET_TIMEOUT,
            )
    except VisaStatusError:
        if close_on_clear_failure:
            close_quietly(transport, session)
        else:
            logger.warning("Leaving session %d to %s open after failed setup", session, address)
        raise

    logger.info("Opened session %d to %s", session, address)
    return session


def close_session(transport: VisaTransport, session: SessionHandle) -> None:
    """Close a session.

    Raises:
        VisaStatusError: If the handle is invalid or already closed.
    """
    check_status(transport.close(session), Phase.CLOSE)
    logger.info("Closed session %d", session)


def write(transport: VisaTransport, session: SessionHandle, data: bytes) -> None:
    """Send *data* to the instrument verbatim.

    No terminator is appended.

    Raises:
        VisaStatusError: If the write fails.
    """
    count, status = transport.write(session, data)
    check_status(status, Phase.WRITE)
    logger.debug("Wrote %d bytes to session %d", count, session)


def read_status_byte(transport: VisaTransport, session: SessionHandle) -> int:
    """Read the instrument's service request status byte.

    Raises:
        VisaStatusError: If the serial poll fails.
    """
    stb, status = transport.read_stb(session)
    check_status(status, Phase.STATUS_BYTE)
    return stb


def close_quietly(transport: VisaTransport, session: SessionHandle) -> None:
    """Close *session* during error handling, logging instead of raising.

    Used when another error is already propagating, so that a failed close
    does not replace it.
    """
    status = transport.close(session)
    if classify(status) is StatusClass.FAILURE:
        logger.warning("Failed to close session %d after setup error: %d", session, status)
