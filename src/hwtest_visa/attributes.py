"""Session attribute access.

Attribute ids and values pass through unvalidated. The timeout accessors
are the same mechanism bound to ``VI_ATTR_TMO_VALUE`` (milliseconds).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pyvisa.constants import VI_ATTR_TMO_VALUE

from hwtest_visa.errors import Phase
from hwtest_visa.status import check_status
from hwtest_visa.types import AttributeId

if TYPE_CHECKING:
    from hwtest_visa.transport import VisaTransport
    from hwtest_visa.types import SessionHandle

TIMEOUT_ATTRIBUTE = AttributeId(VI_ATTR_TMO_VALUE)


def get_attribute(transport: VisaTransport, session: SessionHandle, attribute: AttributeId) -> int:
    """Read an attribute value.

    Raises:
        VisaStatusError: If the transport rejects the attribute or handle.
    """
    return _get(transport, session, attribute, Phase.GET_ATTRIBUTE)


def set_attribute(
    transport: VisaTransport, session: SessionHandle, attribute: AttributeId, value: int
) -> None:
    """Write an attribute value.

    Raises:
        VisaStatusError: If the transport rejects the attribute, value or handle.
    """
    check_status(transport.set_attribute(session, attribute, value), Phase.SET_ATTRIBUTE)


def get_timeout(transport: VisaTransport, session: SessionHandle) -> int:
    """Return the session's I/O timeout in milliseconds."""
    return _get(transport, session, TIMEOUT_ATTRIBUTE, Phase.GET_TIMEOUT)


def set_timeout(transport: VisaTransport, session: SessionHandle, millis: int) -> None:
    """Set the session's I/O timeout in milliseconds."""
    check_status(transport.set_attribute(session, TIMEOUT_ATTRIBUTE, millis), Phase.SET_TIMEOUT)


def _get(transport: VisaTransport, session: SessionHandle, attribute: int, phase: Phase) -> int:
    value, status = transport.get_attribute(session, attribute)
    check_status(status, phase)
    return value
