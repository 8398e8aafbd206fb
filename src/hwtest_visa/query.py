"""Write-then-read queries.

Typical usage::

    from hwtest_visa.query import identify, write_read_bulk

    idn = identify(transport, session)
    waveform = write_read_bulk(transport, session, b"CURV?\\n")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hwtest_visa.reader import BULK_CHUNK_SIZE, DEFAULT_CHUNK_SIZE, ChunkedReader, read_last_chunk
from hwtest_visa.session import write
from hwtest_visa.types import InstrumentIdentity

if TYPE_CHECKING:
    from hwtest_visa.transport import VisaTransport
    from hwtest_visa.types import SessionHandle

IDN_QUERY = b"*IDN?\n"


def write_read(
    transport: VisaTransport,
    session: SessionHandle,
    command: bytes,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """Send *command* and read back the complete response.

    Args:
        transport: The VISA transport.
        session: An open session handle.
        command: Bytes to send verbatim (include any terminator).
        chunk_size: Bytes requested per underlying read.

    Returns:
        The reassembled response.

    Raises:
        VisaStatusError: With phase ``WRITE`` if the command could not be
            sent (no read is attempted), or ``READ`` if the response fails.
        VisaOutOfResourcesError: If the receive buffer cannot grow.
    """
    write(transport, session, command)
    return ChunkedReader(chunk_size).read(transport, session)


def write_read_bulk(transport: VisaTransport, session: SessionHandle, command: bytes) -> bytes:
    """:func:`write_read` with 1,000,000-byte chunks for large binary transfers."""
    return write_read(transport, session, command, BULK_CHUNK_SIZE)


def identify(transport: VisaTransport, session: SessionHandle) -> bytes:
    """Query the identification string (``*IDN?``).

    The response is read into a single 1024-byte buffer. A response that
    fills the buffer is read again until a short chunk arrives, and only
    that last chunk is returned. Use :func:`write_read` with ``b"*IDN?\\n"``
    to get a reassembled response instead.

    Returns:
        The raw response bytes, terminator included.
    """
    write(transport, session, IDN_QUERY)
    return read_last_chunk(transport, session, DEFAULT_CHUNK_SIZE)


def parse_idn_response(response: str) -> InstrumentIdentity:
    """Parse a ``*IDN?`` response into an :class:`InstrumentIdentity`.

    The standard format is four comma-separated fields::

        manufacturer,model,serial_number,firmware_version

    Fields beyond the fourth are joined into the firmware string.

    Raises:
        ValueError: If the response has fewer than four fields.
    """
    parts = [p.strip() for p in response.strip().split(",")]
    if len(parts) < 4:
        raise ValueError(
            f"Expected at least 4 comma-separated fields in *IDN? response, "
            f"got {len(parts)}: {response!r}"
        )
    return InstrumentIdentity(
        manufacturer=parts[0],
        model=parts[1],
        serial=parts[2],
        firmware=",".join(parts[3:]),
    )


def get_identity(transport: VisaTransport, session: SessionHandle) -> InstrumentIdentity:
    """Query and parse the instrument identification.

    Raises:
        VisaStatusError: If the query fails.
        ValueError: If the response is not a valid ``*IDN?`` reply.
    """
    return parse_idn_response(identify(transport, session).decode("ascii", errors="replace"))
