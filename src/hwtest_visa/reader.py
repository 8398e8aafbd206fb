"""Reassembly of chunked VISA reads.

A VISA read returns at most ``count`` bytes. When a response is longer, the
call fills the buffer and reports ``VI_SUCCESS_MAX_CNT``; the remaining bytes
arrive on subsequent reads. :class:`ChunkedReader` loops until the message is
complete and returns the concatenation.

The receive buffer grows by exactly one chunk per iteration, so its capacity
is always a multiple of the chunk size and each read lands on a chunk
boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hwtest_visa.errors import Phase, VisaOutOfResourcesError
from hwtest_visa.status import StatusClass, check_status

if TYPE_CHECKING:
    from hwtest_visa.transport import VisaTransport
    from hwtest_visa.types import SessionHandle

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024
"""Chunk size for plain reads and text queries."""

BULK_CHUNK_SIZE = 1_000_000
"""Chunk size for large binary transfers."""


def _allocate(chunk_size: int) -> bytearray:
    """Return a zero-filled buffer of one chunk."""
    return bytearray(chunk_size)


def _grow(buffer: bytearray, chunk_size: int) -> None:
    """Extend *buffer* by one zero-filled chunk."""
    buffer.extend(bytes(chunk_size))


class ChunkedReader:
    """Reads one complete message from a session, one chunk at a time.

    Attributes:
        chunk_size: Maximum bytes requested per underlying read.

    Args:
        chunk_size: Bytes requested per read. Must be positive.

    Example:
        >>> reader = ChunkedReader(BULK_CHUNK_SIZE)
        >>> waveform = reader.read(transport, session)
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def read(self, transport: VisaTransport, session: SessionHandle) -> bytes:
        """Read until the transport signals the end of the message.

        The loop continues only while a read returns a full chunk together
        with ``VI_SUCCESS_MAX_CNT``. A short chunk or any other success code
        ends the message.

        Args:
            transport: The transport to read from.
            session: An open session handle.

        Returns:
            Exactly the bytes received, embedded NUL bytes included.

        Raises:
            VisaStatusError: If any read fails. Bytes already received are
                discarded.
            VisaOutOfResourcesError: If the buffer cannot be allocated or grown.
        """
        chunk_size = self.chunk_size
        try:
            buffer = _allocate(chunk_size)
        except MemoryError as exc:
            raise VisaOutOfResourcesError() from exc
        offset = 0
        chunks = 0
        while True:
            data, status = transport.read(session, chunk_size)
            chunks += 1
            result = check_status(status, Phase.READ)

            count = len(data)
            buffer[offset:offset + count] = data
            offset += count

            if count < chunk_size or result is not StatusClass.MORE_DATA:
                break

            try:
                _grow(buffer, chunk_size)
            except MemoryError as exc:
                raise VisaOutOfResourcesError() from exc

        logger.debug("Read %d bytes in %d chunk(s) from session %d", offset, chunks, session)
        del buffer[offset:]
        return bytes(buffer)


def read_last_chunk(transport: VisaTransport, session: SessionHandle, chunk_size: int) -> bytes:
    """Read a message into one fixed buffer, keeping only the final chunk.

    Full chunks are read again into the same buffer until a short chunk
    arrives, so earlier chunks of a long response are lost. This is the
    behavior of the identification query and differs from
    :meth:`ChunkedReader.read`, which reassembles the whole message.

    Args:
        transport: The transport to read from.
        session: An open session handle.
        chunk_size: Size of the fixed buffer.

    Returns:
        The bytes of the last chunk read.

    Raises:
        VisaStatusError: If any read fails.
    """
    while True:
        data, status = transport.read(session, chunk_size)
        check_status(status, Phase.READ)
        if len(data) < chunk_size:
            return bytes(data)
        logger.debug("Discarding full %d-byte chunk from session %d", chunk_size, session)
