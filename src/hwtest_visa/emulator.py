"""In-process VISA transport simulation.

Provides :class:`SimulatedTransport`, which implements the ``VisaTransport``
protocol without any VISA installation. Instruments are registered by
address; each one answers ``*IDN?`` and can be given canned replies or an
explicit sequence of read chunks. Failures can be injected per primitive.
"""

from __future__ import annotations

import itertools
from collections import deque
from dataclasses import dataclass, field

from pyvisa.constants import VI_ATTR_TMO_VALUE, StatusCode

from hwtest_visa.status import VI_SUCCESS, VI_SUCCESS_MAX_CNT

DEFAULT_TIMEOUT_MS = 2000

_OPERATIONS: frozenset[str] = frozenset({
    "open_default_rm",
    "open",
    "clear",
    "close",
    "write",
    "read",
    "read_stb",
    "get_attribute",
    "set_attribute",
})


# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------


@dataclass
class _Instrument:
    identity: str
    status_byte: int = 0
    replies: deque[bytes] = field(default_factory=deque)
    chunks: deque[tuple[bytes, int]] = field(default_factory=deque)
    current: bytes = b""
    written: list[bytes] = field(default_factory=list)
    clear_count: int = 0


@dataclass
class _Session:
    rm: int
    address: str
    attributes: dict[int, int] = field(
        default_factory=lambda: {VI_ATTR_TMO_VALUE: DEFAULT_TIMEOUT_MS}
    )


# ---------------------------------------------------------------------------
# Simulated transport
# ---------------------------------------------------------------------------


class SimulatedTransport:
    """In-process transport implementing ``VisaTransport``.

    Example:
        >>> sim = SimulatedTransport()
        >>> sim.add_instrument("GPIB0::22::INSTR", "ACME,MODEL,SN,1.0")
        >>> driver = VisaDriver(sim)
    """

    def __init__(self) -> None:
        self._instruments: dict[str, _Instrument] = {}
        self._rms: set[int] = set()
        self._sessions: dict[int, _Session] = {}
        self._handles = itertools.count(1)
        self._failures: dict[str, deque[int]] = {op: deque() for op in _OPERATIONS}

    # -- Scenario setup ------------------------------------------------------

    def add_instrument(self, address: str, identity: str = "SIM,INSTRUMENT,0,1.0") -> None:
        """Register an instrument reachable at *address*."""
        self._instruments[address] = _Instrument(identity=identity)

    def queue_reply(self, address: str, data: bytes) -> None:
        """Queue a complete reply message.

        The message is delivered in ``count``-sized chunks, each full chunk
        with ``VI_SUCCESS_MAX_CNT`` and the final one with ``VI_SUCCESS``.
        """
        self._instrument(address).replies.append(bytes(data))

    def queue_chunks(self, address: str, chunks: list[tuple[bytes, int]]) -> None:
        """Queue explicit ``(data, status)`` results for the next reads.

        Explicit chunks are returned as-is, ignoring the requested count.
        """
        self._instrument(address).chunks.extend((bytes(d), int(s)) for d, s in chunks)

    def set_status_byte(self, address: str, value: int) -> None:
        """Set the value returned by a serial poll."""
        self._instrument(address).status_byte = value

    def fail_next(self, operation: str, status: int) -> None:
        """Make the next call to *operation* return *status*.

        Raises:
            ValueError: If *operation* is not a transport primitive.
        """
        if operation not in _OPERATIONS:
            raise ValueError(f"Unknown transport operation: {operation!r}")
        self._failures[operation].append(int(status))

    # -- Inspection ----------------------------------------------------------

    def written(self, address: str) -> list[bytes]:
        """Return every payload written to the instrument at *address*."""
        return list(self._instrument(address).written)

    def clear_count(self, address: str) -> int:
        """Return how many times the instrument's buffers were cleared."""
        return self._instrument(address).clear_count

    @property
    def open_sessions(self) -> tuple[int, ...]:
        """Handles of the sessions that are currently open."""
        return tuple(self._sessions)

    @property
    def open_resource_managers(self) -> tuple[int, ...]:
        """Handles of the resource managers that are currently open."""
        return tuple(self._rms)

    # -- Transport interface -------------------------------------------------

    def open_default_rm(self) -> tuple[int, int]:
        failure = self._injected("open_default_rm")
        if failure is not None:
            return 0, failure
        rm = next(self._handles)
        self._rms.add(rm)
        return rm, VI_SUCCESS

    def open(self, rm: int, address: str) -> tuple[int, int]:
        failure = self._injected("open")
        if failure is not None:
            return 0, failure
        if rm not in self._rms:
            return 0, int(StatusCode.error_invalid_object)
        if address not in self._instruments:
            return 0, int(StatusCode.error_resource_not_found)
        session = next(self._handles)
        self._sessions[session] = _Session(rm=rm, address=address)
        return session, VI_SUCCESS

    def clear(self, session: int) -> int:
        failure = self._injected("clear")
        if failure is not None:
            return failure
        instrument = self._session_instrument(session)
        if instrument is None:
            return int(StatusCode.error_invalid_object)
        instrument.replies.clear()
        instrument.chunks.clear()
        instrument.current = b""
        instrument.clear_count += 1
        return VI_SUCCESS

    def close(self, handle: int) -> int:
        failure = self._injected("close")
        if failure is not None:
            return failure
        if handle in self._sessions:
            del self._sessions[handle]
            return VI_SUCCESS
        if handle in self._rms:
            self._rms.discard(handle)
            for session in [s for s, state in self._sessions.items() if state.rm == handle]:
                del self._sessions[session]
            return VI_SUCCESS
        return int(StatusCode.error_invalid_object)

    def write(self, session: int, data: bytes) -> tuple[int, int]:
        failure = self._injected("write")
        if failure is not None:
            return 0, failure
        instrument = self._session_instrument(session)
        if instrument is None:
            return 0, int(StatusCode.error_invalid_object)
        instrument.written.append(bytes(data))
        if data.strip().upper() == b"*IDN?":
            instrument.replies.append(instrument.identity.encode("ascii") + b"\n")
        return len(data), VI_SUCCESS

    def read(self, session: int, count: int) -> tuple[bytes, int]:
        failure = self._injected("read")
        if failure is not None:
            return b"", failure
        instrument = self._session_instrument(session)
        if instrument is None:
            return b"", int(StatusCode.error_invalid_object)
        if instrument.chunks:
            return instrument.chunks.popleft()
        if not instrument.current:
            if not instrument.replies:
                return b"", int(StatusCode.error_timeout)
            instrument.current = instrument.replies.popleft()
        data, instrument.current = instrument.current[:count], instrument.current[count:]
        return data, VI_SUCCESS_MAX_CNT if instrument.current else VI_SUCCESS

    def read_stb(self, session: int) -> tuple[int, int]:
        failure = self._injected("read_stb")
        if failure is not None:
            return 0, failure
        instrument = self._session_instrument(session)
        if instrument is None:
            return 0, int(StatusCode.error_invalid_object)
        return instrument.status_byte, VI_SUCCESS

    def get_attribute(self, session: int, attribute: int) -> tuple[int, int]:
        failure = self._injected("get_attribute")
        if failure is not None:
            return 0, failure
        state = self._sessions.get(session)
        if state is None:
            return 0, int(StatusCode.error_invalid_object)
        if attribute not in state.attributes:
            return 0, int(StatusCode.error_nonsupported_attribute)
        return state.attributes[attribute], VI_SUCCESS

    def set_attribute(self, session: int, attribute: int, value: int) -> int:
        failure = self._injected("set_attribute")
        if failure is not None:
            return failure
        state = self._sessions.get(session)
        if state is None:
            return int(StatusCode.error_invalid_object)
        state.attributes[attribute] = value
        return VI_SUCCESS

    # -- Private helpers -----------------------------------------------------

    def _instrument(self, address: str) -> _Instrument:
        try:
            return self._instruments[address]
        except KeyError:
            raise ValueError(f"No simulated instrument at {address!r}") from None

    def _session_instrument(self, session: int) -> _Instrument | None:
        state = self._sessions.get(session)
        if state is None:
            return None
        return self._instruments[state.address]

    def _injected(self, operation: str) -> int | None:
        queue = self._failures[operation]
        return queue.popleft() if queue else None
