"""Tests for PyVisaTransport with a mocked VISA library."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from pyvisa.constants import StatusCode
from pyvisa.errors import VisaIOError

from hwtest_visa.attributes import get_attribute
from hwtest_visa.errors import Phase, VisaStatusError
from hwtest_visa.types import AttributeId, SessionHandle
from hwtest_visa.visa import PyVisaTransport

SUCCESS = StatusCode.success


def _make_mock_library() -> MagicMock:
    """Create a mock pyvisa VisaLibraryBase with successful defaults."""
    lib = MagicMock()
    lib.open_default_resource_manager.return_value = (1, SUCCESS)
    lib.open.return_value = (2, SUCCESS)
    lib.clear.return_value = SUCCESS
    lib.close.return_value = SUCCESS
    lib.write.return_value = (5, SUCCESS)
    lib.read.return_value = (b"hello", SUCCESS)
    lib.read_stb.return_value = (0x40, SUCCESS)
    lib.get_attribute.return_value = (2000, SUCCESS)
    lib.set_attribute.return_value = SUCCESS
    return lib


def _loaded(lib: MagicMock, backend: str = "") -> PyVisaTransport:
    transport = PyVisaTransport(backend)
    with patch("hwtest_visa.visa.open_visa_library", return_value=lib):
        transport.open_default_rm()
    return transport


# ---------------------------------------------------------------------------
# Library loading
# ---------------------------------------------------------------------------


class TestLibraryLoading:
    """Tests for lazy library loading."""

    def test_not_loaded_initially(self) -> None:
        transport = PyVisaTransport("@py")
        assert not transport.is_loaded
        assert transport.backend == "@py"

    def test_loads_backend_on_open_default_rm(self) -> None:
        lib = _make_mock_library()
        transport = PyVisaTransport("@py")
        with patch("hwtest_visa.visa.open_visa_library", return_value=lib) as loader:
            assert transport.open_default_rm() == (1, 0)
        loader.assert_called_once_with("@py")
        assert transport.is_loaded

    def test_loads_only_once(self) -> None:
        lib = _make_mock_library()
        transport = PyVisaTransport()
        with patch("hwtest_visa.visa.open_visa_library", return_value=lib) as loader:
            transport.open_default_rm()
            transport.open_default_rm()
        loader.assert_called_once()

    def test_missing_library_reported_as_status(self) -> None:
        transport = PyVisaTransport()
        with patch("hwtest_visa.visa.open_visa_library", side_effect=OSError("no visa")):
            rm, status = transport.open_default_rm()
        assert rm == 0
        assert status == StatusCode.error_library_not_found
        assert not transport.is_loaded

    def test_unknown_backend_reported_as_status(self) -> None:
        transport = PyVisaTransport("@nope")
        with patch("hwtest_visa.visa.open_visa_library", side_effect=ValueError("bad")):
            _, status = transport.open_default_rm()
        assert status == StatusCode.error_library_not_found


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


class TestPrimitives:
    """Tests for delegation to the VISA library."""

    def test_open_delegates(self) -> None:
        lib = _make_mock_library()
        transport = _loaded(lib)
        assert transport.open(1, "GPIB0::22::INSTR") == (2, 0)
        lib.open.assert_called_once_with(1, "GPIB0::22::INSTR")

    def test_write_passes_bytes(self) -> None:
        lib = _make_mock_library()
        transport = _loaded(lib)
        assert transport.write(2, b"*IDN?\n") == (5, 0)
        lib.write.assert_called_once_with(2, b"*IDN?\n")

    def test_read_returns_data_and_status(self) -> None:
        lib = _make_mock_library()
        lib.read.return_value = (b"abcd", StatusCode.success_max_count_read)
        transport = _loaded(lib)
        assert transport.read(2, 4) == (b"abcd", int(StatusCode.success_max_count_read))
        lib.read.assert_called_once_with(2, 4)

    def test_clear_close_read_stb(self) -> None:
        lib = _make_mock_library()
        transport = _loaded(lib)
        assert transport.clear(2) == 0
        assert transport.read_stb(2) == (0x40, 0)
        assert transport.close(2) == 0

    def test_attributes(self) -> None:
        lib = _make_mock_library()
        transport = _loaded(lib)
        assert transport.get_attribute(2, 0x3FFF001A) == (2000, 0)
        assert transport.set_attribute(2, 0x3FFF001A, 5000) == 0
        lib.set_attribute.assert_called_once_with(2, 0x3FFF001A, 5000)


class TestVisaIOErrorConversion:
    """Tests for converting raised VisaIOError into status codes."""

    def test_read_error(self) -> None:
        lib = _make_mock_library()
        lib.read.side_effect = VisaIOError(int(StatusCode.error_timeout))
        transport = _loaded(lib)
        assert transport.read(2, 1024) == (b"", int(StatusCode.error_timeout))

    def test_write_error(self) -> None:
        lib = _make_mock_library()
        lib.write.side_effect = VisaIOError(int(StatusCode.error_io))
        transport = _loaded(lib)
        assert transport.write(2, b"x") == (0, int(StatusCode.error_io))

    def test_open_error(self) -> None:
        lib = _make_mock_library()
        lib.open.side_effect = VisaIOError(int(StatusCode.error_resource_not_found))
        transport = _loaded(lib)
        assert transport.open(1, "GPIB0::1::INSTR") == (0, int(StatusCode.error_resource_not_found))

    def test_close_and_clear_errors(self) -> None:
        lib = _make_mock_library()
        lib.close.side_effect = VisaIOError(int(StatusCode.error_invalid_object))
        lib.clear.side_effect = VisaIOError(int(StatusCode.error_invalid_object))
        transport = _loaded(lib)
        assert transport.close(99) == int(StatusCode.error_invalid_object)
        assert transport.clear(99) == int(StatusCode.error_invalid_object)

    def test_attribute_errors(self) -> None:
        lib = _make_mock_library()
        lib.get_attribute.side_effect = VisaIOError(int(StatusCode.error_nonsupported_attribute))
        lib.set_attribute.side_effect = VisaIOError(int(StatusCode.error_nonsupported_attribute))
        transport = _loaded(lib)
        assert transport.get_attribute(2, 1) == (0, int(StatusCode.error_nonsupported_attribute))
        assert transport.set_attribute(2, 1, 1) == int(StatusCode.error_nonsupported_attribute)

    def test_session_call_without_library(self) -> None:
        transport = PyVisaTransport()
        with patch("hwtest_visa.visa.open_visa_library", side_effect=OSError("no visa")):
            assert transport.read(2, 16) == (b"", int(StatusCode.error_library_not_found))


class TestUnsupportedAttributes:
    """Tests for attribute ids and values pyvisa cannot handle."""

    def test_unknown_attribute_id_on_get(self) -> None:
        lib = _make_mock_library()
        lib.get_attribute.side_effect = KeyError(0x3FFF0FFF)
        transport = _loaded(lib)
        assert transport.get_attribute(2, 0x3FFF0FFF) == (
            0,
            int(StatusCode.error_nonsupported_attribute),
        )

    def test_unknown_attribute_id_on_set(self) -> None:
        lib = _make_mock_library()
        lib.set_attribute.side_effect = KeyError(0x3FFF0FFF)
        transport = _loaded(lib)
        assert transport.set_attribute(2, 0x3FFF0FFF, 1) == int(
            StatusCode.error_nonsupported_attribute
        )

    def test_non_integer_value(self) -> None:
        lib = _make_mock_library()
        lib.get_attribute.return_value = ("TCPIP0::host::INSTR", SUCCESS)
        transport = _loaded(lib)
        assert transport.get_attribute(2, 0xBFFF0002) == (
            0,
            int(StatusCode.error_nonsupported_attribute),
        )

    def test_surfaces_as_get_attribute_error(self) -> None:
        lib = _make_mock_library()
        lib.get_attribute.side_effect = KeyError(0x3FFF0FFF)
        transport = _loaded(lib)
        with pytest.raises(VisaStatusError) as exc_info:
            get_attribute(transport, SessionHandle(1), AttributeId(0x3FFF0FFF))
        assert exc_info.value.phase is Phase.GET_ATTRIBUTE
        assert exc_info.value.status == StatusCode.error_nonsupported_attribute
