"""Handle and identifier types.

VISA hands out plain integers for both resource managers and instrument
sessions. Distinct ``NewType`` aliases keep the two from being mixed up;
raw integers are wrapped only where the transport returns them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

ResourceManagerHandle = NewType("ResourceManagerHandle", int)
"""Handle of an opened default resource manager."""

SessionHandle = NewType("SessionHandle", int)
"""Handle of one open instrument session."""

AttributeId = NewType("AttributeId", int)
"""Transport-defined attribute identifier (e.g. ``VI_ATTR_TMO_VALUE``)."""


@dataclass(frozen=True)
class InstrumentIdentity:
    """Instrument identification parsed from a ``*IDN?`` response.

    Attributes:
        manufacturer: Manufacturer name.
        model: Model name or number.
        serial: Serial number.
        firmware: Firmware version (may contain commas).
    """

    manufacturer: str
    model: str
    serial: str
    firmware: str
