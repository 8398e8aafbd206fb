"""VISA status codes and their classification.

Every transport primitive returns a raw VISA status code. Operations in this
package classify the code into one of three outcomes:

- ``SUCCESS``: the call completed.
- ``MORE_DATA``: a read filled the caller's buffer and the device has more
  bytes for the same message (``VI_SUCCESS_MAX_CNT``).
- ``FAILURE``: any negative (error) code.

Only the chunked reader treats ``MORE_DATA`` differently from ``SUCCESS``.
"""

from __future__ import annotations

from enum import Enum

from pyvisa.constants import StatusCode

from hwtest_visa.errors import Phase, VisaStatusError

VI_SUCCESS: int = int(StatusCode.success)
VI_SUCCESS_MAX_CNT: int = int(StatusCode.success_max_count_read)


class StatusClass(Enum):
    """Three-way classification of a VISA status code."""

    SUCCESS = "success"
    MORE_DATA = "more_data"
    FAILURE = "failure"


def classify(status: int) -> StatusClass:
    """Classify a raw VISA status code.

    Args:
        status: The status returned by a transport call.

    Returns:
        The :class:`StatusClass` for *status*.
    """
    if status == VI_SUCCESS_MAX_CNT:
        return StatusClass.MORE_DATA
    if status < 0:
        return StatusClass.FAILURE
    return StatusClass.SUCCESS


def check_status(status: int, phase: Phase) -> StatusClass:
    """Raise for failure codes, otherwise return the classification.

    Args:
        status: The status returned by a transport call.
        phase: The phase to report if *status* is a failure.

    Returns:
        ``StatusClass.SUCCESS`` or ``StatusClass.MORE_DATA``.

    Raises:
        VisaStatusError: If *status* is a failure code.
    """
    result = classify(status)
    if result is StatusClass.FAILURE:
        raise VisaStatusError(phase, status)
    return result
