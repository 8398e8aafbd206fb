"""Default resource manager acquisition and release."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hwtest_visa.errors import Phase
from hwtest_visa.status import check_status
from hwtest_visa.types import ResourceManagerHandle

if TYPE_CHECKING:
    from hwtest_visa.transport import VisaTransport

logger = logging.getLogger(__name__)


def acquire(transport: VisaTransport) -> ResourceManagerHandle:
    """Open the transport's default resource manager.

    Args:
        transport: The VISA transport.

    Returns:
        Handle of the new resource manager context.

    Raises:
        VisaStatusError: If the VISA subsystem cannot be initialized.
    """
    rm, status = transport.open_default_rm()
    check_status(status, Phase.RESOURCE_MANAGER)
    logger.debug("Opened default resource manager %d", rm)
    return ResourceManagerHandle(rm)


def release(transport: VisaTransport, rm: ResourceManagerHandle) -> None:
    """Close a resource manager context.

    Sessions opened under *rm* should be closed first; VISA closes any that
    remain.

    Raises:
        VisaStatusError: If the transport rejects the close.
    """
    check_status(transport.close(rm), Phase.CLOSE)
    logger.debug("Closed resource manager %d", rm)
