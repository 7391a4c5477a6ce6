"""Notifier - out-of-band delivery of verification codes."""

import logging
from typing import Any, Dict, Protocol

from riskgate.common.logging import mask_identity
from riskgate.core.types import DeliveryStatus


logger = logging.getLogger(__name__)


class Notifier(Protocol):

    def send(self, identity: str, payload: Dict[str, Any]) -> DeliveryStatus:
        ...


class LoggingNotifier:
    """Mock delivery that only writes a log line.

    The code stays out of INFO logs; development setups read it at
    ``DEBUG`` level.
    """

    def send(self, identity: str, payload: Dict[str, Any]) -> DeliveryStatus:
        logger.info(
            "Mock notification sent",
            extra={"recipient": mask_identity(identity), "kind": payload.get("kind")},
        )
        logger.debug(f"Mock notification payload for {mask_identity(identity)}: {payload}")
        return DeliveryStatus.DELIVERED
