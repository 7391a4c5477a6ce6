"""Ledger factory - builds the configured storage backend."""

import logging
from typing import Optional

from riskgate.common.config import Config, LedgerStorageType, get_config
from riskgate.ledger.store import AttemptLedger, FileLedger, InMemoryLedger


logger = logging.getLogger(__name__)


def create_ledger(config: Optional[Config] = None) -> AttemptLedger:
    """Factory method to create a ledger based on configuration.

    Args:
        config: Settings to use. Falls back to the global configuration.

    Returns:
        Configured AttemptLedger instance
    """
    config = config or get_config()

    if config.ledger_storage_type == LedgerStorageType.FILE:
        logger.info(f"Using file ledger at {config.ledger_dir}")
        return FileLedger(
            ledger_dir=str(config.ledger_dir),
            fsync_on_write=config.ledger_fsync,
        )

    if config.is_production:
        logger.warning("In-memory ledger in production: history is lost on restart")
    return InMemoryLedger()
