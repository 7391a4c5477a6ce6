#!/usr/bin/env python3
"""Main entry point for RiskGate."""

import uvicorn

from riskgate.common.logging import get_logger
from riskgate.common.config import get_config

logger = get_logger(__name__)


def main():
    """Main entry point."""
    config = get_config()
    logger.info(f"RiskGate starting in {config.environment.value} mode")
    logger.info(f"Ledger storage: {config.ledger_storage_type.value}")
    uvicorn.run(
        "riskgate.api.gateway:app",
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
