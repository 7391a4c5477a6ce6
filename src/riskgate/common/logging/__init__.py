"""Logging helpers."""

from riskgate.common.logging.logger import get_logger, mask_identity

__all__ = ["get_logger", "mask_identity"]
