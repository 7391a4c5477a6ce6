"""Centralized logging configuration."""

import logging


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def mask_identity(identity: str) -> str:
    """Mask an identity for log output (``alice@example.com`` -> ``a***@example.com``)."""
    local, sep, domain = identity.partition("@")
    if not local:
        return "***"
    return f"{local[0]}***{sep}{domain}"
