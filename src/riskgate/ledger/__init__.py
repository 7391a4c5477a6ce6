"""Attempt ledger - storage backends and factory."""

from riskgate.ledger.store import AttemptLedger, InMemoryLedger, FileLedger
from riskgate.ledger.config import create_ledger

__all__ = [
    "AttemptLedger",
    "InMemoryLedger",
    "FileLedger",
    "create_ledger",
]
