"""Attempt Ledger - append-only, per-identity history of scored attempts.

This module provides the ledger interface and its storage backends,
decoupling the orchestrator from a specific persistence mechanism.

Design principles:
- Append-only: entries are never updated or deleted
- Per-identity locking: attempts for one identity serialize, different
  identities proceed in parallel
- Ledger-wide monotonically increasing entry ids
- Storage failures surface as LedgerUnavailable
"""

import fcntl
import hashlib
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from riskgate.common.constants import LedgerConstants
from riskgate.common.exceptions import LedgerIntegrityError, LedgerUnavailable
from riskgate.core.types import AttemptOutcome, RiskLevel
from riskgate.data.schemas.attempt import AttemptAttributes
from riskgate.data.schemas.ledger_entry import LedgerEntry


logger = logging.getLogger(__name__)


class AttemptLedger(ABC):
    """Abstract base class for ledger storage backends.

    ``lock(identity)`` returns a re-entrant lock. Callers that need a
    consistent read-then-append sequence hold it across both steps;
    ``history`` and ``append`` take it themselves as well.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()
        self._id_lock = threading.Lock()
        self._next_id = 1

    def lock(self, identity: str) -> threading.RLock:
        """Get the exclusive lock guarding one identity's history."""
        with self._registry_lock:
            identity_lock = self._locks.get(identity)
            if identity_lock is None:
                identity_lock = threading.RLock()
                self._locks[identity] = identity_lock
            return identity_lock

    def _allocate_id(self) -> int:
        with self._id_lock:
            entry_id = self._next_id
            self._next_id += 1
            return entry_id

    def append(
        self,
        attributes: AttemptAttributes,
        score: int,
        level: RiskLevel,
        outcome: AttemptOutcome,
        contributing_factors: Iterable[str] = (),
    ) -> LedgerEntry:
        """Append a new entry for the attempt's identity.

        Returns:
            The stored entry with its assigned id

        Raises:
            LedgerUnavailable: If the entry could not be persisted
        """
        with self.lock(attributes.identity):
            entry = LedgerEntry(
                entry_id=self._allocate_id(),
                attributes=attributes,
                score=score,
                level=level,
                outcome=outcome,
                contributing_factors=tuple(contributing_factors),
            )
            self._write(entry)
            logger.debug(
                "Ledger entry appended",
                extra={"entry_id": entry.entry_id, "outcome": outcome.value},
            )
            return entry

    def count(self, identity: str) -> int:
        """Number of entries recorded for an identity."""
        return len(self.history(identity))

    @abstractmethod
    def history(self, identity: str) -> Tuple[LedgerEntry, ...]:
        """Read-only snapshot of an identity's entries, oldest first.

        Raises:
            LedgerUnavailable: If the history cannot be read
        """

    @abstractmethod
    def identities(self) -> List[str]:
        """All identities with at least one entry."""

    @abstractmethod
    def _write(self, entry: LedgerEntry) -> None:
        """Persist one entry. Called with the identity lock held."""


class InMemoryLedger(AttemptLedger):
    """Process-local ledger. Contents are lost on restart."""

    def __init__(self) -> None:
        super().__init__()
        self._entries: Dict[str, List[LedgerEntry]] = {}

    def history(self, identity: str) -> Tuple[LedgerEntry, ...]:
        with self.lock(identity):
            return tuple(self._entries.get(identity, ()))

    def identities(self) -> List[str]:
        with self._registry_lock:
            return sorted(self._entries)

    def _write(self, entry: LedgerEntry) -> None:
        with self._registry_lock:
            self._entries.setdefault(entry.identity, []).append(entry)


class FileLedger(AttemptLedger):
    """File-based ledger with JSONL format and hash chain integrity.

    Features:
    - One append-only JSONL file per identity (file name is a digest of
      the identity, so addresses never appear in paths)
    - Per-identity hash chain for tamper detection
    - Atomic appends with file locking
    - Entry ids continue across restarts
    """

    def __init__(
        self,
        ledger_dir: str,
        enable_hash_chain: bool = True,
        hash_algorithm: str = LedgerConstants.HASH_ALGORITHM,
        fsync_on_write: bool = False,
    ):
        """Initialize file ledger.

        Args:
            ledger_dir: Directory for ledger files.
            enable_hash_chain: Whether to chain entry hashes per identity.
            hash_algorithm: Hash algorithm for integrity checks.
            fsync_on_write: Whether to fsync after each write (slower but safer).

        Raises:
            LedgerUnavailable: If the directory cannot be created or scanned
        """
        super().__init__()
        self.ledger_dir = Path(ledger_dir)
        self.enable_hash_chain = enable_hash_chain
        self.hash_algorithm = hash_algorithm
        self.fsync_on_write = fsync_on_write

        # Loaded lazily per identity
        self._cache: Dict[str, List[LedgerEntry]] = {}
        self._last_hash: Dict[str, Optional[str]] = {}

        try:
            self.ledger_dir.mkdir(parents=True, exist_ok=True)
            self._next_id = self._scan_max_entry_id() + 1
        except OSError as e:
            raise LedgerUnavailable(
                f"Ledger directory unavailable: {self.ledger_dir}",
                details={"error": str(e)},
            ) from e

    def _path_for(self, identity: str) -> Path:
        digest = hashlib.sha256(identity.encode("utf-8")).hexdigest()
        return self.ledger_dir / f"{digest}{LedgerConstants.FILE_SUFFIX}"

    def _compute_hash(self, content: str) -> str:
        """Compute hash of content using configured algorithm."""
        hasher = hashlib.new(self.hash_algorithm)
        hasher.update(content.encode("utf-8"))
        return hasher.hexdigest()

    def _hash_record(self, entry_dict: dict, previous_hash: Optional[str]) -> str:
        content = json.dumps(
            {"entry": entry_dict, "previous_hash": previous_hash},
            sort_keys=True,
            ensure_ascii=False,
        )
        return self._compute_hash(content)

    def _read_records(self, path: Path) -> Iterable[dict]:
        with open(path, "r") as f:
            for line in f:
                line = line.strip()
                if line:
                    yield json.loads(line)

    def _scan_max_entry_id(self) -> int:
        """Highest entry id on disk. Bad lines are skipped, later lines still count."""
        max_id = 0
        for path in self.ledger_dir.glob(f"*{LedgerConstants.FILE_SUFFIX}"):
            with open(path, "r") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entry_id = int(json.loads(line)["entry"]["entry_id"])
                    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                        logger.warning(
                            f"Malformed ledger line {line_number} in {path.name}: {e}"
                        )
                        continue
                    max_id = max(max_id, entry_id)
        return max_id

    def _load(self, identity: str) -> List[LedgerEntry]:
        """Load an identity's entries into the cache. Identity lock held."""
        cached = self._cache.get(identity)
        if cached is not None:
            return cached

        entries: List[LedgerEntry] = []
        last_hash: Optional[str] = None
        path = self._path_for(identity)

        if path.exists():
            with open(path, "r") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = json.loads(line)
                        entries.append(LedgerEntry.model_validate(record["entry"]))
                        last_hash = record.get("entry_hash")
                    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                        logger.error(
                            f"Malformed ledger entry at line {line_number}: {e}"
                        )
                        raise LedgerUnavailable(
                            "Attempt history is corrupt",
                            details={"line": line_number, "error": str(e)},
                        ) from e

        self._cache[identity] = entries
        self._last_hash[identity] = last_hash
        return entries

    def history(self, identity: str) -> Tuple[LedgerEntry, ...]:
        with self.lock(identity):
            try:
                return tuple(self._load(identity))
            except OSError as e:
                raise LedgerUnavailable(
                    "Could not read attempt history",
                    details={"error": str(e)},
                ) from e

    def identities(self) -> List[str]:
        found = set()
        try:
            for path in self.ledger_dir.glob(f"*{LedgerConstants.FILE_SUFFIX}"):
                for record in self._read_records(path):
                    found.add(record["entry"]["attributes"]["identity"])
                    break
        except (OSError, json.JSONDecodeError, KeyError) as e:
            raise LedgerUnavailable(
                "Could not list ledger identities", details={"error": str(e)}
            ) from e
        return sorted(found)

    def _write(self, entry: LedgerEntry) -> None:
        identity = entry.identity
        try:
            entries = self._load(identity)
            entry_dict = entry.model_dump(mode="json")
            record = {"entry": entry_dict}
            entry_hash = None
            if self.enable_hash_chain:
                previous_hash = self._last_hash.get(identity)
                entry_hash = self._hash_record(entry_dict, previous_hash)
                record["previous_hash"] = previous_hash
                record["entry_hash"] = entry_hash

            line = json.dumps(record, sort_keys=True, ensure_ascii=False) + "\n"

            # Append with file locking for cross-process safety
            fd = os.open(
                str(self._path_for(identity)),
                os.O_WRONLY | os.O_CREAT | os.O_APPEND,
                0o600,
            )
            try:
                fcntl.flock(fd, fcntl.LOCK_EX)
                try:
                    os.write(fd, line.encode("utf-8"))
                    if self.fsync_on_write:
                        os.fsync(fd)
                finally:
                    fcntl.flock(fd, fcntl.LOCK_UN)
            finally:
                os.close(fd)
        except OSError as e:
            logger.error(
                "Ledger append failed",
                extra={"entry_id": entry.entry_id, "error": str(e)},
            )
            raise LedgerUnavailable(
                "Could not persist attempt to ledger",
                details={"error": str(e)},
            ) from e

        entries.append(entry)
        self._last_hash[identity] = entry_hash

    def verify_integrity(self, identity: str) -> bool:
        """Verify the hash chain of one identity's file.

        Raises:
            LedgerIntegrityError: If the chain is broken or an entry was altered
        """
        if not self.enable_hash_chain:
            return True

        path = self._path_for(identity)
        if not path.exists():
            return True

        previous_hash = None
        with self.lock(identity), open(path, "r") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError as e:
                    raise LedgerIntegrityError(
                        f"Malformed JSON at line {line_number}: {e}"
                    ) from e

                if record.get("previous_hash") != previous_hash:
                    raise LedgerIntegrityError(
                        f"Hash chain broken at line {line_number}",
                        details={"line": line_number},
                    )

                computed = self._hash_record(record.get("entry"), previous_hash)
                if computed != record.get("entry_hash"):
                    raise LedgerIntegrityError(
                        f"Entry hash mismatch at line {line_number}. "
                        f"Entry may have been tampered with.",
                        details={"line": line_number},
                    )
                previous_hash = record["entry_hash"]

        return True
