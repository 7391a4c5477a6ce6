"""Credential Directory - verifies secrets for identities.

The core only depends on the ``CredentialDirectory`` protocol. The
in-memory implementation stores salted PBKDF2 hashes and is what the
HTTP shell and the tests use.
"""

import hashlib
import hmac
import os
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from riskgate.common.constants import CredentialConstants
from riskgate.common.exceptions import IdentityAlreadyRegistered, IdentityUnknown


class CredentialDirectory(Protocol):
    """Looks up identities and checks their secrets."""

    def verify(self, identity: str, secret: str) -> Optional[str]:
        """Return the matched identity, or None on mismatch."""
        ...

    def exists(self, identity: str) -> bool:
        ...


@dataclass(frozen=True)
class StoredCredential:
    identity: str
    display_name: Optional[str]
    salt: bytes
    digest: bytes


class InMemoryCredentialDirectory:
    """Thread-safe in-process credential store.

    Args:
        reveal_unknown_identities: Raise IdentityUnknown for unregistered
            identities instead of reporting a plain mismatch.
        iterations: PBKDF2 iteration count.
    """

    def __init__(
        self,
        reveal_unknown_identities: bool = False,
        iterations: int = CredentialConstants.PBKDF2_ITERATIONS,
    ):
        self.reveal_unknown_identities = reveal_unknown_identities
        self.iterations = iterations
        self._credentials: Dict[str, StoredCredential] = {}
        self._lock = threading.Lock()

    def _hash(self, secret: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac(
            CredentialConstants.HASH_NAME,
            secret.encode("utf-8"),
            salt,
            self.iterations,
        )

    def register(
        self,
        identity: str,
        secret: str,
        display_name: Optional[str] = None,
    ) -> StoredCredential:
        """Register a new identity.

        Raises:
            IdentityAlreadyRegistered: If the identity exists
        """
        salt = os.urandom(CredentialConstants.SALT_BYTES)
        credential = StoredCredential(
            identity=identity,
            display_name=display_name,
            salt=salt,
            digest=self._hash(secret, salt),
        )
        with self._lock:
            if identity in self._credentials:
                raise IdentityAlreadyRegistered(identity)
            self._credentials[identity] = credential
        return credential

    def exists(self, identity: str) -> bool:
        with self._lock:
            return identity in self._credentials

    def display_name(self, identity: str) -> Optional[str]:
        with self._lock:
            credential = self._credentials.get(identity)
        return credential.display_name if credential else None

    def verify(self, identity: str, secret: str) -> Optional[str]:
        with self._lock:
            credential = self._credentials.get(identity)

        if credential is None:
            if self.reveal_unknown_identities:
                raise IdentityUnknown(identity)
            return None

        candidate = self._hash(secret, credential.salt)
        if hmac.compare_digest(candidate, credential.digest):
            return credential.identity
        return None
