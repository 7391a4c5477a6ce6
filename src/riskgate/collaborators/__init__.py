"""External collaborators - protocols and reference implementations."""

from riskgate.collaborators.directory import (
    CredentialDirectory,
    InMemoryCredentialDirectory,
    StoredCredential,
)
from riskgate.collaborators.geolocation import GeoResolver, ResolvedOrigin, StaticGeoResolver
from riskgate.collaborators.notifier import Notifier, LoggingNotifier
from riskgate.collaborators.device import parse_user_agent

__all__ = [
    "CredentialDirectory",
    "InMemoryCredentialDirectory",
    "StoredCredential",
    "GeoResolver",
    "ResolvedOrigin",
    "StaticGeoResolver",
    "Notifier",
    "LoggingNotifier",
    "parse_user_agent",
]
