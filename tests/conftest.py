"""Shared fixtures for RiskGate tests."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple

import pytest

from riskgate.collaborators import InMemoryCredentialDirectory
from riskgate.core.types import AttemptOutcome, DeliveryStatus, RiskLevel
from riskgate.data.schemas import AttemptAttributes, EnvironmentAttributes, LedgerEntry
from riskgate.engine import FixedJitter, RiskScorer
from riskgate.ledger import InMemoryLedger
from riskgate.orchestration import Authenticator


ALICE = "alice@example.com"
ALICE_SECRET = "correct horse battery staple"
BOB = "bob@example.com"
BOB_SECRET = "hunter2"

HOME_DEVICE = "Chrome on Windows"
HOME_ADDRESS = "198.51.100.10"
HOME_LOCATION = "Lisbon, Portugal"


def utc(year, month, day, hour=0, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now

    def set(self, moment: datetime) -> datetime:
        self.now = moment
        return self.now


class RecordingNotifier:
    """Notifier fake that keeps every payload it was asked to send."""

    def __init__(self, status: DeliveryStatus = DeliveryStatus.DELIVERED):
        self.status = status
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    def send(self, identity: str, payload: Dict[str, Any]) -> DeliveryStatus:
        self.sent.append((identity, payload))
        return self.status

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]["code"]


@pytest.fixture
def clock():
    """Clock starting mid-morning UTC, outside the nocturnal window."""
    return FakeClock(utc(2026, 1, 25, 10, 0, 0))


@pytest.fixture
def home_env():
    return EnvironmentAttributes(
        network_address=HOME_ADDRESS,
        device_signature=HOME_DEVICE,
        location=HOME_LOCATION,
    )


@pytest.fixture
def travel_env():
    return EnvironmentAttributes(
        network_address="203.0.113.77",
        device_signature="Firefox on Linux",
        location="Reykjavik, Iceland",
    )


@pytest.fixture
def make_attempt():
    """Factory for AttemptAttributes with home defaults."""
    def _make(
        timestamp: datetime,
        identity: str = ALICE,
        device: str = HOME_DEVICE,
        address: str = HOME_ADDRESS,
        location: str = HOME_LOCATION,
    ) -> AttemptAttributes:
        return AttemptAttributes(
            identity=identity,
            network_address=address,
            device_signature=device,
            location=location,
            timestamp=timestamp,
        )
    return _make


@pytest.fixture
def make_entry(make_attempt):
    """Factory for LedgerEntry values, for feeding the scorer directly."""
    def _make(
        entry_id: int,
        timestamp: datetime,
        identity: str = ALICE,
        device: str = HOME_DEVICE,
        address: str = HOME_ADDRESS,
        score: int = 0,
        outcome: AttemptOutcome = AttemptOutcome.ALLOWED,
    ) -> LedgerEntry:
        return LedgerEntry(
            entry_id=entry_id,
            attributes=make_attempt(timestamp, identity=identity, device=device, address=address),
            score=score,
            level=RiskLevel.LOW,
            outcome=outcome,
        )
    return _make


@pytest.fixture
def scorer():
    """Scorer with jitter pinned to zero."""
    return RiskScorer(jitter=FixedJitter(0))


@pytest.fixture
def ledger():
    return InMemoryLedger()


@pytest.fixture
def directory():
    """Directory with Alice and Bob registered (cheap hashing for tests)."""
    directory = InMemoryCredentialDirectory(iterations=1000)
    directory.register(ALICE, ALICE_SECRET, display_name="Alice")
    directory.register(BOB, BOB_SECRET, display_name="Bob")
    return directory


@pytest.fixture
def authenticator(directory, ledger, scorer, clock):
    return Authenticator(directory=directory, ledger=ledger, scorer=scorer, clock=clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()
