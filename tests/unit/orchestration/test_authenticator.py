"""Unit tests for the Authentication Orchestrator.

The orchestrator is the only writer of scored attempts; these tests pin
when it writes, what it writes and how it reports each outcome.
"""

import threading
from datetime import datetime, timezone

import pytest

from riskgate.collaborators import InMemoryCredentialDirectory
from riskgate.common.constants import FactorNames
from riskgate.common.exceptions import (
    IdentityUnknown,
    InvalidCredentials,
    LedgerUnavailable,
    RiskBlocked,
)
from riskgate.core.types import AttemptOutcome, AttemptState, RiskLevel
from riskgate.data.schemas import EnvironmentAttributes
from riskgate.engine import FixedJitter, RiskScorer
from riskgate.ledger import InMemoryLedger
from riskgate.orchestration import FLAGGED_WARNING, Authenticator


ALICE = "alice@example.com"
ALICE_SECRET = "correct horse battery staple"
BOB = "bob@example.com"
BOB_SECRET = "hunter2"


def utc(hour, minute=0, second=0):
    return datetime(2026, 1, 25, hour, minute, second, tzinfo=timezone.utc)


class FailingLedger(InMemoryLedger):
    """Ledger whose storage rejects every write."""

    def _write(self, entry):
        raise LedgerUnavailable("storage offline")


class TestCredentialGate:

    def test_wrong_secret_records_nothing(self, authenticator, ledger, home_env):
        with pytest.raises(InvalidCredentials) as exc_info:
            authenticator.attempt(ALICE, "wrong", home_env)

        assert exc_info.value.code == "INVALID_CREDENTIALS"
        assert ledger.count(ALICE) == 0

    def test_unknown_identity_is_plain_mismatch(self, authenticator, ledger, home_env):
        with pytest.raises(InvalidCredentials):
            authenticator.attempt("nobody@example.com", "whatever", home_env)
        assert ledger.identities() == []

    def test_unknown_identity_revealed_when_configured(self, ledger, scorer, clock, home_env):
        directory = InMemoryCredentialDirectory(reveal_unknown_identities=True, iterations=1000)
        authenticator = Authenticator(directory, ledger, scorer=scorer, clock=clock)

        with pytest.raises(IdentityUnknown):
            authenticator.attempt("nobody@example.com", "whatever", home_env)
        assert ledger.identities() == []


class TestDecisions:

    def test_first_attempt_is_allowed(self, authenticator, ledger, home_env):
        outcome = authenticator.attempt(ALICE, ALICE_SECRET, home_env)

        assert outcome.score == 0
        assert outcome.level == RiskLevel.LOW
        assert outcome.outcome == AttemptOutcome.ALLOWED
        assert outcome.session_established is True
        assert outcome.warning is None
        assert outcome.state == AttemptState.SESSION_GRANTED

        entry = ledger.history(ALICE)[-1]
        assert entry.entry_id == outcome.entry_id
        assert entry.timestamp == utc(10)
        assert entry.attributes.device_signature == home_env.device_signature

    def test_new_environment_is_flagged_with_warning(
        self, authenticator, ledger, clock, home_env, travel_env
    ):
        authenticator.attempt(ALICE, ALICE_SECRET, home_env)
        clock.advance(2 * 3600)

        outcome = authenticator.attempt(ALICE, ALICE_SECRET, travel_env)

        assert outcome.score == 60
        assert outcome.outcome == AttemptOutcome.FLAGGED
        assert outcome.session_established is True
        assert outcome.warning == FLAGGED_WARNING
        assert outcome.contributing_factors == (
            FactorNames.NEW_DEVICE,
            FactorNames.NEW_NETWORK,
        )
        assert ledger.history(ALICE)[-1].outcome == AttemptOutcome.FLAGGED

    def test_high_risk_is_blocked_and_recorded(
        self, authenticator, ledger, clock, home_env, travel_env
    ):
        clock.set(utc(2, 59, 30))
        authenticator.attempt(ALICE, ALICE_SECRET, home_env)
        clock.set(utc(3, 0, 0))

        with pytest.raises(RiskBlocked) as exc_info:
            authenticator.attempt(ALICE, ALICE_SECRET, travel_env)

        blocked = exc_info.value
        assert blocked.score == 85
        assert blocked.code == "RISK_BLOCKED"
        assert blocked.contributing_factors == (
            FactorNames.NEW_DEVICE,
            FactorNames.NEW_NETWORK,
            FactorNames.UNUSUAL_HOUR,
            FactorNames.VELOCITY,
        )

        history = ledger.history(ALICE)
        assert len(history) == 2
        assert history[-1].entry_id == blocked.entry_id
        assert history[-1].outcome == AttemptOutcome.BLOCKED
        assert history[-1].level == RiskLevel.HIGH

    def test_blocked_attempt_counts_as_history(
        self, authenticator, clock, home_env, travel_env
    ):
        clock.set(utc(2, 59, 30))
        authenticator.attempt(ALICE, ALICE_SECRET, home_env)
        clock.set(utc(3, 0, 0))
        with pytest.raises(RiskBlocked):
            authenticator.attempt(ALICE, ALICE_SECRET, travel_env)

        clock.set(utc(12))
        outcome = authenticator.attempt(ALICE, ALICE_SECRET, travel_env)

        assert outcome.score == 0

    def test_each_attempt_adds_exactly_one_entry(self, authenticator, ledger, clock, home_env):
        for n in range(1, 4):
            authenticator.attempt(ALICE, ALICE_SECRET, home_env)
            clock.advance(600)
            assert ledger.count(ALICE) == n


class TestLedgerFailure:

    def test_no_session_when_ledger_write_fails(self, directory, scorer, clock, home_env):
        ledger = FailingLedger()
        authenticator = Authenticator(directory, ledger, scorer=scorer, clock=clock)

        with pytest.raises(LedgerUnavailable):
            authenticator.attempt(ALICE, ALICE_SECRET, home_env)

        assert ledger.count(ALICE) == 0


class TestIsolationAndDeterminism:

    def test_identities_do_not_share_history(
        self, authenticator, clock, home_env, travel_env
    ):
        authenticator.attempt(ALICE, ALICE_SECRET, home_env)
        clock.advance(10)

        # Bob's first attempt: Alice's recent login must not trigger velocity
        outcome = authenticator.attempt(BOB, BOB_SECRET, travel_env)

        assert outcome.score == 0
        assert outcome.contributing_factors == ()

    def test_replay_with_pinned_jitter_is_deterministic(
        self, directory, clock, home_env, travel_env
    ):
        def run():
            ledger = InMemoryLedger()
            scorer = RiskScorer(jitter=FixedJitter(3, 7, 1))
            clock.set(utc(10))
            authenticator = Authenticator(directory, ledger, scorer=scorer, clock=clock)
            scores = []
            for env in (home_env, travel_env, home_env):
                scores.append(authenticator.attempt(ALICE, ALICE_SECRET, env).score)
                clock.advance(3600)
            return scores

        first = run()
        assert first == run()
        assert first == [3, 67, 1]


class TestConcurrency:

    def test_parallel_attempts_for_one_identity_see_each_other(
        self, authenticator, ledger
    ):
        # Clock does not move: every attempt after the first is a velocity hit
        results = []
        results_lock = threading.Lock()

        def worker(n):
            env = EnvironmentAttributes(
                network_address=f"192.0.2.{n}",
                device_signature=f"Device {n}",
                location="Somewhere",
            )
            try:
                outcome = authenticator.attempt(ALICE, ALICE_SECRET, env)
                result = outcome.score
            except RiskBlocked as e:
                result = e.score
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == [0] + [70] * 7
        history = ledger.history(ALICE)
        assert len(history) == 8
        assert [e.entry_id for e in history] == list(range(1, 9))

    def test_timestamp_taken_inside_identity_lock(self, directory, ledger, scorer, home_env):
        lock_free_at_stamp = []

        def try_lock():
            identity_lock = ledger.lock(ALICE)
            acquired = identity_lock.acquire(blocking=False)
            if acquired:
                identity_lock.release()
            lock_free_at_stamp.append(acquired)

        def clock():
            # Another thread cannot take the identity lock while we stamp
            other = threading.Thread(target=try_lock)
            other.start()
            other.join()
            return utc(10)

        Authenticator(directory, ledger, scorer=scorer, clock=clock).attempt(
            ALICE, ALICE_SECRET, home_env
        )

        assert lock_free_at_stamp == [False]

    def test_racing_attempt_cannot_append_between_stamp_and_lock(
        self, directory, ledger, scorer, home_env, travel_env
    ):
        stamps = iter([utc(10, 0), utc(10, 2), utc(10, 2, 30)])
        stamps_lock = threading.Lock()
        racer_finished_early = []

        def next_stamp():
            with stamps_lock:
                return next(stamps)

        authenticator = Authenticator(directory, ledger, scorer=scorer, clock=next_stamp)

        def racer():
            authenticator.attempt(ALICE, ALICE_SECRET, travel_env)

        racing = threading.Thread(target=racer)

        def first_clock():
            # Start a competing attempt and give it time to run to completion
            authenticator.clock = next_stamp
            racing.start()
            racing.join(timeout=0.5)
            racer_finished_early.append(not racing.is_alive())
            return next_stamp()

        authenticator.clock = first_clock
        authenticator.attempt(ALICE, ALICE_SECRET, home_env)
        racing.join()

        assert racer_finished_early == [False]
        timestamps = [e.timestamp for e in ledger.history(ALICE)]
        assert timestamps == [utc(10, 0), utc(10, 2)]

        # 30 s after the latest entry: velocity is measured from it
        outcome = authenticator.attempt(ALICE, ALICE_SECRET, home_env)
        assert FactorNames.VELOCITY in outcome.contributing_factors
