"""Attempt state machine.

PENDING -> CREDENTIAL_CHECK -> REJECTED
                            -> SCORING -> DECISION -> BLOCKED
                                                   -> SESSION_GRANTED

One machine per attempt; nothing is persisted across attempts.
"""

from typing import Dict, FrozenSet, List

from riskgate.common.exceptions import InvalidStateTransition
from riskgate.core.types import AttemptState


TRANSITIONS: Dict[AttemptState, FrozenSet[AttemptState]] = {
    AttemptState.PENDING: frozenset({AttemptState.CREDENTIAL_CHECK}),
    AttemptState.CREDENTIAL_CHECK: frozenset({AttemptState.REJECTED, AttemptState.SCORING}),
    AttemptState.SCORING: frozenset({AttemptState.DECISION}),
    AttemptState.DECISION: frozenset({AttemptState.BLOCKED, AttemptState.SESSION_GRANTED}),
    AttemptState.REJECTED: frozenset(),
    AttemptState.BLOCKED: frozenset(),
    AttemptState.SESSION_GRANTED: frozenset(),
}


class AttemptStateMachine:
    """Tracks the state of one attempt and its path."""

    def __init__(self) -> None:
        self.state = AttemptState.PENDING
        self.trail: List[AttemptState] = [AttemptState.PENDING]

    def advance(self, target: AttemptState) -> AttemptState:
        """Move to ``target``.

        Raises:
            InvalidStateTransition: If ``target`` is not reachable from the current state
        """
        if target not in TRANSITIONS[self.state]:
            raise InvalidStateTransition(self.state.value, target.value)
        self.state = target
        self.trail.append(target)
        return target

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal
