from __future__ import annotations

import logging
from enum import Enum

log = logging.getLogger(__name__)


class EngineState(Enum):
    """Lifecycle state of a run."""

    RUNNING = "running"
    TERMINATING = "terminating"
    DONE = "done"


class TerminationCause(Enum):
    """Why the run loop stopped."""

    MAX_KEYS = "max_keys"
    MAX_TIME = "max_time"
    MAX_LINES = "max_lines"
    INTERRUPTED = "interrupted"
    END_OF_STREAM = "end_of_stream"


VALID_ENGINE_TRANSITIONS: dict[EngineState, frozenset[EngineState]] = {
    EngineState.RUNNING: frozenset({EngineState.TERMINATING}),
    EngineState.TERMINATING: frozenset({EngineState.DONE}),
    EngineState.DONE: frozenset(),  # terminal state
}

# Planned stops that announce themselves before the final report.
LIMIT_CAUSES: frozenset[TerminationCause] = frozenset(
    {TerminationCause.MAX_KEYS, TerminationCause.MAX_TIME, TerminationCause.MAX_LINES}
)


def is_valid_engine_transition(current: EngineState, target: EngineState) -> bool:
    """Check whether an EngineState transition is allowed."""
    return target in VALID_ENGINE_TRANSITIONS.get(current, frozenset())
