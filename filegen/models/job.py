"""Generation job state models."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple
from uuid import UUID


class JobState(str, Enum):
    """State of a generation job."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


# Valid state transitions
STATE_TRANSITIONS: dict[JobState, set[JobState]] = {
    JobState.IDLE: {JobState.RUNNING, JobState.CANCELLED},
    JobState.RUNNING: {
        JobState.COMPLETED,
        JobState.FAILED,
        JobState.CANCELLED,
    },
    JobState.COMPLETED: set(),  # Terminal
    JobState.FAILED: set(),  # Terminal
    JobState.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(
    state for state, targets in STATE_TRANSITIONS.items() if not targets
)


class Chunk(NamedTuple):
    """One unit of generated content.

    ``offset`` is the global byte offset of ``data[0]`` in the output.
    """

    data: bytes
    offset: int
    is_last: bool


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a job that completed or was cancelled."""

    job_id: UUID
    state: JobState
    bytes_written: int
    total_bytes: int

    @property
    def completed(self) -> bool:
        return self.state == JobState.COMPLETED
