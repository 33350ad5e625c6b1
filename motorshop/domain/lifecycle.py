"""
Job lifecycle state machine.

A job starts out pending, may move to in progress, and ends either
completed or cancelled. Terminal states accept no further transition.
Due dates never move a job on their own; overdue reporting is left to
whoever reads the jobs.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import TYPE_CHECKING, Dict, FrozenSet

from motorshop.errors import MotorshopError

if TYPE_CHECKING:
    from .records import Job

LOG = logging.getLogger(__name__)


class JobStatus(str, Enum):
    """Job lifecycle states."""

    PENDING = "pending"  # Accepted, work not started
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"  # Terminal
    CANCELLED = "cancelled"  # Terminal


ALLOWED_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)

INITIAL_STATE = JobStatus.PENDING


class InvalidTransitionError(MotorshopError):
    """Raised when a job is asked to move along an edge not in the table."""

    def __init__(self, current: JobStatus, requested: JobStatus):
        self.current = JobStatus(current)
        self.requested = JobStatus(requested)
        super().__init__(
            f"Cannot move job from {self.current.value!r} "
            f"to {self.requested.value!r}")


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    return JobStatus(target) in ALLOWED_TRANSITIONS.get(JobStatus(current), frozenset())


def transition(job: Job, target: JobStatus) -> Job:
    """
    Move a job to a new status.

    Args:
        job: The job to update in place
        target: Requested status (enum member or its value)

    Returns:
        The same job, for chaining

    Raises:
        InvalidTransitionError: If the table has no such edge
        ValueError: If target is not a known status
    """
    target = JobStatus(target)
    if not can_transition(job.status, target):
        raise InvalidTransitionError(job.status, target)

    previous = job.status
    job.status = target
    LOG.info("Job %s: %s -> %s", job.job_number, previous.value, target.value)
    return job
