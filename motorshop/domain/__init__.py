"""
Domain models for motorshop.

This package contains pure domain logic with no persistence coupling.
"""

from .drafts import CompanyDraft, Draft, JobDraft, MotorDraft, new_draft
from .fields import (
    Directory,
    EntityKind,
    UnknownFieldError,
    ValidationError,
    normalize,
    validate,
)
from .job_number import JobNumberGenerator
from .lifecycle import InvalidTransitionError, JobStatus, can_transition, transition
from .records import (
    Company,
    Job,
    JobPriority,
    Motor,
    MotorCondition,
    MotorPhase,
    MotorType,
)

__all__ = [
    "Company",
    "CompanyDraft",
    "Directory",
    "Draft",
    "EntityKind",
    "InvalidTransitionError",
    "Job",
    "JobDraft",
    "JobNumberGenerator",
    "JobPriority",
    "JobStatus",
    "Motor",
    "MotorCondition",
    "MotorDraft",
    "MotorPhase",
    "MotorType",
    "UnknownFieldError",
    "ValidationError",
    "can_transition",
    "new_draft",
    "normalize",
    "transition",
    "validate",
]
