"""
Pure domain records for the motor repair shop.

Companies own motors, and jobs are repair work performed on one motor for
one company. These dataclasses have no knowledge of how they are stored;
the gateway layer assigns ``id`` when a record is created.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Optional

from dateutil.tz import tzutc

from .lifecycle import TERMINAL_STATES, JobStatus, transition


class MotorType(str, Enum):
    """Kinds of rotating machinery the shop services."""

    AC = "AC"
    DC = "DC"
    SERVO = "Servo"
    GENERATOR = "Generator"
    TURBINE = "Turbine"


class MotorPhase(IntEnum):
    SINGLE = 1
    THREE = 3


class MotorCondition(str, Enum):
    """Condition of a motor as assessed at intake."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class JobPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


@dataclass
class Company:
    """A customer organization."""

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Motor:  # pylint: disable=too-many-instance-attributes
    """
    A motor unit owned by a company.

    ``motor_id`` is the label the shop tags the unit with; ``id`` is the
    identity assigned by the gateway.
    """

    company_id: str
    motor_id: str
    type: MotorType
    condition: MotorCondition = MotorCondition.GOOD

    # Nameplate
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None

    # Ratings, kept as the labels printed on the plate ("460V", "7.5 HP")
    voltage: Optional[str] = None
    amperage: Optional[str] = None
    power: Optional[str] = None
    phase: Optional[MotorPhase] = None
    frequency: Optional[str] = None
    rpm: Optional[str] = None

    location: Optional[str] = None
    technical_notes: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Job:  # pylint: disable=too-many-instance-attributes
    """
    A unit of repair work on one motor for one company.

    ``job_number`` is filled in by the intake session just before the job
    is handed to the gateway. Status changes go through
    :mod:`motorshop.domain.lifecycle`; the helper methods below delegate to
    it so the transition table lives in one place.
    """

    company_id: str
    motor_id: str
    description: str
    due_date: date
    job_number: Optional[str] = None
    status: JobStatus = JobStatus.PENDING
    priority: JobPriority = JobPriority.NORMAL

    # Costing
    estimated_cost: Optional[float] = None
    labor_rate: Optional[float] = None
    labor_hours: Optional[float] = None
    parts_cost: Optional[float] = None

    start_date: Optional[date] = None
    technician_id: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.now(tzutc())

    @property
    def total_cost(self) -> Optional[float]:
        """
        Labor plus parts.

        Returns None unless labor rate, labor hours and parts cost are all
        known; billing decides what to do with partial figures.
        """
        if None in (self.labor_rate, self.labor_hours, self.parts_cost):
            return None
        return self.labor_rate * self.labor_hours + self.parts_cost

    def is_terminal(self) -> bool:
        """Return True if no further status change is allowed."""
        return self.status in TERMINAL_STATES

    def start(self) -> Job:
        return transition(self, JobStatus.IN_PROGRESS)

    def complete(self) -> Job:
        return transition(self, JobStatus.COMPLETED)

    def cancel(self) -> Job:
        return transition(self, JobStatus.CANCELLED)

    def reprioritize(self, priority: JobPriority) -> Job:
        """Change priority; allowed in every state, terminal ones included."""
        self.priority = JobPriority(priority)
        return self

    def __str__(self) -> str:
        return f"[{self.job_number}] {self.status.value} {self.description}"
