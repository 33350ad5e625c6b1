"""
Typed drafts for records that are still being entered.

A draft holds raw, unvalidated input for every field in the entity's field
table. Values are only checked when the draft is confirmed, so a draft may
sit half-filled while the user moves between steps.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Dict

from .fields import EntityKind, UnknownFieldError, field_names
from .lifecycle import INITIAL_STATE
from .records import JobPriority, MotorCondition


@dataclass
class Draft:
    """Base class; subclasses declare one attribute per field table entry."""

    kind: ClassVar[EntityKind]

    def set(self, name: str, value: Any) -> None:
        if name not in field_names(self.kind):
            raise UnknownFieldError(self.kind, name)
        setattr(self, name, value)

    def get(self, name: str) -> Any:
        if name not in field_names(self.kind):
            raise UnknownFieldError(self.kind, name)
        return getattr(self, name)

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def copy(self) -> Draft:
        return replace(self)


@dataclass
class CompanyDraft(Draft):
    kind: ClassVar[EntityKind] = EntityKind.COMPANY

    name: Any = None
    email: Any = None
    phone: Any = None
    address: Any = None


@dataclass
class MotorDraft(Draft):  # pylint: disable=too-many-instance-attributes
    kind: ClassVar[EntityKind] = EntityKind.MOTOR

    company_id: Any = None
    motor_id: Any = None
    manufacturer: Any = None
    model: Any = None
    serial_number: Any = None
    type: Any = None
    voltage: Any = None
    amperage: Any = None
    power: Any = None
    phase: Any = None
    frequency: Any = None
    rpm: Any = None
    condition: Any = MotorCondition.GOOD
    location: Any = None
    technical_notes: Any = None


@dataclass
class JobDraft(Draft):  # pylint: disable=too-many-instance-attributes
    kind: ClassVar[EntityKind] = EntityKind.JOB

    company_id: Any = None
    motor_id: Any = None
    description: Any = None
    status: Any = INITIAL_STATE
    priority: Any = JobPriority.NORMAL
    estimated_cost: Any = None
    labor_rate: Any = None
    labor_hours: Any = None
    parts_cost: Any = None
    start_date: Any = None
    due_date: Any = None
    technician_id: Any = None


DRAFT_TYPES = {
    EntityKind.COMPANY: CompanyDraft,
    EntityKind.MOTOR: MotorDraft,
    EntityKind.JOB: JobDraft,
}


def new_draft(kind: EntityKind, **values) -> Draft:
    """Build a draft of the given kind with defaults, overridden by values."""
    draft = DRAFT_TYPES[EntityKind(kind)]()
    for name, value in values.items():
        draft.set(name, value)
    return draft
