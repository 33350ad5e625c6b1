"""
Intake sessions for new companies, motors and jobs.

An intake session accumulates a draft across one or more UI steps and turns
it into exactly one gateway create when the user confirms. Sessions are
plain objects owned by the caller; nothing here is global.

Lifecycle of a session:

- ``update()`` writes raw values into the draft without checking them
- ``next_step()``/``previous_step()``/``go_to()`` move the step pointer and
  never touch the draft
- ``confirm()`` validates, derives computed fields, and awaits one create;
  on success the draft resets and ``succeeded`` fires, on a gateway error
  the draft is kept and ``failed`` fires
- ``cancel()`` resets the draft without contacting the gateway

While a create is in flight, further ``confirm()`` calls on the same
session are ignored.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from motorshop.domain import (
    Company,
    Directory,
    Draft,
    EntityKind,
    Job,
    JobNumberGenerator,
    Motor,
    new_draft,
    validate,
)
from motorshop.gateway import Gateway, GatewayError, LiveList
from motorshop.signals import Signal

LOG = logging.getLogger(__name__)


class IntakeSession:
    """
    Base class for the per-entity intake sessions.

    Subclasses set ``kind``, ``steps`` and ``step_fields``, and override
    :meth:`directory` and :meth:`derive` where the entity needs them.
    """

    kind: ClassVar[EntityKind]
    steps: ClassVar[Tuple[str, ...]] = ("details",)
    step_fields: ClassVar[Dict[str, Tuple[str, ...]]] = {}

    def __init__(self, gateway: Gateway, draft: Optional[Draft] = None):
        """
        Open a session.

        Args:
            gateway: Gateway the final create goes to
            draft: Optional prefilled draft; copied, never mutated
        """
        if draft is not None and draft.kind != self.kind:
            raise TypeError(
                f"{type(self).__name__} needs a {self.kind.value} draft, "
                f"got {draft.kind.value}")
        self._gateway = gateway
        self._target = gateway.for_kind(self.kind)
        self._draft = draft.copy() if draft is not None else new_draft(self.kind)
        self._step_index = 0
        self._submitting = False
        self.succeeded = Signal(f"{self.kind.value}.succeeded")
        self.failed = Signal(f"{self.kind.value}.failed")

    def __repr__(self):
        return (f"<{type(self).__name__} step={self.step!r} "
                f"submitting={self._submitting}>")

    # ------------------------------------------------------------------
    # Draft
    # ------------------------------------------------------------------
    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def submitting(self) -> bool:
        return self._submitting

    def update(self, name: str, value: Any) -> None:
        """Write one raw field value; validation waits until confirm."""
        self._draft.set(name, value)
        LOG.debug("%s draft: %s=%r", self.kind.value, name, value)

    def update_many(self, **values) -> None:
        for name, value in values.items():
            self.update(name, value)

    def _reset(self) -> None:
        self._draft = new_draft(self.kind)
        self._step_index = 0

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    @property
    def step(self) -> str:
        return self.steps[self._step_index]

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def is_first_step(self) -> bool:
        return self._step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self._step_index == len(self.steps) - 1

    def next_step(self) -> str:
        self._step_index = min(self._step_index + 1, len(self.steps) - 1)
        return self.step

    def previous_step(self) -> str:
        self._step_index = max(self._step_index - 1, 0)
        return self.step

    def go_to(self, step: str) -> str:
        if step not in self.steps:
            raise ValueError(f"{self.kind.value} intake has no step {step!r}")
        self._step_index = self.steps.index(step)
        return self.step

    def fields_for_step(self, step: Optional[str] = None) -> Tuple[str, ...]:
        step = step or self.step
        if step not in self.steps:
            raise ValueError(f"{self.kind.value} intake has no step {step!r}")
        return self.step_fields.get(step, ())

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------
    def directory(self) -> Directory:
        """Records the draft may reference; no references by default."""
        return Directory()

    def validate(self):
        """
        Validate the current draft without creating anything.

        Raises:
            ValidationError: Naming every offending field
        """
        return validate(self.kind, self._draft, self.directory())

    def derive(self, record):
        """Fill in computed fields before the record goes to the gateway."""
        return record

    async def confirm(self):
        """
        Validate the draft and create the record.

        Validation happens before the first suspension point, so a
        ValidationError reaches the caller without any gateway call and
        without firing ``failed``.

        Returns:
            The created record, or None if the create failed or another
            confirm on this session is still in flight

        Raises:
            ValidationError: If the draft is not acceptable
        """
        if self._submitting:
            LOG.warning("%s confirm ignored: a create is already in flight",
                        self.kind.value)
            return None

        record = self.derive(self.validate())

        self._submitting = True
        LOG.debug("%s confirm: creating", self.kind.value)
        try:
            created = await self._target.create(record)
        except GatewayError as exc:
            error = exc
        else:
            error = None
        finally:
            self._submitting = False

        if error is not None:
            LOG.error("%s create failed, draft kept: %s", self.kind.value, error)
            self.failed.emit(error)
            return None

        self._reset()
        LOG.info("%s %s created", self.kind.value, created.id)
        self.succeeded.emit(created)
        return created

    def cancel(self) -> None:
        """Discard the draft; never contacts the gateway."""
        LOG.debug("%s intake cancelled", self.kind.value)
        self._reset()


class CompanyIntake(IntakeSession):
    kind = EntityKind.COMPANY
    steps = ("details",)
    step_fields = {
        "details": ("name", "email", "phone", "address"),
    }


class MotorIntake(IntakeSession):
    kind = EntityKind.MOTOR
    steps = ("ownership", "identity", "ratings", "notes")
    step_fields = {
        "ownership": ("company_id", "motor_id"),
        "identity": ("manufacturer", "model", "serial_number", "type", "condition"),
        "ratings": ("voltage", "amperage", "power", "phase", "frequency", "rpm"),
        "notes": ("location", "technical_notes"),
    }

    @property
    def companies(self) -> LiveList[Company]:
        return self._gateway.companies.listing()

    def directory(self) -> Directory:
        return Directory(companies=self.companies)


class JobIntake(IntakeSession):
    kind = EntityKind.JOB
    steps = ("assignment", "work", "schedule", "costing")
    step_fields = {
        "assignment": ("company_id", "motor_id", "technician_id"),
        "work": ("description", "priority"),
        "schedule": ("start_date", "due_date"),
        "costing": ("estimated_cost", "labor_rate", "labor_hours", "parts_cost"),
    }

    def __init__(self, gateway: Gateway, draft: Optional[Draft] = None,
                 job_numbers: Optional[JobNumberGenerator] = None):
        super().__init__(gateway, draft)
        self._job_numbers = job_numbers or JobNumberGenerator()

    @property
    def companies(self) -> LiveList[Company]:
        return self._gateway.companies.listing()

    @property
    def motors(self) -> LiveList[Motor]:
        return self._gateway.motors.listing()

    def motors_for_company(self, company_id: Optional[str] = None) -> List[Motor]:
        """Motors owned by the given company, or by the draft's company."""
        company_id = company_id or self._draft.company_id
        if not company_id:
            return []
        return [motor for motor in self.motors if motor.company_id == company_id]

    def directory(self) -> Directory:
        return Directory(companies=self.companies, motors=self.motors)

    def derive(self, record: Job) -> Job:
        record.job_number = self._job_numbers.next_number()
        return record
