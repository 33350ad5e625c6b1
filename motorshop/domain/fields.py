"""
Field tables and validators for companies, motors and jobs.

Each entity kind has a table of :class:`FieldSpec` entries describing which
fields exist, which are required, their defaults and admissible values.
:func:`validate` walks that table over a candidate (a draft or a mapping)
and returns a normalized record, or raises :class:`ValidationError` naming
every offending field.

Normalization rules:

- text is stripped, and an empty string becomes ``None``
- numbers are parsed from strings; empty or unparseable input becomes
  ``None`` (never 0), negative or non-finite numbers are rejected
- dates accept ``date``/``datetime`` objects or strings understood by
  ``dateutil``
- choices accept the enum member or its value, and fall back to the
  field's default when left empty
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from enum import Enum
import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Type

from dateutil import parser as dateparser

from motorshop.errors import MotorshopError

from .lifecycle import INITIAL_STATE, JobStatus
from .records import (
    Company,
    Job,
    JobPriority,
    Motor,
    MotorCondition,
    MotorPhase,
    MotorType,
)


class EntityKind(str, Enum):
    COMPANY = "company"
    MOTOR = "motor"
    JOB = "job"


class ValueKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CHOICE = "choice"
    REFERENCE = "reference"


REQUIRED = "required"


class ValidationError(MotorshopError):
    """
    Raised when a candidate record fails validation.

    ``errors`` maps every offending field to a short reason; ``field`` and
    ``reason`` give the first one for callers that only show one message.
    """

    def __init__(self, errors: Mapping[str, str]):
        if not errors:
            raise ValueError("ValidationError needs at least one field")
        self.errors: Dict[str, str] = dict(errors)
        self.field, self.reason = next(iter(self.errors.items()))
        super().__init__("; ".join(
            f"{name}: {reason}" for name, reason in self.errors.items()))


class UnknownFieldError(MotorshopError, KeyError):
    """Raised when a field name is not part of an entity's field table."""

    def __init__(self, kind: EntityKind, name: str):
        self.kind = EntityKind(kind)
        self.name = name
        super().__init__(f"{self.kind.value} has no field {name!r}")

    def __str__(self):
        return str(self.args[0])


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: ValueKind
    required: bool = False
    default: Any = None
    choices: Optional[Type[Enum]] = None


def _text(name, required=False):
    return FieldSpec(name, ValueKind.TEXT, required=required)


def _number(name):
    return FieldSpec(name, ValueKind.NUMBER)


COMPANY_FIELDS: Tuple[FieldSpec, ...] = (
    _text("name", required=True),
    _text("email"),
    _text("phone"),
    _text("address"),
)

MOTOR_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("company_id", ValueKind.REFERENCE, required=True),
    _text("motor_id", required=True),
    _text("manufacturer"),
    _text("model"),
    _text("serial_number"),
    FieldSpec("type", ValueKind.CHOICE, required=True, choices=MotorType),
    _text("voltage"),
    _text("amperage"),
    _text("power"),
    FieldSpec("phase", ValueKind.CHOICE, choices=MotorPhase),
    _text("frequency"),
    _text("rpm"),
    FieldSpec("condition", ValueKind.CHOICE, required=True,
              default=MotorCondition.GOOD, choices=MotorCondition),
    _text("location"),
    _text("technical_notes"),
)

JOB_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("company_id", ValueKind.REFERENCE, required=True),
    FieldSpec("motor_id", ValueKind.REFERENCE, required=True),
    _text("description", required=True),
    FieldSpec("status", ValueKind.CHOICE, required=True,
              default=INITIAL_STATE, choices=JobStatus),
    FieldSpec("priority", ValueKind.CHOICE, required=True,
              default=JobPriority.NORMAL, choices=JobPriority),
    _number("estimated_cost"),
    _number("labor_rate"),
    _number("labor_hours"),
    _number("parts_cost"),
    FieldSpec("start_date", ValueKind.DATE),
    FieldSpec("due_date", ValueKind.DATE, required=True),
    FieldSpec("technician_id", ValueKind.REFERENCE),
)

FIELD_TABLES: Dict[EntityKind, Tuple[FieldSpec, ...]] = {
    EntityKind.COMPANY: COMPANY_FIELDS,
    EntityKind.MOTOR: MOTOR_FIELDS,
    EntityKind.JOB: JOB_FIELDS,
}

RECORD_TYPES: Dict[EntityKind, type] = {
    EntityKind.COMPANY: Company,
    EntityKind.MOTOR: Motor,
    EntityKind.JOB: Job,
}


def field_names(kind: EntityKind) -> Tuple[str, ...]:
    return tuple(spec.name for spec in FIELD_TABLES[EntityKind(kind)])


def field_spec(kind: EntityKind, name: str) -> FieldSpec:
    for spec in FIELD_TABLES[EntityKind(kind)]:
        if spec.name == name:
            return spec
    raise UnknownFieldError(kind, name)


def defaults(kind: EntityKind) -> Dict[str, Any]:
    return {spec.name: spec.default for spec in FIELD_TABLES[EntityKind(kind)]}


@dataclass
class Directory:
    """
    Snapshot of the records a new motor or job may point at.

    A ``None`` list means "not checked"; an empty list means the gateway
    knows of no such records, which fails any reference into it.
    """

    companies: Optional[Sequence[Company]] = None
    motors: Optional[Sequence[Motor]] = None

    def company(self, company_id: str) -> Optional[Company]:
        for company in self.companies or ():
            if company.id == company_id:
                return company
        return None

    def motor(self, motor_id: str) -> Optional[Motor]:
        for motor in self.motors or ():
            if motor.id == motor_id:
                return motor
        return None


class _Invalid(Exception):
    """Internal signal from a normalizer; carries the reason text."""


def _normalize_text(raw):
    if raw is None:
        return None
    value = raw.strip() if isinstance(raw, str) else str(raw).strip()
    return value or None


def _normalize_number(raw):
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError as exc:
            raise _Invalid("must be a finite number") from exc
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            # Unparseable input means "unset", never zero
            return None
    if not math.isfinite(value):
        raise _Invalid("must be a finite number")
    if value < 0:
        raise _Invalid("must not be negative")
    return value


def _normalize_date(raw):
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise _Invalid(f"not a valid date: {raw!r}")
    text = raw.strip()
    if not text:
        return None
    try:
        return dateparser.parse(text).date()
    except (dateparser.ParserError, ValueError, OverflowError) as exc:
        raise _Invalid(f"not a valid date: {text!r}") from exc


def _whole_number(value) -> int:
    """Integer value of an int, a whole float or a numeric string."""
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"not a whole number: {value!r}")
    return int(number)


def _normalize_choice(raw, spec: FieldSpec):
    choices = spec.choices
    if isinstance(raw, choices):
        return raw
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return spec.default
    value = raw.strip() if isinstance(raw, str) else raw
    try:
        if issubclass(choices, int):
            return choices(_whole_number(value))
        return choices(value)
    except (TypeError, ValueError) as exc:
        allowed = ", ".join(str(member.value) for member in choices)
        raise _Invalid(f"must be one of: {allowed}") from exc


def _normalize(spec: FieldSpec, raw):
    if spec.kind == ValueKind.NUMBER:
        return _normalize_number(raw)
    if spec.kind == ValueKind.DATE:
        return _normalize_date(raw)
    if spec.kind == ValueKind.CHOICE:
        return _normalize_choice(raw, spec)
    return _normalize_text(raw)


def _candidate_items(kind: EntityKind, candidate) -> Dict[str, Any]:
    if is_dataclass(candidate) and not isinstance(candidate, type):
        items = asdict(candidate)
    else:
        items = dict(candidate)
    known = set(field_names(kind))
    for name in items:
        if name not in known:
            raise UnknownFieldError(kind, name)
    return items


def _check_email(values, errors):
    email = values.get("email")
    if email is None:
        return
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or "@" in domain:
        errors["email"] = "not a valid email address"


def _check_company_reference(values, errors, directory):
    company_id = values.get("company_id")
    if company_id is None or directory is None or directory.companies is None:
        return
    if not directory.companies:
        errors["company_id"] = "no companies on record"
    elif directory.company(company_id) is None:
        errors["company_id"] = f"unknown company {company_id!r}"


def _check_motor_reference(values, errors, directory):
    motor_id = values.get("motor_id")
    if motor_id is None or directory is None or directory.motors is None:
        return
    if not directory.motors:
        errors["motor_id"] = "no motors on record"
        return
    motor = directory.motor(motor_id)
    if motor is None:
        errors["motor_id"] = f"unknown motor {motor_id!r}"
    elif values.get("company_id") is not None and motor.company_id != values["company_id"]:
        errors["motor_id"] = "motor belongs to a different company"


def _check_job(values, errors):
    status = values.get("status")
    if status is not None and status != INITIAL_STATE:
        errors["status"] = f"new jobs start {INITIAL_STATE.value!r}"
    start, due = values.get("start_date"), values.get("due_date")
    if start is not None and due is not None and due < start:
        errors.setdefault("due_date", "due date is before start date")


def normalize(
    kind: EntityKind,
    candidate,
    directory: Optional[Directory] = None,
) -> Dict[str, Any]:
    """
    Normalize a candidate's fields without building the record.

    Args:
        kind: Which field table to apply
        candidate: A draft dataclass or a mapping of field name to raw value
        directory: Known companies/motors for reference checks (None = skip)

    Returns:
        Mapping of field name to normalized value, covering every field

    Raises:
        ValidationError: If any field fails
        UnknownFieldError: If the candidate names a field the kind lacks
    """
    kind = EntityKind(kind)
    items = _candidate_items(kind, candidate)
    values: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    for spec in FIELD_TABLES[kind]:
        raw = items.get(spec.name)
        try:
            value = _normalize(spec, raw)
        except _Invalid as exc:
            errors[spec.name] = str(exc)
            continue
        if value is None and spec.required:
            errors[spec.name] = REQUIRED
            continue
        values[spec.name] = value

    if kind == EntityKind.COMPANY:
        _check_email(values, errors)
    else:
        _check_company_reference(values, errors, directory)
    if kind == EntityKind.JOB:
        _check_motor_reference(values, errors, directory)
        _check_job(values, errors)

    if errors:
        raise ValidationError(errors)
    return values


def validate(kind: EntityKind, candidate, directory: Optional[Directory] = None):
    """
    Validate a candidate and build the matching record.

    Returns a :class:`Company`, :class:`Motor` or :class:`Job` with ``id``
    unset (and, for jobs, ``job_number`` unset).
    """
    values = normalize(kind, candidate, directory)
    return RECORD_TYPES[EntityKind(kind)](**values)
