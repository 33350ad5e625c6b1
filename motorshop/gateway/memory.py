"""
In-memory gateway.

Records live in dictionaries for the lifetime of the process. Used as the
default backend and as the backend for tests.
"""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Dict, Iterable, Optional, TypeVar
from uuid import uuid4

from motorshop.domain import Company, EntityKind, Job, Motor

from .interface import EntityGateway, Gateway, LiveList

LOG = logging.getLogger(__name__)

T = TypeVar("T")


class MemoryEntityGateway(EntityGateway[T]):
    """Dictionary backed storage for one entity kind."""

    def __init__(self, kind: EntityKind, records: Optional[Iterable[T]] = None):
        self.kind = EntityKind(kind)
        self._records: Dict[str, T] = {}
        self._listing: LiveList[T] = LiveList(self.kind)
        for record in records or ():
            self.seed(record)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def seed(self, record: T) -> T:
        """Store a record synchronously, keeping its id if it has one."""
        if getattr(record, "id", None) is None:
            record = replace(record, id=str(uuid4()))
        self._store(record)
        return record

    def _store(self, record: T) -> None:
        self._records[record.id] = record
        self._listing._append(record)  # pylint: disable=protected-access

    async def create(self, record: T) -> T:
        stored = replace(record, id=str(uuid4()))
        self._store(stored)
        LOG.info("Created %s %s", self.kind.value, stored.id)
        return stored

    def get(self, record_id: str) -> Optional[T]:
        return self._records.get(record_id)

    def listing(self) -> LiveList[T]:
        return self._listing


class MemoryGateway(Gateway):
    def __init__(
        self,
        companies: Optional[Iterable[Company]] = None,
        motors: Optional[Iterable[Motor]] = None,
        jobs: Optional[Iterable[Job]] = None,
    ):
        self.companies = MemoryEntityGateway(EntityKind.COMPANY, companies)
        self.motors = MemoryEntityGateway(EntityKind.MOTOR, motors)
        self.jobs = MemoryEntityGateway(EntityKind.JOB, jobs)

    def close(self) -> None:
        LOG.debug("memory gateway closed")
