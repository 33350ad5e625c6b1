"""
Persistence gateway interface.

This module defines the contract every storage backend must follow. The
intake sessions only ever create records and read live listings; updates
and deletes are not part of the contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, Iterator, List, Optional, Sequence, TypeVar

from motorshop.domain import Company, EntityKind, Job, Motor
from motorshop.errors import MotorshopError

T = TypeVar("T")


class GatewayError(MotorshopError):
    """
    Raised by a backend when a create or listing fails.

    Args:
        message: What the gateway was doing
        cause: The backend exception, if any
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class LiveList(Sequence[T]):
    """
    Insertion ordered, read-only view of the records a gateway knows.

    Only the owning gateway changes the contents (``_append``/``_replace``);
    everyone else reads, or subscribes to be told about changes.
    """

    def __init__(self, kind: EntityKind, items: Iterable[T] = ()):
        self.kind = EntityKind(kind)
        self._items: List[T] = list(items)
        self._subscribers: List[Callable[[LiveList[T]], None]] = []

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"LiveList({self.kind.value}, {len(self._items)} items)"

    def snapshot(self) -> List[T]:
        return list(self._items)

    def subscribe(self, callback: Callable[[LiveList[T]], None]) -> Callable[[], None]:
        """
        Register a callback run after every change.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    def _append(self, item: T) -> None:
        self._items.append(item)
        self._notify()

    def _replace(self, items: Iterable[T]) -> None:
        self._items = list(items)
        self._notify()


class EntityGateway(ABC, Generic[T]):
    """
    Storage for one entity kind.

    Implementations assign ``id`` on create and append the stored record
    to their live listing.
    """

    kind: EntityKind

    @abstractmethod
    async def create(self, record: T) -> T:
        """
        Store a new record.

        Args:
            record: A validated record with ``id`` unset

        Returns:
            The stored record, with ``id`` assigned

        Raises:
            GatewayError: On constraint violations or lost connectivity
        """

    @abstractmethod
    def listing(self) -> LiveList[T]:
        """
        Get the live listing of stored records.

        Returns:
            The same LiveList instance on every call, ordered by insertion
        """


class Gateway(ABC):
    """Bundle of per-kind gateways sharing one backend."""

    companies: EntityGateway[Company]
    motors: EntityGateway[Motor]
    jobs: EntityGateway[Job]

    def for_kind(self, kind: EntityKind) -> EntityGateway:
        return {
            EntityKind.COMPANY: self.companies,
            EntityKind.MOTOR: self.motors,
            EntityKind.JOB: self.jobs,
        }[EntityKind(kind)]

    async def refresh(self) -> None:
        """Reload live listings from the backend.

        A no-op for backends whose listings are always current.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the backend and release resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _ = (exc_type, exc_val, exc_tb)
        self.close()
        return False
