"""
Storage of reserved time slots.

``SlotStore`` is the capability interface the orchestration layer
depends on.  ``InMemorySlotStore`` keeps the slots in a plain list in
insertion order and guards every operation with a single lock, so a
reader never observes a partial append or removal.  All scans are
linear.

Each operation accepts an optional ``timeout`` in seconds bounding how
long it may wait for the lock.  If the lock cannot be taken in time,
``StoreTimeoutError`` is raised.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from availability_api.app.core.exceptions import SlotNotFoundError, StoreTimeoutError
from availability_api.app.schemas.time_slot import TimeSlot


class SlotStore(ABC):
    """Capability interface for the reserved slot collection."""

    @abstractmethod
    def exists(self, query: TimeSlot, timeout: Optional[float] = None) -> bool:
        """Return True if a stored slot exactly equals ``query``."""

    @abstractmethod
    def overlaps(self, query: TimeSlot, timeout: Optional[float] = None) -> bool:
        """Return True if any stored slot overlaps ``query``."""

    @abstractmethod
    def add(self, slot: TimeSlot, timeout: Optional[float] = None) -> None:
        """Append ``slot`` without checking for overlap."""

    @abstractmethod
    def delete(self, query: TimeSlot, timeout: Optional[float] = None) -> None:
        """Remove the first exact match or raise ``SlotNotFoundError``."""


class InMemorySlotStore(SlotStore):
    """Lock-guarded in-memory implementation of ``SlotStore``."""

    def __init__(self, initial: Optional[Iterable[TimeSlot]] = None) -> None:
        self._slots: List[TimeSlot] = list(initial or [])
        self._lock = threading.Lock()

    @contextmanager
    def _locked(self, timeout: Optional[float]) -> Iterator[None]:
        acquired = self._lock.acquire(timeout=-1 if timeout is None else max(timeout, 0))
        if not acquired:
            raise StoreTimeoutError()
        try:
            yield
        finally:
            self._lock.release()

    def exists(self, query: TimeSlot, timeout: Optional[float] = None) -> bool:
        with self._locked(timeout):
            return any(slot == query for slot in self._slots)

    def overlaps(self, query: TimeSlot, timeout: Optional[float] = None) -> bool:
        with self._locked(timeout):
            return any(slot.overlaps(query) for slot in self._slots)

    def add(self, slot: TimeSlot, timeout: Optional[float] = None) -> None:
        with self._locked(timeout):
            self._slots.append(slot)

    def delete(self, query: TimeSlot, timeout: Optional[float] = None) -> None:
        # Only the first match in insertion order is removed; exact
        # duplicates further along stay in place.
        with self._locked(timeout):
            for index, slot in enumerate(self._slots):
                if slot == query:
                    del self._slots[index]
                    return
        raise SlotNotFoundError()

    def snapshot(self) -> List[TimeSlot]:
        """Return a copy of the stored slots in insertion order."""
        with self._locked(None):
            return list(self._slots)

    def __len__(self) -> int:
        with self._locked(None):
            return len(self._slots)
