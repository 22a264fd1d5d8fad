"""
Business logic for checking, reserving and cancelling time slots.

``AvailabilityService`` orchestrates a ``TimeSlotValidator`` and a
``SlotStore``.  It knows nothing about HTTP: it raises domain errors
from ``core.exceptions`` and leaves the choice of status codes and of
what gets logged to the endpoint layer.

Store calls run in the default executor and are bounded by ``sla`` seconds.
A call that does not finish in time raises ``StoreTimeoutError``; any
other unexpected store exception is wrapped in ``SlotStoreError``.
Nothing is retried.  A timed-out call is not cancelled: its worker
thread runs to completion, so a reservation answered with a timeout
may still be stored.  Reservations never overlap each other, because
the overlap check and the add run in one worker call under one lock.
"""

from __future__ import annotations

import asyncio
import functools
import threading
from typing import Any, Callable, TypeVar

from availability_api.app.core.exceptions import (
    AvailabilityError,
    SlotConflictError,
    SlotStoreError,
    StoreTimeoutError,
)
from availability_api.app.schemas.time_slot import TimeSlot, TimeSlotJSON
from availability_api.app.services.slot_store import SlotStore
from availability_api.app.services.validator import TimeSlotValidator


T = TypeVar("T")


class AvailabilityService:
    """Orchestrates validation and store access for one slot collection."""

    def __init__(self, store: SlotStore, validator: TimeSlotValidator, sla: float = 0.5) -> None:
        self.store = store
        self.validator = validator
        self.sla = sla
        # Held by the worker thread across the overlap check and the add,
        # so a reservation that outlives its deadline still blocks the
        # next one until its add has landed.
        self._reserve_lock = threading.Lock()

    def validate(self, raw: TimeSlotJSON) -> TimeSlot:
        return self.validator.to_time_slot(raw)

    async def _call_store(self, operation: Callable[..., T], slot: TimeSlot) -> T:
        call = functools.partial(operation, slot, timeout=self.sla)
        future = asyncio.get_running_loop().run_in_executor(None, call)
        try:
            return await asyncio.wait_for(future, timeout=self.sla)
        except asyncio.TimeoutError as exc:
            raise StoreTimeoutError() from exc
        except AvailabilityError:
            raise
        except Exception as exc:
            raise SlotStoreError(f"{operation.__name__} failed: {exc}") from exc

    async def check(self, raw: TimeSlotJSON) -> bool:
        """Return True if the requested slot overlaps nothing in the store."""
        slot = self.validate(raw)
        overlapping = await self._call_store(self.store.overlaps, slot)
        return not overlapping

    async def reserve(self, raw: TimeSlotJSON) -> TimeSlot:
        """Add the requested slot, or raise ``SlotConflictError`` if it overlaps."""
        slot = self.validate(raw)
        await self._call_store(self._check_and_add, slot)
        return slot

    def _check_and_add(self, slot: TimeSlot, timeout: float | None = None) -> None:
        if not self._reserve_lock.acquire(timeout=-1 if timeout is None else timeout):
            raise StoreTimeoutError()
        try:
            if self.store.overlaps(slot, timeout=timeout):
                raise SlotConflictError()
            self.store.add(slot, timeout=timeout)
        finally:
            self._reserve_lock.release()

    async def cancel(self, raw: TimeSlotJSON) -> TimeSlot:
        """Remove the exactly matching slot; ``SlotNotFoundError`` if absent."""
        slot = self.validate(raw)
        await self._call_store(self.store.delete, slot)
        return slot

    def describe(self) -> dict[str, Any]:
        return {"store": type(self.store).__name__, "sla_seconds": self.sla}
