# File: src/slotpool/domain/aggregates.py
"""
Aggregate Root for the Slot Pool

The pool is the sole owner of a fixed sequence of slots. It assigns slots
first-fit, prices occupancies through the fee policy, and refuses to free a
slot whose fee has not been confirmed.

Concurrency model:
- Each slot carries its own lock; there is no pool-wide lock on the
  allocate/confirm/release path, so unrelated slots never block each other.
- Two allocations racing for the same free slot serialize on that slot's lock;
  the loser moves on to the next slot.
- Domain events are collected under a separate lock.
"""

from typing import List, Optional, Dict, Sequence
import logging
import threading
import uuid
from enum import Enum

from .models import (
    ParkingSlot, SlotHandle, SlotSnapshot, SlotState, Vehicle, Money,
    DomainEvent, VehicleParkedEvent, PaymentConfirmedEvent,
    VehicleLeftEvent, ExitRejectedEvent
)
from .strategies import FeePolicy, validate_duration
from .exceptions import PaymentRequired, UnknownSlot


class ReleaseOutcome(Enum):
    """Successful results of SlotPool.release"""
    RELEASED = "released"
    ALREADY_FREE = "already_free"


# ============================================================================
# BASE AGGREGATE ROOT
# ============================================================================

class AggregateRoot:
    """
    Base class for aggregate roots
    Provides identity and thread-safe domain event collection
    """

    def __init__(self, id: Optional[str] = None):
        self._id = id or str(uuid.uuid4())
        self._changes: List[DomainEvent] = []
        self._events_lock = threading.Lock()
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def id(self) -> str:
        return self._id

    def _add_domain_event(self, event: DomainEvent) -> None:
        with self._events_lock:
            self._changes.append(event)
        self._logger.debug(f"Added domain event: {event.__class__.__name__}")

    def clear_events(self) -> List[DomainEvent]:
        """Clear and return all domain events"""
        with self._events_lock:
            events = self._changes.copy()
            self._changes.clear()
        return events

    @property
    def has_changes(self) -> bool:
        with self._events_lock:
            return len(self._changes) > 0


# ============================================================================
# SLOT POOL AGGREGATE
# ============================================================================

class SlotPool(AggregateRoot):
    """
    Aggregate Root: fixed-capacity pool of parking slots

    Construct exactly one per process and share it by reference.
    """

    def __init__(
        self,
        capacity: int,
        fee_policy: Optional[FeePolicy] = None,
        pool_id: Optional[str] = None
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(f"Capacity must be an integer, got: {capacity!r}")
        if capacity < 0:
            raise ValueError(f"Capacity cannot be negative: {capacity}")

        super().__init__(pool_id)
        self.fee_policy = fee_policy or FeePolicy()
        self._slots: Sequence[ParkingSlot] = tuple(
            ParkingSlot(number) for number in range(1, capacity + 1)
        )

        self._logger.info(f"Created SlotPool {self.id} with {capacity} slots")

    @property
    def capacity(self) -> int:
        return len(self._slots)

    # ========================================================================
    # PUBLIC BUSINESS METHODS
    # ========================================================================

    def allocate(self, vehicle: Vehicle, duration_units: int) -> Optional[SlotHandle]:
        """
        Assign the first free slot to a vehicle
        Returns: SlotHandle, or None when every slot is held
        Raises: InvalidDuration for a negative or non-integer duration
        """
        validate_duration(duration_units)

        for slot in self._slots:
            token = slot.try_assign(vehicle, duration_units)
            if token is None:
                continue

            self._add_domain_event(
                VehicleParkedEvent(self.id, slot.number, vehicle, duration_units)
            )
            self._logger.info(
                f"Parked {vehicle} in slot {slot.number} for {duration_units} units"
            )
            return SlotHandle(pool_id=self.id, slot_number=slot.number, token=token)

        self._logger.warning(f"No available slots for {vehicle}")
        return None

    def quote_fee(self, handle: SlotHandle) -> Money:
        """
        Fee for the occupancy behind handle, from its frozen category and duration
        Raises: NotOccupied if the occupancy has ended
        """
        occupancy = self._slot_for(handle).occupancy(handle.token)
        return self.fee_policy.quote(
            occupancy.occupant.category, occupancy.billed_duration_units
        )

    def confirm_payment(self, handle: SlotHandle) -> None:
        """
        Mark the occupancy behind handle as paid
        Raises: NotOccupied if the slot is not awaiting payment
        """
        slot = self._slot_for(handle)
        fee = self.quote_fee(handle)
        vehicle = slot.mark_paid(handle.token)

        self._add_domain_event(PaymentConfirmedEvent(self.id, slot.number, vehicle, fee))
        self._logger.info(f"Payment of {fee.format()} confirmed for slot {slot.number}")

    def release(self, handle: SlotHandle) -> ReleaseOutcome:
        """
        Free the slot behind handle once its fee is paid
        Returns: RELEASED, or ALREADY_FREE when the occupancy had already ended
        Raises: PaymentRequired if payment was never confirmed (slot unchanged)
        """
        slot = self._slot_for(handle)
        try:
            vehicle = slot.vacate(handle.token)
        except PaymentRequired as e:
            self._add_domain_event(ExitRejectedEvent(self.id, slot.number, e.vehicle))
            self._logger.warning(f"Slot {slot.number}: payment not done, exit refused")
            raise

        if vehicle is None:
            self._logger.debug(f"Slot {slot.number}: release with ended occupancy ignored")
            return ReleaseOutcome.ALREADY_FREE

        self._add_domain_event(VehicleLeftEvent(self.id, slot.number, vehicle))
        self._logger.info(f"{vehicle} left slot {slot.number}")
        return ReleaseOutcome.RELEASED

    # ========================================================================
    # QUERIES
    # ========================================================================

    def is_paid(self, handle: SlotHandle) -> bool:
        """Check whether the occupancy behind handle has been paid"""
        slot = self._slot_for(handle)
        return slot.holds(handle.token) and slot.state is SlotState.PAID

    def is_current(self, handle: SlotHandle) -> bool:
        """Check whether the occupancy behind handle is still in the slot"""
        return self._slot_for(handle).holds(handle.token)

    def slot_states(self) -> List[SlotSnapshot]:
        """Snapshot of every slot in pool order"""
        return [slot.snapshot() for slot in self._slots]

    def occupancy(self) -> Dict[SlotState, int]:
        """Number of slots in each state"""
        counts = {state: 0 for state in SlotState}
        for snapshot in self.slot_states():
            counts[snapshot.state] += 1
        return counts

    def available_count(self) -> int:
        return self.occupancy()[SlotState.FREE]

    def find_vehicle(self, vehicle_id: str) -> Optional[SlotSnapshot]:
        """Find the slot currently holding a vehicle, if any"""
        for snapshot in self.slot_states():
            if snapshot.occupant is not None and snapshot.occupant.vehicle_id == vehicle_id:
                return snapshot
        return None

    # ========================================================================
    # INTERNAL
    # ========================================================================

    def _slot_for(self, handle: SlotHandle) -> ParkingSlot:
        if not isinstance(handle, SlotHandle):
            raise UnknownSlot(f"Not a slot handle: {handle!r}")
        if handle.pool_id != self.id:
            raise UnknownSlot(f"Handle belongs to pool {handle.pool_id}, not {self.id}")
        if not 1 <= handle.slot_number <= len(self._slots):
            raise UnknownSlot(f"Slot {handle.slot_number} does not exist")
        return self._slots[handle.slot_number - 1]

    def __repr__(self) -> str:
        return f"SlotPool(id={self.id}, capacity={self.capacity})"
