# File: src/slotpool/application/parking_service.py
"""
Parking Application Service

Orchestrates the entry -> quote -> pay -> exit use case on top of the slot
pool. The service owns no slot state; it is a thin coordinator that
1. builds vehicles through the factory,
2. settles the quoted amount through a payment gate before confirming it,
3. turns domain outcomes into DTOs for the presentation layer,
4. publishes the pool's domain events after every operation.

Payments are serialized per slot so that a retried or concurrent pay() on an
occupancy that is already paid never settles a second time.
"""

from typing import Dict, Optional
import logging
import threading

from ..domain.aggregates import SlotPool, ReleaseOutcome
from ..domain.models import Money, SlotHandle, SlotState
from ..domain.strategies import PaymentGate
from ..domain.exceptions import PaymentRequired
from ..infrastructure.factories import VehicleFactory
from ..infrastructure.messaging import EventBus
from .dtos import (
    ParkingRequestDTO, ParkingAllocationDTO, PaymentReceiptDTO,
    ParkingExitDTO, PoolStatusDTO
)


class ParkingService:
    """
    Application service for the parking use cases

    Args:
        pool: The process-wide slot pool, shared by reference
        vehicle_factory: Builds Vehicle records from request data
        event_bus: Receives the pool's domain events
    """

    def __init__(
        self,
        pool: SlotPool,
        vehicle_factory: Optional[VehicleFactory] = None,
        event_bus: Optional[EventBus] = None
    ):
        self.pool = pool
        self.vehicle_factory = vehicle_factory or VehicleFactory()
        self.event_bus = event_bus or EventBus()
        self.logger = logging.getLogger(self.__class__.__name__)

        self._payment_locks: Dict[int, threading.Lock] = {
            number: threading.Lock() for number in range(1, pool.capacity + 1)
        }

        self.logger.info(f"ParkingService initialized for pool {pool.id}")

    # ========================================================================
    # USE CASES
    # ========================================================================

    def park(self, request: ParkingRequestDTO) -> ParkingAllocationDTO:
        """
        Park a vehicle for a fixed number of duration units
        Raises: InvalidCategory if the request names an unknown category
        """
        vehicle = self.vehicle_factory.create(request.vehicle_id, request.category)
        handle = self.pool.allocate(vehicle, request.duration_units)
        self._publish_events()

        if handle is None:
            return ParkingAllocationDTO(
                success=False,
                vehicle_id=vehicle.vehicle_id,
                message="No available slots.",
            )

        fee = self.pool.quote_fee(handle)
        return ParkingAllocationDTO(
            success=True,
            vehicle_id=vehicle.vehicle_id,
            handle=handle,
            slot_number=handle.slot_number,
            fee=fee.amount,
            currency=fee.currency,
            message=f"Parked: {vehicle.vehicle_id}",
        )

    def quote(self, handle: SlotHandle) -> Money:
        return self.pool.quote_fee(handle)

    def pay(self, handle: SlotHandle, gate: PaymentGate) -> PaymentReceiptDTO:
        """
        Settle the quoted fee through gate and mark the slot paid

        Raises:
            PaymentDeclined: gate refused; the slot stays unpaid and pay can be retried
            NotOccupied: the occupancy behind handle has already ended
        """
        # validates the handle before its slot number is used as a key
        self.pool.quote_fee(handle)

        with self._payment_locks[handle.slot_number]:
            fee = self.pool.quote_fee(handle)

            if self.pool.is_paid(handle):
                self.logger.info(f"Slot {handle.slot_number} already paid, not charging again")
                return PaymentReceiptDTO(
                    slot_number=handle.slot_number,
                    amount=fee.amount,
                    currency=fee.currency,
                    already_paid=True,
                )

            confirmation = gate.settle(fee)
            self.pool.confirm_payment(handle)

        self._publish_events()
        return PaymentReceiptDTO(
            slot_number=handle.slot_number,
            amount=confirmation.amount.amount,
            currency=confirmation.amount.currency,
            method=confirmation.method.value,
            reference=confirmation.reference,
        )

    def leave(self, handle: SlotHandle) -> ParkingExitDTO:
        """Let the vehicle behind handle exit if its fee is paid"""
        try:
            outcome = self.pool.release(handle)
        except PaymentRequired as e:
            self._publish_events()
            return ParkingExitDTO(
                success=False,
                slot_number=handle.slot_number,
                payment_required=True,
                message=str(e),
            )

        self._publish_events()
        released = outcome is ReleaseOutcome.RELEASED
        return ParkingExitDTO(
            success=True,
            slot_number=handle.slot_number,
            released=released,
            message="Vehicle exited successfully." if released else "Slot already free.",
        )

    def status(self) -> PoolStatusDTO:
        counts = self.pool.occupancy()
        capacity = self.pool.capacity
        held = counts[SlotState.OCCUPIED] + counts[SlotState.PAID]
        return PoolStatusDTO(
            pool_id=self.pool.id,
            capacity=capacity,
            free=counts[SlotState.FREE],
            occupied=counts[SlotState.OCCUPIED],
            paid=counts[SlotState.PAID],
            occupancy_rate=(held / capacity) if capacity else 0.0,
        )

    # ========================================================================
    # INTERNAL
    # ========================================================================

    def _publish_events(self) -> None:
        self.event_bus.publish_all(self.pool.clear_events())
