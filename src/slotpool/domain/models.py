# File: src/slotpool/domain/models.py
"""
Domain Models for the Slot Pool

This module contains:
1. Value Objects: Vehicle, Money, SlotHandle, SlotSnapshot
2. Entities: ParkingSlot, the single unit of the resource pool
3. Enums: VehicleCategory, SlotState
4. Domain Events: raised by the pool aggregate on every state change

Slots are shared between threads. Every transition of a ParkingSlot happens
under that slot's own lock, so a reader never observes a half-updated slot.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum
import threading
import uuid

from .exceptions import (
    InvalidCategory, VehicleValidationError, NotOccupied, PaymentRequired
)


CENTS = Decimal('0.01')


# ============================================================================
# ENUMS FOR DOMAIN TYPES
# ============================================================================

class VehicleCategory(Enum):
    """
    Enumeration of vehicle categories
    Every category fits every slot; categories only differ in price
    """
    BIKE = "bike"
    CAR = "car"
    TRUCK = "truck"

    def __str__(self) -> str:
        return self.value.title()


class SlotState(Enum):
    """
    Lifecycle of a slot: FREE -> OCCUPIED -> PAID -> FREE
    There is no OCCUPIED -> FREE transition; payment is mandatory
    """
    FREE = "free"
    OCCUPIED = "occupied"
    PAID = "paid"

    @property
    def is_held(self) -> bool:
        """True while a vehicle is in the slot"""
        return self is not SlotState.FREE


# ============================================================================
# DOMAIN PRIMITIVES / VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class Vehicle:
    """
    Value Object: vehicle identifier plus category tag
    The identifier is caller-supplied and its format is not validated
    """
    vehicle_id: str
    category: VehicleCategory

    def __post_init__(self):
        if not isinstance(self.vehicle_id, str) or not self.vehicle_id.strip():
            raise VehicleValidationError("Vehicle id cannot be empty")
        object.__setattr__(self, 'vehicle_id', self.vehicle_id.strip())

        if not isinstance(self.category, VehicleCategory):
            raise InvalidCategory(f"Invalid vehicle category: {self.category!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"vehicle_id": self.vehicle_id, "category": self.category.value}

    def __str__(self) -> str:
        return f"{self.category} {self.vehicle_id}"


@dataclass(frozen=True)
class Money:
    """
    Value Object: Monetary amount with currency
    Amounts are kept to two decimal places and are never negative
    """
    amount: Decimal
    currency: str = "INR"

    def __post_init__(self):
        amount = self.amount
        if not isinstance(amount, Decimal):
            try:
                amount = Decimal(str(amount))
            except InvalidOperation:
                raise ValueError(f"Invalid money amount: {self.amount!r}")
        object.__setattr__(self, 'amount', amount.quantize(CENTS, rounding=ROUND_HALF_UP))

        if self.amount < Decimal('0'):
            raise ValueError("Money amount cannot be negative")

        if len(self.currency) != 3:
            raise ValueError(f"Currency must be 3-letter code: {self.currency}")

    @classmethod
    def zero(cls, currency: str = "INR") -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money amounts (same currency only)"""
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency} to {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, multiplier: int) -> 'Money':
        """Multiply money by a whole number of units"""
        if multiplier < 0:
            raise ValueError("Multiplier cannot be negative")
        return Money(self.amount * Decimal(multiplier), self.currency)

    def format(self) -> str:
        """Format money for display"""
        return f"{self.amount:.2f} {self.currency}"

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": str(self.amount), "currency": self.currency}

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class SlotHandle:
    """
    Value Object: capability to act on one occupancy of one slot

    The token identifies the occupancy, not the slot. Once the vehicle has
    left, the handle is stale and can no longer affect the slot.
    """
    pool_id: str
    slot_number: int
    token: str

    def __str__(self) -> str:
        return f"Slot {self.slot_number} [{self.token[:8]}]"


@dataclass(frozen=True)
class SlotSnapshot:
    """Value Object: consistent point-in-time view of a slot"""
    number: int
    state: SlotState
    occupant: Optional[Vehicle] = None
    billed_duration_units: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "state": self.state.value,
            "occupant": self.occupant.to_dict() if self.occupant else None,
            "billed_duration_units": self.billed_duration_units,
        }


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

class ParkingSlot:
    """
    Entity: a single unit of parking capacity

    Owns at most one occupancy at a time. Occupant and billed duration are set
    together on assignment and cleared together on vacate.
    """

    def __init__(self, number: int):
        if number <= 0:
            raise ValueError("Slot number must be positive")

        self.number = number
        self._lock = threading.Lock()
        self._state = SlotState.FREE
        self._occupant: Optional[Vehicle] = None
        self._billed_duration_units: Optional[int] = None
        self._token: Optional[str] = None

    @property
    def state(self) -> SlotState:
        with self._lock:
            return self._state

    def snapshot(self) -> SlotSnapshot:
        """Read state, occupant and duration together"""
        with self._lock:
            return SlotSnapshot(
                number=self.number,
                state=self._state,
                occupant=self._occupant,
                billed_duration_units=self._billed_duration_units,
            )

    def holds(self, token: str) -> bool:
        """Check whether the given occupancy is the current one"""
        with self._lock:
            return self._state.is_held and self._token == token

    def try_assign(self, vehicle: Vehicle, duration_units: int) -> Optional[str]:
        """
        FREE -> OCCUPIED
        Returns: occupancy token, or None if the slot is not free
        """
        with self._lock:
            if self._state is not SlotState.FREE:
                return None

            self._state = SlotState.OCCUPIED
            self._occupant = vehicle
            self._billed_duration_units = duration_units
            self._token = uuid.uuid4().hex
            return self._token

    def occupancy(self, token: str) -> SlotSnapshot:
        """
        Get the occupancy identified by token
        Raises: NotOccupied if that occupancy has ended
        """
        with self._lock:
            self._require_current(token)
            return SlotSnapshot(
                number=self.number,
                state=self._state,
                occupant=self._occupant,
                billed_duration_units=self._billed_duration_units,
            )

    def mark_paid(self, token: str) -> Vehicle:
        """
        OCCUPIED -> PAID
        Raises: NotOccupied if the slot is not awaiting payment for token
        """
        with self._lock:
            self._require_current(token)
            if self._state is not SlotState.OCCUPIED:
                raise NotOccupied(f"Slot {self.number} is already paid")

            self._state = SlotState.PAID
            return self._occupant

    def vacate(self, token: str) -> Optional[Vehicle]:
        """
        PAID -> FREE
        Returns: the vehicle that left, or None if the occupancy had already ended
        Raises: PaymentRequired if the slot is still unpaid (slot unchanged)
        """
        with self._lock:
            if not self._state.is_held or self._token != token:
                return None

            if self._state is SlotState.OCCUPIED:
                raise PaymentRequired(self.number, vehicle=self._occupant)

            vehicle = self._occupant
            self._state = SlotState.FREE
            self._occupant = None
            self._billed_duration_units = None
            self._token = None
            return vehicle

    def _require_current(self, token: str) -> None:
        # caller holds self._lock
        if not self._state.is_held or self._token != token:
            raise NotOccupied(f"Slot {self.number} is not held by this handle")

    def __repr__(self) -> str:
        return f"ParkingSlot(number={self.number}, state={self._state.value})"


# ============================================================================
# DOMAIN EVENTS (for event-driven architecture)
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened in the domain
    """

    event_type = "domain.event"

    def __init__(self, pool_id: str, slot_number: int, vehicle: Vehicle):
        self.event_id = str(uuid.uuid4())
        self.timestamp = datetime.now()
        self.pool_id = pool_id
        self.slot_number = slot_number
        self.vehicle = vehicle

    @abstractmethod
    def data(self) -> Dict[str, Any]:
        """Event-specific payload"""
        pass

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "pool_id": self.pool_id,
            "slot_number": self.slot_number,
            "vehicle_id": self.vehicle.vehicle_id,
            "category": self.vehicle.category.value,
        }
        payload.update(self.data())
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "data": payload,
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.timestamp}"


class VehicleParkedEvent(DomainEvent):
    """Event raised when a vehicle is assigned a slot"""

    event_type = "vehicle.parked"

    def __init__(self, pool_id: str, slot_number: int, vehicle: Vehicle, duration_units: int):
        super().__init__(pool_id, slot_number, vehicle)
        self.duration_units = duration_units

    def data(self) -> Dict[str, Any]:
        return {"duration_units": self.duration_units}


class PaymentConfirmedEvent(DomainEvent):
    """Event raised when a slot is marked paid"""

    event_type = "payment.confirmed"

    def __init__(self, pool_id: str, slot_number: int, vehicle: Vehicle, amount: Money):
        super().__init__(pool_id, slot_number, vehicle)
        self.amount = amount

    def data(self) -> Dict[str, Any]:
        return {"amount": self.amount.to_dict()}


class VehicleLeftEvent(DomainEvent):
    """Event raised when a paid slot is released"""

    event_type = "vehicle.left"

    def data(self) -> Dict[str, Any]:
        return {}


class ExitRejectedEvent(DomainEvent):
    """Event raised when a vehicle tries to leave without paying"""

    event_type = "vehicle.exit_rejected"

    def data(self) -> Dict[str, Any]:
        return {"reason": "payment_required"}
