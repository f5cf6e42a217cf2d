# File: src/slotpool/domain/exceptions.py
"""
Domain exceptions for the slot pool

Every error raised by the core is recoverable at the call site. Running out of
capacity is deliberately absent: SlotPool.allocate signals it by returning None.
"""


class SlotPoolError(Exception):
    """Base exception for slot pool errors"""
    pass


class InvalidCategory(SlotPoolError, ValueError):
    """Raised when a vehicle category is not one of the declared categories"""
    pass


class InvalidDuration(SlotPoolError, ValueError):
    """Raised when a billed duration is negative or not an integer"""
    pass


class VehicleValidationError(SlotPoolError, ValueError):
    """Raised when a vehicle record cannot be built from its input"""
    pass


class NotOccupied(SlotPoolError):
    """Raised when a slot is not awaiting payment for the given handle"""
    pass


class PaymentRequired(SlotPoolError):
    """Raised when a vehicle tries to leave before its fee is marked paid"""

    def __init__(self, slot_number: int, message: str = "", vehicle=None):
        self.slot_number = slot_number
        self.vehicle = vehicle
        super().__init__(message or f"Slot {slot_number}: payment not done, pay before exit")


class PaymentDeclined(SlotPoolError):
    """Raised by a payment gate when settlement fails"""

    def __init__(self, method: str, reason: str):
        self.method = method
        self.reason = reason
        super().__init__(f"{method} payment declined: {reason}")


class UnknownSlot(SlotPoolError):
    """Raised when a handle does not refer to a slot of this pool"""
    pass
