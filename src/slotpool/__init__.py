"""
Slot pool parking simulator

A fixed pool of parking slots assigned first-fit to arriving vehicles, with
per-category fees and a release that is refused until the fee is paid.
"""

from .domain.models import Vehicle, VehicleCategory, Money, SlotHandle, SlotState
from .domain.aggregates import SlotPool, ReleaseOutcome
from .domain.strategies import FeePolicy, RateTable, PaymentGate, quote_fee
from .domain.exceptions import (
    SlotPoolError, InvalidCategory, InvalidDuration, VehicleValidationError,
    NotOccupied, PaymentRequired, PaymentDeclined, UnknownSlot
)

__version__ = "1.0.0"

__all__ = [
    "Vehicle", "VehicleCategory", "Money", "SlotHandle", "SlotState",
    "SlotPool", "ReleaseOutcome",
    "FeePolicy", "RateTable", "PaymentGate", "quote_fee",
    "SlotPoolError", "InvalidCategory", "InvalidDuration", "VehicleValidationError",
    "NotOccupied", "PaymentRequired", "PaymentDeclined", "UnknownSlot",
]
