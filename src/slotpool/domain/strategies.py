# File: src/slotpool/domain/strategies.py
"""
Pricing and payment strategies for the slot pool

1. Fee Policy - pure pricing function keyed by vehicle category
2. Payment Gate - one-method capability that settles an amount

The fee policy holds no state besides its rate table, so a quote computed at
allocation time is reproduced exactly when the caller pays. Payment rails live
in infrastructure.payments; the pool itself only ever sees the boolean result.
"""

from dataclasses import dataclass, field
from typing import Dict, Protocol, runtime_checkable
from datetime import datetime
from decimal import Decimal
from enum import Enum
import logging

from .models import Money, VehicleCategory
from .exceptions import InvalidCategory, InvalidDuration


# ============================================================================
# FEE POLICY
# ============================================================================

@dataclass(frozen=True)
class RateTable:
    """
    Value Object: per-unit rate for each vehicle category
    Business rule: Bike < Car < Truck
    """
    bike: Money = field(default_factory=lambda: Money(Decimal('5')))
    car: Money = field(default_factory=lambda: Money(Decimal('10')))
    truck: Money = field(default_factory=lambda: Money(Decimal('20')))

    def __post_init__(self):
        currencies = {self.bike.currency, self.car.currency, self.truck.currency}
        if len(currencies) != 1:
            raise ValueError(f"All rates must share one currency, got: {sorted(currencies)}")

        if not self.bike.amount < self.car.amount < self.truck.amount:
            raise ValueError(
                f"Rates must satisfy bike < car < truck, got "
                f"{self.bike.amount} / {self.car.amount} / {self.truck.amount}"
            )

    @property
    def currency(self) -> str:
        return self.car.currency

    def as_dict(self) -> Dict[VehicleCategory, Money]:
        return {
            VehicleCategory.BIKE: self.bike,
            VehicleCategory.CAR: self.car,
            VehicleCategory.TRUCK: self.truck,
        }

    def rate_for(self, category: VehicleCategory) -> Money:
        """
        Get the per-unit rate for a category
        Raises: InvalidCategory for anything that is not a declared category
        """
        if not isinstance(category, VehicleCategory):
            raise InvalidCategory(f"Cannot price unknown category: {category!r}")
        return self.as_dict()[category]


DEFAULT_RATES = RateTable()


def validate_duration(duration_units: int) -> int:
    """Check that a billed duration is a non-negative whole number of units"""
    if isinstance(duration_units, bool) or not isinstance(duration_units, int):
        raise InvalidDuration(f"Duration must be a whole number of units, got: {duration_units!r}")
    if duration_units < 0:
        raise InvalidDuration(f"Duration cannot be negative: {duration_units}")
    return duration_units


def quote_fee(
    category: VehicleCategory,
    duration_units: int,
    rates: RateTable = DEFAULT_RATES
) -> Money:
    """Amount owed for parking a vehicle of this category for duration_units"""
    validate_duration(duration_units)
    return rates.rate_for(category) * duration_units


class FeePolicy:
    """
    Strategy: linear per-category pricing
    Deterministic and total over the declared categories
    """

    def __init__(self, rates: RateTable = DEFAULT_RATES):
        self.rates = rates
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def currency(self) -> str:
        return self.rates.currency

    def quote(self, category: VehicleCategory, duration_units: int) -> Money:
        fee = quote_fee(category, duration_units, self.rates)
        self.logger.debug(f"Quoted {fee.format()} for {category} x {duration_units}")
        return fee

    def __repr__(self) -> str:
        return (
            f"FeePolicy(bike={self.rates.bike.amount}, car={self.rates.car.amount}, "
            f"truck={self.rates.truck.amount}, currency={self.currency})"
        )


# ============================================================================
# PAYMENT GATE
# ============================================================================

class PaymentMethod(str, Enum):
    """Payment rails a gate can be configured with"""
    CASH = "cash"
    CARD = "card"
    UPI = "upi"


@dataclass(frozen=True)
class PaymentConfirmation:
    """
    Receipt returned by a gate after a successful settlement
    The pool never stores it; only the paid flag is recorded on the slot
    """
    method: PaymentMethod
    amount: Money
    reference: str
    settled_at: datetime = field(default_factory=datetime.now)


@runtime_checkable
class PaymentGate(Protocol):
    """Settles an amount; raises PaymentDeclined when it cannot"""

    def settle(self, amount: Money) -> PaymentConfirmation:
        ...
