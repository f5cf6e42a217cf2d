# File: src/slotpool/infrastructure/payments.py
"""
Payment rails for the slot pool

Each rail satisfies the PaymentGate protocol from domain.strategies: a single
settle(amount) method that returns a PaymentConfirmation or raises
PaymentDeclined. Rails are simulated; none of them talks to a real processor.

Rails:
- CashPayment - cash tendered must cover the amount
- CardPayment - needs a card number, declines above the card's limit
- UpiPayment - needs a virtual payment address (name@bank)
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional, Type, Union
import logging
import threading
import uuid

from ..domain.models import Money
from ..domain.strategies import PaymentConfirmation, PaymentMethod
from ..domain.exceptions import PaymentDeclined


class PaymentRail(ABC):
    """Base class for simulated payment rails"""

    method: PaymentMethod

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lock = threading.Lock()
        self._settled_total: Optional[Money] = None
        self.settlements = 0

    @property
    def settled_total(self) -> Optional[Money]:
        """Sum of everything this rail has settled so far"""
        with self._lock:
            return self._settled_total

    def settle(self, amount: Money) -> PaymentConfirmation:
        """Settle amount or raise PaymentDeclined"""
        self._authorize(amount)
        confirmation = PaymentConfirmation(
            method=self.method,
            amount=amount,
            reference=f"{self.method.value.upper()}_{uuid.uuid4().hex[:12]}",
        )
        with self._lock:
            self._settled_total = (
                amount if self._settled_total is None else self._settled_total + amount
            )
            self.settlements += 1

        self.logger.info(f"Paid {amount.format()} via {self.method.value} ({confirmation.reference})")
        return confirmation

    @abstractmethod
    def _authorize(self, amount: Money) -> None:
        """Raise PaymentDeclined if the rail cannot settle amount"""
        pass

    def _decline(self, reason: str) -> None:
        self.logger.warning(f"{self.method.value} payment declined: {reason}")
        raise PaymentDeclined(self.method.value, reason)


class CashPayment(PaymentRail):
    """Cash at the exit booth; tendered=None means exact change"""

    method = PaymentMethod.CASH

    def __init__(self, tendered: Optional[Decimal] = None):
        super().__init__()
        self.tendered = Decimal(str(tendered)) if tendered is not None else None

    def _authorize(self, amount: Money) -> None:
        if self.tendered is not None and self.tendered < amount.amount:
            self._decline(f"tendered {self.tendered:.2f} does not cover {amount.format()}")


class CardPayment(PaymentRail):
    """Credit/debit card with an optional per-transaction limit"""

    method = PaymentMethod.CARD

    def __init__(self, card_number: str = "4111111111111111", limit: Optional[Decimal] = None):
        super().__init__()
        self.card_number = card_number
        self.limit = Decimal(str(limit)) if limit is not None else None

    def _authorize(self, amount: Money) -> None:
        digits = self.card_number.replace(" ", "") if self.card_number else ""
        if not digits.isdigit() or not 12 <= len(digits) <= 19:
            self._decline("invalid card number")
        if self.limit is not None and amount.amount > self.limit:
            self._decline(f"{amount.format()} exceeds card limit {self.limit:.2f}")


class UpiPayment(PaymentRail):
    """UPI transfer to the lot's merchant account"""

    method = PaymentMethod.UPI

    def __init__(self, vpa: str = "driver@upi"):
        super().__init__()
        self.vpa = vpa

    def _authorize(self, amount: Money) -> None:
        if not self.vpa or '@' not in self.vpa:
            self._decline(f"invalid UPI id: {self.vpa!r}")


class PaymentGateFactory:
    """Factory for payment rails by method name"""

    _rails: Dict[PaymentMethod, Type[PaymentRail]] = {
        PaymentMethod.CASH: CashPayment,
        PaymentMethod.CARD: CardPayment,
        PaymentMethod.UPI: UpiPayment,
    }

    @classmethod
    def create(cls, method: Union[PaymentMethod, str], **details: Any) -> PaymentRail:
        """
        Create a payment rail

        Args:
            method: PaymentMethod or its value ("cash", "card", "upi")
            details: Rail-specific arguments (tendered, card_number, limit, vpa)
        """
        try:
            method = PaymentMethod(method.lower() if isinstance(method, str) else method)
        except ValueError:
            raise ValueError(f"Unknown payment method: {method!r}")
        return cls._rails[method](**details)

    @classmethod
    def available_methods(cls):
        return [method.value for method in cls._rails]
