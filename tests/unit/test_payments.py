#!/usr/bin/env python3
"""
Payment Rail Unit Tests
"""

import unittest
from decimal import Decimal

from slotpool.domain.models import Money
from slotpool.domain.strategies import PaymentGate, PaymentMethod
from slotpool.domain.exceptions import PaymentDeclined
from slotpool.infrastructure.payments import (
    CashPayment, CardPayment, UpiPayment, PaymentGateFactory
)


class TestRails(unittest.TestCase):

    def test_rails_satisfy_gate_protocol(self):
        for rail in (CashPayment(), CardPayment(), UpiPayment()):
            self.assertIsInstance(rail, PaymentGate)

    def test_cash_exact_change(self):
        confirmation = CashPayment().settle(Money(40))
        self.assertEqual(confirmation.method, PaymentMethod.CASH)
        self.assertEqual(confirmation.amount, Money(40))
        self.assertTrue(confirmation.reference.startswith("CASH_"))

    def test_cash_insufficient(self):
        with self.assertRaises(PaymentDeclined) as ctx:
            CashPayment(tendered=Decimal('20')).settle(Money(40))
        self.assertEqual(ctx.exception.method, "cash")

    def test_card_limit(self):
        card = CardPayment(limit=Decimal('50'))
        card.settle(Money(50))
        with self.assertRaises(PaymentDeclined):
            card.settle(Money(51))

    def test_card_number_required(self):
        for number in ("", "1234", "abcd-efgh-ijkl"):
            with self.assertRaises(PaymentDeclined):
                CardPayment(card_number=number).settle(Money(10))

    def test_upi_requires_vpa(self):
        self.assertEqual(UpiPayment("me@bank").settle(Money(5)).method, PaymentMethod.UPI)
        with self.assertRaises(PaymentDeclined):
            UpiPayment("not-a-vpa").settle(Money(5))

    def test_settled_total_tracks_successes_only(self):
        card = CardPayment(limit=Decimal('30'))
        self.assertIsNone(card.settled_total)
        card.settle(Money(10))
        card.settle(Money(20))
        with self.assertRaises(PaymentDeclined):
            card.settle(Money(40))
        self.assertEqual(card.settled_total, Money(30))
        self.assertEqual(card.settlements, 2)


class TestPaymentGateFactory(unittest.TestCase):

    def test_create_by_name(self):
        self.assertIsInstance(PaymentGateFactory.create("cash"), CashPayment)
        self.assertIsInstance(PaymentGateFactory.create("CARD"), CardPayment)
        self.assertIsInstance(PaymentGateFactory.create(PaymentMethod.UPI), UpiPayment)

    def test_details_passed_through(self):
        rail = PaymentGateFactory.create("upi", vpa="driver@okbank")
        self.assertEqual(rail.vpa, "driver@okbank")

    def test_unknown_method(self):
        with self.assertRaises(ValueError):
            PaymentGateFactory.create("cheque")

    def test_available_methods(self):
        self.assertEqual(PaymentGateFactory.available_methods(), ["cash", "card", "upi"])


if __name__ == '__main__':
    unittest.main()
